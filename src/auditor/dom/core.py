from typing import Dict, Any, List, Callable, NamedTuple, Type, Optional, Tuple, Union

from pydantic import BaseModel, Field
from bs4 import Tag

from auditor.model import Outcome
from normalizer.model import is_placeholder


def audit_spec(rule_id: str):
    """
    Decorator to declare which rule id a specific audit function evaluates.
    Facilitates auto-discovery and ordering by the DOMRegistry.
    """
    def decorator(func):
        func.rule_id = rule_id
        return func
    return decorator


class ElementBase(BaseModel):
    """
    Base data model representing a generic DOM element in the canonical tree.

    Elements live in the HTMLDocument arena and refer to each other by
    `node_id` (preorder position), never by object reference.
    """
    node_id: int = 0
    parent_id: Optional[int] = None
    tag: str
    attrs: Dict[str, Any] = Field(default_factory=dict)
    text: str = ""
    html: str = ""
    children: List[int] = Field(default_factory=list)

    def attr(self, name: str) -> Optional[str]:
        """Attribute value as a string (multi-valued attributes are joined), None if absent."""
        value = self.attrs.get(name)
        if isinstance(value, (list, tuple)):
            return " ".join(value)
        return value

    def has_attr(self, name: str) -> bool:
        return name in self.attrs


# Element rule output: (rule id, outcome) for the element the rule was given
AuditResult = Tuple[str, Outcome]


class Finding(NamedTuple):
    """Document rule output. `node` is None when the offending element does not exist."""
    rule_id: str
    outcome: Outcome
    node: Optional[ElementBase] = None
    snippet: Optional[str] = None


ElementParser = Callable[[Tag, Dict[str, Any]], ElementBase]


class ElementDefinition:
    """
    Configuration object binding HTML tags to their model, parser, and rules.

    `audit_rules` are called per element of `model`; `document_rules` are
    called once per document and see the whole arena.
    """

    def __init__(
            self,
            tag_name: Union[str, List[str]],
            model: Type[ElementBase],
            parser: ElementParser,
            audit_rules: Optional[List[Callable[[Any, Any], List[AuditResult]]]] = None,
            document_rules: Optional[List[Callable[[Any], List[Finding]]]] = None,
    ):
        self.tag_names = [tag_name] if isinstance(tag_name, str) else list(tag_name)
        self.model = model
        self.parser = parser
        self.audit_rules = audit_rules or []
        self.document_rules = document_rules or []

        self.rule_ids = sorted({
            rule.rule_id for rule in self.audit_rules + self.document_rules
            if hasattr(rule, "rule_id")
        })


def name_outcome(text: Optional[str], aria_label: Optional[str]) -> Outcome:
    """
    Judges an accessible name made of visible text and/or aria-label.
    A name built only from unevaluated expressions is left undecided.
    """
    parts = [v.strip() for v in (text, aria_label) if v and v.strip()]
    if not parts:
        return Outcome.VIOLATION
    if all(is_placeholder(v) for v in parts):
        return Outcome.INCOMPLETE
    return Outcome.PASS

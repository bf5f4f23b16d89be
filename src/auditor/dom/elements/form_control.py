from typing import Any, Dict, List, Optional
from bs4 import Tag
from normalizer.model import is_placeholder
from ..core import ElementBase, ElementDefinition, AuditResult, audit_spec
from ...model import Outcome

# Input types that never need a label
LABEL_EXEMPT_TYPES = frozenset({"submit", "button", "hidden"})


class FormControlElement(ElementBase):
    """
    Model for labelable form controls (<input>, <select>, <textarea>).
    """

    @property
    def control_type(self) -> str:
        if self.tag != "input":
            return self.tag
        return (self.attr("type") or "text").strip().lower()

    @property
    def is_labelable(self) -> bool:
        return not (self.tag == "input" and self.control_type in LABEL_EXEMPT_TYPES)

    @property
    def aria_label(self) -> Optional[str]:
        return self.attr("aria-label")

    @property
    def aria_labelledby(self) -> Optional[str]:
        return self.attr("aria-labelledby")


def parse_form_control(tag: Tag, fields: Dict[str, Any]) -> FormControlElement:
    return FormControlElement(**fields)


# --- AUDIT RULES ---


@audit_spec("label")
def check_label(node: FormControlElement, doc: Any) -> List[AuditResult]:
    """
    Rule: a labelable control needs a <label for>, aria-label or aria-labelledby.
    A label that only exists as an unevaluated expression cannot be judged.
    """
    if not node.is_labelable:
        return []

    control_id = (node.attr("id") or "").strip()
    if control_id and control_id in doc.label_targets:
        return [("label", Outcome.PASS)]

    names = [v for v in (node.aria_label, node.aria_labelledby) if v and v.strip()]
    if not names:
        return [("label", Outcome.VIOLATION)]
    if all(is_placeholder(v) for v in names):
        return [("label", Outcome.INCOMPLETE)]
    return [("label", Outcome.PASS)]


# --- ELEMENT DEFINITION ---
DEFINITION = ElementDefinition(
    tag_name=["input", "select", "textarea"],
    model=FormControlElement,
    parser=parse_form_control,
    audit_rules=[check_label]
)

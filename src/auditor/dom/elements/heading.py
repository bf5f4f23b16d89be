from typing import Any, Dict, List
from bs4 import Tag
from ..core import ElementBase, ElementDefinition, Finding, audit_spec
from ...model import Outcome

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]


class HeadingElement(ElementBase):
    """
    Model representing a heading element (h1-h6).
    Stores the heading level for structural analysis.
    """
    level: int


def parse_heading(tag: Tag, fields: Dict[str, Any]) -> HeadingElement:
    """
    Parses heading tags and determines their hierarchy level (e.g., h1 -> 1).
    """
    try:
        level = int(tag.name[1])
    except (ValueError, IndexError, TypeError):
        level = 0

    return HeadingElement(**fields, level=level)


# --- AUDIT RULES ---


@audit_spec("heading-order")
def check_heading_order(doc: Any) -> List[Finding]:
    """
    Rule: walking the headings in document order, a level may be at most one
    deeper than the heading before it. The first heading may have any level.
    """
    findings = []
    last_level = 0

    for node in doc.find_all(*HEADING_TAGS):
        if last_level > 0 and node.level > last_level + 1:
            findings.append(Finding("heading-order", Outcome.VIOLATION, node))
        else:
            findings.append(Finding("heading-order", Outcome.PASS, node))
        last_level = node.level

    return findings


# --- ELEMENT DEFINITION ---
DEFINITION = ElementDefinition(
    tag_name=HEADING_TAGS,
    model=HeadingElement,
    parser=parse_heading,
    document_rules=[check_heading_order]
)

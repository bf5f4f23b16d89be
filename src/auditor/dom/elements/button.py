from typing import Any, Dict, List, Optional
from bs4 import Tag
from ..core import ElementBase, ElementDefinition, AuditResult, audit_spec, name_outcome


class ButtonElement(ElementBase):
    """
    Data model for <button> elements.
    """
    tag: str = "button"

    @property
    def button_type(self) -> str:
        return (self.attr("type") or "button").strip().lower()

    @property
    def aria_label(self) -> Optional[str]:
        return self.attr("aria-label")


def parse_button(tag: Tag, fields: Dict[str, Any]) -> ButtonElement:
    return ButtonElement(**fields)


# --- AUDIT RULES ---


@audit_spec("button-name")
def check_button_name(node: ButtonElement, doc: Any) -> List[AuditResult]:
    """A button needs visible text or an aria-label."""
    return [("button-name", name_outcome(node.text, node.aria_label))]


# --- ELEMENT DEFINITION ---
DEFINITION = ElementDefinition(
    tag_name="button",
    model=ButtonElement,
    parser=parse_button,
    audit_rules=[check_button_name]
)

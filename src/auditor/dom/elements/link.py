from typing import Any, Dict, List, Optional
from bs4 import Tag
from ..core import ElementBase, ElementDefinition, AuditResult, audit_spec, name_outcome


class LinkElement(ElementBase):
    """
    Data model for anchor (<a>) tags.
    """
    tag: str = "a"

    @property
    def href(self) -> Optional[str]:
        """Convenience property to access the href attribute."""
        return self.attr('href')

    @property
    def title(self) -> Optional[str]:
        return self.attr('title')

    @property
    def aria_label(self) -> Optional[str]:
        return self.attr('aria-label')


def parse_link(tag: Tag, fields: Dict[str, Any]) -> LinkElement:
    """Parses a <a> tag into the LinkElement model."""
    return LinkElement(**fields)


# --- AUDIT RULES ---


@audit_spec("link-name")
def check_link_name(node: LinkElement, doc: Any) -> List[AuditResult]:
    """Only anchors with an href are links; they need visible text or an aria-label."""
    if node.href is None:
        return []
    return [("link-name", name_outcome(node.text, node.aria_label))]


# --- ELEMENT DEFINITION ---
DEFINITION = ElementDefinition(
    tag_name="a",
    model=LinkElement,
    parser=parse_link,
    audit_rules=[check_link_name]
)

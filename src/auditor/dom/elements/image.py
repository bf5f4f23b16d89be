from typing import Any, Dict, List, Optional
from bs4 import Tag
from ..core import ElementBase, ElementDefinition, AuditResult, audit_spec
from ...model import Outcome


class ImageElement(ElementBase):
    tag: str = "img"

    @property
    def src(self) -> str: return self.attr('src') or ''

    @property
    def alt(self) -> Optional[str]: return self.attr('alt')


def parse_image(tag: Tag, fields: Dict[str, Any]) -> ImageElement:
    return ImageElement(**fields)


# --- RULES ---

@audit_spec("image-alt")
def check_alt_text(node: ImageElement, doc: Any) -> List[AuditResult]:
    # alt="" is a valid decorative marker; only a missing attribute fails
    if node.alt is None:
        return [("image-alt", Outcome.VIOLATION)]
    return [("image-alt", Outcome.PASS)]


# --- DEFINITION ---
DEFINITION = ElementDefinition(
    tag_name="img",
    model=ImageElement,
    parser=parse_image,
    audit_rules=[check_alt_text]
)

from typing import Any, List
from ..core import ElementBase, ElementDefinition, Finding, audit_spec
from ...model import Outcome


class TitleElement(ElementBase):
    tag: str = "title"


def parse_title(tag, fields) -> TitleElement:
    return TitleElement(**fields)


@audit_spec("document-title")
def check_title(doc: Any) -> List[Finding]:
    """The document must contain a <title> with text."""
    title = doc.find("title")
    if title is None:
        return [Finding("document-title", Outcome.VIOLATION, None, "<title>")]
    if not title.text.strip():
        return [Finding("document-title", Outcome.VIOLATION, title)]
    return [Finding("document-title", Outcome.PASS, title)]


DEFINITION = ElementDefinition(
    tag_name="title",
    model=TitleElement,
    parser=parse_title,
    document_rules=[check_title]
)

from typing import Any, Dict, List, Optional
from bs4 import Tag
from ..core import ElementBase, ElementDefinition, Finding, audit_spec
from ...model import Outcome


class HtmlElement(ElementBase):
    """
    Structured model for the document root. Only the language matters here.
    """
    tag: str = "html"

    @property
    def lang(self) -> Optional[str]:
        return self.attr("lang")


def parse_html(tag: Tag, fields: Dict[str, Any]) -> HtmlElement:
    return HtmlElement(**fields)


# --- AUDIT RULES ---


@audit_spec("html-has-lang")
def check_lang(doc: Any) -> List[Finding]:
    """The root <html> element must declare a non-empty language."""
    if "missing_html_root_tag" in doc.doc_errors:
        return [Finding("html-has-lang", Outcome.VIOLATION, None, "<html>")]
    root = doc.root
    if not (root.lang or "").strip():
        return [Finding("html-has-lang", Outcome.VIOLATION, root)]
    return [Finding("html-has-lang", Outcome.PASS, root)]


# --- ELEMENT DEFINITION ---
DEFINITION = ElementDefinition(
    tag_name="html",
    model=HtmlElement,
    parser=parse_html,
    document_rules=[check_lang]
)

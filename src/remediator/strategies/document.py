import logging
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from ..core import fix_strategy
from ..utils.tag_utils import attr_text, candidates

logger = logging.getLogger(__name__)

DEFAULT_LANG = "en"

CONTRAST_MARKER = "data-wcagpiper-contrast"
CONTRAST_CSS = """
/* WCAG AA compliant color contrast */
body { color: #212529; background-color: #ffffff; }
a { color: #0066cc; }
a:visited { color: #551a8b; }
button, input[type="submit"] {
  background-color: #0066cc;
  color: #ffffff;
  border: 2px solid #0052a3;
}
button:hover, input[type="submit"]:hover { background-color: #0052a3; }
::placeholder { color: #6c757d; }
"""


@fix_strategy("html-has-lang", "html-lang")
def fix_html_lang(soup: BeautifulSoup, targets: Optional[List[Tag]]) -> int:
    changed = 0
    for root in candidates(soup, targets, "html"):
        if not attr_text(root, "lang").strip():
            root["lang"] = DEFAULT_LANG
            changed += 1
    return changed


@fix_strategy("color-contrast", document_wide=True)
def fix_color_contrast(soup: BeautifulSoup, targets: Optional[List[Tag]]) -> int:
    """Adds a fixed high-contrast stylesheet to <head>, once per document."""
    if soup.find("style", attrs={CONTRAST_MARKER: True}) is not None:
        return 0

    head = soup.head
    if head is None:
        head = soup.new_tag("head")
        (soup.html or soup).insert(0, head)
        logger.debug("Document had no <head>, created one for the contrast stylesheet.")

    style = soup.new_tag("style", attrs={CONTRAST_MARKER: "aa"})
    style.string = CONTRAST_CSS
    head.append(style)
    return 1


STRATEGIES = [fix_html_lang, fix_color_contrast]

from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from ..core import fix_strategy
from ..utils.tag_utils import attr_text, candidates, has_accessible_name
from ..utils.text_utils import url_host, usable

INTERACTIVE_ROLES = {"button", "link"}


def _is_interactive(tag: Tag) -> bool:
    return tag.name in ("a", "button") or attr_text(tag, "role").strip().lower() in INTERACTIVE_ROLES


@fix_strategy("aria-label", "aria-labelledby")
def fix_aria_labels(soup: BeautifulSoup, targets: Optional[List[Tag]]) -> int:
    """Interactive elements without any accessible name get an aria-label."""
    changed = 0
    for element in candidates(soup, targets, _is_interactive):
        if has_accessible_name(element, labelledby=True):
            continue

        title = attr_text(element, "title")
        href = attr_text(element, "href").strip()
        if usable(title):
            element["aria-label"] = title
        elif href == "#":
            element["aria-label"] = "Link"
        elif usable(href):
            element["aria-label"] = f"Link to {href}"
        else:
            element["aria-label"] = "Interactive element"
        changed += 1
    return changed


@fix_strategy("link-name")
def fix_link_name(soup: BeautifulSoup, targets: Optional[List[Tag]]) -> int:
    """
    Empty links are named after their title, else after the host they point
    to ('Link to example.com'). A bare '#' link gets the visible text 'Link'.
    """
    changed = 0
    for link in candidates(soup, targets, "a"):
        if has_accessible_name(link):
            continue

        title = attr_text(link, "title")
        href = attr_text(link, "href").strip() or "#"
        if usable(title):
            link["aria-label"] = title
        elif href != "#" and usable(href):
            link["aria-label"] = f"Link to {url_host(href)}"
        else:
            link.string = "Link"
        changed += 1
    return changed


STRATEGIES = [fix_aria_labels, fix_link_name]

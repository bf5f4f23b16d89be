from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from ..core import fix_strategy
from ..utils.tag_utils import attr_text, candidates, has_accessible_name


@fix_strategy("button-name")
def fix_button_name(soup: BeautifulSoup, targets: Optional[List[Tag]]) -> int:
    changed = 0
    for button in candidates(soup, targets, "button"):
        if has_accessible_name(button):
            continue
        button_type = attr_text(button, "type").strip().lower() or "button"
        button["aria-label"] = "Submit" if button_type == "submit" else "Click here"
        changed += 1
    return changed


STRATEGIES = [fix_button_name]

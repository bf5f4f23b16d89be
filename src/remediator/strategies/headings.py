from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from ..core import fix_strategy

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]


@fix_strategy("heading-order", document_wide=True)
def fix_heading_order(soup: BeautifulSoup, targets: Optional[List[Tag]]) -> int:
    """
    One forward pass over all headings with a running level. A heading more
    than one level deeper than its predecessor is renamed to the next level;
    attributes and content stay on the element. The running level follows
    the renamed value, so cascading skips (h1, h4, h6) become h1, h2, h3.
    """
    changed = 0
    last_level = 0
    for heading in soup.find_all(HEADING_TAGS):
        level = int(heading.name[1])
        if last_level > 0 and level > last_level + 1:
            level = last_level + 1
            heading.name = f"h{level}"
            changed += 1
        last_level = level
    return changed


STRATEGIES = [fix_heading_order]

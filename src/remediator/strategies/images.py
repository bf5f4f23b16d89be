from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from ..core import fix_strategy
from ..utils.tag_utils import attr_text, candidates
from ..utils.text_utils import filename_stem, humanize, usable

DEFAULT_ALT = "Image"


@fix_strategy("image-alt", "img-alt-text")
def fix_image_alt(soup: BeautifulSoup, targets: Optional[List[Tag]]) -> int:
    """Images without alt get one derived from their file name: 'my-logo.png' -> 'My Logo'."""
    changed = 0
    for img in candidates(soup, targets, "img"):
        if img.has_attr("alt"):
            continue
        stem = filename_stem(attr_text(img, "src"))
        img["alt"] = humanize(stem) if usable(stem) else DEFAULT_ALT
        changed += 1
    return changed


STRATEGIES = [fix_image_alt]

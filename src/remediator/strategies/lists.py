from typing import List, Optional, Set

from bs4 import BeautifulSoup, NavigableString, Tag

from ..core import fix_strategy
from ..utils.tag_utils import candidates

LIST_PARENTS = {"ul", "ol", "menu"}


def _is_orphan(item: Tag) -> bool:
    return item.parent is None or item.parent.name not in LIST_PARENTS


def _run_from(item: Tag, orphan_ids: Set[int]) -> List[Tag]:
    """`item` and the orphaned <li> siblings directly following it (whitespace between them is ignored)."""
    run = [item]
    sibling = item.next_sibling
    while sibling is not None:
        if isinstance(sibling, NavigableString) and not sibling.strip():
            sibling = sibling.next_sibling
            continue
        if isinstance(sibling, Tag) and sibling.name == "li" and id(sibling) in orphan_ids:
            run.append(sibling)
            sibling = sibling.next_sibling
            continue
        break
    return run


@fix_strategy("list")
def fix_lists(soup: BeautifulSoup, targets: Optional[List[Tag]]) -> int:
    """Wraps each run of consecutive orphaned <li> siblings in one new <ul>."""
    orphans = [item for item in candidates(soup, targets, "li") if _is_orphan(item)]
    orphan_ids = {id(item) for item in orphans}
    wrapped = 0
    done = set()

    for item in orphans:
        if id(item) in done:
            continue
        run = _run_from(item, orphan_ids)
        wrapper = soup.new_tag("ul")
        item.insert_before(wrapper)
        for member in run:
            done.add(id(member))
            wrapper.append(member.extract())
        wrapped += 1

    return wrapped


STRATEGIES = [fix_lists]

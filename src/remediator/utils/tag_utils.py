from typing import Callable, List, Optional, Union

from bs4 import BeautifulSoup, Tag

TagFilter = Union[str, List[str], Callable[[Tag], bool]]


def attr_text(tag: Tag, name: str) -> str:
    """Attribute value as a string ('' if absent); class-like lists are joined."""
    value = tag.get(name)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def candidates(soup: BeautifulSoup, targets: Optional[List[Tag]], match: TagFilter) -> List[Tag]:
    """
    The elements a strategy should look at: the resolved targets when given,
    otherwise every matching element of the document.
    """
    if targets is None:
        return soup.find_all(match)
    if callable(match):
        return [tag for tag in targets if match(tag)]
    names = {match} if isinstance(match, str) else set(match)
    return [tag for tag in targets if tag.name in names]


def has_accessible_name(tag: Tag, labelledby: bool = False) -> bool:
    """Visible text or aria-label (and optionally aria-labelledby)."""
    if tag.get_text(strip=True) or attr_text(tag, "aria-label").strip():
        return True
    return labelledby and bool(attr_text(tag, "aria-labelledby").strip())

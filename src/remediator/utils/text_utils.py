import re
from typing import Iterable, Optional

from normalizer.model import contains_placeholder

_SEPARATORS = re.compile(r"[-_]+")
_WORD_START = re.compile(r"\b\w")
_NON_SLUG = re.compile(r"[^a-z0-9]+")
_SCHEME = re.compile(r"^[a-z][a-z0-9+.-]*://", re.I)
_WWW = re.compile(r"^www\.", re.I)


def humanize(value: str) -> str:
    """'first_name' -> 'First Name', 'my-logo' -> 'My Logo'."""
    spaced = _SEPARATORS.sub(" ", value or "").strip()
    return _WORD_START.sub(lambda m: m.group(0).upper(), spaced)


def filename_stem(src: Optional[str]) -> str:
    """Last path segment of a url without extension, query or fragment."""
    path = re.split(r"[?#]", src or "", maxsplit=1)[0].rstrip("/")
    name = path.split("/")[-1]
    return name.split(".")[0]


def url_host(href: Optional[str]) -> str:
    """Host part of a link target: 'https://www.example.com/a' -> 'example.com'."""
    href = (href or "").strip()
    host = _SCHEME.sub("", href).split("/")[0]
    return _WWW.sub("", host) or href


def usable(value: Optional[str]) -> bool:
    """A non-empty literal value; expression placeholders don't count."""
    return bool(value and value.strip()) and not contains_placeholder(value)


def slugify(value: str) -> str:
    return _NON_SLUG.sub("-", (value or "").lower()).strip("-")


def unique_id(base: str, taken: Iterable[str]) -> str:
    """`base`, or `base-2`, `base-3`, ... whichever is not in `taken`."""
    taken = set(taken)
    if base not in taken:
        return base
    n = 2
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"

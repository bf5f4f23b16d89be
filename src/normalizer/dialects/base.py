# src/normalizer/dialects/base.py
import importlib
import logging
import pkgutil
import re
from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from normalizer.model import (
    Binding, CanonicalSource, Dialect, MARKER_PREFIX, SELF_CLOSE_ATTR, TAG_CASE_ATTR, strip_internal_attrs,
)
from normalizer.services.format_service import MarkupFormatter, render_document, render_fragment

logger = logging.getLogger(__name__)

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input", "link",
    "meta", "param", "source", "track", "wbr",
})

START_TAG_RE = re.compile(
    r"<([A-Za-z][\w.:-]*)"
    r"((?:\s+[^\s\"'<>/=]+(?:\s*=\s*(?:\"[^\"]*\"|'[^']*'|[^\s\"'=<>`]+))?)*)"
    r"\s*(/?)>"
)
ATTR_RE = re.compile(r"([^\s\"'<>/=]+)(?:\s*=\s*(\"[^\"]*\"|'[^']*'|[^\s\"'=<>`]+))?")
INTERPOLATION_RE = re.compile(r"\{\{.*?\}\}", re.S)
HAS_ROOT_RE = re.compile(r"<html[\s>]", re.I)

# Restoration patterns, applied to serialized canonical markup
TOKEN_ATTR_RE = re.compile(r"(\s)([^\s\"'<>/=]+)=([\"'])(__expr_\d+__)\3")
MARKER_ATTR_RE = re.compile(r"\s(" + re.escape(MARKER_PREFIX) + r"\d+)(?:=([\"'])\2)?")
TOKEN_RE = re.compile(r"__expr_\d+__")
SELF_CLOSED_RE = re.compile(
    r"<([A-Za-z][\w.:-]*)([^<>]*?)\s" + re.escape(SELF_CLOSE_ATTR)
    + r"(?:=([\"'])\3)?([^<>]*?)\s*/?>\s*</\1>"
)

# A plain (name, value) attribute pair; value keeps its quotes, None means bare
Attribute = Tuple[str, Optional[str]]


def wrap_document(markup: str) -> Tuple[str, bool]:
    """
    Wraps a fragment in a minimal document shell. The shell deliberately has
    no lang and no <title>, so document level checks apply to fragments too.
    """
    if HAS_ROOT_RE.search(markup):
        return markup, False
    shell = "<!DOCTYPE html>\n<html>\n<head>\n</head>\n<body>\n" + markup + "\n</body>\n</html>"
    return shell, True


class BindingTable:
    """Hands out placeholder tokens and marker attributes for one normalization."""

    def __init__(self):
        self.bindings: Dict[str, Binding] = {}

    def token(self, original: str, kind: str = "text") -> str:
        key = f"__expr_{len(self.bindings)}__"
        self.bindings[key] = Binding(original=original, kind=kind)
        return key

    def marker(self, original: str) -> str:
        key = f"{MARKER_PREFIX}{len(self.bindings)}"
        self.bindings[key] = Binding(original=original, kind="attribute")
        return key

    def interpolations(self, markup: str) -> str:
        """Replaces every `{{ ... }}` with an opaque text token."""
        return INTERPOLATION_RE.sub(lambda m: self.token(m.group(0)), markup)


def restore_bindings(text: str, bindings: Dict[str, Binding]) -> str:
    """Puts the original dialect syntax back in place of tokens and markers."""
    if not bindings:
        return text

    def _attr(match: re.Match) -> str:
        space, name, quote, token = match.groups()
        binding = bindings.get(token)
        if binding is None:
            return match.group(0)
        if binding.kind == "attribute":
            return space + binding.original
        if binding.kind == "value":
            return f"{space}{name}={binding.original}"
        return f"{space}{name}={quote}{binding.original}{quote}"

    def _marker(match: re.Match) -> str:
        binding = bindings.get(match.group(1))
        return " " + binding.original if binding else match.group(0)

    def _text(match: re.Match) -> str:
        binding = bindings.get(match.group(0))
        return binding.original if binding else match.group(0)

    text = TOKEN_ATTR_RE.sub(_attr, text)
    text = MARKER_ATTR_RE.sub(_marker, text)
    return TOKEN_RE.sub(_text, text)


def restore_self_closing(text: str) -> str:
    """
    Collapses `<Tag ...></Tag>` back to `<Tag ... />` for the elements the
    source self-closed. A marked element that gained children keeps its
    closing tag and only loses the marker.
    """
    def _collapse(match: re.Match) -> str:
        attrs = (match.group(2) + match.group(4)).rstrip()
        return f"<{match.group(1)}{attrs} />"

    text = SELF_CLOSED_RE.sub(_collapse, text)
    return strip_internal_attrs(text)


class DialectCodec:
    """
    Bidirectional mapping between one authoring dialect and canonical HTML.

    `to_canonical` and `from_canonical` are pure with respect to the codec:
    everything the reverse direction needs travels inside CanonicalSource.
    """
    dialect: Dialect = Dialect.HTML

    # --- source -> canonical ---

    def to_canonical(self, source: str) -> CanonicalSource:
        table = BindingTable()
        result = CanonicalSource(dialect=self.dialect, markup="")
        markup = self.prepare(source, table, result)
        markup = START_TAG_RE.sub(lambda m: self._rewrite_start_tag(m, table, result), markup)
        result.markup, result.is_fragment = wrap_document(markup.strip())
        result.bindings = table.bindings
        return result

    def prepare(self, source: str, table: BindingTable, result: CanonicalSource) -> str:
        """Dialect hook run before start tags are rewritten."""
        return source

    def rewrite_attribute(self, name: str, value: Optional[str], raw: str,
                          table: BindingTable, result: CanonicalSource) -> List[Attribute]:
        """Dialect hook: returns the canonical attribute(s) replacing one source attribute."""
        return [(name, value)]

    def _rewrite_start_tag(self, match: re.Match, table: BindingTable, result: CanonicalSource) -> str:
        name, attr_text, slash = match.group(1), match.group(2), match.group(3)
        lower = name.lower()

        seen = set()
        parts: List[str] = []
        for attr in ATTR_RE.finditer(attr_text or ""):
            raw = attr.group(0)
            for out_name, out_value in self.rewrite_attribute(attr.group(1), attr.group(2), raw, table, result):
                key = out_name.lower()
                if key in seen:
                    # Two source attributes collapsed onto one name; keep the second verbatim
                    out_name, out_value, key = table.marker(raw), None, None
                else:
                    seen.add(key)
                    if out_name != key and not out_name.startswith(MARKER_PREFIX):
                        result.attr_cases.setdefault(key, out_name)
                parts.append(out_name if out_value is None else f"{out_name}={out_value}")

        if name != lower:
            parts.append(f'{TAG_CASE_ATTR}="{name}"')
        closed = bool(slash) and lower not in VOID_ELEMENTS
        if closed:
            parts.append(SELF_CLOSE_ATTR)

        attrs = (" " + " ".join(parts)) if parts else ""
        if closed:
            return f"<{name}{attrs}></{name}>"
        return f"<{name}{attrs}>"

    # --- canonical -> source ---

    def from_canonical(self, soup: BeautifulSoup, source: CanonicalSource,
                       formatter: MarkupFormatter) -> str:
        self.restore_names(soup, source)
        root = soup.body or soup.html or soup
        text = render_fragment(root.contents, formatter)
        text = restore_self_closing(text)
        text = restore_bindings(text, source.bindings)
        return self.wrap_output(text, source)

    def wrap_output(self, text: str, source: CanonicalSource) -> str:
        return text

    def attribute_name(self, name: str, source: CanonicalSource) -> str:
        return source.attr_cases.get(name, name)

    def restore_names(self, soup: BeautifulSoup, source: CanonicalSource) -> None:
        """Gives tags and attributes their source spelling back, element by element."""
        for tag in soup.find_all(True):
            spelling = tag.attrs.pop(TAG_CASE_ATTR, None)
            if spelling and spelling.lower() == tag.name:
                tag.name = spelling
            if not tag.attrs:
                continue
            renamed = {}
            for key, value in tag.attrs.items():
                new_key = self.attribute_name(key, source)
                if new_key != key and isinstance(value, (list, tuple)):
                    value = " ".join(value)
                renamed[new_key] = value
            tag.attrs = renamed


def render_full_document(soup: BeautifulSoup, source: CanonicalSource, formatter: MarkupFormatter) -> str:
    return restore_bindings(render_document(soup, formatter), source.bindings)


class CodecRegistry:
    """
    Registry of dialect codecs, populated from the 'normalizer.dialects' package.
    Each codec module exposes a module level `CODEC` instance.
    """

    _codecs: Dict[Dialect, DialectCodec] = {}
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        if cls._loaded:
            return

        try:
            import normalizer.dialects as dialects_pkg

            for _, name, _ in pkgutil.iter_modules(dialects_pkg.__path__):
                full_name = f"normalizer.dialects.{name}"
                try:
                    module = importlib.import_module(full_name)
                    codec = getattr(module, "CODEC", None)
                    if isinstance(codec, DialectCodec):
                        cls._codecs[codec.dialect] = codec
                        logger.debug(f"Codec loaded: {codec.dialect.value}")
                except Exception as e:
                    logger.error(f"Error loading codec module {name}: {e}")

            cls._loaded = True
        except ImportError as e:
            logger.error(f"Could not find dialects package: {e}")

    @classmethod
    def get(cls, dialect: Dialect) -> DialectCodec:
        cls.discover()
        codec = cls._codecs.get(dialect)
        if codec is None:
            logger.warning("No codec registered for '%s', treating source as html.", dialect)
            codec = cls._codecs.get(Dialect.HTML) or DialectCodec()
        return codec

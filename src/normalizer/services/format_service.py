# src/normalizer/services/format_service.py
import logging
from typing import Iterable

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from normalizer.model import Dialect

logger = logging.getLogger(__name__)

# Attributes whose empty value is written bare (`<input required>`)
BOOLEAN_ATTRIBUTES = frozenset({
    "allowfullscreen", "async", "autofocus", "autoplay", "checked", "controls",
    "default", "defer", "disabled", "formnovalidate", "hidden", "inert", "ismap",
    "itemscope", "loop", "multiple", "muted", "nomodule", "novalidate", "open",
    "playsinline", "readonly", "required", "reversed", "selected",
})


class MarkupFormatter(HTMLFormatter):
    """
    Output formatter shared by all dialect encoders.

    Keeps attributes in source order (the stock formatter sorts them), writes
    boolean attributes bare and optionally closes void elements with `/>`.
    """

    def __init__(self, indent: int = 2, self_close_void: bool = False, pretty: bool = True):
        super().__init__(
            entity_substitution=EntitySubstitution.substitute_xml,
            void_element_close_prefix="/" if self_close_void else None,
            indent=indent,
        )
        self.pretty = pretty

    def attributes(self, tag):
        if tag.attrs is None:
            return []
        return [
            (key, None if value == "" and key.lower() in BOOLEAN_ATTRIBUTES else value)
            for key, value in tag.attrs.items()
        ]


def build_formatter(dialect: Dialect, indent: int = 2, pretty: bool = True) -> MarkupFormatter:
    """JSX needs explicitly closed void elements; the template dialects do not."""
    return MarkupFormatter(indent=indent, self_close_void=dialect == Dialect.REACT, pretty=pretty)


def _render_node(node, formatter: MarkupFormatter) -> str:
    if isinstance(node, Tag):
        if formatter.pretty:
            return node.prettify(formatter=formatter).rstrip("\n")
        return node.decode(formatter=formatter)
    if isinstance(node, NavigableString):
        text = node.output_ready(formatter=formatter)
        return text.strip() if formatter.pretty else text
    return str(node)


def render_fragment(nodes: Iterable, formatter: MarkupFormatter) -> str:
    """
    Serializes a sequence of sibling nodes (typically the children of <body>).
    Falls back to plain serialization if pretty printing fails.
    """
    nodes = list(nodes)
    try:
        parts = [_render_node(n, formatter) for n in nodes]
        joiner = "\n" if formatter.pretty else ""
        return joiner.join(p for p in parts if p or not formatter.pretty).strip()
    except Exception as e:
        logger.warning("Formatting failed, returning unformatted markup: %s", e)
        return "".join(str(n) for n in nodes).strip()


def render_document(soup: BeautifulSoup, formatter: MarkupFormatter) -> str:
    """Serializes a complete document, doctype included."""
    try:
        if formatter.pretty:
            return soup.prettify(formatter=formatter).strip()
        return soup.decode(formatter=formatter).strip()
    except Exception as e:
        logger.warning("Formatting failed, returning unformatted markup: %s", e)
        return str(soup).strip()


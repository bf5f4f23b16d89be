# src/normalizer/services/normalize_service.py
from __future__ import annotations

import logging
from typing import Optional, Union

from bs4 import BeautifulSoup

from normalizer.dialects.base import CodecRegistry, wrap_document
from normalizer.model import CanonicalSource, Dialect
from normalizer.services.format_service import build_formatter, render_document

logger = logging.getLogger(__name__)

DEFAULT_PARSER = "html.parser"


class NormalizeService:
    """
    Stateless facade over the dialect codecs.

    `normalize` never raises: a codec failure degrades to treating the source
    as plain html, and re-encoding failures degrade to canonical html.
    """

    def __init__(self, parser: str = DEFAULT_PARSER, indent: int = 2, pretty: bool = True):
        self.parser = parser
        self.indent = indent
        self.pretty = pretty
        CodecRegistry.discover()

    def normalize(self, source: str, dialect: Union[Dialect, str, None] = Dialect.HTML) -> CanonicalSource:
        """Maps dialect source text to canonical HTML markup."""
        dialect = Dialect.coerce(dialect)
        text = (source or "").replace("\ufeff", "")
        try:
            return CodecRegistry.get(dialect).to_canonical(text)
        except Exception as e:
            logger.warning("Normalizing %s source failed, falling back to plain html: %s", dialect.value, e)
            markup, wrapped = wrap_document(text.strip())
            return CanonicalSource(dialect=dialect, markup=markup, is_fragment=wrapped, degraded=True)

    def parse(self, canonical: CanonicalSource) -> BeautifulSoup:
        """Builds the error-correcting tree for canonical markup."""
        return BeautifulSoup(canonical.markup, self.parser)

    def encode(self, soup: BeautifulSoup, canonical: CanonicalSource,
               dialect: Optional[Union[Dialect, str]] = None) -> str:
        """
        Re-encodes a (possibly mutated) canonical tree into the source dialect
        and formats it.
        """
        target = Dialect.coerce(dialect) if dialect is not None else canonical.dialect
        formatter = build_formatter(target, self.indent, self.pretty)
        try:
            return CodecRegistry.get(target).from_canonical(soup, canonical, formatter)
        except Exception as e:
            logger.warning("Re-encoding to %s failed, returning canonical html: %s", target.value, e)
            return render_document(soup, formatter)

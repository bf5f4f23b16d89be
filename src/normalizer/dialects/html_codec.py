# src/normalizer/dialects/html_codec.py
from bs4 import BeautifulSoup

from normalizer.model import CanonicalSource, Dialect
from normalizer.services.format_service import MarkupFormatter
from .base import DialectCodec, render_full_document, wrap_document


class HTMLCodec(DialectCodec):
    """Plain HTML: passthrough in, whole document out."""
    dialect = Dialect.HTML

    def to_canonical(self, source: str) -> CanonicalSource:
        markup, wrapped = wrap_document(source.strip())
        return CanonicalSource(dialect=self.dialect, markup=markup, is_fragment=wrapped)

    def from_canonical(self, soup: BeautifulSoup, source: CanonicalSource,
                       formatter: MarkupFormatter) -> str:
        return render_full_document(soup, source, formatter)


CODEC = HTMLCodec()

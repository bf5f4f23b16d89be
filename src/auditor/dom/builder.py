# src/auditor/dom/builder.py
import logging
import re
from typing import Any, Dict, Optional, Union

from bs4 import BeautifulSoup, Tag

from normalizer.model import CanonicalSource, INTERNAL_ATTRS, strip_internal_attrs
from .models import HTMLDocument
from .core import ElementBase
from .registry import DOMRegistry

logger = logging.getLogger(__name__)

# Container elements are reported by their start tag only
START_TAG_ONLY = {"html", "head", "body"}


class DOMBuilder:
    """
    Builder responsible for parsing canonical markup into an HTMLDocument arena.
    """

    def __init__(self, parser: str = "html.parser", snippet_max_length: int = 250):
        """Initializes the builder and ensures the DOMRegistry is populated."""
        DOMRegistry.discover()
        self.parser = parser
        self.snippet_max_length = snippet_max_length

    def parse_doc(self, source: Union[CanonicalSource, str]) -> HTMLDocument:
        """
        Parses canonical markup into a HTMLDocument.

        Args:
            source: The normalizer output, or raw canonical markup.

        Returns:
            HTMLDocument: The arena of element models plus the live soup.
        """
        markup = source.markup if isinstance(source, CanonicalSource) else (source or "")
        soup = BeautifulSoup(markup, self.parser)
        return self.build(soup)

    def build(self, soup: BeautifulSoup) -> HTMLDocument:
        """Numbers every tag of an existing soup in document order and builds its models."""
        doc = HTMLDocument(soup=soup)

        for child in soup.children:
            if isinstance(child, Tag):
                self._build_tree(child, None, doc)

        if doc.root is None:
            doc.doc_errors.append("missing_html_root_tag")

        doc.label_targets = doc.collect_label_targets()
        return doc

    def _build_tree(self, tag: Tag, parent_id: Optional[int], doc: HTMLDocument) -> int:
        """
        Recursively registers a tag and its descendants in the arena.
        Ids are handed out before children are visited, so they follow preorder.
        """
        node_id = len(doc.tags)
        doc.tags.append(tag)
        doc.nodes.append(None)

        children = [
            self._build_tree(child, node_id, doc)
            for child in tag.children if isinstance(child, Tag)
        ]

        fields: Dict[str, Any] = {
            "node_id": node_id,
            "parent_id": parent_id,
            "tag": tag.name,
            "attrs": {k: v for k, v in tag.attrs.items() if k not in INTERNAL_ATTRS},
            "text": tag.get_text(" ", strip=True),
            "html": self.snippet(tag),
            "children": children,
        }

        # Retrieve specific parser from registry if available
        parser = DOMRegistry.get_parser(tag.name)
        element = parser(tag, fields) if parser else ElementBase(**fields)

        doc.nodes[node_id] = element
        return node_id

    def snippet(self, tag: Tag) -> str:
        """Outer HTML of an element, shortened for reporting."""
        if tag.name in START_TAG_ONLY:
            attrs = "".join(
                f' {k}="{" ".join(v) if isinstance(v, list) else v}"' for k, v in tag.attrs.items()
                if k not in INTERNAL_ATTRS
            )
            return f"<{tag.name}{attrs}>"

        html = re.sub(r"\s+", " ", strip_internal_attrs(str(tag))).strip()
        if self.snippet_max_length and len(html) > self.snippet_max_length:
            html = html[:self.snippet_max_length].rstrip() + "..."
        return html

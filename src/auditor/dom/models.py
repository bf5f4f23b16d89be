# src/auditor/dom/models.py
from typing import Any, Iterator, List, Optional, Set

from pydantic import BaseModel, ConfigDict, Field

from .core import ElementBase


class HTMLDocument(BaseModel):
    """
    Represents a parsed canonical document.

    `nodes` is an arena: every element of the tree, in document (preorder)
    order, with `nodes[i].node_id == i`. `tags` holds the matching
    BeautifulSoup tags at the same positions so a later mutation step can
    resolve a node id without relying on object identity of the models.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    nodes: List[ElementBase] = Field(default_factory=list)
    # Structural problems found while building, e.g. "missing_html_root_tag"
    doc_errors: List[str] = Field(default_factory=list)
    label_targets: Set[str] = Field(default_factory=set)

    # Parser objects; excluded from dumps
    soup: Any = Field(default=None, exclude=True, repr=False)
    tags: List[Any] = Field(default_factory=list, exclude=True, repr=False)

    def get(self, node_id: Optional[int]) -> Optional[ElementBase]:
        if node_id is None or node_id < 0 or node_id >= len(self.nodes):
            return None
        return self.nodes[node_id]

    def find_all(self, *tag_names: str) -> Iterator[ElementBase]:
        """Elements with one of the given tag names, in document order."""
        wanted = set(tag_names)
        return (node for node in self.nodes if node.tag in wanted)

    def find(self, tag_name: str) -> Optional[ElementBase]:
        return next(self.find_all(tag_name), None)

    @property
    def root(self) -> Optional[ElementBase]:
        """The <html> element, if the document has one."""
        return self.find("html")

    def collect_label_targets(self) -> Set[str]:
        """Every id referenced by a <label for="...">."""
        return {
            node.attr("for").strip() for node in self.find_all("label")
            if node.attr("for") and node.attr("for").strip()
        }

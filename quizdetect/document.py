"""
Document query capability used by the detection engine.

The engine never touches a DOM directly; it talks to a PageDocument.
Nodes are opaque handles borrowed from the underlying tree (BeautifulSoup
Tag, Playwright ElementHandle, ...). Methods intentionally mirror the small
subset of DOM operations the engine needs:

  - body() -> node
  - query_all(selector, root=None) -> list[node]
  - query_one(selector, root=None) -> node | None
  - is_visible(node) -> bool
  - inner_text(node) / inner_html(node) -> str
  - clean_inner_html(node, remove_selectors) -> str
  - get_attribute(node, name) / class_list(node) / parent(node) / depth(node)
  - create_element(tag, element_id, text, attrs) -> node
  - insert_before(node, anchor) -> bool / append_to_body(node) / remove(node)
  - is_attached(node) / set_text / set_attribute / toggle_class / count(selector)

Implementations:
  quizdetect.soup_document.SoupDocument   in-memory tree (tests, snapshots)
  quizbrowser.pw_document.PWDocument      live Playwright page
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class PageDocument:
    # Query
    def body(self) -> Any:
        raise NotImplementedError

    def query_all(self, selector: str, root: Any = None) -> List[Any]:
        raise NotImplementedError

    def query_one(self, selector: str, root: Any = None) -> Any:
        found = self.query_all(selector, root)
        return found[0] if found else None

    def count(self, selector: str) -> int:
        return len(self.query_all(selector))

    # Rendering / content
    def is_visible(self, node: Any) -> bool:
        raise NotImplementedError

    def inner_text(self, node: Any) -> str:
        raise NotImplementedError

    def inner_html(self, node: Any) -> str:
        raise NotImplementedError

    def clean_inner_html(self, node: Any, remove_selectors: List[str]) -> str:
        """innerHTML of a deep copy with matching descendants removed; the live node is untouched."""
        raise NotImplementedError

    def get_attribute(self, node: Any, name: str) -> Optional[str]:
        raise NotImplementedError

    def class_list(self, node: Any) -> List[str]:
        raise NotImplementedError

    def parent(self, node: Any) -> Any:
        raise NotImplementedError

    def depth(self, node: Any, limit: int = 80) -> int:
        """Number of element ancestors; counting stops once it exceeds `limit`."""
        d = 0
        cur = self.parent(node)
        while cur is not None:
            d += 1
            if d > limit:
                break
            cur = self.parent(cur)
        return d

    # Mutation
    def create_element(self, tag: str, element_id: str, text: str = "", attrs: Optional[Dict[str, str]] = None) -> Any:
        raise NotImplementedError

    def insert_before(self, node: Any, anchor: Any) -> bool:
        """Insert `node` right before `anchor`; False when the anchor has no parent."""
        raise NotImplementedError

    def append_to_body(self, node: Any) -> None:
        raise NotImplementedError

    def remove(self, node: Any) -> None:
        raise NotImplementedError

    def is_attached(self, node: Any) -> bool:
        raise NotImplementedError

    def set_text(self, node: Any, text: str) -> None:
        raise NotImplementedError

    def set_attribute(self, node: Any, name: str, value: Optional[str]) -> None:
        """Set an attribute; None removes it."""
        raise NotImplementedError

    def toggle_class(self, node: Any, cls: str, on: bool) -> None:
        raise NotImplementedError

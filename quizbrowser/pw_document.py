"""
Playwright-backed PageDocument.

Nodes are ElementHandles of the live page. Visibility, cleaned HTML and
depth are computed in-page in one round trip each; handles that went stale
(element removed by the page) and a destroyed execution context (navigation
started mid-pass) read as invisible/empty/None instead of raising.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from quizdetect.document import PageDocument
from quizdetect.visibility import VISIBILITY_JS


_CLEAN_HTML_JS = """
(el, sels) => {
  const clone = el.cloneNode(true);
  for (const s of sels) {
    try { clone.querySelectorAll(s).forEach((n) => n.remove()); } catch (_) {}
  }
  return clone.innerHTML;
}
"""

_DEPTH_JS = """
(el, limit) => {
  let d = 0, cur = el;
  while (cur && cur.parentElement) { d += 1; cur = cur.parentElement; if (d > limit) break; }
  return d;
}
"""

_CREATE_JS = """
(p) => {
  const el = document.createElement(p.tag);
  if (p.id) el.id = p.id;
  for (const [k, v] of Object.entries(p.attrs || {})) el.setAttribute(k, v);
  if (p.text) el.textContent = p.text;
  return el;
}
"""

_INSERT_BEFORE_JS = """
(anchor, node) => {
  if (!anchor.parentElement) return false;
  anchor.parentElement.insertBefore(node, anchor);
  return true;
}
"""


class PWDocument(PageDocument):
    def __init__(self, page) -> None:
        self._page = page

    @property
    def page(self):
        return self._page

    # Query
    def body(self) -> Any:
        try:
            return self._page.query_selector("body")
        except Exception:
            return None

    def query_all(self, selector: str, root: Any = None) -> List[Any]:
        base = root if root is not None else self._page
        try:
            return list(base.query_selector_all(selector))
        except Exception:
            return []

    def query_one(self, selector: str, root: Any = None) -> Any:
        base = root if root is not None else self._page
        try:
            return base.query_selector(selector)
        except Exception:
            return None

    def count(self, selector: str) -> int:
        try:
            return int(self._page.evaluate("(s) => document.querySelectorAll(s).length", selector) or 0)
        except Exception:
            return 0

    # Rendering / content
    def is_visible(self, node: Any) -> bool:
        if node is None:
            return False
        try:
            return bool(node.evaluate(VISIBILITY_JS))
        except Exception:
            return False

    def inner_text(self, node: Any) -> str:
        if node is None:
            return ""
        try:
            return node.inner_text() or ""
        except Exception:
            return ""

    def inner_html(self, node: Any) -> str:
        if node is None:
            return ""
        try:
            return node.inner_html() or ""
        except Exception:
            return ""

    def clean_inner_html(self, node: Any, remove_selectors: List[str]) -> str:
        if node is None:
            return ""
        try:
            return node.evaluate(_CLEAN_HTML_JS, list(remove_selectors or [])) or ""
        except Exception:
            return ""

    def get_attribute(self, node: Any, name: str) -> Optional[str]:
        try:
            return node.get_attribute(name)
        except Exception:
            return None

    def class_list(self, node: Any) -> List[str]:
        try:
            return list(node.evaluate("(e) => Array.from(e.classList)") or [])
        except Exception:
            return []

    def parent(self, node: Any) -> Any:
        try:
            return node.evaluate_handle("(e) => e.parentElement").as_element()
        except Exception:
            return None

    def depth(self, node: Any, limit: int = 80) -> int:
        try:
            return int(node.evaluate(_DEPTH_JS, int(limit)) or 0)
        except Exception:
            return 0

    # Mutation
    def create_element(self, tag: str, element_id: str, text: str = "", attrs: Optional[Dict[str, str]] = None) -> Any:
        try:
            return self._page.evaluate_handle(_CREATE_JS, {"tag": tag, "id": element_id, "text": text, "attrs": dict(attrs or {})}).as_element()
        except Exception:
            return None

    def insert_before(self, node: Any, anchor: Any) -> bool:
        if anchor is None:
            return False
        try:
            return bool(anchor.evaluate(_INSERT_BEFORE_JS, node))
        except Exception:
            return False

    def append_to_body(self, node: Any) -> None:
        try:
            node.evaluate("(n) => { (document.body || document.documentElement).appendChild(n); }")
        except Exception:
            pass

    def remove(self, node: Any) -> None:
        try:
            node.evaluate("(n) => n.remove()")
        except Exception:
            pass

    def is_attached(self, node: Any) -> bool:
        try:
            return bool(node.evaluate("(n) => n.isConnected"))
        except Exception:
            return False

    def set_text(self, node: Any, text: str) -> None:
        try:
            node.evaluate("(n, t) => { n.textContent = t; }", text or "")
        except Exception:
            pass

    def set_attribute(self, node: Any, name: str, value: Optional[str]) -> None:
        try:
            node.evaluate(
                "(n, p) => { if (p.value === null) n.removeAttribute(p.name); else n.setAttribute(p.name, p.value); }",
                {"name": name, "value": value},
            )
        except Exception:
            pass

    def toggle_class(self, node: Any, cls: str, on: bool) -> None:
        try:
            node.evaluate("(n, p) => { n.classList.toggle(p.cls, p.on); }", {"cls": cls, "on": bool(on)})
        except Exception:
            pass

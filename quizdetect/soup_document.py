"""
quizdetect.soup_document
基于 BeautifulSoup 的内存文档树实现（PageDocument）。

用途：
- 测试夹具：以 HTML 字符串构造页面，驱动完整的评估流程；
- 离线分析：对采集得到的 dom.html 快照做一次检测（quizbrowser.inspect_html）。

由于没有布局引擎，“是否渲染”只能依据标记近似：
内联 style、hidden 属性、不渲染的标签，以及 hidden_classes 中的类名
（默认 d-none，即 Bootstrap 的 display:none 工具类）。
"""

from __future__ import annotations

import copy
import re
from typing import Any, Dict, Iterable, List, Optional, Union

from bs4 import BeautifulSoup, NavigableString, Tag

try:  # 优先包内相对导入
    from .document import PageDocument
    from .visibility import NON_RENDERED_TAGS, hides_self, parse_inline_style, removes_box
except Exception:  # 兼容脚本直接运行
    from document import PageDocument  # type: ignore
    from visibility import NON_RENDERED_TAGS, hides_self, parse_inline_style, removes_box  # type: ignore


# innerText 中产生换行的块级标签；p 产生两个换行（空行）
BLOCK_TAGS = {
    "address", "article", "aside", "blockquote", "details", "dialog", "dd", "div",
    "dl", "dt", "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2",
    "h3", "h4", "h5", "h6", "header", "hr", "li", "main", "nav", "ol", "pre",
    "section", "summary", "table", "tr", "ul", "caption", "thead", "tbody", "tfoot",
}
PARAGRAPH_TAGS = {"p"}

_WS = re.compile(r"[ \t\r\n\f]+")


class SoupDocument(PageDocument):
    def __init__(self, html: str, *, parser: str = "html.parser", hidden_classes: Iterable[str] = ("d-none",)) -> None:
        self.soup = BeautifulSoup(html or "", parser)
        self.hidden_classes = set(hidden_classes or ())

    @classmethod
    def from_file(cls, path: str, **kwargs: Any) -> "SoupDocument":
        with open(path, "r", encoding="utf-8") as f:
            return cls(f.read(), **kwargs)

    def html(self) -> str:
        return str(self.soup)

    # Query
    def body(self) -> Tag:
        return self.soup.body or self.soup

    def query_all(self, selector: str, root: Any = None) -> List[Tag]:
        base = root if isinstance(root, Tag) else self.soup
        return list(base.select(selector))

    # Rendering / content
    def _classes(self, node: Tag) -> List[str]:
        cls = node.get("class") or []
        if isinstance(cls, str):
            return cls.split()
        return list(cls)

    def _box_removed(self, node: Tag, style: Dict[str, str]) -> bool:
        """该元素（作为祖先）是否让整棵子树失去渲染盒。"""
        if node.name in NON_RENDERED_TAGS:
            return True
        if node.name == "input" and (node.get("type") or "").lower() == "hidden":
            return True
        if node.has_attr("hidden"):
            return True
        if self.hidden_classes and any(c in self.hidden_classes for c in self._classes(node)):
            return True
        return removes_box(style)

    def is_visible(self, node: Any) -> bool:
        if not isinstance(node, Tag) or isinstance(node, BeautifulSoup):
            return False
        if not self.is_attached(node):
            return False
        visibility: Optional[str] = None
        cur: Any = node
        while isinstance(cur, Tag) and not isinstance(cur, BeautifulSoup):
            style = parse_inline_style(cur.get("style"))
            if cur is node and hides_self(style):
                return False
            if self._box_removed(cur, style):
                return False
            # visibility 继承：离自身最近的声明生效
            if visibility is None and "visibility" in style:
                visibility = style["visibility"]
            cur = cur.parent
        return visibility not in ("hidden", "collapse")

    def _renders(self, node: Tag) -> bool:
        style = parse_inline_style(node.get("style"))
        if self._box_removed(node, style):
            return False
        return style.get("visibility") not in ("hidden", "collapse")

    def _collect(self, node: Tag, parts: List[Union[str, int]]) -> None:
        for child in node.children:
            if isinstance(child, NavigableString):
                # 注释/CDATA/Doctype 等都是 NavigableString 子类，不计入文本
                if type(child) is NavigableString:
                    parts.append(_WS.sub(" ", str(child)))
                continue
            if not isinstance(child, Tag) or not self._renders(child):
                continue
            if child.name == "br":
                parts.append("\n")
                continue
            if child.name in PARAGRAPH_TAGS:
                breaks = 2
            elif child.name in BLOCK_TAGS:
                breaks = 1
            else:
                breaks = 0
            if breaks:
                parts.append(breaks)
            self._collect(child, parts)
            if breaks:
                parts.append(breaks)

    def inner_text(self, node: Any) -> str:
        """近似 innerText：块级边界换行，连续的换行需求取最大值，首尾换行需求丢弃。"""
        if not isinstance(node, Tag):
            return ""
        parts: List[Union[str, int]] = []
        self._collect(node, parts)
        out: List[str] = []
        pending = 0
        for p in parts:
            if isinstance(p, int):
                pending = max(pending, p)
                continue
            if not p or (not p.strip() and (pending or not out)):
                continue
            if pending and out:
                out.append("\n" * pending)
            pending = 0
            out.append(p)
        text = "".join(out)
        # 行首/行尾空白（由源码缩进产生）去掉
        return re.sub(r"[ ]*\n[ ]*", "\n", text)

    def inner_html(self, node: Any) -> str:
        if not isinstance(node, Tag):
            return ""
        return node.decode_contents()

    def clean_inner_html(self, node: Any, remove_selectors: List[str]) -> str:
        if not isinstance(node, Tag):
            return ""
        clone = copy.copy(node)
        for sel in remove_selectors or []:
            try:
                for n in clone.select(sel):
                    n.decompose()
            except Exception:
                continue
        return clone.decode_contents()

    def get_attribute(self, node: Any, name: str) -> Optional[str]:
        if not isinstance(node, Tag):
            return None
        val = node.get(name)
        if val is None:
            return None
        if isinstance(val, (list, tuple)):
            return " ".join(val)
        return str(val)

    def class_list(self, node: Any) -> List[str]:
        if not isinstance(node, Tag):
            return []
        return self._classes(node)

    def parent(self, node: Any) -> Optional[Tag]:
        p = getattr(node, "parent", None)
        if p is None or isinstance(p, BeautifulSoup):
            return None
        return p

    # Mutation
    def create_element(self, tag: str, element_id: str, text: str = "", attrs: Optional[Dict[str, str]] = None) -> Tag:
        el = self.soup.new_tag(tag)
        if element_id:
            el["id"] = element_id
        for k, v in (attrs or {}).items():
            el[k] = v
        if text:
            el.string = text
        return el

    def insert_before(self, node: Any, anchor: Any) -> bool:
        if not isinstance(anchor, Tag) or self.parent(anchor) is None:
            return False
        anchor.insert_before(node)
        return True

    def append_to_body(self, node: Any) -> None:
        self.body().append(node)

    def remove(self, node: Any) -> None:
        if isinstance(node, Tag):
            node.extract()

    def is_attached(self, node: Any) -> bool:
        cur = node
        while cur is not None:
            if cur is self.soup:
                return True
            cur = getattr(cur, "parent", None)
        return False

    def set_text(self, node: Any, text: str) -> None:
        node.string = text or ""

    def set_attribute(self, node: Any, name: str, value: Optional[str]) -> None:
        if value is None:
            if node.has_attr(name):
                del node[name]
            return
        node[name] = value

    def toggle_class(self, node: Any, cls: str, on: bool) -> None:
        classes = self._classes(node)
        if on and cls not in classes:
            classes.append(cls)
        elif not on and cls in classes:
            classes.remove(cls)
        if classes:
            node["class"] = classes
        elif node.has_attr("class"):
            del node["class"]

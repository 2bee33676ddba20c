"""
quizdetect.extract
内容提取：两种模式。

- 纯文本：innerText 归一化（合并空白、3 个以上换行压成一个空行），用于扫描/打分/签名；
- 清洗 HTML：深拷贝节点后删除辅助控件（评分、百分位等），用于导出。

空节点在两种模式下都返回空串。
"""

from __future__ import annotations

import re
from typing import Any, List, Optional

try:  # 优先包内相对导入
    from .constants import OPTION_TEXT_NODES
    from .document import PageDocument
    from .utils import dedupe
except Exception:  # 兼容脚本直接运行
    from constants import OPTION_TEXT_NODES  # type: ignore
    from document import PageDocument  # type: ignore
    from utils import dedupe  # type: ignore


_MULTI_BLANK = re.compile(r"\n{3,}")
_MULTI_SPACE = re.compile(r"[ \t]{2,}")


def normalize_text(raw: Optional[str]) -> str:
    s = (raw or "").strip()
    s = _MULTI_BLANK.sub("\n\n", s)
    s = _MULTI_SPACE.sub(" ", s)
    return s.strip()


def extract_text(doc: PageDocument, node: Any) -> str:
    if node is None:
        return ""
    return normalize_text(doc.inner_text(node))


def normalize_html(html: Optional[str]) -> str:
    return str(html or "").strip()


def extract_clean_html(doc: PageDocument, node: Any, remove_selectors: Optional[List[str]] = None) -> str:
    if node is None:
        return ""
    if not remove_selectors:
        return normalize_html(doc.inner_html(node))
    return normalize_html(doc.clean_inner_html(node, list(remove_selectors)))


def extract_options_text(doc: PageDocument, catalog: Any) -> str:
    """选项列表文本：目录命中的第一个可见容器下各选项的文本，去空、保序去重，逐行拼接。"""
    # 局部导入避免 catalog → heuristics → extract 的循环
    try:
        from .catalog import ContentRole
    except Exception:  # pragma: no cover
        from catalog import ContentRole  # type: ignore
    container = catalog.find_visible(doc, ContentRole.OPTIONS)
    if container is None:
        return ""
    texts = [extract_text(doc, n) for n in doc.query_all(OPTION_TEXT_NODES, container)]
    return "\n".join(dedupe(t for t in texts if t))

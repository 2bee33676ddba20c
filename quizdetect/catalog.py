"""
quizdetect.catalog
选择器目录：每个内容角色（题干/解析/选项列表）一个有序选择器列表，
按顺序逐个查询，返回第一个可见命中；全部落空时才进入启发式兜底。

确定性：优先级靠前的选择器先胜出；同一选择器内按文档顺序。
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, List, Optional

try:  # 优先包内相对导入
    from .constants import HEURISTICS, SELECTORS
    from .document import PageDocument
    from .heuristics import HeuristicConfig, scan
except Exception:  # 兼容脚本直接运行
    from constants import HEURISTICS, SELECTORS  # type: ignore
    from document import PageDocument  # type: ignore
    from heuristics import HeuristicConfig, scan  # type: ignore


class ContentRole(str, Enum):
    QUESTION = "question"
    ANSWER = "answer"
    OPTIONS = "options"


def find_visible(doc: PageDocument, selectors: List[str]) -> Any:
    for selector in selectors or []:
        if not selector:
            continue
        try:
            matches = doc.query_all(selector)
        except Exception:
            # 后端不支持的选择器直接跳过
            continue
        for el in matches:
            if doc.is_visible(el):
                return el
    return None


class SelectorCatalog:
    def __init__(
        self,
        selectors: Optional[Dict[str, List[str]]] = None,
        heuristics: Optional[Dict[str, Dict[str, Any]]] = None,
        config: Optional[HeuristicConfig] = None,
    ) -> None:
        src = selectors if selectors is not None else SELECTORS
        self.selectors: Dict[str, List[str]] = {str(k): list(v) for k, v in src.items()}
        self.heuristics: Dict[str, Dict[str, Any]] = dict(heuristics if heuristics is not None else HEURISTICS)
        self.config = config or HeuristicConfig()

    def selectors_for(self, role: ContentRole) -> List[str]:
        return self.selectors.get(ContentRole(role).value, [])

    def find_visible(self, doc: PageDocument, role: ContentRole) -> Any:
        return find_visible(doc, self.selectors_for(role))

    def locate(self, doc: PageDocument, role: ContentRole, *, log: Optional[Callable[..., None]] = None) -> Any:
        """目录优先；仅当目录没有任何可见命中、且该角色有兜底参数时才做启发式扫描。"""
        el = self.find_visible(doc, role)
        if el is not None:
            return el
        profile = self.heuristics.get(ContentRole(role).value)
        if not profile:
            return None
        return scan(
            doc,
            doc.body(),
            profile.get("keywords") or [],
            int(profile.get("min_chars") or 0),
            int(profile.get("max_chars") or 0),
            self.config,
            log=log,
        )

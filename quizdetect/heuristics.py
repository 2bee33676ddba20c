from __future__ import annotations

"""
heuristics

选择器目录全部落空时的兜底扫描（不依赖具体布局）：
- 遍历 root 下的结构容器（section/article/main/aside/details/div）；
- 跳过不可见节点、空文本、长度不在 [min_chars, max_chars] 的节点；
- 给定关键词时，文本（小写）须至少包含其一；
- 打分：score = depth_weight × 深度 − |length_target − min(长度, length_cap)| / length_target，
  即偏好更深（更具体）的节点，同时惩罚偏离 800 字符目标长度的节点；
- 取最高分；同分时保留遍历顺序中靠前者（稳定排序）。
"""

from dataclasses import dataclass
from typing import Any, Callable, List, Optional

try:  # 优先包内相对导入
    from .constants import DEPTH_LIMIT, SCAN_CONTAINERS, SCORE_DEPTH_WEIGHT, SCORE_LENGTH_CAP, SCORE_LENGTH_TARGET
    from .document import PageDocument
    from .extract import extract_text
except Exception:  # 兼容脚本直接运行
    from constants import DEPTH_LIMIT, SCAN_CONTAINERS, SCORE_DEPTH_WEIGHT, SCORE_LENGTH_CAP, SCORE_LENGTH_TARGET  # type: ignore
    from document import PageDocument  # type: ignore
    from extract import extract_text  # type: ignore


@dataclass
class HeuristicConfig:
    depth_weight: float = SCORE_DEPTH_WEIGHT
    length_target: int = SCORE_LENGTH_TARGET
    length_cap: int = SCORE_LENGTH_CAP
    depth_limit: int = DEPTH_LIMIT
    containers: str = SCAN_CONTAINERS


@dataclass
class Candidate:
    node: Any
    text: str
    score: float


def score_candidate(depth: int, text_length: int, config: Optional[HeuristicConfig] = None) -> float:
    cfg = config or HeuristicConfig()
    target = max(1, int(cfg.length_target))
    length_penalty = abs(target - min(text_length, cfg.length_cap)) / target
    return depth * cfg.depth_weight - length_penalty


def collect_candidates(
    doc: PageDocument,
    root: Any,
    keywords: Optional[List[str]],
    min_chars: int,
    max_chars: int,
    config: Optional[HeuristicConfig] = None,
) -> List[Candidate]:
    cfg = config or HeuristicConfig()
    if root is None:
        return []
    kw = [str(k).lower() for k in (keywords or [])]
    out: List[Candidate] = []
    for el in doc.query_all(cfg.containers, root):
        if not doc.is_visible(el):
            continue
        text = extract_text(doc, el)
        if not text:
            continue
        if len(text) < min_chars or len(text) > max_chars:
            continue
        lower = text.lower()
        if kw and not any(k in lower for k in kw):
            continue
        depth = doc.depth(el, cfg.depth_limit)
        out.append(Candidate(node=el, text=text, score=score_candidate(depth, len(text), cfg)))
    return out


def scan(
    doc: PageDocument,
    root: Any,
    keywords: Optional[List[str]],
    min_chars: int,
    max_chars: int,
    config: Optional[HeuristicConfig] = None,
    log: Optional[Callable[..., None]] = None,
) -> Any:
    """返回得分最高的候选节点；没有候选时返回 None。"""
    candidates = collect_candidates(doc, root, keywords, min_chars, max_chars, config)
    # sorted 为稳定排序：同分保留遍历顺序
    ranked = sorted(candidates, key=lambda c: c.score, reverse=True)
    winner = ranked[0] if ranked else None
    if log is not None:
        log("Heuristic panel result", {
            "found": winner is not None,
            "candidates": len(candidates),
            "topScore": winner.score if winner else None,
        })
    return winner.node if winner else None

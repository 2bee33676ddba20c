"""
quizdetect.utils
中文通用工具函数：标签解析、保序去重、调试日志。
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional


def split_tags(tag_string: Optional[str]) -> List[str]:
    """逗号分隔的标签串 → 去空白后的非空列表。"""
    return [t.strip() for t in (tag_string or "").split(",") if t.strip()]


def dedupe(items: Iterable[str]) -> List[str]:
    """保序去重。"""
    seen = set()
    out: List[str] = []
    for it in items:
        if it in seen:
            continue
        seen.add(it)
        out.append(it)
    return out


class DebugLog:
    """仅在 debug 打开时打印的日志器，格式：[tag] message {json}。

    debug 标志可在运行时被页面调试通道切换。
    """

    def __init__(self, tag: str = "quizdetect", enabled: bool = False) -> None:
        self.tag = tag
        self.enabled = bool(enabled)

    def __call__(self, message: str, payload: Optional[Dict[str, Any]] = None) -> None:
        if not self.enabled:
            return
        if payload:
            try:
                extra = json.dumps(payload, ensure_ascii=False, default=str)
            except Exception:
                extra = str(payload)
            print(f"[{self.tag}] {message} {extra}")
        else:
            print(f"[{self.tag}] {message}")

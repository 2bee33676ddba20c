"""
quizdetect.scheduler
变更防抖调度器。

每次 DOM 变更通知或导航事件都会取消尚未触发的评估并重新计时；
静默 quiet_ms 之后由 poll() 触发恰好一次回调。时钟可注入，
测试里用假时钟推进时间，无需真实等待。

单线程：notify/poll 与评估都在同一个事件循环里顺序执行，不需要锁。
"""

from __future__ import annotations

import time
from typing import Callable, Optional

try:  # 优先包内相对导入
    from .constants import QUIET_MS
except Exception:  # 兼容脚本直接运行
    from constants import QUIET_MS  # type: ignore


class ChangeScheduler:
    def __init__(
        self,
        callback: Callable[[], object],
        *,
        quiet_ms: int = QUIET_MS,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._callback = callback
        self.quiet_ms = max(0, int(quiet_ms))
        self._clock = clock or time.monotonic
        self._deadline: Optional[float] = None
        self.last_reason: Optional[str] = None
        self.fired = 0

    @property
    def pending(self) -> bool:
        return self._deadline is not None

    def now(self) -> float:
        return self._clock()

    def notify(self, reason: str = "mutation") -> None:
        """取消已排期的评估，从现在起重新计时。"""
        self._deadline = self._clock() + self.quiet_ms / 1000.0
        self.last_reason = reason

    def cancel(self) -> None:
        self._deadline = None

    def seconds_until_due(self) -> Optional[float]:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def poll(self) -> bool:
        """到期则触发一次回调并返回 True。"""
        if self._deadline is None or self._clock() < self._deadline:
            return False
        self._deadline = None
        self.fired += 1
        self._callback()
        return True

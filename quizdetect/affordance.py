"""
quizdetect.affordance
页面上的“导出触发按钮”与提示框的生命周期。

AffordanceController 独占唯一的触发按钮（#pm-anki-button）：
- ensure(anchor)：不存在时创建，插到 anchor 之前；anchor 无父节点则追加到 body；
- remove()：幂等移除；
- has_trigger()：按钮已被页面移出文档时视为不存在，下一轮评估会重新创建；
- set_busy()：导出请求进行中禁用按钮。
文档中任何时刻至多一个触发按钮（创建前会清理残留的同 id 元素）。

NoticeController 管理提示框（#pm-anki-toast），显示 notice_ms 后由 expire() 隐藏。
"""

from __future__ import annotations

from typing import Any, Callable, Optional

try:  # 优先包内相对导入
    from .constants import NOTICE_ID, NOTICE_MS, TRIGGER_ACTION, TRIGGER_ID, TRIGGER_LABEL
    from .document import PageDocument
except Exception:  # 兼容脚本直接运行
    from constants import NOTICE_ID, NOTICE_MS, TRIGGER_ACTION, TRIGGER_ID, TRIGGER_LABEL  # type: ignore
    from document import PageDocument  # type: ignore


class AffordanceController:
    def __init__(
        self,
        doc: PageDocument,
        *,
        trigger_id: str = TRIGGER_ID,
        label: str = TRIGGER_LABEL,
        action: str = TRIGGER_ACTION,
        on_create: Optional[Callable[[Any], None]] = None,
    ) -> None:
        self.doc = doc
        self.trigger_id = trigger_id
        self.label = label
        self.action = action
        # 创建后回调（Playwright 绑定用它挂接点击事件）
        self.on_create = on_create
        self.trigger: Any = None

    def has_trigger(self) -> bool:
        # 页面重渲染可能把按钮连同容器一起丢掉，此时引用作废
        if self.trigger is not None and not self.doc.is_attached(self.trigger):
            self.trigger = None
        return self.trigger is not None

    def _purge_strays(self) -> None:
        for el in self.doc.query_all(f"#{self.trigger_id}"):
            if el is not self.trigger:
                self.doc.remove(el)

    def ensure(self, anchor: Any) -> bool:
        """触发按钮不存在时创建并插入；返回是否新建。"""
        if self.has_trigger():
            return False
        self._purge_strays()
        btn = self.doc.create_element(
            "button",
            self.trigger_id,
            self.label,
            {"type": "button", "data-action": self.action},
        )
        if btn is None:
            return False
        if anchor is None or not self.doc.insert_before(btn, anchor):
            self.doc.append_to_body(btn)
        self.trigger = btn
        if self.on_create is not None:
            self.on_create(btn)
        return True

    def remove(self) -> bool:
        if self.trigger is None:
            return False
        self.doc.remove(self.trigger)
        self.trigger = None
        return True

    def set_busy(self, busy: bool, node: Any = None) -> None:
        target = node if node is not None else self.trigger
        if target is None:
            return
        self.doc.set_attribute(target, "disabled", "disabled" if busy else None)


class NoticeController:
    def __init__(self, doc: PageDocument, *, notice_id: str = NOTICE_ID, notice_ms: int = NOTICE_MS) -> None:
        self.doc = doc
        self.notice_id = notice_id
        self.notice_ms = int(notice_ms)
        self.node: Any = None
        self.hide_at: Optional[float] = None
        self.message = ""
        self.is_error = False

    def show(self, message: str, is_error: bool = False, *, now: float = 0.0) -> None:
        if self.node is None or not self.doc.is_attached(self.node):
            self.node = self.doc.create_element("div", self.notice_id)
            if self.node is None:
                return
            self.doc.append_to_body(self.node)
        self.message = message
        self.is_error = bool(is_error)
        self.doc.set_text(self.node, message)
        self.doc.set_attribute(self.node, "data-state", "error" if is_error else "success")
        self.doc.toggle_class(self.node, "visible", True)
        self.hide_at = now + self.notice_ms / 1000.0

    def expire(self, now: float) -> bool:
        """到时则隐藏提示框；返回是否执行了隐藏。"""
        if self.hide_at is None or now < self.hide_at:
            return False
        self.hide_at = None
        if self.node is not None and self.doc.is_attached(self.node):
            self.doc.toggle_class(self.node, "visible", False)
        return True

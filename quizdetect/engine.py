"""
quizdetect.engine
检测引擎：一个页面会话对应一个 QuizEngine 实例，持有全部可变状态
（触发按钮、上次签名、待触发的防抖评估、debug 开关）。

一轮评估（evaluate）：
  1) 定位题干（目录优先，落空才启发式）；计算提交状态（解析节点 = 结果提示框）；
  2) 提取题干/解析文本；
  3) 签名变化 → 记录新签名并立即移除已有按钮；
  4) 未提交或文本缺失 → 移除按钮（幂等），结束；
  5) 否则按钮不存在时创建，插在解析节点（无则题干节点）之前。

导出（export）：禁用按钮 → 构建 payload → 交给 relay → 提示结果 → finally 里恢复按钮。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

try:  # 优先包内相对导入
    from .affordance import AffordanceController, NoticeController
    from .answer_state import SubmissionState, detect_submission
    from .catalog import ContentRole, SelectorCatalog
    from .config import Settings
    from .constants import DEBUG_MARKER, EXPORT_REQUEST, NOTICE_MS, QUIET_MS
    from .document import PageDocument
    from .errors import ExportError
    from .extract import extract_text
    from .payload import build_note_payload
    from .scheduler import ChangeScheduler
    from .signature import SignatureTracker
    from .utils import DebugLog
except Exception:  # 兼容脚本直接运行
    from affordance import AffordanceController, NoticeController  # type: ignore
    from answer_state import SubmissionState, detect_submission  # type: ignore
    from catalog import ContentRole, SelectorCatalog  # type: ignore
    from config import Settings  # type: ignore
    from constants import DEBUG_MARKER, EXPORT_REQUEST, NOTICE_MS, QUIET_MS  # type: ignore
    from document import PageDocument  # type: ignore
    from errors import ExportError  # type: ignore
    from extract import extract_text  # type: ignore
    from payload import build_note_payload  # type: ignore
    from scheduler import ChangeScheduler  # type: ignore
    from signature import SignatureTracker  # type: ignore
    from utils import DebugLog  # type: ignore


# relay 的调用形式：message dict → response dict（{ok, result|error}）
RelaySend = Callable[[Dict[str, Any]], Optional[Dict[str, Any]]]


@dataclass
class EvaluationResult:
    ready: bool
    signature: str
    signature_changed: bool
    question_text: str = ""
    answer_text: str = ""
    question_node: Any = None
    state: Optional[SubmissionState] = None
    trigger_created: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)


def parse_debug_message(data: Any, marker: str = DEBUG_MARKER) -> Optional[bool]:
    """调试通道：{marker: {debug: bool}} → bool；其它形状一律 None（忽略）。"""
    if not isinstance(data, dict):
        return None
    inner = data.get(marker)
    if not isinstance(inner, dict):
        return None
    value = inner.get("debug")
    if not isinstance(value, bool):
        return None
    return value


class QuizEngine:
    def __init__(
        self,
        doc: PageDocument,
        *,
        settings: Optional[Settings] = None,
        catalog: Optional[SelectorCatalog] = None,
        quiet_ms: int = QUIET_MS,
        notice_ms: int = NOTICE_MS,
        clock: Optional[Callable[[], float]] = None,
        debug: bool = False,
        on_trigger_created: Optional[Callable[[Any], None]] = None,
    ) -> None:
        self.doc = doc
        self.settings = settings or Settings()
        self.catalog = catalog or SelectorCatalog()
        self.log = DebugLog("quizdetect", enabled=debug)
        self.tracker = SignatureTracker()
        self.affordance = AffordanceController(doc, on_create=on_trigger_created)
        self.notices = NoticeController(doc, notice_ms=notice_ms)
        self.scheduler = ChangeScheduler(self.evaluate, quiet_ms=quiet_ms, clock=clock)
        self.passes = 0

    @property
    def debug(self) -> bool:
        return self.log.enabled

    @debug.setter
    def debug(self, value: bool) -> None:
        self.log.enabled = bool(value)

    # 事件入口
    def notify(self, reason: str = "mutation") -> None:
        self.scheduler.notify(reason)

    def tick(self) -> bool:
        """由事件循环反复调用：到期则评估一次，并处理提示框过期。"""
        reason = self.scheduler.last_reason
        ran = self.scheduler.poll()
        if ran:
            self.log("Evaluation pass", {"reason": reason, "passes": self.passes})
        self.notices.expire(self.scheduler.now())
        return ran

    def handle_message(self, data: Any) -> bool:
        value = parse_debug_message(data)
        if value is None:
            return False
        self.debug = value
        # 关闭时也要打印这一行
        DebugLog("quizdetect", enabled=True)(f"Debug mode {'enabled' if value else 'disabled'}")
        self.scheduler.notify("debug")
        return True

    # 评估
    def locate_question(self) -> Any:
        return self.catalog.locate(self.doc, ContentRole.QUESTION, log=self.log)

    def evaluate(self) -> EvaluationResult:
        self.passes += 1
        question_el = self.locate_question()
        state = detect_submission(self.doc)
        answer_el = state.answer_node

        question_text = extract_text(self.doc, question_el)
        answer_text = extract_text(self.doc, answer_el)

        signature = self.tracker.compute(question_text, answer_text)
        changed = self.tracker.update(signature)
        if changed:
            # 新题：旧按钮必须先消失，之后才允许重新创建
            self.affordance.remove()

        result = EvaluationResult(
            ready=False,
            signature=signature,
            signature_changed=changed,
            question_text=question_text,
            answer_text=answer_text,
            question_node=question_el,
            state=state,
        )

        if not state.is_chosen or answer_el is None or not answer_text:
            self.log("Answer not chosen yet", state.summary())
            self.affordance.remove()
            return result
        if not question_text:
            self.log("No question text detected", {"questionText": question_text})
            self.affordance.remove()
            return result

        result.ready = True
        if not self.affordance.has_trigger():
            result.trigger_created = self.affordance.ensure(answer_el if answer_el is not None else question_el)
        return result

    # 导出
    def build_payload(self):
        return build_note_payload(self.doc, self.settings, log=self.log)

    def export(self, send: RelaySend) -> bool:
        button = self.affordance.trigger
        now = self.scheduler.now()
        self.affordance.set_busy(True, button)
        self.notices.show("Sending to Anki…", now=now)
        try:
            payload = self.build_payload()
            if payload is None:
                raise ExportError("MISSING_FIELDS", "build", "Missing question or answer text")
            try:
                response = send({"kind": EXPORT_REQUEST, "payload": payload.to_payload()})
            except Exception as e:
                raise ExportError("RELAY_ERROR", "send", str(e) or "Could not reach AnkiConnect") from e
            if not isinstance(response, dict) or not response.get("ok"):
                err = response.get("error") if isinstance(response, dict) else None
                raise ExportError("RELAY_ERROR", "send", str(err or "AnkiConnect request failed"))
            self.notices.show("Saved to Anki", now=self.scheduler.now())
            return True
        except ExportError as e:
            print(f"[ERROR] Passmed2Anki {e}")
            self.notices.show(e.message or "Could not reach AnkiConnect", True, now=self.scheduler.now())
            return False
        finally:
            self.affordance.set_busy(False, button)

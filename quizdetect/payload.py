"""导出请求构建（Pydantic）。

作用：从当前页面读取题干、正确选项与解释，组装 AnkiConnect addNote 请求。
输入：PageDocument、Settings。
输出：NoteRequest；必填字段（题干 HTML / 解释 HTML）为空时返回 None。
依赖：pydantic
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

try:  # 优先包内相对导入
    from .answer_state import find_result_alert, question_root
    from .config import Settings
    from .constants import (
        ANKI_CONNECT_VERSION,
        ANSWER_OPTION_NODES,
        AUX_WIDGET_SELECTORS,
        BACK_SEPARATOR,
        CORRECT_STYLE_CLASSES,
        CORRECT_STYLE_MARKERS,
        PROVENANCE_TAG,
        QUESTION_ANCHOR,
    )
    from .document import PageDocument
    from .extract import extract_clean_html, normalize_html
    from .utils import dedupe
except Exception:  # 兼容脚本直接运行
    from answer_state import find_result_alert, question_root  # type: ignore
    from config import Settings  # type: ignore
    from constants import (  # type: ignore
        ANKI_CONNECT_VERSION,
        ANSWER_OPTION_NODES,
        AUX_WIDGET_SELECTORS,
        BACK_SEPARATOR,
        CORRECT_STYLE_CLASSES,
        CORRECT_STYLE_MARKERS,
        PROVENANCE_TAG,
        QUESTION_ANCHOR,
    )
    from document import PageDocument  # type: ignore
    from extract import extract_clean_html, normalize_html  # type: ignore
    from utils import dedupe  # type: ignore


class NoteFields(BaseModel):
    Front: str
    Back: str


class NoteOptions(BaseModel):
    allowDuplicate: bool = False


class Note(BaseModel):
    deckName: str
    modelName: str
    fields: NoteFields
    tags: List[str] = Field(default_factory=list)
    options: NoteOptions = Field(default_factory=NoteOptions)


class NoteParams(BaseModel):
    note: Note


class NoteRequest(BaseModel):
    action: str = "addNote"
    version: int = ANKI_CONNECT_VERSION
    params: NoteParams

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump()


def extract_question_html(doc: PageDocument) -> str:
    # 只取最具体的锚点，不走启发式
    node = doc.query_one(QUESTION_ANCHOR)
    if node is None:
        return ""
    return normalize_html(doc.inner_html(node))


def extract_explanation_html(doc: PageDocument) -> str:
    alert = find_result_alert(doc, include_generic=True)
    return extract_clean_html(doc, alert, AUX_WIDGET_SELECTORS)


def is_correct_styled(doc: PageDocument, node: Any) -> bool:
    style = (doc.get_attribute(node, "style") or "").lower()
    if any(m in style for m in CORRECT_STYLE_MARKERS):
        return True
    classes = doc.class_list(node)
    return any(c in classes for c in CORRECT_STYLE_CLASSES)


def extract_correct_option_html(doc: PageDocument) -> str:
    options = doc.query_all(ANSWER_OPTION_NODES, question_root(doc))
    best = next((o for o in options if is_correct_styled(doc, o)), None)
    if best is None:
        return ""
    # 第一个 span 是选项文字，避开后面的百分比徽章
    label = doc.query_one("span", best)
    return normalize_html(doc.inner_html(label if label is not None else best))


def build_note_payload(
    doc: PageDocument,
    settings: Optional[Settings] = None,
    *,
    log: Optional[Callable[..., None]] = None,
) -> Optional[NoteRequest]:
    settings = settings or Settings()
    question_html = extract_question_html(doc)
    explanation_html = extract_explanation_html(doc)
    correct_html = extract_correct_option_html(doc)

    if not question_html or not explanation_html:
        if log is not None:
            log("Missing fields for Anki payload", {
                "hasQuestion": bool(question_html),
                "hasExplanation": bool(explanation_html),
            })
        return None

    back_html = BACK_SEPARATOR.join(p for p in (correct_html, explanation_html) if p)
    tags = dedupe(settings.tag_list() + [PROVENANCE_TAG])
    return NoteRequest(
        params=NoteParams(
            note=Note(
                deckName=settings.deck_name,
                modelName=settings.note_type,
                fields=NoteFields(Front=question_html, Back=back_html),
                tags=tags,
                options=NoteOptions(allowDuplicate=False),
            )
        )
    )

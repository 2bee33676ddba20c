from __future__ import annotations

"""
answer_state

判断“是否已提交答案”。页面没有权威的提交标志，这里融合多个弱信号：
- 结果提示框：可见的 success（绿）或 danger（红）alert；
- 选项判分样式：题目容器下的选项带绿/红条背景图、实线边框或 success/danger 状态类；
- 热度徽章：popularity_badge* 或 .score-badge；
- 提交按钮 #submit_answer 是否仍然可见。

融合规则（保持原样，不加强也不放宽）：
    is_chosen = alert 存在 AND (判分样式 OR 热度徽章 OR 提交按钮不可见)
通用 role=alert 只用于导出时提取解释内容，不参与 is_chosen 判定。
"""

from dataclasses import dataclass
from typing import Any, Dict

try:  # 优先包内相对导入
    from .catalog import find_visible
    from .constants import (
        ALERT_DANGER_SELECTORS,
        ALERT_GENERIC_SELECTORS,
        ALERT_SUCCESS_SELECTORS,
        OPTION_NODES,
        POPULARITY_BADGES,
        QUESTION_CONTAINER,
        RESULT_STYLE_CLASSES,
        RESULT_STYLE_MARKERS,
        SUBMIT_BUTTON,
    )
    from .document import PageDocument
except Exception:  # 兼容脚本直接运行
    from catalog import find_visible  # type: ignore
    from constants import (  # type: ignore
        ALERT_DANGER_SELECTORS,
        ALERT_GENERIC_SELECTORS,
        ALERT_SUCCESS_SELECTORS,
        OPTION_NODES,
        POPULARITY_BADGES,
        QUESTION_CONTAINER,
        RESULT_STYLE_CLASSES,
        RESULT_STYLE_MARKERS,
        SUBMIT_BUTTON,
    )
    from document import PageDocument  # type: ignore


@dataclass
class SubmissionState:
    is_chosen: bool
    answer_node: Any = None
    has_result_styled_option: bool = False
    has_popularity_badges: bool = False
    submit_button_visible: bool = False

    def summary(self) -> Dict[str, Any]:
        return {
            "isChosen": self.is_chosen,
            "hasAlertEl": self.answer_node is not None,
            "hasResultStyledOption": self.has_result_styled_option,
            "hasPopularityBadges": self.has_popularity_badges,
            "submitButtonVisible": self.submit_button_visible,
        }


def fuse_chosen(alert_present: bool, styled_option: bool, popularity_badges: bool, submit_visible: bool) -> bool:
    return bool(alert_present) and (bool(styled_option) or bool(popularity_badges) or not submit_visible)


def question_root(doc: PageDocument) -> Any:
    return doc.query_one(QUESTION_CONTAINER) or doc.body()


def find_result_alert(doc: PageDocument, *, include_generic: bool = False) -> Any:
    el = find_visible(doc, ALERT_SUCCESS_SELECTORS) or find_visible(doc, ALERT_DANGER_SELECTORS)
    if el is None and include_generic:
        el = find_visible(doc, ALERT_GENERIC_SELECTORS)
    return el


def is_result_styled(doc: PageDocument, node: Any) -> bool:
    style = (doc.get_attribute(node, "style") or "").lower()
    if any(m in style for m in RESULT_STYLE_MARKERS):
        return True
    classes = doc.class_list(node)
    return any(c in classes for c in RESULT_STYLE_CLASSES)


def has_result_styled_option(doc: PageDocument, root: Any = None) -> bool:
    base = root if root is not None else question_root(doc)
    return any(is_result_styled(doc, n) for n in doc.query_all(OPTION_NODES, base))


def has_popularity_badges(doc: PageDocument, root: Any = None) -> bool:
    base = root if root is not None else question_root(doc)
    return any(doc.query_one(sel, base) is not None for sel in POPULARITY_BADGES)


def submit_button_visible(doc: PageDocument) -> bool:
    return doc.is_visible(doc.query_one(SUBMIT_BUTTON))


def detect_submission(doc: PageDocument) -> SubmissionState:
    alert = find_result_alert(doc)
    root = question_root(doc)
    styled = has_result_styled_option(doc, root)
    badges = has_popularity_badges(doc, root)
    submit_visible = submit_button_visible(doc)
    return SubmissionState(
        is_chosen=fuse_chosen(alert is not None, styled, badges, submit_visible),
        answer_node=alert,
        has_result_styled_option=styled,
        has_popularity_badges=badges,
        submit_button_visible=submit_visible,
    )

"""
quizdetect.signature
题目签名：题干与解析文本各取前 120 字符拼接，用来识别“换了一道题”。
每轮评估重新计算，不落盘。
"""

from __future__ import annotations

try:  # 优先包内相对导入
    from .constants import SIGNATURE_CHARS, SIGNATURE_SEPARATOR
except Exception:  # 兼容脚本直接运行
    from constants import SIGNATURE_CHARS, SIGNATURE_SEPARATOR  # type: ignore


def compute_signature(question_text: str, answer_text: str, limit: int = SIGNATURE_CHARS) -> str:
    return f"{(question_text or '')[:limit]}{SIGNATURE_SEPARATOR}{(answer_text or '')[:limit]}"


class SignatureTracker:
    def __init__(self, limit: int = SIGNATURE_CHARS) -> None:
        self.limit = limit
        self.last = ""

    def compute(self, question_text: str, answer_text: str) -> str:
        return compute_signature(question_text, answer_text, self.limit)

    def update(self, signature: str) -> bool:
        """记录新签名；与上一次不同则返回 True。"""
        if signature == self.last:
            return False
        self.last = signature
        return True

"""
quizdetect.errors
中文异常类型定义。

提供 ExportError 作为导出流程（构建 payload / 发送到 relay）的统一错误封装，
便于在失败时向页面提示并打印日志。
"""

from dataclasses import dataclass


@dataclass
class ExportError(Exception):
    """导出失败。

    code: 错误码（如 MISSING_FIELDS/RELAY_ERROR 等）
    stage: 出错阶段（build/send）
    message: 人类可读的错误信息（直接展示在页面提示中）
    """

    code: str
    stage: str
    message: str

    def __str__(self) -> str:  # pragma: no cover
        return f"[{self.code}@{self.stage}] {self.message}"

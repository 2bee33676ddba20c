from __future__ import annotations

"""
quizdetect.config

集中管理用户设置（牌组/笔记类型/标签）与运行参数。
- Settings：只读的用户偏好，缺失或空白时回退默认值；
- RuntimeConfig：从 PM2A_* 环境变量读取（会先尽力加载 .env）。
"""

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from dotenv import load_dotenv

try:  # 优先包内相对导入
    from .constants import ANKI_CONNECT_ENDPOINT, DEFAULT_SETTINGS, NOTICE_MS, QUIET_MS
    from .utils import split_tags
except Exception:  # 兼容脚本直接运行
    from constants import ANKI_CONNECT_ENDPOINT, DEFAULT_SETTINGS, NOTICE_MS, QUIET_MS  # type: ignore
    from utils import split_tags  # type: ignore


def _env_file_candidates() -> List[str]:
    """.env 查找顺序：PM2A_ENV_FILE、CWD/.env、仓库根目录 .env。"""
    here = os.path.dirname(__file__)
    return [
        os.getenv("PM2A_ENV_FILE", "").strip(),
        os.path.join(os.getcwd(), ".env"),
        os.path.abspath(os.path.join(here, os.pardir, ".env")),
    ]


def _load_dotenv_if_needed() -> None:
    # 先加载者优先：override=False 不覆盖已有变量
    for path in _env_file_candidates():
        if path and os.path.isfile(path):
            load_dotenv(path, override=False)


def _clean(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


@dataclass
class Settings:
    """用户设置（对引擎只读）。"""

    deck_name: str = DEFAULT_SETTINGS["deckName"]
    note_type: str = DEFAULT_SETTINGS["noteType"]
    tags: str = DEFAULT_SETTINGS["tags"]

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "Settings":
        """接受 deckName/noteType/tags 键；空白或非字符串回退默认值。"""
        raw = raw or {}
        return cls(
            deck_name=_clean(raw.get("deckName")) or DEFAULT_SETTINGS["deckName"],
            note_type=_clean(raw.get("noteType")) or DEFAULT_SETTINGS["noteType"],
            tags=_clean(raw.get("tags")) or DEFAULT_SETTINGS["tags"],
        )

    def tag_list(self) -> List[str]:
        return split_tags(self.tags)

    def to_dict(self) -> Dict[str, str]:
        return {"deckName": self.deck_name, "noteType": self.note_type, "tags": self.tags}


def load_settings(path: Optional[str]) -> Settings:
    """读取设置 JSON；文件缺失、无法解析或不是对象时使用默认值（不报错）。"""
    raw: Any = None
    if path and os.path.isfile(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            print(f"[config] settings file ignored: {path}: {e}")
    return Settings.from_mapping(raw if isinstance(raw, dict) else None)


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class RuntimeConfig:
    """运行参数（监视循环 / relay）。"""

    endpoint: str = ANKI_CONNECT_ENDPOINT
    quiet_ms: int = QUIET_MS
    poll_ms: int = 50
    notice_ms: int = NOTICE_MS
    debug: bool = False
    settings_path: Optional[str] = None
    settings: Settings = field(default_factory=Settings)

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """从环境变量构造配置，给出合理缺省值。"""
        _load_dotenv_if_needed()
        settings_path = os.getenv("PM2A_SETTINGS_FILE", "").strip() or None
        return cls(
            endpoint=os.getenv("PM2A_ANKI_ENDPOINT", "").strip() or ANKI_CONNECT_ENDPOINT,
            quiet_ms=max(0, _env_int("PM2A_QUIET_MS", QUIET_MS)),
            poll_ms=max(1, _env_int("PM2A_POLL_MS", 50)),
            notice_ms=max(0, _env_int("PM2A_NOTICE_MS", NOTICE_MS)),
            debug=_env_bool("PM2A_DEBUG", False),
            settings_path=settings_path,
            settings=load_settings(settings_path),
        )

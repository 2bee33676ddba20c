#!/usr/bin/env python3
"""
Watch a quiz page and offer "Add to Anki" once a question has been answered.

Opens the page in a headed browser (or attaches over CDP, see quizbrowser.env),
installs the page bridge and runs the cooperative loop:
  pump Playwright events -> apply queued debug messages / trigger clicks
  -> let the debounced evaluation fire -> expire notices.

Usage:
  python -m quizbrowser.watch --url https://www.passmedicine.com/... \
    [--settings settings.json] [--cookies-file cookies.json] [--debug] [--headless]

Settings JSON: {"deckName": "...", "noteType": "...", "tags": "a,b"}
Environment: PM2A_ANKI_ENDPOINT, PM2A_QUIET_MS, PM2A_POLL_MS, PM2A_DEBUG, PM2A_SETTINGS_FILE
"""

from __future__ import annotations

import argparse
import time
from typing import Any, List, Optional

from quizdetect.config import RuntimeConfig, load_settings
from quizdetect.constants import TRIGGER_ACTION
from quizdetect.engine import QuizEngine

from .bridge import bind_click, install_bridge
from .env import load_cookies_file, make_page
from .pw_document import PWDocument
from .relay import NoteSinkRelay


class WatchSession:
    """Owns the engine for the current document and the queues filled by page callbacks.

    Callbacks only enqueue; all engine work happens in step(), so evaluation
    passes and exports never interleave.
    """

    def __init__(self, page, config: RuntimeConfig, *, relay: Optional[NoteSinkRelay] = None) -> None:
        self.page = page
        self.config = config
        self.relay = relay or NoteSinkRelay(config.endpoint, verbose=config.debug)
        self._messages: List[Any] = []
        self._actions: List[Any] = []
        self._reset = False
        self.engine = self._new_engine()

    def _new_engine(self) -> QuizEngine:
        return QuizEngine(
            PWDocument(self.page),
            settings=self.config.settings,
            quiet_ms=self.config.quiet_ms,
            notice_ms=self.config.notice_ms,
            debug=self.config.debug,
            on_trigger_created=lambda node: bind_click(node, TRIGGER_ACTION),
        )

    # page callbacks
    def on_notify(self, reason: Any = None) -> None:
        self.engine.notify(str(reason or "mutation"))

    def on_message(self, data: Any) -> None:
        self._messages.append(data)

    def on_action(self, action: Any) -> None:
        self._actions.append(action)

    def on_document(self, *_: Any) -> None:
        # 新文档：旧句柄全部失效，引擎状态随之丢弃
        self._reset = True

    def install(self) -> None:
        install_bridge(self.page, on_notify=self.on_notify, on_message=self.on_message, on_action=self.on_action)
        self.page.on("domcontentloaded", self.on_document)
        self.engine.notify("start")

    def step(self) -> bool:
        """Apply queued work and let the engine tick; returns False when the step failed.

        A failure (typically the execution context destroyed by a navigation
        mid-pass) never ends the loop: the engine is rebuilt on the next step.
        """
        try:
            self._step()
            return True
        except Exception as e:
            print(f"[watch] step failed, restarting engine: {type(e).__name__}: {e}")
            self._messages, self._actions = [], []
            self._reset = True
            return False

    def _step(self) -> None:
        if self._reset:
            self._reset = False
            self.engine = self._new_engine()
            self.engine.notify("load")
        messages, self._messages = self._messages, []
        for data in messages:
            self.engine.handle_message(data)
        actions, self._actions = self._actions, []
        for action in actions:
            if action == TRIGGER_ACTION:
                self.engine.export(self.relay.handle_message)
        self.engine.tick()


def run_watch(page, config: RuntimeConfig, *, max_seconds: Optional[float] = None) -> int:
    session = WatchSession(page, config)
    session.install()
    t0 = time.monotonic()
    while not page.is_closed():
        try:
            page.wait_for_timeout(config.poll_ms)
        except Exception:
            # 页面被用户关闭
            break
        session.step()
        if max_seconds is not None and time.monotonic() - t0 >= max_seconds:
            break
    print(f"[watch] stopped passes={session.engine.passes}")
    return 0


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Watch a quiz page and export answered questions to Anki")
    ap.add_argument("--url", default=None, help="Start URL (omit when attaching over CDP to an open page)")
    ap.add_argument("--settings", default=None, help="Settings JSON (deckName/noteType/tags)")
    ap.add_argument("--cookies-file", default=None, help="Cookies JSON to pre-load into the browser context")
    ap.add_argument("--endpoint", default=None, help="AnkiConnect endpoint (default: http://127.0.0.1:8765)")
    ap.add_argument("--debug", action="store_true", help="Verbose engine logging")
    ap.add_argument("--headless", dest="headless", action="store_true", help="Run headless (default: headed)")
    ap.add_argument("--max-seconds", type=float, default=None, help="Stop after N seconds (default: until the page closes)")
    ap.set_defaults(headless=False)
    return ap.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    config = RuntimeConfig.from_env()
    if args.settings:
        config.settings_path = args.settings
        config.settings = load_settings(args.settings)
    if args.endpoint:
        config.endpoint = args.endpoint
    if args.debug:
        config.debug = True
    try:
        cookies = load_cookies_file(args.cookies_file)
    except Exception as e:
        print(f"[ERROR] cookies-file load error: {e}")
        return 2
    print(f"[watch] deck={config.settings.deck_name} model={config.settings.note_type} endpoint={config.endpoint}")
    with make_page(args.url, headless=args.headless, cookies=cookies) as page:
        return run_watch(page, config, max_seconds=args.max_seconds)


if __name__ == "__main__":
    raise SystemExit(main())

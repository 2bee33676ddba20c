"""
Playwright page factory used by the watch loop.

Three backends, selected by environment variables:
  - local (default)   launch Chromium on this machine
  - cdp               attach to an already running (logged-in) Chrome over CDP;
                      the first existing context/page is reused
  - remote_ws         connect to a `playwright run-server` instance

Usage:
  from quizbrowser.env import make_page
  with make_page(url, headless=False) as page:
      ...
"""

from __future__ import annotations

from contextlib import contextmanager
import json as _json
import os
from typing import Any, Dict, Iterator, List, Optional

# 用于在 CDP 模式下手动解析 http://host:port/json/version
import urllib.request as _urllib_request

from playwright.sync_api import sync_playwright


CDP_BACKENDS = {"cdp", "remote_cdp"}
WS_BACKENDS = {"remote_ws", "remote", "connect"}
# sameSite: 'Lax' | 'Strict' | 'None'
COOKIE_EXTRAS = ("expires", "httpOnly", "secure", "sameSite")


def sanitize_cookies(cookies: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Keep the cookies Playwright accepts: a name plus either url or domain (path defaults to "/")."""
    out: List[Dict[str, Any]] = []
    for c in cookies or []:
        if not isinstance(c, dict) or not str(c.get("name") or "").strip():
            continue
        item: Dict[str, Any] = {"name": str(c["name"]).strip(), "value": str(c.get("value") or "").strip()}
        if c.get("url"):
            item["url"] = str(c["url"])
        elif c.get("domain"):
            item.update(domain=str(c["domain"]), path=str(c.get("path") or "/"))
        else:
            continue
        item.update({k: c[k] for k in COOKIE_EXTRAS if k in c})
        out.append(item)
    return out


def load_cookies_file(path: Optional[str]) -> List[Dict[str, Any]]:
    """Read a cookies JSON export (list, or {"cookies": [...]}) and sanitize it."""
    if not path:
        return []
    with open(path, "r", encoding="utf-8") as f:
        data = _json.load(f)
    if isinstance(data, dict):
        data = data.get("cookies") or []
    return sanitize_cookies(data if isinstance(data, list) else [])


def resolve_cdp_ws_url(endpoint: str) -> str:
    """给定一个 CDP 端点，尽力解析出可用的 webSocketDebuggerUrl。

    支持两种形式：
      - http://host:9222      → 通过 /json/version 解析 webSocketDebuggerUrl
      - ws://host:9222/...    → 直接返回
    """
    ep = (endpoint or "").strip()
    if ep.startswith("ws://") or ep.startswith("wss://"):
        return ep
    if not ep.startswith("http://") and not ep.startswith("https://"):
        return f"ws://{ep}"
    try:
        url = ep.rstrip("/") + "/json/version"
        with _urllib_request.urlopen(url, timeout=3.0) as resp:  # type: ignore[arg-type]
            data = resp.read().decode("utf-8", errors="ignore")
        meta = _json.loads(data) if data else {}
        ws = meta.get("webSocketDebuggerUrl") or ""
        if isinstance(ws, str) and ws.strip():
            return ws.strip()
    except Exception:
        pass
    return ep


@contextmanager
def make_page(
    url: Optional[str] = None,
    *,
    headless: bool = False,
    slow_mo: Optional[int] = None,
    default_timeout_ms: Optional[int] = None,
    auto_close: bool = True,
    cookies: Optional[List[Dict[str, Any]]] = None,
) -> Iterator[Any]:
    """Context manager yielding a Playwright Page (headed by default, the user answers questions in it).

    远程浏览器支持：
      - PM2A_BROWSER_BACKEND=remote_ws 且设置 PM2A_PLAYWRIGHT_REMOTE_WS → pw.chromium.connect()
      - PM2A_BROWSER_BACKEND=cdp 且设置 PM2A_PLAYWRIGHT_CDP_URL → connect_over_cdp()，复用现有页面
    """
    with sync_playwright() as pw:
        backend = os.getenv("PM2A_BROWSER_BACKEND", "local").strip().lower()
        remote_ws = os.getenv("PM2A_PLAYWRIGHT_REMOTE_WS", "").strip()
        cdp_url = os.getenv("PM2A_PLAYWRIGHT_CDP_URL", "").strip()

        if backend in WS_BACKENDS and remote_ws:
            browser = pw.chromium.connect(remote_ws)
        elif backend in CDP_BACKENDS and cdp_url:
            browser = pw.chromium.connect_over_cdp(resolve_cdp_ws_url(cdp_url))
        else:
            browser = pw.chromium.launch(headless=headless, slow_mo=(slow_mo or 0))

        # CDP 模式下复用现有 context/page（已登录的会话），其他模式新建
        if backend in CDP_BACKENDS and browser.contexts:
            context = browser.contexts[0]
        else:
            context = browser.new_context()
        ck = sanitize_cookies(cookies)
        if ck:
            context.add_cookies(ck)
        if backend in CDP_BACKENDS and context.pages:
            page = context.pages[0]
        else:
            page = context.new_page()
        if isinstance(default_timeout_ms, int) and default_timeout_ms > 0:
            page.set_default_timeout(int(default_timeout_ms))
        if url:
            page.goto(url, wait_until="domcontentloaded")
        try:
            yield page
        finally:
            # CDP 模式保持远程 Chrome 与用户的标签页打开
            if auto_close and backend not in CDP_BACKENDS:
                try:
                    if not page.is_closed():
                        page.close()
                except Exception:
                    pass
                try:
                    context.close()
                except Exception:
                    pass
                try:
                    browser.close()
                except Exception:
                    pass

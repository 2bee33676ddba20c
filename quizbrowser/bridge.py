"""
In-page bridge between the quiz page and the Python engine.

The page side (installed with add_init_script, so it survives navigations):
  - a MutationObserver on document.body (childList/subtree + class/style/
    hidden/aria-hidden attributes), plus hashchange/popstate listeners,
    all reported through the `notify` binding;
  - a same-origin `message` listener forwarding object payloads through
    the `message` binding (the engine decides what it understands);
  - a small stylesheet for the trigger button and the notice.

Trigger clicks are wired per element with bind_click(); they call the
`action` binding with the action name.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict

NOTIFY_BINDING = "__pm2aNotify"
MESSAGE_BINDING = "__pm2aMessage"
ACTION_BINDING = "__pm2aAction"

BRIDGE_CSS = """
#pm-anki-button { margin: 8px 0; padding: 6px 12px; border-radius: 4px; border: 1px solid #2b6cb0;
  background: #3182ce; color: #fff; font-weight: 600; cursor: pointer; }
#pm-anki-button[disabled] { opacity: 0.6; cursor: progress; }
#pm-anki-toast { position: fixed; right: 16px; bottom: 16px; z-index: 2147483647; padding: 10px 14px;
  border-radius: 4px; color: #fff; background: #2f855a; display: none; font: 14px sans-serif; }
#pm-anki-toast[data-state='error'] { background: #c53030; }
#pm-anki-toast.visible { display: block; }
"""

BRIDGE_JS = """
(cfg) => {
  if (window.__pm2aBridgeInstalled) return;
  window.__pm2aBridgeInstalled = true;
  // exposed bindings return promises
  const call = (name, arg) => {
    try { const f = window[name]; if (f) Promise.resolve(f(arg)).catch(() => {}); } catch (_) {}
  };
  const notify = (reason) => call(cfg.notify, reason);
  const start = () => {
    if (!document.body) return;
    const style = document.createElement('style');
    style.id = 'pm-anki-style';
    style.textContent = cfg.css;
    (document.head || document.documentElement).appendChild(style);
    const observer = new MutationObserver(() => notify('mutation'));
    observer.observe(document.body, {
      childList: true, subtree: true, attributes: true,
      attributeFilter: ['class', 'style', 'hidden', 'aria-hidden']
    });
    notify('init');
  };
  if (document.readyState === 'loading') {
    document.addEventListener('DOMContentLoaded', start, { once: true });
  } else {
    start();
  }
  window.addEventListener('hashchange', () => notify('hashchange'), { passive: true });
  window.addEventListener('popstate', () => notify('popstate'), { passive: true });
  window.addEventListener('message', (event) => {
    if (event.source !== window) return;
    const data = event.data;
    if (!data || typeof data !== 'object') return;
    call(cfg.message, data);
  }, false);
}
"""

_BIND_CLICK_JS = """
(el, p) => {
  el.addEventListener('click', (event) => {
    event.preventDefault();
    try { const f = window[p.binding]; if (f) Promise.resolve(f(p.action)).catch(() => {}); } catch (_) {}
  });
}
"""


def bridge_config() -> Dict[str, Any]:
    return {"notify": NOTIFY_BINDING, "message": MESSAGE_BINDING, "css": BRIDGE_CSS}


def install_bridge(
    page,
    *,
    on_notify: Callable[[Any], None],
    on_message: Callable[[Any], None],
    on_action: Callable[[Any], None],
) -> None:
    """Expose the three bindings and install the page-side script (future documents and the current one)."""
    page.expose_function(NOTIFY_BINDING, on_notify)
    page.expose_function(MESSAGE_BINDING, on_message)
    page.expose_function(ACTION_BINDING, on_action)
    cfg = bridge_config()
    page.add_init_script(script=f"({BRIDGE_JS})({json.dumps(cfg)})")
    page.evaluate(BRIDGE_JS, cfg)


def bind_click(node, action: str) -> None:
    node.evaluate(_BIND_CLICK_JS, {"binding": ACTION_BINDING, "action": action})

"""
NoteSink relay: forwards a prepared export request to AnkiConnect.

Message protocol:
  request   {"kind": "EXPORT_REQUEST", "payload": NoteRequest-dict}
  response  {"ok": True, "result": ...} | {"ok": False, "error": "..."}

Messages that are not dicts or carry another kind are not ours: the relay
returns None for them. One HTTP POST per request, no retries; the transport's
own timeout applies unless one is configured.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

import urllib.request as _urllib_request

from quizdetect.constants import ANKI_CONNECT_ENDPOINT, EXPORT_REQUEST


class NoteSinkRelay:
    def __init__(self, endpoint: str = ANKI_CONNECT_ENDPOINT, *, timeout: Optional[float] = None, verbose: bool = False) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self.verbose = verbose

    def _v(self, msg: str) -> None:
        if self.verbose:
            print(f"[relay] {msg}")

    def post(self, payload: Dict[str, Any]) -> Any:
        body = json.dumps(payload).encode("utf-8")
        req = _urllib_request.Request(
            self.endpoint,
            data=body,
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        if self.timeout is None:
            resp_cm = _urllib_request.urlopen(req)
        else:
            resp_cm = _urllib_request.urlopen(req, timeout=float(self.timeout))
        with resp_cm as resp:
            data = resp.read().decode("utf-8")
        return json.loads(data) if data else {}

    def handle_message(self, message: Any) -> Optional[Dict[str, Any]]:
        if not isinstance(message, dict) or message.get("kind") != EXPORT_REQUEST:
            return None
        payload = message.get("payload")
        if not isinstance(payload, dict):
            return {"ok": False, "error": "Missing payload"}
        self._v(f"POST {self.endpoint} action={payload.get('action')}")
        try:
            doc = self.post(payload)
        except Exception as e:
            self._v(f"transport error={type(e).__name__}: {e}")
            return {"ok": False, "error": str(e) or type(e).__name__}
        if isinstance(doc, dict) and doc.get("error"):
            self._v(f"api error={doc.get('error')}")
            return {"ok": False, "error": str(doc.get("error"))}
        result = doc.get("result") if isinstance(doc, dict) else None
        self._v(f"ok result={result}")
        return {"ok": True, "result": result}

    __call__ = handle_message

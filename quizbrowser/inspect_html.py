#!/usr/bin/env python3
"""
Run one detection pass over a saved page snapshot (dom.html) and report.

Useful to check a new layout variant offline: which node was taken as the
question, whether the answer counts as submitted and which signals fired,
and (with --payload) the AnkiConnect request that would be sent.

Usage:
  python -m quizbrowser.inspect_html --html-file dom.html [--payload] \
    [--settings settings.json] [--report report.json] [--debug]

Exit code 0 when the page is ready for export, else 1.
"""

from __future__ import annotations

import argparse
import json
from typing import Any, Dict, Optional

from quizdetect.catalog import ContentRole
from quizdetect.config import load_settings
from quizdetect.engine import QuizEngine
from quizdetect.extract import extract_options_text, extract_text
from quizdetect.soup_document import SoupDocument


def _preview(text: str, limit: int = 200) -> str:
    return text if len(text) <= limit else text[:limit] + "…"


def inspect_document(doc: SoupDocument, *, settings=None, with_payload: bool = False, debug: bool = False) -> Dict[str, Any]:
    engine = QuizEngine(doc, settings=settings, debug=debug)
    res = engine.evaluate()
    answer_panel = engine.catalog.locate(doc, ContentRole.ANSWER, log=engine.log)
    report: Dict[str, Any] = {
        "ready": res.ready,
        "signature": res.signature,
        "question": _preview(res.question_text),
        "answer": _preview(res.answer_text),
        "answer_panel": _preview(extract_text(doc, answer_panel)),
        "options": extract_options_text(doc, engine.catalog).splitlines(),
        "state": res.state.summary() if res.state else {},
        "trigger_inserted": engine.affordance.has_trigger(),
    }
    if with_payload:
        payload = engine.build_payload()
        report["payload"] = payload.to_payload() if payload is not None else None
    return report


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Inspect a saved quiz page snapshot")
    ap.add_argument("--html-file", required=True, help="Path to the saved page HTML")
    ap.add_argument("--settings", default=None, help="Settings JSON (deckName/noteType/tags)")
    ap.add_argument("--payload", action="store_true", help="Also build the AnkiConnect request")
    ap.add_argument("--report", default=None, help="Write the report JSON to this path")
    ap.add_argument("--debug", action="store_true", help="Verbose engine logging")
    return ap.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    try:
        doc = SoupDocument.from_file(args.html_file)
    except Exception as e:
        print(f"[ERROR] failed to load html_file: {e}")
        return 2
    report = inspect_document(doc, settings=load_settings(args.settings), with_payload=args.payload, debug=args.debug)
    if args.report:
        with open(args.report, "w", encoding="utf-8") as f:
            json.dump(report, f, ensure_ascii=False, indent=2)
    print(json.dumps(report, ensure_ascii=False, indent=2))
    return 0 if report.get("ready") else 1


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

from typing import Optional

import pytest

from quizdetect.engine import QuizEngine
from quizdetect.soup_document import SoupDocument

QUESTION = "What is the first-line treatment for X?"
# exactly 80 characters
ALERT_TEXT = "Correct. First-line treatment for X is drug Y, as recommended by the guidelines."

GREEN_STYLE = "background-image: url('/images/greenbar.png'); background-repeat: no-repeat"
RED_STYLE = "background-image: url('/images/redbar.png')"


def quiz_html(
    *,
    question: str = QUESTION,
    alert: Optional[str] = "success",
    alert_text: str = ALERT_TEXT,
    alert_extra: str = "",
    styled: bool = True,
    badge: bool = False,
    submit_visible: bool = True,
    option_a: str = "Drug Y",
) -> str:
    styled_attr = f' style="{GREEN_STYLE}"' if styled else ""
    badge_html = '<span id="popularity_badge_1" class="badge">42%</span>' if badge else ""
    if alert:
        role = ' role="alert"' if alert == "generic" else ""
        cls = "alert" if alert == "generic" else f"alert alert-{alert}"
        alert_html = f'<div class="{cls}"{role}>{alert_text}{alert_extra}</div>'
    else:
        alert_html = ""
    submit_style = "" if submit_visible else ' style="display: none"'
    return f"""
<html>
  <head><title>Passmedicine</title></head>
  <body>
    <nav><a href="/">Home</a></nav>
    <div id="div_question">
      <div id="question_only"><p>{question}</p></div>
      <div class="list-group">
        <a class="list-group-item" href="#"{styled_attr}><span>{option_a}</span> <span class="badge">61%</span></a>
        <a class="list-group-item" href="#"><span>Drug Z</span> <span class="badge">39%</span></a>
      </div>
      {badge_html}
      {alert_html}
      <button id="submit_answer"{submit_style}>Submit answer</button>
    </div>
  </body>
</html>
"""


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.t = start

    def __call__(self) -> float:
        return self.t

    def advance_ms(self, ms: float) -> None:
        self.t += ms / 1000.0


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_doc():
    def _make(html: Optional[str] = None, **kwargs) -> SoupDocument:
        return SoupDocument(html if html is not None else quiz_html(**kwargs))

    return _make


@pytest.fixture
def make_engine(clock):
    def _make(doc: SoupDocument, **kwargs) -> QuizEngine:
        kwargs.setdefault("clock", clock)
        return QuizEngine(doc, **kwargs)

    return _make

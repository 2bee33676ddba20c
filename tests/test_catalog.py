from quizdetect import catalog as catalog_mod
from quizdetect.catalog import ContentRole, SelectorCatalog, find_visible
from quizdetect.soup_document import SoupDocument


def test_first_visible_match_in_priority_order():
    doc = SoupDocument(
        "<html><body>"
        "<div class='b' id='b1'>b</div>"
        "<div class='a' id='a1' style='display:none'>hidden a</div>"
        "<div class='a' id='a2'>visible a</div>"
        "</body></html>"
    )
    el = find_visible(doc, [".a", ".b"])
    assert el["id"] == "a2"


def test_document_order_within_one_selector():
    doc = SoupDocument("<html><body><p class='x' id='one'>1</p><p class='x' id='two'>2</p></body></html>")
    assert find_visible(doc, [".x"])["id"] == "one"


def test_empty_and_rejected_selectors_are_skipped():
    doc = SoupDocument("<html><body><p class='x' id='one'>1</p></body></html>")
    assert find_visible(doc, ["", "p[", ".x"])["id"] == "one"
    assert find_visible(doc, [".missing"]) is None


def test_question_found_by_catalog_never_runs_heuristic(monkeypatch, make_doc):
    calls = []
    monkeypatch.setattr(catalog_mod, "scan", lambda *a, **k: calls.append(a))
    doc = make_doc()
    el = SelectorCatalog().locate(doc, ContentRole.QUESTION)
    assert el["id"] == "question_only"
    assert calls == []


def test_heuristic_runs_when_catalog_finds_nothing():
    body = (
        "<section><div id='outer'>Question 3 of 10"
        "<div id='inner'>Question: a 54-year-old man presents with crushing chest pain radiating to the arm.</div>"
        "</div></section>"
    )
    doc = SoupDocument(f"<html><body>{body}</body></html>")
    cat = SelectorCatalog()
    assert cat.find_visible(doc, ContentRole.QUESTION) is None
    el = cat.locate(doc, ContentRole.QUESTION)
    assert el["id"] == "inner"


def test_option_role_has_no_heuristic_fallback():
    doc = SoupDocument("<html><body><div>nothing here about choices</div></body></html>")
    assert SelectorCatalog().locate(doc, ContentRole.OPTIONS) is None


def test_custom_catalog_overrides_defaults():
    doc = SoupDocument("<html><body><h2 class='stem'>Which drug?</h2></body></html>")
    cat = SelectorCatalog(selectors={"question": [".stem"]}, heuristics={})
    assert cat.locate(doc, "question").name == "h2"
    assert cat.locate(doc, ContentRole.ANSWER) is None

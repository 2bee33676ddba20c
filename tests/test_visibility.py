from quizdetect.soup_document import SoupDocument
from quizdetect.visibility import hides_self, parse_inline_style


def _doc(body: str) -> SoupDocument:
    return SoupDocument(f"<html><head><script id='s'>var x = 1;</script></head><body>{body}</body></html>")


def test_parse_inline_style_lowercases_and_drops_important():
    style = parse_inline_style("Display: NONE !important; opacity:0.0; ;broken")
    assert style == {"display": "none", "opacity": "0.0"}
    assert hides_self(style)


def test_plain_element_is_visible():
    doc = _doc("<div id='a'>hello</div>")
    assert doc.is_visible(doc.query_one("#a"))


def test_hidden_styles_on_self():
    doc = _doc(
        "<div id='a' style='display:none'>x</div>"
        "<div id='b' style='visibility: hidden'>x</div>"
        "<div id='c' style='opacity: 0'>x</div>"
    )
    for sel in ("#a", "#b", "#c"):
        assert not doc.is_visible(doc.query_one(sel)), sel


def test_ancestor_display_none_and_hidden_attribute():
    doc = _doc(
        "<div style='display:none'><span id='a'>x</span></div>"
        "<section hidden><p id='b'>x</p></section>"
        "<div class='d-none'><p id='c'>x</p></div>"
    )
    for sel in ("#a", "#b", "#c"):
        assert not doc.is_visible(doc.query_one(sel)), sel


def test_visibility_is_inherited_but_can_be_overridden():
    doc = _doc(
        "<div style='visibility:hidden'>"
        "<p id='a'>inherits</p>"
        "<p id='b' style='visibility: visible'>overrides</p>"
        "</div>"
    )
    assert not doc.is_visible(doc.query_one("#a"))
    assert doc.is_visible(doc.query_one("#b"))


def test_ancestor_opacity_does_not_hide_descendants():
    doc = _doc("<div style='opacity:0'><p id='a'>x</p></div>")
    assert doc.is_visible(doc.query_one("#a"))


def test_none_detached_and_non_rendered_nodes():
    doc = _doc("<div id='a'>x</div><input id='h' type='hidden' value='1'>")
    assert not doc.is_visible(None)
    assert not doc.is_visible(doc.query_one("#s"))
    assert not doc.is_visible(doc.query_one("#h"))
    el = doc.query_one("#a")
    doc.remove(el)
    assert not doc.is_visible(el)


def test_inner_text_skips_hidden_content_and_breaks_blocks():
    doc = _doc(
        "<div id='root'>"
        "  <div>First   line</div>"
        "  <div><div>Second</div></div>"
        "  <span style='display:none'>secret</span>"
        "  <p>Para</p>"
        "</div>"
    )
    assert doc.inner_text(doc.query_one("#root")) == "First line\nSecond\n\nPara"

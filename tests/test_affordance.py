from quizdetect.affordance import AffordanceController, NoticeController
from quizdetect.soup_document import SoupDocument


def _doc():
    return SoupDocument("<html><body><div id='wrap'><p id='anchor'>a</p></div></body></html>")


def test_ensure_inserts_before_anchor_once():
    doc = _doc()
    ctl = AffordanceController(doc)
    assert ctl.ensure(doc.query_one("#anchor"))
    assert not ctl.ensure(doc.query_one("#anchor"))
    btn = doc.query_one("#pm-anki-button")
    assert btn is ctl.trigger
    assert btn.find_next_sibling()["id"] == "anchor"
    assert btn["data-action"] == "export"


def test_ensure_falls_back_to_body():
    doc = _doc()
    ctl = AffordanceController(doc)
    detached = doc.create_element("div", "loose")
    assert ctl.ensure(detached)
    assert ctl.trigger.parent is doc.body()

    other = AffordanceController(_doc())
    assert other.ensure(None)
    assert other.trigger.parent.name == "body"


def test_stray_copies_are_purged_on_create():
    doc = SoupDocument(
        "<html><body><button id='pm-anki-button'>old</button><p id='anchor'>a</p>"
        "<button id='pm-anki-button'>older</button></body></html>"
    )
    ctl = AffordanceController(doc)
    ctl.ensure(doc.query_one("#anchor"))
    assert doc.query_all("#pm-anki-button") == [ctl.trigger]


def test_remove_is_idempotent():
    doc = _doc()
    ctl = AffordanceController(doc)
    assert not ctl.remove()
    ctl.ensure(doc.query_one("#anchor"))
    assert ctl.remove()
    assert not ctl.remove()
    assert doc.query_one("#pm-anki-button") is None


def test_busy_toggles_disabled_attribute():
    doc = _doc()
    ctl = AffordanceController(doc)
    ctl.set_busy(True)
    ctl.ensure(doc.query_one("#anchor"))
    ctl.set_busy(True)
    assert ctl.trigger["disabled"] == "disabled"
    ctl.set_busy(False)
    assert not ctl.trigger.has_attr("disabled")


def test_notice_show_and_expire():
    doc = _doc()
    notices = NoticeController(doc, notice_ms=1000)
    assert not notices.expire(10.0)
    notices.show("Saved to Anki", now=10.0)
    node = doc.query_one("#pm-anki-toast")
    assert node.get_text() == "Saved to Anki"
    assert node["data-state"] == "success"
    assert "visible" in doc.class_list(node)

    notices.show("Nope", True, now=10.5)
    assert doc.query_all("#pm-anki-toast") == [node]
    assert node["data-state"] == "error"
    assert not notices.expire(11.0)
    assert notices.expire(11.5)
    assert "visible" not in doc.class_list(node)

from conftest import ALERT_TEXT, QUESTION, quiz_html
from quizdetect.config import Settings
from quizdetect.payload import (
    NoteRequest,
    build_note_payload,
    extract_correct_option_html,
    extract_question_html,
)
from quizdetect.soup_document import SoupDocument


def test_full_request_shape(make_doc):
    request = build_note_payload(make_doc())
    assert isinstance(request, NoteRequest)
    assert request.to_payload() == {
        "action": "addNote",
        "version": 6,
        "params": {
            "note": {
                "deckName": "Passmedicine",
                "modelName": "Basic",
                "fields": {
                    "Front": f"<p>{QUESTION}</p>",
                    "Back": f"Drug Y<br><br>{ALERT_TEXT}",
                },
                "tags": ["passmedicine", "passmed2anki"],
                "options": {"allowDuplicate": False},
            }
        },
    }


def test_missing_explanation_yields_none(make_doc):
    logged = []
    doc = make_doc(alert=None)
    assert extract_question_html(doc) == f"<p>{QUESTION}</p>"
    assert build_note_payload(doc, log=lambda msg, extra=None: logged.append((msg, extra))) is None
    assert logged == [("Missing fields for Anki payload", {"hasQuestion": True, "hasExplanation": False})]


def test_missing_question_anchor_yields_none():
    # the outer container alone is not enough for the front of the card
    doc = SoupDocument(quiz_html().replace('id="question_only"', 'id="stem"'))
    assert extract_question_html(doc) == ""
    assert build_note_payload(doc) is None


def test_generic_alert_is_used_for_the_explanation(make_doc):
    request = build_note_payload(make_doc(alert="generic"))
    assert request is not None
    assert request.params.note.fields.Back.endswith(ALERT_TEXT)


def test_back_without_correct_option(make_doc):
    request = build_note_payload(make_doc(styled=False))
    assert request.params.note.fields.Back == ALERT_TEXT


def test_correct_option_from_success_class():
    html = quiz_html(styled=False).replace(
        '<a class="list-group-item" href="#"><span>Drug Z',
        '<a class="list-group-item bg-success" href="#"><span>Drug Z',
    )
    assert extract_correct_option_html(SoupDocument(html)) == "Drug Z"


def test_correct_option_prefers_label_span_over_badge(make_doc):
    assert extract_correct_option_html(make_doc(option_a="<b>Drug</b> Y")) == "<b>Drug</b> Y"


def test_auxiliary_widgets_are_stripped_from_a_copy(make_doc):
    extra = (
        '<div id="question_concept_rating_div">Rate this concept</div>'
        '<div id="question_concept_percentile_div">Top 10%</div>'
        '<span class="rate_question_concept">*</span>'
    )
    doc = make_doc(alert_extra=extra)
    back = build_note_payload(doc).params.note.fields.Back
    assert "Rate this concept" not in back
    assert "Top 10%" not in back
    assert "rate_question_concept" not in back
    # the live page keeps its widgets
    assert doc.query_one("#question_concept_rating_div") is not None


def test_tags_are_deduplicated_in_order(make_doc):
    settings = Settings.from_mapping({"tags": " cardio, passmedicine ,cardio,, renal "})
    tags = build_note_payload(make_doc(), settings).params.note.tags
    assert tags == ["cardio", "passmedicine", "renal"]

    tags = build_note_payload(make_doc(), Settings(tags="x")).params.note.tags
    assert tags == ["x", "passmedicine"]

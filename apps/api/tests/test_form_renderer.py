"""Tests for the headless form renderer and FormState."""

import pytest

from namingops.schemas.form_config import FieldDescriptor
from namingops.services.form_renderer import ControlKind, FormState, render_form

FIELDS = [
    FieldDescriptor.model_validate(f)
    for f in [
        {"type": "content", "content": "Read this first"},
        {"name": "title", "label": "Title", "type": "text", "required": True,
         "geminiSuggest": True, "geminiHelperText": "Let Gemini help"},
        {"name": "summary", "label": "Summary", "type": "textarea"},
        {"name": "kind", "label": "Kind", "type": "select", "options": ["A", "B"],
         "defaultValue": "A"},
        {"name": "public", "label": "Public", "type": "checkbox"},
        {"name": "email", "label": "Email", "type": "email", "required": True},
        {"name": "size", "label": "Size", "type": "number"},
    ]
]


def test_one_control_per_field_in_order():
    state = FormState(FIELDS)
    controls = render_form(FIELDS, state)
    assert [c.kind for c in controls] == [
        ControlKind.CONTENT_BLOCK,
        ControlKind.TEXT_INPUT,
        ControlKind.TEXTAREA,
        ControlKind.SELECT,
        ControlKind.CHECKBOX,
        ControlKind.EMAIL_INPUT,
        ControlKind.NUMBER_INPUT,
    ]


def test_initial_values_from_defaults():
    state = FormState(FIELDS)
    assert state.get_value("title") == ""
    assert state.get_value("kind") == "A"
    assert state.get_value("public") is False


def test_initial_values_override_defaults():
    state = FormState(FIELDS, initial={"kind": "B", "title": "Falcon"})
    assert state.get_value("kind") == "B"
    assert state.get_value("title") == "Falcon"


def test_control_carries_bound_value_options_and_gemini_flags():
    state = FormState(FIELDS)
    state.set_value("title", "Falcon")
    controls = {c.name: c for c in render_form(FIELDS, state)}
    assert controls["title"].value == "Falcon"
    assert controls["title"].gemini_suggest is True
    assert controls["title"].gemini_suggest_label == "Suggest with Gemini"
    assert controls["title"].gemini_evaluate_label is None
    assert controls["title"].gemini_helper_text == "Let Gemini help"
    assert controls["kind"].options == ["A", "B"]


def test_content_block_carries_content():
    controls = render_form(FIELDS, FormState(FIELDS))
    assert controls[0].content == "Read this first"
    assert controls[0].value is None


def test_validation_errors_are_shown_inline():
    state = FormState(FIELDS)
    assert state.validate() is False
    controls = {c.name: c for c in render_form(FIELDS, state)}
    assert controls["title"].error == "Required"
    assert controls["email"].error is not None
    assert controls["summary"].error is None


def test_set_value_rechecks_only_that_field():
    state = FormState(FIELDS)
    state.set_value("email", "bad")
    assert set(state.errors) == {"email"}
    state.set_value("email", "ok@example.com")
    assert state.errors == {}


def test_set_value_unknown_field_raises():
    state = FormState(FIELDS)
    with pytest.raises(KeyError):
        state.set_value("nope", 1)


def test_submission_data_drops_blank_optional_inputs():
    state = FormState(FIELDS)
    state.set_value("title", "Falcon")
    state.set_value("email", "ok@example.com")
    assert state.submission_data() == {
        "title": "Falcon",
        "kind": "A",
        "public": False,
        "email": "ok@example.com",
    }
    assert state.validate() is True


def test_cleaned_data_coerces_numbers():
    state = FormState(FIELDS, initial={"title": "Falcon", "email": "ok@example.com", "size": "7"})
    assert state.cleaned_data()["size"] == 7.0


def test_reset_clears_values_and_errors():
    state = FormState(FIELDS)
    state.set_value("title", "Falcon")
    state.validate()
    state.reset()
    assert state.get_value("title") == ""
    assert state.errors == {}
    assert state.touched == set()

"""Headless form renderer.

Turns a form configuration into an ordered list of control descriptors bound to
a FormState. Front ends (web, CLI prompts, tests) draw the controls; the
renderer decides which control each field gets, what value it shows and which
inline error it carries.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from namingops.db.enums import FieldType
from namingops.schemas.form_config import FieldDescriptor
from namingops.services import form_schema_service


class ControlKind(str, Enum):
    TEXT_INPUT = "text_input"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    EMAIL_INPUT = "email_input"
    NUMBER_INPUT = "number_input"
    CONTENT_BLOCK = "content_block"


CONTROL_FOR_TYPE = {
    FieldType.TEXT.value: ControlKind.TEXT_INPUT,
    FieldType.TEXTAREA.value: ControlKind.TEXTAREA,
    FieldType.SELECT.value: ControlKind.SELECT,
    FieldType.CHECKBOX.value: ControlKind.CHECKBOX,
    FieldType.EMAIL.value: ControlKind.EMAIL_INPUT,
    FieldType.NUMBER.value: ControlKind.NUMBER_INPUT,
    FieldType.CONTENT.value: ControlKind.CONTENT_BLOCK,
}


@dataclass
class RenderedControl:
    kind: ControlKind
    name: str | None
    label: str | None
    value: Any = None
    required: bool = False
    options: list[str] = field(default_factory=list)
    placeholder: str | None = None
    content: str | None = None
    error: str | None = None
    gemini_suggest: bool = False
    gemini_evaluate: bool = False
    gemini_suggest_label: str | None = None
    gemini_evaluate_label: str | None = None
    gemini_helper_text: str | None = None


def _empty_value(field_type: str) -> Any:
    if field_type == FieldType.CHECKBOX.value:
        return False
    return ""


class FormState:
    """Values and validation errors for one rendering of a form configuration."""

    def __init__(
        self,
        fields: Sequence[FieldDescriptor],
        initial: Mapping[str, Any] | None = None,
    ):
        self.fields = list(fields)
        self.values: dict[str, Any] = {}
        self.errors: dict[str, str] = {}
        self.touched: set[str] = set()
        self.reset(initial)

    @property
    def input_fields(self) -> list[FieldDescriptor]:
        return [f for f in self.fields if f.name and f.type != FieldType.CONTENT.value]

    def reset(self, initial: Mapping[str, Any] | None = None) -> None:
        initial = initial or {}
        self.values = {}
        for f in self.input_fields:
            if f.name in initial:
                self.values[f.name] = initial[f.name]
            elif f.default_value is not None:
                self.values[f.name] = f.default_value
            else:
                self.values[f.name] = _empty_value(f.type)
        self.errors = {}
        self.touched = set()

    def get_value(self, name: str) -> Any:
        return self.values.get(name)

    def set_value(self, name: str, value: Any, *, validate: bool = True) -> None:
        if name not in self.values:
            raise KeyError(f"Unknown field: {name}")
        self.values[name] = value
        self.touched.add(name)
        if validate:
            # onChange mode: re-check only the edited field
            errors = form_schema_service.check_form_data(self.fields, self.submission_data())
            if name in errors:
                self.errors[name] = errors[name]
            else:
                self.errors.pop(name, None)

    def submission_data(self) -> dict[str, Any]:
        """Values as they would be submitted; blank optional inputs are left out."""
        data: dict[str, Any] = {}
        for f in self.input_fields:
            value = self.values.get(f.name)
            if value == "" and not f.required:
                continue
            if value == "" and f.type == FieldType.NUMBER.value:
                continue
            data[f.name] = value
        return data

    def validate(self) -> bool:
        self.errors = form_schema_service.check_form_data(self.fields, self.submission_data())
        return not self.errors

    def cleaned_data(self) -> dict[str, Any]:
        return form_schema_service.validate_form_data(self.fields, self.submission_data())


def render_form(fields: Sequence[FieldDescriptor], state: FormState) -> list[RenderedControl]:
    """Describe one control per field, in configuration order."""
    controls: list[RenderedControl] = []
    for f in fields:
        kind = CONTROL_FOR_TYPE.get(f.type, ControlKind.TEXT_INPUT)
        if kind is ControlKind.CONTENT_BLOCK:
            controls.append(
                RenderedControl(kind=kind, name=f.name, label=f.label, content=f.content)
            )
            continue
        controls.append(
            RenderedControl(
                kind=kind,
                name=f.name,
                label=f.label,
                value=state.get_value(f.name),
                required=f.required,
                options=list(f.options or []),
                placeholder=f.placeholder,
                error=state.errors.get(f.name),
                gemini_suggest=f.gemini_suggest,
                gemini_evaluate=f.gemini_evaluate,
                gemini_suggest_label=f.gemini_suggest_label if f.gemini_suggest else None,
                gemini_evaluate_label=f.gemini_evaluate_label if f.gemini_evaluate else None,
                gemini_helper_text=f.gemini_helper_text or None,
            )
        )
    return controls

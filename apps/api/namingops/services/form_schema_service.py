"""Dynamic validation schemas built from form configuration fields.

Each field descriptor maps to one rule keyed by its type:

- text / textarea: non-empty string when required, optional string otherwise
- email: valid email address (optional when not required)
- number: value coerced to a number (optional when not required)
- checkbox: optional boolean
- anything else (select, unknown types): passthrough

Content blocks are display-only and contribute no rule. Unknown types fall
back to passthrough, so their values are accepted unchecked.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    ValidationError,
    create_model,
)

from namingops.db.enums import FieldType
from namingops.schemas.form_config import FieldDescriptor

REQUIRED_MESSAGE = "Required"

_ERROR_MESSAGES = {
    "missing": REQUIRED_MESSAGE,
    "float_parsing": "Must be a number",
    "float_type": "Must be a number",
    "finite_number": "Must be a number",
    "bool_parsing": "Must be true or false",
    "bool_type": "Must be true or false",
    "string_type": "Must be text",
    "string_pattern_mismatch": "Invalid format",
}


@dataclass(frozen=True)
class FieldRule:
    """Normalized view of a field descriptor, as far as validation cares."""

    name: str | None
    type: str
    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None


class FormDataInvalid(ValueError):
    """Raised when form data fails the dynamic schema."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("Form data is invalid")


def _to_rule(field: FieldDescriptor | Mapping[str, Any]) -> FieldRule:
    if isinstance(field, FieldDescriptor):
        validation = field.validation
        return FieldRule(
            name=field.name,
            type=field.type,
            required=field.required,
            min_length=validation.min_length if validation else None,
            max_length=validation.max_length if validation else None,
            pattern=validation.pattern if validation else None,
        )
    validation = field.get("validation") or {}
    return FieldRule(
        name=field.get("name"),
        type=field.get("type") or field.get("fieldType") or "",
        required=bool(field.get("required", False)),
        min_length=validation.get("minLength", validation.get("min_length")),
        max_length=validation.get("maxLength", validation.get("max_length")),
        pattern=validation.get("pattern"),
    )


def _text_annotation(rule: FieldRule) -> Any:
    min_length = rule.min_length
    if rule.required:
        min_length = max(min_length or 0, 1)
    return Annotated[
        str,
        StringConstraints(
            min_length=min_length,
            max_length=rule.max_length,
            pattern=rule.pattern,
        ),
    ]


def rule_for_field(rule: FieldRule) -> tuple[Any, Any]:
    """Return (annotation, default) for one field; default ``...`` means required."""
    field_type = rule.type

    if field_type in (FieldType.TEXT.value, FieldType.TEXTAREA.value):
        annotation = _text_annotation(rule)
        if rule.required:
            return annotation, ...
        return annotation | None, None

    if field_type == FieldType.EMAIL.value:
        if rule.required:
            return EmailStr, ...
        return EmailStr | None, None

    if field_type == FieldType.NUMBER.value:
        # Lax mode coerces numeric strings ("42") to float
        if rule.required:
            return float, ...
        return float | None, None

    if field_type == FieldType.CHECKBOX.value:
        return bool | None, None

    return Any, None


def build_validation_model(
    fields: Sequence[FieldDescriptor | Mapping[str, Any]],
    *,
    partial: bool = False,
) -> type[BaseModel]:
    """Build a pydantic model validating form data for the given fields.

    Python attribute names are positional (``field_0``...) and the real field
    name is the alias, so field names never clash with BaseModel attributes.
    Keys not described by a field are dropped. With ``partial`` every field is
    treated as optional (drafts), while present values are still checked.
    """
    definitions: dict[str, Any] = {}
    for index, field in enumerate(fields):
        rule = _to_rule(field)
        if not rule.name or rule.type == FieldType.CONTENT.value:
            continue
        if partial and rule.required:
            rule = replace(rule, required=False)
        annotation, default = rule_for_field(rule)
        definitions[f"field_{index}"] = (annotation, Field(default, alias=rule.name))

    return create_model(
        "DynamicFormData",
        __config__=ConfigDict(extra="ignore", populate_by_name=False),
        **definitions,
    )


def _message_for(error: dict[str, Any]) -> str:
    error_type = error.get("type", "")
    if error_type == "string_too_short" and error.get("ctx", {}).get("min_length") == 1:
        return REQUIRED_MESSAGE
    if error_type == "value_error" and "email" in str(error.get("msg", "")).lower():
        return "Invalid email"
    return _ERROR_MESSAGES.get(error_type, error.get("msg", "Invalid value"))


def collect_errors(exc: ValidationError) -> dict[str, str]:
    """Flatten a pydantic ValidationError into {field_name: message}."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("__root__",)
        key = str(loc[0])
        errors.setdefault(key, _message_for(error))
    return errors


def validate_form_data(
    fields: Sequence[FieldDescriptor | Mapping[str, Any]],
    data: Mapping[str, Any] | None,
    *,
    partial: bool = False,
) -> dict[str, Any]:
    """Validate form data against the fields and return the cleaned values.

    Values are returned under their field names; numbers come back coerced.
    Raises FormDataInvalid with per-field messages.
    """
    if data is not None and not isinstance(data, Mapping):
        raise FormDataInvalid({"formData": "Must be an object"})
    model = build_validation_model(fields, partial=partial)
    try:
        instance = model.model_validate(dict(data or {}))
    except ValidationError as exc:
        raise FormDataInvalid(collect_errors(exc)) from exc
    return instance.model_dump(by_alias=True, exclude_unset=True)


def check_form_data(
    fields: Sequence[FieldDescriptor | Mapping[str, Any]],
    data: Mapping[str, Any] | None,
) -> dict[str, str]:
    """Return per-field errors (empty when valid)."""
    try:
        validate_form_data(fields, data)
    except FormDataInvalid as exc:
        return exc.errors
    return {}

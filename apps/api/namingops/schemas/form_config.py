"""Schemas for form configurations and their field descriptors."""

import re
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import AliasChoices, Field, field_validator, model_validator

from namingops.db.enums import FieldType
from namingops.schemas.common import CamelModel

# Field names become keys of formData; keep them identifier-like
FIELD_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class FieldValidation(CamelModel):
    min_length: int | None = Field(None, ge=0)
    max_length: int | None = Field(None, ge=0)
    pattern: str | None = None

    @field_validator("pattern")
    @classmethod
    def _pattern_compiles(cls, value: str | None) -> str | None:
        if value is None:
            return value
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"Invalid validation pattern: {exc}") from exc
        return value


class FieldDescriptor(CamelModel):
    """One field of a form configuration."""

    name: str | None = Field(None, max_length=100)
    label: str | None = Field(None, max_length=200)
    # Older clients send "fieldType"
    type: str = Field(
        ...,
        validation_alias=AliasChoices("type", "fieldType", "field_type"),
    )
    required: bool = False
    options: list[str] | None = None
    content: str | None = None
    placeholder: str | None = None
    default_value: Any | None = None
    validation: FieldValidation | None = None
    gemini_suggest: bool = False
    gemini_evaluate: bool = False
    gemini_suggest_label: str = "Suggest with Gemini"
    gemini_evaluate_label: str = "Evaluate with Gemini"
    gemini_helper_text: str = ""

    @field_validator("type")
    @classmethod
    def _known_type(cls, value: str) -> str:
        if value not in FieldType._value2member_map_:
            allowed = ", ".join(t.value for t in FieldType)
            raise ValueError(f"Unsupported field type '{value}' (expected one of: {allowed})")
        return value

    @field_validator("name", "label")
    @classmethod
    def _strip(cls, value: str | None) -> str | None:
        return value.strip() if isinstance(value, str) else value

    @model_validator(mode="after")
    def _check_shape(self) -> "FieldDescriptor":
        if self.type == FieldType.CONTENT.value:
            if not self.content:
                raise ValueError("Content is required for content fields")
            return self
        if not self.name:
            raise ValueError("Field name is required")
        if not FIELD_NAME_PATTERN.match(self.name):
            raise ValueError(
                f"Field name '{self.name}' must start with a letter or underscore "
                "and contain only letters, digits and underscores"
            )
        if not self.label:
            raise ValueError(f"Field label is required for '{self.name}'")
        if self.type == FieldType.SELECT.value:
            if not self.options:
                raise ValueError(f"Select field '{self.name}' needs at least one option")
        elif self.options:
            raise ValueError(f"Only select fields may define options ('{self.name}')")
        return self


def _check_unique_names(fields: list[FieldDescriptor]) -> list[FieldDescriptor]:
    seen: set[str] = set()
    for field in fields:
        if not field.name:
            continue
        if field.name in seen:
            raise ValueError(f"Duplicate field name '{field.name}'")
        seen.add(field.name)
    return fields


class FormConfigurationCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=150)
    description: str | None = None
    fields: list[FieldDescriptor] = Field(..., min_length=1)
    is_active: bool = False

    @field_validator("fields")
    @classmethod
    def _unique_fields(cls, value: list[FieldDescriptor]) -> list[FieldDescriptor]:
        return _check_unique_names(value)


class FormConfigurationUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=150)
    description: str | None = None
    fields: list[FieldDescriptor] | None = Field(None, min_length=1)
    is_active: bool | None = None

    @field_validator("fields")
    @classmethod
    def _unique_fields(
        cls, value: list[FieldDescriptor] | None
    ) -> list[FieldDescriptor] | None:
        return _check_unique_names(value) if value is not None else value


class FormConfigurationRead(CamelModel):
    id: UUID | str
    name: str
    description: str | None
    fields: list[FieldDescriptor]
    is_active: bool
    created_at: datetime
    updated_at: datetime

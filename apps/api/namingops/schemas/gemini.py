"""Gemini configuration and generation schemas."""

from typing import Any
from uuid import UUID

from pydantic import Field

from namingops.schemas.common import CamelModel


class GeminiConfigRead(CamelModel):
    """Admin view of the stored configuration; the key is always masked."""

    api_key: str = ""
    has_api_key: bool = False
    default_prompt: str = ""
    model: str | None = None


class GeminiConfigWrite(CamelModel):
    # Only strings are applied; omitted keys are left unchanged
    api_key: str | None = None
    default_prompt: str | None = None
    model: str | None = Field(None, max_length=100)


class PromptItemRead(CamelModel):
    id: UUID
    text: str
    active: bool


class BasePromptRead(CamelModel):
    text: str
    active: bool


class GeminiFullConfigRead(GeminiConfigRead):
    base_prompt: BasePromptRead
    principles: list[PromptItemRead] = Field(default_factory=list)
    dos: list[PromptItemRead] = Field(default_factory=list)
    donts: list[PromptItemRead] = Field(default_factory=list)


class PromptItemCreate(CamelModel):
    text: str = Field(..., min_length=1, max_length=2000)


class PromptItemUpdate(CamelModel):
    text: str | None = Field(None, min_length=1, max_length=2000)
    active: bool | None = None


class BasePromptUpdate(CamelModel):
    text: str | None = None
    active: bool | None = None


class NamingPromptRequest(CamelModel):
    prompt: str | None = None
    model: str | None = None


class NamingResponse(CamelModel):
    text: str
    names: list[str]
    model: str
    prompt: str


class EvaluateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    context: str | None = None
    model: str | None = None


class EvaluateResponse(CamelModel):
    name: str
    evaluation: str
    model: str


class ModelsResponse(CamelModel):
    models: list[dict[str, Any]]

"""Schemas for the auto-saved submission draft."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field

from namingops.schemas.common import CamelModel


class DraftWrite(CamelModel):
    form_data: dict[str, Any] = Field(default_factory=dict)
    replace: bool = False


class DraftRead(CamelModel):
    form_data: dict[str, Any]
    form_config_id: UUID | None = None
    updated_at: datetime

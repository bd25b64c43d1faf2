"""Naming request schemas."""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import Field

from namingops.db.enums import NamingRequestStatus
from namingops.schemas.common import CamelModel


class NamingRequestCreate(CamelModel):
    form_data: dict[str, Any] = Field(default_factory=dict)
    title: str | None = Field(None, max_length=255)
    status: Literal["draft", "submitted"] = "submitted"


class NamingRequestUpdate(CamelModel):
    title: str | None = Field(None, min_length=1, max_length=255)
    form_data: dict[str, Any] | None = None


class TransitionRequest(CamelModel):
    comment: str | None = Field(None, max_length=2000)


class StatusChangeRequest(CamelModel):
    status: NamingRequestStatus
    comment: str | None = Field(None, max_length=2000)


class ApproveRequest(CamelModel):
    final_approved_name: str | None = Field(None, max_length=255)
    comment: str | None = Field(None, max_length=2000)
    description: str | None = None
    service_line: str | None = Field(None, max_length=255)
    trademark: str | None = Field(None, max_length=255)
    notes: str | None = None


class StatusHistoryRead(CamelModel):
    from_status: str | None
    to_status: str
    changed_by_id: UUID | None
    changed_by_name: str | None
    comment: str | None
    changed_at: datetime


class NamingRequestRead(CamelModel):
    id: UUID
    title: str
    form_data: dict[str, Any]
    status: NamingRequestStatus
    status_history: list[StatusHistoryRead] = Field(default_factory=list)
    requestor_id: UUID
    requestor_name: str | None = None
    assigned_reviewer_id: UUID | None = None
    assigned_reviewer_name: str | None = None
    form_config_id: UUID | None = None
    final_approved_name: str | None = None
    review_comments: str | None = None
    approved_at: datetime | None = None
    is_active: bool = True
    created_at: datetime
    updated_at: datetime


class NamingRequestListResponse(CamelModel):
    items: list[NamingRequestRead]
    total: int
    page: int
    per_page: int
    pages: int


class StatsOverview(CamelModel):
    total: int
    by_status: dict[str, int]

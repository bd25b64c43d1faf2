"""Schemas for in-app notifications."""

from datetime import datetime
from uuid import UUID

from namingops.schemas.common import CamelModel


class NotificationRead(CamelModel):
    id: UUID
    type: str
    title: str
    body: str | None = None
    naming_request_id: UUID | None = None
    read_at: datetime | None = None
    created_at: datetime


class NotificationListResponse(CamelModel):
    items: list[NotificationRead]
    unread_count: int


class UnreadCountResponse(CamelModel):
    """Unread count only (for polling)."""

    count: int


class MarkAllReadResponse(CamelModel):
    marked_read: int

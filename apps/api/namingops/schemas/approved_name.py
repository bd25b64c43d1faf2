"""Approved name registry schemas."""

from datetime import datetime
from uuid import UUID

from namingops.schemas.common import CamelModel


class ApprovedNameRead(CamelModel):
    id: UUID
    name: str
    description: str | None = None
    service_line: str | None = None
    trademark: str | None = None
    contact_person: str | None = None
    notes: str | None = None
    approval_date: datetime | None = None
    naming_request_id: UUID | None = None

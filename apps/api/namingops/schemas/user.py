"""User management schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import EmailStr, Field

from namingops.db.enums import Role
from namingops.schemas.common import CamelModel


class UserCreate(CamelModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=255)
    role: Role = Role.SUBMITTER
    department: str | None = Field(None, max_length=255)


class UserUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    role: Role | None = None
    department: str | None = Field(None, max_length=255)
    is_active: bool | None = None


class UserAdminRead(CamelModel):
    id: UUID
    email: str
    name: str
    role: Role
    department: str | None = None
    picture: str | None = None
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime

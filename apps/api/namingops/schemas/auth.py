"""Authentication-related Pydantic schemas."""

from uuid import UUID

from pydantic import BaseModel, Field

from namingops.db.enums import Role
from namingops.schemas.common import CamelModel


class TokenPayload(BaseModel):
    """Decoded JWT payload structure."""
    sub: UUID  # user_id
    role: str
    token_version: int


class UserSession(BaseModel):
    """
    Session context for authenticated requests.

    Returned by get_current_session; `role` is the effective role, which in
    dev mode may come from the X-Mock-Role header instead of the user record.
    """
    user_id: UUID
    role: Role
    email: str
    name: str
    mock_role: bool = False


class GoogleLoginRequest(CamelModel):
    credential: str = Field(..., min_length=1, description="Google ID token")


class DevLoginRequest(CamelModel):
    email: str = "dev@example.com"
    name: str | None = None
    role: Role = Role.ADMIN


class UserRead(CamelModel):
    id: UUID
    email: str
    name: str
    role: Role
    picture: str | None = None
    department: str | None = None
    is_active: bool = True


class LoginResponse(CamelModel):
    token: str
    user: UserRead


class MeResponse(CamelModel):
    """Response schema for GET /auth/me."""
    id: UUID
    email: str
    name: str
    role: Role
    picture: str | None = None
    department: str | None = None
    mock_role: bool = False

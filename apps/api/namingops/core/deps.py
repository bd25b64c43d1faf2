"""FastAPI dependencies for authentication, authorization, and database access."""

import logging
from typing import Generator
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from namingops.core.config import settings
from namingops.core.security import decode_session_token
from namingops.db.session import SessionLocal

logger = logging.getLogger(__name__)

MOCK_ROLE_HEADER = "X-Mock-Role"
DEV_USER_EMAIL = "dev@example.com"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def _mock_role(request: Request):
    """Role requested through X-Mock-Role, only honoured in dev/demo mode."""
    from namingops.db.enums import Role

    if not settings.is_dev_mode:
        return None
    value = request.headers.get(MOCK_ROLE_HEADER)
    if not value:
        return None
    value = value.strip().lower()
    return Role(value) if Role.has_value(value) else Role.ADMIN


def get_current_user(request: Request, db: Session = Depends(get_db)):
    """
    Get authenticated user from the Authorization bearer token.

    Validates:
    - Bearer token exists
    - JWT is valid and not expired
    - User exists and is active
    - Token version matches (for revocation support)

    In dev/demo mode a request without a token acts as the shared dev user.

    Raises:
        HTTPException 401: Authentication failed
    """
    # Import here to avoid circular imports
    from namingops.db.models import User

    token = _bearer_token(request)
    if not token:
        if settings.is_dev_mode:
            from namingops.services import user_service

            return user_service.get_or_create_dev_user(db, DEV_USER_EMAIL)
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = decode_session_token(token)
        user_id = UUID(str(payload.get("sub")))
    except (jwt.InvalidTokenError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid session")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")

    if not user.is_active:
        raise HTTPException(status_code=401, detail="Account disabled")

    # Token version check (revocation support)
    if user.token_version != payload.get("token_version"):
        raise HTTPException(status_code=401, detail="Session revoked")

    return user


def get_current_session(request: Request, db: Session = Depends(get_db)):
    """
    Get full session context: user_id and effective role.

    This is the PRIMARY auth dependency for most endpoints.

    Raises:
        HTTPException 401: Not authenticated
        HTTPException 403: Unknown role
    """
    from namingops.db.enums import Role
    from namingops.schemas.auth import UserSession

    user = get_current_user(request, db)

    mock_role = _mock_role(request)
    if mock_role is not None:
        logger.debug("Using mock role '%s' for %s", mock_role.value, user.email)
        role = mock_role
    else:
        # Validate role is a known enum value - return 403 not 500
        if not Role.has_value(user.role):
            raise HTTPException(
                status_code=403,
                detail=f"Unknown role '{user.role}'. Contact administrator.",
            )
        role = Role(user.role)

    return UserSession(
        user_id=user.id,
        role=role,
        email=user.email,
        name=user.name,
        mock_role=mock_role is not None,
    )


def require_roles(allowed_roles):
    """
    Dependency factory for role-based authorization.

    Uses enum values (not strings) to prevent drift.

    Usage:
        @router.post("/admin", dependencies=[Depends(require_roles(ROLES_CAN_MANAGE_FORMS))])
    """
    def dependency(request: Request, db: Session = Depends(get_db)):
        session = get_current_session(request, db)
        if session.role not in allowed_roles:
            raise HTTPException(
                status_code=403,
                detail=f"Role '{session.role.value}' not authorized for this action",
            )
        return session
    return dependency


"""Authentication endpoints: Google sign-in, dev login, current user."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from namingops.core.config import settings
from namingops.core.deps import get_current_session, get_db
from namingops.core.rate_limit import limiter
from namingops.db.models import User
from namingops.schemas.auth import (
    DevLoginRequest,
    GoogleLoginRequest,
    LoginResponse,
    MeResponse,
    UserRead,
    UserSession,
)
from namingops.services import auth_service
from namingops.services.google_oauth import validate_email_domain, verify_id_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/google", response_model=LoginResponse)
@limiter.limit("10/minute")
def google_login(
    request: Request,
    data: GoogleLoginRequest,
    db: Session = Depends(get_db),
):
    """Exchange a Google ID token for a NamingOps session token."""
    try:
        info = verify_id_token(data.credential)
        validate_email_domain(info.email)
    except ValueError as e:
        logger.warning("Google sign-in rejected: %s", e)
        raise HTTPException(status_code=401, detail=str(e))

    try:
        user, token = auth_service.login_with_google(db, info)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return LoginResponse(token=token, user=UserRead.model_validate(user))


@router.post("/dev-login", response_model=LoginResponse)
def dev_login(data: DevLoginRequest, db: Session = Depends(get_db)):
    """Log in as any role without Google. Only available in dev/demo mode."""
    if not settings.is_dev_mode:
        raise HTTPException(status_code=404, detail="Not found")
    user, token = auth_service.dev_login(
        db, email=data.email, name=data.name, role=data.role
    )
    return LoginResponse(token=token, user=UserRead.model_validate(user))


@router.get("/me", response_model=MeResponse)
def me(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    user = db.get(User, session.user_id)
    return MeResponse(
        id=session.user_id,
        email=session.email,
        name=session.name,
        role=session.role,
        picture=user.picture if user else None,
        department=user.department if user else None,
        mock_role=session.mock_role,
    )

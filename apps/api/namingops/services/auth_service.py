"""Login flows: resolve a user and mint a session token."""

import logging

from sqlalchemy.orm import Session

from namingops.core.security import create_session_token
from namingops.db.enums import Role
from namingops.db.models import User
from namingops.services import user_service
from namingops.services.google_oauth import GoogleUserInfo

logger = logging.getLogger(__name__)


def issue_token(user: User) -> str:
    return create_session_token(user.id, user.role, user.token_version)


def login_with_google(db: Session, info: GoogleUserInfo) -> tuple[User, str]:
    """
    Find or create the user behind a verified Google identity.

    New users start as submitters. Raises PermissionError for disabled accounts.
    """
    user = db.query(User).filter(User.google_id == info.sub).first()
    if not user:
        user = user_service.get_user_by_email(db, info.email)

    if user is None:
        user = User(
            email=info.email,
            name=info.name or info.email.split("@")[0],
            role=Role.SUBMITTER.value,
            google_id=info.sub,
            picture=info.picture,
        )
        db.add(user)
        db.flush()
        logger.info("Created user %s from Google sign-in", user.id)
    else:
        if not user.is_active:
            raise PermissionError("Account disabled")
        user.google_id = user.google_id or info.sub
        if info.picture:
            user.picture = info.picture

    user_service.record_login(db, user)
    db.refresh(user)
    return user, issue_token(user)


def dev_login(db: Session, *, email: str, name: str | None, role: Role) -> tuple[User, str]:
    """Log in as an arbitrary user, creating it on first use. Dev/demo only."""
    user = user_service.get_user_by_email(db, email)
    if user is None:
        user = user_service.create_user(
            db, email=email, name=name or f"Dev {role.value.capitalize()}", role=role
        )
    elif user.role != role.value:
        user.role = role.value
        db.commit()
        db.refresh(user)

    user_service.record_login(db, user)
    db.refresh(user)
    return user, issue_token(user)

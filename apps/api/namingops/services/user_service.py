"""User service - user operations and session management."""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from namingops.db.enums import Role
from namingops.db.models import User

logger = logging.getLogger(__name__)


class UserNotFoundError(LookupError):
    pass


def get_user_by_id(db: Session, user_id: UUID) -> User | None:
    """Get user by ID."""
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get user by email (case-insensitive)."""
    return db.query(User).filter(User.email == email.strip().lower()).first()


def list_users(
    db: Session,
    *,
    role: str | None = None,
    search: str | None = None,
    include_inactive: bool = False,
) -> list[User]:
    query = db.query(User)
    if not include_inactive:
        query = query.filter(User.is_active.is_(True))
    if role:
        query = query.filter(User.role == role)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
    return query.order_by(User.name.asc()).all()


def create_user(
    db: Session,
    *,
    email: str,
    name: str,
    role: Role = Role.SUBMITTER,
    department: str | None = None,
) -> User:
    """Create a user. Raises ValueError when the email is taken."""
    email = email.strip().lower()
    if get_user_by_email(db, email):
        raise ValueError(f"User with email '{email}' already exists")
    user = User(email=email, name=name.strip(), role=Role(role).value, department=department)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created user %s with role %s", user.id, user.role)
    return user


def update_user(
    db: Session,
    user_id: UUID,
    *,
    name: str | None = None,
    role: Role | None = None,
    department: str | None = None,
    is_active: bool | None = None,
) -> User:
    user = get_user_by_id(db, user_id)
    if not user:
        raise UserNotFoundError("User not found")

    if name is not None:
        user.name = name.strip()
    if department is not None:
        user.department = department
    if role is not None and user.role != Role(role).value:
        user.role = Role(role).value
        # Role changes invalidate outstanding sessions
        user.token_version += 1
    if is_active is not None and user.is_active != is_active:
        user.is_active = is_active
        if not is_active:
            user.token_version += 1

    db.commit()
    db.refresh(user)
    return user


def disable_user(db: Session, user_id: UUID) -> bool:
    """
    Disable user account.

    Also revokes all sessions by bumping token_version.

    Returns:
        True if user found and disabled, False if user not found
    """
    user = get_user_by_id(db, user_id)
    if not user:
        return False

    user.is_active = False
    user.token_version += 1
    db.commit()
    return True


def revoke_all_sessions(db: Session, user_id: UUID) -> bool:
    """Revoke all sessions for a user by bumping token_version."""
    user = get_user_by_id(db, user_id)
    if not user:
        return False

    user.token_version += 1
    db.commit()
    return True


def record_login(db: Session, user: User) -> None:
    user.last_login_at = datetime.now(timezone.utc)
    db.commit()


def get_or_create_dev_user(db: Session, email: str, role: Role = Role.ADMIN) -> User:
    """Shared user acting for unauthenticated requests in dev/demo mode."""
    user = get_user_by_email(db, email)
    if user:
        return user
    user = User(email=email.lower(), name=f"Dev {role.value.capitalize()}", role=role.value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user

"""
Notification service - in-app notifications.

Provides listing and read state for the current user, plus the trigger that
tells a requestor their naming request changed status.
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from namingops.db.enums import NamingRequestStatus, NotificationType
from namingops.db.models import NamingRequest, Notification
from namingops.schemas.auth import UserSession


# =============================================================================
# Notification CRUD
# =============================================================================


def create_notification(
    db: Session,
    user_id: UUID,
    type: NotificationType,
    title: str,
    body: str | None = None,
    naming_request_id: UUID | None = None,
    *,
    commit: bool = True,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        type=type.value,
        title=title,
        body=body,
        naming_request_id=naming_request_id,
    )
    db.add(notification)
    if commit:
        db.commit()
        db.refresh(notification)
    return notification


def get_notifications(
    db: Session,
    user_id: UUID,
    unread_only: bool = False,
    limit: int = 20,
    offset: int = 0,
) -> list[Notification]:
    """Get notifications for user, newest first."""
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.read_at.is_(None))
    return query.order_by(Notification.created_at.desc()).offset(offset).limit(limit).all()


def get_unread_count(db: Session, user_id: UUID) -> int:
    return db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.read_at.is_(None),
    ).count()


def mark_read(db: Session, notification_id: UUID, user_id: UUID) -> Notification | None:
    """Mark a notification as read. Other users' notifications are not found."""
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user_id,
    ).first()

    if notification and not notification.read_at:
        notification.read_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(notification)

    return notification


def mark_all_read(db: Session, user_id: UUID) -> int:
    """Mark all notifications as read. Returns count updated."""
    count = db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.read_at.is_(None),
    ).update({"read_at": datetime.now(timezone.utc)})
    db.commit()
    return count


# =============================================================================
# Triggers (called from the naming request service)
# =============================================================================


def _status_label(status: str) -> str:
    return NamingRequestStatus(status).value.replace("_", " ")


def notify_request_update(
    db: Session,
    request: NamingRequest,
    actor: UserSession,
    from_status: str,
    to_status: str,
    comment: str | None = None,
) -> Notification | None:
    """
    Tell the requestor their request moved to a new status.

    Added to the caller's transaction; nothing is sent when requestors change
    their own request.
    """
    if request.requestor_id == actor.user_id:
        return None

    body = f"{actor.name} moved it from {_status_label(from_status)} to {_status_label(to_status)}."
    if comment:
        body = f"{body} {comment}"
    return create_notification(
        db,
        user_id=request.requestor_id,
        type=NotificationType.NAMING_REQUEST_UPDATE,
        title=f"'{request.title}' is now {_status_label(to_status)}",
        body=body,
        naming_request_id=request.id,
        commit=False,
    )

"""In-app notifications for the current user."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from namingops.core.deps import get_current_session, get_db
from namingops.schemas.auth import UserSession
from namingops.schemas.notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationRead,
    UnreadCountResponse,
)
from namingops.services import notification_service

# Mounted under /api/v1/notifications and the original /api/notifications
router = APIRouter(tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    unread_only: bool = Query(False),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    notifications = notification_service.get_notifications(
        db, session.user_id, unread_only=unread_only, limit=limit, offset=offset
    )
    return NotificationListResponse(
        items=[NotificationRead.model_validate(n) for n in notifications],
        unread_count=notification_service.get_unread_count(db, session.user_id),
    )


@router.get("/count", response_model=UnreadCountResponse)
def get_unread_count(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Get unread notification count (for polling)."""
    return UnreadCountResponse(
        count=notification_service.get_unread_count(db, session.user_id)
    )


@router.api_route(
    "/{notification_id}/read", methods=["PUT", "PATCH"], response_model=NotificationRead
)
def mark_notification_read(
    notification_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    notification = notification_service.mark_read(db, notification_id, session.user_id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return NotificationRead.model_validate(notification)


@router.post("/read-all", response_model=MarkAllReadResponse)
def mark_all_read(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    count = notification_service.mark_all_read(db, session.user_id)
    return MarkAllReadResponse(marked_read=count)

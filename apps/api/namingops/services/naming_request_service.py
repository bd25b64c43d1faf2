"""Naming request service.

Submission is validated against the active form configuration. Status changes
go through `_transition`, which checks the allowed source statuses and writes
a history entry for the timeline.

Workflow:
    draft -> submitted -> under_review <-> brand_review <-> legal_review -> approved
    any non-terminal status -> on_hold -> (status before hold)
    any non-terminal status -> cancelled
    submitted / review statuses -> draft (returned to the submitter)
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from namingops.db.enums import (
    REVIEW_STATUSES,
    ROLES_CAN_REVIEW,
    TERMINAL_STATUSES,
    NamingRequestStatus,
    Role,
)
from namingops.db.models import (
    FormConfiguration,
    NamingRequest,
    NamingRequestStatusHistory,
)
from namingops.schemas.auth import UserSession
from namingops.schemas.naming_request import (
    ApproveRequest,
    NamingRequestCreate,
    NamingRequestUpdate,
)
from namingops.services import (
    approved_name_service,
    draft_service,
    form_config_service,
    form_schema_service,
    notification_service,
)
from namingops.utils.pagination import PaginationParams, paginate_query

logger = logging.getLogger(__name__)

S = NamingRequestStatus

# formData keys that may carry the request title, in priority order
TITLE_KEYS = ("requestTitle", "title", "proposedName1")
DEFAULT_TITLE = "Untitled Request"


class NamingRequestNotFoundError(LookupError):
    pass


class TransitionError(Exception):
    """Requested status change is not allowed from the current status."""


# =============================================================================
# Helpers
# =============================================================================


def derive_title(explicit: str | None, form_data: dict[str, Any]) -> str:
    """Explicit title, else the first non-empty title-like formData value."""
    if explicit and explicit.strip():
        return explicit.strip()[:255]
    for key in TITLE_KEYS:
        value = form_data.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()[:255]
    return DEFAULT_TITLE


def _can_review(session: UserSession) -> bool:
    return session.role in ROLES_CAN_REVIEW


def _is_owner(session: UserSession, request: NamingRequest) -> bool:
    return request.requestor_id == session.user_id


def _record_history(
    db: Session,
    request: NamingRequest,
    from_status: str | None,
    to_status: str,
    session: UserSession,
    comment: str | None = None,
) -> None:
    db.add(
        NamingRequestStatusHistory(
            naming_request_id=request.id,
            from_status=from_status,
            to_status=to_status,
            changed_by_user_id=session.user_id,
            changed_by_name=session.name,
            comment=comment,
            changed_at=datetime.now(timezone.utc),
        )
    )


def _fields_for_request(db: Session, request: NamingRequest):
    """Fields of the configuration the request was filled against."""
    if request.form_config_id:
        config = db.get(FormConfiguration, request.form_config_id)
        if config:
            return form_config_service.parse_fields(config.fields_json)
    _, fields = form_config_service.get_active_fields(db)
    return fields


def _clean_draft_data(
    db: Session, form_data: dict[str, Any], request: NamingRequest | None = None
) -> tuple[UUID | None, dict[str, Any]]:
    """
    Lenient check for draft form data.

    Blank inputs are dropped before a partial validation. With no configuration
    to check against, the values are kept unvalidated.
    """
    config_id = request.form_config_id if request else None
    config = db.get(FormConfiguration, config_id) if config_id else None
    if config:
        fields = form_config_service.parse_fields(config.fields_json)
    else:
        try:
            config_id, fields = form_config_service.get_active_fields(db)
        except form_config_service.FormConfigNotFoundError:
            return None, dict(form_data)
    cleaned = form_schema_service.validate_form_data(
        fields, draft_service.present_values(form_data), partial=True
    )
    return config_id, cleaned


def _ensure_allowed(
    request: NamingRequest,
    to_status: NamingRequestStatus,
    allowed_from: frozenset | set,
) -> NamingRequestStatus:
    current = NamingRequestStatus(request.status)
    if current not in allowed_from:
        raise TransitionError(
            f"Cannot change status from '{current.value}' to '{to_status.value}'"
        )
    return current


def _transition(
    db: Session,
    request: NamingRequest,
    to_status: NamingRequestStatus,
    session: UserSession,
    *,
    allowed_from: frozenset | set,
    comment: str | None = None,
) -> NamingRequest:
    current = _ensure_allowed(request, to_status, allowed_from)
    request.status = to_status.value
    _record_history(db, request, current.value, to_status.value, session, comment)
    if comment:
        request.review_comments = comment
    notification_service.notify_request_update(
        db, request, session, current.value, to_status.value, comment
    )
    db.commit()
    db.refresh(request)
    logger.info(
        "Naming request %s: %s -> %s by %s",
        request.id,
        current.value,
        to_status.value,
        session.user_id,
    )
    return request


# =============================================================================
# Queries
# =============================================================================


def _base_query(db: Session):
    return (
        db.query(NamingRequest)
        .options(
            selectinload(NamingRequest.status_history),
            selectinload(NamingRequest.requestor),
            selectinload(NamingRequest.assigned_reviewer),
        )
        .filter(NamingRequest.is_active.is_(True))
    )


def get_request(db: Session, request_id: UUID) -> NamingRequest:
    request = _base_query(db).filter(NamingRequest.id == request_id).first()
    if not request:
        raise NamingRequestNotFoundError("Naming request not found")
    return request


def get_request_for_session(
    db: Session, request_id: UUID, session: UserSession
) -> NamingRequest:
    """Owner or reviewer/admin only."""
    request = get_request(db, request_id)
    if not (_is_owner(session, request) or _can_review(session)):
        raise PermissionError("Not allowed to view this request")
    return request


def list_my_requests(db: Session, session: UserSession) -> list[NamingRequest]:
    return (
        _base_query(db)
        .filter(NamingRequest.requestor_id == session.user_id)
        .order_by(NamingRequest.created_at.desc())
        .all()
    )


def list_requests(
    db: Session,
    session: UserSession,
    pagination: PaginationParams,
    *,
    status: NamingRequestStatus | None = None,
    search: str | None = None,
    assigned_to_me: bool = False,
) -> tuple[list[NamingRequest], int]:
    """List requests; submitters only ever see their own."""
    query = _base_query(db)
    if not _can_review(session):
        query = query.filter(NamingRequest.requestor_id == session.user_id)
    if status:
        query = query.filter(NamingRequest.status == status.value)
    if assigned_to_me:
        query = query.filter(NamingRequest.assigned_reviewer_id == session.user_id)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(
                NamingRequest.title.ilike(pattern),
                NamingRequest.final_approved_name.ilike(pattern),
            )
        )
    query = query.order_by(NamingRequest.created_at.desc())
    return paginate_query(query, pagination)


def stats_overview(db: Session) -> dict:
    rows = (
        db.query(NamingRequest.status, func.count(NamingRequest.id))
        .filter(NamingRequest.is_active.is_(True))
        .group_by(NamingRequest.status)
        .all()
    )
    by_status = {status.value: 0 for status in NamingRequestStatus}
    for status, count in rows:
        by_status[status] = count
    return {"total": sum(by_status.values()), "by_status": by_status}


# =============================================================================
# Create / update / delete
# =============================================================================


def create_request(
    db: Session, data: NamingRequestCreate, session: UserSession
) -> NamingRequest:
    """
    Create a naming request from the active form configuration.

    Drafts are checked leniently (required fields may be blank) and may be
    saved before any configuration is active. Raises FormDataInvalid with
    per-field errors, or FormConfigNotFoundError when a non-draft request
    arrives with no configuration active.
    """
    if data.status == S.DRAFT.value:
        config_id, cleaned = _clean_draft_data(db, data.form_data)
    else:
        config_id, fields = form_config_service.get_active_fields(db)
        cleaned = form_schema_service.validate_form_data(fields, data.form_data)

    request = NamingRequest(
        title=derive_title(data.title, data.form_data),
        form_data=cleaned,
        status=data.status,
        requestor_id=session.user_id,
        form_config_id=config_id,
    )
    db.add(request)
    db.flush()
    _record_history(db, request, None, data.status, session, "Request created")

    # The auto-saved draft has become a real request
    draft_service.delete_draft(db, session.user_id, commit=False)

    db.commit()
    db.refresh(request)
    logger.info("Created naming request %s (%s)", request.id, request.status)
    return request


def update_request(
    db: Session, request_id: UUID, data: NamingRequestUpdate, session: UserSession
) -> NamingRequest:
    request = get_request(db, request_id)
    owner_editing_draft = _is_owner(session, request) and request.status == S.DRAFT.value
    if not (owner_editing_draft or _can_review(session)):
        raise PermissionError("Only drafts can be edited by their owner")

    if data.form_data is not None and request.status == S.DRAFT.value:
        config_id, request.form_data = _clean_draft_data(db, data.form_data, request)
        if config_id:
            request.form_config_id = config_id
    elif data.form_data is not None:
        fields = _fields_for_request(db, request)
        request.form_data = form_schema_service.validate_form_data(fields, data.form_data)
    if data.title is not None:
        request.title = data.title.strip()
    elif data.form_data is not None:
        request.title = derive_title(None, request.form_data)

    db.commit()
    db.refresh(request)
    return request


def delete_request(db: Session, request_id: UUID, session: UserSession) -> None:
    """Soft delete: owner while draft, or admin."""
    request = get_request(db, request_id)
    owner_deleting_draft = _is_owner(session, request) and request.status == S.DRAFT.value
    if not (owner_deleting_draft or session.role == Role.ADMIN):
        raise PermissionError("Not allowed to delete this request")
    request.is_active = False
    db.commit()
    logger.info("Soft-deleted naming request %s", request.id)


# =============================================================================
# Transitions
# =============================================================================


def submit_request(
    db: Session, request_id: UUID, session: UserSession, comment: str | None = None
) -> NamingRequest:
    request = get_request(db, request_id)
    if not (_is_owner(session, request) or session.role == Role.ADMIN):
        raise PermissionError("Only the requestor can submit this request")
    if request.status == S.DRAFT.value:
        # Full validation now that the request leaves draft
        fields = _fields_for_request(db, request)
        form_schema_service.validate_form_data(fields, request.form_data)
    return _transition(
        db, request, S.SUBMITTED, session, allowed_from={S.DRAFT}, comment=comment
    )


def claim_request(
    db: Session, request_id: UUID, session: UserSession, comment: str | None = None
) -> NamingRequest:
    request = get_request(db, request_id)
    _ensure_allowed(request, S.UNDER_REVIEW, {S.SUBMITTED})
    request.assigned_reviewer_id = session.user_id
    return _transition(
        db, request, S.UNDER_REVIEW, session, allowed_from={S.SUBMITTED}, comment=comment
    )


def change_review_status(
    db: Session,
    request_id: UUID,
    to_status: NamingRequestStatus,
    session: UserSession,
    comment: str | None = None,
) -> NamingRequest:
    """Move a request among the review stages."""
    if to_status not in REVIEW_STATUSES:
        raise TransitionError(
            f"'{to_status.value}' is not a review status; use the dedicated action"
        )
    request = get_request(db, request_id)
    if request.status == to_status.value:
        raise TransitionError(f"Request is already '{to_status.value}'")
    allowed_from = REVIEW_STATUSES | {S.SUBMITTED}
    _ensure_allowed(request, to_status, allowed_from)
    if request.assigned_reviewer_id is None:
        request.assigned_reviewer_id = session.user_id
    return _transition(
        db, request, to_status, session, allowed_from=allowed_from, comment=comment
    )


def approve_request(
    db: Session, request_id: UUID, data: ApproveRequest, session: UserSession
) -> NamingRequest:
    """Approve and record the final name in the approved names registry."""
    request = get_request(db, request_id)
    allowed_from = REVIEW_STATUSES | {S.SUBMITTED}
    _ensure_allowed(request, S.APPROVED, allowed_from)

    final_name = (data.final_approved_name or "").strip() or request.title
    now = datetime.now(timezone.utc)
    request.final_approved_name = final_name
    request.approved_at = now
    if request.assigned_reviewer_id is None:
        request.assigned_reviewer_id = session.user_id

    description = data.description
    if description is None:
        raw = (request.form_data or {}).get("description")
        description = raw if isinstance(raw, str) else None

    approved_name_service.create_approved_name(
        db,
        name=final_name,
        description=description,
        service_line=data.service_line,
        trademark=data.trademark,
        contact_person=request.requestor.name if request.requestor else None,
        notes=data.notes,
        approval_date=now,
        naming_request_id=request.id,
        commit=False,
    )
    return _transition(
        db, request, S.APPROVED, session, allowed_from=allowed_from, comment=data.comment
    )


def hold_request(
    db: Session, request_id: UUID, session: UserSession, comment: str | None = None
) -> NamingRequest:
    request = get_request(db, request_id)
    holdable = set(NamingRequestStatus) - set(TERMINAL_STATUSES) - {S.ON_HOLD}
    _ensure_allowed(request, S.ON_HOLD, holdable)
    request.status_before_hold = request.status
    return _transition(
        db, request, S.ON_HOLD, session, allowed_from=holdable, comment=comment
    )


def cancel_request(
    db: Session, request_id: UUID, session: UserSession, comment: str | None = None
) -> NamingRequest:
    """Reviewers/admins may cancel any request; submitters only their own."""
    request = get_request(db, request_id)
    if not (_can_review(session) or _is_owner(session, request)):
        raise PermissionError("Not allowed to cancel this request")
    cancellable = set(NamingRequestStatus) - set(TERMINAL_STATUSES)
    return _transition(
        db, request, S.CANCELLED, session, allowed_from=cancellable, comment=comment
    )


def activate_request(
    db: Session, request_id: UUID, session: UserSession, comment: str | None = None
) -> NamingRequest:
    """Resume an on-hold request in the status it had before the hold."""
    request = get_request(db, request_id)
    target = S(request.status_before_hold) if request.status_before_hold else S.SUBMITTED
    _ensure_allowed(request, target, {S.ON_HOLD})
    request.status_before_hold = None
    return _transition(
        db, request, target, session, allowed_from={S.ON_HOLD}, comment=comment
    )


def return_request(
    db: Session, request_id: UUID, session: UserSession, comment: str | None = None
) -> NamingRequest:
    """Send a request back to its submitter as a draft."""
    request = get_request(db, request_id)
    allowed_from = REVIEW_STATUSES | {S.SUBMITTED}
    _ensure_allowed(request, S.DRAFT, allowed_from)
    request.assigned_reviewer_id = None
    return _transition(
        db, request, S.DRAFT, session, allowed_from=allowed_from, comment=comment
    )

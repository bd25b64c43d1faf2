"""Naming request endpoints.

Mounted under /api/v1/name-requests. The hold/cancel/activate actions are also
served under the older /api/name-requests prefix used by existing clients.
"""

import logging
from contextlib import contextmanager
from uuid import UUID

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from namingops.core.deps import get_current_session, get_db, require_roles
from namingops.core.structured_logging import build_log_context
from namingops.db.enums import ROLES_CAN_REVIEW, NamingRequestStatus
from namingops.db.models import NamingRequest
from namingops.schemas.auth import UserSession
from namingops.schemas.common import MessageResponse
from namingops.schemas.naming_request import (
    ApproveRequest,
    NamingRequestCreate,
    NamingRequestListResponse,
    NamingRequestRead,
    NamingRequestUpdate,
    StatsOverview,
    StatusChangeRequest,
    StatusHistoryRead,
    TransitionRequest,
)
from namingops.services import naming_request_service
from namingops.services.form_config_service import FormConfigNotFoundError
from namingops.services.form_schema_service import FormDataInvalid
from namingops.services.naming_request_service import (
    NamingRequestNotFoundError,
    TransitionError,
)
from namingops.utils.pagination import PaginationParams, get_pagination

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/name-requests", tags=["name-requests"])
legacy_router = APIRouter(prefix="/api/name-requests", tags=["name-requests"])


@contextmanager
def _service_errors():
    """Translate service exceptions into HTTP errors."""
    try:
        yield
    except FormDataInvalid as e:
        raise HTTPException(
            status_code=400,
            detail={"message": "Form data is invalid", "errors": e.errors},
        )
    except FormConfigNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NamingRequestNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except TransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _comment(data: TransitionRequest | None) -> str | None:
    return data.comment if data else None


def _to_read(request: NamingRequest) -> NamingRequestRead:
    return NamingRequestRead(
        id=request.id,
        title=request.title,
        form_data=request.form_data or {},
        status=request.status,
        status_history=[
            StatusHistoryRead(
                from_status=h.from_status,
                to_status=h.to_status,
                changed_by_id=h.changed_by_user_id,
                changed_by_name=h.changed_by_name,
                comment=h.comment,
                changed_at=h.changed_at,
            )
            for h in request.status_history
        ],
        requestor_id=request.requestor_id,
        requestor_name=request.requestor.name if request.requestor else None,
        assigned_reviewer_id=request.assigned_reviewer_id,
        assigned_reviewer_name=(
            request.assigned_reviewer.name if request.assigned_reviewer else None
        ),
        form_config_id=request.form_config_id,
        final_approved_name=request.final_approved_name,
        review_comments=request.review_comments,
        approved_at=request.approved_at,
        is_active=request.is_active,
        created_at=request.created_at,
        updated_at=request.updated_at,
    )


# =============================================================================
# Create / list / read
# =============================================================================


@router.post("", response_model=NamingRequestRead, status_code=status.HTTP_201_CREATED)
def create_naming_request(
    data: NamingRequestCreate,
    request: Request,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Submit a naming request (or save it as a draft)."""
    with _service_errors():
        naming_request = naming_request_service.create_request(db, data, session)
    logger.info(
        "Naming request created",
        extra=build_log_context(
            user_id=str(session.user_id),
            request_id=getattr(request.state, "request_id", None),
            route="/api/v1/name-requests",
            method="POST",
            entity_id=str(naming_request.id),
        ),
    )
    return _to_read(naming_request)


@router.get("", response_model=NamingRequestListResponse)
def list_naming_requests(
    status_filter: NamingRequestStatus | None = Query(None, alias="status"),
    search: str | None = Query(None, max_length=200),
    assigned_to_me: bool = Query(False, alias="assignedToMe"),
    pagination: PaginationParams = Depends(get_pagination),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """List requests. Submitters see only their own."""
    items, total = naming_request_service.list_requests(
        db,
        session,
        pagination,
        status=status_filter,
        search=search,
        assigned_to_me=assigned_to_me,
    )
    return NamingRequestListResponse(
        items=[_to_read(r) for r in items],
        total=total,
        page=pagination.page,
        per_page=pagination.per_page,
        pages=pagination.pages_for(total),
    )


@router.get("/my-requests", response_model=list[NamingRequestRead])
def list_my_requests(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return [_to_read(r) for r in naming_request_service.list_my_requests(db, session)]


@router.get("/stats/overview", response_model=StatsOverview)
def stats_overview(
    session: UserSession = Depends(require_roles(ROLES_CAN_REVIEW)),
    db: Session = Depends(get_db),
):
    return StatsOverview(**naming_request_service.stats_overview(db))


@router.get("/{request_id}", response_model=NamingRequestRead)
def get_naming_request(
    request_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    with _service_errors():
        naming_request = naming_request_service.get_request_for_session(
            db, request_id, session
        )
    return _to_read(naming_request)


@router.put("/{request_id}", response_model=NamingRequestRead)
def update_naming_request(
    request_id: UUID,
    data: NamingRequestUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    with _service_errors():
        naming_request = naming_request_service.update_request(
            db, request_id, data, session
        )
    return _to_read(naming_request)


@router.delete("/{request_id}", response_model=MessageResponse)
def delete_naming_request(
    request_id: UUID,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    with _service_errors():
        naming_request_service.delete_request(db, request_id, session)
    return MessageResponse(msg="Naming request deleted")


# =============================================================================
# Workflow transitions
# =============================================================================


@router.put("/{request_id}/submit", response_model=NamingRequestRead)
def submit_naming_request(
    request_id: UUID,
    data: TransitionRequest | None = Body(None),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    with _service_errors():
        naming_request = naming_request_service.submit_request(
            db, request_id, session, _comment(data)
        )
    return _to_read(naming_request)


@router.put("/{request_id}/claim", response_model=NamingRequestRead)
def claim_naming_request(
    request_id: UUID,
    data: TransitionRequest | None = Body(None),
    session: UserSession = Depends(require_roles(ROLES_CAN_REVIEW)),
    db: Session = Depends(get_db),
):
    with _service_errors():
        naming_request = naming_request_service.claim_request(
            db, request_id, session, _comment(data)
        )
    return _to_read(naming_request)


@router.put("/{request_id}/status", response_model=NamingRequestRead)
def change_naming_request_status(
    request_id: UUID,
    data: StatusChangeRequest,
    session: UserSession = Depends(require_roles(ROLES_CAN_REVIEW)),
    db: Session = Depends(get_db),
):
    with _service_errors():
        naming_request = naming_request_service.change_review_status(
            db, request_id, data.status, session, data.comment
        )
    return _to_read(naming_request)


@router.put("/{request_id}/approve", response_model=NamingRequestRead)
def approve_naming_request(
    request_id: UUID,
    data: ApproveRequest | None = Body(None),
    session: UserSession = Depends(require_roles(ROLES_CAN_REVIEW)),
    db: Session = Depends(get_db),
):
    with _service_errors():
        naming_request = naming_request_service.approve_request(
            db, request_id, data or ApproveRequest(), session
        )
    return _to_read(naming_request)


@router.put("/{request_id}/return", response_model=NamingRequestRead)
def return_naming_request(
    request_id: UUID,
    data: TransitionRequest | None = Body(None),
    session: UserSession = Depends(require_roles(ROLES_CAN_REVIEW)),
    db: Session = Depends(get_db),
):
    with _service_errors():
        naming_request = naming_request_service.return_request(
            db, request_id, session, _comment(data)
        )
    return _to_read(naming_request)


def hold_naming_request(
    request_id: UUID,
    data: TransitionRequest | None = Body(None),
    session: UserSession = Depends(require_roles(ROLES_CAN_REVIEW)),
    db: Session = Depends(get_db),
):
    with _service_errors():
        naming_request = naming_request_service.hold_request(
            db, request_id, session, _comment(data)
        )
    return _to_read(naming_request)


def cancel_naming_request(
    request_id: UUID,
    data: TransitionRequest | None = Body(None),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    with _service_errors():
        naming_request = naming_request_service.cancel_request(
            db, request_id, session, _comment(data)
        )
    return _to_read(naming_request)


def activate_naming_request(
    request_id: UUID,
    data: TransitionRequest | None = Body(None),
    session: UserSession = Depends(require_roles(ROLES_CAN_REVIEW)),
    db: Session = Depends(get_db),
):
    with _service_errors():
        naming_request = naming_request_service.activate_request(
            db, request_id, session, _comment(data)
        )
    return _to_read(naming_request)


for _router in (router, legacy_router):
    _router.add_api_route(
        "/{request_id}/hold", hold_naming_request,
        methods=["PATCH"], response_model=NamingRequestRead,
    )
    _router.add_api_route(
        "/{request_id}/cancel", cancel_naming_request,
        methods=["PATCH"], response_model=NamingRequestRead,
    )
    _router.add_api_route(
        "/{request_id}/activate", activate_naming_request,
        methods=["PATCH"], response_model=NamingRequestRead,
    )

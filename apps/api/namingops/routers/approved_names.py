"""Approved names registry (read-only)."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from namingops.core.deps import get_current_session, get_db
from namingops.schemas.auth import UserSession
from namingops.schemas.approved_name import ApprovedNameRead
from namingops.services import approved_name_service

router = APIRouter(tags=["approved-names"])


@router.get("/api/approved-names", response_model=list[ApprovedNameRead])
def list_approved_names(
    search: str | None = Query(None, max_length=200),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return approved_name_service.list_approved_names(db, search=search)

"""Auto-saved submission draft for the current user."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from namingops.core.deps import get_current_session, get_db
from namingops.schemas.auth import UserSession
from namingops.schemas.common import MessageResponse
from namingops.schemas.draft import DraftRead, DraftWrite
from namingops.services import draft_service
from namingops.services.form_schema_service import FormDataInvalid

router = APIRouter(prefix="/api/v1/drafts", tags=["drafts"])


@router.get("/me", response_model=DraftRead)
def get_my_draft(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    draft = draft_service.get_draft(db, session.user_id)
    if not draft:
        raise HTTPException(status_code=404, detail="No draft saved")
    return DraftRead.model_validate(draft)


@router.put("/me", response_model=DraftRead)
def save_my_draft(
    data: DraftWrite,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Merge values into the draft (or replace it with `replace: true`)."""
    try:
        draft = draft_service.upsert_draft(
            db, session.user_id, data.form_data, replace=data.replace
        )
    except FormDataInvalid as e:
        raise HTTPException(
            status_code=400,
            detail={"message": "Form data is invalid", "errors": e.errors},
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return DraftRead.model_validate(draft)


@router.delete("/me", response_model=MessageResponse)
def delete_my_draft(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    deleted = draft_service.delete_draft(db, session.user_id)
    return MessageResponse(msg="Draft deleted" if deleted else "No draft saved")

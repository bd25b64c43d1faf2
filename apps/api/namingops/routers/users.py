"""Admin user management."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from namingops.core.deps import get_db, require_roles
from namingops.db.enums import ROLES_CAN_MANAGE_USERS, Role
from namingops.schemas.auth import UserSession
from namingops.schemas.common import MessageResponse
from namingops.schemas.user import UserAdminRead, UserCreate, UserUpdate
from namingops.services import user_service
from namingops.services.user_service import UserNotFoundError

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("", response_model=list[UserAdminRead])
def list_users(
    role: Role | None = Query(None),
    search: str | None = Query(None, max_length=200),
    include_inactive: bool = Query(False, alias="includeInactive"),
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_USERS)),
    db: Session = Depends(get_db),
):
    return user_service.list_users(
        db,
        role=role.value if role else None,
        search=search,
        include_inactive=include_inactive,
    )


@router.post("", response_model=UserAdminRead, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreate,
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_USERS)),
    db: Session = Depends(get_db),
):
    try:
        return user_service.create_user(
            db, email=data.email, name=data.name, role=data.role, department=data.department
        )
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/{user_id}", response_model=UserAdminRead)
def get_user(
    user_id: UUID,
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_USERS)),
    db: Session = Depends(get_db),
):
    user = user_service.get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.put("/{user_id}", response_model=UserAdminRead)
def update_user(
    user_id: UUID,
    data: UserUpdate,
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_USERS)),
    db: Session = Depends(get_db),
):
    if user_id == session.user_id and data.role is not None and data.role != session.role:
        raise HTTPException(status_code=400, detail="Cannot change your own role")
    try:
        return user_service.update_user(
            db,
            user_id,
            name=data.name,
            role=data.role,
            department=data.department,
            is_active=data.is_active,
        )
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{user_id}", response_model=MessageResponse)
def disable_user(
    user_id: UUID,
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_USERS)),
    db: Session = Depends(get_db),
):
    """Disable the account and revoke its sessions. Requests stay attributed."""
    if user_id == session.user_id:
        raise HTTPException(status_code=400, detail="Cannot disable your own account")
    if not user_service.disable_user(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return MessageResponse(msg="User disabled")

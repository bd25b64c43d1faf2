"""Form configuration endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from namingops.core.deps import get_current_session, get_db, require_roles
from namingops.db.enums import ROLES_CAN_MANAGE_FORMS
from namingops.schemas.auth import UserSession
from namingops.schemas.common import MessageResponse
from namingops.schemas.form_config import (
    FormConfigurationCreate,
    FormConfigurationRead,
    FormConfigurationUpdate,
)
from namingops.services import form_config_service
from namingops.services.form_config_service import (
    DuplicateFormConfigError,
    FormConfigNotFoundError,
)

router = APIRouter(prefix="/api/v1/form-configurations", tags=["form-configurations"])


@router.get("/active", response_model=FormConfigurationRead)
def get_active_form_configuration(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """The configuration that drives the submission form."""
    try:
        return form_config_service.get_active_form_configuration_read(db)
    except FormConfigNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("", response_model=list[FormConfigurationRead])
def list_form_configurations(
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_FORMS)),
    db: Session = Depends(get_db),
):
    configs = form_config_service.list_form_configurations(db)
    return [form_config_service.to_read(c) for c in configs]


@router.post("", response_model=FormConfigurationRead, status_code=status.HTTP_201_CREATED)
def create_form_configuration(
    data: FormConfigurationCreate,
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_FORMS)),
    db: Session = Depends(get_db),
):
    try:
        config = form_config_service.create_form_configuration(db, data, session.user_id)
    except DuplicateFormConfigError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return form_config_service.to_read(config)


@router.get("/{config_id}", response_model=FormConfigurationRead)
def get_form_configuration(
    config_id: UUID,
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_FORMS)),
    db: Session = Depends(get_db),
):
    try:
        config = form_config_service.get_form_configuration(db, config_id)
    except FormConfigNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return form_config_service.to_read(config)


@router.put("/{config_id}", response_model=FormConfigurationRead)
def update_form_configuration(
    config_id: UUID,
    data: FormConfigurationUpdate,
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_FORMS)),
    db: Session = Depends(get_db),
):
    try:
        config = form_config_service.update_form_configuration(
            db, config_id, data, session.user_id
        )
    except FormConfigNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateFormConfigError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return form_config_service.to_read(config)


@router.delete("/{config_id}", response_model=MessageResponse)
def delete_form_configuration(
    config_id: UUID,
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_FORMS)),
    db: Session = Depends(get_db),
):
    try:
        form_config_service.delete_form_configuration(db, config_id)
    except FormConfigNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return MessageResponse(msg="Form configuration deleted")


@router.api_route(
    "/{config_id}/activate",
    methods=["PUT", "PATCH"],
    response_model=FormConfigurationRead,
)
def activate_form_configuration(
    config_id: UUID,
    session: UserSession = Depends(require_roles(ROLES_CAN_MANAGE_FORMS)),
    db: Session = Depends(get_db),
):
    """Activate this configuration and deactivate all others."""
    try:
        config = form_config_service.activate_form_configuration(
            db, config_id, session.user_id
        )
    except FormConfigNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return form_config_service.to_read(config)

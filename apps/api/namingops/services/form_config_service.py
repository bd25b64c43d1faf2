"""Form configuration service.

Admins keep any number of configurations; at most one is active and drives
the naming request submission form.
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from namingops.core.config import settings
from namingops.db.models import FormConfiguration
from namingops.schemas.form_config import (
    FieldDescriptor,
    FormConfigurationCreate,
    FormConfigurationRead,
    FormConfigurationUpdate,
)

logger = logging.getLogger(__name__)

NO_ACTIVE_CONFIG_MESSAGE = "No active form configuration found"
DEFAULT_DEV_CONFIG_ID = "default-dev-config"


class FormConfigNotFoundError(LookupError):
    pass


class DuplicateFormConfigError(ValueError):
    pass


def serialize_fields(fields: list[FieldDescriptor]) -> list[dict]:
    """Store descriptors in their wire (camelCase) shape."""
    return [f.model_dump(by_alias=True, exclude_none=True) for f in fields]


def parse_fields(fields_json: list[dict] | None) -> list[FieldDescriptor]:
    return [FieldDescriptor.model_validate(f) for f in (fields_json or [])]


def to_read(config: FormConfiguration) -> FormConfigurationRead:
    return FormConfigurationRead(
        id=config.id,
        name=config.name,
        description=config.description,
        fields=parse_fields(config.fields_json),
        is_active=config.is_active,
        created_at=config.created_at,
        updated_at=config.updated_at,
    )


def default_dev_config() -> FormConfigurationRead:
    """Built-in configuration served in dev when nothing is active."""
    now = datetime.now(timezone.utc)
    return FormConfigurationRead(
        id=DEFAULT_DEV_CONFIG_ID,
        name="Default Development Form",
        description="Default form configuration for development",
        is_active=True,
        fields=[
            FieldDescriptor(name="requestTitle", label="Request Title", type="text", required=True),
            FieldDescriptor(name="description", label="Description", type="textarea", required=True),
        ],
        created_at=now,
        updated_at=now,
    )


# =============================================================================
# Queries
# =============================================================================


def list_form_configurations(db: Session) -> list[FormConfiguration]:
    """All configurations, newest first."""
    return (
        db.query(FormConfiguration)
        .order_by(FormConfiguration.created_at.desc())
        .all()
    )


def get_form_configuration(db: Session, config_id: UUID) -> FormConfiguration:
    config = db.query(FormConfiguration).filter(FormConfiguration.id == config_id).first()
    if not config:
        raise FormConfigNotFoundError("Form configuration not found")
    return config


def get_active_form_configuration(db: Session) -> FormConfiguration | None:
    return (
        db.query(FormConfiguration)
        .filter(FormConfiguration.is_active.is_(True))
        .order_by(FormConfiguration.updated_at.desc())
        .first()
    )


def get_active_form_configuration_read(db: Session) -> FormConfigurationRead:
    """
    Active configuration as served to the submission form.

    Raises FormConfigNotFoundError when nothing is active, unless the dev
    default is enabled.
    """
    config = get_active_form_configuration(db)
    if config:
        return to_read(config)
    if settings.is_dev and settings.DEV_DEFAULT_FORM_CONFIG:
        logger.info("No active form configuration; serving dev default")
        return default_dev_config()
    raise FormConfigNotFoundError(NO_ACTIVE_CONFIG_MESSAGE)


def get_active_fields(db: Session) -> tuple[UUID | None, list[FieldDescriptor]]:
    """Fields new submissions are validated against, with the owning config id."""
    config = get_active_form_configuration(db)
    if config:
        return config.id, parse_fields(config.fields_json)
    if settings.is_dev and settings.DEV_DEFAULT_FORM_CONFIG:
        return None, default_dev_config().fields
    raise FormConfigNotFoundError(NO_ACTIVE_CONFIG_MESSAGE)


# =============================================================================
# Mutations
# =============================================================================


def _ensure_unique_name(db: Session, name: str, exclude_id: UUID | None = None) -> None:
    query = db.query(FormConfiguration).filter(FormConfiguration.name == name)
    if exclude_id:
        query = query.filter(FormConfiguration.id != exclude_id)
    if query.first():
        raise DuplicateFormConfigError(f"Form configuration '{name}' already exists")


def _deactivate_all(db: Session, exclude_id: UUID | None = None) -> None:
    query = db.query(FormConfiguration).filter(FormConfiguration.is_active.is_(True))
    if exclude_id:
        query = query.filter(FormConfiguration.id != exclude_id)
    query.update({FormConfiguration.is_active: False}, synchronize_session="fetch")


def _commit(db: Session, name: str) -> None:
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateFormConfigError(f"Form configuration '{name}' already exists") from exc


def create_form_configuration(
    db: Session,
    data: FormConfigurationCreate,
    user_id: UUID | None = None,
) -> FormConfiguration:
    name = data.name.strip()
    _ensure_unique_name(db, name)

    if data.is_active:
        _deactivate_all(db)

    config = FormConfiguration(
        name=name,
        description=data.description,
        fields_json=serialize_fields(data.fields),
        is_active=data.is_active,
        created_by_user_id=user_id,
        updated_by_user_id=user_id,
    )
    db.add(config)
    _commit(db, name)
    db.refresh(config)
    logger.info("Created form configuration %s (%d fields)", config.id, len(data.fields))
    return config


def update_form_configuration(
    db: Session,
    config_id: UUID,
    data: FormConfigurationUpdate,
    user_id: UUID | None = None,
) -> FormConfiguration:
    """Replace the supplied keys; omitted keys are left untouched."""
    config = get_form_configuration(db, config_id)
    updates = data.model_dump(exclude_unset=True)

    if "name" in updates and updates["name"] is not None:
        name = updates["name"].strip()
        _ensure_unique_name(db, name, exclude_id=config.id)
        config.name = name
    if "description" in updates:
        config.description = updates["description"]
    if data.fields is not None:
        config.fields_json = serialize_fields(data.fields)
    if updates.get("is_active") is True and not config.is_active:
        _deactivate_all(db, exclude_id=config.id)
        config.is_active = True
    elif updates.get("is_active") is False:
        config.is_active = False

    config.updated_by_user_id = user_id
    _commit(db, config.name)
    db.refresh(config)
    return config


def delete_form_configuration(db: Session, config_id: UUID) -> None:
    config = get_form_configuration(db, config_id)
    db.delete(config)
    db.commit()
    logger.info("Deleted form configuration %s", config_id)


def activate_form_configuration(
    db: Session,
    config_id: UUID,
    user_id: UUID | None = None,
) -> FormConfiguration:
    """Activate one configuration and deactivate every other, in one transaction."""
    config = get_form_configuration(db, config_id)
    _deactivate_all(db, exclude_id=config.id)
    config.is_active = True
    config.updated_by_user_id = user_id
    db.commit()
    db.refresh(config)
    logger.info("Activated form configuration %s", config.id)
    return config

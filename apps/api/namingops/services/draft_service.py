"""Draft service for submission form autosave/resume."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy.orm import Session

from namingops.db.models import NamingRequestDraft
from namingops.services import form_config_service, form_schema_service


def _is_empty_value(value: object) -> bool:
    """Treat empty strings/collections as empty; counts False/0 as non-empty."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, dict)):
        return not value
    return False


def has_content(form_data: dict[str, Any] | None) -> bool:
    return any(not _is_empty_value(v) for v in (form_data or {}).values())


def present_values(form_data: dict[str, Any]) -> dict[str, Any]:
    """Drop blank inputs so partial validation only sees what was filled in."""
    return {k: v for k, v in form_data.items() if not _is_empty_value(v)}


def get_draft(db: Session, user_id: UUID) -> NamingRequestDraft | None:
    return (
        db.query(NamingRequestDraft)
        .filter(NamingRequestDraft.user_id == user_id)
        .first()
    )


def upsert_draft(
    db: Session,
    user_id: UUID,
    form_data: dict[str, Any],
    *,
    replace: bool = False,
) -> NamingRequestDraft:
    """
    Create or update the user's draft.

    Values are merged into the stored draft unless ``replace`` is set. Only
    values that are materially present are checked (drafts don't enforce
    required); blank inputs are stored as-is.
    """
    if not isinstance(form_data, dict):
        raise ValueError("formData must be an object")

    try:
        config_id, fields = form_config_service.get_active_fields(db)
    except form_config_service.FormConfigNotFoundError:
        # Nothing to check against yet; keep the values unvalidated
        config_id, fields = None, []
    form_schema_service.validate_form_data(fields, present_values(form_data), partial=True)

    draft = get_draft(db, user_id)
    merged: dict[str, Any] = {}
    if draft and not replace and isinstance(draft.form_data, dict):
        merged.update(draft.form_data)
    merged.update(form_data)

    if not draft:
        draft = NamingRequestDraft(user_id=user_id, form_data={})
        db.add(draft)

    draft.form_data = merged
    draft.form_config_id = config_id
    draft.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(draft)
    return draft


def delete_draft(db: Session, user_id: UUID, *, commit: bool = True) -> bool:
    draft = get_draft(db, user_id)
    if not draft:
        return False
    db.delete(draft)
    if commit:
        db.commit()
    return True

"""Approved names registry."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from namingops.db.models import ApprovedName


def list_approved_names(db: Session, search: str | None = None) -> list[ApprovedName]:
    query = db.query(ApprovedName)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(
                ApprovedName.name.ilike(pattern),
                ApprovedName.description.ilike(pattern),
                ApprovedName.service_line.ilike(pattern),
            )
        )
    return query.order_by(ApprovedName.name.asc()).all()


def create_approved_name(
    db: Session,
    *,
    name: str,
    description: str | None = None,
    service_line: str | None = None,
    trademark: str | None = None,
    contact_person: str | None = None,
    notes: str | None = None,
    approval_date: datetime | None = None,
    naming_request_id: UUID | None = None,
    commit: bool = True,
) -> ApprovedName:
    entry = ApprovedName(
        name=name,
        description=description,
        service_line=service_line,
        trademark=trademark,
        contact_person=contact_person,
        notes=notes,
        approval_date=approval_date,
        naming_request_id=naming_request_id,
    )
    db.add(entry)
    if commit:
        db.commit()
        db.refresh(entry)
    return entry

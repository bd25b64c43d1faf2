"""SQLAlchemy ORM models."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from namingops.db.base import Base
from namingops.db.enums import NamingRequestStatus, Role


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Users
# =============================================================================


class User(Base):
    """Application user. Role drives which dashboard and endpoints are available."""

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        UniqueConstraint("google_id", name="uq_users_google_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), default=Role.SUBMITTER.value, nullable=False
    )
    google_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    picture: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    department: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    # Bumped to revoke every outstanding session token
    token_version: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    last_login_at: Mapped[datetime | None] = mapped_column(nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=_utcnow, onupdate=_utcnow, nullable=False
    )


# =============================================================================
# Form configurations
# =============================================================================


class FormConfiguration(Base):
    """Admin-defined field list driving the naming request submission form."""

    __tablename__ = "form_configurations"
    __table_args__ = (
        UniqueConstraint("name", name="uq_form_configurations_name"),
        Index("idx_form_configurations_active", "is_active"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Ordered list of field descriptors (see schemas.form_config.FieldDescriptor)
    fields_json: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    updated_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=_utcnow, onupdate=_utcnow, nullable=False
    )


# =============================================================================
# Naming requests
# =============================================================================


class NamingRequest(Base):
    """A proposal for a name, tracked through the review workflow."""

    __tablename__ = "naming_requests"
    __table_args__ = (
        Index("idx_naming_requests_requestor", "requestor_id"),
        Index("idx_naming_requests_status", "status"),
        Index("idx_naming_requests_reviewer", "assigned_reviewer_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    form_data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    status: Mapped[str] = mapped_column(
        String(20), default=NamingRequestStatus.DRAFT.value, nullable=False
    )
    # Status to restore when an on-hold request is re-activated
    status_before_hold: Mapped[str | None] = mapped_column(String(20), nullable=True)

    requestor_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    assigned_reviewer_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    form_config_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("form_configurations.id", ondelete="SET NULL"), nullable=True
    )

    final_approved_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    review_comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(nullable=True)
    # Soft delete
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=_utcnow, onupdate=_utcnow, nullable=False
    )

    requestor: Mapped["User"] = relationship(foreign_keys=[requestor_id])
    assigned_reviewer: Mapped["User | None"] = relationship(
        foreign_keys=[assigned_reviewer_id]
    )
    status_history: Mapped[list["NamingRequestStatusHistory"]] = relationship(
        back_populates="naming_request",
        order_by="NamingRequestStatusHistory.changed_at",
        cascade="all, delete-orphan",
    )


class NamingRequestStatusHistory(Base):
    """Tracks every status change on a naming request for the timeline."""

    __tablename__ = "naming_request_status_history"
    __table_args__ = (
        Index("idx_naming_request_history_request", "naming_request_id", "changed_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    naming_request_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("naming_requests.id", ondelete="CASCADE"), nullable=False
    )
    from_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    to_status: Mapped[str] = mapped_column(String(20), nullable=False)
    changed_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    # Snapshot so the timeline survives user deletion
    changed_by_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    changed_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)

    naming_request: Mapped["NamingRequest"] = relationship(back_populates="status_history")


class NamingRequestDraft(Base):
    """Auto-saved, not yet submitted form values. One per user."""

    __tablename__ = "naming_request_drafts"
    __table_args__ = (UniqueConstraint("user_id", name="uq_naming_request_drafts_user"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    form_config_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("form_configurations.id", ondelete="SET NULL"), nullable=True
    )
    form_data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=_utcnow, onupdate=_utcnow, nullable=False
    )


# =============================================================================
# Approved names
# =============================================================================


class ApprovedName(Base):
    """Registry entry for an approved name."""

    __tablename__ = "approved_names"
    __table_args__ = (Index("idx_approved_names_name", "name"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    service_line: Mapped[str | None] = mapped_column(String(255), nullable=True)
    trademark: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_person: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    approval_date: Mapped[datetime | None] = mapped_column(nullable=True)
    naming_request_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("naming_requests.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)


# =============================================================================
# Gemini configuration
# =============================================================================


class GeminiConfig(Base):
    """Singleton Gemini settings: stored key and prompt scaffolding."""

    __tablename__ = "gemini_config"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    api_key_encrypted: Mapped[str | None] = mapped_column(Text, nullable=True)
    default_prompt: Mapped[str] = mapped_column(Text, default="", nullable=False)
    base_prompt_text: Mapped[str] = mapped_column(
        Text,
        default="You are a creative naming assistant for NamingOps.",
        nullable=False,
    )
    base_prompt_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    model: Mapped[str | None] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=_utcnow, onupdate=_utcnow, nullable=False
    )

    items: Mapped[list["GeminiPromptItem"]] = relationship(
        back_populates="config",
        order_by="GeminiPromptItem.position",
        cascade="all, delete-orphan",
    )


class GeminiPromptItem(Base):
    """One principle / do / don't line in the Gemini prompt."""

    __tablename__ = "gemini_prompt_items"
    __table_args__ = (Index("idx_gemini_prompt_items_config_kind", "config_id", "kind"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    config_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("gemini_config.id", ondelete="CASCADE"), nullable=False
    )
    kind: Mapped[str] = mapped_column(String(20), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)

    config: Mapped["GeminiConfig"] = relationship(back_populates="items")


# =============================================================================
# Notifications
# =============================================================================


class Notification(Base):
    """In-app notification for a user, e.g. a status change on their request."""

    __tablename__ = "notifications"
    __table_args__ = (
        Index("idx_notif_user_unread", "user_id", "read_at", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Click-through target
    naming_request_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("naming_requests.id", ondelete="SET NULL"), nullable=True
    )
    read_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)

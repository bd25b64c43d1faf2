"""Enum definitions for application constants."""

from enum import Enum


class Role(str, Enum):
    """
    User roles with increasing privilege levels.

    - SUBMITTER: Creates naming requests and tracks their own
    - REVIEWER: Claims and moves requests through review
    - ADMIN: Everything above plus form configurations, users, Gemini config
    """

    SUBMITTER = "submitter"
    REVIEWER = "reviewer"
    ADMIN = "admin"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


class FieldType(str, Enum):
    """Input kinds a form configuration field can declare."""

    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    EMAIL = "email"
    NUMBER = "number"
    CONTENT = "content"


class NamingRequestStatus(str, Enum):
    """Lifecycle of a naming request."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    BRAND_REVIEW = "brand_review"
    LEGAL_REVIEW = "legal_review"
    APPROVED = "approved"
    ON_HOLD = "on_hold"
    CANCELLED = "cancelled"


class GeminiItemKind(str, Enum):
    """Prompt item lists on the Gemini configuration."""

    PRINCIPLES = "principles"
    DOS = "dos"
    DONTS = "donts"


class NotificationType(str, Enum):
    """In-app notification kinds."""

    NAMING_REQUEST_UPDATE = "naming_request_update"


# =============================================================================
# Permission sets (use these instead of comparing role strings)
# =============================================================================

ROLES_CAN_REVIEW = frozenset({Role.REVIEWER, Role.ADMIN})
ROLES_CAN_MANAGE_FORMS = frozenset({Role.ADMIN})
ROLES_CAN_MANAGE_USERS = frozenset({Role.ADMIN})
ROLES_CAN_MANAGE_GEMINI = frozenset({Role.ADMIN})

# Review stages a reviewer may move a claimed request between
REVIEW_STATUSES = frozenset(
    {
        NamingRequestStatus.UNDER_REVIEW,
        NamingRequestStatus.BRAND_REVIEW,
        NamingRequestStatus.LEGAL_REVIEW,
    }
)

TERMINAL_STATUSES = frozenset(
    {NamingRequestStatus.APPROVED, NamingRequestStatus.CANCELLED}
)

"""Service layer modules."""

from namingops.services.google_oauth import (
    GoogleUserInfo,
    validate_email_domain,
    verify_id_token,
)
from namingops.services.user_service import (
    disable_user,
    get_user_by_email,
    get_user_by_id,
    revoke_all_sessions,
)

__all__ = [
    "GoogleUserInfo",
    "validate_email_domain",
    "verify_id_token",
    "disable_user",
    "get_user_by_email",
    "get_user_by_id",
    "revoke_all_sessions",
]

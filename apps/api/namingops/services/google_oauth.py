"""Google Sign-In ID token verification."""

from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from pydantic import BaseModel

from namingops.core.config import settings


class GoogleUserInfo(BaseModel):
    """Verified user info extracted from Google ID token."""

    sub: str  # Google's unique user identifier
    email: str  # Normalized to lowercase
    name: str
    picture: str | None
    hd: str | None  # Hosted domain (Google Workspace)


def verify_id_token(token: str) -> GoogleUserInfo:
    """
    Verify a Google ID token (the `credential` from Google Sign-In).

    google-auth handles JWKS fetching, signature and standard claims
    (iss, aud, exp). We additionally require a verified email.

    Raises:
        ValueError: If any validation fails
    """
    if not settings.GOOGLE_CLIENT_ID:
        raise ValueError("GOOGLE_CLIENT_ID not configured")

    idinfo = id_token.verify_oauth2_token(
        token, google_requests.Request(), settings.GOOGLE_CLIENT_ID
    )

    if idinfo.get("iss") not in ["accounts.google.com", "https://accounts.google.com"]:
        raise ValueError("Invalid issuer")

    if not idinfo.get("email_verified"):
        raise ValueError("Email not verified by Google")

    return GoogleUserInfo(
        sub=idinfo["sub"],
        email=idinfo["email"].lower(),
        name=idinfo.get("name", ""),
        picture=idinfo.get("picture"),
        hd=idinfo.get("hd"),
    )


def validate_email_domain(email: str) -> None:
    """
    Validate email is from an allowed domain.

    Raises:
        ValueError: If domain not in allowlist
    """
    allowed = settings.allowed_domains_list
    if not allowed:
        return  # No restriction configured

    domain = email.split("@")[1].lower()
    if domain not in allowed:
        raise ValueError(
            f"Email domain '{domain}' not allowed. Allowed: {', '.join(allowed)}"
        )

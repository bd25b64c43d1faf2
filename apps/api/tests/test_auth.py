"""
Tests for session tokens, authentication dependencies and login flows.
"""

import jwt
import pytest

from namingops.core.config import settings
from namingops.core.security import create_session_token, decode_session_token
from namingops.db.models import User
from namingops.routers import auth as auth_router
from namingops.services.google_oauth import GoogleUserInfo, validate_email_domain

ME = "/api/v1/auth/me"


def _google_info(email="new.person@example.com", sub="google-123") -> GoogleUserInfo:
    return GoogleUserInfo(sub=sub, email=email, name="New Person", picture=None, hd=None)


@pytest.fixture
def dev_mode(monkeypatch):
    monkeypatch.setattr(settings, "ENV", "dev")


# =============================================================================
# Session tokens
# =============================================================================


class TestSessionToken:
    def test_roundtrip(self, admin_user):
        token = create_session_token(admin_user.id, admin_user.role, 3)
        payload = decode_session_token(token)
        assert payload["sub"] == str(admin_user.id)
        assert payload["role"] == "admin"
        assert payload["token_version"] == 3

    def test_previous_secret_still_accepted(self, admin_user, monkeypatch):
        old_token = create_session_token(admin_user.id, admin_user.role, 0)
        monkeypatch.setattr(settings, "JWT_SECRET_PREVIOUS", settings.JWT_SECRET)
        monkeypatch.setattr(settings, "JWT_SECRET", "a-brand-new-secret-for-rotation-tests")

        assert decode_session_token(old_token)["sub"] == str(admin_user.id)

    def test_unknown_secret_rejected(self, admin_user, monkeypatch):
        token = create_session_token(admin_user.id, admin_user.role, 0)
        monkeypatch.setattr(settings, "JWT_SECRET", "another-secret-entirely-for-tests")
        with pytest.raises(jwt.InvalidTokenError):
            decode_session_token(token)


# =============================================================================
# Authentication dependency
# =============================================================================


@pytest.mark.asyncio
async def test_me(client, reviewer_user, reviewer_headers):
    res = await client.get(ME, headers=reviewer_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["email"] == reviewer_user.email
    assert body["role"] == "reviewer"
    assert body["mockRole"] is False


@pytest.mark.asyncio
async def test_missing_token_is_401(client):
    res = await client.get(ME)
    assert res.status_code == 401
    assert res.json()["detail"] == "Not authenticated"


@pytest.mark.asyncio
async def test_garbage_token_is_401(client):
    res = await client.get(ME, headers={"Authorization": "Bearer not-a-jwt"})
    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid session"


@pytest.mark.asyncio
async def test_revoked_token_is_401(client, db, submitter_user, submitter_headers):
    submitter_user.token_version += 1
    db.commit()

    res = await client.get(ME, headers=submitter_headers)
    assert res.status_code == 401
    assert res.json()["detail"] == "Session revoked"


@pytest.mark.asyncio
async def test_disabled_user_is_401(client, db, submitter_user, submitter_headers):
    submitter_user.is_active = False
    db.commit()

    res = await client.get(ME, headers=submitter_headers)
    assert res.status_code == 401


@pytest.mark.asyncio
async def test_mock_role_ignored_outside_dev(client, submitter_headers):
    res = await client.get(ME, headers={**submitter_headers, "X-Mock-Role": "admin"})
    assert res.json()["role"] == "submitter"


@pytest.mark.asyncio
async def test_mock_role_applies_in_dev(client, submitter_headers, dev_mode):
    res = await client.get(ME, headers={**submitter_headers, "X-Mock-Role": "Reviewer"})
    body = res.json()
    assert body["role"] == "reviewer"
    assert body["mockRole"] is True


@pytest.mark.asyncio
async def test_unknown_mock_role_falls_back_to_admin(client, submitter_headers, dev_mode):
    res = await client.get(ME, headers={**submitter_headers, "X-Mock-Role": "wizard"})
    assert res.json()["role"] == "admin"


@pytest.mark.asyncio
async def test_no_token_in_dev_acts_as_dev_user(client, dev_mode):
    res = await client.get(ME)
    assert res.status_code == 200
    assert res.json()["email"] == "dev@example.com"

    again = await client.get(ME)
    assert again.json()["id"] == res.json()["id"]


# =============================================================================
# Login flows
# =============================================================================


@pytest.mark.asyncio
async def test_dev_login_hidden_outside_dev(client):
    res = await client.post("/api/v1/auth/dev-login", json={"role": "reviewer"})
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_dev_login_issues_usable_token(client, dev_mode):
    res = await client.post(
        "/api/v1/auth/dev-login", json={"email": "qa@example.com", "role": "reviewer"}
    )
    assert res.status_code == 200
    body = res.json()
    assert body["user"]["role"] == "reviewer"

    me = await client.get(ME, headers={"Authorization": f"Bearer {body['token']}"})
    assert me.json()["email"] == "qa@example.com"


@pytest.mark.asyncio
async def test_google_login_creates_submitter(client, db, monkeypatch):
    monkeypatch.setattr(auth_router, "verify_id_token", lambda credential: _google_info())

    res = await client.post("/api/v1/auth/google", json={"credential": "id-token"})
    assert res.status_code == 200
    body = res.json()
    assert body["user"]["email"] == "new.person@example.com"
    assert body["user"]["role"] == "submitter"

    user = db.query(User).filter(User.email == "new.person@example.com").one()
    assert user.google_id == "google-123"
    assert user.last_login_at is not None


@pytest.mark.asyncio
async def test_google_login_links_existing_user(client, db, reviewer_user, monkeypatch):
    monkeypatch.setattr(
        auth_router, "verify_id_token", lambda credential: _google_info(email=reviewer_user.email)
    )

    res = await client.post("/api/v1/auth/google", json={"credential": "id-token"})
    assert res.json()["user"]["id"] == str(reviewer_user.id)
    assert res.json()["user"]["role"] == "reviewer"


@pytest.mark.asyncio
async def test_google_login_rejects_disabled_account(client, db, reviewer_user, monkeypatch):
    reviewer_user.is_active = False
    db.commit()
    monkeypatch.setattr(
        auth_router, "verify_id_token", lambda credential: _google_info(email=reviewer_user.email)
    )

    res = await client.post("/api/v1/auth/google", json={"credential": "id-token"})
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_google_login_invalid_token_is_401(client, monkeypatch):
    def reject(credential):
        raise ValueError("Token expired")

    monkeypatch.setattr(auth_router, "verify_id_token", reject)
    res = await client.post("/api/v1/auth/google", json={"credential": "id-token"})
    assert res.status_code == 401
    assert res.json()["detail"] == "Token expired"


def test_email_domain_allowlist(monkeypatch):
    monkeypatch.setattr(settings, "ALLOWED_EMAIL_DOMAINS", "example.com, Corp.example")
    validate_email_domain("someone@corp.example")
    with pytest.raises(ValueError):
        validate_email_domain("someone@elsewhere.org")

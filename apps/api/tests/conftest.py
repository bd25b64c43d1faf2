"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, recreated for every test
- Users per role and bearer tokens for them
- HTTPX AsyncClient against the app with get_db overridden
- An active form configuration covering every field type
"""
import os
import uuid
from typing import AsyncGenerator, Generator

from cryptography.fernet import Fernet

# Configure the environment before the app (and its settings) is imported
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TESTING"] = "1"
os.environ["ENV"] = "test"
os.environ["DEMO_MODE"] = "false"
os.environ["JWT_SECRET"] = "test-jwt-secret-with-enough-length-for-hs256"
os.environ["FERNET_KEY"] = Fernet.generate_key().decode()
os.environ["GEMINI_API_KEY"] = ""
os.environ["DEV_DEFAULT_FORM_CONFIG"] = "false"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import Session

from namingops.main import app
from namingops.core.deps import get_db
from namingops.core.security import create_session_token
from namingops.db.base import Base
from namingops.db.enums import Role
from namingops.db.models import User
from namingops.db.session import SessionLocal, engine
from namingops.schemas.auth import UserSession
from namingops.schemas.form_config import FormConfigurationCreate
from namingops.services import form_config_service

TEST_FORM_FIELDS = [
    {"type": "content", "content": "Tell us about the name you need."},
    {
        "name": "requestTitle",
        "label": "Request Title",
        "type": "text",
        "required": True,
        "validation": {"minLength": 3, "maxLength": 100},
    },
    {"name": "description", "label": "Description", "type": "textarea", "required": True},
    {"name": "contactEmail", "label": "Contact Email", "type": "email", "required": True},
    {"name": "budget", "label": "Budget", "type": "number"},
    {
        "name": "projectType",
        "label": "Project Type",
        "type": "select",
        "options": ["Product", "Service"],
    },
    {"name": "externalFacing", "label": "Customer facing", "type": "checkbox"},
]


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Fresh schema per test.

    The in-memory database lives on a single shared connection (StaticPool),
    so app code may commit freely; dropping the tables resets everything.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


def _create_user(db: Session, role: Role, name: str) -> User:
    user = User(
        id=uuid.uuid4(),
        email=f"{role.value}-{uuid.uuid4().hex[:8]}@example.com",
        name=name,
        role=role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture(scope="function")
def admin_user(db: Session) -> User:
    return _create_user(db, Role.ADMIN, "Ada Admin")


@pytest.fixture(scope="function")
def reviewer_user(db: Session) -> User:
    return _create_user(db, Role.REVIEWER, "Rita Reviewer")


@pytest.fixture(scope="function")
def submitter_user(db: Session) -> User:
    return _create_user(db, Role.SUBMITTER, "Sam Submitter")


@pytest.fixture(scope="function")
def other_submitter(db: Session) -> User:
    return _create_user(db, Role.SUBMITTER, "Olive Other")


# =============================================================================
# Auth Fixtures
# =============================================================================

def auth_headers(user: User) -> dict[str, str]:
    token = create_session_token(user.id, user.role, user.token_version)
    return {"Authorization": f"Bearer {token}"}


def session_for(user: User) -> UserSession:
    return UserSession(user_id=user.id, role=Role(user.role), email=user.email, name=user.name)


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture
def reviewer_headers(reviewer_user: User) -> dict[str, str]:
    return auth_headers(reviewer_user)


@pytest.fixture
def submitter_headers(submitter_user: User) -> dict[str, str]:
    return auth_headers(submitter_user)


@pytest.fixture
def other_headers(other_submitter: User) -> dict[str, str]:
    return auth_headers(other_submitter)


@pytest.fixture
def make_session():
    """Build a UserSession for service-level tests."""
    return session_for


# =============================================================================
# Form configuration
# =============================================================================

@pytest.fixture(scope="function")
def active_config(db: Session, admin_user: User):
    data = FormConfigurationCreate.model_validate(
        {"name": "Standard Request", "fields": TEST_FORM_FIELDS, "isActive": True}
    )
    return form_config_service.create_form_configuration(db, data, admin_user.id)


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient sharing the test session; pass auth headers per request."""
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()

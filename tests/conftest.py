# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Mints Supabase-style access tokens with python-jose
# - Wires in-memory fakes into the FastAPI app via dependency_overrides
# =============================================================================

import os
import time
from uuid import UUID

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

TEST_JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ["SUPABASE_JWT_SECRET"] = TEST_JWT_SECRET
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from jose import jwt

from app.auth.verifier import TokenVerifier
from core.models.viewer import Role, Viewer
from tests.fakes import FakeDatabase, FakeStorage, seed_portal


ADMIN_ID = UUID("11111111-1111-4111-8111-111111111111")
MEMBER_ID = UUID("22222222-2222-4222-8222-222222222222")
PENDING_ID = UUID("33333333-3333-4333-8333-333333333333")
NO_PROFILE_ID = UUID("44444444-4444-4444-8444-444444444444")


def make_token(
    user_id: UUID | str,
    email: str | None = "user@example.com",
    expires_in: int = 3600,
    secret: str = TEST_JWT_SECRET,
    audience: str = "authenticated",
) -> str:
    """Sign an HS256 token shaped like a Supabase access token."""
    now = int(time.time())
    claims = {
        "sub": str(user_id),
        "aud": audience,
        "iat": now,
        "exp": now + expires_in,
        "role": "authenticated",
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, secret, algorithm="HS256")


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def db():
    """Seeded in-memory database with one user per trust level."""
    fake = FakeDatabase()
    seed_portal(fake)
    fake.set_profile(ADMIN_ID, "admin", True)
    fake.set_profile(MEMBER_ID, "member", True)
    fake.set_profile(PENDING_ID, "member", False)
    return fake


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def verifier():
    return TokenVerifier("https://test-project.supabase.co", jwt_secret=TEST_JWT_SECRET)


@pytest.fixture
def anonymous():
    return Viewer.anonymous()


@pytest.fixture
def pending_viewer():
    return Viewer(is_logged_in=True, role=Role.MEMBER, approved=False, user_id=PENDING_ID)


@pytest.fixture
def member_viewer():
    return Viewer(is_logged_in=True, role=Role.MEMBER, approved=True, user_id=MEMBER_ID)


@pytest.fixture
def admin_viewer():
    return Viewer(is_logged_in=True, role=Role.ADMIN, approved=True, user_id=ADMIN_ID)


@pytest.fixture
def tokens():
    """Access tokens keyed by trust level."""
    return {
        "admin": make_token(ADMIN_ID, "admin@example.com"),
        "member": make_token(MEMBER_ID, "member@example.com"),
        "pending": make_token(PENDING_ID, "pending@example.com"),
        "no_profile": make_token(NO_PROFILE_ID, "new@example.com"),
    }


@pytest.fixture
def client(db, storage, verifier):
    """
    TestClient with fakes injected.

    The lifespan is not entered, so no real Supabase client is created.
    """
    from fastapi.testclient import TestClient

    from app.auth.dependencies import get_token_verifier
    from app.dependencies import get_storage, get_supabase_client
    from app.main import app

    app.dependency_overrides[get_supabase_client] = lambda: db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_token_verifier] = lambda: verifier
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

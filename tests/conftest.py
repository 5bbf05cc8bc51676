"""Shared fixtures: in-memory database, locally signed session tokens and an app client."""

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from uuid import uuid4

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_JWT_SECRET = "test-jwt-secret-for-presux"

os.environ.setdefault("DB_URL", "sqlite://")
os.environ.setdefault("SUPABASE_URL", "http://auth.test")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", TEST_JWT_SECRET)
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient  # noqa: E402
from jose import jwt  # noqa: E402

from presux.core.config import settings  # noqa: E402
from presux.db.session import Base, engine  # noqa: E402
from presux.main import app  # noqa: E402


def make_token(sub: str, *, email: str | None = None, expires_in: int = 3600) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": sub,
        "aud": settings.JWT_AUDIENCE,
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
        "email": email or f"{sub[:8]}@example.com",
        "role": "authenticated",
    }
    return jwt.encode(claims, settings.SUPABASE_JWT_SECRET, algorithm="HS256")


@pytest.fixture(autouse=True)
def clean_tables():
    yield
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def user_id() -> str:
    return str(uuid4())


@pytest.fixture()
def auth_client(client, user_id):
    """Client carrying a valid session cookie for ``user_id``."""

    client.cookies.set(settings.access_cookie_name, make_token(user_id))
    return client


@pytest.fixture()
def other_client(user_id):
    """Second signed-in user, for owner-scoping checks."""

    with TestClient(app) as test_client:
        test_client.cookies.set(settings.access_cookie_name, make_token(str(uuid4())))
        yield test_client


@pytest.fixture()
def swap_provider():
    """Replace the app's identity provider for one test and restore it afterwards."""

    original = app.state.identity_provider

    def _swap(provider):
        app.state.identity_provider = provider
        return provider

    yield _swap
    app.state.identity_provider = original

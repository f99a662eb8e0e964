import asyncio
import os
import tempfile
from datetime import datetime, timedelta, timezone

# Settings are read at import time, so the environment has to be in place
# before anything from app is imported.
_TMP_DIR = tempfile.mkdtemp(prefix="posts-tests-")
DB_PATH = os.path.join(_TMP_DIR, "test.db")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_PATH}"
os.environ["RATE_LIMIT_STORAGE_URI"] = "memory://"
os.environ["FEED_RATE_LIMIT"] = "1000/minute"
os.environ["IDENTITY_JWT_KEY"] = "unit-test-secret"
os.environ["IDENTITY_JWT_ALGORITHM"] = "HS256"
os.environ["IDENTITY_SECRET_KEY"] = "sk_test"

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.schemas import AuthorProfile


class FakeIdentity:
    """In-process stand-in for the identity provider."""

    def __init__(self, profiles=None):
        self.profiles = {p.id: p for p in (profiles or [])}
        self.calls = []
        self.error = None

    def add(self, user_id, display_name=None, email=None):
        self.profiles[user_id] = AuthorProfile(
            id=user_id,
            display_name=display_name,
            email=email,
            profile_image_url=f"https://img.example.com/{user_id}.png",
        )

    async def get_user_list(self, user_ids, limit=100):
        self.calls.append((list(user_ids), limit))
        if self.error:
            raise self.error
        return [self.profiles[i] for i in user_ids[:limit] if i in self.profiles]


def make_token(user_id, expires_in=timedelta(minutes=5), key="unit-test-secret"):
    payload = {"sub": user_id, "exp": datetime.now(timezone.utc) + expires_in}
    return jwt.encode(payload, key, algorithm="HS256")


def auth_headers(user_id):
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def identity():
    fake = FakeIdentity()
    fake.add("u1", display_name="alice", email="alice@example.com")
    fake.add("u2", display_name="bob")
    return fake


@pytest.fixture
def client(identity):
    """Test client with a fresh database and a fresh post rate limiter."""
    if os.path.exists(DB_PATH):
        os.remove(DB_PATH)
    from app.dependencies import get_identity_client
    from app.main import app
    app.dependency_overrides[get_identity_client] = lambda: identity
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def server_error_client(identity):
    """Like `client`, but unexpected errors come back as responses instead of raising."""
    if os.path.exists(DB_PATH):
        os.remove(DB_PATH)
    from app.dependencies import get_identity_client
    from app.main import app
    app.dependency_overrides[get_identity_client] = lambda: identity
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def run_db():
    """Run `fn(session)` against freshly created tables and return its result."""
    from app.database import AsyncSessionLocal, engine
    from app.models import Base

    def _run(fn):
        async def _inner():
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.drop_all)
                await conn.run_sync(Base.metadata.create_all)
            try:
                async with AsyncSessionLocal() as session:
                    return await fn(session)
            finally:
                await engine.dispose()
        return asyncio.run(_inner())

    return _run

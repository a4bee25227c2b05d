# adsflow/conftest.py
import sys
import os
import pytest
from datetime import datetime, timedelta, timezone
from pathlib import Path

import jwt

# Add project root to PYTHONPATH
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("ENV", "test")

from adsflow.core.auth import IdentityResolver  # noqa: E402

TEST_JWT_SECRET = "test-secret-for-adsflow-jwt-signing-0123456789"


@pytest.fixture(scope="function")
def profile_store():
    """
    ProfileStore on a fresh in-memory SQLite database.

    Each test gets its own database; the engine is disposed afterwards.
    """
    from adsflow.core.database import init_engine, create_all_tables, drop_all_tables, dispose_engine
    from adsflow.features.profiles.store import ProfileStore

    init_engine("sqlite://")
    create_all_tables()
    yield ProfileStore()
    drop_all_tables()
    dispose_engine()


@pytest.fixture(scope="session")
def make_token():
    """Mint HS256 bearer tokens the test resolver accepts."""

    def _make(user_id: str = "user-1", *, expires_in: int = 3600, secret: str = TEST_JWT_SECRET, **claims) -> str:
        payload = {"sub": user_id, "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in)}
        payload.update(claims)
        return jwt.encode(payload, secret, algorithm="HS256")

    return _make


@pytest.fixture(scope="session")
def auth_header(make_token):
    def _header(user_id: str = "user-1") -> dict:
        return {"Authorization": f"Bearer {make_token(user_id)}"}

    return _header


@pytest.fixture(scope="function")
def identity_resolver():
    return IdentityResolver(TEST_JWT_SECRET)


@pytest.fixture(scope="function")
def fake_generator():
    from adsflow.tests.mocks import FakeGenerationClient

    return FakeGenerationClient()


@pytest.fixture(scope="function")
def client(profile_store, identity_resolver, fake_generator):
    """
    TestClient with the real orchestrator wired to the SQLite store,
    the test JWT resolver and a fake generator.
    """
    from fastapi.testclient import TestClient
    from adsflow.main import app
    from adsflow.core.auth import get_identity_resolver
    from adsflow.features.profiles.store import get_profile_store
    from adsflow.features.generation.orchestrator import GenerationOrchestrator, get_generation_orchestrator

    orchestrator = GenerationOrchestrator(identity_resolver, profile_store, fake_generator)
    app.dependency_overrides[get_identity_resolver] = lambda: identity_resolver
    app.dependency_overrides[get_profile_store] = lambda: profile_store
    app.dependency_overrides[get_generation_orchestrator] = lambda: orchestrator
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

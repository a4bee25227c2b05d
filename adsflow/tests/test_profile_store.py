"""
Tests for the SQLAlchemy profile store.
"""

from datetime import datetime, timezone

import pytest
from sqlalchemy import update

from adsflow.core.database import get_db_session, profiles
from adsflow.core.errors import PersistenceFailedError, ProfileUnavailableError
from adsflow.models.profile import PlanTier


MARCH = datetime(2026, 3, 10, 9, 30, tzinfo=timezone.utc)
APRIL = datetime(2026, 4, 2, 8, 0, tzinfo=timezone.utc)


def test_load_missing_profile_raises(profile_store):
    with pytest.raises(ProfileUnavailableError) as exc_info:
        profile_store.load_profile("nobody")
    assert exc_info.value.status_code == 500


def test_create_and_load_profile(profile_store):
    profile_store.create_profile("user-1", PlanTier.BUSINESS, generations_used=3, now=MARCH)

    loaded = profile_store.load_profile("user-1")

    assert loaded.plan == PlanTier.BUSINESS
    assert loaded.generations_used == 3
    assert loaded.generation_reset_date == MARCH
    assert loaded.generation_reset_date.tzinfo is not None


def test_duplicate_profile_is_rejected(profile_store):
    profile_store.create_profile("user-1", now=MARCH)
    with pytest.raises(ValueError):
        profile_store.create_profile("user-1", now=MARCH)


def test_unknown_plan_loads_as_free(profile_store):
    profile_store.create_profile("user-1", now=MARCH)
    with get_db_session() as session:
        session.execute(update(profiles).where(profiles.c.id == "user-1").values(plan="enterprise"))

    assert profile_store.load_profile("user-1").plan == PlanTier.FREE


def test_increment_usage_returns_new_count(profile_store):
    profile_store.create_profile("user-1", generations_used=4, now=MARCH)

    assert profile_store.increment_usage("user-1") == 5
    assert profile_store.increment_usage("user-1") == 6
    assert profile_store.load_profile("user-1").generations_used == 6


def test_increment_missing_profile_raises(profile_store):
    with pytest.raises(PersistenceFailedError):
        profile_store.increment_usage("ghost")


def test_persist_reset_starts_new_window(profile_store):
    profile_store.create_profile("user-1", generations_used=2, now=MARCH)

    assert profile_store.persist_reset("user-1", APRIL) is True

    loaded = profile_store.load_profile("user-1")
    assert loaded.generations_used == 0
    assert loaded.generation_reset_date == APRIL


def test_persist_reset_applies_once_per_month(profile_store):
    """A second rollover in the same month must not wipe usage recorded since the first."""
    profile_store.create_profile("user-1", generations_used=2, now=MARCH)

    assert profile_store.persist_reset("user-1", APRIL) is True
    profile_store.increment_usage("user-1")
    assert profile_store.persist_reset("user-1", APRIL.replace(hour=9)) is False

    assert profile_store.load_profile("user-1").generations_used == 1


def test_persist_reset_ignores_current_window(profile_store):
    profile_store.create_profile("user-1", generations_used=1, now=APRIL)

    assert profile_store.persist_reset("user-1", APRIL.replace(day=20)) is False
    assert profile_store.load_profile("user-1").generations_used == 1


def test_store_failures_surface_as_app_errors(profile_store):
    from contextlib import contextmanager
    from sqlalchemy.exc import OperationalError
    from adsflow.features.profiles.store import ProfileStore

    @contextmanager
    def broken_session():
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))
        yield

    store = ProfileStore(session_factory=broken_session)

    with pytest.raises(ProfileUnavailableError):
        store.load_profile("user-1")
    with pytest.raises(PersistenceFailedError):
        store.increment_usage("user-1")
    with pytest.raises(PersistenceFailedError):
        store.persist_reset("user-1", APRIL)


def test_interleaved_increments_are_never_lost(profile_store):
    """Two requests read the same usage, then both record; neither increment is lost."""
    profile_store.create_profile("user-1", PlanTier.BUSINESS, generations_used=3, now=MARCH)

    first_read = profile_store.load_profile("user-1")
    second_read = profile_store.load_profile("user-1")
    assert first_read.generations_used == second_read.generations_used == 3

    first = profile_store.increment_usage("user-1")
    second = profile_store.increment_usage("user-1")

    assert (first, second) == (4, 5)
    assert profile_store.load_profile("user-1").generations_used == first_read.generations_used + 2

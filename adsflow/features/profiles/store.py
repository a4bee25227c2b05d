"""
adsflow/features/profiles/store.py

Usage profile persistence.

Handles:
- Profile lookup by identity
- Conditional window reset (at most once per calendar month)
- Atomic usage increment
"""

from datetime import datetime, timezone
from typing import Callable, ContextManager, Optional
import logging

from sqlalchemy import select, insert, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from adsflow.core.database import get_db_session, profiles
from adsflow.core.errors import PersistenceFailedError, ProfileUnavailableError
from adsflow.features.quota.engine import as_utc, month_start
from adsflow.models.profile import PlanTier, UsageProfile


logger = logging.getLogger(__name__)

SessionFactory = Callable[[], ContextManager[Session]]


def _parse_plan(user_id: str, raw: Optional[str]) -> PlanTier:
    try:
        return PlanTier(raw)
    except ValueError:
        logger.warning(
            "[profiles] unknown plan, using free allowance",
            extra={"user_id": user_id, "plan": raw},
        )
        return PlanTier.FREE


class ProfileStore:
    """SQLAlchemy-backed store for UsageProfile rows."""

    def __init__(self, session_factory: SessionFactory = get_db_session):
        self._session = session_factory

    def _row_to_profile(self, row) -> UsageProfile:
        return UsageProfile(
            user_id=row.id,
            plan=_parse_plan(row.id, row.plan),
            generations_used=row.generations_used,
            generation_reset_date=as_utc(row.generation_reset_date),
        )

    def create_profile(
        self,
        user_id: str,
        plan: PlanTier = PlanTier.FREE,
        *,
        generations_used: int = 0,
        now: Optional[datetime] = None,
    ) -> UsageProfile:
        """
        Insert a profile row (account creation tooling and tests).

        Raises:
            ValueError: If a profile already exists for user_id
        """
        reset_at = as_utc(now) if now else datetime.now(timezone.utc)
        try:
            with self._session() as session:
                session.execute(
                    insert(profiles).values(
                        id=user_id,
                        plan=PlanTier(plan).value,
                        generations_used=generations_used,
                        generation_reset_date=reset_at,
                        created_at=reset_at,
                    )
                )
        except IntegrityError as exc:
            raise ValueError(f"Profile {user_id} already exists") from exc

        return UsageProfile(
            user_id=user_id,
            plan=PlanTier(plan),
            generations_used=generations_used,
            generation_reset_date=reset_at,
        )

    def load_profile(self, user_id: str) -> UsageProfile:
        """
        Fetch the usage profile for an identity.

        Raises:
            ProfileUnavailableError: No profile row, or the store is unreachable
        """
        try:
            with self._session() as session:
                row = session.execute(
                    select(profiles).where(profiles.c.id == user_id)
                ).first()
        except SQLAlchemyError as exc:
            logger.error("[profiles] load failed", extra={"user_id": user_id}, exc_info=exc)
            raise ProfileUnavailableError("We couldn't load your account. Please try again shortly.") from exc

        if not row:
            raise ProfileUnavailableError("No usage profile exists for this account.")

        return self._row_to_profile(row)

    def persist_reset(self, user_id: str, now: datetime) -> bool:
        """
        Start a new counting window at ``now`` with usage zero.

        Only applies while the stored reset date is still before the start
        of now's month, so a second request racing on the same rollover
        cannot wipe an increment made in the new window.

        Returns:
            True if this call performed the reset, False if it was already done

        Raises:
            PersistenceFailedError: The write could not be applied
        """
        now = as_utc(now)
        try:
            with self._session() as session:
                result = session.execute(
                    update(profiles)
                    .where(profiles.c.id == user_id)
                    .where(profiles.c.generation_reset_date < month_start(now))
                    .values(generations_used=0, generation_reset_date=now)
                )
                return result.rowcount > 0
        except SQLAlchemyError as exc:
            raise PersistenceFailedError(f"Failed to reset usage window for {user_id}: {exc}") from exc

    def increment_usage(self, user_id: str) -> int:
        """
        Atomically add one generation to the profile's counter.

        The increment is evaluated by the database, so concurrent requests
        never overwrite each other's increments.

        Returns:
            The counter value after the increment

        Raises:
            PersistenceFailedError: The write failed or the profile vanished
        """
        try:
            with self._session() as session:
                result = session.execute(
                    update(profiles)
                    .where(profiles.c.id == user_id)
                    .values(generations_used=profiles.c.generations_used + 1)
                )
                if result.rowcount == 0:
                    raise PersistenceFailedError(f"Profile {user_id} disappeared before usage was recorded")
                return session.execute(
                    select(profiles.c.generations_used).where(profiles.c.id == user_id)
                ).scalar_one()
        except SQLAlchemyError as exc:
            raise PersistenceFailedError(f"Failed to increment usage for {user_id}: {exc}") from exc


# Singleton store instance
profile_store = ProfileStore()


def get_profile_store() -> ProfileStore:
    """FastAPI dependency returning the process-wide store."""
    return profile_store

"""Discovery service: loads candidates and applies the discovery rules."""

from collections.abc import Awaitable, Callable
from datetime import date
from uuid import UUID

import structlog

from core.config import settings
from core.exceptions import EntityNotFoundError
from domain.entities.profile import Profile
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.discovery_engine import DiscoveryCandidate, DiscoveryEngine

logger = structlog.get_logger()

VerificationLookup = Callable[[list[UUID]], Awaitable[set[UUID]]]


class DiscoveryService:
    """Service layer for preference-based discovery.

    ``verification_lookup`` receives a list of user IDs and returns the subset
    that is verified. Without one, nobody counts as verified.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        engine: DiscoveryEngine | None = None,
        verification_lookup: VerificationLookup | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._engine = engine or DiscoveryEngine(require_mutual=settings.discovery_require_mutual)
        self._verification_lookup = verification_lookup

    async def discover_for_user(self, user_id: UUID, today: date | None = None) -> list[Profile]:
        """Get the profiles ``user_id`` should see, newest-updated first.

        Raises:
            EntityNotFoundError: If the user has no preferences.
        """
        async with self._uow_factory() as uow:
            viewer_preferences = await uow.preferences.get_by_user_id(user_id)
            if not viewer_preferences:
                logger.warning("discovery_preferences_missing", user_id=str(user_id))
                raise EntityNotFoundError("Preferences")

            viewer_profile = await uow.profiles.get_by_user_id(user_id)
            profiles = await uow.profiles.find_visible_profiles(user_id)
            candidate_ids = [p.user_id for p in profiles]
            preferences_by_user = (
                await uow.preferences.get_by_user_ids(candidate_ids) if candidate_ids else {}
            )

        verified = await self._verified_users([user_id, *candidate_ids])
        candidates = [
            DiscoveryCandidate(
                profile=p,
                preferences=preferences_by_user.get(p.user_id),
                is_verified=p.user_id in verified,
            )
            for p in profiles
        ]
        results = self._engine.discover(
            viewer_preferences,
            candidates,
            viewer_profile=viewer_profile,
            viewer_is_verified=user_id in verified,
            today=today,
        )
        logger.info(
            "discovery_completed",
            user_id=str(user_id),
            candidate_count=len(candidates),
            result_count=len(results),
        )
        return results

    async def is_compatible(
        self, viewer_user_id: UUID, candidate_user_id: UUID, today: date | None = None
    ) -> bool:
        """Check whether one specific candidate would appear in the viewer's discovery.

        Raises:
            EntityNotFoundError: If the viewer has no preferences or the
                candidate has no profile.
        """
        async with self._uow_factory() as uow:
            viewer_preferences = await uow.preferences.get_by_user_id(viewer_user_id)
            if not viewer_preferences:
                raise EntityNotFoundError("Preferences")
            candidate_profile = await uow.profiles.get_by_user_id(candidate_user_id)
            if not candidate_profile:
                raise EntityNotFoundError("Profile")
            viewer_profile = await uow.profiles.get_by_user_id(viewer_user_id)
            candidate_preferences = await uow.preferences.get_by_user_id(candidate_user_id)

        verified = await self._verified_users([viewer_user_id, candidate_user_id])
        return self._engine.is_compatible(
            viewer_preferences,
            DiscoveryCandidate(
                profile=candidate_profile,
                preferences=candidate_preferences,
                is_verified=candidate_user_id in verified,
            ),
            viewer_profile=viewer_profile,
            viewer_is_verified=viewer_user_id in verified,
            today=today,
        )

    async def _verified_users(self, user_ids: list[UUID]) -> set[UUID]:
        if self._verification_lookup is None:
            return set()
        return set(await self._verification_lookup(user_ids))

"""Profile service layer with business logic."""

from collections.abc import Callable
from datetime import date
from typing import Iterable
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.config import settings
from core.exceptions import (
    DomainValidationError,
    EntityAlreadyExistsError,
    EntityNotFoundError,
    InvalidInputError,
)
from domain.entities.profile import Gender, Profile, RelationshipStatus
from domain.entities.search import ProfileSearchCriteria
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.policies import ensure_minimum_age, ensure_photo_capacity

logger = structlog.get_logger()


class ProfileService:
    """Service layer for Profile business logic."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        minimum_user_age: int | None = None,
        max_photos: int | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        self._minimum_user_age = (
            minimum_user_age if minimum_user_age is not None else settings.minimum_user_age
        )
        self._max_photos = max_photos if max_photos is not None else settings.max_profile_photos

    # --- Lifecycle ---

    async def create_profile(self, user_id: UUID) -> Profile:
        """Create an empty profile for a user who has none yet."""
        async with self._uow_factory() as uow:
            existing = await uow.profiles.get_by_user_id(user_id)
            if existing:
                raise EntityAlreadyExistsError("Profile", str(user_id))

            profile = Profile(user_id=user_id)
            try:
                created = await uow.profiles.create(profile)
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                # The unique user_id constraint catches concurrent creates.
                orig = str(exc.orig).lower() if exc.orig else ""
                if "unique" in orig or "duplicate" in orig:
                    raise EntityAlreadyExistsError("Profile", str(user_id)) from exc
                raise

            logger.info("profile_created", user_id=str(user_id), profile_id=str(created.id))
            return created

    async def get_profile_by_id(self, profile_id: UUID) -> Profile:
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(profile_id)
            if not profile:
                logger.warning("profile_not_found", profile_id=str(profile_id))
                raise EntityNotFoundError("Profile", str(profile_id))
            return profile

    async def get_profile_by_user_id(self, user_id: UUID) -> Profile:
        async with self._uow_factory() as uow:
            return await self._require_profile(uow, user_id)

    async def delete_profile(self, user_id: UUID) -> None:
        """Delete the user's profile. Preferences are left untouched."""
        async with self._uow_factory() as uow:
            profile = await self._require_profile(uow, user_id)
            await uow.profiles.delete(profile.id)
            await uow.commit()
            logger.info("profile_deleted", user_id=str(user_id), profile_id=str(profile.id))

    # --- Mutations ---

    async def update_bio(self, user_id: UUID, bio: str) -> Profile:
        return await self._apply(user_id, "profile_bio_updated", lambda p: p.update_bio(bio))

    async def update_basic_info(
        self,
        user_id: UUID,
        date_of_birth: date | None = None,
        gender: Gender | None = None,
        height: int | None = None,
        weight: int | None = None,
        location: str | None = None,
    ) -> Profile:
        """Partially update basic info.

        Raises:
            InvalidInputError: If the date of birth puts the user under the
                minimum age, or height/weight are out of range.
            EntityNotFoundError: If the user has no profile.
        """
        if date_of_birth is not None:
            try:
                ensure_minimum_age(date_of_birth, self._minimum_user_age)
            except InvalidInputError:
                logger.warning("profile_underage_rejected", user_id=str(user_id))
                raise

        return await self._apply(
            user_id,
            "profile_basic_info_updated",
            lambda p: p.update_basic_info(
                date_of_birth=date_of_birth,
                gender=gender,
                height=height,
                weight=weight,
                location=location,
            ),
        )

    async def update_professional_info(
        self,
        user_id: UUID,
        occupation: str | None = None,
        education: str | None = None,
    ) -> Profile:
        return await self._apply(
            user_id,
            "profile_professional_info_updated",
            lambda p: p.update_professional_info(occupation=occupation, education=education),
        )

    async def update_relationship_status(
        self, user_id: UUID, status: RelationshipStatus
    ) -> Profile:
        return await self._apply(
            user_id,
            "profile_relationship_status_updated",
            lambda p: p.update_relationship_status(status),
        )

    async def add_interest(self, user_id: UUID, interest: str) -> Profile:
        return await self._apply(
            user_id, "profile_interest_added", lambda p: p.add_interest(interest)
        )

    async def remove_interest(self, user_id: UUID, interest: str) -> Profile:
        return await self._apply(
            user_id, "profile_interest_removed", lambda p: p.remove_interest(interest)
        )

    async def update_interests(self, user_id: UUID, interests: Iterable[str]) -> Profile:
        interests = list(interests)
        return await self._apply(
            user_id, "profile_interests_replaced", lambda p: p.replace_interests(interests)
        )

    async def add_photo(self, user_id: UUID, photo: str) -> Profile:
        """Append a photo reference, enforcing the per-profile photo cap.

        The cap is checked first, so a full profile rejects any further call.
        Below the cap, re-adding a stored photo changes nothing.

        Raises:
            InvalidInputError: If the profile already holds the maximum number of photos.
        """
        async with self._uow_factory() as uow:
            profile = await self._require_profile(uow, user_id)
            try:
                ensure_photo_capacity(profile, self._max_photos)
            except InvalidInputError:
                logger.warning(
                    "photo_limit_reached",
                    user_id=str(user_id),
                    photo_count=len(profile.photos),
                )
                raise
            if photo in profile.photos:
                return profile

            profile.add_photo(photo)
            updated = await uow.profiles.update(profile)
            await uow.commit()
            logger.info("profile_photo_added", user_id=str(user_id), photo_count=len(updated.photos))
            return updated

    async def remove_photo(self, user_id: UUID, photo: str) -> Profile:
        return await self._apply(
            user_id, "profile_photo_removed", lambda p: p.remove_photo(photo)
        )

    async def reorder_photos(self, user_id: UUID, photos: Iterable[str]) -> Profile:
        photos = list(photos)
        return await self._apply(
            user_id, "profile_photos_reordered", lambda p: p.reorder_photos(photos)
        )

    async def set_visibility(self, user_id: UUID, is_visible: bool) -> Profile:
        return await self._apply(
            user_id, "profile_visibility_changed", lambda p: p.set_visibility(is_visible)
        )

    async def update_profile(
        self,
        user_id: UUID,
        bio: str | None = None,
        date_of_birth: date | None = None,
        gender: Gender | None = None,
        height: int | None = None,
        weight: int | None = None,
        location: str | None = None,
        occupation: str | None = None,
        education: str | None = None,
        relationship_status: RelationshipStatus | None = None,
        interests: Iterable[str] | None = None,
        is_visible: bool | None = None,
    ) -> Profile:
        """Apply several profile changes at once; ``None`` leaves a field unchanged.

        A given ``interests`` list replaces the stored set. Nothing is persisted
        if any change is invalid.

        Raises:
            InvalidInputError: If the date of birth is under the minimum age or
                any field is out of range.
            EntityNotFoundError: If the user has no profile.
        """
        if date_of_birth is not None:
            try:
                ensure_minimum_age(date_of_birth, self._minimum_user_age)
            except InvalidInputError:
                logger.warning("profile_underage_rejected", user_id=str(user_id))
                raise

        new_interests = list(interests) if interests is not None else None

        def mutate(p: Profile) -> None:
            if bio is not None:
                p.update_bio(bio)
            if any(v is not None for v in (date_of_birth, gender, height, weight, location)):
                p.update_basic_info(
                    date_of_birth=date_of_birth,
                    gender=gender,
                    height=height,
                    weight=weight,
                    location=location,
                )
            if occupation is not None or education is not None:
                p.update_professional_info(occupation=occupation, education=education)
            if relationship_status is not None:
                p.update_relationship_status(relationship_status)
            if new_interests is not None:
                p.replace_interests(new_interests)
            if is_visible is not None:
                p.set_visibility(is_visible)

        return await self._apply(user_id, "profile_updated", mutate)

    # --- Discovery accessors ---

    async def get_visible_profiles(self, exclude_user_id: UUID | None = None) -> list[Profile]:
        async with self._uow_factory() as uow:
            return await uow.profiles.find_visible_profiles(exclude_user_id)  # type: ignore[no-any-return]

    async def get_profiles_by_location(
        self, location: str, exclude_user_id: UUID | None = None
    ) -> list[Profile]:
        async with self._uow_factory() as uow:
            return await uow.profiles.find_profiles_by_location(location, exclude_user_id)  # type: ignore[no-any-return]

    async def get_profiles_by_interests(
        self, interests: Iterable[str], exclude_user_id: UUID | None = None
    ) -> list[Profile]:
        interests = list(dict.fromkeys(interests))
        if not interests:
            return []
        async with self._uow_factory() as uow:
            return await uow.profiles.find_profiles_by_interests(interests, exclude_user_id)  # type: ignore[no-any-return]

    async def get_complete_profiles(self, exclude_user_id: UUID | None = None) -> list[Profile]:
        async with self._uow_factory() as uow:
            return await uow.profiles.find_complete_profiles(exclude_user_id)  # type: ignore[no-any-return]

    async def search_profiles(self, criteria: ProfileSearchCriteria) -> list[Profile]:
        """Search visible profiles. Absent criteria impose no constraint."""
        async with self._uow_factory() as uow:
            results = await uow.profiles.search_profiles(criteria)
            logger.debug("profile_search_completed", result_count=len(results))
            return results  # type: ignore[no-any-return]

    # --- Helpers ---

    async def _require_profile(self, uow: IUnitOfWork, user_id: UUID) -> Profile:
        profile = await uow.profiles.get_by_user_id(user_id)
        if not profile:
            logger.warning("profile_not_found", user_id=str(user_id))
            raise EntityNotFoundError("Profile")
        return profile

    async def _apply(
        self, user_id: UUID, event: str, mutate: Callable[[Profile], None]
    ) -> Profile:
        """Load, mutate and persist a profile in one unit of work."""
        async with self._uow_factory() as uow:
            profile = await self._require_profile(uow, user_id)
            try:
                mutate(profile)
            except DomainValidationError as exc:
                logger.info("profile_update_rejected", user_id=str(user_id), reason=str(exc))
                raise InvalidInputError(
                    str(exc), {"field": getattr(exc, "field", None)}
                ) from exc

            updated = await uow.profiles.update(profile)
            await uow.commit()
            logger.info(event, user_id=str(user_id), profile_id=str(updated.id))
            return updated

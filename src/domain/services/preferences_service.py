"""Preferences service layer with business logic."""

from collections.abc import Callable
from typing import Iterable
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    DomainValidationError,
    EntityAlreadyExistsError,
    EntityNotFoundError,
    InvalidInputError,
)
from domain.entities.preferences import DistanceUnit, NotificationType, Preferences
from domain.entities.profile import Gender
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


def parse_notification_type(value: NotificationType | str) -> NotificationType:
    """Accept an enum member, its value (``push_notifications``) or its name (``push``)."""
    if isinstance(value, NotificationType):
        return value
    try:
        return NotificationType(value)
    except ValueError:
        pass
    try:
        return NotificationType[value.upper()]
    except KeyError:
        raise InvalidInputError(
            f"Invalid notification type: {value}",
            {"allowed": [t.value for t in NotificationType]},
        ) from None


class PreferencesService:
    """Service layer for Preferences business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    # --- Lifecycle ---

    async def create_preferences(self, user_id: UUID) -> Preferences:
        """Create default preferences for a user who has none yet."""
        async with self._uow_factory() as uow:
            existing = await uow.preferences.get_by_user_id(user_id)
            if existing:
                raise EntityAlreadyExistsError("Preferences", str(user_id))

            preferences = Preferences(user_id=user_id)
            try:
                created = await uow.preferences.create(preferences)
                await uow.commit()
            except IntegrityError as exc:
                await uow.rollback()
                orig = str(exc.orig).lower() if exc.orig else ""
                if "unique" in orig or "duplicate" in orig:
                    raise EntityAlreadyExistsError("Preferences", str(user_id)) from exc
                raise

            logger.info(
                "preferences_created", user_id=str(user_id), preferences_id=str(created.id)
            )
            return created

    async def get_preferences_by_id(self, preferences_id: UUID) -> Preferences:
        async with self._uow_factory() as uow:
            preferences = await uow.preferences.get(preferences_id)
            if not preferences:
                logger.warning("preferences_not_found", preferences_id=str(preferences_id))
                raise EntityNotFoundError("Preferences", str(preferences_id))
            return preferences

    async def get_preferences_by_user_id(self, user_id: UUID) -> Preferences:
        async with self._uow_factory() as uow:
            return await self._require_preferences(uow, user_id)

    async def delete_preferences(self, user_id: UUID) -> None:
        """Delete the user's preferences. The profile is left untouched."""
        async with self._uow_factory() as uow:
            preferences = await self._require_preferences(uow, user_id)
            await uow.preferences.delete(preferences.id)
            await uow.commit()
            logger.info("preferences_deleted", user_id=str(user_id))

    # --- Filters ---

    async def update_gender_preferences(
        self, user_id: UUID, genders: Iterable[Gender]
    ) -> Preferences:
        genders = list(genders)
        return await self._apply(
            user_id, "gender_preferences_updated", lambda p: p.update_gender_preferences(genders)
        )

    async def update_age_range(self, user_id: UUID, min_age: int, max_age: int) -> Preferences:
        """Set the accepted age range.

        Raises:
            InvalidInputError: If the range is outside 18-99 or inverted.
        """
        return await self._apply(
            user_id, "age_range_updated", lambda p: p.update_age_range(min_age, max_age)
        )

    async def update_distance_preference(
        self, user_id: UUID, max_distance: float, unit: DistanceUnit
    ) -> Preferences:
        return await self._apply(
            user_id,
            "distance_preference_updated",
            lambda p: p.update_distance_preference(max_distance, unit),
        )

    async def update_interest_preferences(
        self, user_id: UUID, interests: Iterable[str]
    ) -> Preferences:
        interests = list(interests)
        return await self._apply(
            user_id,
            "interest_preferences_updated",
            lambda p: p.update_interest_preferences(interests),
        )

    async def add_preferred_interest(self, user_id: UUID, interest: str) -> Preferences:
        return await self._apply(
            user_id, "preferred_interest_added", lambda p: p.add_preferred_interest(interest)
        )

    async def remove_preferred_interest(self, user_id: UUID, interest: str) -> Preferences:
        return await self._apply(
            user_id,
            "preferred_interest_removed",
            lambda p: p.remove_preferred_interest(interest),
        )

    async def update_deal_breakers(
        self, user_id: UUID, deal_breakers: Iterable[str]
    ) -> Preferences:
        deal_breakers = list(deal_breakers)
        return await self._apply(
            user_id, "deal_breakers_updated", lambda p: p.update_deal_breakers(deal_breakers)
        )

    async def add_deal_breaker(self, user_id: UUID, deal_breaker: str) -> Preferences:
        return await self._apply(
            user_id, "deal_breaker_added", lambda p: p.add_deal_breaker(deal_breaker)
        )

    async def remove_deal_breaker(self, user_id: UUID, deal_breaker: str) -> Preferences:
        return await self._apply(
            user_id, "deal_breaker_removed", lambda p: p.remove_deal_breaker(deal_breaker)
        )

    # --- Flags ---

    async def update_filter_preferences(
        self,
        user_id: UUID,
        show_only_verified_profiles: bool | None = None,
        show_only_with_photos: bool | None = None,
    ) -> Preferences:
        return await self._apply(
            user_id,
            "filter_preferences_updated",
            lambda p: p.update_filter_preferences(
                show_only_verified_profiles=show_only_verified_profiles,
                show_only_with_photos=show_only_with_photos,
            ),
        )

    async def update_messaging_preferences(
        self,
        user_id: UUID,
        allow_messages_from_matches: bool | None = None,
        allow_messages_from_everyone: bool | None = None,
    ) -> Preferences:
        return await self._apply(
            user_id,
            "messaging_preferences_updated",
            lambda p: p.update_messaging_preferences(
                allow_messages_from_matches=allow_messages_from_matches,
                allow_messages_from_everyone=allow_messages_from_everyone,
            ),
        )

    async def update_privacy_preferences(
        self,
        user_id: UUID,
        show_online_status: bool | None = None,
        show_last_seen: bool | None = None,
    ) -> Preferences:
        return await self._apply(
            user_id,
            "privacy_preferences_updated",
            lambda p: p.update_privacy_preferences(
                show_online_status=show_online_status,
                show_last_seen=show_last_seen,
            ),
        )

    async def update_notification_preferences(
        self,
        user_id: UUID,
        push_notifications: bool | None = None,
        email_notifications: bool | None = None,
        match_notifications: bool | None = None,
        message_notifications: bool | None = None,
        like_notifications: bool | None = None,
    ) -> Preferences:
        return await self._apply(
            user_id,
            "notification_preferences_updated",
            lambda p: p.update_notification_preferences(
                push_notifications=push_notifications,
                email_notifications=email_notifications,
                match_notifications=match_notifications,
                message_notifications=message_notifications,
                like_notifications=like_notifications,
            ),
        )

    async def update_preferences(
        self,
        user_id: UUID,
        preferred_genders: Iterable[Gender] | None = None,
        min_age: int | None = None,
        max_age: int | None = None,
        max_distance: float | None = None,
        distance_unit: DistanceUnit | None = None,
        preferred_interests: Iterable[str] | None = None,
        deal_breakers: Iterable[str] | None = None,
        show_only_verified_profiles: bool | None = None,
        show_only_with_photos: bool | None = None,
        allow_messages_from_matches: bool | None = None,
        allow_messages_from_everyone: bool | None = None,
        show_online_status: bool | None = None,
        show_last_seen: bool | None = None,
        push_notifications: bool | None = None,
        email_notifications: bool | None = None,
        match_notifications: bool | None = None,
        message_notifications: bool | None = None,
        like_notifications: bool | None = None,
    ) -> Preferences:
        """Apply several changes at once; ``None`` leaves a field unchanged.

        Age and distance fields are merged with the stored values, so setting
        only ``max_age`` keeps the current ``min_age``. Nothing is persisted if
        any change is invalid.
        """
        genders = list(preferred_genders) if preferred_genders is not None else None
        interests = list(preferred_interests) if preferred_interests is not None else None
        breakers = list(deal_breakers) if deal_breakers is not None else None

        def mutate(p: Preferences) -> None:
            if genders is not None:
                p.update_gender_preferences(genders)
            if min_age is not None or max_age is not None:
                p.update_age_range(
                    min_age if min_age is not None else p.min_age,
                    max_age if max_age is not None else p.max_age,
                )
            if max_distance is not None or distance_unit is not None:
                p.update_distance_preference(
                    max_distance if max_distance is not None else p.max_distance,
                    distance_unit if distance_unit is not None else p.distance_unit,
                )
            if interests is not None:
                p.update_interest_preferences(interests)
            if breakers is not None:
                p.update_deal_breakers(breakers)
            p.update_filter_preferences(show_only_verified_profiles, show_only_with_photos)
            p.update_messaging_preferences(
                allow_messages_from_matches, allow_messages_from_everyone
            )
            p.update_privacy_preferences(show_online_status, show_last_seen)
            p.update_notification_preferences(
                push_notifications,
                email_notifications,
                match_notifications,
                message_notifications,
                like_notifications,
            )

        return await self._apply(user_id, "preferences_updated", mutate)

    # --- Queries ---

    async def get_users_with_notifications_enabled(
        self, notification_type: NotificationType | str
    ) -> list[UUID]:
        """Get IDs of users who have the given notification toggle switched on.

        Raises:
            InvalidInputError: If the notification type is unknown.
        """
        parsed = parse_notification_type(notification_type)
        async with self._uow_factory() as uow:
            return await uow.preferences.find_users_with_notifications_enabled(parsed)  # type: ignore[no-any-return]

    async def is_notification_enabled(
        self, user_id: UUID, notification_type: NotificationType | str
    ) -> bool:
        """Whether a single user has the given notification toggle switched on.

        Raises:
            InvalidInputError: If the notification type is unknown.
            EntityNotFoundError: If the user has no preferences.
        """
        parsed = parse_notification_type(notification_type)
        async with self._uow_factory() as uow:
            preferences = await self._require_preferences(uow, user_id)
            return preferences.is_notification_enabled(parsed)

    # --- Helpers ---

    async def _require_preferences(self, uow: IUnitOfWork, user_id: UUID) -> Preferences:
        preferences = await uow.preferences.get_by_user_id(user_id)
        if not preferences:
            logger.warning("preferences_not_found", user_id=str(user_id))
            raise EntityNotFoundError("Preferences")
        return preferences

    async def _apply(
        self, user_id: UUID, event: str, mutate: Callable[[Preferences], None]
    ) -> Preferences:
        """Load, mutate and persist preferences in one unit of work."""
        async with self._uow_factory() as uow:
            preferences = await self._require_preferences(uow, user_id)
            try:
                mutate(preferences)
            except DomainValidationError as exc:
                logger.info("preferences_update_rejected", user_id=str(user_id), reason=str(exc))
                raise InvalidInputError(
                    str(exc), {"field": getattr(exc, "field", None)}
                ) from exc

            updated = await uow.preferences.update(preferences)
            await uow.commit()
            logger.info(event, user_id=str(user_id))
            return updated

"""Preferences domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Iterable
from uuid import UUID, uuid4

from core.exceptions import InvalidRangeError
from domain.entities.profile import Gender, parse_choice

MIN_AGE = 18
MAX_AGE = 99
MAX_DISTANCE = 1000
DEFAULT_MAX_DISTANCE = 50


class DistanceUnit(StrEnum):
    """Unit used for the maximum distance filter."""

    KILOMETERS = "KILOMETERS"
    MILES = "MILES"


class NotificationType(StrEnum):
    """Notification toggles stored on preferences.

    Values match the attribute names on ``Preferences``.
    """

    PUSH = "push_notifications"
    EMAIL = "email_notifications"
    MATCH = "match_notifications"
    MESSAGE = "message_notifications"
    LIKE = "like_notifications"


@dataclass
class Preferences:
    """Domain entity for a user's discovery, messaging and notification preferences."""

    user_id: UUID
    id: UUID = field(default_factory=uuid4)
    preferred_genders: set[Gender] = field(default_factory=set)
    min_age: int = MIN_AGE
    max_age: int = MAX_AGE
    max_distance: float = DEFAULT_MAX_DISTANCE
    distance_unit: DistanceUnit = DistanceUnit.KILOMETERS
    preferred_interests: set[str] = field(default_factory=set)
    deal_breakers: set[str] = field(default_factory=set)

    # Filters
    show_only_verified_profiles: bool = False
    show_only_with_photos: bool = True

    # Messaging
    allow_messages_from_matches: bool = True
    allow_messages_from_everyone: bool = False

    # Privacy
    show_online_status: bool = True
    show_last_seen: bool = True

    # Notifications
    push_notifications: bool = True
    email_notifications: bool = True
    match_notifications: bool = True
    message_notifications: bool = True
    like_notifications: bool = True

    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Normalize set-valued fields and timestamps."""
        self.preferred_genders = {Gender(g) for g in self.preferred_genders}
        self.preferred_interests = set(self.preferred_interests)
        self.deal_breakers = set(self.deal_breakers)
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at

    # --- Range mutators ---

    def update_age_range(self, min_age: int, max_age: int) -> None:
        """Set the accepted age range (inclusive).

        Raises:
            InvalidRangeError: If min_age < 18, max_age > 99 or min_age > max_age.
        """
        if min_age < MIN_AGE:
            raise InvalidRangeError("min_age", f"Minimum age cannot be less than {MIN_AGE}")
        if max_age > MAX_AGE:
            raise InvalidRangeError("max_age", f"Maximum age cannot be greater than {MAX_AGE}")
        if min_age > max_age:
            raise InvalidRangeError(
                "min_age", "Minimum age cannot be greater than maximum age"
            )
        self.min_age = min_age
        self.max_age = max_age
        self._touch()

    def update_distance_preference(self, max_distance: float, unit: DistanceUnit) -> None:
        """Set the maximum distance and its unit.

        Raises:
            InvalidChoiceError: If unit is not a DistanceUnit.
            InvalidRangeError: If max_distance <= 0 or > 1000.
        """
        unit = parse_choice(DistanceUnit, unit, "distance_unit")
        if max_distance <= 0:
            raise InvalidRangeError("max_distance", "Distance must be greater than 0")
        if max_distance > MAX_DISTANCE:
            raise InvalidRangeError(
                "max_distance", f"Distance cannot be greater than {MAX_DISTANCE}"
            )
        self.max_distance = max_distance
        self.distance_unit = unit
        self._touch()

    # --- Set mutators ---

    def update_gender_preferences(self, genders: Iterable[Gender]) -> None:
        self.preferred_genders = {parse_choice(Gender, g, "preferred_genders") for g in genders}
        self._touch()

    def update_interest_preferences(self, interests: Iterable[str]) -> None:
        self.preferred_interests = set(interests)
        self._touch()

    def add_preferred_interest(self, interest: str) -> None:
        if interest in self.preferred_interests:
            return
        self.preferred_interests.add(interest)
        self._touch()

    def remove_preferred_interest(self, interest: str) -> None:
        self.preferred_interests.discard(interest)
        self._touch()

    def update_deal_breakers(self, deal_breakers: Iterable[str]) -> None:
        self.deal_breakers = set(deal_breakers)
        self._touch()

    def add_deal_breaker(self, deal_breaker: str) -> None:
        if deal_breaker in self.deal_breakers:
            return
        self.deal_breakers.add(deal_breaker)
        self._touch()

    def remove_deal_breaker(self, deal_breaker: str) -> None:
        self.deal_breakers.discard(deal_breaker)
        self._touch()

    # --- Flag mutators (None means unchanged) ---

    def update_filter_preferences(
        self,
        show_only_verified_profiles: bool | None = None,
        show_only_with_photos: bool | None = None,
    ) -> None:
        if show_only_verified_profiles is not None:
            self.show_only_verified_profiles = show_only_verified_profiles
        if show_only_with_photos is not None:
            self.show_only_with_photos = show_only_with_photos
        self._touch()

    def update_messaging_preferences(
        self,
        allow_messages_from_matches: bool | None = None,
        allow_messages_from_everyone: bool | None = None,
    ) -> None:
        if allow_messages_from_matches is not None:
            self.allow_messages_from_matches = allow_messages_from_matches
        if allow_messages_from_everyone is not None:
            self.allow_messages_from_everyone = allow_messages_from_everyone
        self._touch()

    def update_privacy_preferences(
        self,
        show_online_status: bool | None = None,
        show_last_seen: bool | None = None,
    ) -> None:
        if show_online_status is not None:
            self.show_online_status = show_online_status
        if show_last_seen is not None:
            self.show_last_seen = show_last_seen
        self._touch()

    def update_notification_preferences(
        self,
        push_notifications: bool | None = None,
        email_notifications: bool | None = None,
        match_notifications: bool | None = None,
        message_notifications: bool | None = None,
        like_notifications: bool | None = None,
    ) -> None:
        if push_notifications is not None:
            self.push_notifications = push_notifications
        if email_notifications is not None:
            self.email_notifications = email_notifications
        if match_notifications is not None:
            self.match_notifications = match_notifications
        if message_notifications is not None:
            self.message_notifications = message_notifications
        if like_notifications is not None:
            self.like_notifications = like_notifications
        self._touch()

    # --- Compatibility predicates ---

    def is_age_in_range(self, age: int) -> bool:
        return self.min_age <= age <= self.max_age

    def is_gender_preferred(self, gender: Gender) -> bool:
        """True when no gender restriction is set or ``gender`` is preferred."""
        return not self.preferred_genders or gender in self.preferred_genders

    def has_interest_match(self, interests: Iterable[str]) -> bool:
        """True when no interest restriction is set or any interest overlaps."""
        if not self.preferred_interests:
            return True
        return not self.preferred_interests.isdisjoint(interests)

    def has_deal_breaker(self, interests: Iterable[str]) -> bool:
        """True when any deal-breaker tag appears in ``interests``."""
        return not self.deal_breakers.isdisjoint(interests)

    def is_notification_enabled(self, notification_type: NotificationType) -> bool:
        return bool(getattr(self, NotificationType(notification_type).value))

    def _touch(self) -> None:
        self.updated_at = datetime.utcnow()

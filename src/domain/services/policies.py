"""Business policies enforced above the aggregates."""

from datetime import date

from core.exceptions import InvalidInputError
from domain.entities.profile import Profile, calculate_age


def ensure_minimum_age(
    date_of_birth: date, minimum_age: int, today: date | None = None
) -> None:
    """Reject a date of birth that makes the user younger than ``minimum_age``."""
    if calculate_age(date_of_birth, today) < minimum_age:
        raise InvalidInputError(
            f"User must be at least {minimum_age} years old",
            {"field": "date_of_birth", "minimum_age": minimum_age},
        )


def ensure_photo_capacity(profile: Profile, max_photos: int) -> None:
    """Reject adding another photo once the profile holds ``max_photos``."""
    if len(profile.photos) >= max_photos:
        raise InvalidInputError(
            f"Maximum of {max_photos} photos allowed",
            {"field": "photos", "max_photos": max_photos},
        )

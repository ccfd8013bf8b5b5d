"""Profile domain entity."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Iterable, TypeVar
from uuid import UUID, uuid4

from core.exceptions import InvalidChoiceError, InvalidRangeError

E = TypeVar("E", bound=StrEnum)

MIN_HEIGHT_CM = 100
MAX_HEIGHT_CM = 250
MIN_WEIGHT_KG = 30
MAX_WEIGHT_KG = 300


class Gender(StrEnum):
    """Gender shown on a profile and used in discovery filters."""

    MALE = "MALE"
    FEMALE = "FEMALE"
    NON_BINARY = "NON_BINARY"
    PREFER_NOT_TO_SAY = "PREFER_NOT_TO_SAY"


class RelationshipStatus(StrEnum):
    """Relationship status shown on a profile."""

    SINGLE = "SINGLE"
    IN_RELATIONSHIP = "IN_RELATIONSHIP"
    MARRIED = "MARRIED"
    DIVORCED = "DIVORCED"
    WIDOWED = "WIDOWED"
    COMPLICATED = "COMPLICATED"


def parse_choice(enum_type: type[E], value: E | str, field_name: str) -> E:
    """Coerce ``value`` into ``enum_type`` or raise InvalidChoiceError."""
    try:
        return enum_type(value)
    except ValueError:
        raise InvalidChoiceError(field_name, value, [m.value for m in enum_type]) from None


def calculate_age(date_of_birth: date, today: date | None = None) -> int:
    """Return the calendar age on ``today`` for someone born on ``date_of_birth``."""
    today = today or date.today()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


@dataclass
class Profile:
    """Domain entity for a user's dating profile.

    All changes go through the mutator methods below. ``is_complete`` is a
    derived flag recomputed at the end of every mutator that can affect it;
    it is exposed read-only.
    """

    user_id: UUID
    id: UUID = field(default_factory=uuid4)
    bio: str | None = None
    date_of_birth: date | None = None
    gender: Gender | None = None
    height: int | None = None
    weight: int | None = None
    location: str | None = None
    occupation: str | None = None
    education: str | None = None
    relationship_status: RelationshipStatus | None = None
    interests: set[str] = field(default_factory=set)
    photos: list[str] = field(default_factory=list)
    is_visible: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)
    _is_complete: bool = field(default=False, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Normalize collections and derive completeness from loaded state."""
        self.interests = set(self.interests)
        self.photos = list(dict.fromkeys(self.photos))
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at
        self._recompute_completeness()

    @property
    def is_complete(self) -> bool:
        """Whether the profile has enough data to be shown in discovery."""
        return self._is_complete

    # --- Mutators ---

    def update_bio(self, bio: str) -> None:
        """Replace the biography."""
        self.bio = bio
        self._touch()

    def update_basic_info(
        self,
        date_of_birth: date | None = None,
        gender: Gender | None = None,
        height: int | None = None,
        weight: int | None = None,
        location: str | None = None,
    ) -> None:
        """Partially update basic info. ``None`` leaves a field unchanged."""
        if height is not None and not MIN_HEIGHT_CM <= height <= MAX_HEIGHT_CM:
            raise InvalidRangeError(
                "height",
                f"Height must be between {MIN_HEIGHT_CM} and {MAX_HEIGHT_CM} cm",
            )
        if weight is not None and not MIN_WEIGHT_KG <= weight <= MAX_WEIGHT_KG:
            raise InvalidRangeError(
                "weight",
                f"Weight must be between {MIN_WEIGHT_KG} and {MAX_WEIGHT_KG} kg",
            )
        if gender is not None:
            gender = parse_choice(Gender, gender, "gender")

        if date_of_birth is not None:
            self.date_of_birth = date_of_birth
        if gender is not None:
            self.gender = gender
        if height is not None:
            self.height = height
        if weight is not None:
            self.weight = weight
        if location is not None:
            self.location = location
        self._touch()

    def update_professional_info(
        self, occupation: str | None = None, education: str | None = None
    ) -> None:
        """Partially update occupation and education."""
        if occupation is not None:
            self.occupation = occupation
        if education is not None:
            self.education = education
        self._touch()

    def update_relationship_status(self, status: RelationshipStatus) -> None:
        self.relationship_status = parse_choice(RelationshipStatus, status, "relationship_status")
        self._touch()

    def add_interest(self, interest: str) -> None:
        """Add an interest tag. Adding an existing tag changes nothing."""
        if interest in self.interests:
            return
        self.interests.add(interest)
        self._touch()

    def remove_interest(self, interest: str) -> None:
        self.interests.discard(interest)
        self._touch()

    def replace_interests(self, interests: Iterable[str]) -> None:
        """Replace all interests; duplicates collapse."""
        self.interests = set(interests)
        self._touch()

    def add_photo(self, photo: str) -> None:
        """Append a photo reference. Adding an existing reference changes nothing."""
        if photo in self.photos:
            return
        self.photos.append(photo)
        self._touch()

    def remove_photo(self, photo: str) -> None:
        self.photos = [p for p in self.photos if p != photo]
        self._touch()

    def reorder_photos(self, photos: Iterable[str]) -> None:
        """Reorder photos to the requested order.

        Only references already on the profile are kept; unknown references
        are dropped. Completeness is not recomputed here.
        """
        current = set(self.photos)
        self.photos = [p for p in dict.fromkeys(photos) if p in current]
        self.updated_at = datetime.utcnow()

    def set_visibility(self, is_visible: bool) -> None:
        self.is_visible = is_visible
        self.updated_at = datetime.utcnow()

    # --- Queries ---

    def get_age(self, today: date | None = None) -> int | None:
        """Age in whole years, or None when no date of birth is stored."""
        if self.date_of_birth is None:
            return None
        return calculate_age(self.date_of_birth, today)

    def has_photos(self) -> bool:
        return len(self.photos) > 0

    # --- Internals ---

    def _touch(self) -> None:
        self.updated_at = datetime.utcnow()
        self._recompute_completeness()

    def _recompute_completeness(self) -> None:
        has_basic_info = bool(
            self.bio and self.date_of_birth and self.gender and self.location
        )
        self._is_complete = has_basic_info and bool(self.photos) and bool(self.interests)

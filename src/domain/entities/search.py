"""Profile search criteria."""

from dataclasses import dataclass, field
from datetime import date, timedelta
from uuid import UUID

from domain.entities.profile import Gender


def years_before(day: date, years: int) -> date:
    """Same calendar day ``years`` earlier; Feb 29 falls back to Feb 28."""
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)


@dataclass(frozen=True)
class ProfileSearchCriteria:
    """Optional constraints for a profile search. ``None`` means unconstrained."""

    min_age: int | None = None
    max_age: int | None = None
    location: str | None = None
    interests: frozenset[str] = field(default_factory=frozenset)
    gender: Gender | None = None
    exclude_user_id: UUID | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "interests", frozenset(self.interests or ()))

    @property
    def has_age_bounds(self) -> bool:
        return self.min_age is not None or self.max_age is not None

    def birth_date_bounds(self, today: date | None = None) -> tuple[date | None, date | None]:
        """Convert the age bounds into inclusive date-of-birth bounds.

        Returns ``(earliest, latest)``: a profile's age is within
        ``[min_age, max_age]`` exactly when its date of birth lies in
        ``[earliest, latest]``. Either side is None when unbounded.
        """
        today = today or date.today()
        earliest: date | None = None
        latest: date | None = None
        if self.max_age is not None:
            # Anyone born on or before this day is already max_age + 1.
            earliest = years_before(today, self.max_age + 1) + timedelta(days=1)
        if self.min_age is not None:
            latest = years_before(today, self.min_age)
        return earliest, latest

"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile
from domain.entities.search import ProfileSearchCriteria


class IProfileRepository(Protocol):
    """Repository interface for Profile entities.

    All ``find_*`` queries return visible profiles only, skip
    ``exclude_user_id`` when given and order by ``updated_at`` descending.
    """

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by ID."""
        ...

    async def get_by_user_id(self, user_id: UUID) -> Profile | None:
        """Get the profile owned by a user."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        ...

    async def update(self, profile: Profile) -> Profile:
        """Update an existing profile."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a profile and return success status."""
        ...

    async def find_visible_profiles(self, exclude_user_id: UUID | None = None) -> list[Profile]:
        """Get all visible profiles."""
        ...

    async def find_profiles_by_location(
        self, location: str, exclude_user_id: UUID | None = None
    ) -> list[Profile]:
        """Get visible profiles whose location contains ``location`` (case-insensitive)."""
        ...

    async def find_profiles_by_interests(
        self, interests: list[str], exclude_user_id: UUID | None = None
    ) -> list[Profile]:
        """Get visible profiles sharing at least one interest."""
        ...

    async def find_complete_profiles(self, exclude_user_id: UUID | None = None) -> list[Profile]:
        """Get visible profiles flagged complete."""
        ...

    async def search_profiles(self, criteria: ProfileSearchCriteria) -> list[Profile]:
        """Get visible profiles matching every given criterion."""
        ...

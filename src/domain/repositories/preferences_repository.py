"""Preferences repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.preferences import NotificationType, Preferences


class IPreferencesRepository(Protocol):
    """Repository interface for Preferences entities."""

    async def get(self, id: UUID) -> Preferences | None:
        """Get preferences by ID."""
        ...

    async def get_by_user_id(self, user_id: UUID) -> Preferences | None:
        """Get the preferences owned by a user."""
        ...

    async def get_by_user_ids(self, user_ids: list[UUID]) -> dict[UUID, Preferences]:
        """Get preferences for several users in one query, keyed by user ID."""
        ...

    async def create(self, preferences: Preferences) -> Preferences:
        """Create new preferences."""
        ...

    async def update(self, preferences: Preferences) -> Preferences:
        """Update existing preferences."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete preferences and return success status."""
        ...

    async def find_users_with_notifications_enabled(
        self, notification_type: NotificationType
    ) -> list[UUID]:
        """Get IDs of users who have the given notification toggle on."""
        ...

"""SQLAlchemy implementation of Preferences repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.preferences import DistanceUnit, NotificationType, Preferences
from domain.entities.profile import Gender
from infrastructure.database.models import PreferencesModel

_FLAG_FIELDS = (
    "show_only_verified_profiles",
    "show_only_with_photos",
    "allow_messages_from_matches",
    "allow_messages_from_everyone",
    "show_online_status",
    "show_last_seen",
    "push_notifications",
    "email_notifications",
    "match_notifications",
    "message_notifications",
    "like_notifications",
)


class SQLAlchemyPreferencesRepository:
    """SQLAlchemy implementation of IPreferencesRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Preferences | None:
        """Get preferences by ID."""
        stmt = select(PreferencesModel).where(PreferencesModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_user_id(self, user_id: UUID) -> Preferences | None:
        """Get the preferences owned by a user."""
        stmt = select(PreferencesModel).where(PreferencesModel.user_id == user_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_user_ids(self, user_ids: list[UUID]) -> dict[UUID, Preferences]:
        """Get preferences for several users in a single query."""
        if not user_ids:
            return {}
        stmt = select(PreferencesModel).where(PreferencesModel.user_id.in_(user_ids))
        result = await self._session.execute(stmt)
        return {model.user_id: self._to_entity(model) for model in result.scalars()}

    async def create(self, preferences: Preferences) -> Preferences:
        """Create new preferences."""
        model = self._to_model(preferences)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, preferences: Preferences) -> Preferences:
        """Update existing preferences."""
        stmt = select(PreferencesModel).where(PreferencesModel.id == preferences.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Preferences {preferences.id} not found")

        model.preferred_genders = sorted(g.value for g in preferences.preferred_genders)
        model.min_age = preferences.min_age
        model.max_age = preferences.max_age
        model.max_distance = preferences.max_distance
        model.distance_unit = preferences.distance_unit.value
        model.preferred_interests = sorted(preferences.preferred_interests)
        model.deal_breakers = sorted(preferences.deal_breakers)
        for name in _FLAG_FIELDS:
            setattr(model, name, getattr(preferences, name))
        model.updated_at = preferences.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete preferences."""
        stmt = select(PreferencesModel).where(PreferencesModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def find_users_with_notifications_enabled(
        self, notification_type: NotificationType
    ) -> list[UUID]:
        """Get IDs of users who have the given notification toggle on."""
        column = getattr(PreferencesModel, NotificationType(notification_type).value)
        stmt = select(PreferencesModel.user_id).where(column.is_(True))
        result = await self._session.execute(stmt)
        return list(result.scalars())

    def _to_entity(self, model: PreferencesModel) -> Preferences:
        """Convert ORM model to domain entity."""
        return Preferences(
            id=model.id,
            user_id=model.user_id,
            preferred_genders={Gender(g) for g in model.preferred_genders or []},
            min_age=model.min_age,
            max_age=model.max_age,
            max_distance=model.max_distance,
            distance_unit=DistanceUnit(model.distance_unit),
            preferred_interests=set(model.preferred_interests or []),
            deal_breakers=set(model.deal_breakers or []),
            created_at=model.created_at,
            updated_at=model.updated_at,
            **{name: getattr(model, name) for name in _FLAG_FIELDS},
        )

    def _to_model(self, entity: Preferences) -> PreferencesModel:
        """Convert domain entity to ORM model."""
        return PreferencesModel(
            id=entity.id,
            user_id=entity.user_id,
            preferred_genders=sorted(g.value for g in entity.preferred_genders),
            min_age=entity.min_age,
            max_age=entity.max_age,
            max_distance=entity.max_distance,
            distance_unit=entity.distance_unit.value,
            preferred_interests=sorted(entity.preferred_interests),
            deal_breakers=sorted(entity.deal_breakers),
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            **{name: getattr(entity, name) for name in _FLAG_FIELDS},
        )

"""SQLAlchemy implementation of Profile repository."""

from datetime import date
from typing import Iterable
from uuid import UUID

from sqlalchemy import ColumnElement, Select, Text, select
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.profile import Gender, Profile, RelationshipStatus
from domain.entities.search import ProfileSearchCriteria
from domain.services.discovery_engine import DiscoveryEngine
from infrastructure.database.models import ProfileModel


def interest_overlap(interests: Iterable[str]) -> ColumnElement[bool]:
    """PostgreSQL clause: the stored interest array shares any of ``interests``."""
    return ProfileModel.interests.has_any(postgresql.array(sorted(set(interests)), type_=Text))


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository.

    All filters run in SQL on PostgreSQL, where interest overlap uses the JSONB
    `?|` operator and its GIN index. Other dialects have no such operator, so
    interest overlap is checked after loading there.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by ID."""
        stmt = select(ProfileModel).where(ProfileModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_user_id(self, user_id: UUID) -> Profile | None:
        """Get the profile owned by a user."""
        stmt = select(ProfileModel).where(ProfileModel.user_id == user_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, profile: Profile) -> Profile:
        """Create a new profile."""
        model = self._to_model(profile)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, profile: Profile) -> Profile:
        """Update an existing profile."""
        stmt = select(ProfileModel).where(ProfileModel.id == profile.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Profile {profile.id} not found")

        model.bio = profile.bio
        model.date_of_birth = profile.date_of_birth
        model.gender = profile.gender.value if profile.gender else None
        model.height = profile.height
        model.weight = profile.weight
        model.location = profile.location
        model.occupation = profile.occupation
        model.education = profile.education
        model.relationship_status = (
            profile.relationship_status.value if profile.relationship_status else None
        )
        model.interests = sorted(profile.interests)
        model.photos = list(profile.photos)
        model.is_visible = profile.is_visible
        model.is_complete = profile.is_complete
        model.updated_at = profile.updated_at

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a profile."""
        stmt = select(ProfileModel).where(ProfileModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def find_visible_profiles(self, exclude_user_id: UUID | None = None) -> list[Profile]:
        """Get all visible profiles, newest-updated first."""
        return await self._fetch(self._visible(exclude_user_id))

    async def find_profiles_by_location(
        self, location: str, exclude_user_id: UUID | None = None
    ) -> list[Profile]:
        """Get visible profiles whose location contains ``location``, ignoring case."""
        stmt = self._visible(exclude_user_id).where(
            ProfileModel.location.icontains(location, autoescape=True)
        )
        return await self._fetch(stmt)

    async def find_profiles_by_interests(
        self, interests: list[str], exclude_user_id: UUID | None = None
    ) -> list[Profile]:
        """Get visible profiles sharing at least one of ``interests``."""
        if not interests:
            return []
        stmt = self._visible(exclude_user_id)
        if self._supports_jsonb():
            return await self._fetch(stmt.where(interest_overlap(interests)))
        wanted = set(interests)
        profiles = await self._fetch(stmt)
        return [p for p in profiles if not wanted.isdisjoint(p.interests)]

    async def find_complete_profiles(self, exclude_user_id: UUID | None = None) -> list[Profile]:
        """Get visible profiles flagged complete."""
        stmt = self._visible(exclude_user_id).where(ProfileModel.is_complete.is_(True))
        return await self._fetch(stmt)

    async def search_profiles(
        self, criteria: ProfileSearchCriteria, today: date | None = None
    ) -> list[Profile]:
        """Get visible profiles matching every given criterion."""
        today = today or date.today()
        stmt = self._visible(criteria.exclude_user_id)

        if criteria.has_age_bounds:
            earliest, latest = criteria.birth_date_bounds(today)
            stmt = stmt.where(ProfileModel.date_of_birth.is_not(None))
            if earliest is not None:
                stmt = stmt.where(ProfileModel.date_of_birth >= earliest)
            if latest is not None:
                stmt = stmt.where(ProfileModel.date_of_birth <= latest)
        if criteria.location:
            stmt = stmt.where(
                ProfileModel.location.icontains(criteria.location, autoescape=True)
            )
        if criteria.gender is not None:
            stmt = stmt.where(ProfileModel.gender == criteria.gender.value)
        if criteria.interests and self._supports_jsonb():
            stmt = stmt.where(interest_overlap(criteria.interests))
            return await self._fetch(stmt)

        profiles = await self._fetch(stmt)
        engine = DiscoveryEngine()
        return [p for p in profiles if engine.matches_criteria(p, criteria, today)]

    def _supports_jsonb(self) -> bool:
        return self._session.get_bind().dialect.name == "postgresql"

    def _visible(self, exclude_user_id: UUID | None) -> Select[tuple[ProfileModel]]:
        stmt = select(ProfileModel).where(ProfileModel.is_visible.is_(True))
        if exclude_user_id is not None:
            stmt = stmt.where(ProfileModel.user_id != exclude_user_id)
        return stmt.order_by(ProfileModel.updated_at.desc(), ProfileModel.id)

    async def _fetch(self, stmt: Select[tuple[ProfileModel]]) -> list[Profile]:
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            user_id=model.user_id,
            bio=model.bio,
            date_of_birth=model.date_of_birth,
            gender=Gender(model.gender) if model.gender else None,
            height=model.height,
            weight=model.weight,
            location=model.location,
            occupation=model.occupation,
            education=model.education,
            relationship_status=(
                RelationshipStatus(model.relationship_status)
                if model.relationship_status
                else None
            ),
            interests=set(model.interests or []),
            photos=list(model.photos or []),
            is_visible=model.is_visible,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            user_id=entity.user_id,
            bio=entity.bio,
            date_of_birth=entity.date_of_birth,
            gender=entity.gender.value if entity.gender else None,
            height=entity.height,
            weight=entity.weight,
            location=entity.location,
            occupation=entity.occupation,
            education=entity.education,
            relationship_status=(
                entity.relationship_status.value if entity.relationship_status else None
            ),
            interests=sorted(entity.interests),
            photos=list(entity.photos),
            is_visible=entity.is_visible,
            is_complete=entity.is_complete,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

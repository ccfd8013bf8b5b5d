"""Unit tests for ProfileService."""

from datetime import date, timedelta
from unittest.mock import MagicMock
from uuid import UUID, uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    AppException,
    EntityAlreadyExistsError,
    EntityNotFoundError,
    ErrorCode,
    InvalidInputError,
)
from domain.entities.profile import Gender, Profile
from domain.entities.search import ProfileSearchCriteria
from domain.services.profile_service import ProfileService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork) -> ProfileService:
    return ProfileService(lambda: uow, minimum_user_age=18, max_photos=6)


@pytest.fixture
def profile(uow: FakeUnitOfWork, user_id: UUID) -> Profile:
    existing = Profile(user_id=user_id)
    uow.profiles.get_by_user_id.return_value = existing
    return existing


# --- create_profile ---


class TestCreateProfile:
    @pytest.mark.asyncio
    async def test_creates_empty_profile(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.profiles.get_by_user_id.return_value = None
        uow.profiles.create.side_effect = lambda p: p

        result = await service.create_profile(user_id)

        assert result.user_id == user_id
        assert result.is_visible is True
        assert result.is_complete is False
        assert uow.committed

    @pytest.mark.asyncio
    async def test_rejects_second_profile(
        self, service: ProfileService, uow: FakeUnitOfWork, profile: Profile, user_id: UUID
    ):
        with pytest.raises(EntityAlreadyExistsError) as exc_info:
            await service.create_profile(user_id)

        assert exc_info.value.status_code == 409
        uow.profiles.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_unique_violation_becomes_already_exists(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.profiles.get_by_user_id.return_value = None
        uow.profiles.create.side_effect = IntegrityError(
            "INSERT", {}, Exception("UNIQUE constraint failed: profiles.user_id")
        )

        with pytest.raises(EntityAlreadyExistsError):
            await service.create_profile(user_id)

        assert uow.rolled_back
        assert not uow.committed


# --- lookups ---


class TestLookups:
    @pytest.mark.asyncio
    async def test_missing_profile_raises_not_found(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.profiles.get_by_user_id.return_value = None

        with pytest.raises(EntityNotFoundError) as exc_info:
            await service.get_profile_by_user_id(user_id)

        assert exc_info.value.error_code == ErrorCode.ENTITY_NOT_FOUND

    @pytest.mark.asyncio
    async def test_get_by_id(self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID):
        stored = Profile(user_id=user_id)
        uow.profiles.get.return_value = stored

        assert await service.get_profile_by_id(stored.id) is stored

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, service: ProfileService, uow: FakeUnitOfWork):
        uow.profiles.get.return_value = None

        with pytest.raises(EntityNotFoundError):
            await service.get_profile_by_id(uuid4())


# --- mutations ---


class TestUpdateBasicInfo:
    @pytest.mark.asyncio
    async def test_updates_and_commits(
        self, service: ProfileService, uow: FakeUnitOfWork, profile: Profile, user_id: UUID
    ):
        result = await service.update_basic_info(
            user_id, date_of_birth=date(1990, 5, 17), gender=Gender.MALE, height=182
        )

        assert result.date_of_birth == date(1990, 5, 17)
        assert result.height == 182
        uow.profiles.update.assert_called_once_with(profile)
        assert uow.committed

    @pytest.mark.asyncio
    async def test_underage_rejected(
        self, service: ProfileService, uow: FakeUnitOfWork, profile: Profile, user_id: UUID
    ):
        too_young = date.today() - timedelta(days=365 * 17)

        with pytest.raises(InvalidInputError) as exc_info:
            await service.update_basic_info(user_id, date_of_birth=too_young)

        assert exc_info.value.details["field"] == "date_of_birth"
        assert profile.date_of_birth is None
        uow.profiles.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_out_of_range_height_becomes_invalid_input(
        self, service: ProfileService, uow: FakeUnitOfWork, profile: Profile, user_id: UUID
    ):
        with pytest.raises(InvalidInputError) as exc_info:
            await service.update_basic_info(user_id, height=300)

        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"field": "height"}
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_not_found(self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID):
        uow.profiles.get_by_user_id.return_value = None

        with pytest.raises(AppException):
            await service.update_bio(user_id, "hello")


class TestPhotos:
    @pytest.mark.asyncio
    async def test_seventh_photo_rejected(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        full = Profile(user_id=user_id, photos=[f"p{i}" for i in range(6)])
        uow.profiles.get_by_user_id.return_value = full

        with pytest.raises(InvalidInputError):
            await service.add_photo(user_id, "p6")

        assert len(full.photos) == 6
        uow.profiles.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_existing_photo_at_cap_rejected(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        full = Profile(user_id=user_id, photos=[f"p{i}" for i in range(6)])
        uow.profiles.get_by_user_id.return_value = full

        with pytest.raises(InvalidInputError):
            await service.add_photo(user_id, "p3")

        assert full.photos == [f"p{i}" for i in range(6)]
        uow.profiles.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_existing_photo_below_cap_is_noop(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.profiles.get_by_user_id.return_value = Profile(user_id=user_id, photos=["a", "b"])

        result = await service.add_photo(user_id, "a")

        assert result.photos == ["a", "b"]
        uow.profiles.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_explicit_zero_cap_is_honoured(
        self, uow: FakeUnitOfWork, profile: Profile, user_id: UUID
    ):
        service = ProfileService(lambda: uow, max_photos=0)

        with pytest.raises(InvalidInputError):
            await service.add_photo(user_id, "photos/1.jpg")

        assert profile.photos == []

    @pytest.mark.asyncio
    async def test_adds_photo(
        self, service: ProfileService, uow: FakeUnitOfWork, profile: Profile, user_id: UUID
    ):
        result = await service.add_photo(user_id, "photos/1.jpg")

        assert result.photos == ["photos/1.jpg"]
        assert uow.committed

    @pytest.mark.asyncio
    async def test_reorder(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.profiles.get_by_user_id.return_value = Profile(user_id=user_id, photos=["a", "b"])

        result = await service.reorder_photos(user_id, ["b", "x", "a"])

        assert result.photos == ["b", "a"]


class TestInterestsAndVisibility:
    @pytest.mark.asyncio
    async def test_update_interests(
        self, service: ProfileService, uow: FakeUnitOfWork, profile: Profile, user_id: UUID
    ):
        result = await service.update_interests(user_id, ["art", "art", "film"])

        assert result.interests == {"art", "film"}

    @pytest.mark.asyncio
    async def test_hide_profile(
        self, service: ProfileService, uow: FakeUnitOfWork, profile: Profile, user_id: UUID
    ):
        result = await service.set_visibility(user_id, False)

        assert result.is_visible is False
        assert uow.committed


class TestUpdateProfile:
    @pytest.mark.asyncio
    async def test_applies_several_fields(
        self, service: ProfileService, uow: FakeUnitOfWork, profile: Profile, user_id: UUID
    ):
        result = await service.update_profile(
            user_id,
            bio="Baker",
            date_of_birth=date(1992, 8, 1),
            gender=Gender.FEMALE,
            location="Lisbon",
            occupation="Chef",
            interests=["food", "surf"],
        )

        assert result.bio == "Baker"
        assert result.gender == Gender.FEMALE
        assert result.location == "Lisbon"
        assert result.occupation == "Chef"
        assert result.interests == {"food", "surf"}
        assert result.height is None
        uow.profiles.update.assert_called_once_with(profile)
        assert uow.committed

    @pytest.mark.asyncio
    async def test_omitted_fields_are_kept(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        stored = Profile(user_id=user_id, bio="old", interests={"chess"}, height=170)
        uow.profiles.get_by_user_id.return_value = stored

        result = await service.update_profile(user_id, is_visible=False)

        assert result.is_visible is False
        assert result.bio == "old"
        assert result.interests == {"chess"}
        assert result.height == 170

    @pytest.mark.asyncio
    async def test_underage_rejected(
        self, service: ProfileService, uow: FakeUnitOfWork, profile: Profile, user_id: UUID
    ):
        too_young = date.today() - timedelta(days=365 * 17)

        with pytest.raises(InvalidInputError) as exc_info:
            await service.update_profile(user_id, bio="hi", date_of_birth=too_young)

        assert exc_info.value.details["field"] == "date_of_birth"
        assert profile.bio is None
        uow.profiles.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_one_invalid_field_persists_nothing(
        self, service: ProfileService, uow: FakeUnitOfWork, profile: Profile, user_id: UUID
    ):
        with pytest.raises(InvalidInputError) as exc_info:
            await service.update_profile(user_id, bio="hello", height=300)

        assert exc_info.value.details == {"field": "height"}
        uow.profiles.update.assert_not_called()
        assert not uow.committed
        assert uow.rolled_back

    @pytest.mark.asyncio
    async def test_unknown_gender_becomes_invalid_input(
        self, service: ProfileService, uow: FakeUnitOfWork, profile: Profile, user_id: UUID
    ):
        with pytest.raises(InvalidInputError) as exc_info:
            await service.update_profile(user_id, gender="ALIEN")  # type: ignore[arg-type]

        assert exc_info.value.details == {"field": "gender"}
        uow.profiles.update.assert_not_called()

    @pytest.mark.asyncio
    async def test_explicit_zero_minimum_age_is_honoured(
        self, uow: FakeUnitOfWork, profile: Profile, user_id: UUID
    ):
        service = ProfileService(lambda: uow, minimum_user_age=0)
        child = date.today() - timedelta(days=365 * 10)

        result = await service.update_profile(user_id, date_of_birth=child)

        assert result.date_of_birth == child


class TestDelete:
    @pytest.mark.asyncio
    async def test_deletes_profile_only(
        self, service: ProfileService, uow: FakeUnitOfWork, profile: Profile, user_id: UUID
    ):
        await service.delete_profile(user_id)

        uow.profiles.delete.assert_called_once_with(profile.id)
        uow.preferences.delete.assert_not_called()
        assert uow.committed


# --- discovery accessors ---


class TestDiscoveryAccessors:
    @pytest.mark.asyncio
    async def test_empty_interest_list_skips_query(
        self, service: ProfileService, uow: FakeUnitOfWork
    ):
        assert await service.get_profiles_by_interests([]) == []
        uow.profiles.find_profiles_by_interests.assert_not_called()

    @pytest.mark.asyncio
    async def test_interest_query_deduplicates(
        self, service: ProfileService, uow: FakeUnitOfWork, user_id: UUID
    ):
        uow.profiles.find_profiles_by_interests.return_value = []

        await service.get_profiles_by_interests(["a", "b", "a"], exclude_user_id=user_id)

        uow.profiles.find_profiles_by_interests.assert_called_once_with(["a", "b"], user_id)

    @pytest.mark.asyncio
    async def test_search_passes_criteria(self, service: ProfileService, uow: FakeUnitOfWork):
        match = MagicMock(spec=Profile)
        uow.profiles.search_profiles.return_value = [match]
        criteria = ProfileSearchCriteria(min_age=25, location="berlin")

        result = await service.search_profiles(criteria)

        assert result == [match]
        uow.profiles.search_profiles.assert_called_once_with(criteria)

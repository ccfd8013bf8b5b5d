"""Unit tests for service wiring."""

from core.dependencies import (
    get_discovery_service,
    get_preferences_service,
    get_profile_service,
    get_uow_factory,
)
from domain.services.discovery_service import DiscoveryService
from domain.services.preferences_service import PreferencesService
from domain.services.profile_service import ProfileService
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


class TestDependencies:
    def test_services_are_cached(self):
        assert isinstance(get_profile_service(), ProfileService)
        assert isinstance(get_preferences_service(), PreferencesService)
        assert isinstance(get_discovery_service(), DiscoveryService)
        assert get_profile_service() is get_profile_service()

    def test_uow_factory_creates_fresh_units(self):
        factory = get_uow_factory()

        first, second = factory(), factory()

        assert isinstance(first, SQLAlchemyUnitOfWork)
        assert first is not second

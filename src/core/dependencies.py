"""Service wiring shared by whatever transport hosts the services."""

from functools import lru_cache
from typing import Callable

from domain.services.discovery_service import DiscoveryService
from domain.services.preferences_service import PreferencesService
from domain.services.profile_service import ProfileService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Get a factory that creates a fresh Unit of Work per call."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_profile_service() -> ProfileService:
    """Get cached profile service instance."""
    return ProfileService(get_uow_factory())


@lru_cache
def get_preferences_service() -> PreferencesService:
    """Get cached preferences service instance."""
    return PreferencesService(get_uow_factory())


@lru_cache
def get_discovery_service() -> DiscoveryService:
    """Get cached discovery service instance."""
    return DiscoveryService(get_uow_factory())

"""Unit tests for settings and logging setup."""

import logging

import pytest
import structlog
from pydantic import ValidationError

from core.config import Settings
from core.exceptions import ErrorCode
from core.logging import setup_logging


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.minimum_user_age == 18
        assert settings.max_profile_photos == 6
        assert settings.discovery_require_mutual is True
        assert settings.is_production is False

    def test_minimum_age_cannot_drop_below_eighteen(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, minimum_user_age=16)

    def test_plain_postgres_url_gets_async_driver(self):
        settings = Settings(_env_file=None, database_url="postgresql://db:5432/amora")

        assert settings.async_database_url == "postgresql+asyncpg://db:5432/amora"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("MAX_PROFILE_PHOTOS", "9")
        monkeypatch.setenv("DISCOVERY_REQUIRE_MUTUAL", "false")

        settings = Settings(_env_file=None)

        assert settings.max_profile_photos == 9
        assert settings.discovery_require_mutual is False

    def test_only_runtime_database_url(self):
        assert "test_database_url" not in Settings.model_fields

    def test_error_codes_are_the_raised_ones(self):
        assert {code.value for code in ErrorCode} == {
            "ENTITY_NOT_FOUND",
            "INVALID_INPUT",
            "ENTITY_ALREADY_EXISTS",
        }


class TestSetupLogging:
    def test_console_renderer_outside_production(self):
        setup_logging(Settings(_env_file=None, log_level="warning"))

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
        assert logging.getLogger().level == logging.WARNING

    def test_json_renderer_in_production(self):
        setup_logging(Settings(_env_file=None, app_env="production"))

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_debug_enables_sql_logging(self):
        setup_logging(Settings(_env_file=None, debug=True))

        assert logging.getLogger("sqlalchemy.engine").level == logging.INFO
        assert logging.getLogger().level == logging.DEBUG

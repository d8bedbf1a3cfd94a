"""Unit tests for application settings."""

import pytest
from pydantic import ValidationError

from rolegate.config import Settings
from rolegate.core.constants import DEFAULT_INSECURE_REFRESH_SECRET, DEFAULT_INSECURE_SECRET


pytestmark = pytest.mark.unit

ACCESS = "a" * 40
REFRESH = "b" * 40


class TestSecrets:
    def test_short_secret_rejected(self):
        with pytest.raises(ValidationError):
            Settings(secret_key="short", refresh_secret_key=REFRESH)

    def test_secrets_must_differ(self):
        with pytest.raises(ValidationError):
            Settings(secret_key=ACCESS, refresh_secret_key=ACCESS)

    def test_placeholders_allowed_outside_production(self):
        settings = Settings(
            environment="development",
            secret_key=DEFAULT_INSECURE_SECRET,
            refresh_secret_key=DEFAULT_INSECURE_REFRESH_SECRET,
        )

        assert settings.is_production is False

    def test_placeholders_refused_in_production(self):
        settings = Settings(
            environment="production",
            secret_key=DEFAULT_INSECURE_SECRET,
            refresh_secret_key=DEFAULT_INSECURE_REFRESH_SECRET,
        )

        with pytest.raises(ValueError):
            _ = settings.is_production


class TestDatabaseUrl:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("postgresql://u:p@db:5432/app", "postgresql+asyncpg://u:p@db:5432/app"),
            ("sqlite://", "sqlite+aiosqlite://"),
            ("postgresql+asyncpg://u:p@db/app", "postgresql+asyncpg://u:p@db/app"),
        ],
    )
    def test_async_driver_rewrite(self, url: str, expected: str):
        settings = Settings(database_url=url, secret_key=ACCESS, refresh_secret_key=REFRESH)

        assert settings.async_database_url == expected

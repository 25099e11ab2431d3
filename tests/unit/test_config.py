"""
Unit tests for application configuration.
"""

import os
from unittest.mock import patch

from notesync.config import Settings, get_settings


class TestSettings:
    """Test Settings configuration class."""

    def test_default_settings(self):
        """Test default settings values."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.app_name == "NoteSync API"
        assert settings.debug is False
        assert settings.port == 8000
        assert settings.database_url.startswith("postgresql+asyncpg://")
        assert settings.redis_url == "redis://localhost:6379/0"
        assert settings.algorithm == "HS256"
        assert settings.activity_page_size == 50
        assert settings.collab_outbox_size == 1000
        assert settings.log_level == "INFO"

    def test_environment_overrides(self):
        env = {
            "DEBUG": "true",
            "ACTIVITY_PAGE_SIZE": "20",
            "COLLAB_OUTBOX_SIZE": "5",
            "CORS_ORIGINS": '["http://localhost:3000"]',
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)

        assert settings.debug is True
        assert settings.activity_page_size == 20
        assert settings.collab_outbox_size == 5
        assert settings.cors_origins == ["http://localhost:3000"]

    def test_get_settings_returns_shared_instance(self):
        assert get_settings() is get_settings()

"""Unit tests for configuration management."""
import pytest
from pydantic import ValidationError
from welltrack.config import Settings, get_settings


class TestSettings:
    """Test Settings configuration class."""

    def test_settings_has_default_values(self, monkeypatch):
        """Test Settings provides default values where applicable."""
        monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/test")
        monkeypatch.setenv("DEBUG", "false")

        settings = Settings(_env_file=None)

        assert settings.APP_NAME == "WellTrack"
        assert settings.DEBUG is False
        assert settings.API_V1_PREFIX == "/api/v1"
        assert settings.ANALYSIS_POLL_INTERVAL == 0.5
        assert settings.ANALYSIS_QUEUE_MAX_DEPTH == 1000
        assert settings.RESULT_BACKEND == "memory"

    def test_settings_requires_database_url(self, monkeypatch):
        """Test DATABASE_URL is mandatory."""
        monkeypatch.delenv("DATABASE_URL", raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_settings_can_override_inference_options(self, monkeypatch):
        """Test inference settings are read from the environment."""
        monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/test")
        monkeypatch.setenv("ML_BASE_URL", "http://ml.local:9000")
        monkeypatch.setenv("INFERENCE_TIMEOUT_SECONDS", "2.5")

        settings = Settings(_env_file=None)

        assert settings.ML_BASE_URL == "http://ml.local:9000"
        assert settings.INFERENCE_TIMEOUT_SECONDS == 2.5

    def test_settings_can_override_queue_bounds(self, monkeypatch):
        """Test queue and result history bounds are configurable."""
        monkeypatch.setenv("DATABASE_URL", "postgresql://localhost/test")
        monkeypatch.setenv("ANALYSIS_QUEUE_MAX_DEPTH", "5")
        monkeypatch.setenv("RESULT_HISTORY_LIMIT", "3")
        monkeypatch.setenv("RESULT_TTL_SECONDS", "0")

        settings = Settings(_env_file=None)

        assert settings.ANALYSIS_QUEUE_MAX_DEPTH == 5
        assert settings.RESULT_HISTORY_LIMIT == 3
        assert settings.RESULT_TTL_SECONDS == 0

    def test_get_settings_returns_cached_instance(self):
        """Test get_settings returns cached Settings instance."""
        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

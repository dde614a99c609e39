"""
Tests for settings and roster backend configuration.
"""

import pytest

from student_roster.core.config import PLACEHOLDER_API_URL, Settings
from student_roster.core.roster_config import (
    BackendType, LocalStoreConfig, RemoteEndpointConfig,
    local_config_from_settings, remote_config_from_settings, resolve_backend_type
)


class TestSettings:
    """Test environment-backed settings."""

    def test_defaults(self):
        """Test default settings select mock data mode and 20s polling."""
        settings = Settings(_env_file=None)

        assert settings.ROSTER_API_URL == PLACEHOLDER_API_URL
        assert settings.ROSTER_POLL_INTERVAL_SECONDS == 20.0
        assert settings.ROSTER_MAX_RETRIES == 3
        assert settings.ROSTER_RETRY_BASE_DELAY == 1.0
        assert settings.LOCAL_STORE_KEY == "mockStudents"

    def test_api_url_is_stripped(self):
        settings = Settings(_env_file=None, ROSTER_API_URL="  https://script.google.com/macros/s/abc/exec ")

        assert settings.ROSTER_API_URL == "https://script.google.com/macros/s/abc/exec"

    def test_log_level_normalized(self):
        settings = Settings(_env_file=None, LOG_LEVEL="debug")

        assert settings.LOG_LEVEL == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="Unknown LOG_LEVEL"):
            Settings(_env_file=None, LOG_LEVEL="chatty")

    def test_invalid_poll_interval(self):
        with pytest.raises(ValueError, match="must be positive"):
            Settings(_env_file=None, ROSTER_POLL_INTERVAL_SECONDS=0)

    def test_negative_retries(self):
        with pytest.raises(ValueError, match="must not be negative"):
            Settings(_env_file=None, ROSTER_MAX_RETRIES=-1)


class TestBackendResolution:
    """Test the placeholder URL switch."""

    @pytest.mark.parametrize("url", [PLACEHOLDER_API_URL, "", "   ", None])
    def test_placeholder_selects_local(self, url):
        assert resolve_backend_type(url) == BackendType.LOCAL

    def test_real_url_selects_remote(self):
        assert resolve_backend_type("https://script.google.com/macros/s/abc/exec") == BackendType.REMOTE

    def test_configs_from_settings(self):
        settings = Settings(
            _env_file=None,
            ROSTER_API_URL="https://script.google.com/macros/s/abc/exec",
            ROSTER_REQUEST_TIMEOUT=10,
            LOCAL_STORE_PATH="",
            LOCAL_STORE_LATENCY_SECONDS=0
        )

        remote = remote_config_from_settings(settings)
        local = local_config_from_settings(settings)

        assert remote.url == "https://script.google.com/macros/s/abc/exec"
        assert remote.timeout == 10
        assert remote.max_retries == 3
        assert local.path is None
        assert local.latency == 0


class TestEndpointConfigs:
    """Test pydantic validation of backend configs."""

    def test_invalid_remote_url(self):
        with pytest.raises(ValueError, match="must start with http"):
            RemoteEndpointConfig(url="script.google.com/macros")

    def test_negative_latency(self):
        with pytest.raises(ValueError, match="latency must not be negative"):
            LocalStoreConfig(latency=-1)

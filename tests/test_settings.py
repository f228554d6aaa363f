"""Tests for application configuration."""

from pathlib import Path
from unittest.mock import patch

import pytest

from jsonpage.settings import (
    Settings,
    load_settings_from_env,
    get_settings,
    clear_settings_cache,
)


class TestSettings:
    """Tests for Settings dataclass."""

    def test_default_settings(self):
        """Default settings are valid."""
        settings = Settings()
        assert settings.port == 8080
        assert settings.ai_design is False
        assert settings.components_dir == Path("components")
        assert settings.cache_dir == Path("components/cached")

    def test_paths_coerced(self):
        settings = Settings(content_dir="docs", static_dir="assets")
        assert settings.content_dir == Path("docs")
        assert settings.static_dir == Path("assets")

    def test_invalid_port(self):
        with pytest.raises(ValueError, match="PORT"):
            Settings(port=0)

    def test_invalid_timeout(self):
        with pytest.raises(ValueError, match="REQUEST_TIMEOUT_SECONDS"):
            Settings(request_timeout_seconds=0)

    def test_invalid_log_format(self):
        with pytest.raises(ValueError, match="LOG_FORMAT"):
            Settings(log_format="xml")


class TestLoadFromEnv:
    """Tests for environment loading."""

    def test_reads_environment(self):
        env = {
            "PORT": "9000",
            "AI_DESIGN": "true",
            "COMPONENTS_DIR": "/srv/components",
            "REQUEST_TIMEOUT_SECONDS": "2.5",
            "LOG_FORMAT": "text",
        }
        with patch.dict("os.environ", env, clear=True):
            settings = load_settings_from_env()

        assert settings.port == 9000
        assert settings.ai_design is True
        assert settings.components_dir == Path("/srv/components")
        assert settings.cache_dir == Path("/srv/components/cached")
        assert settings.request_timeout_seconds == 2.5
        assert settings.log_format == "text"

    def test_explicit_cache_dir(self):
        with patch.dict("os.environ", {"CACHE_DIR": "/tmp/designs"}, clear=True):
            assert load_settings_from_env().cache_dir == Path("/tmp/designs")

    def test_deployment_environment_is_not_a_setting(self):
        with patch.dict("os.environ", {"ENVIRONMENT": "production"}, clear=True):
            settings = load_settings_from_env()

        assert not hasattr(settings, "environment")
        assert settings == Settings()

    @pytest.mark.parametrize("raw,expected", [("1", True), ("yes", True), ("no", False), ("", False)])
    def test_bool_parsing(self, raw, expected):
        with patch.dict("os.environ", {"AI_DESIGN": raw}, clear=True):
            assert load_settings_from_env().ai_design is expected


class TestSettingsCache:

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_clear(self):
        first = get_settings()
        clear_settings_cache()
        assert get_settings() is not first

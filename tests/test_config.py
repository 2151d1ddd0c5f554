"""
Unit tests for generator settings.
"""

import pytest
from pydantic import ValidationError

from pdf_generator.config import GeneratorSettings, get_settings, validate_config_on_startup


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestDefaults:
    """Tests that defaults match the production render policy."""

    def test_server_defaults(self):
        settings = GeneratorSettings()
        assert settings.port == 3001
        assert settings.host == "0.0.0.0"

    def test_workflow_defaults(self):
        settings = GeneratorSettings()
        assert settings.browser_launch_timeout_ms == 60000
        assert settings.page_default_timeout_ms == 60000
        assert settings.navigation_timeout_ms == 45000
        assert settings.navigation_wait_until == "networkidle"
        assert settings.navigation_max_attempts == 3
        assert settings.navigation_retry_delay_seconds == 2.0
        assert settings.map_wait_timeout_ms == 10000
        assert settings.pdf_export_timeout_seconds == 30.0
        assert (settings.viewport_width, settings.viewport_height) == (1200, 800)
        assert settings.block_heavy_resources is False


class TestEnvironmentOverrides:
    """Tests for environment variable handling."""

    def test_port_from_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        assert GeneratorSettings().port == 8080

    def test_wait_until_is_normalized(self, monkeypatch):
        monkeypatch.setenv("NAVIGATION_WAIT_UNTIL", "DOMContentLoaded")
        assert GeneratorSettings().navigation_wait_until == "domcontentloaded"

    def test_boolean_flag(self, monkeypatch):
        monkeypatch.setenv("BLOCK_HEAVY_RESOURCES", "true")
        assert GeneratorSettings().block_heavy_resources is True

    def test_log_level_is_uppercased(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert GeneratorSettings().log_level == "DEBUG"

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()


class TestValidation:
    """Tests that invalid configuration fails fast."""

    def test_rejects_unknown_wait_condition(self):
        with pytest.raises(ValidationError):
            GeneratorSettings(navigation_wait_until="networkidle2")

    def test_rejects_out_of_range_port(self):
        with pytest.raises(ValidationError):
            GeneratorSettings(port=70000)

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValidationError):
            GeneratorSettings(navigation_max_attempts=0)

    def test_rejects_unknown_log_format(self):
        with pytest.raises(ValidationError):
            GeneratorSettings(log_format="xml")

    def test_startup_validation_wraps_errors(self, monkeypatch):
        monkeypatch.setenv("PORT", "not-a-port")
        with pytest.raises(ValueError, match="Configuration validation failed"):
            validate_config_on_startup()


class TestCorsOrigins:
    """Tests for cors_origins_list property."""

    def test_wildcard_default(self):
        assert GeneratorSettings().cors_origins_list == ["*"]

    def test_comma_separated(self):
        settings = GeneratorSettings(cors_origins="https://a.example, https://b.example,")
        assert settings.cors_origins_list == ["https://a.example", "https://b.example"]

    def test_empty(self):
        assert GeneratorSettings(cors_origins="").cors_origins_list == []

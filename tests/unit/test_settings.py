"""Tests for configuration settings."""
import json
import pytest
from pydantic import ValidationError

from dto_importer.config.settings import Settings, get_settings, reset_settings
from dto_importer.models import ParseOptions


class TestSettings:
    """Test Settings configuration."""

    def test_settings_default_values(self, monkeypatch):
        """Test default values are set correctly."""
        monkeypatch.delenv("DTO_IMPORTER_MAX_DEPTH", raising=False)
        monkeypatch.delenv("DTO_IMPORTER_KEY_FIELDS_JSON", raising=False)

        settings = Settings()

        # Note: env is set to 'test' in conftest.py
        assert settings.env in ("development", "test")
        assert settings.log_level == "INFO"
        assert settings.log_format == "json"
        assert settings.max_depth == 50
        assert settings.default_namespace is None
        assert settings.base_path is None
        assert settings.key_fields_json is None

    def test_settings_env_prefix(self, monkeypatch):
        """Test that DTO_IMPORTER_ prefix works for environment variables."""
        monkeypatch.setenv("DTO_IMPORTER_ENV", "production")
        monkeypatch.setenv("DTO_IMPORTER_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("DTO_IMPORTER_MAX_DEPTH", "12")
        monkeypatch.setenv("DTO_IMPORTER_DEFAULT_NAMESPACE", "App/Dto")

        settings = Settings()

        assert settings.env == "production"
        assert settings.log_level == "DEBUG"
        assert settings.max_depth == 12
        assert settings.default_namespace == "App/Dto"

    def test_max_depth_validation(self, monkeypatch):
        """Test that max_depth must be positive."""
        monkeypatch.setenv("DTO_IMPORTER_MAX_DEPTH", "0")

        with pytest.raises(ValidationError) as exc_info:
            Settings()

        assert "max_depth must be positive" in str(exc_info.value)

    def test_log_format_is_normalized(self, monkeypatch):
        """Test that log_format is case-insensitive."""
        monkeypatch.setenv("DTO_IMPORTER_LOG_FORMAT", "TEXT")

        assert Settings().log_format == "text"

    def test_log_format_validation(self, monkeypatch):
        """Test that unknown log formats are rejected."""
        monkeypatch.setenv("DTO_IMPORTER_LOG_FORMAT", "xml")

        with pytest.raises(ValidationError):
            Settings()

    def test_get_key_fields_default(self, monkeypatch):
        """Test that key fields are unset by default."""
        monkeypatch.delenv("DTO_IMPORTER_KEY_FIELDS_JSON", raising=False)

        assert Settings().get_key_fields() is None

    def test_get_key_fields_custom(self, monkeypatch):
        """Test key fields from a JSON list."""
        monkeypatch.setenv("DTO_IMPORTER_KEY_FIELDS_JSON", json.dumps(["uuid", "code"]))

        assert Settings().get_key_fields() == ["uuid", "code"]

    @pytest.mark.parametrize("value", ["invalid json", '{"a": 1}', "[1, 2]"])
    def test_get_key_fields_invalid(self, monkeypatch, value):
        """Test that anything but a JSON list of strings is ignored."""
        monkeypatch.setenv("DTO_IMPORTER_KEY_FIELDS_JSON", value)

        assert Settings().get_key_fields() is None

    def test_get_settings_singleton(self):
        """Test that get_settings returns singleton instance."""
        reset_settings()
        settings1 = get_settings()
        settings2 = get_settings()

        assert settings1 is settings2

    def test_reset_settings(self):
        """Test that reset_settings clears the singleton."""
        settings1 = get_settings()
        reset_settings()
        settings2 = get_settings()

        assert settings1 is not settings2


class TestParseOptionsFromSettings:
    """Test parse option defaults taken from settings."""

    def test_defaults_from_environment(self, monkeypatch):
        """Test that unset options fall back to settings."""
        monkeypatch.setenv("DTO_IMPORTER_DEFAULT_NAMESPACE", "Api")
        monkeypatch.setenv("DTO_IMPORTER_MAX_DEPTH", "7")
        reset_settings()

        options = ParseOptions.from_settings()

        assert options.namespace == "Api"
        assert options.max_depth == 7

    def test_explicit_values_win(self, monkeypatch):
        """Test that explicit options override settings."""
        monkeypatch.setenv("DTO_IMPORTER_DEFAULT_NAMESPACE", "Api")
        reset_settings()

        options = ParseOptions.from_settings(namespace="Admin", maxDepth=3, basePath="/schemas")

        assert options.namespace == "Admin"
        assert options.max_depth == 3
        assert options.base_path == "/schemas"

    def test_none_values_are_ignored(self, monkeypatch):
        """Test that None overrides keep the settings value."""
        monkeypatch.setenv("DTO_IMPORTER_DEFAULT_NAMESPACE", "Api")
        reset_settings()

        assert ParseOptions.from_settings(namespace=None).namespace == "Api"

    def test_invalid_max_depth(self):
        """Test that the depth limit must be positive."""
        with pytest.raises(ValidationError):
            ParseOptions(max_depth=0)

    def test_coerce_keeps_instances(self):
        """Test that coerce passes ParseOptions through unchanged."""
        options = ParseOptions(namespace="App")

        assert ParseOptions.coerce(options) is options
        assert ParseOptions.coerce(None).max_depth == 50
        assert ParseOptions.coerce({"namespace": "App", "type": "Data"}).namespace == "App"

    def test_qualify(self):
        """Test namespace prefixing of record names."""
        assert ParseOptions().qualify("User") == "User"
        assert ParseOptions(namespace="App/Dto").qualify("User") == "App/Dto/User"
        assert ParseOptions(namespace="App/Dto/").qualify("User") == "App/Dto/User"

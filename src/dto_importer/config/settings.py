"""Configuration and settings management using pydantic-settings."""
import json

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Importer settings with environment variable loading."""

    model_config = SettingsConfigDict(
        env_prefix="DTO_IMPORTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Core settings
    env: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(
        default="json",
        description="Log output format: json or text",
    )

    # Inference limits
    max_depth: int = Field(
        default=50,
        description="Maximum nesting depth for inline objects in schema documents",
    )

    # Parse defaults
    default_namespace: str | None = Field(
        default=None,
        description="Namespace prefix applied to record names when none is given",
    )
    base_path: str | None = Field(
        default=None,
        description="Base path for resolving external $ref files",
    )
    key_fields_json: str | None = Field(
        default=None,
        description="JSON list replacing the default associative key candidates",
    )

    @field_validator("max_depth")
    @classmethod
    def validate_max_depth(cls, v: int) -> int:
        """Validate that the depth limit is positive."""
        if v <= 0:
            raise ValueError("max_depth must be positive")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate the log format name."""
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return v

    def get_key_fields(self) -> list[str] | None:
        """
        Get key field candidates configured through the environment.

        Returns:
            List of field names, or None when unset or not a JSON list of strings.
        """
        if not self.key_fields_json:
            return None

        try:
            fields = json.loads(self.key_fields_json)
        except json.JSONDecodeError:
            return None

        if not isinstance(fields, list) or not all(isinstance(f, str) for f in fields):
            return None
        return fields


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (useful for testing)."""
    global _settings
    _settings = None

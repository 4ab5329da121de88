# git_providers/config/base.py

"""
Base configuration class with environment support and schema versioning.
"""

import hashlib
import json

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "GIT_PROVIDERS_"


class BaseConfig(BaseSettings):
    """Base configuration class with common settings and schema versioning."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="forbid",
    )

    schema_version: str = Field(
        default="1.0.0", description="Configuration schema version"
    )

    log_level: str = "INFO"
    log_format: str = "text"

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, v: str) -> str:
        """Validate configuration schema version."""
        supported_versions = ["1.0.0"]
        if v not in supported_versions:
            raise ValueError(
                f"Unsupported schema version {v}. Supported: {supported_versions}"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("text", "json"):
            raise ValueError("Log format must be 'text' or 'json'")
        return v.lower()

    def calculate_checksum(self) -> str:
        """Checksum of the configuration, secrets included, for drift detection."""
        config_str = json.dumps(self.model_dump(mode="json"), sort_keys=True)
        return hashlib.sha256(config_str.encode()).hexdigest()

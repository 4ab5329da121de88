# git_providers/config/errors.py

"""
Error types raised while loading provider configuration.
"""

from typing import Any

from pydantic import ValidationError

# Shown when values came from the environment or a dict rather than a file.
DEFAULT_SOURCE = "environment"


class ConfigError(Exception):
    """Base configuration error.

    ``source`` is the YAML file the configuration was read from, when there
    was one.
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        original_error: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.source = source
        self.original_error = original_error

    def __str__(self) -> str:
        text = self.message
        if self.source:
            text += f" (file: {self.source})"
        if self.original_error:
            text += f": {self.original_error}"
        return text


class ConfigFileError(ConfigError):
    """The configuration file is missing, unreadable or not a YAML mapping."""


class ConfigValidationError(ConfigError):
    """The merged configuration failed pydantic validation."""

    def __init__(
        self,
        message: str,
        errors: list[dict[str, Any]],
        source: str | None = None,
    ):
        super().__init__(message, source)
        self.errors = errors

    @classmethod
    def from_validation_error(
        cls, error: ValidationError, source: str | None = None
    ) -> "ConfigValidationError":
        errors = [dict(item) for item in error.errors()]
        return cls(f"Invalid configuration: {len(errors)} error(s)", errors, source)

    def fields(self) -> list[str]:
        """Dotted paths of the offending settings, e.g. ``provider.github.per_page``."""
        return [".".join(str(part) for part in e.get("loc", ())) or "<root>" for e in self.errors]

    def format_errors(self) -> str:
        lines = [f"Configuration validation failed in {self.source or DEFAULT_SOURCE}:"]
        for number, (field, error) in enumerate(zip(self.fields(), self.errors), 1):
            lines.append(f"  {number}. {field}: {error.get('msg')}")
            value = error.get("input")
            # nested mappings are the whole section, not the bad value
            if value is not None and not isinstance(value, dict):
                shown = str(value)
                if "token" in field:
                    shown = "***"
                elif len(shown) > 50:
                    shown = shown[:47] + "..."
                lines.append(f"     Input: {shown}")
        return "\n".join(lines)

    def get_summary(self) -> str:
        count = len(self.errors)
        return f"{count} validation error{'' if count == 1 else 's'} found"

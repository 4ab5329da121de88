# git_providers/config/loader.py

"""
Configuration loader: YAML file plus environment variable overrides.
"""

import os
from pathlib import Path
from typing import Any, TypeVar

from pydantic import ValidationError
import yaml

from .base import ENV_PREFIX, BaseConfig
from .errors import ConfigFileError, ConfigValidationError
from .providers import GitProvidersConfig

T = TypeVar("T", bound=BaseConfig)


class ConfigLoader:
    """Loads configuration from a YAML file and the process environment.

    Environment variables named ``GIT_PROVIDERS_<FIELD>`` override file
    values; ``__`` separates nested keys, e.g.
    ``GIT_PROVIDERS_PROVIDER__TOKEN``.
    """

    def __init__(self, config_dir: str = ".", env_prefix: str = ENV_PREFIX) -> None:
        self.config_dir = Path(config_dir)
        self.env_prefix = env_prefix

    def load_config(
        self,
        config_file: str | None = None,
        config_class: type[T] = GitProvidersConfig,
    ) -> T:
        """
        Load and validate configuration.

        Args:
            config_file: YAML file, relative to the config directory unless absolute
            config_class: Pydantic configuration class

        Returns:
            Loaded configuration instance
        """
        file_config = self._load_yaml_config(config_file) if config_file else {}
        merged = self._merge_configs(file_config, self._extract_env_vars())
        return self.load_from_dict(merged, config_class, config_file)

    def load_from_dict(
        self,
        data: dict[str, Any],
        config_class: type[T] = GitProvidersConfig,
        source: str | None = None,
    ) -> T:
        try:
            return config_class(**data)
        except ValidationError as e:
            raise ConfigValidationError.from_validation_error(e, source) from e

    def _resolve(self, filename: str) -> Path:
        path = Path(filename)
        return path if path.is_absolute() else self.config_dir / path

    def _load_yaml_config(self, filename: str) -> dict[str, Any]:
        """Load configuration from YAML file."""
        config_path = self._resolve(filename)
        if not config_path.exists():
            raise ConfigFileError("Configuration file not found", str(config_path))

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigFileError(
                f"Failed to load YAML file {filename}", str(config_path), e
            ) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigFileError(
                f"Top-level YAML structure must be a mapping (dict), "
                f"got {type(data).__name__}",
                str(config_path),
            )
        return data

    def _extract_env_vars(self) -> dict[str, Any]:
        """Collect prefixed environment variables into a nested dict."""
        env_vars: dict[str, Any] = {}
        prefix = self.env_prefix.upper()

        for env_name, env_value in os.environ.items():
            if not env_name.upper().startswith(prefix):
                continue
            keys = env_name[len(prefix) :].lower().split("__")
            if not all(keys):
                continue

            current = env_vars
            for key in keys[:-1]:
                if not isinstance(current.get(key), dict):
                    current[key] = {}
                current = current[key]
            current[keys[-1]] = env_value

        return env_vars

    def _merge_configs(
        self, base: dict[str, Any], override: dict[str, Any]
    ) -> dict[str, Any]:
        """Recursively merge two configuration dictionaries."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value
        return result

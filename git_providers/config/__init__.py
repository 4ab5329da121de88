# git_providers/config/__init__.py

"""Configuration models and loading for provider clients."""

from .base import BaseConfig
from .errors import ConfigError, ConfigFileError, ConfigValidationError
from .loader import ConfigLoader
from .providers import (
    GitHubProviderConfig,
    GitLabProviderConfig,
    GitProvidersConfig,
    ProviderConfig,
    StashProviderConfig,
)

__all__ = [
    "BaseConfig",
    "ConfigError",
    "ConfigFileError",
    "ConfigLoader",
    "ConfigValidationError",
    "GitHubProviderConfig",
    "GitLabProviderConfig",
    "GitProvidersConfig",
    "ProviderConfig",
    "StashProviderConfig",
]

# git_providers/source_control/provider_factory.py

import importlib
import logging

from ..config.providers import ProviderConfig
from .base import GitProvider

BUILTIN_PROVIDER_MODULES = [
    "git_providers.source_control.providers.github",
    "git_providers.source_control.providers.gitlab",
    "git_providers.source_control.providers.stash",
]


class ProviderFactory:
    """Creates provider client instances from configuration."""

    def __init__(self) -> None:
        self.provider_registry: dict[str, type[GitProvider]] = {}
        self.logger = logging.getLogger(__name__)

    def register_provider(
        self, provider_type: str, provider_class: type[GitProvider]
    ) -> None:
        """Register a provider class for a specific provider type."""
        self.provider_registry[provider_type] = provider_class
        self.logger.debug(f"Registered provider: {provider_type}")

    def register_providers_from_modules(self, module_names: list[str]) -> None:
        """Import modules and let each register its providers."""
        for module_name in module_names:
            try:
                module = importlib.import_module(module_name)
            except ImportError as e:
                self.logger.error(f"Failed to import provider module {module_name}: {e!s}")
                continue
            if hasattr(module, "register_providers"):
                module.register_providers(self)
                self.logger.debug(f"Registered providers from module: {module_name}")

    def create_provider(self, config: ProviderConfig) -> GitProvider:
        """Create an uninitialized provider for ``config.type``."""
        provider_type = config.type

        if provider_type not in self.provider_registry:
            raise ValueError(f"Unsupported provider type: {provider_type}")

        return self.provider_registry[provider_type](config)


def create_default_factory() -> ProviderFactory:
    """A factory with the built-in GitHub, GitLab and Bitbucket Server providers."""
    factory = ProviderFactory()
    factory.register_providers_from_modules(BUILTIN_PROVIDER_MODULES)
    return factory

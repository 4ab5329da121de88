# tests/test_provider_factory.py

import pytest

from git_providers.config.providers import (
    GitHubProviderConfig,
    GitLabProviderConfig,
    ProviderConfig,
    StashProviderConfig,
)
from git_providers.source_control.provider_factory import ProviderFactory, create_default_factory
from git_providers.source_control.providers.github import GitHubProvider
from git_providers.source_control.providers.gitlab import GitLabProvider
from git_providers.source_control.providers.stash import StashProvider


class TestProviderFactory:
    def test_default_factory_registers_builtin_providers(self):
        factory = create_default_factory()
        assert factory.provider_registry == {
            "github": GitHubProvider,
            "gitlab": GitLabProvider,
            "stash": StashProvider,
        }

    @pytest.mark.parametrize(
        "config,expected",
        [
            (GitHubProviderConfig(token="t"), GitHubProvider),
            (GitLabProviderConfig(token="t"), GitLabProvider),
            (StashProviderConfig(domain="stash.example.com", token="t"), StashProvider),
        ],
    )
    def test_create_provider(self, config, expected):
        provider = create_default_factory().create_provider(config)

        assert type(provider) is expected
        assert provider.config is config
        assert provider.supported_domain == config.domain
        with pytest.raises(RuntimeError, match="not initialized"):
            provider.org_repositories

    def test_unknown_type(self):
        config = ProviderConfig(type="svn", domain="svn.example.com")
        with pytest.raises(ValueError, match="Unsupported provider type: svn"):
            ProviderFactory().create_provider(config)

    def test_missing_module_is_skipped(self):
        factory = ProviderFactory()
        factory.register_providers_from_modules(
            ["git_providers.source_control.providers.nonexistent", "git_providers.source_control.providers.stash"]
        )
        assert list(factory.provider_registry) == ["stash"]

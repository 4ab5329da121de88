# tests/test_config.py

import pytest
from pydantic import ValidationError

from git_providers.config import (
    ConfigFileError,
    ConfigLoader,
    ConfigValidationError,
    GitHubProviderConfig,
    GitLabProviderConfig,
    StashProviderConfig,
)

GITHUB_YAML = """
log_level: info
provider:
  type: github
  token: ghp_from_file
  per_page: 50
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("GIT_PROVIDERS_PROVIDER__TOKEN", "GIT_PROVIDERS_LOG_LEVEL", "GIT_PROVIDERS_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "providers.yaml"
    path.write_text(GITHUB_YAML)
    return path


class TestConfigLoader:
    def test_loads_yaml(self, config_file):
        config = ConfigLoader().load_config(str(config_file))

        assert isinstance(config.provider, GitHubProviderConfig)
        assert config.provider.token == "ghp_from_file"
        assert config.provider.per_page == 50
        assert config.log_level == "INFO"

    def test_relative_path_resolves_against_config_dir(self, config_file):
        config = ConfigLoader(config_dir=str(config_file.parent)).load_config("providers.yaml")
        assert config.provider.domain == "github.com"

    def test_environment_overrides_file(self, config_file, monkeypatch):
        monkeypatch.setenv("GIT_PROVIDERS_PROVIDER__TOKEN", "ghp_from_env")
        monkeypatch.setenv("GIT_PROVIDERS_LOG_LEVEL", "debug")

        config = ConfigLoader().load_config(str(config_file))

        assert config.provider.token == "ghp_from_env"
        assert config.provider.per_page == 50
        assert config.log_level == "DEBUG"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigFileError) as exc_info:
            ConfigLoader().load_config(str(tmp_path / "absent.yaml"))
        assert "absent.yaml" in str(exc_info.value)

    def test_non_mapping_yaml(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigFileError, match="mapping"):
            ConfigLoader().load_config(str(path))

    def test_invalid_configuration(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("provider:\n  type: github\n  per_page: 0\n")

        with pytest.raises(ConfigValidationError) as exc_info:
            ConfigLoader().load_config(str(path))

        assert exc_info.value.fields() == ["provider.github.per_page"]
        assert "per_page" in exc_info.value.format_errors()
        assert exc_info.value.get_summary() == "1 validation error found"

    def test_unknown_provider_type(self):
        with pytest.raises(ConfigValidationError):
            ConfigLoader().load_from_dict({"provider": {"type": "svn", "domain": "svn.example.com"}})

    def test_checksum_tracks_changes(self):
        loader = ConfigLoader()
        a = loader.load_from_dict({"provider": {"type": "gitlab", "token": "a"}})
        b = loader.load_from_dict({"provider": {"type": "gitlab", "token": "a"}})
        c = loader.load_from_dict({"provider": {"type": "gitlab", "token": "c"}})

        assert a.calculate_checksum() == b.calculate_checksum()
        assert a.calculate_checksum() != c.calculate_checksum()


class TestProviderConfig:
    def test_github_api_urls(self):
        assert GitHubProviderConfig().resolved_api_base_url() == "https://api.github.com"
        enterprise = GitHubProviderConfig(domain="github.example.com")
        assert enterprise.resolved_api_base_url() == "https://github.example.com/api/v3"

    def test_explicit_api_url_wins(self):
        config = GitLabProviderConfig(api_base_url="https://gl.internal/api/")
        assert config.resolved_api_base_url() == "https://gl.internal/api"

    def test_domain_is_normalized(self):
        assert GitLabProviderConfig(domain="https://GitLab.Example.com/").domain == "gitlab.example.com"

    @pytest.mark.parametrize("domain", ["", "bad domain", "a/b"])
    def test_invalid_domain(self, domain):
        with pytest.raises(ValidationError):
            GitLabProviderConfig(domain=domain)

    def test_blank_token_rejected(self):
        with pytest.raises(ValidationError):
            GitHubProviderConfig(token="   ")

    def test_stash_username_requires_token(self):
        with pytest.raises(ValidationError, match="token is required"):
            StashProviderConfig(domain="stash.example.com", username="svc")
        config = StashProviderConfig(domain="stash.example.com", username="svc", token="pw")
        assert config.resolved_api_base_url() == "https://stash.example.com"

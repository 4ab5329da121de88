# tests/test_refs.py

"""Tests for resource references and URL parsing."""

import pytest

from git_providers.core.exceptions import InvalidArgumentError
from git_providers.source_control.refs import (
    OrganizationRef,
    OrgRepositoryRef,
    UserRef,
    UserRepositoryRef,
    parse_org_repository_url,
    parse_organization_url,
    parse_user_repository_url,
    parse_user_url,
)


class TestRefs:
    def test_user_ref(self):
        ref = UserRef("github.com", "octocat")
        assert ref.identity == "octocat"
        assert ref.url == "https://github.com/octocat"

    def test_organization_ref_with_subgroups(self):
        ref = OrganizationRef("gitlab.com", "acme", ["platform", "infra"])
        assert ref.sub_organizations == ("platform", "infra")
        assert ref.identity == "acme/platform/infra"
        assert hash(ref) == hash(OrganizationRef("gitlab.com", "acme", ("platform", "infra")))

    def test_org_repository_ref(self):
        ref = OrgRepositoryRef(OrganizationRef("github.com", "acme"), "Widgets")
        assert ref.domain == "github.com"
        assert ref.full_name == "acme/Widgets"
        assert ref.slug == "widgets"
        assert ref.clone_url() == "https://github.com/acme/Widgets.git"
        assert ref.clone_url("ssh") == "git@github.com:acme/Widgets.git"

    def test_unknown_clone_transport(self):
        ref = UserRepositoryRef(UserRef("github.com", "octocat"), "hello")
        with pytest.raises(InvalidArgumentError):
            ref.clone_url("ftp")

    @pytest.mark.parametrize("name", ["", "  ", "a/b"])
    def test_invalid_names_are_rejected(self, name):
        with pytest.raises(InvalidArgumentError):
            UserRef("github.com", name)


class TestParsing:
    def test_parse_user_url(self):
        assert parse_user_url("https://github.com/octocat") == UserRef("github.com", "octocat")

    def test_parse_organization_url_with_subgroups(self):
        ref = parse_organization_url("https://GitLab.com/acme/platform/")
        assert ref == OrganizationRef("gitlab.com", "acme", ("platform",))

    def test_parse_user_repository_url_strips_git_suffix(self):
        ref = parse_user_repository_url("https://github.com/octocat/hello.git")
        assert ref.owner == UserRef("github.com", "octocat")
        assert ref.repository_name == "hello"

    def test_parse_org_repository_url_with_subgroups(self):
        ref = parse_org_repository_url("https://gitlab.com/acme/platform/widgets")
        assert ref.owner == OrganizationRef("gitlab.com", "acme", ("platform",))
        assert ref.repository_name == "widgets"

    @pytest.mark.parametrize(
        "url",
        ["github.com/octocat/hello", "ftp://github.com/a/b", "https://github.com/octocat"],
    )
    def test_bad_repository_urls(self, url):
        with pytest.raises(InvalidArgumentError):
            parse_user_repository_url(url)

# tests/test_github_provider.py

"""GitHub backend with a mocked PyGithub client."""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

from github import (
    BadCredentialsException,
    GithubException,
    RateLimitExceededException,
    UnknownObjectException,
)
import pytest
import requests

from git_providers.config.providers import GitHubProviderConfig
from git_providers.core.exceptions import (
    AlreadyExistsError,
    InvalidArgumentError,
    InvalidCredentialsError,
    NotFoundError,
    RateLimitError,
    ReconcileError,
    TransportError,
    ValidationFailedError,
    is_error,
)
from git_providers.source_control.clients import DeployKeyClient, PullRequestClient, TeamsClient
from git_providers.source_control.models import (
    RepositoryCreateOptions,
    RepositoryInfo,
    RepositoryVisibility,
)
from git_providers.source_control.providers.github import GitHubProvider
from git_providers.source_control.providers.github.github_errors import translate_github_error
from git_providers.source_control.refs import (
    OrganizationRef,
    OrgRepositoryRef,
    UserRef,
    UserRepositoryRef,
)

ORG = OrganizationRef("github.com", "acme")
REPO = OrgRepositoryRef(ORG, "widgets")
CREATED = datetime(2024, 1, 1, tzinfo=timezone.utc)


def sdk_repo(name="widgets", description="old", private=True, **extra):
    repo = SimpleNamespace(
        id=42,
        name=name,
        full_name=f"acme/{name}",
        description=description,
        default_branch="main",
        private=private,
        visibility="private" if private else "public",
        html_url=f"https://github.com/acme/{name}",
        clone_url=f"https://github.com/acme/{name}.git",
        ssh_url=f"git@github.com:acme/{name}.git",
        created_at=CREATED,
        **extra,
    )

    def edit(**kwargs):
        repo.__dict__.update(kwargs)

    repo.edit = MagicMock(side_effect=edit)
    return repo


def not_found():
    return UnknownObjectException(404, {"message": "Not Found"}, {})


@pytest.fixture
def sdk():
    return MagicMock()


@pytest.fixture
def provider(sdk):
    config = GitHubProviderConfig(token="ghp_test", destructive_actions=True, per_page=2)
    return GitHubProvider(config, client=sdk)


class TestGitHubRepositories:
    @pytest.mark.asyncio
    async def test_get_repository(self, provider, sdk):
        sdk.get_repo.return_value = sdk_repo()

        async with provider:
            repo = await provider.org_repositories.get(REPO)

        sdk.get_repo.assert_called_once_with("acme/widgets")
        assert repo.get() == RepositoryInfo(
            description="old", default_branch="main", visibility=RepositoryVisibility.PRIVATE
        )
        assert repo.api_object().created_at == CREATED

    @pytest.mark.asyncio
    async def test_get_missing_repository(self, provider, sdk):
        sdk.get_repo.side_effect = not_found()

        async with provider:
            with pytest.raises(NotFoundError):
                await provider.org_repositories.get(REPO)

    @pytest.mark.asyncio
    async def test_malformed_sdk_object_fails_validation(self, provider, sdk):
        repo = sdk_repo()
        repo.id = "not-a-number"
        sdk.get_repo.return_value = repo

        async with provider:
            with pytest.raises(ValidationFailedError) as exc_info:
                await provider.org_repositories.get(REPO)

        assert exc_info.value.field == "id"

    @pytest.mark.asyncio
    async def test_list_reads_pages_until_short_page(self, provider, sdk):
        pages = {0: [sdk_repo("a"), sdk_repo("b")], 1: [sdk_repo("c")]}
        paginated = sdk.get_organization.return_value.get_repos.return_value
        paginated.get_page.side_effect = lambda number: pages[number]

        async with provider:
            repos = await provider.org_repositories.list(ORG)

        assert [r.ref.repository_name for r in repos] == ["a", "b", "c"]
        assert [c.args[0] for c in paginated.get_page.call_args_list] == [0, 1]

    @pytest.mark.asyncio
    async def test_reconcile_creates_in_organization(self, provider, sdk):
        sdk.get_repo.side_effect = not_found()
        org = sdk.get_organization.return_value
        org.create_repo.return_value = sdk_repo(description="new")

        async with provider:
            _, action_taken = await provider.org_repositories.reconcile(
                REPO, RepositoryInfo(description="new")
            )

        assert action_taken is True
        org.create_repo.assert_called_once_with("widgets", description="new", private=True)

    @pytest.mark.asyncio
    async def test_create_passes_create_options(self, provider, sdk):
        org = sdk.get_organization.return_value
        org.create_repo.return_value = sdk_repo()

        async with provider:
            await provider.org_repositories.create(
                REPO,
                RepositoryInfo(visibility="public"),
                options=RepositoryCreateOptions(auto_init=True, license_template="mit"),
            )

        org.create_repo.assert_called_once_with(
            "widgets", private=False, auto_init=True, license_template="mit"
        )

    @pytest.mark.asyncio
    async def test_reconcile_updates_description_only_when_drifted(self, provider, sdk):
        repo = sdk_repo()
        sdk.get_repo.return_value = repo

        async with provider:
            handle, action_taken = await provider.org_repositories.reconcile(
                REPO, RepositoryInfo(description="new")
            )
            _, second = await provider.org_repositories.reconcile(
                REPO, RepositoryInfo(description="new")
            )

        assert action_taken is True
        assert second is False
        assert repo.edit.call_count == 1
        assert repo.edit.call_args.kwargs["description"] == "new"
        assert handle.api_object().created_at == CREATED

    @pytest.mark.asyncio
    async def test_reconcile_private_repository_is_a_no_op(self, provider, sdk):
        repo = sdk_repo(private=True)
        sdk.get_repo.return_value = repo

        async with provider:
            _, action_taken = await provider.org_repositories.reconcile(
                REPO, RepositoryInfo(visibility=RepositoryVisibility.PRIVATE)
            )

        assert action_taken is False
        repo.edit.assert_not_called()

    @pytest.mark.asyncio
    async def test_transport_error_on_fetch_does_not_write(self, provider, sdk):
        sdk.get_repo.side_effect = GithubException(502, {"message": "Bad Gateway"}, {})

        async with provider:
            with pytest.raises(ReconcileError) as exc_info:
                await provider.org_repositories.reconcile(REPO, RepositoryInfo(description="x"))

        assert exc_info.value.action_taken is False
        assert is_error(exc_info.value, TransportError)
        sdk.get_organization.return_value.create_repo.assert_not_called()

    @pytest.mark.asyncio
    async def test_user_repository_for_other_user_is_rejected(self, provider, sdk):
        sdk.get_user.return_value = SimpleNamespace(login="octocat")
        ref = UserRepositoryRef(UserRef("github.com", "someone-else"), "dotfiles")

        async with provider:
            with pytest.raises(InvalidArgumentError):
                await provider.user_repositories.create(ref, RepositoryInfo())

    @pytest.mark.asyncio
    async def test_delete(self, provider, sdk):
        async with provider:
            await provider.org_repositories.delete(REPO)
        sdk.get_repo.return_value.delete.assert_called_once_with()


class TestGitHubSubResources:
    @pytest.mark.asyncio
    async def test_deploy_key_found_by_title(self, provider, sdk):
        key = SimpleNamespace(
            id=7, title="ci", key="ssh-ed25519 AAA", read_only=True, url="u", created_at=None
        )
        sdk.get_repo.return_value.get_keys.return_value = [key]

        async with provider:
            found = await DeployKeyClient(provider, REPO).get("ci")
            with pytest.raises(NotFoundError):
                await DeployKeyClient(provider, REPO).get("other")

        assert found.get().key == "ssh-ed25519 AAA"

    @pytest.mark.asyncio
    async def test_merge_reports_unmerged_pull_request(self, provider, sdk):
        pull = sdk.get_repo.return_value.get_pull.return_value
        pull.merge.return_value = SimpleNamespace(merged=False, message="conflict")

        async with provider:
            with pytest.raises(TransportError):
                await PullRequestClient(provider, REPO).merge(5)

    @pytest.mark.asyncio
    async def test_team_membership(self, provider, sdk):
        team = sdk.get_organization.return_value.get_team_by_slug.return_value
        team.has_in_members.return_value = True

        async with provider:
            assert await TeamsClient(provider, ORG).has_member("core", "octocat") is True

        sdk.get_organization.return_value.get_team_by_slug.assert_called_with("core")


class TestGitHubErrors:
    @pytest.mark.parametrize(
        "error,expected",
        [
            (UnknownObjectException(404, {"message": "Not Found"}, {}), NotFoundError),
            (GithubException(404, {"message": "Not Found"}, {}), NotFoundError),
            (BadCredentialsException(401, {"message": "Bad credentials"}, {}), InvalidCredentialsError),
            (RateLimitExceededException(403, {"message": "API rate limit"}, {}), RateLimitError),
            (
                GithubException(
                    422,
                    {"message": "Validation Failed", "errors": [{"message": "name already exists on this account"}]},
                    {},
                ),
                AlreadyExistsError,
            ),
            (GithubException(500, {"message": "Server Error"}, {}), TransportError),
            (requests.ConnectionError("refused"), TransportError),
        ],
    )
    def test_translation(self, error, expected):
        translated = translate_github_error(error, "get repository acme/widgets")
        assert type(translated) is expected
        assert translated.original_error is error
        assert "acme/widgets" in translated.message

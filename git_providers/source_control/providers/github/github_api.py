# git_providers/source_control/providers/github/github_api.py

"""
Per-kind GitHub APIs on top of PyGithub.

PyGithub is synchronous, so every SDK interaction (including attribute
access that may lazily complete an object) runs in the default executor.
"""

from collections.abc import Callable
from itertools import islice
import logging
from typing import Any, TypeVar

from github import Github, InputGitTreeElement

from ....core.context import OperationContext
from ....core.exceptions import InvalidArgumentError, NotFoundError, TransportError
from ...models import CommitFile, MergeMethod, RepositoryVisibility
from ...pagination import ListOptions, Page, next_page_number
from ...refs import OrganizationRef, OrgRepositoryRef
from ...utils import run_sync
from ..base_api import BaseResourceAPI
from .github_errors import GITHUB_ERRORS, translate_github_error
from .github_models import (
    GitHubBranch,
    GitHubCommit,
    GitHubDeployKey,
    GitHubOrganization,
    GitHubPullRequest,
    GitHubRepository,
    GitHubTeam,
    GitHubTeamAccess,
)

T = TypeVar("T")

FILE_MODE = "100644"


def _page_of(paginated: Any, options: ListOptions, decode: Callable[[Any], T]) -> tuple[list[T], Page]:
    """Fetch one 0-based page of a PaginatedList and decode it."""
    number = options.cursor or 0
    items = [decode(item) for item in paginated.get_page(number)]
    return items, next_page_number(number, len(items), options.per_page)


def _without_none(**kwargs: Any) -> dict[str, Any]:
    return {key: value for key, value in kwargs.items() if value is not None}


class GitHubAPIBase(BaseResourceAPI):
    """Holds the PyGithub client and translates its failures."""

    provider_type = "github"

    def __init__(self, client: Github, logger: logging.Logger | None = None) -> None:
        super().__init__(logger)
        self.client = client

    async def _call(self, what: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        try:
            return await run_sync(func, *args, **kwargs)
        except GITHUB_ERRORS as e:
            raise translate_github_error(e, what) from e


class GitHubRepositoryAPI(GitHubAPIBase):
    kind = "repository"

    async def fetch_one(self, ref: Any, ctx: OperationContext) -> GitHubRepository:
        def fetch() -> GitHubRepository:
            return GitHubRepository.from_sdk(self.client.get_repo(ref.full_name))

        return await self._call(f"get repository {ref.full_name}", fetch)

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[GitHubRepository], Page]:
        def fetch() -> tuple[list[GitHubRepository], Page]:
            if isinstance(parent, OrganizationRef):
                repos = self.client.get_organization(parent.organization).get_repos()
            else:
                repos = self.client.get_user(parent.user_login).get_repos(type="owner")
            return _page_of(repos, options, GitHubRepository.from_sdk)

        return await self._call(f"list repositories of {parent.identity}", fetch)

    async def create_one(
        self, ref: Any, obj: GitHubRepository, ctx: OperationContext
    ) -> GitHubRepository:
        kwargs = _without_none(
            description=obj.description,
            private=obj.private,
            auto_init=obj.auto_init,
            license_template=obj.license_template,
        )

        def create() -> GitHubRepository:
            if isinstance(ref, OrgRepositoryRef):
                owner = self.client.get_organization(ref.owner.organization)
                if obj.visibility == RepositoryVisibility.INTERNAL.value:
                    kwargs["visibility"] = obj.visibility
            else:
                if obj.visibility == RepositoryVisibility.INTERNAL.value:
                    raise InvalidArgumentError("User repositories cannot be internal")
                owner = self.client.get_user()
                if owner.login.lower() != ref.owner.user_login.lower():
                    raise InvalidArgumentError(
                        f"Can only create repositories for the authenticated user "
                        f"{owner.login}, not {ref.owner.user_login}"
                    )
            return GitHubRepository.from_sdk(owner.create_repo(ref.repository_name, **kwargs))

        return await self._call(f"create repository {ref.full_name}", create)

    async def update_one(
        self, ref: Any, obj: GitHubRepository, ctx: OperationContext
    ) -> GitHubRepository:
        kwargs = _without_none(
            description=obj.description,
            default_branch=obj.default_branch,
            private=obj.private,
        )
        if obj.visibility == RepositoryVisibility.INTERNAL.value:
            kwargs.pop("private", None)
            kwargs["visibility"] = obj.visibility

        def update() -> GitHubRepository:
            repo = self.client.get_repo(ref.full_name)
            repo.edit(**kwargs)
            return GitHubRepository.from_sdk(repo)

        return await self._call(f"update repository {ref.full_name}", update)

    async def delete_one(self, ref: Any, ctx: OperationContext) -> None:
        def delete() -> None:
            self.client.get_repo(ref.full_name).delete()

        await self._call(f"delete repository {ref.full_name}", delete)


class _GitHubRepositoryScopedAPI(GitHubAPIBase):
    """An API bound to one repository."""

    def __init__(self, client: Github, repository_ref: Any, logger: logging.Logger | None = None) -> None:
        super().__init__(client, logger)
        self.repository_ref = repository_ref

    def _repo(self) -> Any:
        return self.client.get_repo(self.repository_ref.full_name)

    def _what(self, action: str, key: Any = None) -> str:
        target = f" {key}" if key is not None else ""
        return f"{action} {self.kind}{target} in {self.repository_ref.full_name}"


class GitHubDeployKeyAPI(_GitHubRepositoryScopedAPI):
    """Deploy keys, addressed by title. GitHub keys are immutable."""

    kind = "deploy key"

    def _find(self, repo: Any, name: str) -> Any:
        for key in repo.get_keys():
            if key.title == name:
                return key
        raise NotFoundError(f"GitHub: deploy key {name} not found in {self.repository_ref.full_name}")

    async def fetch_one(self, ref: str, ctx: OperationContext) -> GitHubDeployKey:
        def fetch() -> GitHubDeployKey:
            return GitHubDeployKey.from_sdk(self._find(self._repo(), ref))

        return await self._call(self._what("get", ref), fetch)

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[GitHubDeployKey], Page]:
        def fetch() -> tuple[list[GitHubDeployKey], Page]:
            return _page_of(self._repo().get_keys(), options, GitHubDeployKey.from_sdk)

        return await self._call(self._what("list"), fetch)

    async def create_one(self, ref: str, obj: GitHubDeployKey, ctx: OperationContext) -> GitHubDeployKey:
        def create() -> GitHubDeployKey:
            key = self._repo().create_key(obj.title, obj.key, read_only=bool(obj.read_only))
            return GitHubDeployKey.from_sdk(key)

        return await self._call(self._what("create", ref), create)

    async def update_one(self, ref: str, obj: GitHubDeployKey, ctx: OperationContext) -> GitHubDeployKey:
        def replace() -> GitHubDeployKey:
            repo = self._repo()
            self._find(repo, ref).delete()
            key = repo.create_key(obj.title, obj.key, read_only=bool(obj.read_only))
            return GitHubDeployKey.from_sdk(key)

        return await self._call(self._what("update", ref), replace)

    async def delete_one(self, ref: str, ctx: OperationContext) -> None:
        def delete() -> None:
            self._find(self._repo(), ref).delete()

        await self._call(self._what("delete", ref), delete)


class GitHubTeamAccessAPI(_GitHubRepositoryScopedAPI):
    """Team permissions on an organization repository, addressed by team slug."""

    kind = "team access"

    def _find(self, repo: Any, name: str) -> Any:
        for team in repo.get_teams():
            if name in (team.slug, team.name):
                return team
        raise NotFoundError(f"GitHub: team {name} has no access to {self.repository_ref.full_name}")

    def _grant(self, name: str, permission: str) -> GitHubTeamAccess:
        repo = self._repo()
        org = self.client.get_organization(self.repository_ref.owner.organization)
        team = org.get_team_by_slug(name)
        if not team.update_team_repository(repo, permission):
            raise TransportError(
                f"GitHub: could not grant {permission} on {self.repository_ref.full_name} to {name}"
            )
        return GitHubTeamAccess.from_sdk(self._find(repo, name))

    async def fetch_one(self, ref: str, ctx: OperationContext) -> GitHubTeamAccess:
        def fetch() -> GitHubTeamAccess:
            return GitHubTeamAccess.from_sdk(self._find(self._repo(), ref))

        return await self._call(self._what("get", ref), fetch)

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[GitHubTeamAccess], Page]:
        def fetch() -> tuple[list[GitHubTeamAccess], Page]:
            return _page_of(self._repo().get_teams(), options, GitHubTeamAccess.from_sdk)

        return await self._call(self._what("list"), fetch)

    async def create_one(self, ref: str, obj: GitHubTeamAccess, ctx: OperationContext) -> GitHubTeamAccess:
        return await self._call(self._what("create", ref), self._grant, ref, obj.permission)

    async def update_one(self, ref: str, obj: GitHubTeamAccess, ctx: OperationContext) -> GitHubTeamAccess:
        return await self._call(self._what("update", ref), self._grant, ref, obj.permission)

    async def delete_one(self, ref: str, ctx: OperationContext) -> None:
        def revoke() -> None:
            repo = self._repo()
            self._find(repo, ref).remove_from_repos(repo)

        await self._call(self._what("delete", ref), revoke)


class GitHubBranchAPI(_GitHubRepositoryScopedAPI):
    kind = "branch"

    async def fetch_one(self, ref: str, ctx: OperationContext) -> GitHubBranch:
        def fetch() -> GitHubBranch:
            return GitHubBranch.from_sdk(self._repo().get_branch(ref))

        return await self._call(self._what("get", ref), fetch)

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[GitHubBranch], Page]:
        def fetch() -> tuple[list[GitHubBranch], Page]:
            return _page_of(self._repo().get_branches(), options, GitHubBranch.from_sdk)

        return await self._call(self._what("list"), fetch)

    async def create_one(self, ref: str, obj: GitHubBranch, ctx: OperationContext) -> GitHubBranch:
        def create() -> GitHubBranch:
            repo = self._repo()
            repo.create_git_ref(ref=f"refs/heads/{ref}", sha=obj.sha)
            return GitHubBranch.from_sdk(repo.get_branch(ref))

        return await self._call(self._what("create", ref), create)

    async def delete_one(self, ref: str, ctx: OperationContext) -> None:
        def delete() -> None:
            self._repo().get_git_ref(f"heads/{ref}").delete()

        await self._call(self._what("delete", ref), delete)


class GitHubCommitAPI(_GitHubRepositoryScopedAPI):
    kind = "commit"

    async def list_page(
        self, branch: str, per_page: int, page: int, ctx: OperationContext
    ) -> list[GitHubCommit]:
        def fetch() -> list[GitHubCommit]:
            commits = self._repo().get_commits(sha=branch)
            start = (max(page, 1) - 1) * per_page
            return [GitHubCommit.from_sdk(c) for c in islice(commits, start, start + per_page)]

        return await self._call(self._what("list", f"on {branch}"), fetch)

    async def create_commit(
        self, branch: str, message: str, files: list[CommitFile], ctx: OperationContext
    ) -> GitHubCommit:
        def create() -> GitHubCommit:
            repo = self._repo()
            head = repo.get_git_ref(f"heads/{branch}")
            parent = repo.get_git_commit(head.object.sha)
            elements = [
                InputGitTreeElement(f.path, FILE_MODE, "blob", content=f.content)
                if f.content is not None
                else InputGitTreeElement(f.path, FILE_MODE, "blob", sha=None)
                for f in files
            ]
            tree = repo.create_git_tree(elements, base_tree=parent.tree)
            commit = repo.create_git_commit(message, tree, [parent])
            head.edit(commit.sha)
            return GitHubCommit.from_git_commit(commit)

        return await self._call(self._what("create", f"on {branch}"), create)


class GitHubPullRequestAPI(_GitHubRepositoryScopedAPI):
    kind = "pull request"

    async def fetch_one(self, ref: int, ctx: OperationContext) -> GitHubPullRequest:
        def fetch() -> GitHubPullRequest:
            return GitHubPullRequest.from_sdk(self._repo().get_pull(int(ref)))

        return await self._call(self._what("get", f"#{ref}"), fetch)

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[GitHubPullRequest], Page]:
        def fetch() -> tuple[list[GitHubPullRequest], Page]:
            return _page_of(self._repo().get_pulls(state="all"), options, GitHubPullRequest.from_sdk)

        return await self._call(self._what("list"), fetch)

    async def create_one(self, ref: Any, obj: GitHubPullRequest, ctx: OperationContext) -> GitHubPullRequest:
        def create() -> GitHubPullRequest:
            pull = self._repo().create_pull(
                base=obj.base_ref, head=obj.head_ref, title=obj.title, body=obj.body or ""
            )
            return GitHubPullRequest.from_sdk(pull)

        return await self._call(self._what("create", f"'{obj.title}'"), create)

    async def update_one(self, ref: int, obj: GitHubPullRequest, ctx: OperationContext) -> GitHubPullRequest:
        def update() -> GitHubPullRequest:
            pull = self._repo().get_pull(int(ref))
            pull.edit(**_without_none(title=obj.title, body=obj.body))
            return GitHubPullRequest.from_sdk(pull)

        return await self._call(self._what("update", f"#{ref}"), update)

    async def merge(
        self, ref: int, method: MergeMethod, message: str | None, ctx: OperationContext
    ) -> None:
        def merge() -> None:
            pull = self._repo().get_pull(int(ref))
            status = pull.merge(**_without_none(commit_message=message, merge_method=method.value))
            if not status.merged:
                raise TransportError(f"GitHub: pull request #{ref} was not merged: {status.message}")

        await self._call(self._what("merge", f"#{ref}"), merge)


class GitHubOrganizationAPI(GitHubAPIBase):
    kind = "organization"

    async def fetch_one(self, ref: OrganizationRef, ctx: OperationContext) -> GitHubOrganization:
        if ref.sub_organizations:
            raise InvalidArgumentError("GitHub organizations have no sub-organizations")

        def fetch() -> GitHubOrganization:
            return GitHubOrganization.from_sdk(self.client.get_organization(ref.organization))

        return await self._call(f"get organization {ref.organization}", fetch)

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[GitHubOrganization], Page]:
        def fetch() -> tuple[list[GitHubOrganization], Page]:
            return _page_of(self.client.get_user().get_orgs(), options, GitHubOrganization.from_sdk)

        return await self._call("list organizations", fetch)

    async def fetch_children_page(
        self, parent: OrganizationRef, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[GitHubOrganization], Page]:
        raise self._unsupported("sub-organizations")


class GitHubTeamAPI(GitHubAPIBase):
    kind = "team"

    def __init__(self, client: Github, organization_ref: OrganizationRef, logger: logging.Logger | None = None) -> None:
        super().__init__(client, logger)
        self.organization_ref = organization_ref

    def _org(self) -> Any:
        return self.client.get_organization(self.organization_ref.organization)

    async def fetch_one(self, ref: str, ctx: OperationContext) -> GitHubTeam:
        def fetch() -> GitHubTeam:
            team = self._org().get_team_by_slug(ref)
            return GitHubTeam.from_sdk(team, [member.login for member in team.get_members()])

        return await self._call(f"get team {ref}", fetch)

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[GitHubTeam], Page]:
        def fetch() -> tuple[list[GitHubTeam], Page]:
            return _page_of(self._org().get_teams(), options, GitHubTeam.from_sdk)

        return await self._call(f"list teams of {self.organization_ref.organization}", fetch)

    async def has_member(self, team: str, login: str, ctx: OperationContext) -> bool:
        def check() -> bool:
            return self._org().get_team_by_slug(team).has_in_members(self.client.get_user(login))

        return await self._call(f"check membership of {login} in team {team}", check)


__all__ = [
    "GitHubBranchAPI",
    "GitHubCommitAPI",
    "GitHubDeployKeyAPI",
    "GitHubOrganizationAPI",
    "GitHubPullRequestAPI",
    "GitHubRepositoryAPI",
    "GitHubTeamAPI",
    "GitHubTeamAccessAPI",
]

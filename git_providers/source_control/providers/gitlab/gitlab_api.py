# git_providers/source_control/providers/gitlab/gitlab_api.py

"""
Per-kind GitLab APIs on top of python-gitlab.

python-gitlab is synchronous; every SDK call runs in the default executor.
Lists use explicit ``page``/``per_page`` with ``get_all=False`` so the
paginator drives page boundaries.
"""

from collections.abc import Callable
import logging
from typing import Any, TypeVar

import gitlab
from gitlab.exceptions import GitlabGetError

from ....core.context import OperationContext
from ....core.exceptions import InvalidArgumentError, NotFoundError
from ...models import CommitFile, MergeMethod
from ...pagination import ListOptions, Page, next_page_number, single_page
from ...refs import OrganizationRef, OrgRepositoryRef
from ...utils import run_sync
from ..base_api import BaseResourceAPI
from .gitlab_errors import GITLAB_ERRORS, translate_gitlab_error
from .gitlab_models import (
    GitLabBranch,
    GitLabCommit,
    GitLabDeployKey,
    GitLabGroup,
    GitLabMergeRequest,
    GitLabProject,
    GitLabSharedGroup,
    decode,
)

T = TypeVar("T")

PROJECT_WRITE_FIELDS = ("description", "default_branch", "visibility")


def _page_of(manager: Any, options: ListOptions, model: type, **filters: Any) -> tuple[list[Any], Page]:
    """Fetch one 1-based page from a python-gitlab list manager."""
    number = options.cursor or 1
    objects = manager.list(page=number, per_page=options.per_page, get_all=False, **filters)
    items = [decode(model, obj) for obj in objects]
    return items, next_page_number(number, len(items), options.per_page)


def _without_none(**kwargs: Any) -> dict[str, Any]:
    return {key: value for key, value in kwargs.items() if value is not None}


class GitLabAPIBase(BaseResourceAPI):
    """Holds the python-gitlab client and translates its failures."""

    provider_type = "gitlab"

    def __init__(self, gl: gitlab.Gitlab, logger: logging.Logger | None = None) -> None:
        super().__init__(logger)
        self.gl = gl

    async def _call(self, what: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        try:
            return await run_sync(func, *args, **kwargs)
        except GITLAB_ERRORS as e:
            raise translate_gitlab_error(e, what) from e

    def _find_user(self, login: str) -> Any:
        users = self.gl.users.list(username=login, get_all=False)
        if not users:
            raise NotFoundError(f"GitLab: user {login} not found")
        return users[0]


class GitLabProjectAPI(GitLabAPIBase):
    kind = "repository"

    async def fetch_one(self, ref: Any, ctx: OperationContext) -> GitLabProject:
        def fetch() -> GitLabProject:
            return decode(GitLabProject, self.gl.projects.get(ref.full_name))

        return await self._call(f"get project {ref.full_name}", fetch)

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[GitLabProject], Page]:
        def fetch() -> tuple[list[GitLabProject], Page]:
            if isinstance(parent, OrganizationRef):
                owner = self.gl.groups.get(parent.identity, lazy=True)
            else:
                owner = self._find_user(parent.user_login)
            return _page_of(owner.projects, options, GitLabProject)

        return await self._call(f"list projects of {parent.identity}", fetch)

    async def create_one(self, ref: Any, obj: GitLabProject, ctx: OperationContext) -> GitLabProject:
        data = _without_none(
            name=obj.name,
            path=obj.path,
            description=obj.description,
            default_branch=obj.default_branch,
            visibility=obj.visibility,
            initialize_with_readme=obj.initialize_with_readme,
        )

        def create() -> GitLabProject:
            if isinstance(ref, OrgRepositoryRef):
                group = self.gl.groups.get(ref.owner.identity)
                project = self.gl.projects.create({**data, "namespace_id": group.id})
            else:
                if self.gl.user is None:
                    self.gl.auth()
                if self.gl.user.username.lower() == ref.owner.user_login.lower():
                    project = self.gl.projects.create(data)
                else:
                    # creating for another user requires admin rights
                    project = self._find_user(ref.owner.user_login).projects.create(data)
            return decode(GitLabProject, project)

        return await self._call(f"create project {ref.full_name}", create)

    async def update_one(self, ref: Any, obj: GitLabProject, ctx: OperationContext) -> GitLabProject:
        def update() -> GitLabProject:
            project = self.gl.projects.get(ref.full_name)
            for field in PROJECT_WRITE_FIELDS:
                value = getattr(obj, field)
                if value is not None:
                    setattr(project, field, value)
            project.save()
            return decode(GitLabProject, project)

        return await self._call(f"update project {ref.full_name}", update)

    async def delete_one(self, ref: Any, ctx: OperationContext) -> None:
        await self._call(f"delete project {ref.full_name}", self.gl.projects.delete, ref.full_name)


class _GitLabProjectScopedAPI(GitLabAPIBase):
    """An API bound to one project."""

    def __init__(self, gl: gitlab.Gitlab, repository_ref: Any, logger: logging.Logger | None = None) -> None:
        super().__init__(gl, logger)
        self.repository_ref = repository_ref

    def _project(self, lazy: bool = True) -> Any:
        return self.gl.projects.get(self.repository_ref.full_name, lazy=lazy)

    def _what(self, action: str, key: Any = None) -> str:
        target = f" {key}" if key is not None else ""
        return f"{action} {self.kind}{target} in {self.repository_ref.full_name}"


class GitLabDeployKeyAPI(_GitLabProjectScopedAPI):
    """Deploy keys, addressed by title. Updates replace the key."""

    kind = "deploy key"

    def _find(self, project: Any, name: str) -> Any:
        for key in project.keys.list(iterator=True):
            if key.title == name:
                return key
        raise NotFoundError(f"GitLab: deploy key {name} not found in {self.repository_ref.full_name}")

    def _create(self, project: Any, obj: GitLabDeployKey) -> GitLabDeployKey:
        key = project.keys.create(
            {"title": obj.title, "key": obj.key, "can_push": bool(obj.can_push)}
        )
        return decode(GitLabDeployKey, key)

    async def fetch_one(self, ref: str, ctx: OperationContext) -> GitLabDeployKey:
        def fetch() -> GitLabDeployKey:
            return decode(GitLabDeployKey, self._find(self._project(), ref))

        return await self._call(self._what("get", ref), fetch)

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[GitLabDeployKey], Page]:
        return await self._call(
            self._what("list"), lambda: _page_of(self._project().keys, options, GitLabDeployKey)
        )

    async def create_one(self, ref: str, obj: GitLabDeployKey, ctx: OperationContext) -> GitLabDeployKey:
        return await self._call(self._what("create", ref), lambda: self._create(self._project(), obj))

    async def update_one(self, ref: str, obj: GitLabDeployKey, ctx: OperationContext) -> GitLabDeployKey:
        def replace() -> GitLabDeployKey:
            project = self._project()
            project.keys.delete(self._find(project, ref).id)
            return self._create(project, obj)

        return await self._call(self._what("update", ref), replace)

    async def delete_one(self, ref: str, ctx: OperationContext) -> None:
        def delete() -> None:
            project = self._project()
            project.keys.delete(self._find(project, ref).id)

        await self._call(self._what("delete", ref), delete)


class GitLabTeamAccessAPI(_GitLabProjectScopedAPI):
    """Groups a project is shared with, addressed by group path."""

    kind = "team access"

    def __init__(self, gl: gitlab.Gitlab, repository_ref: Any, mapper: Any, logger: logging.Logger | None = None) -> None:
        super().__init__(gl, repository_ref, logger)
        self.mapper = mapper

    def _shared(self) -> list[GitLabSharedGroup]:
        project = self._project(lazy=False)
        return [decode(GitLabSharedGroup, entry) for entry in project.shared_with_groups or []]

    def _find(self, name: str) -> GitLabSharedGroup:
        full_path = self.mapper.full_path(name)
        for entry in self._shared():
            if entry.group_full_path == full_path:
                return entry
        raise NotFoundError(f"GitLab: group {full_path} has no access to {self.repository_ref.full_name}")

    def _share(self, obj: GitLabSharedGroup, replace: bool) -> GitLabSharedGroup:
        project = self._project()
        group = self.gl.groups.get(obj.group_full_path)
        if replace:
            project.unshare(group.id)
        project.share(group.id, obj.group_access_level)
        return self._find(obj.group_full_path)

    async def fetch_one(self, ref: str, ctx: OperationContext) -> GitLabSharedGroup:
        return await self._call(self._what("get", ref), self._find, ref)

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[GitLabSharedGroup], Page]:
        # shared_with_groups is embedded in the project, not paginated
        return single_page(await self._call(self._what("list"), self._shared))

    async def create_one(self, ref: str, obj: GitLabSharedGroup, ctx: OperationContext) -> GitLabSharedGroup:
        return await self._call(self._what("create", ref), self._share, obj, False)

    async def update_one(self, ref: str, obj: GitLabSharedGroup, ctx: OperationContext) -> GitLabSharedGroup:
        return await self._call(self._what("update", ref), self._share, obj, True)

    async def delete_one(self, ref: str, ctx: OperationContext) -> None:
        def unshare() -> None:
            entry = self._find(ref)
            self._project().unshare(entry.group_id)

        await self._call(self._what("delete", ref), unshare)


class GitLabBranchAPI(_GitLabProjectScopedAPI):
    kind = "branch"

    async def fetch_one(self, ref: str, ctx: OperationContext) -> GitLabBranch:
        return await self._call(
            self._what("get", ref), lambda: decode(GitLabBranch, self._project().branches.get(ref))
        )

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[GitLabBranch], Page]:
        return await self._call(
            self._what("list"), lambda: _page_of(self._project().branches, options, GitLabBranch)
        )

    async def create_one(self, ref: str, obj: GitLabBranch, ctx: OperationContext) -> GitLabBranch:
        def create() -> GitLabBranch:
            branch = self._project().branches.create({"branch": ref, "ref": obj.sha})
            return decode(GitLabBranch, branch)

        return await self._call(self._what("create", ref), create)

    async def delete_one(self, ref: str, ctx: OperationContext) -> None:
        await self._call(self._what("delete", ref), lambda: self._project().branches.delete(ref))


class GitLabCommitAPI(_GitLabProjectScopedAPI):
    kind = "commit"

    async def list_page(
        self, branch: str, per_page: int, page: int, ctx: OperationContext
    ) -> list[GitLabCommit]:
        def fetch() -> list[GitLabCommit]:
            commits = self._project().commits.list(
                ref_name=branch, page=max(page, 1), per_page=per_page, get_all=False
            )
            return [decode(GitLabCommit, commit) for commit in commits]

        return await self._call(self._what("list", f"on {branch}"), fetch)

    async def create_commit(
        self, branch: str, message: str, files: list[CommitFile], ctx: OperationContext
    ) -> GitLabCommit:
        def create() -> GitLabCommit:
            project = self._project()
            actions = []
            for f in files:
                if f.content is None:
                    actions.append({"action": "delete", "file_path": f.path})
                    continue
                try:
                    project.files.get(file_path=f.path, ref=branch)
                    action = "update"
                except GitlabGetError as e:
                    if e.response_code != 404:
                        raise
                    action = "create"
                actions.append({"action": action, "file_path": f.path, "content": f.content})
            commit = project.commits.create(
                {"branch": branch, "commit_message": message, "actions": actions}
            )
            return decode(GitLabCommit, commit)

        return await self._call(self._what("create", f"on {branch}"), create)


class GitLabMergeRequestAPI(_GitLabProjectScopedAPI):
    kind = "merge request"

    async def fetch_one(self, ref: int, ctx: OperationContext) -> GitLabMergeRequest:
        return await self._call(
            self._what("get", f"!{ref}"),
            lambda: decode(GitLabMergeRequest, self._project().mergerequests.get(int(ref))),
        )

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[GitLabMergeRequest], Page]:
        return await self._call(
            self._what("list"),
            lambda: _page_of(self._project().mergerequests, options, GitLabMergeRequest, state="all"),
        )

    async def create_one(self, ref: Any, obj: GitLabMergeRequest, ctx: OperationContext) -> GitLabMergeRequest:
        data = _without_none(
            source_branch=obj.source_branch,
            target_branch=obj.target_branch,
            title=obj.title,
            description=obj.description,
        )
        return await self._call(
            self._what("create", f"'{obj.title}'"),
            lambda: decode(GitLabMergeRequest, self._project().mergerequests.create(data)),
        )

    async def update_one(self, ref: int, obj: GitLabMergeRequest, ctx: OperationContext) -> GitLabMergeRequest:
        def update() -> GitLabMergeRequest:
            mr = self._project().mergerequests.get(int(ref))
            if obj.title is not None:
                mr.title = obj.title
            if obj.description is not None:
                mr.description = obj.description
            mr.save()
            return decode(GitLabMergeRequest, mr)

        return await self._call(self._what("update", f"!{ref}"), update)

    async def merge(
        self, ref: int, method: MergeMethod, message: str | None, ctx: OperationContext
    ) -> None:
        if method is MergeMethod.REBASE:
            raise self._unsupported("rebase merges")

        def merge() -> None:
            mr = self._project().mergerequests.get(int(ref))
            kwargs = _without_none(merge_commit_message=message)
            if method is MergeMethod.SQUASH:
                kwargs["squash"] = True
                if message is not None:
                    kwargs["squash_commit_message"] = message
            mr.merge(**kwargs)

        await self._call(self._what("merge", f"!{ref}"), merge)


class GitLabGroupAPI(GitLabAPIBase):
    kind = "organization"

    async def fetch_one(self, ref: OrganizationRef, ctx: OperationContext) -> GitLabGroup:
        return await self._call(
            f"get group {ref.identity}", lambda: decode(GitLabGroup, self.gl.groups.get(ref.identity))
        )

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[GitLabGroup], Page]:
        return await self._call(
            "list groups",
            lambda: _page_of(self.gl.groups, options, GitLabGroup, top_level_only=True),
        )

    async def fetch_children_page(
        self, parent: OrganizationRef, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[GitLabGroup], Page]:
        def fetch() -> tuple[list[GitLabGroup], Page]:
            group = self.gl.groups.get(parent.identity, lazy=True)
            return _page_of(group.subgroups, options, GitLabGroup)

        return await self._call(f"list subgroups of {parent.identity}", fetch)


class GitLabSubgroupTeamAPI(GitLabAPIBase):
    """Teams of a group are its direct subgroups."""

    kind = "team"

    def __init__(self, gl: gitlab.Gitlab, organization_ref: OrganizationRef, logger: logging.Logger | None = None) -> None:
        super().__init__(gl, logger)
        self.organization_ref = organization_ref

    def _team_path(self, name: str) -> str:
        if "/" in name:
            raise InvalidArgumentError(f"Team name cannot contain '/': {name!r}")
        return f"{self.organization_ref.identity}/{name}"

    async def fetch_one(self, ref: str, ctx: OperationContext) -> GitLabGroup:
        def fetch() -> GitLabGroup:
            group = self.gl.groups.get(self._team_path(ref))
            members = [member.username for member in group.members.list(iterator=True)]
            return decode(GitLabGroup, {**group.attributes, "members": members})

        return await self._call(f"get team {ref}", fetch)

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[GitLabGroup], Page]:
        def fetch() -> tuple[list[GitLabGroup], Page]:
            group = self.gl.groups.get(self.organization_ref.identity, lazy=True)
            return _page_of(group.subgroups, options, GitLabGroup)

        return await self._call(f"list teams of {self.organization_ref.identity}", fetch)

    async def has_member(self, team: str, login: str, ctx: OperationContext) -> bool:
        def check() -> bool:
            group = self.gl.groups.get(self._team_path(team), lazy=True)
            return any(
                member.username == login for member in group.members_all.list(iterator=True)
            )

        return await self._call(f"check membership of {login} in team {team}", check)

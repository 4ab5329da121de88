# git_providers/source_control/providers/stash/stash_api.py

"""
Per-kind Bitbucket Server APIs over the REST endpoints.

Projects stand in for organizations and personal projects (``~login``) for
users. Team access is a repository's group permissions, deploy keys are
access keys from the ssh keys plugin.
"""

import logging
from typing import Any
from urllib.parse import quote

from ....core.context import OperationContext
from ....core.exceptions import InvalidArgumentError, NotFoundError
from ...models import CommitFile, MergeMethod
from ...pagination import ListOptions, Page
from ...refs import OrganizationRef, UserRef
from ..base_api import BaseResourceAPI
from .stash_client import API_PATH, BRANCH_UTILS_PATH, KEYS_PATH, StashClient
from .stash_mappers import branch_id, branch_name
from .stash_models import (
    StashBranch,
    StashCommit,
    StashDeployKey,
    StashGroup,
    StashGroupPermission,
    StashProject,
    StashPullRequest,
    StashRepository,
)

MERGE_STRATEGIES: dict[MergeMethod, str] = {
    MergeMethod.MERGE: "no-ff",
    MergeMethod.SQUASH: "squash",
    MergeMethod.REBASE: "rebase-no-ff",
}


def project_key(owner: Any) -> str:
    """Project key for an organization, or the personal project of a user."""
    if isinstance(owner, OrganizationRef):
        if owner.sub_organizations:
            raise InvalidArgumentError(
                f"Bitbucket Server projects cannot be nested: {owner.identity}"
            )
        return owner.organization
    if isinstance(owner, UserRef):
        return f"~{owner.user_login}"
    raise InvalidArgumentError(f"Unexpected repository owner {owner!r}")


def _q(value: str) -> str:
    return quote(value, safe="")


class StashAPIBase(BaseResourceAPI):
    provider_type = "stash"

    def __init__(self, client: StashClient, logger: logging.Logger | None = None) -> None:
        super().__init__(logger)
        self.client = client


class StashRepositoryAPI(StashAPIBase):
    """Repositories; the default branch lives behind its own endpoint."""

    kind = "repository"

    def _path(self, ref: Any) -> str:
        return f"{API_PATH}/projects/{_q(project_key(ref.owner))}/repos/{_q(ref.repository_name)}"

    async def _default_branch(self, ref: Any) -> str | None:
        try:
            data = await self.client.request(
                "GET", f"{self._path(ref)}/branches/default", f"get default branch of {ref.full_name}"
            )
        except NotFoundError:
            # empty repositories have no default branch yet
            return None
        return branch_name((data or {}).get("id"))

    async def _set_default_branch(self, ref: Any, name: str) -> None:
        await self.client.request(
            "PUT",
            f"{self._path(ref)}/branches/default",
            f"set default branch of {ref.full_name}",
            json={"id": branch_id(name)},
        )

    async def fetch_one(self, ref: Any, ctx: OperationContext) -> StashRepository:
        data = await self.client.request("GET", self._path(ref), f"get repository {ref.full_name}")
        repo = StashRepository.from_api(data)
        return repo.model_copy(update={"default_branch": await self._default_branch(ref)})

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[StashRepository], Page]:
        path = f"{API_PATH}/projects/{_q(project_key(parent))}/repos"
        values, page = await self.client.get_page(path, options, f"list repositories of {parent.identity}")
        return [StashRepository.from_api(value) for value in values], page

    async def create_one(self, ref: Any, obj: StashRepository, ctx: OperationContext) -> StashRepository:
        body = {"name": obj.name, "scmId": obj.scm_id or "git"}
        if obj.description is not None:
            body["description"] = obj.description
        if obj.public is not None:
            body["public"] = obj.public
        path = f"{API_PATH}/projects/{_q(project_key(ref.owner))}/repos"
        data = await self.client.request("POST", path, f"create repository {ref.full_name}", json=body)
        created = StashRepository.from_api(data)
        if obj.default_branch is not None:
            await self._set_default_branch(ref, obj.default_branch)
        return created.model_copy(update={"default_branch": await self._default_branch(ref)})

    async def update_one(self, ref: Any, obj: StashRepository, ctx: OperationContext) -> StashRepository:
        body: dict[str, Any] = {"name": obj.name or ref.repository_name}
        if obj.description is not None:
            body["description"] = obj.description
        if obj.public is not None:
            body["public"] = obj.public
        await self.client.request("PUT", self._path(ref), f"update repository {ref.full_name}", json=body)
        if obj.default_branch is not None and obj.default_branch != await self._default_branch(ref):
            await self._set_default_branch(ref, obj.default_branch)
        return await self.fetch_one(ref, ctx)

    async def delete_one(self, ref: Any, ctx: OperationContext) -> None:
        # the server answers 204 for a missing repository too, so absence is checked first
        await self.client.request("GET", self._path(ref), f"get repository {ref.full_name}")
        await self.client.request("DELETE", self._path(ref), f"delete repository {ref.full_name}")


class _StashRepositoryScopedAPI(StashAPIBase):
    """An API bound to one repository."""

    def __init__(self, client: StashClient, repository_ref: Any, logger: logging.Logger | None = None) -> None:
        super().__init__(client, logger)
        self.repository_ref = repository_ref

    def _repo_path(self, base: str = API_PATH) -> str:
        key = _q(project_key(self.repository_ref.owner))
        return f"{base}/projects/{key}/repos/{_q(self.repository_ref.repository_name)}"

    def _what(self, action: str, key: Any = None) -> str:
        target = f" {key}" if key is not None else ""
        return f"{action} {self.kind}{target} in {self.repository_ref.full_name}"


class StashDeployKeyAPI(_StashRepositoryScopedAPI):
    """Access keys, addressed by label. Changing the key text replaces it."""

    kind = "deploy key"

    def _path(self) -> str:
        return f"{self._repo_path(KEYS_PATH)}/ssh"

    async def _find(self, name: str, ctx: OperationContext) -> StashDeployKey:
        for value in await self.client.get_all(self._path(), self._what("list"), ctx):
            key = StashDeployKey.from_api(value)
            if key.label == name:
                return key
        raise NotFoundError(
            f"Bitbucket Server: deploy key {name} not found in {self.repository_ref.full_name}"
        )

    async def fetch_one(self, ref: str, ctx: OperationContext) -> StashDeployKey:
        return await self._find(ref, ctx)

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[StashDeployKey], Page]:
        values, page = await self.client.get_page(self._path(), options, self._what("list"))
        return [StashDeployKey.from_api(value) for value in values], page

    async def create_one(self, ref: str, obj: StashDeployKey, ctx: OperationContext) -> StashDeployKey:
        body = {
            "key": {"text": obj.text, "label": obj.label or ref},
            "permission": obj.permission or "REPO_READ",
        }
        data = await self.client.request("POST", self._path(), self._what("create", ref), json=body)
        return StashDeployKey.from_api(data)

    async def update_one(self, ref: str, obj: StashDeployKey, ctx: OperationContext) -> StashDeployKey:
        current = await self._find(ref, ctx)
        key_id = current.key["id"]
        if current.text == obj.text and current.label == obj.label:
            path = f"{self._path()}/{key_id}/permission/{obj.permission}"
            await self.client.request("PUT", path, self._what("update", ref))
            # the permission endpoint answers 204, so the key is read back
            return await self._find(ref, ctx)
        await self.client.request("DELETE", f"{self._path()}/{key_id}", self._what("update", ref))
        return await self.create_one(ref, obj, ctx)

    async def delete_one(self, ref: str, ctx: OperationContext) -> None:
        current = await self._find(ref, ctx)
        await self.client.request(
            "DELETE", f"{self._path()}/{current.key['id']}", self._what("delete", ref)
        )


class StashTeamAccessAPI(_StashRepositoryScopedAPI):
    """Group permissions on a repository, addressed by group name."""

    kind = "team access"

    def _path(self) -> str:
        return f"{self._repo_path()}/permissions/groups"

    async def _find(self, name: str, ctx: OperationContext) -> StashGroupPermission:
        values = await self.client.get_all(
            self._path(), self._what("get", name), ctx, params={"filter": name}
        )
        for value in values:
            entry = StashGroupPermission.from_api(value)
            if entry.name == name:
                return entry
        raise NotFoundError(
            f"Bitbucket Server: group {name} has no access to {self.repository_ref.full_name}"
        )

    async def _grant(self, ref: str, obj: StashGroupPermission, ctx: OperationContext, action: str) -> StashGroupPermission:
        await self.client.request(
            "PUT",
            self._path(),
            self._what(action, ref),
            params={"permission": obj.permission, "name": obj.name or ref},
        )
        return await self._find(obj.name or ref, ctx)

    async def fetch_one(self, ref: str, ctx: OperationContext) -> StashGroupPermission:
        return await self._find(ref, ctx)

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[StashGroupPermission], Page]:
        values, page = await self.client.get_page(self._path(), options, self._what("list"))
        return [StashGroupPermission.from_api(value) for value in values], page

    async def create_one(self, ref: str, obj: StashGroupPermission, ctx: OperationContext) -> StashGroupPermission:
        return await self._grant(ref, obj, ctx, "create")

    async def update_one(self, ref: str, obj: StashGroupPermission, ctx: OperationContext) -> StashGroupPermission:
        # granting again overwrites the previous permission
        return await self._grant(ref, obj, ctx, "update")

    async def delete_one(self, ref: str, ctx: OperationContext) -> None:
        await self._find(ref, ctx)
        await self.client.request("DELETE", self._path(), self._what("delete", ref), params={"name": ref})


class StashBranchAPI(_StashRepositoryScopedAPI):
    kind = "branch"

    async def fetch_one(self, ref: str, ctx: OperationContext) -> StashBranch:
        values = await self.client.get_all(
            f"{self._repo_path()}/branches", self._what("get", ref), ctx, params={"filterText": ref}
        )
        for value in values:
            branch = StashBranch.from_api(value)
            if branch.display_id == ref:
                return branch
        raise NotFoundError(
            f"Bitbucket Server: branch {ref} not found in {self.repository_ref.full_name}"
        )

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[StashBranch], Page]:
        values, page = await self.client.get_page(
            f"{self._repo_path()}/branches", options, self._what("list")
        )
        return [StashBranch.from_api(value) for value in values], page

    async def create_one(self, ref: str, obj: StashBranch, ctx: OperationContext) -> StashBranch:
        data = await self.client.request(
            "POST",
            f"{self._repo_path()}/branches",
            self._what("create", ref),
            json={"name": ref, "startPoint": obj.latest_commit},
        )
        return StashBranch.from_api(data)

    async def delete_one(self, ref: str, ctx: OperationContext) -> None:
        await self.fetch_one(ref, ctx)
        await self.client.request(
            "DELETE",
            f"{self._repo_path(BRANCH_UTILS_PATH)}/branches",
            self._what("delete", ref),
            json={"name": branch_id(ref), "dryRun": False},
        )


class StashCommitAPI(_StashRepositoryScopedAPI):
    kind = "commit"

    async def list_page(
        self, branch: str, per_page: int, page: int, ctx: OperationContext
    ) -> list[StashCommit]:
        options = ListOptions(per_page=per_page, cursor=(max(page, 1) - 1) * per_page)
        values, _ = await self.client.get_page(
            f"{self._repo_path()}/commits",
            options,
            self._what("list", f"on {branch}"),
            params={"until": branch_id(branch)},
        )
        return [StashCommit.from_api(value) for value in values]

    async def create_commit(
        self, branch: str, message: str, files: list[CommitFile], ctx: OperationContext
    ) -> StashCommit:
        raise self._unsupported("create")


class StashPullRequestAPI(_StashRepositoryScopedAPI):
    """Pull requests; edits and merges carry the version last seen."""

    kind = "pull request"

    def _path(self, number: Any = None) -> str:
        base = f"{self._repo_path()}/pull-requests"
        return base if number is None else f"{base}/{int(number)}"

    def _repository(self) -> dict[str, Any]:
        return {
            "slug": self.repository_ref.repository_name,
            "project": {"key": project_key(self.repository_ref.owner)},
        }

    async def fetch_one(self, ref: int, ctx: OperationContext) -> StashPullRequest:
        data = await self.client.request("GET", self._path(ref), self._what("get", f"#{ref}"))
        return StashPullRequest.from_api(data)

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[StashPullRequest], Page]:
        values, page = await self.client.get_page(
            self._path(), options, self._what("list"), params={"state": "ALL"}
        )
        return [StashPullRequest.from_api(value) for value in values], page

    async def create_one(self, ref: Any, obj: StashPullRequest, ctx: OperationContext) -> StashPullRequest:
        body = {
            "title": obj.title,
            "description": obj.description or "",
            "fromRef": {"id": obj.from_ref["id"], "repository": self._repository()},
            "toRef": {"id": obj.to_ref["id"], "repository": self._repository()},
        }
        data = await self.client.request(
            "POST", self._path(), self._what("create", f"'{obj.title}'"), json=body
        )
        return StashPullRequest.from_api(data)

    async def update_one(self, ref: int, obj: StashPullRequest, ctx: OperationContext) -> StashPullRequest:
        version = obj.version
        if version is None:
            version = (await self.fetch_one(ref, ctx)).version
        body: dict[str, Any] = {"version": version}
        if obj.title is not None:
            body["title"] = obj.title
        if obj.description is not None:
            body["description"] = obj.description
        data = await self.client.request("PUT", self._path(ref), self._what("update", f"#{ref}"), json=body)
        return StashPullRequest.from_api(data)

    async def merge(
        self, ref: int, method: MergeMethod, message: str | None, ctx: OperationContext
    ) -> None:
        current = await self.fetch_one(ref, ctx)
        body: dict[str, Any] = {"strategyId": MERGE_STRATEGIES[method]}
        if message is not None:
            body["message"] = message
        await self.client.request(
            "POST",
            f"{self._path(ref)}/merge",
            self._what("merge", f"#{ref}"),
            params={"version": current.version},
            json=body,
        )


class StashProjectAPI(StashAPIBase):
    kind = "organization"

    async def fetch_one(self, ref: OrganizationRef, ctx: OperationContext) -> StashProject:
        data = await self.client.request(
            "GET", f"{API_PATH}/projects/{_q(project_key(ref))}", f"get project {ref.identity}"
        )
        return StashProject.from_api(data)

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[StashProject], Page]:
        values, page = await self.client.get_page(f"{API_PATH}/projects", options, "list projects")
        return [StashProject.from_api(value) for value in values], page

    async def fetch_children_page(
        self, parent: OrganizationRef, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[StashProject], Page]:
        raise self._unsupported("sub-organizations")


class StashGroupAPI(StashAPIBase):
    """Teams of a project are the groups holding a permission on it."""

    kind = "team"

    def __init__(self, client: StashClient, organization_ref: OrganizationRef, logger: logging.Logger | None = None) -> None:
        super().__init__(client, logger)
        self.organization_ref = organization_ref

    def _path(self) -> str:
        return f"{API_PATH}/projects/{_q(project_key(self.organization_ref))}/permissions/groups"

    @staticmethod
    def _decode(value: dict[str, Any], members: list[str] | None = None) -> StashGroup:
        entry = StashGroupPermission.from_api(value)
        return StashGroup(name=entry.name, permission=entry.permission, members=members)

    async def fetch_one(self, ref: str, ctx: OperationContext) -> StashGroup:
        values = await self.client.get_all(
            self._path(), f"get team {ref}", ctx, params={"filter": ref}
        )
        for value in values:
            if (value.get("group") or {}).get("name") == ref:
                members = await self.client.get_all(
                    f"{API_PATH}/admin/groups/more-members",
                    f"list members of team {ref}",
                    ctx,
                    params={"context": ref},
                )
                return self._decode(value, [member.get("name") for member in members])
        raise NotFoundError(
            f"Bitbucket Server: group {ref} has no access to project {self.organization_ref.identity}"
        )

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[StashGroup], Page]:
        values, page = await self.client.get_page(
            self._path(), options, f"list teams of {self.organization_ref.identity}"
        )
        return [self._decode(value) for value in values], page

    async def has_member(self, team: str, login: str, ctx: OperationContext) -> bool:
        raise self._unsupported("membership checks")

# git_providers/source_control/providers/stash/stash_mappers.py

"""Conversions between Bitbucket Server objects and desired-state models."""

from typing import Any

from ....core.exceptions import InvalidArgumentError
from ...models import (
    BranchInfo,
    CommitInfo,
    DeployKeyInfo,
    OrganizationInfo,
    PullRequestInfo,
    RepositoryCreateOptions,
    RepositoryInfo,
    RepositoryPermission,
    RepositoryVisibility,
    TeamAccessInfo,
    TeamInfo,
)
from ...refs import OrganizationRef, OrgRepositoryRef, UserRef, UserRepositoryRef
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

REPO_PERMISSIONS: dict[RepositoryPermission, str] = {
    RepositoryPermission.PULL: "REPO_READ",
    RepositoryPermission.PUSH: "REPO_WRITE",
    RepositoryPermission.ADMIN: "REPO_ADMIN",
}
PERMISSIONS_BY_NAME = {name: permission for permission, name in REPO_PERMISSIONS.items()}

BRANCH_PREFIX = "refs/heads/"


def branch_id(name: str) -> str:
    return name if name.startswith(BRANCH_PREFIX) else f"{BRANCH_PREFIX}{name}"


def branch_name(ref_id: str | None) -> str | None:
    if ref_id is None:
        return None
    return ref_id[len(BRANCH_PREFIX):] if ref_id.startswith(BRANCH_PREFIX) else ref_id


class StashRepositoryMapper:
    def to_desired(self, obj: StashRepository) -> RepositoryInfo:
        visibility = None
        if obj.public is not None:
            visibility = RepositoryVisibility.PUBLIC if obj.public else RepositoryVisibility.PRIVATE
        return RepositoryInfo(
            description=obj.description or "",
            default_branch=obj.default_branch,
            visibility=visibility,
        )

    def apply_desired(self, desired: RepositoryInfo, obj: StashRepository) -> StashRepository:
        update: dict[str, Any] = {}
        if desired.description is not None:
            update["description"] = desired.description
        if desired.default_branch is not None:
            update["default_branch"] = desired.default_branch
        if desired.visibility is not None:
            update["public"] = desired.visibility is RepositoryVisibility.PUBLIC
        return obj.model_copy(update=update)

    def new_object(self, ref: Any, desired: RepositoryInfo) -> StashRepository:
        base = StashRepository(name=ref.repository_name, slug=ref.repository_name, scm_id="git")
        return self.apply_desired(desired, base)

    def apply_create_options(
        self, obj: StashRepository, options: RepositoryCreateOptions
    ) -> StashRepository:
        if options.auto_init or options.license_template:
            raise InvalidArgumentError("Bitbucket Server creates repositories empty")
        return obj

    def ref_of(self, obj: StashRepository, parent: Any) -> Any:
        if isinstance(parent, OrganizationRef):
            return OrgRepositoryRef(parent, obj.slug)
        if isinstance(parent, UserRef):
            return UserRepositoryRef(parent, obj.slug)
        raise TypeError(f"Unexpected repository parent {parent!r}")

    def validate_desired(self, desired: RepositoryInfo) -> None:
        if desired.visibility is RepositoryVisibility.INTERNAL:
            raise InvalidArgumentError("Bitbucket Server repositories are either public or private")


class StashDeployKeyMapper:
    """Access keys, addressed by label."""

    def to_desired(self, obj: StashDeployKey) -> DeployKeyInfo:
        read_only = None
        if obj.permission is not None:
            read_only = obj.permission == "REPO_READ"
        return DeployKeyInfo(name=obj.label, key=obj.text, read_only=read_only)

    def apply_desired(self, desired: DeployKeyInfo, obj: StashDeployKey) -> StashDeployKey:
        key = dict(obj.key or {})
        update: dict[str, Any] = {}
        if desired.name is not None:
            key["label"] = desired.name
        if desired.key is not None:
            key["text"] = desired.key
        update["key"] = key
        if desired.read_only is not None:
            update["permission"] = "REPO_READ" if desired.read_only else "REPO_WRITE"
        return obj.model_copy(update=update)

    def new_object(self, ref: Any, desired: DeployKeyInfo) -> StashDeployKey:
        return self.apply_desired(desired, StashDeployKey(key={"label": ref}))

    def ref_of(self, obj: StashDeployKey, parent: Any) -> str:
        return obj.label

    def validate_desired(self, desired: DeployKeyInfo) -> None:
        pass


class StashTeamAccessMapper:
    """Group permissions on a repository; only read, write and admin exist."""

    def to_desired(self, obj: StashGroupPermission) -> TeamAccessInfo:
        return TeamAccessInfo(name=obj.name, permission=PERMISSIONS_BY_NAME.get(obj.permission))

    def apply_desired(
        self, desired: TeamAccessInfo, obj: StashGroupPermission
    ) -> StashGroupPermission:
        update: dict[str, Any] = {}
        if desired.name is not None:
            update["group"] = {**(obj.group or {}), "name": desired.name}
        if desired.permission is not None:
            update["permission"] = REPO_PERMISSIONS[desired.permission]
        return obj.model_copy(update=update)

    def new_object(self, ref: Any, desired: TeamAccessInfo) -> StashGroupPermission:
        return self.apply_desired(desired, StashGroupPermission(group={"name": ref}))

    def ref_of(self, obj: StashGroupPermission, parent: Any) -> str:
        return obj.name

    def validate_desired(self, desired: TeamAccessInfo) -> None:
        if desired.permission is not None and desired.permission not in REPO_PERMISSIONS:
            raise InvalidArgumentError(
                f"Bitbucket Server has no {desired.permission.value} permission; "
                "use pull, push or admin"
            )


class StashBranchMapper:
    def to_desired(self, obj: StashBranch) -> BranchInfo:
        return BranchInfo(name=obj.display_id, sha=obj.latest_commit)

    def apply_desired(self, desired: BranchInfo, obj: StashBranch) -> StashBranch:
        update: dict[str, Any] = {}
        if desired.name is not None:
            update["display_id"] = desired.name
            update["id"] = branch_id(desired.name)
        if desired.sha is not None:
            update["latest_commit"] = desired.sha
        return obj.model_copy(update=update)

    def new_object(self, ref: Any, desired: BranchInfo) -> StashBranch:
        return StashBranch(id=branch_id(ref), display_id=ref, latest_commit=desired.sha)

    def ref_of(self, obj: StashBranch, parent: Any) -> str:
        return obj.display_id

    def validate_desired(self, desired: BranchInfo) -> None:
        if desired.protected:
            raise InvalidArgumentError("Bitbucket Server branch protection is managed separately")


class StashCommitMapper:
    def to_desired(self, obj: StashCommit) -> CommitInfo:
        return CommitInfo(
            sha=obj.id,
            author=(obj.author or {}).get("name"),
            message=obj.message,
            created_at=obj.created_at,
        )


class StashPullRequestMapper:
    def to_desired(self, obj: StashPullRequest) -> PullRequestInfo:
        return PullRequestInfo(
            title=obj.title,
            description=obj.description or "",
            source_branch=(obj.from_ref or {}).get("displayId"),
            target_branch=(obj.to_ref or {}).get("displayId"),
            number=obj.id,
            merged=obj.state == "MERGED" if obj.state else None,
            web_url=obj.web_url,
        )

    def apply_desired(self, desired: PullRequestInfo, obj: StashPullRequest) -> StashPullRequest:
        update: dict[str, Any] = {}
        if desired.title is not None:
            update["title"] = desired.title
        if desired.description is not None:
            update["description"] = desired.description
        if desired.source_branch is not None:
            update["from_ref"] = {
                **(obj.from_ref or {}),
                "id": branch_id(desired.source_branch),
                "displayId": desired.source_branch,
            }
        if desired.target_branch is not None:
            update["to_ref"] = {
                **(obj.to_ref or {}),
                "id": branch_id(desired.target_branch),
                "displayId": desired.target_branch,
            }
        return obj.model_copy(update=update)

    def new_object(self, ref: Any, desired: PullRequestInfo) -> StashPullRequest:
        return self.apply_desired(desired, StashPullRequest())

    def ref_of(self, obj: StashPullRequest, parent: Any) -> int:
        return obj.id

    def validate_desired(self, desired: PullRequestInfo) -> None:
        pass


class StashProjectMapper:
    """Projects play the role of organizations; the key is the identity."""

    def __init__(self, domain: str) -> None:
        self.domain = domain

    def to_desired(self, obj: StashProject) -> OrganizationInfo:
        return OrganizationInfo(name=obj.name, description=obj.description)

    def ref_of(self, obj: StashProject, parent: Any) -> OrganizationRef:
        return OrganizationRef(self.domain, obj.key)

    def validate_desired(self, desired: OrganizationInfo) -> None:
        pass


class StashGroupMapper:
    """Teams are the user groups granted access to a project."""

    def to_desired(self, obj: StashGroup) -> TeamInfo:
        return TeamInfo(name=obj.name, members=obj.members)

    def ref_of(self, obj: StashGroup, parent: Any) -> str:
        return obj.name

    def validate_desired(self, desired: TeamInfo) -> None:
        pass

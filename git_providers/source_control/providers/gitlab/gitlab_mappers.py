# git_providers/source_control/providers/gitlab/gitlab_mappers.py

"""Conversions between GitLab server objects and desired-state models."""

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
    TeamAccessInfo,
    TeamInfo,
)
from ...refs import OrganizationRef, OrgRepositoryRef, UserRef, UserRepositoryRef
from .gitlab_models import (
    GitLabBranch,
    GitLabCommit,
    GitLabDeployKey,
    GitLabGroup,
    GitLabMergeRequest,
    GitLabProject,
    GitLabSharedGroup,
)

# GitLab guest, reporter, developer, maintainer, owner
ACCESS_LEVELS: dict[RepositoryPermission, int] = {
    RepositoryPermission.PULL: 10,
    RepositoryPermission.TRIAGE: 20,
    RepositoryPermission.PUSH: 30,
    RepositoryPermission.MAINTAIN: 40,
    RepositoryPermission.ADMIN: 50,
}
PERMISSIONS_BY_LEVEL = {level: permission for permission, level in ACCESS_LEVELS.items()}


def permission_for_level(level: int | None) -> RepositoryPermission | None:
    if level is None:
        return None
    # custom levels in between round down
    for known in sorted(PERMISSIONS_BY_LEVEL, reverse=True):
        if level >= known:
            return PERMISSIONS_BY_LEVEL[known]
    return RepositoryPermission.PULL


def organization_ref_from_path(domain: str, full_path: str) -> OrganizationRef:
    parts = full_path.split("/")
    return OrganizationRef(domain, parts[0], tuple(parts[1:]))


class GitLabProjectMapper:
    def to_desired(self, obj: GitLabProject) -> RepositoryInfo:
        return RepositoryInfo(
            description=obj.description or "",
            default_branch=obj.default_branch,
            visibility=obj.visibility,
        )

    def apply_desired(self, desired: RepositoryInfo, obj: GitLabProject) -> GitLabProject:
        update: dict[str, Any] = {}
        if desired.description is not None:
            update["description"] = desired.description
        if desired.default_branch is not None:
            update["default_branch"] = desired.default_branch
        if desired.visibility is not None:
            update["visibility"] = desired.visibility.value
        return obj.model_copy(update=update)

    def new_object(self, ref: Any, desired: RepositoryInfo) -> GitLabProject:
        base = GitLabProject(name=ref.repository_name, path=ref.repository_name)
        return self.apply_desired(desired, base)

    def apply_create_options(
        self, obj: GitLabProject, options: RepositoryCreateOptions
    ) -> GitLabProject:
        if options.license_template:
            raise InvalidArgumentError("GitLab cannot add a license template on create")
        return obj.model_copy(update={"initialize_with_readme": options.auto_init})

    def ref_of(self, obj: GitLabProject, parent: Any) -> Any:
        if isinstance(parent, OrganizationRef):
            return OrgRepositoryRef(parent, obj.path)
        if isinstance(parent, UserRef):
            return UserRepositoryRef(parent, obj.path)
        raise TypeError(f"Unexpected repository parent {parent!r}")

    def validate_desired(self, desired: RepositoryInfo) -> None:
        pass


class GitLabDeployKeyMapper:
    def to_desired(self, obj: GitLabDeployKey) -> DeployKeyInfo:
        return DeployKeyInfo(
            name=obj.title,
            key=obj.key,
            read_only=None if obj.can_push is None else not obj.can_push,
        )

    def apply_desired(self, desired: DeployKeyInfo, obj: GitLabDeployKey) -> GitLabDeployKey:
        update: dict[str, Any] = {}
        if desired.name is not None:
            update["title"] = desired.name
        if desired.key is not None:
            update["key"] = desired.key
        if desired.read_only is not None:
            update["can_push"] = not desired.read_only
        return obj.model_copy(update=update)

    def new_object(self, ref: Any, desired: DeployKeyInfo) -> GitLabDeployKey:
        return self.apply_desired(desired, GitLabDeployKey(title=ref))

    def ref_of(self, obj: GitLabDeployKey, parent: Any) -> str:
        return obj.title

    def validate_desired(self, desired: DeployKeyInfo) -> None:
        pass


class GitLabTeamAccessMapper:
    """Team names are relative to the repository's top-level group."""

    def __init__(self, organization_path: str) -> None:
        self.organization_path = organization_path

    def relative_name(self, full_path: str) -> str:
        prefix = f"{self.organization_path}/"
        return full_path[len(prefix):] if full_path.startswith(prefix) else full_path

    def full_path(self, name: str) -> str:
        return name if "/" in name else f"{self.organization_path}/{name}"

    def to_desired(self, obj: GitLabSharedGroup) -> TeamAccessInfo:
        return TeamAccessInfo(
            name=self.relative_name(obj.group_full_path),
            permission=permission_for_level(obj.group_access_level),
        )

    def apply_desired(self, desired: TeamAccessInfo, obj: GitLabSharedGroup) -> GitLabSharedGroup:
        update: dict[str, Any] = {}
        if desired.name is not None:
            update["group_full_path"] = self.full_path(desired.name)
        if desired.permission is not None:
            update["group_access_level"] = ACCESS_LEVELS[desired.permission]
        return obj.model_copy(update=update)

    def new_object(self, ref: Any, desired: TeamAccessInfo) -> GitLabSharedGroup:
        return self.apply_desired(desired, GitLabSharedGroup(group_full_path=self.full_path(ref)))

    def ref_of(self, obj: GitLabSharedGroup, parent: Any) -> str:
        return self.relative_name(obj.group_full_path)

    def validate_desired(self, desired: TeamAccessInfo) -> None:
        pass


class GitLabBranchMapper:
    def to_desired(self, obj: GitLabBranch) -> BranchInfo:
        return BranchInfo(name=obj.name, sha=obj.sha, protected=obj.protected)

    def apply_desired(self, desired: BranchInfo, obj: GitLabBranch) -> GitLabBranch:
        update: dict[str, Any] = {}
        if desired.name is not None:
            update["name"] = desired.name
        if desired.sha is not None:
            update["commit"] = {**(obj.commit or {}), "id": desired.sha}
        return obj.model_copy(update=update)

    def new_object(self, ref: Any, desired: BranchInfo) -> GitLabBranch:
        return GitLabBranch(name=ref, commit={"id": desired.sha})

    def ref_of(self, obj: GitLabBranch, parent: Any) -> str:
        return obj.name

    def validate_desired(self, desired: BranchInfo) -> None:
        pass


class GitLabCommitMapper:
    def to_desired(self, obj: GitLabCommit) -> CommitInfo:
        return CommitInfo(
            sha=obj.id,
            tree_sha=obj.tree_id,
            author=obj.author_name,
            message=obj.message,
            created_at=obj.created_at,
            url=obj.web_url,
        )


class GitLabMergeRequestMapper:
    def to_desired(self, obj: GitLabMergeRequest) -> PullRequestInfo:
        return PullRequestInfo(
            title=obj.title,
            description=obj.description or "",
            source_branch=obj.source_branch,
            target_branch=obj.target_branch,
            number=obj.iid,
            merged=obj.state == "merged" if obj.state else None,
            web_url=obj.web_url,
        )

    def apply_desired(self, desired: PullRequestInfo, obj: GitLabMergeRequest) -> GitLabMergeRequest:
        update: dict[str, Any] = {}
        if desired.title is not None:
            update["title"] = desired.title
        if desired.description is not None:
            update["description"] = desired.description
        if desired.source_branch is not None:
            update["source_branch"] = desired.source_branch
        if desired.target_branch is not None:
            update["target_branch"] = desired.target_branch
        return obj.model_copy(update=update)

    def new_object(self, ref: Any, desired: PullRequestInfo) -> GitLabMergeRequest:
        return self.apply_desired(desired, GitLabMergeRequest())

    def ref_of(self, obj: GitLabMergeRequest, parent: Any) -> int:
        return obj.iid

    def validate_desired(self, desired: PullRequestInfo) -> None:
        pass


class GitLabGroupMapper:
    def __init__(self, domain: str) -> None:
        self.domain = domain

    def to_desired(self, obj: GitLabGroup) -> OrganizationInfo:
        return OrganizationInfo(name=obj.name, description=obj.description)

    def ref_of(self, obj: GitLabGroup, parent: Any) -> OrganizationRef:
        return organization_ref_from_path(self.domain, obj.full_path)

    def validate_desired(self, desired: OrganizationInfo) -> None:
        pass


class GitLabSubgroupTeamMapper:
    """Teams are the direct subgroups of a group."""

    def to_desired(self, obj: GitLabGroup) -> TeamInfo:
        return TeamInfo(name=obj.path, members=obj.members)

    def ref_of(self, obj: GitLabGroup, parent: Any) -> str:
        return obj.path

    def validate_desired(self, desired: TeamInfo) -> None:
        pass

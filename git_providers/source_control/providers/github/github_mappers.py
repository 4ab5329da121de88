# git_providers/source_control/providers/github/github_mappers.py

"""Conversions between GitHub server objects and desired-state models."""

from typing import Any

from ...models import (
    BranchInfo,
    CommitInfo,
    DeployKeyInfo,
    OrganizationInfo,
    PullRequestInfo,
    RepositoryCreateOptions,
    RepositoryInfo,
    RepositoryVisibility,
    TeamAccessInfo,
    TeamInfo,
)
from ...refs import OrganizationRef, OrgRepositoryRef, UserRef, UserRepositoryRef
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


def _visibility_fields(visibility: RepositoryVisibility) -> dict[str, Any]:
    return {
        "visibility": visibility.value,
        "private": visibility is not RepositoryVisibility.PUBLIC,
    }


class GitHubRepositoryMapper:
    def to_desired(self, obj: GitHubRepository) -> RepositoryInfo:
        if obj.visibility:
            visibility = RepositoryVisibility(obj.visibility)
        else:
            visibility = (
                RepositoryVisibility.PRIVATE if obj.private else RepositoryVisibility.PUBLIC
            )
        return RepositoryInfo(
            description=obj.description or "",
            default_branch=obj.default_branch,
            visibility=visibility,
        )

    def apply_desired(self, desired: RepositoryInfo, obj: GitHubRepository) -> GitHubRepository:
        update: dict[str, Any] = {}
        if desired.description is not None:
            update["description"] = desired.description
        if desired.default_branch is not None:
            update["default_branch"] = desired.default_branch
        if desired.visibility is not None:
            update.update(_visibility_fields(desired.visibility))
        return obj.model_copy(update=update)

    def new_object(self, ref: Any, desired: RepositoryInfo) -> GitHubRepository:
        return self.apply_desired(desired, GitHubRepository(name=ref.repository_name))

    def apply_create_options(
        self, obj: GitHubRepository, options: RepositoryCreateOptions
    ) -> GitHubRepository:
        return obj.model_copy(
            update={"auto_init": options.auto_init, "license_template": options.license_template}
        )

    def ref_of(self, obj: GitHubRepository, parent: Any) -> Any:
        if isinstance(parent, OrganizationRef):
            return OrgRepositoryRef(parent, obj.name)
        if isinstance(parent, UserRef):
            return UserRepositoryRef(parent, obj.name)
        raise TypeError(f"Unexpected repository parent {parent!r}")

    def validate_desired(self, desired: RepositoryInfo) -> None:
        pass


class GitHubDeployKeyMapper:
    def to_desired(self, obj: GitHubDeployKey) -> DeployKeyInfo:
        return DeployKeyInfo(name=obj.title, key=obj.key, read_only=obj.read_only)

    def apply_desired(self, desired: DeployKeyInfo, obj: GitHubDeployKey) -> GitHubDeployKey:
        update: dict[str, Any] = {}
        if desired.name is not None:
            update["title"] = desired.name
        if desired.key is not None:
            update["key"] = desired.key
        if desired.read_only is not None:
            update["read_only"] = desired.read_only
        return obj.model_copy(update=update)

    def new_object(self, ref: Any, desired: DeployKeyInfo) -> GitHubDeployKey:
        return self.apply_desired(desired, GitHubDeployKey(title=ref))

    def ref_of(self, obj: GitHubDeployKey, parent: Any) -> str:
        return obj.title

    def validate_desired(self, desired: DeployKeyInfo) -> None:
        pass


class GitHubTeamAccessMapper:
    def to_desired(self, obj: GitHubTeamAccess) -> TeamAccessInfo:
        return TeamAccessInfo(name=obj.slug, permission=obj.permission)

    def apply_desired(self, desired: TeamAccessInfo, obj: GitHubTeamAccess) -> GitHubTeamAccess:
        update: dict[str, Any] = {}
        if desired.name is not None:
            update["slug"] = desired.name
        if desired.permission is not None:
            update["permission"] = desired.permission.value
        return obj.model_copy(update=update)

    def new_object(self, ref: Any, desired: TeamAccessInfo) -> GitHubTeamAccess:
        return self.apply_desired(desired, GitHubTeamAccess(slug=ref))

    def ref_of(self, obj: GitHubTeamAccess, parent: Any) -> str:
        return obj.slug

    def validate_desired(self, desired: TeamAccessInfo) -> None:
        pass


class GitHubBranchMapper:
    def to_desired(self, obj: GitHubBranch) -> BranchInfo:
        return BranchInfo(name=obj.name, sha=obj.sha, protected=obj.protected)

    def apply_desired(self, desired: BranchInfo, obj: GitHubBranch) -> GitHubBranch:
        update = {
            name: value
            for name, value in (("name", desired.name), ("sha", desired.sha))
            if value is not None
        }
        return obj.model_copy(update=update)

    def new_object(self, ref: Any, desired: BranchInfo) -> GitHubBranch:
        return GitHubBranch(name=ref, sha=desired.sha)

    def ref_of(self, obj: GitHubBranch, parent: Any) -> str:
        return obj.name

    def validate_desired(self, desired: BranchInfo) -> None:
        pass


class GitHubCommitMapper:
    def to_desired(self, obj: GitHubCommit) -> CommitInfo:
        return CommitInfo(
            sha=obj.sha,
            tree_sha=obj.tree_sha,
            author=obj.author,
            message=obj.message,
            created_at=obj.created_at,
            url=obj.html_url,
        )


class GitHubPullRequestMapper:
    def to_desired(self, obj: GitHubPullRequest) -> PullRequestInfo:
        return PullRequestInfo(
            title=obj.title,
            description=obj.body or "",
            source_branch=obj.head_ref,
            target_branch=obj.base_ref,
            number=obj.number,
            merged=obj.merged,
            web_url=obj.html_url,
        )

    def apply_desired(self, desired: PullRequestInfo, obj: GitHubPullRequest) -> GitHubPullRequest:
        update: dict[str, Any] = {}
        if desired.title is not None:
            update["title"] = desired.title
        if desired.description is not None:
            update["body"] = desired.description
        if desired.source_branch is not None:
            update["head_ref"] = desired.source_branch
        if desired.target_branch is not None:
            update["base_ref"] = desired.target_branch
        return obj.model_copy(update=update)

    def new_object(self, ref: Any, desired: PullRequestInfo) -> GitHubPullRequest:
        return self.apply_desired(desired, GitHubPullRequest())

    def ref_of(self, obj: GitHubPullRequest, parent: Any) -> int:
        return obj.number

    def validate_desired(self, desired: PullRequestInfo) -> None:
        pass


class GitHubOrganizationMapper:
    def __init__(self, domain: str) -> None:
        self.domain = domain

    def to_desired(self, obj: GitHubOrganization) -> OrganizationInfo:
        return OrganizationInfo(name=obj.name or obj.login, description=obj.description)

    def ref_of(self, obj: GitHubOrganization, parent: Any) -> OrganizationRef:
        return OrganizationRef(self.domain, obj.login)

    def validate_desired(self, desired: OrganizationInfo) -> None:
        pass


class GitHubTeamMapper:
    def to_desired(self, obj: GitHubTeam) -> TeamInfo:
        return TeamInfo(name=obj.slug, members=obj.members)

    def ref_of(self, obj: GitHubTeam, parent: Any) -> str:
        return obj.slug

    def validate_desired(self, desired: TeamInfo) -> None:
        pass

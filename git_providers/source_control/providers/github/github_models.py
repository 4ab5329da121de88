# git_providers/source_control/providers/github/github_models.py

"""GitHub server objects, decoded from PyGithub objects."""

from datetime import datetime
from typing import Any

from ...api import APIObject


class GitHubRepository(APIObject):
    """A GitHub repository as returned by the REST API."""

    required_fields = ("id", "name", "full_name")

    id: int | None = None
    name: str | None = None
    full_name: str | None = None
    description: str | None = None
    default_branch: str | None = None
    private: bool | None = None
    visibility: str | None = None
    html_url: str | None = None
    clone_url: str | None = None
    ssh_url: str | None = None
    created_at: datetime | None = None

    # create-only request fields, never set from a response
    auto_init: bool | None = None
    license_template: str | None = None

    @classmethod
    def from_sdk(cls, repo: Any) -> "GitHubRepository":
        return cls(
            id=repo.id,
            name=repo.name,
            full_name=repo.full_name,
            description=repo.description,
            default_branch=repo.default_branch,
            private=repo.private,
            visibility=getattr(repo, "visibility", None),
            html_url=repo.html_url,
            clone_url=repo.clone_url,
            ssh_url=repo.ssh_url,
            created_at=repo.created_at,
        )


class GitHubDeployKey(APIObject):
    required_fields = ("id", "title", "key")

    id: int | None = None
    title: str | None = None
    key: str | None = None
    read_only: bool | None = None
    url: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_sdk(cls, key: Any) -> "GitHubDeployKey":
        return cls(
            id=key.id,
            title=key.title,
            key=key.key,
            read_only=key.read_only,
            url=key.url,
            created_at=getattr(key, "created_at", None),
        )


class GitHubTeamAccess(APIObject):
    """A team's permission on a repository (``GET /repos/{repo}/teams``)."""

    required_fields = ("slug", "permission")

    id: int | None = None
    name: str | None = None
    slug: str | None = None
    permission: str | None = None

    @classmethod
    def from_sdk(cls, team: Any) -> "GitHubTeamAccess":
        return cls(id=team.id, name=team.name, slug=team.slug, permission=team.permission)


class GitHubBranch(APIObject):
    required_fields = ("name", "sha")

    name: str | None = None
    sha: str | None = None
    protected: bool | None = None

    @classmethod
    def from_sdk(cls, branch: Any) -> "GitHubBranch":
        return cls(name=branch.name, sha=branch.commit.sha, protected=branch.protected)


class GitHubCommit(APIObject):
    required_fields = ("sha",)

    sha: str | None = None
    tree_sha: str | None = None
    author: str | None = None
    message: str | None = None
    created_at: datetime | None = None
    html_url: str | None = None

    @classmethod
    def from_sdk(cls, commit: Any) -> "GitHubCommit":
        """Decode a ``Commit`` (history) object."""
        git_commit = commit.commit
        return cls(
            sha=commit.sha,
            tree_sha=git_commit.tree.sha,
            author=git_commit.author.name if git_commit.author else None,
            message=git_commit.message,
            created_at=git_commit.author.date if git_commit.author else None,
            html_url=commit.html_url,
        )

    @classmethod
    def from_git_commit(cls, git_commit: Any) -> "GitHubCommit":
        """Decode a ``GitCommit`` returned by the git data API."""
        return cls(
            sha=git_commit.sha,
            tree_sha=git_commit.tree.sha,
            author=git_commit.author.name if git_commit.author else None,
            message=git_commit.message,
            created_at=git_commit.author.date if git_commit.author else None,
            html_url=git_commit.html_url,
        )


class GitHubPullRequest(APIObject):
    required_fields = ("number", "title", "head_ref", "base_ref")

    number: int | None = None
    title: str | None = None
    body: str | None = None
    head_ref: str | None = None
    base_ref: str | None = None
    state: str | None = None
    merged: bool | None = None
    html_url: str | None = None

    @classmethod
    def from_sdk(cls, pull: Any) -> "GitHubPullRequest":
        return cls(
            number=pull.number,
            title=pull.title,
            body=pull.body,
            head_ref=pull.head.ref,
            base_ref=pull.base.ref,
            state=pull.state,
            merged=pull.merged,
            html_url=pull.html_url,
        )


class GitHubOrganization(APIObject):
    required_fields = ("login",)

    id: int | None = None
    login: str | None = None
    name: str | None = None
    description: str | None = None

    @classmethod
    def from_sdk(cls, org: Any) -> "GitHubOrganization":
        return cls(id=org.id, login=org.login, name=org.name, description=org.description)


class GitHubTeam(APIObject):
    required_fields = ("slug",)

    id: int | None = None
    name: str | None = None
    slug: str | None = None
    members: list[str] | None = None

    @classmethod
    def from_sdk(cls, team: Any, members: list[str] | None = None) -> "GitHubTeam":
        return cls(id=team.id, name=team.name, slug=team.slug, members=members)

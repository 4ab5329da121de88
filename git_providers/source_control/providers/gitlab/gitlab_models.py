# git_providers/source_control/providers/gitlab/gitlab_models.py

"""GitLab server objects, decoded from python-gitlab ``attributes`` dicts."""

from datetime import datetime
from typing import Any

from pydantic import Field

from ...api import APIObject


class GitLabProject(APIObject):
    """A GitLab project."""

    required_fields = ("id", "path", "path_with_namespace")

    id: int | None = None
    name: str | None = None
    path: str | None = None
    path_with_namespace: str | None = None
    description: str | None = None
    default_branch: str | None = None
    visibility: str | None = None
    web_url: str | None = None
    http_url_to_repo: str | None = None
    ssh_url_to_repo: str | None = None
    created_at: datetime | None = None
    namespace: dict[str, Any] | None = None

    # create-only request field
    initialize_with_readme: bool | None = None


class GitLabDeployKey(APIObject):
    required_fields = ("id", "title", "key")

    id: int | None = None
    title: str | None = None
    key: str | None = None
    can_push: bool | None = None
    created_at: datetime | None = None


class GitLabSharedGroup(APIObject):
    """An entry of a project's ``shared_with_groups``."""

    required_fields = ("group_id", "group_full_path", "group_access_level")

    group_id: int | None = None
    group_name: str | None = None
    group_full_path: str | None = None
    group_access_level: int | None = None


class GitLabBranch(APIObject):
    required_fields = ("name", "commit.id")

    name: str | None = None
    commit: dict[str, Any] | None = None
    protected: bool | None = None
    web_url: str | None = None

    @property
    def sha(self) -> str | None:
        return (self.commit or {}).get("id")


class GitLabCommit(APIObject):
    required_fields = ("id",)

    id: str | None = None
    title: str | None = None
    message: str | None = None
    author_name: str | None = None
    created_at: datetime | None = None
    web_url: str | None = None
    tree_id: str | None = Field(default=None, description="Not returned by the list endpoint")


class GitLabMergeRequest(APIObject):
    required_fields = ("iid", "title", "source_branch", "target_branch")

    iid: int | None = None
    title: str | None = None
    description: str | None = None
    source_branch: str | None = None
    target_branch: str | None = None
    state: str | None = None
    web_url: str | None = None


class GitLabGroup(APIObject):
    required_fields = ("id", "full_path")

    id: int | None = None
    name: str | None = None
    path: str | None = None
    full_path: str | None = None
    description: str | None = None
    members: list[str] | None = None


def decode(model: type[APIObject], sdk_object: Any) -> Any:
    """Decode a python-gitlab RESTObject (or a plain dict)."""
    attributes = sdk_object if isinstance(sdk_object, dict) else sdk_object.attributes
    return model.from_api(attributes)

# git_providers/source_control/providers/stash/stash_models.py

"""Bitbucket Server server objects, decoded from REST JSON."""

from datetime import datetime, timezone
from typing import Any

from pydantic import Field

from ...api import APIObject


class StashRepository(APIObject):
    required_fields = ("id", "slug", "name", "project.key")

    id: int | None = None
    slug: str | None = None
    name: str | None = None
    description: str | None = None
    public: bool | None = None
    scm_id: str | None = Field(default=None, alias="scmId")
    project: dict[str, Any] | None = None
    links: dict[str, Any] | None = None
    # filled from the default branch endpoint, not part of the repository body
    default_branch: str | None = Field(default=None, exclude=True)


class StashDeployKey(APIObject):
    """An access key entry (``rest/keys/1.0``)."""

    required_fields = ("key.id", "key.label", "key.text", "permission")

    key: dict[str, Any] | None = None
    permission: str | None = None

    @property
    def label(self) -> str | None:
        return (self.key or {}).get("label")

    @property
    def text(self) -> str | None:
        return (self.key or {}).get("text")


class StashGroupPermission(APIObject):
    """A group's permission on a repository or project."""

    required_fields = ("group.name", "permission")

    group: dict[str, Any] | None = None
    permission: str | None = None

    @property
    def name(self) -> str | None:
        return (self.group or {}).get("name")


class StashBranch(APIObject):
    required_fields = ("id", "display_id", "latest_commit")

    id: str | None = None
    display_id: str | None = Field(default=None, alias="displayId")
    latest_commit: str | None = Field(default=None, alias="latestCommit")
    is_default: bool | None = Field(default=None, alias="isDefault")


class StashCommit(APIObject):
    required_fields = ("id",)

    id: str | None = None
    display_id: str | None = Field(default=None, alias="displayId")
    author: dict[str, Any] | None = None
    message: str | None = None
    author_timestamp: int | None = Field(default=None, alias="authorTimestamp")

    @property
    def sha(self) -> str | None:
        return self.id

    @property
    def created_at(self) -> datetime | None:
        if self.author_timestamp is None:
            return None
        return datetime.fromtimestamp(self.author_timestamp / 1000, tz=timezone.utc)


class StashPullRequest(APIObject):
    required_fields = ("id", "version", "title", "from_ref.displayId", "to_ref.displayId")

    id: int | None = None
    version: int | None = None
    title: str | None = None
    description: str | None = None
    state: str | None = None
    from_ref: dict[str, Any] | None = Field(default=None, alias="fromRef")
    to_ref: dict[str, Any] | None = Field(default=None, alias="toRef")
    links: dict[str, Any] | None = None

    @property
    def web_url(self) -> str | None:
        for link in (self.links or {}).get("self", []):
            return link.get("href")
        return None


class StashProject(APIObject):
    required_fields = ("id", "key")

    id: int | None = None
    key: str | None = None
    name: str | None = None
    description: str | None = None


class StashGroup(APIObject):
    required_fields = ("name",)

    name: str | None = None
    permission: str | None = None
    members: list[str] | None = None

# git_providers/source_control/models.py

"""Provider-neutral desired-state models.

Every field is optional: ``None`` means "don't care". Only the fields a
caller sets take part in comparison and update, see ``desired_matches``.
"""

from dataclasses import dataclass, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any, TypeVar

from ..core.exceptions import InvalidArgumentError


class RepositoryVisibility(str, Enum):
    """Who can see a repository."""

    PUBLIC = "public"
    PRIVATE = "private"
    INTERNAL = "internal"


class RepositoryPermission(str, Enum):
    """Access level a team has on a repository, weakest first."""

    PULL = "pull"
    TRIAGE = "triage"
    PUSH = "push"
    MAINTAIN = "maintain"
    ADMIN = "admin"


class MergeMethod(str, Enum):
    """How a pull request is merged."""

    MERGE = "merge"
    SQUASH = "squash"
    REBASE = "rebase"


class TransportType(str, Enum):
    HTTPS = "https"
    SSH = "ssh"


def _coerce_enum(info: Any, name: str, enum_cls: type[Enum]) -> None:
    value = getattr(info, name)
    if value is None or isinstance(value, enum_cls):
        return
    try:
        setattr(info, name, enum_cls(value))
    except ValueError as e:
        allowed = ", ".join(member.value for member in enum_cls)
        raise InvalidArgumentError(
            f"Invalid {name} {value!r}; expected one of: {allowed}", original_error=e
        ) from e


@dataclass
class RepositoryInfo:
    """Desired or observed state of a repository."""

    description: str | None = None
    default_branch: str | None = None
    visibility: RepositoryVisibility | None = None

    def __post_init__(self) -> None:
        _coerce_enum(self, "visibility", RepositoryVisibility)

    def validate_info(self) -> None:
        if self.default_branch is not None and not self.default_branch.strip():
            raise InvalidArgumentError("default_branch cannot be blank")

    def default(self) -> "RepositoryInfo":
        return replace(
            self,
            visibility=self.visibility or RepositoryVisibility.PRIVATE,
        )


@dataclass
class RepositoryCreateOptions:
    """Options that only apply when a repository is created."""

    auto_init: bool | None = None
    license_template: str | None = None

    def validate_info(self) -> None:
        if self.license_template is not None and not self.license_template.strip():
            raise InvalidArgumentError("license_template cannot be blank")


@dataclass
class DeployKeyInfo:
    """A deploy key attached to a repository, addressed by ``name``."""

    name: str | None = None
    key: str | None = None
    read_only: bool | None = None

    def validate_info(self) -> None:
        if not self.name:
            raise InvalidArgumentError("Deploy key name is required")
        if not self.key:
            raise InvalidArgumentError("Deploy key content is required")

    def default(self) -> "DeployKeyInfo":
        return replace(self, read_only=True if self.read_only is None else self.read_only)


@dataclass
class TeamAccessInfo:
    """Permission a team holds on a repository, addressed by ``name``."""

    name: str | None = None
    permission: RepositoryPermission | None = None

    def __post_init__(self) -> None:
        _coerce_enum(self, "permission", RepositoryPermission)

    def validate_info(self) -> None:
        if not self.name:
            raise InvalidArgumentError("Team name is required")

    def default(self) -> "TeamAccessInfo":
        return replace(
            self, permission=self.permission or RepositoryPermission.PULL
        )


@dataclass
class BranchInfo:
    name: str | None = None
    sha: str | None = None
    protected: bool | None = None

    def validate_info(self) -> None:
        if not self.name:
            raise InvalidArgumentError("Branch name is required")
        if not self.sha:
            raise InvalidArgumentError("Branch sha is required")


@dataclass
class CommitInfo:
    sha: str | None = None
    tree_sha: str | None = None
    author: str | None = None
    message: str | None = None
    created_at: datetime | None = None
    url: str | None = None


@dataclass
class CommitFile:
    """A file change in a commit; ``content=None`` deletes the path."""

    path: str
    content: str | None = None


@dataclass
class PullRequestInfo:
    title: str | None = None
    description: str | None = None
    source_branch: str | None = None
    target_branch: str | None = None
    number: int | None = None
    merged: bool | None = None
    web_url: str | None = None

    def validate_info(self) -> None:
        if not self.title:
            raise InvalidArgumentError("Pull request title is required")
        if not self.source_branch or not self.target_branch:
            raise InvalidArgumentError("Pull request source and target branches are required")


@dataclass
class OrganizationInfo:
    name: str | None = None
    description: str | None = None


@dataclass
class TeamInfo:
    name: str | None = None
    members: list[str] | None = None


InfoT = TypeVar("InfoT")


def set_fields(info: Any) -> dict[str, Any]:
    """Fields of a desired info that the caller actually set."""
    return {f.name: getattr(info, f.name) for f in fields(info) if getattr(info, f.name) is not None}


def desired_matches(desired: Any, actual: Any) -> bool:
    """True when every non-None field of ``desired`` equals ``actual``'s."""
    return all(
        getattr(actual, name) == value for name, value in set_fields(desired).items()
    )


def validate_desired(info: Any) -> None:
    validate = getattr(info, "validate_info", None)
    if validate is not None:
        validate()


def with_defaults(info: InfoT) -> InfoT:
    default = getattr(info, "default", None)
    return default() if default is not None else info

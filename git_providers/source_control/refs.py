# git_providers/source_control/refs.py

"""
Immutable references to resources on a Git host.

A ref says *where* a resource lives (domain, owner path, name); it never
carries state. Refs are hashable so they can be used as dict keys.
"""

from dataclasses import dataclass, field
from typing import Union
from urllib.parse import urlparse

from ..core.exceptions import InvalidArgumentError


def _require(value: str, what: str) -> None:
    if not value or not value.strip():
        raise InvalidArgumentError(f"{what} cannot be empty")
    if "/" in value:
        raise InvalidArgumentError(f"{what} cannot contain '/': {value!r}")


@dataclass(frozen=True)
class UserRef:
    """A user account on a Git host."""

    domain: str
    user_login: str

    def __post_init__(self) -> None:
        _require(self.domain, "Domain")
        _require(self.user_login, "User login")

    @property
    def identity(self) -> str:
        return self.user_login

    @property
    def url(self) -> str:
        return f"https://{self.domain}/{self.user_login}"

    def __str__(self) -> str:
        return self.url


@dataclass(frozen=True)
class OrganizationRef:
    """An organization (GitHub), group (GitLab) or project (Stash).

    ``sub_organizations`` addresses nested GitLab subgroups.
    """

    domain: str
    organization: str
    sub_organizations: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _require(self.domain, "Domain")
        _require(self.organization, "Organization")
        # accept lists from callers while keeping the ref hashable
        object.__setattr__(self, "sub_organizations", tuple(self.sub_organizations))
        for sub in self.sub_organizations:
            _require(sub, "Sub-organization")

    @property
    def identity(self) -> str:
        return "/".join((self.organization, *self.sub_organizations))

    @property
    def url(self) -> str:
        return f"https://{self.domain}/{self.identity}"

    def __str__(self) -> str:
        return self.url


class _RepositoryRefMixin:
    """Accessors shared by user and organization repository refs."""

    owner: Union[UserRef, OrganizationRef]
    repository_name: str

    @property
    def domain(self) -> str:
        return self.owner.domain

    @property
    def identity(self) -> str:
        """Identity of the owner (login or organization path)."""
        return self.owner.identity

    @property
    def slug(self) -> str:
        return self.repository_name.lower()

    @property
    def full_name(self) -> str:
        return f"{self.owner.identity}/{self.repository_name}"

    @property
    def url(self) -> str:
        return f"https://{self.domain}/{self.full_name}"

    def clone_url(self, transport: str = "https") -> str:
        if transport == "https":
            return f"{self.url}.git"
        if transport == "ssh":
            return f"git@{self.domain}:{self.full_name}.git"
        raise InvalidArgumentError(f"Unknown clone transport: {transport!r}")

    def __str__(self) -> str:
        return self.url


@dataclass(frozen=True)
class UserRepositoryRef(_RepositoryRefMixin):
    """A repository owned by a user."""

    owner: UserRef
    repository_name: str

    def __post_init__(self) -> None:
        _require(self.repository_name, "Repository name")


@dataclass(frozen=True)
class OrgRepositoryRef(_RepositoryRefMixin):
    """A repository owned by an organization."""

    owner: OrganizationRef
    repository_name: str

    def __post_init__(self) -> None:
        _require(self.repository_name, "Repository name")


RepositoryRef = Union[UserRepositoryRef, OrgRepositoryRef]


def _split_url(url: str) -> tuple[str, list[str]]:
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidArgumentError(f"Not an http(s) URL: {url!r}")
    path = parsed.path.strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    parts = [part for part in path.split("/") if part]
    return parsed.netloc.lower(), parts


def parse_user_url(url: str) -> UserRef:
    domain, parts = _split_url(url)
    if len(parts) != 1:
        raise InvalidArgumentError(f"Expected https://<domain>/<user>, got {url!r}")
    return UserRef(domain, parts[0])


def parse_organization_url(url: str) -> OrganizationRef:
    domain, parts = _split_url(url)
    if not parts:
        raise InvalidArgumentError(f"Expected https://<domain>/<org>, got {url!r}")
    return OrganizationRef(domain, parts[0], tuple(parts[1:]))


def parse_user_repository_url(url: str) -> UserRepositoryRef:
    domain, parts = _split_url(url)
    if len(parts) != 2:
        raise InvalidArgumentError(
            f"Expected https://<domain>/<user>/<repository>, got {url!r}"
        )
    return UserRepositoryRef(UserRef(domain, parts[0]), parts[1])


def parse_org_repository_url(url: str) -> OrgRepositoryRef:
    domain, parts = _split_url(url)
    if len(parts) < 2:
        raise InvalidArgumentError(
            f"Expected https://<domain>/<org>[/<subgroup>...]/<repository>, got {url!r}"
        )
    org = OrganizationRef(domain, parts[0], tuple(parts[1:-1]))
    return OrgRepositoryRef(org, parts[-1])

# git_providers/config/providers.py

"""
Provider client configuration models for the supported Git hosts.
"""

import re
from typing import Annotated, Literal
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .base import BaseConfig

_DOMAIN_RE = re.compile(r"^[a-zA-Z0-9.-]+(:[0-9]+)?$")


class ProviderConfig(BaseModel):
    """Settings shared by every provider client."""

    model_config = ConfigDict(extra="forbid")

    type: str = Field(..., description="Provider type (github, gitlab, stash)")
    domain: str = Field(..., description="Host the provider serves, e.g. 'github.com'")
    api_base_url: str | None = Field(
        default=None, description="REST API base URL; derived from the domain if unset"
    )
    token: str | None = Field(default=None, description="Personal access token")
    per_page: int = Field(default=100, ge=1, le=1000, description="Page size for lists")
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    destructive_actions: bool = Field(
        default=False, description="Allow delete operations"
    )

    @field_validator("domain")
    @classmethod
    def validate_domain(cls, v: str) -> str:
        v = v.strip().lower()
        if v.startswith(("https://", "http://")):
            v = urlparse(v).netloc
        v = v.rstrip("/")
        if not v or not _DOMAIN_RE.match(v):
            raise ValueError(f"Invalid provider domain: {v!r}")
        return v

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip().rstrip("/")
        if not v.startswith(("https://", "http://")):
            raise ValueError("API base URL must start with http:// or https://")
        return v

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Token cannot be blank")
        return v.strip() if v else v

    @property
    def base_url(self) -> str:
        """Web URL of the host, used to build clone and web URLs."""
        return f"https://{self.domain}"

    def resolved_api_base_url(self) -> str:
        return self.api_base_url or self.base_url


class GitHubProviderConfig(ProviderConfig):
    """GitHub (github.com or GitHub Enterprise) client configuration."""

    type: Literal["github"] = "github"
    domain: str = "github.com"

    def resolved_api_base_url(self) -> str:
        if self.api_base_url:
            return self.api_base_url
        if self.domain == "github.com":
            return "https://api.github.com"
        return f"https://{self.domain}/api/v3"


class GitLabProviderConfig(ProviderConfig):
    """GitLab (gitlab.com or self-managed) client configuration."""

    type: Literal["gitlab"] = "gitlab"
    domain: str = "gitlab.com"


class StashProviderConfig(ProviderConfig):
    """Bitbucket Server client configuration."""

    type: Literal["stash"] = "stash"
    username: str | None = Field(
        default=None,
        description="User for basic auth; bearer token auth is used when unset",
    )

    @model_validator(mode="after")
    def validate_credentials(self) -> "StashProviderConfig":
        if self.username and not self.token:
            raise ValueError("A token is required when a username is configured")
        return self


AnyProviderConfig = Annotated[
    GitHubProviderConfig | GitLabProviderConfig | StashProviderConfig,
    Field(discriminator="type"),
]


class GitProvidersConfig(BaseConfig):
    """Top-level configuration file: logging settings plus one provider."""

    provider: AnyProviderConfig

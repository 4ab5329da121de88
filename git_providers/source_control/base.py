# git_providers/source_control/base.py

"""
Abstract base class for Git provider clients with async context manager support.
"""

from abc import ABC, abstractmethod
import logging
from typing import Any

from ..config.providers import ProviderConfig
from ..core.exceptions import DomainUnsupportedError
from .api import Binding
from .clients import OrganizationsClient, OrgRepositoriesClient, UserRepositoriesClient


class GitProvider(ABC):
    """One authenticated client for one Git host.

    Subclasses set up the SDK (or HTTP) client and choose, per resource
    kind, the API and mapper the facades use. The facades themselves are
    provider-neutral.
    """

    provider_id: str = "unknown"

    def __init__(self, config: ProviderConfig) -> None:
        """Initialize with configuration."""
        self.config = config
        self._initialized = False
        self.logger = logging.getLogger(self.__class__.__name__)
        self._organizations: OrganizationsClient | None = None
        self._org_repositories: OrgRepositoriesClient | None = None
        self._user_repositories: UserRepositoriesClient | None = None

    @property
    def supported_domain(self) -> str:
        return self.config.domain

    @property
    def destructive_actions(self) -> bool:
        return self.config.destructive_actions

    def check_domain(self, ref: Any) -> None:
        """Reject refs that point at a different host."""
        domain = getattr(ref, "domain", None)
        if domain is not None and domain.lower() != self.supported_domain:
            raise DomainUnsupportedError(
                f"{self.provider_id} client for {self.supported_domain} "
                f"cannot serve {domain}"
            )

    # Lifecycle

    async def __aenter__(self) -> "GitProvider":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.cleanup()

    async def initialize(self) -> None:
        """Initialize the provider."""
        if not self._initialized:
            await self._setup_client()
            self._initialized = True
            self.logger.debug(f"{self.provider_id} client ready for {self.supported_domain}")

    async def cleanup(self) -> None:
        """Clean up resources."""
        if self._initialized:
            await self._teardown_client()
            self._initialized = False
            self._organizations = None
            self._org_repositories = None
            self._user_repositories = None

    @abstractmethod
    async def _setup_client(self) -> None:
        """Set up the provider-specific client."""

    @abstractmethod
    async def _teardown_client(self) -> None:
        """Clean up the provider-specific client."""

    @abstractmethod
    def raw(self) -> Any:
        """The underlying SDK or HTTP client, for calls this library does not wrap."""

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError(
                f"{self.__class__.__name__} is not initialized; use 'async with' or initialize()"
            )

    # Facades

    @property
    def organizations(self) -> OrganizationsClient:
        self._require_initialized()
        if self._organizations is None:
            self._organizations = OrganizationsClient(self)
        return self._organizations

    @property
    def org_repositories(self) -> OrgRepositoriesClient:
        self._require_initialized()
        if self._org_repositories is None:
            self._org_repositories = OrgRepositoriesClient(self)
        return self._org_repositories

    @property
    def user_repositories(self) -> UserRepositoriesClient:
        self._require_initialized()
        if self._user_repositories is None:
            self._user_repositories = UserRepositoriesClient(self)
        return self._user_repositories

    # Per-kind bindings

    @abstractmethod
    def repository_binding(self) -> Binding:
        """API and mapper for repositories; refs are user or org repository refs."""

    @abstractmethod
    def deploy_key_binding(self, repository_ref: Any) -> Binding: ...

    @abstractmethod
    def team_access_binding(self, repository_ref: Any) -> Binding: ...

    @abstractmethod
    def branch_binding(self, repository_ref: Any) -> Binding: ...

    @abstractmethod
    def commit_binding(self, repository_ref: Any) -> Binding:
        """The API exposes ``list_page`` and ``create_commit``."""

    @abstractmethod
    def pull_request_binding(self, repository_ref: Any) -> Binding:
        """The API additionally exposes ``merge``."""

    @abstractmethod
    def organization_binding(self) -> Binding:
        """The API additionally exposes ``fetch_children_page``."""

    @abstractmethod
    def team_binding(self, organization_ref: Any) -> Binding:
        """The API additionally exposes ``has_member``."""

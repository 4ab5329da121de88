# git_providers/source_control/providers/stash/stash_provider.py

"""
Bitbucket Server (formerly Stash) provider implementation.

There is no maintained Python SDK for the REST API, so the backend talks to
it through httpx. Projects are organizations, personal projects (``~login``)
hold user repositories and the groups granted access to a project are its
teams.
"""

from typing import Any

import httpx

from ....config.providers import StashProviderConfig
from ...api import Binding
from ...base import GitProvider
from ...refs import OrganizationRef
from .stash_api import (
    StashBranchAPI,
    StashCommitAPI,
    StashDeployKeyAPI,
    StashGroupAPI,
    StashProjectAPI,
    StashPullRequestAPI,
    StashRepositoryAPI,
    StashTeamAccessAPI,
)
from .stash_client import StashClient
from .stash_mappers import (
    StashBranchMapper,
    StashCommitMapper,
    StashDeployKeyMapper,
    StashGroupMapper,
    StashProjectMapper,
    StashPullRequestMapper,
    StashRepositoryMapper,
    StashTeamAccessMapper,
)


class StashProvider(GitProvider):
    """Bitbucket Server client."""

    provider_id = "stash"

    def __init__(
        self,
        config: StashProviderConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize with configuration.

        Args:
            config: Provider configuration.
            transport: Optional httpx transport, e.g. ``httpx.MockTransport``.
        """
        super().__init__(config)
        self.transport = transport
        self.client: StashClient | None = None

    async def _setup_client(self) -> None:
        """Set up the HTTP client."""
        try:
            self.client = StashClient(
                self.config.resolved_api_base_url(),
                token=self.config.token,
                username=self.config.username,
                timeout=self.config.timeout,
                transport=self.transport,
            )
        except Exception as e:
            self.logger.error(f"Failed to setup Bitbucket Server client: {e}")
            raise

    async def _teardown_client(self) -> None:
        if self.client is not None:
            await self.client.aclose()
        self.client = None

    def raw(self) -> httpx.AsyncClient:
        self._require_initialized()
        return self.client.http

    def repository_binding(self) -> Binding:
        return Binding(StashRepositoryAPI(self.client, self.logger), StashRepositoryMapper())

    def deploy_key_binding(self, repository_ref: Any) -> Binding:
        return Binding(
            StashDeployKeyAPI(self.client, repository_ref, self.logger), StashDeployKeyMapper()
        )

    def team_access_binding(self, repository_ref: Any) -> Binding:
        return Binding(
            StashTeamAccessAPI(self.client, repository_ref, self.logger), StashTeamAccessMapper()
        )

    def branch_binding(self, repository_ref: Any) -> Binding:
        return Binding(StashBranchAPI(self.client, repository_ref, self.logger), StashBranchMapper())

    def commit_binding(self, repository_ref: Any) -> Binding:
        return Binding(StashCommitAPI(self.client, repository_ref, self.logger), StashCommitMapper())

    def pull_request_binding(self, repository_ref: Any) -> Binding:
        return Binding(
            StashPullRequestAPI(self.client, repository_ref, self.logger), StashPullRequestMapper()
        )

    def organization_binding(self) -> Binding:
        return Binding(
            StashProjectAPI(self.client, self.logger), StashProjectMapper(self.supported_domain)
        )

    def team_binding(self, organization_ref: OrganizationRef) -> Binding:
        return Binding(StashGroupAPI(self.client, organization_ref, self.logger), StashGroupMapper())

# git_providers/source_control/providers/github/github_provider.py

"""
GitHub provider implementation.

Wires PyGithub into the provider-neutral facades: one API and mapper per
resource kind, chosen here.
"""

from typing import Any

from github import Auth, Github

from ....config.providers import GitHubProviderConfig
from ...api import Binding
from ...base import GitProvider
from ...refs import OrganizationRef
from .github_api import (
    GitHubBranchAPI,
    GitHubCommitAPI,
    GitHubDeployKeyAPI,
    GitHubOrganizationAPI,
    GitHubPullRequestAPI,
    GitHubRepositoryAPI,
    GitHubTeamAccessAPI,
    GitHubTeamAPI,
)
from .github_mappers import (
    GitHubBranchMapper,
    GitHubCommitMapper,
    GitHubDeployKeyMapper,
    GitHubOrganizationMapper,
    GitHubPullRequestMapper,
    GitHubRepositoryMapper,
    GitHubTeamAccessMapper,
    GitHubTeamMapper,
)


class GitHubProvider(GitProvider):
    """GitHub (github.com or Enterprise Server) client."""

    provider_id = "github"

    def __init__(self, config: GitHubProviderConfig, client: Github | None = None) -> None:
        """Initialize with configuration.

        Args:
            config: Provider configuration.
            client: Pre-built PyGithub client; built from ``config`` when omitted.
        """
        super().__init__(config)
        self.client: Github | None = client

    async def _setup_client(self) -> None:
        """Set up the PyGithub client."""
        if self.client is not None:
            return
        try:
            auth = Auth.Token(self.config.token) if self.config.token else None
            self.client = Github(
                auth=auth,
                base_url=self.config.resolved_api_base_url(),
                timeout=int(self.config.timeout),
                per_page=self.config.per_page,
            )
        except Exception as e:
            self.logger.error(f"Failed to setup GitHub client: {e}")
            raise

    async def _teardown_client(self) -> None:
        """Close the PyGithub client."""
        if self.client is not None:
            self.client.close()
        self.client = None

    def raw(self) -> Github:
        self._require_initialized()
        return self.client

    def repository_binding(self) -> Binding:
        return Binding(GitHubRepositoryAPI(self.client, self.logger), GitHubRepositoryMapper())

    def deploy_key_binding(self, repository_ref: Any) -> Binding:
        return Binding(
            GitHubDeployKeyAPI(self.client, repository_ref, self.logger), GitHubDeployKeyMapper()
        )

    def team_access_binding(self, repository_ref: Any) -> Binding:
        return Binding(
            GitHubTeamAccessAPI(self.client, repository_ref, self.logger), GitHubTeamAccessMapper()
        )

    def branch_binding(self, repository_ref: Any) -> Binding:
        return Binding(GitHubBranchAPI(self.client, repository_ref, self.logger), GitHubBranchMapper())

    def commit_binding(self, repository_ref: Any) -> Binding:
        return Binding(GitHubCommitAPI(self.client, repository_ref, self.logger), GitHubCommitMapper())

    def pull_request_binding(self, repository_ref: Any) -> Binding:
        return Binding(
            GitHubPullRequestAPI(self.client, repository_ref, self.logger), GitHubPullRequestMapper()
        )

    def organization_binding(self) -> Binding:
        return Binding(
            GitHubOrganizationAPI(self.client, self.logger),
            GitHubOrganizationMapper(self.supported_domain),
        )

    def team_binding(self, organization_ref: OrganizationRef) -> Binding:
        return Binding(GitHubTeamAPI(self.client, organization_ref, self.logger), GitHubTeamMapper())

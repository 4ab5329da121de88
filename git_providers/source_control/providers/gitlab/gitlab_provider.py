# git_providers/source_control/providers/gitlab/gitlab_provider.py

"""
GitLab provider implementation.

Organizations are groups, sub-organizations are subgroups, teams are the
direct subgroups of a group, and team access is project sharing.
"""

from typing import Any

import gitlab

from ....config.providers import GitLabProviderConfig
from ...api import Binding
from ...base import GitProvider
from ...refs import OrganizationRef
from .gitlab_api import (
    GitLabBranchAPI,
    GitLabCommitAPI,
    GitLabDeployKeyAPI,
    GitLabGroupAPI,
    GitLabMergeRequestAPI,
    GitLabProjectAPI,
    GitLabSubgroupTeamAPI,
    GitLabTeamAccessAPI,
)
from .gitlab_mappers import (
    GitLabBranchMapper,
    GitLabCommitMapper,
    GitLabDeployKeyMapper,
    GitLabGroupMapper,
    GitLabMergeRequestMapper,
    GitLabProjectMapper,
    GitLabSubgroupTeamMapper,
    GitLabTeamAccessMapper,
)


class GitLabProvider(GitProvider):
    """GitLab (gitlab.com or self-managed) client."""

    provider_id = "gitlab"

    def __init__(self, config: GitLabProviderConfig, gl: gitlab.Gitlab | None = None) -> None:
        super().__init__(config)
        self.gl: gitlab.Gitlab | None = gl

    async def _setup_client(self) -> None:
        """Set up the python-gitlab client."""
        if self.gl is not None:
            return
        try:
            self.gl = gitlab.Gitlab(
                self.config.resolved_api_base_url(),
                private_token=self.config.token,
                timeout=self.config.timeout,
                per_page=self.config.per_page,
            )
        except Exception as e:
            self.logger.error(f"Failed to setup GitLab client: {e}")
            raise

    async def _teardown_client(self) -> None:
        if self.gl is not None and self.gl.session is not None:
            self.gl.session.close()
        self.gl = None

    def raw(self) -> gitlab.Gitlab:
        self._require_initialized()
        return self.gl

    def repository_binding(self) -> Binding:
        return Binding(GitLabProjectAPI(self.gl, self.logger), GitLabProjectMapper())

    def deploy_key_binding(self, repository_ref: Any) -> Binding:
        return Binding(GitLabDeployKeyAPI(self.gl, repository_ref, self.logger), GitLabDeployKeyMapper())

    def team_access_binding(self, repository_ref: Any) -> Binding:
        mapper = GitLabTeamAccessMapper(repository_ref.owner.organization)
        return Binding(GitLabTeamAccessAPI(self.gl, repository_ref, mapper, self.logger), mapper)

    def branch_binding(self, repository_ref: Any) -> Binding:
        return Binding(GitLabBranchAPI(self.gl, repository_ref, self.logger), GitLabBranchMapper())

    def commit_binding(self, repository_ref: Any) -> Binding:
        return Binding(GitLabCommitAPI(self.gl, repository_ref, self.logger), GitLabCommitMapper())

    def pull_request_binding(self, repository_ref: Any) -> Binding:
        return Binding(
            GitLabMergeRequestAPI(self.gl, repository_ref, self.logger), GitLabMergeRequestMapper()
        )

    def organization_binding(self) -> Binding:
        return Binding(GitLabGroupAPI(self.gl, self.logger), GitLabGroupMapper(self.supported_domain))

    def team_binding(self, organization_ref: OrganizationRef) -> Binding:
        return Binding(
            GitLabSubgroupTeamAPI(self.gl, organization_ref, self.logger), GitLabSubgroupTeamMapper()
        )

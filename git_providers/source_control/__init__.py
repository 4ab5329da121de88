# git_providers/source_control/__init__.py

"""
Source control package for git_providers.

This package provides one provider-neutral interface (typed references,
desired-state models and client facades) over GitHub, GitLab and Bitbucket
Server. Backends plug in through ``ProviderFactory``.
"""

from .base import GitProvider
from .clients import (
    BranchClient,
    Commit,
    CommitClient,
    DeployKeyClient,
    Organization,
    OrganizationsClient,
    OrgRepositoriesClient,
    OrgRepository,
    PullRequest,
    PullRequestClient,
    Repository,
    Team,
    TeamAccessClient,
    TeamsClient,
    UserRepositoriesClient,
    UserRepository,
)
from .models import (
    BranchInfo,
    CommitFile,
    CommitInfo,
    DeployKeyInfo,
    MergeMethod,
    OrganizationInfo,
    PullRequestInfo,
    RepositoryCreateOptions,
    RepositoryInfo,
    RepositoryPermission,
    RepositoryVisibility,
    TeamAccessInfo,
    TeamInfo,
    TransportType,
)
from .pagination import ListOptions, Page, drain_all
from .provider_factory import ProviderFactory, create_default_factory
from .reconciler import Reconciler, ReconcileResult, ReconcileState
from .refs import (
    OrganizationRef,
    OrgRepositoryRef,
    RepositoryRef,
    UserRef,
    UserRepositoryRef,
    parse_org_repository_url,
    parse_organization_url,
    parse_user_repository_url,
    parse_user_url,
)
from .resources import Resource, ResourceClient
from .utils import execute_with_retry, is_retryable, run_sync, with_provider
from .validation import ValidationResult, validate, validate_api_object, validate_api_objects

__all__ = [
    # Base classes
    "GitProvider",
    "ProviderFactory",
    "create_default_factory",
    # References
    "OrganizationRef",
    "OrgRepositoryRef",
    "RepositoryRef",
    "UserRef",
    "UserRepositoryRef",
    "parse_org_repository_url",
    "parse_organization_url",
    "parse_user_repository_url",
    "parse_user_url",
    # Models
    "BranchInfo",
    "CommitFile",
    "CommitInfo",
    "DeployKeyInfo",
    "MergeMethod",
    "OrganizationInfo",
    "PullRequestInfo",
    "RepositoryCreateOptions",
    "RepositoryInfo",
    "RepositoryPermission",
    "RepositoryVisibility",
    "TeamAccessInfo",
    "TeamInfo",
    "TransportType",
    # Facades
    "BranchClient",
    "Commit",
    "CommitClient",
    "DeployKeyClient",
    "Organization",
    "OrganizationsClient",
    "OrgRepositoriesClient",
    "OrgRepository",
    "PullRequest",
    "PullRequestClient",
    "Repository",
    "Resource",
    "ResourceClient",
    "Team",
    "TeamAccessClient",
    "TeamsClient",
    "UserRepositoriesClient",
    "UserRepository",
    # Core algorithms
    "ListOptions",
    "Page",
    "Reconciler",
    "ReconcileResult",
    "ReconcileState",
    "ValidationResult",
    "drain_all",
    "validate",
    "validate_api_object",
    "validate_api_objects",
    # Utilities
    "execute_with_retry",
    "is_retryable",
    "run_sync",
    "with_provider",
]

# git_providers/source_control/clients.py

"""
Per-kind client facades.

Each facade binds the generic ``ResourceClient`` to the API and mapper the
provider chose for that kind, and narrows the signatures to what makes
sense for the kind (a deploy key is addressed by name within a repository,
a pull request by number, and so on).
"""

from typing import TYPE_CHECKING, Any

from ..core.context import OperationContext, ensure_context
from ..core.exceptions import (
    GitProviderError,
    InvalidArgumentError,
    UnsupportedOperationError,
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
    TeamAccessInfo,
    TeamInfo,
)
from .pagination import ListOptions, drain_all
from .refs import OrganizationRef, OrgRepositoryRef, UserRef, UserRepositoryRef
from .resources import CreateFn, Resource, ResourceClient
from .validation import validate_api_object, validate_api_objects

if TYPE_CHECKING:
    from .base import GitProvider


def _unsupported(what: str, provider: "GitProvider") -> UnsupportedOperationError:
    return UnsupportedOperationError(f"{what} is not supported by {provider.provider_id}")


# Repositories


class Repository(Resource[RepositoryInfo]):
    """A repository with its branch, commit, pull request and deploy key clients."""

    def __init__(self, client: "_RepositoriesClient", ref: Any, api_object: Any) -> None:
        super().__init__(client, ref, api_object)
        provider = client.provider
        self.deploy_keys = DeployKeyClient(provider, ref)
        self.branches = BranchClient(provider, ref)
        self.commits = CommitClient(provider, ref)
        self.pull_requests = PullRequestClient(provider, ref)


class UserRepository(Repository):
    """A repository owned by a user."""


class OrgRepository:
    """A repository owned by an organization.

    Composes the shared repository core with team access, which only
    organization repositories have.
    """

    def __init__(self, client: "_RepositoriesClient", ref: Any, api_object: Any) -> None:
        self._repository = Repository(client, ref, api_object)
        self.team_access = TeamAccessClient(client.provider, ref)

    @property
    def ref(self) -> OrgRepositoryRef:
        return self._repository.ref

    @property
    def deploy_keys(self) -> "DeployKeyClient":
        return self._repository.deploy_keys

    @property
    def branches(self) -> "BranchClient":
        return self._repository.branches

    @property
    def commits(self) -> "CommitClient":
        return self._repository.commits

    @property
    def pull_requests(self) -> "PullRequestClient":
        return self._repository.pull_requests

    def get(self) -> RepositoryInfo:
        return self._repository.get()

    def api_object(self) -> Any:
        return self._repository.api_object()

    async def update(self, desired: RepositoryInfo, ctx: OperationContext | None = None) -> None:
        await self._repository.update(desired, ctx)

    async def reconcile(
        self, desired: RepositoryInfo | None = None, ctx: OperationContext | None = None
    ) -> bool:
        return await self._repository.reconcile(desired, ctx)

    async def delete(self, ctx: OperationContext | None = None) -> None:
        await self._repository.delete(ctx)

    def __repr__(self) -> str:
        return f"OrgRepository({self.ref})"


class _RepositoriesClient(ResourceClient[RepositoryInfo]):
    ref_type: type = object
    owner_type: type = object
    owner_kind = "owner"

    def __init__(self, provider: "GitProvider") -> None:
        api, mapper = provider.repository_binding()
        super().__init__(
            api,
            mapper,
            "repository",
            destructive_actions=provider.config.destructive_actions,
            per_page=provider.config.per_page,
        )
        self.provider = provider

    def _create_with(self, options: RepositoryCreateOptions | None) -> CreateFn | None:
        if options is None:
            return None
        options.validate_info()

        async def create_one(ref: Any, obj: Any, ctx: OperationContext) -> Any:
            return await self.api.create_one(
                ref, self.mapper.apply_create_options(obj, options), ctx
            )

        return create_one

    def _check_ref(self, ref: Any) -> None:
        """Reject refs of the wrong kind or host before anything is sent."""
        if not isinstance(ref, self.ref_type):
            raise InvalidArgumentError(
                f"Expected {self.owner_kind} repository ref, got {ref!r}"
            )
        self.provider.check_domain(ref)

    async def get(self, ref: Any, ctx: OperationContext | None = None) -> Any:
        self._check_ref(ref)
        return await super().get(ref, ctx)

    async def list(self, parent: Any, ctx: OperationContext | None = None) -> list[Any]:
        if not isinstance(parent, self.owner_type):
            raise InvalidArgumentError(f"Expected {self.owner_kind} ref, got {parent!r}")
        self.provider.check_domain(parent)
        return await super().list(parent, ctx)

    async def create(
        self,
        ref: Any,
        desired: RepositoryInfo,
        ctx: OperationContext | None = None,
        options: RepositoryCreateOptions | None = None,
    ) -> Any:
        self._check_ref(ref)
        return await super().create(ref, desired, ctx, create=self._create_with(options))

    async def update(
        self, ref: Any, desired: RepositoryInfo, ctx: OperationContext | None = None
    ) -> Any:
        self._check_ref(ref)
        return await super().update(ref, desired, ctx)

    async def delete(self, ref: Any, ctx: OperationContext | None = None) -> None:
        self._check_ref(ref)
        await super().delete(ref, ctx)

    async def reconcile(
        self,
        ref: Any,
        desired: RepositoryInfo,
        ctx: OperationContext | None = None,
        options: RepositoryCreateOptions | None = None,
    ) -> tuple[Any, bool]:
        self._check_ref(ref)
        return await super().reconcile(ref, desired, ctx, create=self._create_with(options))


class OrgRepositoriesClient(_RepositoriesClient):
    """Repositories owned by organizations; ``list`` takes an OrganizationRef."""

    resource_class = OrgRepository
    ref_type = OrgRepositoryRef
    owner_type = OrganizationRef
    owner_kind = "an organization"


class UserRepositoriesClient(_RepositoriesClient):
    """Repositories owned by users; ``list`` takes a UserRef."""

    resource_class = UserRepository
    ref_type = UserRepositoryRef
    owner_type = UserRef
    owner_kind = "a user"


# Repository sub-resources


class _RepositoryScopedClient(ResourceClient):
    kind_name = "resource"

    def __init__(self, provider: "GitProvider", repository_ref: Any, binding: Any) -> None:
        super().__init__(
            binding.api,
            binding.mapper,
            f"{self.kind_name} in {repository_ref.full_name}",
            destructive_actions=provider.config.destructive_actions,
            per_page=provider.config.per_page,
        )
        self.provider = provider
        self.repository_ref = repository_ref

    async def list(self, ctx: OperationContext | None = None) -> list[Resource]:  # type: ignore[override]
        return await super().list(self.repository_ref, ctx)


class DeployKeyClient(_RepositoryScopedClient):
    """Deploy keys of one repository, addressed by name."""

    kind_name = "deploy key"

    def __init__(self, provider: "GitProvider", repository_ref: Any) -> None:
        super().__init__(provider, repository_ref, provider.deploy_key_binding(repository_ref))

    async def create(  # type: ignore[override]
        self, desired: DeployKeyInfo, ctx: OperationContext | None = None
    ) -> Resource:
        desired.validate_info()
        return await super().create(desired.name, desired, ctx)

    async def reconcile(  # type: ignore[override]
        self, desired: DeployKeyInfo, ctx: OperationContext | None = None
    ) -> tuple[Resource, bool]:
        desired.validate_info()
        return await super().reconcile(desired.name, desired, ctx)


class TeamAccessClient(_RepositoryScopedClient):
    """Team permissions on one organization repository, addressed by team name."""

    kind_name = "team access"

    def __init__(self, provider: "GitProvider", repository_ref: Any) -> None:
        super().__init__(provider, repository_ref, provider.team_access_binding(repository_ref))

    async def create(  # type: ignore[override]
        self, desired: TeamAccessInfo, ctx: OperationContext | None = None
    ) -> Resource:
        desired.validate_info()
        return await super().create(desired.name, desired, ctx)

    async def reconcile(  # type: ignore[override]
        self, desired: TeamAccessInfo, ctx: OperationContext | None = None
    ) -> tuple[Resource, bool]:
        desired.validate_info()
        return await super().reconcile(desired.name, desired, ctx)


class BranchClient(_RepositoryScopedClient):
    """Branches of one repository, addressed by name."""

    kind_name = "branch"

    def __init__(self, provider: "GitProvider", repository_ref: Any) -> None:
        super().__init__(provider, repository_ref, provider.branch_binding(repository_ref))

    async def create(  # type: ignore[override]
        self, branch: str, sha: str, ctx: OperationContext | None = None
    ) -> Resource:
        return await super().create(branch, BranchInfo(name=branch, sha=sha), ctx)

    async def update(self, ref: Any, desired: Any, ctx: OperationContext | None = None) -> Resource:
        raise _unsupported("Updating a branch", self.provider)

    async def reconcile(self, *args: Any, **kwargs: Any) -> tuple[Resource, bool]:
        raise _unsupported("Reconciling a branch", self.provider)


class Commit(Resource[CommitInfo]):
    """A commit; commits are immutable."""

    async def update(self, desired: Any, ctx: OperationContext | None = None) -> None:
        raise UnsupportedOperationError("Commits cannot be updated")

    async def reconcile(self, desired: Any = None, ctx: OperationContext | None = None) -> bool:
        raise UnsupportedOperationError("Commits cannot be reconciled")

    async def delete(self, ctx: OperationContext | None = None) -> None:
        raise UnsupportedOperationError("Commits cannot be deleted")


class CommitClient:
    """Commit history of, and commit creation on, one repository."""

    def __init__(self, provider: "GitProvider", repository_ref: Any) -> None:
        self.api, self.mapper = provider.commit_binding(repository_ref)
        self.provider = provider
        self.repository_ref = repository_ref

    async def list_page(
        self,
        branch: str,
        per_page: int = 30,
        page: int = 1,
        ctx: OperationContext | None = None,
    ) -> list[Commit]:
        """One page (1-based) of the branch history, newest first."""
        ctx = ensure_context(ctx)
        ctx.check()
        objs = await self.api.list_page(branch, per_page, page, ctx)
        return [Commit(self, obj.sha, obj) for obj in validate_api_objects(objs)]

    async def create(
        self,
        branch: str,
        message: str,
        files: list[CommitFile],
        ctx: OperationContext | None = None,
    ) -> Commit:
        """Commit ``files`` on top of ``branch``."""
        if not files:
            raise InvalidArgumentError("A commit needs at least one file change")
        ctx = ensure_context(ctx)
        ctx.check()
        obj = validate_api_object(await self.api.create_commit(branch, message, files, ctx))
        return Commit(self, obj.sha, obj)


class PullRequest(Resource[PullRequestInfo]):
    async def merge(
        self,
        method: MergeMethod = MergeMethod.MERGE,
        message: str | None = None,
        ctx: OperationContext | None = None,
    ) -> None:
        await self._client.merge(self._ref, method, message, ctx)


class PullRequestClient(_RepositoryScopedClient):
    """Pull (merge) requests of one repository, addressed by number."""

    kind_name = "pull request"
    resource_class = PullRequest

    def __init__(self, provider: "GitProvider", repository_ref: Any) -> None:
        super().__init__(provider, repository_ref, provider.pull_request_binding(repository_ref))

    async def create(  # type: ignore[override]
        self,
        title: str,
        branch: str,
        base_branch: str,
        description: str = "",
        ctx: OperationContext | None = None,
    ) -> PullRequest:
        desired = PullRequestInfo(
            title=title,
            description=description,
            source_branch=branch,
            target_branch=base_branch,
        )
        desired.validate_info()
        ctx = ensure_context(ctx)
        ctx.check()
        obj = self.mapper.new_object(None, desired)
        try:
            created = validate_api_object(await self.api.create_one(None, obj, ctx))
        except GitProviderError as e:
            self.logger.error(f"Error creating {self.kind} '{title}': {e}")
            raise
        return self._wrap(self.mapper.ref_of(created, self.repository_ref), created)

    async def edit(
        self,
        number: int,
        title: str | None = None,
        description: str | None = None,
        ctx: OperationContext | None = None,
    ) -> PullRequest:
        return await self.update(
            number, PullRequestInfo(title=title, description=description), ctx
        )

    async def merge(
        self,
        number: int,
        method: MergeMethod = MergeMethod.MERGE,
        message: str | None = None,
        ctx: OperationContext | None = None,
    ) -> None:
        ctx = ensure_context(ctx)
        ctx.check()
        await self.api.merge(number, MergeMethod(method), message, ctx)
        self.logger.info(f"Merged {self.kind} #{number} ({MergeMethod(method).value})")

    async def reconcile(self, *args: Any, **kwargs: Any) -> tuple[Resource, bool]:
        raise _unsupported("Reconciling a pull request", self.provider)


# Organizations and teams


class Team(Resource[TeamInfo]):
    pass


class TeamsClient(ResourceClient[TeamInfo]):
    """Teams (GitHub), subgroups (GitLab) or groups (Bitbucket Server) of an organization."""

    resource_class = Team

    def __init__(self, provider: "GitProvider", organization_ref: OrganizationRef) -> None:
        api, mapper = provider.team_binding(organization_ref)
        super().__init__(
            api,
            mapper,
            f"team in {organization_ref.identity}",
            per_page=provider.config.per_page,
        )
        self.provider = provider
        self.organization_ref = organization_ref

    async def list(self, ctx: OperationContext | None = None) -> list[Resource]:  # type: ignore[override]
        return await super().list(self.organization_ref, ctx)

    async def has_member(
        self, team: str, login: str, ctx: OperationContext | None = None
    ) -> bool:
        ctx = ensure_context(ctx)
        ctx.check()
        return await self.api.has_member(team, login, ctx)

    async def reconcile(self, *args: Any, **kwargs: Any) -> tuple[Resource, bool]:
        raise _unsupported("Reconciling a team", self.provider)


class Organization(Resource[OrganizationInfo]):
    def __init__(self, client: "OrganizationsClient", ref: Any, api_object: Any) -> None:
        super().__init__(client, ref, api_object)
        self.teams = TeamsClient(client.provider, ref)


class OrganizationsClient(ResourceClient[OrganizationInfo]):
    """Organizations visible to the authenticated user."""

    resource_class = Organization

    def __init__(self, provider: "GitProvider") -> None:
        api, mapper = provider.organization_binding()
        super().__init__(api, mapper, "organization", per_page=provider.config.per_page)
        self.provider = provider

    async def get(self, ref: OrganizationRef, ctx: OperationContext | None = None) -> Organization:
        self.provider.check_domain(ref)
        return await super().get(ref, ctx)

    async def list(self, ctx: OperationContext | None = None) -> list[Resource]:  # type: ignore[override]
        return await super().list(None, ctx)

    async def children(
        self, ref: OrganizationRef, ctx: OperationContext | None = None
    ) -> "list[Organization]":
        """Direct sub-organizations (GitLab subgroups)."""
        self.provider.check_domain(ref)
        ctx = ensure_context(ctx)
        objs = await drain_all(
            lambda options: self.api.fetch_children_page(ref, options, ctx),
            ListOptions(per_page=self.per_page),
            ctx,
        )
        return [
            self._wrap(self.mapper.ref_of(obj, ref), obj)
            for obj in validate_api_objects(objs)
        ]

    async def reconcile(self, *args: Any, **kwargs: Any) -> tuple[Resource, bool]:
        raise _unsupported("Reconciling an organization", self.provider)


__all__ = [
    "BranchClient",
    "Commit",
    "CommitClient",
    "DeployKeyClient",
    "OrgRepositoriesClient",
    "OrgRepository",
    "Organization",
    "OrganizationsClient",
    "PullRequest",
    "PullRequestClient",
    "Repository",
    "Team",
    "TeamAccessClient",
    "TeamsClient",
    "UserRepositoriesClient",
    "UserRepository",
]

# git_providers/source_control/resources.py

"""
Generic client facade and resource handles.

``ResourceClient`` composes one backend ``ResourceAPI`` with its
``ResourceMapper`` and offers get, list, create, update, delete and
reconcile on top of the paginator, validator and reconciler. Every call
returns ``Resource`` handles whose server object is replaced only by a
confirmed server response.
"""

from collections.abc import Awaitable, Callable
import logging
from typing import Any, Generic, TypeVar

from ..core.context import OperationContext, ensure_context
from ..core.exceptions import (
    DestructiveCallDisallowedError,
    GitProviderError,
    NotFoundError,
)
from .api import ResourceAPI, ResourceMapper
from .models import validate_desired, with_defaults
from .pagination import DEFAULT_PER_PAGE, ListOptions, drain_all
from .reconciler import Reconciler
from .validation import validate_api_object, validate_api_objects

InfoT = TypeVar("InfoT")

CreateFn = Callable[[Any, Any, OperationContext], Awaitable[Any]]


class Resource(Generic[InfoT]):
    """Handle to one server resource."""

    def __init__(self, client: "ResourceClient", ref: Any, api_object: Any) -> None:
        self._client = client
        self._ref = ref
        self._api_object = api_object

    @property
    def ref(self) -> Any:
        return self._ref

    def get(self) -> InfoT:
        """Provider-neutral view of the last server state seen."""
        return self._client.mapper.to_desired(self._api_object)

    def api_object(self) -> Any:
        """The raw server object, as last returned by the server."""
        return self._api_object

    async def update(self, desired: InfoT, ctx: OperationContext | None = None) -> None:
        """Push ``desired`` on top of the held server object."""
        self._api_object = await self._client.push_update(
            self._ref, desired, self._api_object, ctx
        )

    async def reconcile(
        self, desired: InfoT | None = None, ctx: OperationContext | None = None
    ) -> bool:
        """Converge the server onto ``desired`` (default: this handle's state)."""
        if desired is None:
            desired = self.get()
        result = await self._client.reconciler.reconcile(self._ref, desired, ctx)
        self._api_object = result.api_object
        return result.action_taken

    async def delete(self, ctx: OperationContext | None = None) -> None:
        await self._client.delete(self._ref, ctx)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._ref})"


class ResourceClient(Generic[InfoT]):
    """get / list / create / update / delete / reconcile for one resource kind."""

    resource_class: type[Resource] = Resource

    def __init__(
        self,
        api: ResourceAPI,
        mapper: ResourceMapper,
        kind: str,
        destructive_actions: bool = False,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> None:
        self.api = api
        self.mapper = mapper
        self.kind = kind
        self.destructive_actions = destructive_actions
        self.per_page = per_page
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.reconciler = Reconciler(api, mapper, kind, self.logger)

    def _wrap(self, ref: Any, api_object: Any) -> Resource:
        return self.resource_class(self, ref, api_object)

    async def get(self, ref: Any, ctx: OperationContext | None = None) -> Resource:
        """Fetch one resource; NotFoundError if it does not exist."""
        ctx = ensure_context(ctx)
        ctx.check()
        obj = validate_api_object(await self.api.fetch_one(ref, ctx))
        return self._wrap(ref, obj)

    async def list(self, parent: Any, ctx: OperationContext | None = None) -> list[Resource]:
        """Every resource under ``parent``, across all pages, in server order."""
        ctx = ensure_context(ctx)
        objs = await drain_all(
            lambda options: self.api.fetch_page(parent, options, ctx),
            ListOptions(per_page=self.per_page),
            ctx,
        )
        return [
            self._wrap(self.mapper.ref_of(obj, parent), obj)
            for obj in validate_api_objects(objs)
        ]

    async def create(
        self,
        ref: Any,
        desired: InfoT,
        ctx: OperationContext | None = None,
        create: CreateFn | None = None,
    ) -> Resource:
        """Create the resource; AlreadyExistsError if it is already there."""
        ctx = ensure_context(ctx)
        validate_desired(desired)
        self.mapper.validate_desired(desired)
        obj = self.mapper.new_object(ref, with_defaults(desired))
        ctx.check()
        try:
            created = validate_api_object(
                await (create or self.api.create_one)(ref, obj, ctx)
            )
        except GitProviderError as e:
            self.logger.error(f"Error creating {self.kind} {ref}: {e}")
            raise
        return self._wrap(ref, created)

    async def update(
        self, ref: Any, desired: InfoT, ctx: OperationContext | None = None
    ) -> Resource:
        """Re-fetch, apply ``desired`` and push; NotFoundError if absent."""
        current = await self.get(ref, ctx)
        updated = await self.push_update(ref, desired, current.api_object(), ctx)
        return self._wrap(ref, updated)

    async def push_update(
        self, ref: Any, desired: InfoT, current: Any, ctx: OperationContext | None = None
    ) -> Any:
        ctx = ensure_context(ctx)
        validate_desired(desired)
        self.mapper.validate_desired(desired)
        obj = self.mapper.apply_desired(desired, current)
        ctx.check()
        try:
            return validate_api_object(await self.api.update_one(ref, obj, ctx))
        except GitProviderError as e:
            self.logger.error(f"Error updating {self.kind} {ref}: {e}")
            raise

    async def delete(self, ref: Any, ctx: OperationContext | None = None) -> None:
        """Delete irreversibly; NotFoundError if the resource is already gone."""
        if not self.destructive_actions:
            raise DestructiveCallDisallowedError(
                f"Refusing to delete {self.kind} {ref}: destructive actions are disabled"
            )
        ctx = ensure_context(ctx)
        ctx.check()
        try:
            await self.api.delete_one(ref, ctx)
        except NotFoundError:
            self.logger.error(f"Cannot delete {self.kind} {ref}: not found")
            raise
        except GitProviderError as e:
            self.logger.error(f"Error deleting {self.kind} {ref}: {e}")
            raise
        self.logger.info(f"Deleted {self.kind} {ref}")

    async def reconcile(
        self,
        ref: Any,
        desired: InfoT,
        ctx: OperationContext | None = None,
        create: CreateFn | None = None,
    ) -> tuple[Resource, bool]:
        """Create or update so the server matches ``desired``.

        Returns the resource and whether a write was issued.
        """
        result = await self.reconciler.reconcile(ref, desired, ctx, create=create)
        return self._wrap(ref, result.api_object), result.action_taken

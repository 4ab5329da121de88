# git_providers/source_control/reconciler.py

"""
Declarative create-or-update.

The reconciler converges one server resource onto a desired state:

* fetch the current object;
* not found: create it from the desired state with defaults applied;
* found and already matching: do nothing;
* found and drifted: apply the desired fields and push an update.

Any other fetch failure aborts without writing. Nothing is retried here;
callers that want retries wrap the call (see ``utils.execute_with_retry``).
"""

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Any, Generic, TypeVar

from ..core.context import OperationContext, ensure_context
from ..core.exceptions import GitProviderError, NotFoundError, ReconcileError
from .api import ResourceAPI, ResourceMapper
from .models import desired_matches, validate_desired, with_defaults
from .validation import validate_api_object

ObjT = TypeVar("ObjT")


class ReconcileState(str, Enum):
    NOT_CHECKED = "not_checked"
    FETCHED = "fetched"
    UNCHANGED = "unchanged"
    CREATED = "created"
    UPDATED = "updated"
    FAILED = "failed"


@dataclass
class ReconcileResult(Generic[ObjT]):
    """Outcome of a successful reconcile.

    ``api_object`` is always a server response (or the fetched object for a
    no-op), never a locally patched copy.
    """

    api_object: ObjT
    action_taken: bool
    state: ReconcileState


class Reconciler:
    """Runs reconcile for one resource kind on one backend."""

    def __init__(
        self,
        api: ResourceAPI,
        mapper: ResourceMapper,
        kind: str = "resource",
        logger: logging.Logger | None = None,
    ) -> None:
        self.api = api
        self.mapper = mapper
        self.kind = kind
        self.logger = logger or logging.getLogger(__name__)

    async def reconcile(
        self,
        ref: Any,
        desired: Any,
        ctx: OperationContext | None = None,
        create: Any = None,
    ) -> ReconcileResult:
        """Make the resource at ``ref`` match ``desired``.

        Args:
            ref: Identity of the resource.
            desired: Desired-state info; None fields are "don't care".
            ctx: Cancellation context, checked before every request.
            create: Optional coroutine function ``(ref, obj, ctx)`` used
                instead of ``api.create_one``, e.g. to pass create options.

        Raises:
            ReconcileError: wrapping the underlying failure, with
                ``action_taken`` set when a write had been issued.
        """
        ctx = ensure_context(ctx)
        state = ReconcileState.NOT_CHECKED
        action_taken = False

        try:
            validate_desired(desired)
            self.mapper.validate_desired(desired)

            try:
                ctx.check()
                current = validate_api_object(await self.api.fetch_one(ref, ctx))
            except NotFoundError:
                obj = self.mapper.new_object(ref, with_defaults(desired))
                ctx.check()
                action_taken = True
                create_one = create or self.api.create_one
                created = validate_api_object(await create_one(ref, obj, ctx))
                self.logger.info(f"Created {self.kind} {ref}")
                return ReconcileResult(created, True, ReconcileState.CREATED)

            state = ReconcileState.FETCHED
            if desired_matches(desired, self.mapper.to_desired(current)):
                self.logger.debug(f"{self.kind} {ref} already up to date")
                return ReconcileResult(current, False, ReconcileState.UNCHANGED)

            updated_obj = self.mapper.apply_desired(desired, current)
            ctx.check()
            action_taken = True
            updated = validate_api_object(await self.api.update_one(ref, updated_obj, ctx))
            self.logger.info(f"Updated {self.kind} {ref}")
            return ReconcileResult(updated, True, ReconcileState.UPDATED)

        except GitProviderError as e:
            self.logger.error(
                f"Failed to reconcile {self.kind} {ref}: {e}",
                extra={"action_taken": action_taken, "state": state.value},
            )
            raise ReconcileError(
                f"Reconcile of {self.kind} {ref} failed: {e.message}",
                action_taken=action_taken,
                state=state.value,
                original_error=e,
            ) from e

# git_providers/core/context.py

"""
Cooperative cancellation for provider operations.

An OperationContext is passed through facades, the reconciler and the
paginator. ``check()`` is called before each network call and at every page
boundary; it raises once the caller cancelled or the deadline passed.
"""

import time

from .exceptions import DeadlineExceededError, OperationCancelledError


class OperationContext:
    """Cancellation flag plus an optional monotonic deadline."""

    def __init__(self, timeout: float | None = None, deadline: float | None = None):
        """
        Args:
            timeout: Seconds from now after which the context expires.
            deadline: Absolute ``time.monotonic()`` value; wins over timeout.
        """
        if deadline is None and timeout is not None:
            deadline = time.monotonic() + timeout
        self.deadline = deadline
        self._cancelled = False
        self._reason: str | None = None

    @classmethod
    def background(cls) -> "OperationContext":
        """A context that never expires unless cancelled."""
        return cls()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self, reason: str | None = None) -> None:
        self._cancelled = True
        self._reason = reason

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None without one."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def check(self) -> None:
        """Raise if the operation should stop."""
        if self._cancelled:
            raise OperationCancelledError(
                f"Operation cancelled{': ' + self._reason if self._reason else ''}"
            )
        if self.expired():
            raise DeadlineExceededError("Operation deadline exceeded")


def ensure_context(ctx: OperationContext | None) -> OperationContext:
    return ctx if ctx is not None else OperationContext.background()

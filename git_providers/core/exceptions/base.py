# git_providers/core/exceptions/base.py

"""
Base exception hierarchy for the git providers library.

Every error raised by a provider client, a facade or the reconciler derives
from GitProviderError so callers can catch the whole family at once, while
still distinguishing the kinds that matter (not found, validation failure,
transport failure, unsupported operation).
"""

from typing import Any


class GitProviderError(Exception):
    """
    Base exception class for all git provider errors.

    Attributes:
        message: The error message describing what went wrong
        error_code: Optional error code for programmatic error handling
        details: Optional dictionary containing additional error details
        original_error: Optional reference to the original exception that caused this error
    """

    default_error_code: str | None = None

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            details: Optional additional error details
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the exception."""
        base_msg = f"{self.__class__.__name__}: {self.message}"
        if self.error_code:
            base_msg += f" (Code: {self.error_code})"
        return base_msg

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns:
            Dictionary representation of the exception
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "original_error": str(self.original_error) if self.original_error else None,
        }


class InvalidArgumentError(GitProviderError):
    """Raised when a caller passes a malformed ref, URL or desired state."""

    default_error_code = "INVALID_ARGUMENT"


class OperationCancelledError(GitProviderError):
    """Raised when an operation context was cancelled by the caller."""

    default_error_code = "CANCELLED"


class DeadlineExceededError(OperationCancelledError):
    """Raised when an operation context passed its deadline."""

    default_error_code = "DEADLINE_EXCEEDED"


def is_error(error: BaseException | None, kind: type[BaseException]) -> bool:
    """
    Check whether an error, or any error it wraps, is of the given kind.

    Follows both ``original_error`` and ``__cause__`` links, so an error
    wrapped by the reconciler still answers for the failure underneath.
    """
    seen: set[int] = set()
    while error is not None and id(error) not in seen:
        if isinstance(error, kind):
            return True
        seen.add(id(error))
        error = getattr(error, "original_error", None) or error.__cause__
    return False

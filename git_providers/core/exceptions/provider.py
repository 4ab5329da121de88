# git_providers/core/exceptions/provider.py

"""
Provider-facing error kinds.

Backends translate SDK and HTTP failures into these classes; the reconciler
and the facades branch on them.
"""

from typing import Any

from .base import GitProviderError


class NotFoundError(GitProviderError):
    """The requested resource does not exist on the server."""

    default_error_code = "NOT_FOUND"


class AlreadyExistsError(GitProviderError):
    """A create was rejected because the resource already exists."""

    default_error_code = "ALREADY_EXISTS"


class ValidationFailedError(GitProviderError):
    """A server object is missing a field required for correct operation."""

    default_error_code = "VALIDATION_FAILED"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        details = dict(details or {})
        if field is not None:
            details.setdefault("field", field)
        super().__init__(message, details=details, original_error=original_error)
        self.field = field


class TransportError(GitProviderError):
    """Network or HTTP failure talking to the provider."""

    default_error_code = "TRANSPORT_FAILURE"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        details = dict(details or {})
        if status_code is not None:
            details.setdefault("status_code", status_code)
        super().__init__(message, details=details, original_error=original_error)
        self.status_code = status_code


class InvalidCredentialsError(TransportError):
    """The provider rejected the configured credentials."""

    default_error_code = "INVALID_CREDENTIALS"


class RateLimitError(TransportError):
    """The provider's rate limit was hit."""

    default_error_code = "RATE_LIMITED"


class UnsupportedOperationError(GitProviderError):
    """The backend has no equivalent for the requested operation."""

    default_error_code = "UNSUPPORTED_OPERATION"


class DomainUnsupportedError(GitProviderError):
    """A ref points at a domain the provider client does not serve."""

    default_error_code = "DOMAIN_UNSUPPORTED"


class DestructiveCallDisallowedError(GitProviderError):
    """A delete was attempted while destructive actions are disabled."""

    default_error_code = "DESTRUCTIVE_CALL_DISALLOWED"


class ReconcileError(GitProviderError):
    """
    A reconcile failed part way.

    ``action_taken`` tells the caller whether a create or update had been
    issued before the failure; ``state`` is the reconcile state reached.
    """

    default_error_code = "RECONCILE_FAILED"

    def __init__(
        self,
        message: str,
        action_taken: bool,
        state: str | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(
            message,
            details={"action_taken": action_taken, "state": state},
            original_error=original_error,
        )
        self.action_taken = action_taken
        self.state = state

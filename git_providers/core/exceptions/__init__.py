# git_providers/core/exceptions/__init__.py

"""Exception hierarchy for the git providers library."""

from .base import (
    DeadlineExceededError,
    GitProviderError,
    InvalidArgumentError,
    OperationCancelledError,
    is_error,
)
from .provider import (
    AlreadyExistsError,
    DestructiveCallDisallowedError,
    DomainUnsupportedError,
    InvalidCredentialsError,
    NotFoundError,
    RateLimitError,
    ReconcileError,
    TransportError,
    UnsupportedOperationError,
    ValidationFailedError,
)

__all__ = [
    "AlreadyExistsError",
    "DeadlineExceededError",
    "DestructiveCallDisallowedError",
    "DomainUnsupportedError",
    "GitProviderError",
    "InvalidArgumentError",
    "InvalidCredentialsError",
    "NotFoundError",
    "OperationCancelledError",
    "RateLimitError",
    "ReconcileError",
    "TransportError",
    "UnsupportedOperationError",
    "ValidationFailedError",
    "is_error",
]

# git_providers/source_control/utils.py

"""
Utility functions for provider operations.
"""

import asyncio
from collections.abc import Awaitable, Callable
import functools
import logging
from typing import Any, TypeVar

from ..config.providers import ProviderConfig
from ..core.exceptions import InvalidCredentialsError, TransportError, is_error
from .base import GitProvider

T = TypeVar("T")


async def run_sync(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking SDK call in the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))


async def with_provider(
    provider_class: type[GitProvider],
    config: ProviderConfig,
    operation: Callable[[GitProvider], Awaitable[T]],
) -> T:
    """
    Execute an operation with a provider using async context manager.

    Example:
        repo = await with_provider(
            GitHubProvider,
            config,
            lambda provider: provider.org_repositories.get(ref),
        )
    """
    async with provider_class(config) as provider:
        return await operation(provider)


def is_retryable(error: BaseException) -> bool:
    """Transport failures and rate limits are retryable; bad credentials are not."""
    return is_error(error, TransportError) and not is_error(error, InvalidCredentialsError)


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 60.0,
    backoff_factor: float = 2.0,
) -> T:
    """
    Execute an operation with retry logic and exponential backoff.

    Only retryable failures (see ``is_retryable``) are retried; not-found,
    validation and unsupported-operation errors propagate immediately.
    Reconcile is idempotent, so retrying a failed reconcile is safe.

    Args:
        operation: The async operation to execute
        max_retries: Maximum number of retry attempts
        base_delay: Base delay between retries in seconds
        max_delay: Maximum delay between retries in seconds
        backoff_factor: Factor to multiply delay by for each retry

    Returns:
        The result of the operation
    """
    logger = logging.getLogger(__name__)
    attempt = 0

    while True:
        try:
            return await operation()
        except Exception as e:
            if attempt >= max_retries or not is_retryable(e):
                raise

            delay = min(base_delay * (backoff_factor**attempt), max_delay)
            logger.warning(
                f"Operation failed (attempt {attempt + 1}/{max_retries + 1}), "
                f"retrying in {delay:.2f}s: {e}"
            )
            attempt += 1
            await asyncio.sleep(delay)

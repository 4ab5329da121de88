# git_providers/source_control/providers/github/github_errors.py

"""Translation of PyGithub and requests failures into provider errors."""

from github import (
    BadCredentialsException,
    GithubException,
    RateLimitExceededException,
    UnknownObjectException,
)
import requests

from ....core.exceptions import (
    AlreadyExistsError,
    GitProviderError,
    InvalidCredentialsError,
    NotFoundError,
    RateLimitError,
    TransportError,
)

GITHUB_ERRORS = (GithubException, requests.RequestException)


def _github_message(error: GithubException) -> str:
    data = error.data
    if isinstance(data, dict):
        message = data.get("message") or ""
        details = [
            item.get("message") or item.get("code", "")
            for item in data.get("errors", [])
            if isinstance(item, dict)
        ]
        return "; ".join(part for part in [message, *details] if part)
    return str(data or "")


def translate_github_error(error: Exception, what: str) -> GitProviderError:
    """Map an SDK failure while doing ``what`` onto the error taxonomy."""
    if isinstance(error, GitProviderError):
        return error

    if isinstance(error, UnknownObjectException):
        return NotFoundError(f"GitHub: {what}: not found", original_error=error)
    if isinstance(error, BadCredentialsException):
        return InvalidCredentialsError(
            f"GitHub: {what}: bad credentials", status_code=error.status, original_error=error
        )
    if isinstance(error, RateLimitExceededException):
        return RateLimitError(
            f"GitHub: {what}: rate limit exceeded", status_code=error.status, original_error=error
        )
    if isinstance(error, GithubException):
        message = _github_message(error)
        if error.status == 404:
            return NotFoundError(f"GitHub: {what}: not found", original_error=error)
        if error.status == 422 and "already exist" in message.lower():
            return AlreadyExistsError(f"GitHub: {what}: {message}", original_error=error)
        return TransportError(
            f"GitHub: {what}: HTTP {error.status} {message}".rstrip(),
            status_code=error.status,
            original_error=error,
        )
    return TransportError(f"GitHub: {what}: {error}", original_error=error)

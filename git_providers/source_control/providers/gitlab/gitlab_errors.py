# git_providers/source_control/providers/gitlab/gitlab_errors.py

"""Translation of python-gitlab and requests failures into provider errors."""

from gitlab.exceptions import GitlabAuthenticationError, GitlabError
import requests

from ....core.exceptions import (
    AlreadyExistsError,
    GitProviderError,
    InvalidCredentialsError,
    NotFoundError,
    RateLimitError,
    TransportError,
)

GITLAB_ERRORS = (GitlabError, requests.RequestException)


def translate_gitlab_error(error: Exception, what: str) -> GitProviderError:
    """Map an SDK failure while doing ``what`` onto the error taxonomy."""
    if isinstance(error, GitProviderError):
        return error

    if isinstance(error, GitlabError):
        status = error.response_code
        message = str(error.error_message or "")
        if status == 404:
            return NotFoundError(f"GitLab: {what}: not found", original_error=error)
        if status == 401 or isinstance(error, GitlabAuthenticationError):
            return InvalidCredentialsError(
                f"GitLab: {what}: bad credentials", status_code=status, original_error=error
            )
        if status == 429:
            return RateLimitError(
                f"GitLab: {what}: rate limit exceeded", status_code=status, original_error=error
            )
        if status == 409 or (status == 400 and "already been taken" in message):
            return AlreadyExistsError(f"GitLab: {what}: {message}", original_error=error)
        return TransportError(
            f"GitLab: {what}: HTTP {status} {message}".rstrip(),
            status_code=status,
            original_error=error,
        )
    return TransportError(f"GitLab: {what}: {error}", original_error=error)

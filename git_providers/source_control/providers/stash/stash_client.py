# git_providers/source_control/providers/stash/stash_client.py

"""
Minimal async HTTP client for the Bitbucket Server REST API.

Bitbucket Server pages every list with ``start``/``limit`` and answers
``isLastPage``/``nextPageStart``; ``get_page`` turns that into the
paginator's ``Page``. HTTP failures are mapped onto the error taxonomy here.
"""

import logging
from typing import Any

import httpx

from ....core.context import OperationContext
from ....core.exceptions import (
    AlreadyExistsError,
    GitProviderError,
    InvalidCredentialsError,
    NotFoundError,
    RateLimitError,
    TransportError,
)
from ...pagination import ListOptions, Page, drain_all

API_PATH = "/rest/api/1.0"
KEYS_PATH = "/rest/keys/1.0"
BRANCH_UTILS_PATH = "/rest/branch-utils/1.0"

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    errors = data.get("errors") if isinstance(data, dict) else None
    if errors:
        return "; ".join(str(error.get("message", "")) for error in errors if isinstance(error, dict))
    return str(data)[:200]


def translate_status(response: httpx.Response, what: str) -> GitProviderError:
    """Map a failed HTTP response onto the error taxonomy."""
    status = response.status_code
    message = _error_message(response)
    if status == 404:
        return NotFoundError(f"Bitbucket Server: {what}: not found", details={"message": message})
    if status == 401:
        return InvalidCredentialsError(
            f"Bitbucket Server: {what}: bad credentials", status_code=status
        )
    if status == 409:
        return AlreadyExistsError(f"Bitbucket Server: {what}: {message}")
    if status == 429:
        return RateLimitError(f"Bitbucket Server: {what}: rate limit exceeded", status_code=status)
    return TransportError(
        f"Bitbucket Server: {what}: HTTP {status} {message}".rstrip(), status_code=status
    )


class StashClient:
    """Thin wrapper around ``httpx.AsyncClient`` with error translation and paging."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        username: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        auth = None
        if token and username:
            auth = httpx.BasicAuth(username, token)
        elif token:
            headers["Authorization"] = f"Bearer {token}"

        self.http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            auth=auth,
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self.http.aclose()

    async def request(
        self,
        method: str,
        path: str,
        what: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Send one request; returns the decoded JSON body, or None when empty."""
        try:
            response = await self.http.request(method, path, params=params, json=json)
        except httpx.RequestError as e:
            raise TransportError(f"Bitbucket Server: {what}: {e}", original_error=e) from e

        if response.status_code >= 400:
            raise translate_status(response, what)
        logger.debug(f"{method} {path} -> {response.status_code}")
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def get_page(
        self,
        path: str,
        options: ListOptions,
        what: str,
        params: dict[str, Any] | None = None,
    ) -> tuple[list[dict[str, Any]], Page]:
        query = {**(params or {}), "start": options.cursor or 0, "limit": options.per_page}
        data = await self.request("GET", path, what, params=query) or {}
        values = data.get("values") or []
        is_last = data.get("isLastPage", True)
        return values, Page(next_cursor=data.get("nextPageStart"), has_more=not is_last)

    async def get_all(
        self,
        path: str,
        what: str,
        ctx: OperationContext,
        params: dict[str, Any] | None = None,
        per_page: int = 100,
    ) -> list[dict[str, Any]]:
        """Drain a paged endpoint, for lookups that have no direct GET."""
        return await drain_all(
            lambda options: self.get_page(path, options, what, params),
            ListOptions(per_page=per_page),
            ctx,
        )

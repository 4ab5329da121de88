# git_providers/source_control/pagination.py

"""
Draining paginated list endpoints.

Backends return one page at a time together with a ``Page`` marker saying
where the next page starts. ``drain_all`` loops until the server reports no
more pages, checking the operation context before every request.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
import logging
from typing import Any, TypeVar

from ..core.context import OperationContext, ensure_context

T = TypeVar("T")

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 100


@dataclass(frozen=True)
class Page:
    """Continuation marker returned with each page.

    ``next_cursor`` is opaque to the core: a page number for GitHub and
    GitLab, a ``start`` offset for Bitbucket Server.
    """

    next_cursor: Any = None
    has_more: bool = False


@dataclass(frozen=True)
class ListOptions:
    per_page: int = DEFAULT_PER_PAGE
    cursor: Any = None

    def next(self, page: Page) -> "ListOptions":
        return replace(self, cursor=page.next_cursor)


FetchPage = Callable[[ListOptions], Awaitable[tuple[list[T], Page]]]


async def drain_all(
    fetch_page: FetchPage,
    options: ListOptions | None = None,
    ctx: OperationContext | None = None,
) -> list[T]:
    """Fetch every page, in server order, and return all items.

    Any page failure propagates; no partial result is returned. Items are
    neither reordered nor de-duplicated.
    """
    ctx = ensure_context(ctx)
    options = options or ListOptions()
    items: list[T] = []
    pages = 0

    while True:
        ctx.check()
        page_items, page = await fetch_page(options)
        items.extend(page_items)
        pages += 1
        if not page.has_more:
            break
        if page.next_cursor is None or page.next_cursor == options.cursor:
            # a server that claims more pages without advancing would loop forever
            logger.warning(f"Paginator stopped: cursor did not advance ({options.cursor!r})")
            break
        options = options.next(page)

    logger.debug(f"Drained {pages} page(s), {len(items)} item(s)")
    return items


def single_page(items: list[T]) -> tuple[list[T], Page]:
    """Wrap an unpaginated result in the page protocol."""
    return list(items), Page(next_cursor=None, has_more=False)


def next_page_number(current: int, count: int, per_page: int) -> Page:
    """Page marker for page-numbered APIs: more pages while pages are full."""
    if count >= per_page:
        return Page(next_cursor=current + 1, has_more=True)
    return Page(next_cursor=None, has_more=False)

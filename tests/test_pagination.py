# tests/test_pagination.py

"""Tests for draining paginated endpoints."""

import pytest

from git_providers.core.context import OperationContext
from git_providers.core.exceptions import OperationCancelledError, TransportError
from git_providers.source_control.pagination import (
    ListOptions,
    Page,
    drain_all,
    next_page_number,
    single_page,
)


def scripted_pages(*pages):
    """A fetch function answering from a list of (items, Page) or exceptions."""
    seen = []

    async def fetch(options):
        seen.append(options.cursor)
        result = pages[len(seen) - 1]
        if isinstance(result, Exception):
            raise result
        return result

    return fetch, seen


class TestDrainAll:
    """drain_all follows cursors until the server reports the last page."""

    @pytest.mark.asyncio
    async def test_two_pages_in_order(self):
        fetch, seen = scripted_pages(
            (["a", "b"], Page(next_cursor=2, has_more=True)),
            (["c"], Page(has_more=False)),
        )
        assert await drain_all(fetch) == ["a", "b", "c"]
        assert seen == [None, 2]

    @pytest.mark.asyncio
    async def test_single_page(self):
        fetch, seen = scripted_pages((["only"], Page()))
        assert await drain_all(fetch) == ["only"]
        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_empty_result(self):
        fetch, _ = scripted_pages(([], Page()))
        assert await drain_all(fetch) == []

    @pytest.mark.asyncio
    async def test_failing_second_page_returns_nothing(self):
        fetch, _ = scripted_pages(
            (["a", "b"], Page(next_cursor=2, has_more=True)),
            TransportError("boom", status_code=502),
        )
        with pytest.raises(TransportError):
            await drain_all(fetch)

    @pytest.mark.asyncio
    async def test_duplicates_are_kept(self):
        fetch, _ = scripted_pages(
            (["a"], Page(next_cursor=1, has_more=True)),
            (["a"], Page()),
        )
        assert await drain_all(fetch) == ["a", "a"]

    @pytest.mark.asyncio
    async def test_stuck_cursor_stops(self):
        fetch, seen = scripted_pages(
            (["a"], Page(next_cursor=None, has_more=True)),
        )
        assert await drain_all(fetch) == ["a"]
        assert len(seen) == 1

    @pytest.mark.asyncio
    async def test_per_page_is_passed_through(self):
        received = []

        async def fetch(options):
            received.append(options.per_page)
            return [], Page()

        await drain_all(fetch, ListOptions(per_page=7))
        assert received == [7]

    @pytest.mark.asyncio
    async def test_cancelled_context_stops_before_first_page(self):
        fetch, seen = scripted_pages((["a"], Page()))
        ctx = OperationContext()
        ctx.cancel("shutting down")
        with pytest.raises(OperationCancelledError):
            await drain_all(fetch, ctx=ctx)
        assert seen == []

    @pytest.mark.asyncio
    async def test_cancel_between_pages(self):
        ctx = OperationContext()
        calls = []

        async def fetch(options):
            calls.append(options.cursor)
            ctx.cancel()
            return ["a"], Page(next_cursor=1, has_more=True)

        with pytest.raises(OperationCancelledError):
            await drain_all(fetch, ctx=ctx)
        assert calls == [None]


class TestPageHelpers:
    def test_full_page_has_more(self):
        assert next_page_number(1, 10, 10) == Page(next_cursor=2, has_more=True)

    def test_short_page_is_last(self):
        assert next_page_number(3, 4, 10) == Page(next_cursor=None, has_more=False)

    def test_single_page(self):
        items, page = single_page([1, 2])
        assert items == [1, 2]
        assert not page.has_more

    def test_list_options_next(self):
        options = ListOptions(per_page=5).next(Page(next_cursor=25, has_more=True))
        assert options == ListOptions(per_page=5, cursor=25)

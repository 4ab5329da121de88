# tests/conftest.py

"""Shared fixtures: an in-memory backend for the provider-neutral core and a routed HTTP fake."""

from dataclasses import dataclass, replace
import json
from typing import Any

import httpx
import pytest

from git_providers.core.context import OperationContext
from git_providers.core.exceptions import AlreadyExistsError, InvalidArgumentError, NotFoundError
from git_providers.source_control.api import APIObject
from git_providers.source_control.pagination import ListOptions, Page


class Widget(APIObject):
    """Server object of the fake backend; ``id`` and ``created_at`` are server-assigned."""

    required_fields = ("id", "name")

    id: int | None = None
    name: str | None = None
    description: str | None = None
    color: str | None = None
    created_at: str | None = None


@dataclass
class WidgetInfo:
    description: str | None = None
    color: str | None = None

    def default(self) -> "WidgetInfo":
        return replace(self, color=self.color or "grey")


class WidgetMapper:
    def to_desired(self, obj: Widget) -> WidgetInfo:
        return WidgetInfo(description=obj.description or "", color=obj.color)

    def apply_desired(self, desired: WidgetInfo, obj: Widget) -> Widget:
        update: dict[str, Any] = {}
        if desired.description is not None:
            update["description"] = desired.description
        if desired.color is not None:
            update["color"] = desired.color
        return obj.model_copy(update=update)

    def new_object(self, ref: str, desired: WidgetInfo) -> Widget:
        return self.apply_desired(desired, Widget(name=ref))

    def ref_of(self, obj: Widget, parent: Any) -> str:
        return obj.name

    def validate_desired(self, desired: WidgetInfo) -> None:
        if desired.color == "invisible":
            raise InvalidArgumentError("Widgets cannot be invisible")


class FakeWidgetAPI:
    """In-memory ResourceAPI that records every call.

    ``failures`` maps an operation name to the exception it raises next.
    """

    CREATED_AT = "2024-01-01T00:00:00Z"

    def __init__(self, widgets: list[Widget] | None = None) -> None:
        self.store: dict[str, Widget] = {w.name: w for w in widgets or []}
        self.calls: list[tuple[str, Any]] = []
        self.failures: dict[str, Exception] = {}
        self._next_id = 100

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.failures:
            raise self.failures.pop(operation)

    def count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)

    async def fetch_one(self, ref: str, ctx: OperationContext) -> Widget:
        self.calls.append(("fetch_one", ref))
        self._maybe_fail("fetch_one")
        if ref not in self.store:
            raise NotFoundError(f"widget {ref} not found")
        return self.store[ref]

    async def fetch_page(
        self, parent: Any, options: ListOptions, ctx: OperationContext
    ) -> tuple[list[Widget], Page]:
        self.calls.append(("fetch_page", options.cursor))
        self._maybe_fail("fetch_page")
        widgets = list(self.store.values())
        start = (options.cursor or 0) * options.per_page
        items = widgets[start : start + options.per_page]
        more = start + options.per_page < len(widgets)
        return items, Page(next_cursor=(options.cursor or 0) + 1 if more else None, has_more=more)

    async def create_one(self, ref: str, obj: Widget, ctx: OperationContext) -> Widget:
        self.calls.append(("create_one", ref))
        self._maybe_fail("create_one")
        if ref in self.store:
            raise AlreadyExistsError(f"widget {ref} already exists")
        self._next_id += 1
        created = obj.model_copy(update={"id": self._next_id, "created_at": self.CREATED_AT})
        self.store[ref] = created
        return created

    async def update_one(self, ref: str, obj: Widget, ctx: OperationContext) -> Widget:
        self.calls.append(("update_one", ref))
        self._maybe_fail("update_one")
        if ref not in self.store:
            raise NotFoundError(f"widget {ref} not found")
        current = self.store[ref]
        updated = current.model_copy(update={"description": obj.description, "color": obj.color})
        self.store[ref] = updated
        return updated

    async def delete_one(self, ref: str, ctx: OperationContext) -> None:
        self.calls.append(("delete_one", ref))
        self._maybe_fail("delete_one")
        if ref not in self.store:
            raise NotFoundError(f"widget {ref} not found")
        del self.store[ref]


def make_widget(name: str, widget_id: int = 1, **fields: Any) -> Widget:
    return Widget(id=widget_id, name=name, created_at=FakeWidgetAPI.CREATED_AT, **fields)


@pytest.fixture
def widget_api() -> FakeWidgetAPI:
    return FakeWidgetAPI([make_widget("gear", 1, description="old", color="private")])


@pytest.fixture
def widget_mapper() -> WidgetMapper:
    return WidgetMapper()


@pytest.fixture
def ctx() -> OperationContext:
    return OperationContext.background()


class FakeBitbucket:
    """An httpx.MockTransport handler routing by (method, path).

    Responses registered for a route are served in order and the last one
    repeats; unrouted requests get a 404.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], list] = {}

    def on(self, method: str, path: str, *responses: Any) -> None:
        self.routes[(method, path)] = list(responses)

    def sent(self, method: str | None = None) -> list[httpx.Request]:
        return [r for r in self.requests if method is None or r.method == method]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responses = self.routes.get((request.method, request.url.path))
        if not responses:
            return httpx.Response(404, json={"errors": [{"message": "No such resource"}]})
        response = responses.pop(0) if len(responses) > 1 else responses[0]
        if callable(response):
            return response(request)
        status, body = response
        return httpx.Response(status, json=body) if body is not None else httpx.Response(status)


def body_of(request: httpx.Request) -> Any:
    return json.loads(request.content)

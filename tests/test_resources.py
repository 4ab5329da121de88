# tests/test_resources.py

"""Tests for the generic client facade and resource handles."""

import logging

import pytest

from git_providers.core.context import OperationContext
from git_providers.core.exceptions import (
    AlreadyExistsError,
    DeadlineExceededError,
    DestructiveCallDisallowedError,
    InvalidArgumentError,
    NotFoundError,
    ReconcileError,
    ValidationFailedError,
)
from git_providers.source_control.resources import ResourceClient

from conftest import FakeWidgetAPI, Widget, WidgetInfo, make_widget


@pytest.fixture
def client(widget_api, widget_mapper):
    return ResourceClient(widget_api, widget_mapper, "widget", destructive_actions=True, per_page=2)


class TestGetAndList:
    @pytest.mark.asyncio
    async def test_get_returns_handle(self, client):
        widget = await client.get("gear")
        assert widget.ref == "gear"
        assert widget.get() == WidgetInfo(description="old", color="private")
        assert widget.api_object().id == 1

    @pytest.mark.asyncio
    async def test_get_missing_raises_not_found(self, client):
        with pytest.raises(NotFoundError):
            await client.get("nope")

    @pytest.mark.asyncio
    async def test_get_invalid_object_raises(self, client, widget_api):
        widget_api.store["broken"] = Widget(name="broken")
        with pytest.raises(ValidationFailedError):
            await client.get("broken")

    @pytest.mark.asyncio
    async def test_list_drains_all_pages(self, widget_mapper):
        api = FakeWidgetAPI([make_widget(name, i) for i, name in enumerate("abcde", 1)])
        client = ResourceClient(api, widget_mapper, "widget", per_page=2)

        widgets = await client.list(None)

        assert [w.ref for w in widgets] == ["a", "b", "c", "d", "e"]
        assert api.count("fetch_page") == 3

    @pytest.mark.asyncio
    async def test_list_with_invalid_element_fails(self, widget_mapper):
        api = FakeWidgetAPI([make_widget("a", 1), Widget(name="b"), make_widget("c", 3)])
        client = ResourceClient(api, widget_mapper, "widget")
        with pytest.raises(ValidationFailedError):
            await client.list(None)

    @pytest.mark.asyncio
    async def test_expired_deadline_stops_get(self, client, widget_api):
        ctx = OperationContext(deadline=0.0)
        with pytest.raises(DeadlineExceededError):
            await client.get("gear", ctx)
        assert widget_api.calls == []


class TestCreateAndUpdate:
    @pytest.mark.asyncio
    async def test_create(self, client, widget_api):
        widget = await client.create("spring", WidgetInfo(description="coiled"))
        assert widget.api_object().created_at == FakeWidgetAPI.CREATED_AT
        assert widget.get().color == "grey"

    @pytest.mark.asyncio
    async def test_create_existing_raises(self, client):
        with pytest.raises(AlreadyExistsError):
            await client.create("gear", WidgetInfo())

    @pytest.mark.asyncio
    async def test_create_rejects_invalid_desired_state(self, client, widget_api):
        with pytest.raises(InvalidArgumentError):
            await client.create("spring", WidgetInfo(color="invisible"))
        assert widget_api.count("create_one") == 0

    @pytest.mark.asyncio
    async def test_update_refetches_and_keeps_server_fields(self, client, widget_api):
        widget = await client.update("gear", WidgetInfo(description="new"))
        assert widget_api.calls[:2] == [("fetch_one", "gear"), ("update_one", "gear")]
        assert widget.api_object().description == "new"
        assert widget.api_object().created_at == FakeWidgetAPI.CREATED_AT

    @pytest.mark.asyncio
    async def test_update_missing_raises_not_found(self, client, widget_api):
        with pytest.raises(NotFoundError):
            await client.update("nope", WidgetInfo(description="x"))
        assert widget_api.count("update_one") == 0

    @pytest.mark.asyncio
    async def test_handle_update_replaces_object_with_server_response(self, client):
        widget = await client.get("gear")
        await widget.update(WidgetInfo(color="blue"))
        assert widget.get().color == "blue"
        assert widget.get().description == "old"


class TestReconcile:
    @pytest.mark.asyncio
    async def test_reconcile_returns_handle_and_action(self, client):
        widget, action_taken = await client.reconcile("gear", WidgetInfo(description="new"))
        assert action_taken is True
        assert widget.get().description == "new"

        _, action_taken = await client.reconcile("gear", WidgetInfo(description="new"))
        assert action_taken is False

    @pytest.mark.asyncio
    async def test_handle_reconcile_defaults_to_held_state(self, client, widget_api):
        widget = await client.get("gear")
        assert await widget.reconcile() is False
        assert widget_api.count("update_one") == 0

    @pytest.mark.asyncio
    async def test_foreign_errors_propagate_unwrapped(self, client, widget_api):
        widget_api.failures["fetch_one"] = RuntimeError("not a provider error")
        with pytest.raises(RuntimeError):
            await client.reconcile("gear", WidgetInfo(description="x"))

    @pytest.mark.asyncio
    async def test_reconcile_error_keeps_kind(self, client, widget_api, caplog):
        widget_api.failures["update_one"] = NotFoundError("deleted meanwhile")
        with caplog.at_level(logging.ERROR):
            with pytest.raises(ReconcileError) as exc_info:
                await client.reconcile("gear", WidgetInfo(description="x"))
        assert exc_info.value.action_taken is True
        assert "gear" in caplog.text


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete(self, client, widget_api):
        await client.delete("gear")
        assert "gear" not in widget_api.store

    @pytest.mark.asyncio
    async def test_delete_absent_raises_not_found(self, client, caplog):
        with caplog.at_level(logging.ERROR):
            with pytest.raises(NotFoundError):
                await client.delete("nope")
        assert "not found" in caplog.text

    @pytest.mark.asyncio
    async def test_delete_refused_without_destructive_actions(self, widget_api, widget_mapper):
        client = ResourceClient(widget_api, widget_mapper, "widget")
        with pytest.raises(DestructiveCallDisallowedError):
            await client.delete("gear")
        assert widget_api.calls == []

    @pytest.mark.asyncio
    async def test_handle_delete(self, client, widget_api):
        widget = await client.get("gear")
        await widget.delete()
        assert widget_api.count("delete_one") == 1

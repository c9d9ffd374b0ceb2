"""Tests for discord_logger.ingest.listener."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from discord_logger.ingest.events import MessageCreated, MessageDeleted, MessageUpdated
from discord_logger.ingest.listener import MessageListener


@pytest.fixture
def service() -> MagicMock:
    service = MagicMock()
    service.ingest = AsyncMock(return_value=MagicMock())
    service.reconcile = AsyncMock(return_value=MagicMock())
    service.retract = AsyncMock(return_value=True)
    return service


@pytest.fixture
def listener(service) -> MessageListener:
    return MessageListener(service)


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


class TestMessageCreate:
    @pytest.mark.asyncio
    async def test_user_message_is_ingested(self, listener, service, payload_factory) -> None:
        payload = payload_factory()

        await listener.on_message_create(payload)

        service.ingest.assert_awaited_once_with(payload)
        assert listener.stats.created == 1

    @pytest.mark.asyncio
    async def test_webhook_message_is_skipped(
        self, listener, service, payload_factory
    ) -> None:
        await listener.on_message_create(payload_factory(webhook_id="999"))

        service.ingest.assert_not_awaited()
        assert listener.stats.skipped == 1
        assert listener.stats.created == 0

    @pytest.mark.asyncio
    async def test_system_message_is_skipped(
        self, listener, service, payload_factory
    ) -> None:
        await listener.on_message_create(payload_factory(type=7))

        service.ingest.assert_not_awaited()
        assert listener.stats.skipped == 1

    @pytest.mark.asyncio
    async def test_bot_message_is_ingested(self, listener, service, payload_factory) -> None:
        payload = payload_factory()
        payload["author"]["bot"] = True

        await listener.on_message_create(payload)

        service.ingest.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_ingest_is_counted(
        self, listener, service, payload_factory
    ) -> None:
        service.ingest.return_value = None

        await listener.on_message_create(payload_factory())

        assert listener.stats.failed == 1
        assert listener.stats.created == 0

    @pytest.mark.asyncio
    async def test_exception_does_not_propagate(
        self, listener, service, payload_factory
    ) -> None:
        service.ingest.side_effect = RuntimeError("boom")

        await listener.on_message_create(payload_factory())

        assert listener.stats.failed == 1


# ---------------------------------------------------------------------------
# Update / delete
# ---------------------------------------------------------------------------


class TestMessageUpdate:
    @pytest.mark.asyncio
    async def test_edit_is_reconciled(self, listener, service, payload_factory) -> None:
        payload = payload_factory(content="edited")

        await listener.on_message_update(payload)

        service.reconcile.assert_awaited_once_with(payload)
        assert listener.stats.updated == 1

    @pytest.mark.asyncio
    async def test_webhook_edit_is_skipped(
        self, listener, service, payload_factory
    ) -> None:
        await listener.on_message_update(payload_factory(webhook_id="999"))

        service.reconcile.assert_not_awaited()
        assert listener.stats.skipped == 1

    @pytest.mark.asyncio
    async def test_exception_does_not_propagate(
        self, listener, service, payload_factory
    ) -> None:
        service.reconcile.side_effect = RuntimeError("boom")

        await listener.on_message_update(payload_factory())

        assert listener.stats.failed == 1


class TestMessageDelete:
    @pytest.mark.asyncio
    async def test_delete_is_retracted(self, listener, service) -> None:
        await listener.on_message_delete(1001)

        service.retract.assert_awaited_once_with(1001)
        assert listener.stats.deleted == 1

    @pytest.mark.asyncio
    async def test_unknown_delete_not_counted(self, listener, service) -> None:
        service.retract.return_value = False

        await listener.on_message_delete(1001)

        assert listener.stats.deleted == 0
        assert listener.stats.failed == 0

    @pytest.mark.asyncio
    async def test_exception_does_not_propagate(self, listener, service) -> None:
        service.retract.side_effect = RuntimeError("boom")

        await listener.on_message_delete(1001)

        assert listener.stats.failed == 1


# ---------------------------------------------------------------------------
# Dispatch and queue
# ---------------------------------------------------------------------------


class TestDispatch:
    @pytest.mark.asyncio
    async def test_routes_by_event_type(self, listener, service, payload_factory) -> None:
        created = payload_factory(message_id=1)
        updated = payload_factory(message_id=2)

        await listener.dispatch(MessageCreated(created))
        await listener.dispatch(MessageUpdated(updated))
        await listener.dispatch(MessageDeleted(3))

        service.ingest.assert_awaited_once_with(created)
        service.reconcile.assert_awaited_once_with(updated)
        service.retract.assert_awaited_once_with(3)

    @pytest.mark.asyncio
    async def test_unknown_event_is_ignored(self, listener, service) -> None:
        await listener.dispatch(object())

        service.ingest.assert_not_awaited()
        service.reconcile.assert_not_awaited()
        service.retract.assert_not_awaited()

    def test_event_message_ids(self, payload_factory) -> None:
        assert MessageCreated(payload_factory(message_id=5)).message_id == "5"
        assert MessageUpdated(payload_factory(message_id=6)).message_id == "6"
        assert MessageDeleted(7).message_id == 7


class TestQueue:
    @pytest.mark.asyncio
    async def test_stop_drains_queue_in_order(self, listener, service, payload_factory) -> None:
        order: list[str] = []
        service.ingest.side_effect = lambda data: order.append(f"create:{data['id']}")
        service.retract.side_effect = lambda message_id: order.append(
            f"delete:{message_id}"
        )

        await listener.start()
        listener.submit(MessageCreated(payload_factory(message_id=1)))
        listener.submit(MessageDeleted(1))
        listener.submit(MessageCreated(payload_factory(message_id=2)))
        await listener.stop()

        assert order == ["create:1", "delete:1", "create:2"]
        assert listener.running is False

    @pytest.mark.asyncio
    async def test_failing_event_does_not_stop_consumer(
        self, listener, service, payload_factory
    ) -> None:
        service.ingest.side_effect = [RuntimeError("boom"), MagicMock()]

        await listener.start()
        listener.submit(MessageCreated(payload_factory(message_id=1)))
        listener.submit(MessageCreated(payload_factory(message_id=2)))
        await asyncio.wait_for(listener.queue.join(), timeout=1)

        assert listener.running is True
        assert listener.stats.failed == 1
        assert listener.stats.created == 1
        await listener.stop()

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, listener) -> None:
        await listener.start()
        task = listener._task

        await listener.start()

        assert listener._task is task
        await listener.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self, listener) -> None:
        await listener.stop()

        assert listener.running is False

"""Event listener: the single consumer of gateway message events.

Gateway callbacks call `submit()`, which only enqueues. A background task
takes events off the queue in arrival order and applies them through the
message logger service. No exception raised while handling one event may
stop the consumer, so every entry point isolates its own failures.
"""

from __future__ import annotations

import asyncio
from contextlib import suppress
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from discord_logger.ingest.events import (
    GatewayEvent,
    MessageCreated,
    MessageDeleted,
    MessageUpdated,
)
from discord_logger.ingest.filters import ineligible_reason
from discord_logger.ingest.logger import logger

if TYPE_CHECKING:
    from discord_logger.services import MessageLoggerService


@dataclass
class ListenerStats:
    """Counters reported in the shutdown summary."""

    created: int = 0
    updated: int = 0
    deleted: int = 0
    skipped: int = 0
    failed: int = 0


class MessageListener:
    """Consumes message events and forwards eligible ones to the service."""

    def __init__(self, service: "MessageLoggerService") -> None:
        self.service = service
        self.queue: asyncio.Queue[GatewayEvent] = asyncio.Queue()
        self.stats = ListenerStats()
        self._task: asyncio.Task[None] | None = None

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start the consumer task. No-op if already running."""
        if self.running:
            return
        self._task = asyncio.create_task(self._consume(), name="message-listener")

    async def stop(self) -> None:
        """Apply everything already queued, then stop the consumer task."""
        if self._task is None:
            return
        if self.running:
            await self.queue.join()
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    def submit(self, event: GatewayEvent) -> None:
        """Enqueue an event. Safe to call from gateway callbacks."""
        self.queue.put_nowait(event)

    async def _consume(self) -> None:
        while True:
            event = await self.queue.get()
            try:
                await self.dispatch(event)
            finally:
                self.queue.task_done()

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    async def dispatch(self, event: GatewayEvent) -> None:
        """Route one event to its handler."""
        if isinstance(event, MessageCreated):
            await self.on_message_create(event.data)
        elif isinstance(event, MessageUpdated):
            await self.on_message_update(event.data)
        elif isinstance(event, MessageDeleted):
            await self.on_message_delete(event.message_id)
        else:
            logger.warning(f"Ignoring unknown event type: {type(event).__name__}")

    async def on_message_create(self, data: dict[str, Any]) -> None:
        try:
            reason = ineligible_reason(data)
            if reason:
                self.stats.skipped += 1
                logger.event_skipped(data.get("id"), reason)
                return

            logger.debug(
                f"Received message {data.get('id')} in #{data.get('channel_name')}"
            )
            if await self.service.ingest(data) is None:
                self.stats.failed += 1
            else:
                self.stats.created += 1
        except Exception as e:
            self.stats.failed += 1
            logger.event_failed("create", data.get("id"), e)

    async def on_message_update(self, data: dict[str, Any]) -> None:
        try:
            reason = ineligible_reason(data)
            if reason:
                self.stats.skipped += 1
                logger.event_skipped(data.get("id"), reason)
                return

            logger.debug(
                f"Message {data.get('id')} edited in #{data.get('channel_name')}"
            )
            if await self.service.reconcile(data) is None:
                self.stats.failed += 1
            else:
                self.stats.updated += 1
        except Exception as e:
            self.stats.failed += 1
            logger.event_failed("update", data.get("id"), e)

    async def on_message_delete(self, message_id: int) -> None:
        try:
            logger.debug(f"Message {message_id} deleted")
            if await self.service.retract(message_id):
                self.stats.deleted += 1
        except Exception as e:
            self.stats.failed += 1
            logger.event_failed("delete", message_id, e)

"""Message logger service.

Owns the per-message lifecycle:

- ingest:    first sighting stores the message; repeats return the stored row
- reconcile: an edit updates the stored row, or stores it if it was missed
- retract:   a delete removes the stored row

Write failures never propagate. They are logged and surface as None (ingest,
reconcile) or False (retract), so callers must read an empty result as "did
not complete". Read operations delegate straight to the repository.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from discord_logger.db.models import Message, MessageDocument
from discord_logger.db.pagination import Page, PageRequest
from discord_logger.db.repositories import MessageRepository
from discord_logger.ingest.logger import logger
from discord_logger.ingest.mappers import map_message
from discord_logger.utils.time import utcnow


@dataclass
class ChannelStats:
    """Aggregate figures for one channel. Only the total is tracked."""

    channel_id: int
    total_messages: int


class MessageLoggerService:
    """Stores, updates, deletes and queries logged messages."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.async_session = session_factory

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def ingest(self, data: dict[str, Any]) -> Message | None:
        """Store a newly seen message.

        Returns the stored message, the previously stored one if the id is
        already known, or None if the message could not be stored.
        """
        try:
            async with self.async_session() as session:
                repo = MessageRepository(session)
                document = map_message(data)

                existing = await repo.get_by_message_id(document.message_id)
                if existing is not None:
                    logger.message_exists(document.message_id)
                    return existing

                return await self._insert(session, repo, document)
        except Exception as e:
            logger.operation_failed("ingest", data.get("id"), e)
            return None

    async def reconcile(self, data: dict[str, Any]) -> Message | None:
        """Apply an edit, storing the message first if it was never seen.

        Only content, attachments, embeds and edited_timestamp change.
        """
        try:
            async with self.async_session() as session:
                repo = MessageRepository(session)
                document = map_message(data)

                existing = await repo.get_by_message_id(document.message_id)
                if existing is None:
                    logger.update_missing(document.message_id)
                    return await self._insert(session, repo, document)

                existing.apply_edit(document, edited_at=utcnow())
                await session.commit()
                logger.message_updated(existing.message_id, existing.author_name)
                return existing
        except Exception as e:
            logger.operation_failed("reconcile", data.get("id"), e)
            return None

    async def retract(self, message_id: int) -> bool:
        """Delete a stored message. Returns False if it was not stored."""
        try:
            async with self.async_session() as session:
                repo = MessageRepository(session)

                existing = await repo.get_by_message_id(message_id)
                if existing is None:
                    logger.delete_missing(message_id)
                    return False

                await repo.delete(existing)
                await session.commit()
                logger.message_deleted(message_id)
                return True
        except Exception as e:
            logger.operation_failed("retract", message_id, e)
            return False

    async def _insert(
        self,
        session: AsyncSession,
        repo: MessageRepository,
        document: MessageDocument,
    ) -> Message:
        message = Message.from_document(document)
        repo.add(message)
        try:
            await session.commit()
        except IntegrityError:
            # Another writer stored the same message_id first.
            await session.rollback()
            existing = await repo.get_by_message_id(document.message_id)
            if existing is None:
                raise
            logger.message_race(document.message_id)
            return existing

        logger.message_saved(message.message_id, message.author_name, message.channel_name)
        return message

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get_message(self, message_id: int) -> Message | None:
        async with self.async_session() as session:
            return await MessageRepository(session).get_by_message_id(message_id)

    async def get_messages_by_channel(
        self, channel_id: int, page_request: PageRequest
    ) -> Page[Message]:
        async with self.async_session() as session:
            return await MessageRepository(session).find_by_channel(
                channel_id, page_request
            )

    async def get_messages_by_author(
        self, author_id: int, page_request: PageRequest
    ) -> Page[Message]:
        async with self.async_session() as session:
            return await MessageRepository(session).find_by_author(
                author_id, page_request
            )

    async def search_messages(
        self, query: str, page_request: PageRequest
    ) -> Page[Message]:
        async with self.async_session() as session:
            return await MessageRepository(session).search_content(query, page_request)

    async def get_recent_messages(
        self, since: datetime, page_request: PageRequest
    ) -> Page[Message]:
        async with self.async_session() as session:
            return await MessageRepository(session).find_since(since, page_request)

    async def get_message_stats(self, channel_id: int) -> ChannelStats:
        async with self.async_session() as session:
            total = await MessageRepository(session).count_by_channel(channel_id)
        return ChannelStats(channel_id=channel_id, total_messages=total)

"""Message repository.

One explicit method per stored-message query. Paginated methods take a
PageRequest and return a Page; the session is owned by the caller.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from discord_logger.db.models import Message
from discord_logger.db.pagination import Page, PageRequest


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class MessageRepository:
    """Data access for logged messages."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def add(self, message: Message) -> None:
        """Stage a new message; flushed on commit."""
        self.session.add(message)

    async def delete(self, message: Message) -> None:
        await self.session.delete(message)

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    async def get_by_message_id(self, message_id: int) -> Message | None:
        """Get a message by its Discord id, or None if not stored."""
        result = await self.session.execute(
            select(Message).where(Message.message_id == message_id)
        )
        return result.scalar_one_or_none()

    async def count_by_channel(self, channel_id: int) -> int:
        return await self._count(Message.channel_id == channel_id)

    async def count_by_author(self, author_id: int) -> int:
        return await self._count(Message.author_id == author_id)

    # -------------------------------------------------------------------------
    # Paginated queries
    # -------------------------------------------------------------------------

    async def find_by_channel(
        self, channel_id: int, page_request: PageRequest
    ) -> Page[Message]:
        return await self._paginate(page_request, Message.channel_id == channel_id)

    async def find_by_author(
        self, author_id: int, page_request: PageRequest
    ) -> Page[Message]:
        return await self._paginate(page_request, Message.author_id == author_id)

    async def find_by_author_and_channel(
        self, author_id: int, channel_id: int, page_request: PageRequest
    ) -> Page[Message]:
        return await self._paginate(
            page_request,
            Message.author_id == author_id,
            Message.channel_id == channel_id,
        )

    async def find_by_guild(
        self, guild_id: int, page_request: PageRequest
    ) -> Page[Message]:
        return await self._paginate(page_request, Message.guild_id == guild_id)

    async def find_by_timestamp_between(
        self, start: datetime, end: datetime, page_request: PageRequest
    ) -> Page[Message]:
        """Messages created in the half-open range [start, end).

        The lower bound is inclusive, unlike a strict between, so that
        consecutive ranges sharing an endpoint neither overlap nor skip a
        message stamped exactly on the boundary.
        """
        return await self._paginate(
            page_request, Message.timestamp >= start, Message.timestamp < end
        )

    async def find_by_channel_and_timestamp_between(
        self,
        channel_id: int,
        start: datetime,
        end: datetime,
        page_request: PageRequest,
    ) -> Page[Message]:
        """Messages in a channel created in the half-open range [start, end)."""
        return await self._paginate(
            page_request,
            Message.channel_id == channel_id,
            Message.timestamp >= start,
            Message.timestamp < end,
        )

    async def search_content(
        self, query: str, page_request: PageRequest
    ) -> Page[Message]:
        """Case-insensitive substring search over message content."""
        pattern = f"%{escape_like(query)}%"
        return await self._paginate(
            page_request, Message.content.ilike(pattern, escape="\\")
        )

    async def find_since(
        self, since: datetime, page_request: PageRequest
    ) -> Page[Message]:
        """Messages created at or after `since`."""
        return await self._paginate(page_request, Message.timestamp >= since)

    async def find_with_attachments(self, page_request: PageRequest) -> Page[Message]:
        return await self._paginate(page_request, Message.attachment_count > 0)

    async def find_by_bot(
        self, is_bot: bool, page_request: PageRequest
    ) -> Page[Message]:
        return await self._paginate(page_request, Message.is_bot == is_bot)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _count(self, *criteria: ColumnElement[bool]) -> int:
        stmt = select(func.count()).select_from(Message).where(*criteria)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def _paginate(
        self, page_request: PageRequest, *criteria: ColumnElement[bool]
    ) -> Page[Message]:
        total = await self._count(*criteria)

        stmt = (
            select(Message)
            .where(*criteria)
            .order_by(*page_request.sort.order_by())
            .offset(page_request.offset)
            .limit(page_request.size)
        )
        result = await self.session.execute(stmt)

        return Page(
            content=list(result.scalars().all()),
            total_elements=total,
            page=page_request.page,
            size=page_request.size,
        )

"""Paging and sorting primitives for message queries.

A query takes a PageRequest (page index, page size, Sort) and returns a Page
holding one slice of results plus the total match count.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from sqlalchemy.orm import InstrumentedAttribute
from sqlalchemy.sql.elements import UnaryExpression

from discord_logger.db.models import Message

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class InvalidSortError(ValueError):
    """Raised when a sort string names a field that cannot be sorted on."""

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        super().__init__(f"Cannot sort by unknown field '{field_name}'")


class Direction(str, enum.Enum):
    ASC = "asc"
    DESC = "desc"


# Accepted sort keys. camelCase spellings match the original API field names.
SORTABLE_COLUMNS: dict[str, InstrumentedAttribute] = {
    "id": Message.id,
    "message_id": Message.message_id,
    "messageId": Message.message_id,
    "channel_id": Message.channel_id,
    "channelId": Message.channel_id,
    "channel_name": Message.channel_name,
    "channelName": Message.channel_name,
    "guild_id": Message.guild_id,
    "guildId": Message.guild_id,
    "guild_name": Message.guild_name,
    "guildName": Message.guild_name,
    "author_id": Message.author_id,
    "authorId": Message.author_id,
    "author_name": Message.author_name,
    "authorName": Message.author_name,
    "content": Message.content,
    "timestamp": Message.timestamp,
    "edited_timestamp": Message.edited_timestamp,
    "editedTimestamp": Message.edited_timestamp,
    "is_bot": Message.is_bot,
    "isBot": Message.is_bot,
    "message_type": Message.message_type,
    "messageType": Message.message_type,
}


@dataclass(frozen=True)
class Sort:
    """Single-key sort specification."""

    field: str = "timestamp"
    direction: Direction = Direction.DESC

    def __post_init__(self) -> None:
        if self.field not in SORTABLE_COLUMNS:
            raise InvalidSortError(self.field)

    def order_by(self) -> tuple[UnaryExpression, ...]:
        """ORDER BY clauses: the requested key, then storage order."""
        column = SORTABLE_COLUMNS[self.field]
        primary = column.desc() if self.direction is Direction.DESC else column.asc()
        return (primary, Message.id.asc())


DEFAULT_SORT = Sort("timestamp", Direction.DESC)


def parse_sort(value: str) -> Sort:
    """Parse a ``field,direction`` sort string.

    Only the token ``desc`` (any case) selects descending order; a missing
    or unrecognized direction falls back to ascending.

    Raises:
        InvalidSortError: If the field is empty or not sortable.
    """
    parts = value.split(",")
    field_name = parts[0].strip()
    direction = Direction.ASC
    if len(parts) > 1 and parts[1].strip().lower() == "desc":
        direction = Direction.DESC
    return Sort(field_name, direction)


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page index, page size and sort."""

    page: int = 0
    size: int = DEFAULT_PAGE_SIZE
    sort: Sort = field(default=DEFAULT_SORT)

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValueError("page must be >= 0")
        if self.size < 1:
            raise ValueError("size must be >= 1")

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass
class Page(Generic[T]):
    """One slice of a query result."""

    content: list[T]
    total_elements: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size) if self.size else 0

    @property
    def is_empty(self) -> bool:
        return not self.content

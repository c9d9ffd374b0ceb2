"""Pydantic schemas for the message query API.

Discord snowflakes are rendered as strings: they exceed the integer range
JavaScript clients can represent exactly.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict

from discord_logger.db.pagination import Page

T = TypeVar("T")


def _snowflake_to_str(value: Any) -> Any:
    return value if value is None else str(value)


SnowflakeStr = Annotated[str, BeforeValidator(_snowflake_to_str)]


class MessageResponse(BaseModel):
    """A logged message as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    message_id: SnowflakeStr
    channel_id: SnowflakeStr
    channel_name: str
    guild_id: SnowflakeStr | None = None
    guild_name: str | None = None
    author_id: SnowflakeStr
    author_name: str
    author_discriminator: str
    content: str
    timestamp: datetime
    edited_timestamp: datetime | None = None
    attachments: list[dict[str, Any]] = []
    embeds: list[dict[str, Any]] = []
    reactions: list[dict[str, Any]] = []
    is_bot: bool
    message_type: str


class PageResponse(BaseModel, Generic[T]):
    """One page of results plus the paging totals."""

    content: list[T]
    total_elements: int
    total_pages: int
    page: int
    size: int

    @classmethod
    def from_page(cls, page: Page, item: type[BaseModel]) -> "PageResponse":
        return cls(
            content=[item.model_validate(entry) for entry in page.content],
            total_elements=page.total_elements,
            total_pages=page.total_pages,
            page=page.page,
            size=page.size,
        )


class ChannelStatsResponse(BaseModel):
    channel_id: SnowflakeStr
    total_messages: int


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime

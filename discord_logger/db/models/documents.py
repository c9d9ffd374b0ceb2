"""Document schemas for the nested parts of a logged message.

A message is stored as one row whose attachments, embeds and reactions are
owned JSON documents. These pydantic models are the structural check applied
before anything is written: required fields must be present and typed, and
embed field name/value are coalesced to empty strings.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AttachmentDocument(BaseModel):
    """Metadata snapshot of a file attached to a message (not the file itself)."""

    id: int
    filename: str
    url: str
    proxy_url: str = ""
    size: int = Field(ge=0)
    content_type: str | None = None


class EmbedFieldDocument(BaseModel):
    name: str = ""
    value: str = ""
    inline: bool = False

    @field_validator("name", "value", mode="before")
    @classmethod
    def coalesce_missing(cls, v: Any) -> Any:
        return "" if v is None else v


class EmbedDocument(BaseModel):
    """Subset of a Discord embed kept for display and search."""

    title: str | None = None
    description: str | None = None
    url: str | None = None
    color: int | None = None
    timestamp: datetime | None = None
    footer_text: str | None = None
    author_name: str | None = None
    fields: list[EmbedFieldDocument] = []


class ReactionDocument(BaseModel):
    """Aggregated reaction count. Per-user reaction state is not captured."""

    emoji: str
    count: int = Field(default=1, ge=0)


class MessageDocument(BaseModel):
    """Validated, normalized form of a message ready for storage."""

    model_config = ConfigDict(extra="forbid")

    message_id: int
    channel_id: int
    channel_name: str = ""
    guild_id: int | None = None
    guild_name: str | None = None
    author_id: int
    author_name: str
    author_discriminator: str = "0"
    content: str
    timestamp: datetime
    edited_timestamp: datetime | None = None
    attachments: list[AttachmentDocument] = []
    embeds: list[EmbedDocument] = []
    reactions: list[ReactionDocument] = []
    is_bot: bool = False
    message_type: str = "DEFAULT"


def dump_documents(documents: list[BaseModel]) -> list[dict[str, Any]]:
    """Serialize documents to JSON-safe dicts for a JSON column."""
    return [doc.model_dump(mode="json") for doc in documents]

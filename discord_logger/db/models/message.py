"""Logged Discord message ORM model.

One row per Discord message. Unlike an append-only archive, rows here follow
the live message: they are updated when the message is edited and deleted
when it is deleted on Discord.

Design principles:
- The internal surrogate `id` is distinct from the Discord `message_id`
- Attachments, embeds and reactions are owned nested documents (JSON/JSONB)
- Channel, guild and author names are denormalized at first sighting
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from discord_logger.db.base import (
    Base,
    JsonDocument,
    Snowflake,
    SurrogateKey,
    TZDateTime,
    utcnow,
)
from discord_logger.db.models.documents import MessageDocument, dump_documents


class Message(Base):
    """
    Logged Discord message.

    Identified externally by message_id (Discord snowflake, unique). Only
    content, attachments, embeds and edited_timestamp change after insert.
    """

    __tablename__ = "messages"

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    # Storage identifier assigned by the database. Also the tie-breaker for
    # ordering, so equal sort keys come back in insertion order.
    id: Mapped[int] = mapped_column(SurrogateKey, primary_key=True, autoincrement=True)

    # Discord snowflake. Uniqueness is enforced by uq_messages_message_id.
    message_id: Mapped[int] = mapped_column(Snowflake, nullable=False)

    # -------------------------------------------------------------------------
    # Location
    # -------------------------------------------------------------------------

    channel_id: Mapped[int] = mapped_column(Snowflake, nullable=False)
    channel_name: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # NULL for DM and group DM messages.
    guild_id: Mapped[int | None] = mapped_column(Snowflake, nullable=True)
    guild_name: Mapped[str | None] = mapped_column(Text, nullable=True)

    # -------------------------------------------------------------------------
    # Author
    # -------------------------------------------------------------------------

    author_id: Mapped[int] = mapped_column(Snowflake, nullable=False)
    author_name: Mapped[str] = mapped_column(Text, nullable=False)
    # "0" for accounts migrated to unique usernames.
    author_discriminator: Mapped[str] = mapped_column(
        String(8), nullable=False, default="0"
    )
    is_bot: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # -------------------------------------------------------------------------
    # Content
    # -------------------------------------------------------------------------

    # Raw message text. Empty string for attachment-only or embed-only messages.
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Upper-cased discord.py MessageType name, e.g. DEFAULT, REPLY.
    message_type: Mapped[str] = mapped_column(
        String(64), nullable=False, default="DEFAULT"
    )

    # -------------------------------------------------------------------------
    # Timestamps
    # -------------------------------------------------------------------------

    timestamp: Mapped[datetime] = mapped_column(TZDateTime, nullable=False)
    edited_timestamp: Mapped[datetime | None] = mapped_column(TZDateTime, nullable=True)

    # When this row was first written.
    archived_at: Mapped[datetime] = mapped_column(
        TZDateTime, nullable=False, default=utcnow
    )

    # -------------------------------------------------------------------------
    # Nested documents
    # -------------------------------------------------------------------------

    attachments: Mapped[list[dict]] = mapped_column(
        JsonDocument, nullable=False, default=list
    )
    embeds: Mapped[list[dict]] = mapped_column(JsonDocument, nullable=False, default=list)
    reactions: Mapped[list[dict]] = mapped_column(
        JsonDocument, nullable=False, default=list
    )

    # Redundant with len(attachments) but indexable without JSON functions.
    attachment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("message_id", name="uq_messages_message_id"),
        Index("ix_messages_channel_id", "channel_id"),
        Index("ix_messages_author_id", "author_id"),
        Index("ix_messages_guild_id", "guild_id"),
    )

    @classmethod
    def from_document(cls, document: MessageDocument) -> "Message":
        """Build a new row from a validated document."""
        return cls(
            message_id=document.message_id,
            channel_id=document.channel_id,
            channel_name=document.channel_name,
            guild_id=document.guild_id,
            guild_name=document.guild_name,
            author_id=document.author_id,
            author_name=document.author_name,
            author_discriminator=document.author_discriminator,
            is_bot=document.is_bot,
            content=document.content,
            message_type=document.message_type,
            timestamp=document.timestamp,
            edited_timestamp=document.edited_timestamp,
            attachments=dump_documents(document.attachments),
            embeds=dump_documents(document.embeds),
            reactions=dump_documents(document.reactions),
            attachment_count=len(document.attachments),
        )

    def apply_edit(self, document: MessageDocument, edited_at: datetime) -> None:
        """Apply the mutable parts of an edited message.

        Authorship, channel, guild, creation timestamp and reactions are kept.
        """
        self.content = document.content
        self.attachments = dump_documents(document.attachments)
        self.attachment_count = len(document.attachments)
        self.embeds = dump_documents(document.embeds)
        self.edited_timestamp = edited_at

    def __repr__(self) -> str:
        content_preview = (
            self.content[:50] + "..." if len(self.content) > 50 else self.content
        )
        return f"<Message(message_id={self.message_id}, content='{content_preview}')>"


# Indexes needing column expressions are declared against the mapped class.
Index("ix_messages_timestamp", Message.timestamp.desc())
Index("ix_messages_channel_timestamp", Message.channel_id, Message.timestamp.desc())
Index("ix_messages_author_timestamp", Message.author_id, Message.timestamp.desc())
Index("ix_messages_guild_timestamp", Message.guild_id, Message.timestamp.desc())
# Trigram index backing case-insensitive substring search (pg_trgm). Other
# dialects ignore the postgresql_* options and get a plain index.
Index(
    "ix_messages_content_trgm",
    Message.content,
    postgresql_using="gin",
    postgresql_ops={"content": "gin_trgm_ops"},
)

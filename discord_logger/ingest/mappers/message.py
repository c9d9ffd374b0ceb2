"""Message payload to document mapper.

Input is a Discord-API-shaped message dict (see ingest.serializers) enriched
with `channel_name` and `guild_name`. Output is a validated MessageDocument.
"""

from __future__ import annotations

from typing import Any

from discord import MessageType
from discord.enums import try_enum

from discord_logger.db.models import (
    AttachmentDocument,
    EmbedDocument,
    EmbedFieldDocument,
    MessageDocument,
    ReactionDocument,
)
from discord_logger.utils.ids import parse_snowflake
from discord_logger.utils.snowflake import snowflake_to_datetime
from discord_logger.utils.time import parse_iso8601


def _sanitize_null_bytes(value: Any) -> Any:
    """Remove NULL bytes (0x00) from strings, which PostgreSQL doesn't accept.

    For dict/list types, recursively sanitize all string values.
    """
    if isinstance(value, str):
        return value.replace("\x00", "")
    elif isinstance(value, dict):
        return {k: _sanitize_null_bytes(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_sanitize_null_bytes(item) for item in value]
    return value


def message_type_label(value: int) -> str:
    """Upper-cased discord.py MessageType name, e.g. 19 -> "REPLY"."""
    return try_enum(MessageType, value).name.upper()


def map_attachment(data: dict[str, Any]) -> AttachmentDocument:
    return AttachmentDocument(
        id=int(data["id"]),
        filename=data["filename"],
        url=data["url"],
        proxy_url=data.get("proxy_url") or "",
        size=data["size"],
        content_type=data.get("content_type"),
    )


def map_embed(data: dict[str, Any]) -> EmbedDocument:
    """Keep the displayable parts of an embed; nested objects are flattened."""
    footer = data.get("footer") or {}
    author = data.get("author") or {}
    return EmbedDocument(
        title=data.get("title"),
        description=data.get("description"),
        url=data.get("url"),
        color=data.get("color"),
        timestamp=parse_iso8601(data.get("timestamp")),
        footer_text=footer.get("text"),
        author_name=author.get("name"),
        fields=[
            EmbedFieldDocument(
                name=field.get("name"),
                value=field.get("value"),
                inline=field.get("inline", False),
            )
            for field in data.get("fields", [])
        ],
    )


def map_reaction(data: dict[str, Any]) -> ReactionDocument:
    """Reaction label is the emoji name (unicode character or custom name)."""
    emoji = data["emoji"]
    label = emoji.get("name") or str(emoji.get("id"))
    return ReactionDocument(emoji=label, count=data.get("count", 1))


def map_message(data: dict[str, Any]) -> MessageDocument:
    """Convert a serialized message payload to a validated MessageDocument.

    Args:
        data: Message payload from the gateway adapter

    Returns:
        MessageDocument (not yet persisted)

    Raises:
        KeyError: If a required key (id, channel_id, author) is missing
        pydantic.ValidationError: If a field has the wrong shape
    """
    data = _sanitize_null_bytes(data)

    message_id = int(data["id"])
    author = data["author"]

    # Payloads always carry a timestamp in practice; the snowflake encodes
    # the same instant, so fall back to it rather than store nothing.
    timestamp = parse_iso8601(data.get("timestamp")) or snowflake_to_datetime(
        message_id
    )

    return MessageDocument(
        message_id=message_id,
        channel_id=int(data["channel_id"]),
        channel_name=data.get("channel_name") or "",
        guild_id=parse_snowflake(data.get("guild_id")),
        guild_name=data.get("guild_name"),
        author_id=int(author["id"]),
        author_name=author["username"],
        author_discriminator=author.get("discriminator") or "0",
        content=data.get("content") or "",
        timestamp=timestamp,
        edited_timestamp=parse_iso8601(data.get("edited_timestamp")),
        attachments=[map_attachment(a) for a in data.get("attachments", [])],
        embeds=[map_embed(e) for e in data.get("embeds", [])],
        reactions=[map_reaction(r) for r in data.get("reactions", [])],
        is_bot=bool(author.get("bot", False)),
        message_type=message_type_label(data.get("type", MessageType.default.value)),
    )

"""Mappers for converting message payloads to storage documents."""

from discord_logger.ingest.mappers.message import (
    map_attachment,
    map_embed,
    map_message,
    map_reaction,
    message_type_label,
)

__all__ = [
    "map_attachment",
    "map_embed",
    "map_message",
    "map_reaction",
    "message_type_label",
]

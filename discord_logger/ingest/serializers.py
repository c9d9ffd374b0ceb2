"""discord.py object to payload serializers.

Produces the same dict shape the Discord REST API returns for a message,
plus `channel_name` and `guild_name`, which the gateway objects resolve from
the client cache.
"""

from __future__ import annotations

from typing import Any

import discord


def serialize_reaction(reaction: discord.Reaction) -> dict[str, Any]:
    emoji = reaction.emoji
    if isinstance(emoji, str):
        emoji_data = {"id": None, "name": emoji}
    else:
        emoji_data = {"id": emoji.id, "name": emoji.name}
    return {"emoji": emoji_data, "count": reaction.count}


def serialize_author(author: discord.abc.User) -> dict[str, Any]:
    return {
        "id": str(author.id),
        "username": author.name,
        "discriminator": author.discriminator,
        "bot": author.bot,
    }


def serialize_message(message: discord.Message) -> dict[str, Any]:
    """Serialize a discord.py Message into a message payload dict."""
    channel = message.channel
    guild = message.guild

    return {
        "id": str(message.id),
        "channel_id": str(channel.id),
        # DM channels have no name; their str() describes the recipient.
        "channel_name": getattr(channel, "name", None) or str(channel),
        "guild_id": str(guild.id) if guild else None,
        "guild_name": guild.name if guild else None,
        "author": serialize_author(message.author),
        "webhook_id": str(message.webhook_id) if message.webhook_id else None,
        "content": message.content,
        "timestamp": message.created_at.isoformat(),
        "edited_timestamp": (
            message.edited_at.isoformat() if message.edited_at else None
        ),
        "type": message.type.value,
        "attachments": [a.to_dict() for a in message.attachments],
        "embeds": [e.to_dict() for e in message.embeds],
        "reactions": [serialize_reaction(r) for r in message.reactions],
    }

"""discord.py client that feeds gateway message events to the listener.

Callbacks serialize the discord.py objects into message payload dicts and
enqueue them; they never touch the database themselves.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import discord
from discord import app_commands

from discord_logger.ingest.events import MessageCreated, MessageDeleted, MessageUpdated
from discord_logger.ingest.logger import logger
from discord_logger.ingest.serializers import serialize_message

if TYPE_CHECKING:
    from discord_logger.bot.commands import CommandHandler
    from discord_logger.ingest.listener import MessageListener


class LoggerBot(discord.Client):
    """Gateway client for the message logger."""

    def __init__(
        self,
        listener: "MessageListener",
        commands: "CommandHandler",
        command_guilds: list[str] | None = None,
        api_url: str | None = None,
    ) -> None:
        intents = discord.Intents.default()
        intents.message_content = True  # Read message text

        # Replies quote logged content; no reply may ping anyone.
        super().__init__(
            intents=intents, allowed_mentions=discord.AllowedMentions.none()
        )
        self.tree = app_commands.CommandTree(self)
        self.listener = listener
        self.commands = commands
        self.command_guilds = [int(g) for g in command_guilds or []]
        self.api_url = api_url
        self.commands_synced = 0

    async def setup_hook(self) -> None:
        """Register slash commands and sync them with Discord."""
        self.commands.register(self.tree)

        if not self.command_guilds:
            synced = await self.tree.sync()
            self.commands_synced = len(synced)
            return

        for guild_id in self.command_guilds:
            guild = discord.Object(id=guild_id)
            self.tree.copy_global_to(guild=guild)
            synced = await self.tree.sync(guild=guild)
            self.commands_synced += len(synced)

    async def on_ready(self) -> None:
        logger.bot_ready(
            user=self.user,
            guild_count=len(self.guilds),
            commands_synced=self.commands_synced,
            api_url=self.api_url,
        )

    # -------------------------------------------------------------------------
    # Message events
    # -------------------------------------------------------------------------

    async def on_message(self, message: discord.Message) -> None:
        self.listener.submit(MessageCreated(serialize_message(message)))

    async def on_raw_message_edit(self, payload: discord.RawMessageUpdateEvent) -> None:
        # Embed unfurls arrive as edits without an edit timestamp.
        if not payload.data.get("edited_timestamp"):
            return

        try:
            channel = self.get_channel(payload.channel_id)
            if channel is None:
                channel = await self.fetch_channel(payload.channel_id)
            message = await channel.fetch_message(payload.message_id)
        except discord.HTTPException as e:
            logger.event_failed("update", payload.message_id, e)
            return

        self.listener.submit(MessageUpdated(serialize_message(message)))

    async def on_raw_message_delete(
        self, payload: discord.RawMessageDeleteEvent
    ) -> None:
        self.listener.submit(
            MessageDeleted(payload.message_id, channel_id=payload.channel_id)
        )

    async def on_raw_bulk_message_delete(
        self, payload: discord.RawBulkMessageDeleteEvent
    ) -> None:
        for message_id in payload.message_ids:
            self.listener.submit(
                MessageDeleted(message_id, channel_id=payload.channel_id)
            )

"""Slash command handling.

Every command acknowledges the interaction first (defer) and edits the
original response once its query completes. Input errors are answered
immediately and ephemerally; internal errors only reach the log.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Any, Awaitable, Callable

import discord
from discord import app_commands

from discord_logger.db.pagination import DEFAULT_SORT, PageRequest
from discord_logger.ingest.logger import logger
from discord_logger.utils.time import utcnow

if TYPE_CHECKING:
    from discord_logger.db.models import Message
    from discord_logger.services import MessageLoggerService

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SEARCH_LIMIT = 5
RECENT_LIMIT = 10
USER_MESSAGES_LIMIT = 5
DEFAULT_HOURS = 24

ERROR_REPLY = "An error occurred while processing your command."

# Logged content is echoed back; it must never ping anyone again.
NO_MENTIONS = discord.AllowedMentions.none()

CommandCallback = Callable[..., Awaitable[None]]


def truncate(content: str, limit: int) -> str:
    """Cut content to `limit` characters, marking the cut with an ellipsis."""
    if len(content) > limit:
        return content[:limit] + "..."
    return content


def _format_timestamp(message: "Message") -> str:
    return message.timestamp.strftime(DATE_FORMAT)


async def _edit(interaction: discord.Interaction, content: str) -> None:
    await interaction.edit_original_response(
        content=content, allowed_mentions=NO_MENTIONS
    )


class CommandHandler:
    """Maps slash command names to message logger service queries."""

    def __init__(self, service: "MessageLoggerService") -> None:
        self.service = service
        self._handlers: dict[str, CommandCallback] = {
            "stats": self.handle_stats,
            "search": self.handle_search,
            "recent": self.handle_recent,
            "user-messages": self.handle_user_messages,
        }

    @property
    def command_names(self) -> list[str]:
        return list(self._handlers)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(self, tree: app_commands.CommandTree) -> None:
        """Add the logger's slash commands to a command tree."""
        handler = self

        @app_commands.command(
            name="stats", description="Get statistics for the current channel"
        )
        async def stats(interaction: discord.Interaction) -> None:
            await handler.dispatch(interaction, "stats")

        @app_commands.command(
            name="search", description="Search for messages containing specific text"
        )
        @app_commands.describe(query="Search query")
        async def search(interaction: discord.Interaction, query: str) -> None:
            await handler.dispatch(interaction, "search", query=query)

        @app_commands.command(name="recent", description="Get recent messages")
        @app_commands.describe(hours="Hours back to search (default: 24)")
        async def recent(
            interaction: discord.Interaction, hours: int = DEFAULT_HOURS
        ) -> None:
            await handler.dispatch(interaction, "recent", hours=hours)

        @app_commands.command(
            name="user-messages", description="Get messages from a specific user"
        )
        @app_commands.describe(user="User to search for")
        async def user_messages(
            interaction: discord.Interaction, user: discord.User
        ) -> None:
            await handler.dispatch(interaction, "user-messages", user=user)

        for command in (stats, search, recent, user_messages):
            tree.add_command(command)

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    async def dispatch(
        self, interaction: discord.Interaction, name: str, **options: Any
    ) -> None:
        """Run the named command, replying with a generic error on failure."""
        logger.command_received(name, interaction.user)

        callback = self._handlers.get(name)
        if callback is None:
            logger.unknown_command(name)
            await interaction.response.send_message(
                f"Unknown command: {name}", ephemeral=True
            )
            return

        try:
            await callback(interaction, **options)
        except Exception as e:
            logger.command_failed(name, e)
            if interaction.response.is_done():
                await _edit(interaction, ERROR_REPLY)
            else:
                await interaction.response.send_message(ERROR_REPLY, ephemeral=True)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    async def handle_stats(self, interaction: discord.Interaction) -> None:
        await interaction.response.defer()

        channel_id = interaction.channel_id
        stats = await self.service.get_message_stats(channel_id)

        lines = [
            "📊 **Channel Statistics**",
            f"Channel: <#{channel_id}>",
            f"Total Messages: {stats.total_messages}",
        ]
        await _edit(interaction, "\n".join(lines))

    async def handle_search(
        self, interaction: discord.Interaction, query: str | None = None
    ) -> None:
        if not query:
            await interaction.response.send_message(
                "Please provide a search query.", ephemeral=True
            )
            return

        await interaction.response.defer()

        results = await self.service.search_messages(
            query, PageRequest(0, SEARCH_LIMIT, DEFAULT_SORT)
        )
        if results.is_empty:
            await _edit(interaction, f'No messages found containing "{query}".')
            return

        lines = [
            f'🔍 **Search Results for "{query}"**',
            f"Found {results.total_elements} total matches "
            f"(showing first {SEARCH_LIMIT}):",
            "",
        ]
        for message in results.content:
            lines.append(f"**{message.author_name}** ({_format_timestamp(message)}):")
            lines.append(truncate(message.content, 100))
            lines.append("")
        await _edit(interaction, "\n".join(lines))

    async def handle_recent(
        self, interaction: discord.Interaction, hours: int | None = None
    ) -> None:
        hours_back = DEFAULT_HOURS if hours is None else hours

        await interaction.response.defer()

        since = utcnow() - timedelta(hours=hours_back)
        results = await self.service.get_recent_messages(
            since, PageRequest(0, RECENT_LIMIT, DEFAULT_SORT)
        )
        if results.is_empty:
            await _edit(
                interaction, f"No messages found in the last {hours_back} hours."
            )
            return

        lines = [
            f"⏰ **Recent Messages (Last {hours_back} hours)**",
            f"Found {results.total_elements} total messages "
            f"(showing first {RECENT_LIMIT}):",
            "",
        ]
        for message in results.content:
            lines.append(
                f"**{message.author_name}** in <#{message.channel_id}> "
                f"({_format_timestamp(message)}):"
            )
            lines.append(truncate(message.content, 80))
            lines.append("")
        await _edit(interaction, "\n".join(lines))

    async def handle_user_messages(
        self, interaction: discord.Interaction, user: discord.abc.User | None = None
    ) -> None:
        if user is None:
            await interaction.response.send_message(
                "Please specify a user.", ephemeral=True
            )
            return

        await interaction.response.defer()

        results = await self.service.get_messages_by_author(
            user.id, PageRequest(0, USER_MESSAGES_LIMIT, DEFAULT_SORT)
        )
        if results.is_empty:
            await _edit(interaction, "No messages found for this user.")
            return

        lines = [
            f"👤 **Messages by <@{user.id}>**",
            f"Found {results.total_elements} total messages "
            f"(showing first {USER_MESSAGES_LIMIT}):",
            "",
        ]
        for message in results.content:
            lines.append(f"**{message.channel_name}** ({_format_timestamp(message)}):")
            lines.append(truncate(message.content, 100))
            lines.append("")
        await _edit(interaction, "\n".join(lines))

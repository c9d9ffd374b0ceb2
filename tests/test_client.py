"""Unit tests for discord_logger.bot.client."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pytest

from discord_logger.bot.client import LoggerBot
from discord_logger.ingest.events import MessageCreated, MessageDeleted, MessageUpdated


@pytest.fixture
def listener() -> MagicMock:
    return MagicMock()


@pytest.fixture
def commands() -> MagicMock:
    return MagicMock()


def _make_bot(listener, commands, command_guilds=None) -> LoggerBot:
    return LoggerBot(
        listener=listener,
        commands=commands,
        command_guilds=command_guilds,
        api_url="http://localhost:8080/api/messages",
    )


def _submitted(listener: MagicMock) -> list:
    return [call.args[0] for call in listener.submit.call_args_list]


# ---------------------------------------------------------------------------
# TestSetup
# ---------------------------------------------------------------------------


class TestSetup:
    def test_requests_message_content_intent(self, listener, commands) -> None:
        bot = _make_bot(listener, commands)

        assert bot.intents.message_content is True
        assert bot.intents.guild_messages is True

    def test_mentions_disabled_by_default(self, listener, commands) -> None:
        bot = _make_bot(listener, commands)

        assert bot.allowed_mentions is not None
        assert bot.allowed_mentions.everyone is False
        assert bot.allowed_mentions.users is False
        assert bot.allowed_mentions.roles is False

    @pytest.mark.asyncio
    async def test_global_sync(self, listener, commands) -> None:
        bot = _make_bot(listener, commands)
        bot.tree.sync = AsyncMock(return_value=[MagicMock()] * 4)

        await bot.setup_hook()

        commands.register.assert_called_once_with(bot.tree)
        bot.tree.sync.assert_awaited_once_with()
        assert bot.commands_synced == 4

    @pytest.mark.asyncio
    async def test_guild_sync(self, listener, commands) -> None:
        bot = _make_bot(listener, commands, command_guilds=["100", "200"])
        bot.tree.sync = AsyncMock(return_value=[MagicMock()] * 4)
        bot.tree.copy_global_to = MagicMock()

        await bot.setup_hook()

        synced_guilds = [call.kwargs["guild"].id for call in bot.tree.sync.await_args_list]
        assert synced_guilds == [100, 200]
        assert bot.tree.copy_global_to.call_count == 2
        assert bot.commands_synced == 8

    @pytest.mark.asyncio
    async def test_on_ready_prints_startup_block(self, listener, commands) -> None:
        bot = _make_bot(listener, commands)

        with patch("discord_logger.bot.client.logger") as mock_logger:
            await bot.on_ready()

        kwargs = mock_logger.bot_ready.call_args.kwargs
        assert kwargs["guild_count"] == 0
        assert kwargs["api_url"] == "http://localhost:8080/api/messages"


# ---------------------------------------------------------------------------
# TestMessageEvents
# ---------------------------------------------------------------------------


class TestMessageEvents:
    @pytest.mark.asyncio
    @patch("discord_logger.bot.client.serialize_message")
    async def test_on_message_submits_created(
        self, mock_serialize, listener, commands
    ) -> None:
        mock_serialize.return_value = {"id": "1"}
        bot = _make_bot(listener, commands)

        await bot.on_message(MagicMock())

        assert _submitted(listener) == [MessageCreated({"id": "1"})]

    @pytest.mark.asyncio
    @patch("discord_logger.bot.client.serialize_message")
    async def test_edit_fetches_current_message(
        self, mock_serialize, listener, commands
    ) -> None:
        mock_serialize.return_value = {"id": "1", "content": "edited"}
        bot = _make_bot(listener, commands)
        channel = MagicMock()
        channel.fetch_message = AsyncMock(return_value=MagicMock())
        bot.get_channel = MagicMock(return_value=channel)

        payload = MagicMock()
        payload.data = {"id": "1", "edited_timestamp": "2024-01-15T11:00:00+00:00"}
        payload.message_id = 1
        payload.channel_id = 500

        await bot.on_raw_message_edit(payload)

        channel.fetch_message.assert_awaited_once_with(1)
        assert _submitted(listener) == [
            MessageUpdated({"id": "1", "content": "edited"})
        ]

    @pytest.mark.asyncio
    async def test_edit_falls_back_to_fetch_channel(self, listener, commands) -> None:
        bot = _make_bot(listener, commands)
        channel = MagicMock()
        channel.fetch_message = AsyncMock(return_value=MagicMock())
        bot.get_channel = MagicMock(return_value=None)
        bot.fetch_channel = AsyncMock(return_value=channel)

        payload = MagicMock()
        payload.data = {"edited_timestamp": "2024-01-15T11:00:00+00:00"}
        payload.channel_id = 500

        with patch("discord_logger.bot.client.serialize_message", return_value={}):
            await bot.on_raw_message_edit(payload)

        bot.fetch_channel.assert_awaited_once_with(500)
        listener.submit.assert_called_once()

    @pytest.mark.asyncio
    async def test_unfurl_without_edit_timestamp_ignored(self, listener, commands) -> None:
        bot = _make_bot(listener, commands)
        bot.get_channel = MagicMock()

        payload = MagicMock()
        payload.data = {"id": "1", "embeds": [{}]}

        await bot.on_raw_message_edit(payload)

        bot.get_channel.assert_not_called()
        listener.submit.assert_not_called()

    @pytest.mark.asyncio
    async def test_edit_fetch_failure_is_logged(self, listener, commands) -> None:
        bot = _make_bot(listener, commands)
        channel = MagicMock()
        response = MagicMock(status=404, reason="Not Found")
        channel.fetch_message = AsyncMock(
            side_effect=discord.NotFound(response, "Unknown Message")
        )
        bot.get_channel = MagicMock(return_value=channel)

        payload = MagicMock()
        payload.data = {"edited_timestamp": "2024-01-15T11:00:00+00:00"}
        payload.message_id = 1

        with patch("discord_logger.bot.client.logger") as mock_logger:
            await bot.on_raw_message_edit(payload)

        mock_logger.event_failed.assert_called_once()
        listener.submit.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_submits_deleted(self, listener, commands) -> None:
        bot = _make_bot(listener, commands)
        payload = MagicMock()
        payload.message_id = 1
        payload.channel_id = 500

        await bot.on_raw_message_delete(payload)

        assert _submitted(listener) == [MessageDeleted(1, channel_id=500)]

    @pytest.mark.asyncio
    async def test_bulk_delete_submits_each(self, listener, commands) -> None:
        bot = _make_bot(listener, commands)
        payload = MagicMock()
        payload.message_ids = {1, 2}
        payload.channel_id = 500

        await bot.on_raw_bulk_message_delete(payload)

        assert sorted(e.message_id for e in _submitted(listener)) == [1, 2]
        assert all(isinstance(e, MessageDeleted) for e in _submitted(listener))

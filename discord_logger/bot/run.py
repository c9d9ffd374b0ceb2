"""Runtime wiring for the message logger bot.

Builds the service, listener, command handler and gateway client around one
database, optionally serves the query API alongside them, and runs until the
gateway connection closes.
"""

from __future__ import annotations

import asyncio
from contextlib import suppress

import uvicorn

from discord_logger.api import create_app
from discord_logger.bot.client import LoggerBot
from discord_logger.bot.commands import CommandHandler
from discord_logger.config.settings import AppSettings, load_config
from discord_logger.core import BaseRuntime
from discord_logger.db.engine import dispose_engines
from discord_logger.ingest.listener import MessageListener
from discord_logger.ingest.logger import logger
from discord_logger.services import MessageLoggerService


class LoggerRuntime(BaseRuntime):
    """Runs the gateway client, the event listener and the query API."""

    def __init__(self, settings: AppSettings, api_enabled: bool = True) -> None:
        super().__init__(settings.database_url)
        self.settings = settings
        self.api_enabled = api_enabled and settings.api.enabled

        self.service = MessageLoggerService(self.async_session)
        self.listener = MessageListener(self.service)
        self.commands = CommandHandler(self.service)
        self.bot = LoggerBot(
            listener=self.listener,
            commands=self.commands,
            command_guilds=settings.command_guilds,
            api_url=self.api_url,
        )

        self.api_server: uvicorn.Server | None = None
        self._api_task: asyncio.Task[None] | None = None

    @property
    def api_url(self) -> str | None:
        if not self.api_enabled:
            return None
        return f"http://{self.settings.api.host}:{self.settings.api.port}/api/messages"

    async def _serve(self) -> None:
        if not self.settings.discord_token:
            raise ValueError("discord_token is not configured")

        await self.listener.start()

        if self.api_enabled:
            self._start_api()

        await self.bot.start(self.settings.discord_token)

    def _start_api(self) -> None:
        config = uvicorn.Config(
            create_app(self.service, self.settings.api),
            host=self.settings.api.host,
            port=self.settings.api.port,
            log_config=None,  # Keep the rich handlers from setup_logging()
        )
        self.api_server = uvicorn.Server(config)
        self._api_task = asyncio.create_task(self.api_server.serve(), name="query-api")

    async def _shutdown(self) -> None:
        if not self.bot.is_closed():
            await self.bot.close()

        if self.api_server is not None and self._api_task is not None:
            self.api_server.should_exit = True
            with suppress(asyncio.CancelledError):
                await self._api_task

        await self.listener.stop()
        await dispose_engines()

    def _log_summary(self, elapsed: float) -> None:
        """Log the final listener statistics."""
        stats = self.listener.stats
        logger.summary(
            created=stats.created,
            updated=stats.updated,
            deleted=stats.deleted,
            skipped=stats.skipped,
            failed=stats.failed,
            elapsed=elapsed,
        )


async def run_bot(config_path: str = "config.json", api_enabled: bool = True) -> None:
    """Entry point for running the message logger."""
    settings = load_config(config_path)
    runtime = LoggerRuntime(settings, api_enabled=api_enabled)
    await runtime.run()

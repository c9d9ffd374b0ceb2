"""Rich-based logging for the message logger bot.

Domain events (saved, updated, deleted, skipped, failed) go through Python
logging; the startup block and shutdown summary are printed to the shared
rich console.
"""

from __future__ import annotations

from typing import Any

from discord_logger.utils.pipeline_logger import BasePipelineLogger


class BotLogger(BasePipelineLogger):
    """Logger for message logging, commands and runtime lifecycle."""

    def __init__(self) -> None:
        super().__init__(__name__)

    # -------------------------------------------------------------------------
    # Message lifecycle
    # -------------------------------------------------------------------------

    def message_saved(self, message_id: int, author_name: str, channel_name: str) -> None:
        self._logger.info(
            f"Saved message {message_id} from {author_name} in #{channel_name}"
        )

    def message_exists(self, message_id: int) -> None:
        self._logger.debug(f"Message {message_id} already exists, skipping")

    def message_race(self, message_id: int) -> None:
        """Log a lost insert race on the unique message_id constraint."""
        self._logger.debug(
            f"Message {message_id} was stored concurrently, using existing record"
        )

    def message_updated(self, message_id: int, author_name: str) -> None:
        self._logger.info(f"Updated message {message_id} from {author_name}")

    def update_missing(self, message_id: int) -> None:
        self._logger.warning(
            f"Update for unknown message {message_id}, logging it as new"
        )

    def message_deleted(self, message_id: int) -> None:
        self._logger.info(f"Deleted message {message_id}")

    def delete_missing(self, message_id: int) -> None:
        self._logger.warning(f"Attempted to delete non-existent message {message_id}")

    def operation_failed(
        self, operation: str, message_id: Any, exc: BaseException
    ) -> None:
        self.exception(f"Error during {operation} of message {message_id}: {exc}", exc)

    # -------------------------------------------------------------------------
    # Gateway events
    # -------------------------------------------------------------------------

    def event_skipped(self, message_id: Any, reason: str) -> None:
        self._logger.debug(f"Skipped message {message_id}: {reason}")

    def event_failed(self, event_type: str, message_id: Any, exc: BaseException) -> None:
        self.exception(
            f"Error processing message {event_type} event for {message_id}: {exc}",
            exc,
        )

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def command_received(self, name: str, user: Any) -> None:
        self._logger.debug(f"/{name} invoked by {user}")

    def unknown_command(self, name: str) -> None:
        self._logger.info(f"Unknown command: {name}")

    def command_failed(self, name: str, exc: BaseException) -> None:
        self.exception(f"Error handling slash command {name}: {exc}", exc)

    # -------------------------------------------------------------------------
    # Runtime
    # -------------------------------------------------------------------------

    def bot_ready(
        self,
        user: Any,
        guild_count: int,
        commands_synced: int,
        api_url: str | None = None,
    ) -> None:
        """Print the startup block once the gateway session is ready."""
        with self.block("Discord Message Logger") as block:
            block.field("user", user)
            block.field("guilds", guild_count)
            if api_url:
                block.field("api", api_url, color="cyan")
            else:
                block.field("api", "disabled", color="yellow")
            block.result(f"synced {commands_synced} slash commands")

    def summary(
        self,
        created: int = 0,
        updated: int = 0,
        deleted: int = 0,
        skipped: int = 0,
        failed: int = 0,
        elapsed: float = 0.0,
        **kwargs: Any,
    ) -> None:
        """Print the shutdown summary."""
        self.print_summary(
            "Message Logger",
            elapsed=elapsed,
            stats={
                "Messages logged": created,
                "Messages updated": updated,
                "Messages deleted": deleted,
                "Events skipped": skipped,
                "Events failed": failed,
            },
            style="cyan",
        )


# Global logger instance
logger = BotLogger()

"""Tests for discord_logger.utils.pipeline_logger and discord_logger.ingest.logger."""

from __future__ import annotations

from io import StringIO
from typing import Any
from unittest.mock import MagicMock

from rich.console import Console

from discord_logger.ingest.logger import BotLogger
from discord_logger.utils.pipeline_logger import BasePipelineLogger, StructuredBlock


def _capturing_console() -> Console:
    return Console(file=StringIO(), force_terminal=True, width=120)


def _read(console: Console) -> str:
    console.file.seek(0)
    return console.file.read()


class ConcreteLogger(BasePipelineLogger):
    """Concrete implementation for testing the abstract base class."""

    def __init__(self) -> None:
        super().__init__("test_logger")
        # Replace console with a string-capturing one for assertions
        self.console = _capturing_console()

    def summary(self, **kwargs: Any) -> None:
        self.print_summary("Test", elapsed=0.0, stats={})

    def get_output(self) -> str:
        return _read(self.console)


# ---------------------------------------------------------------------------
# TestStructuredBlock
# ---------------------------------------------------------------------------


class TestStructuredBlock:
    """Tests for StructuredBlock context manager."""

    def test_prints_title_on_enter(self) -> None:
        logger = ConcreteLogger()

        with logger.block("My Block"):
            pass

        assert "My Block" in logger.get_output()

    def test_field_prints_key_value(self) -> None:
        logger = ConcreteLogger()

        with logger.block("Block") as b:
            b.field("guilds", 12345)

        output = logger.get_output()
        assert "guilds:" in output
        assert "12345" in output

    def test_field_with_color(self) -> None:
        logger = ConcreteLogger()

        with logger.block("Block") as b:
            b.field("api", "disabled", color="yellow")

        output = logger.get_output()
        assert "api:" in output
        assert "disabled" in output

    def test_result_failure(self) -> None:
        logger = ConcreteLogger()

        with logger.block("Block") as b:
            b.result("sync failed", success=False)

        assert "sync failed" in logger.get_output()

    def test_skip(self) -> None:
        logger = ConcreteLogger()

        with logger.block("Block") as b:
            b.skip("api disabled")

        assert "Skipped: api disabled" in logger.get_output()


# ---------------------------------------------------------------------------
# TestBasePipelineLogger
# ---------------------------------------------------------------------------


class TestBasePipelineLogger:
    """Tests for BasePipelineLogger base class."""

    def test_info_delegates_to_python_logger(self) -> None:
        logger = ConcreteLogger()
        logger._logger = MagicMock()

        logger.info("test message")

        logger._logger.info.assert_called_once_with("test message")

    def test_warning_delegates_to_python_logger(self) -> None:
        logger = ConcreteLogger()
        logger._logger = MagicMock()

        logger.warning("warn message")

        logger._logger.warning.assert_called_once_with("warn message")

    def test_exception_attaches_traceback(self) -> None:
        logger = ConcreteLogger()
        logger._logger = MagicMock()
        exc = RuntimeError("boom")

        logger.exception("failed", exc)

        logger._logger.error.assert_called_once_with("failed", exc_info=exc)

    def test_success_prints_checkmark(self) -> None:
        logger = ConcreteLogger()

        logger.success("done")

        assert "done" in logger.get_output()

    def test_block_yields_structured_block(self) -> None:
        logger = ConcreteLogger()

        with logger.block("test") as b:
            assert isinstance(b, StructuredBlock)

    def test_print_summary_outputs_panel(self) -> None:
        logger = ConcreteLogger()

        logger.print_summary(
            "Test Service",
            elapsed=12.3,
            stats={"Messages": 1500, "Label": "value"},
        )

        output = logger.get_output()
        assert "Test Service Stopped" in output
        assert "1,500" in output
        assert "Uptime" in output
        assert "12.3s" in output


# ---------------------------------------------------------------------------
# TestBotLogger
# ---------------------------------------------------------------------------


class TestBotLogger:
    """Tests for BotLogger (the concrete subclass in ingest/logger.py)."""

    def test_delete_missing_logs_warning(self) -> None:
        logger = BotLogger()
        logger._logger = MagicMock()

        logger.delete_missing(1001)

        logger._logger.warning.assert_called_once()
        assert "1001" in logger._logger.warning.call_args[0][0]

    def test_operation_failed_logs_error_with_traceback(self) -> None:
        logger = BotLogger()
        logger._logger = MagicMock()
        exc = RuntimeError("db down")

        logger.operation_failed("ingest", 1001, exc)

        msg = logger._logger.error.call_args[0][0]
        assert "ingest" in msg
        assert "1001" in msg
        assert logger._logger.error.call_args.kwargs["exc_info"] is exc

    def test_unknown_command_is_info(self) -> None:
        logger = BotLogger()
        logger._logger = MagicMock()

        logger.unknown_command("dance")

        logger._logger.info.assert_called_once_with("Unknown command: dance")
        logger._logger.error.assert_not_called()

    def test_event_skipped_is_debug(self) -> None:
        logger = BotLogger()
        logger._logger = MagicMock()

        logger.event_skipped("1", "webhook message")

        assert "webhook message" in logger._logger.debug.call_args[0][0]

    def test_bot_ready_block(self) -> None:
        logger = BotLogger()
        logger.console = _capturing_console()

        logger.bot_ready("logger#0001", guild_count=3, commands_synced=4)

        output = _read(logger.console)
        assert "Discord Message Logger" in output
        assert "logger#0001" in output
        assert "disabled" in output
        assert "synced 4 slash commands" in output

    def test_summary_calls_print_summary(self) -> None:
        logger = BotLogger()
        logger.console = _capturing_console()

        logger.summary(created=10, updated=2, deleted=1, skipped=4, failed=0, elapsed=5.5)

        output = _read(logger.console)
        assert "Message Logger Stopped" in output
        assert "Messages logged" in output
        assert "5.5s" in output

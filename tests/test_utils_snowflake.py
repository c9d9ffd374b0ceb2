"""Tests for discord_logger.utils.snowflake module."""

from __future__ import annotations

from datetime import datetime, timezone

from discord_logger.utils.snowflake import DISCORD_EPOCH, snowflake_to_datetime


def test_snowflake_to_datetime_known_value() -> None:
    """Should convert a known snowflake to the expected datetime."""
    ms = DISCORD_EPOCH + 1_234_567
    snowflake = (ms - DISCORD_EPOCH) << 22

    result = snowflake_to_datetime(snowflake)

    assert result == datetime.fromtimestamp(ms / 1000, tz=timezone.utc)


def test_snowflake_zero_is_discord_epoch() -> None:
    """The lowest snowflake maps to the start of 2015."""
    assert snowflake_to_datetime(0) == datetime(2015, 1, 1, tzinfo=timezone.utc)


def test_ignores_low_bits() -> None:
    """Worker, process and increment bits do not affect the time."""
    base = 1_000 << 22

    assert snowflake_to_datetime(base) == snowflake_to_datetime(base | 0x3FFFFF)

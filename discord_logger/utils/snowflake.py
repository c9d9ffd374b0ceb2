# discord_logger/utils/snowflake.py
from __future__ import annotations

from datetime import datetime, timezone

DISCORD_EPOCH = 1420070400000  # 2015-01-01 UTC (ms)


def snowflake_to_datetime(snowflake: int) -> datetime:
    ms = (snowflake >> 22) + DISCORD_EPOCH
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)

# discord_logger/utils/ids.py
from __future__ import annotations


def parse_snowflake(value: str | int | None) -> int | None:
    if value is None or value == "":
        return None
    return int(value)

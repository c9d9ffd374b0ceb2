from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_iso8601(value: str | datetime | None) -> Optional[datetime]:
    """
    Parse an ISO8601 timestamp from Discord into a timezone-aware UTC datetime.

    Discord timestamps are always UTC (Z or +00:00). Datetime objects coming
    from discord.py are passed through and normalized.
    """
    if not value:
        return None

    if isinstance(value, datetime):
        return ensure_utc(value)

    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return ensure_utc(dt)

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, BigInteger, DateTime, Integer
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.types import TypeDecorator


class TZDateTime(TypeDecorator):
    """Timezone-aware datetime type that ensures UTC storage."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(
        self, value: datetime | None, dialect: Any
    ) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(
        self, value: datetime | None, dialect: Any
    ) -> datetime | None:
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


def utcnow() -> datetime:
    """Callable default for timezone-aware UTC timestamps."""
    return datetime.now(timezone.utc)


# Discord snowflakes
Snowflake = BigInteger

# SQLite only autoincrements INTEGER PRIMARY KEY columns
SurrogateKey = BigInteger().with_variant(Integer(), "sqlite")

# Nested documents: JSONB on PostgreSQL, plain JSON elsewhere
JsonDocument = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Declarative base for all message logger ORM models."""

    type_annotation_map = {
        int: BigInteger,
    }

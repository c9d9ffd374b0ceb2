"""Shared fixtures for discord-logger tests."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any, Callable

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from discord_logger.db.models import Base


def make_payload(
    message_id: int = 1001,
    content: str = "Hello World",
    channel_id: int = 500,
    author_id: int = 42,
    **overrides: Any,
) -> dict[str, Any]:
    """Build a serialized message payload as produced by the gateway adapter."""
    payload: dict[str, Any] = {
        "id": str(message_id),
        "channel_id": str(channel_id),
        "channel_name": "general",
        "guild_id": "900",
        "guild_name": "Test Guild",
        "author": {
            "id": str(author_id),
            "username": "alice",
            "discriminator": "0",
            "bot": False,
        },
        "webhook_id": None,
        "content": content,
        "timestamp": "2024-01-15T10:30:00+00:00",
        "edited_timestamp": None,
        "type": 0,
        "attachments": [],
        "embeds": [],
        "reactions": [],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def payload_factory() -> Callable[..., dict[str, Any]]:
    return make_payload


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """A full message payload with an attachment, an embed and a reaction."""
    return make_payload(
        attachments=[
            {
                "id": "7001",
                "filename": "cat.png",
                "url": "https://cdn.discordapp.com/attachments/cat.png",
                "proxy_url": "https://media.discordapp.net/attachments/cat.png",
                "size": 2048,
                "content_type": "image/png",
            }
        ],
        embeds=[
            {
                "title": "Link",
                "description": "A linked page",
                "url": "https://example.com",
                "color": 16711680,
                "footer": {"text": "footer"},
                "author": {"name": "Example"},
                "fields": [{"name": "Key", "value": "Value", "inline": True}],
            }
        ],
        reactions=[{"emoji": {"id": None, "name": "👍"}, "count": 3}],
    )


@pytest_asyncio.fixture
async def session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Session factory bound to a fresh in-memory SQLite database."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(bind=engine, expire_on_commit=False)

    await engine.dispose()

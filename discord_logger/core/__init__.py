"""Base runtime for long-running services.

Provides common infrastructure for the bot runtime:
- Database engine and session management
- Schema initialization
- Uptime tracking and a common run() lifecycle

Usage:
    class MyRuntime(BaseRuntime):
        async def _serve(self):
            # Run until stopped
            pass

        async def _shutdown(self):
            # Release resources
            pass

        def _log_summary(self, elapsed):
            # Log final statistics
            pass
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from sqlalchemy import text

from discord_logger.db.engine import get_async_session, get_engine
from discord_logger.db.models import Base

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker


class BaseRuntime(ABC):
    """Abstract base class for service runtimes.

    Provides:
    - Database engine and session factory (cached)
    - Table initialization
    - Timing infrastructure

    Subclasses must implement:
    - _serve(): Run until the service stops
    - _shutdown(): Release resources, called even if _serve() fails
    - _log_summary(): Log final statistics
    """

    def __init__(self, database_url: str) -> None:
        """Initialize the runtime.

        Args:
            database_url: Database connection URL.
        """
        self.database_url = database_url
        self.engine: AsyncEngine = get_engine(database_url)
        self.async_session: async_sessionmaker[AsyncSession] = get_async_session(
            database_url
        )
        self.start_time: float = 0.0

    async def init_db(self) -> None:
        """Create tables if they don't exist.

        On PostgreSQL the pg_trgm extension is created first; the content
        search index depends on it.
        """
        async with self.engine.begin() as conn:
            if conn.dialect.name == "postgresql":
                await conn.execute(text("CREATE EXTENSION IF NOT EXISTS pg_trgm"))
            await conn.run_sync(Base.metadata.create_all)

    async def run(self) -> None:
        """Initialize the database, serve until stopped, then shut down."""
        self.start_time = time.time()

        await self.init_db()
        try:
            await self._serve()
        finally:
            await self._shutdown()
            elapsed = time.time() - self.start_time
            self._log_summary(elapsed)

    @abstractmethod
    async def _serve(self) -> None:
        """Run the service until it stops."""
        ...

    @abstractmethod
    async def _shutdown(self) -> None:
        """Release everything _serve() acquired."""
        ...

    @abstractmethod
    def _log_summary(self, elapsed: float) -> None:
        """Log the final summary statistics.

        Args:
            elapsed: Total time elapsed in seconds.
        """
        ...

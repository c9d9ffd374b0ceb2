"""Repository layer for database operations.

Provides clean separation between data access and business logic.
"""

from discord_logger.db.repositories.message_repository import MessageRepository

__all__ = [
    "MessageRepository",
]

"""Application services."""

from discord_logger.services.message_logger import ChannelStats, MessageLoggerService

__all__ = [
    "ChannelStats",
    "MessageLoggerService",
]

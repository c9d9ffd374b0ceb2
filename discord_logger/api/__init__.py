"""HTTP query API over logged messages."""

from discord_logger.api.app import create_app

__all__ = ["create_app"]

"""Message Logger Database Models.

All models use SQLAlchemy 2.0 syntax. PostgreSQL is the production dialect;
nested documents fall back to plain JSON elsewhere.
"""

from discord_logger.db.base import Base
from discord_logger.db.models.documents import (
    AttachmentDocument,
    EmbedDocument,
    EmbedFieldDocument,
    MessageDocument,
    ReactionDocument,
)
from discord_logger.db.models.message import Message

__all__ = [
    "Base",
    "AttachmentDocument",
    "EmbedDocument",
    "EmbedFieldDocument",
    "Message",
    "MessageDocument",
    "ReactionDocument",
]

"""Typed message lifecycle events.

Gateway callbacks only build one of these and enqueue it; everything after
that works on plain Discord-API-shaped dicts, so tests inject events directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass
class MessageCreated:
    """A message was posted. `data` is a serialized message payload."""

    data: dict[str, Any]

    @property
    def message_id(self) -> Any:
        return self.data.get("id")


@dataclass
class MessageUpdated:
    """A message was edited. `data` is the full current message payload."""

    data: dict[str, Any]

    @property
    def message_id(self) -> Any:
        return self.data.get("id")


@dataclass
class MessageDeleted:
    """A message was deleted."""

    message_id: int
    channel_id: int | None = None


GatewayEvent = Union[MessageCreated, MessageUpdated, MessageDeleted]

"""Eligibility rules for inbound messages.

Only messages authored by real participants are logged: webhook posts and
system-generated messages (joins, pins, boosts, ...) are dropped before they
reach the service.
"""

from __future__ import annotations

from typing import Any

from discord import MessageType

# Types discord.py does not consider system messages.
USER_MESSAGE_TYPES = frozenset(
    {
        MessageType.default.value,
        MessageType.reply.value,
        MessageType.chat_input_command.value,
        MessageType.thread_starter_message.value,
        MessageType.context_menu_command.value,
    }
)


def is_webhook(data: dict[str, Any]) -> bool:
    return data.get("webhook_id") is not None


def is_system(data: dict[str, Any]) -> bool:
    return data.get("type", MessageType.default.value) not in USER_MESSAGE_TYPES


def ineligible_reason(data: dict[str, Any]) -> str | None:
    """Return why a message payload must not be logged, or None if it may."""
    if is_webhook(data):
        return "webhook message"
    if is_system(data):
        return "system message"
    return None


def is_eligible(data: dict[str, Any]) -> bool:
    return ineligible_reason(data) is None

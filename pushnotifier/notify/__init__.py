"""Notification package."""

from .pushover import (
    PushoverClient,
    SendResult,
    PUSHOVER_URL,
    elapsed_message,
)

__all__ = [
    "PushoverClient",
    "SendResult",
    "PUSHOVER_URL",
    "elapsed_message",
]

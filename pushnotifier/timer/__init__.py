"""Timer package."""

from .cancellation import CancellationToken, OperationCancelled
from .durations import format_duration, parse_duration
from .engine import (
    CountdownController,
    CountdownState,
    TimerSession,
    TICK_INTERVAL_MS,
    STATUS_WAITING,
)

__all__ = [
    "CancellationToken",
    "OperationCancelled",
    "format_duration",
    "parse_duration",
    "CountdownController",
    "CountdownState",
    "TimerSession",
    "TICK_INTERVAL_MS",
    "STATUS_WAITING",
]

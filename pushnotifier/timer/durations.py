"""Parsing and formatting of ``hh:mm:ss`` duration strings."""

from __future__ import annotations

import math
import re
from datetime import timedelta

from ..errors import ValidationError


_DURATION_RE = re.compile(r"^(\d{2}):(\d{2}):(\d{2})$")

INVALID_DURATION_MESSAGE = "Please enter a valid time in hh:mm:ss format."


def parse_duration(text: str) -> timedelta:
    """Parse ``hh:mm:ss`` into a timedelta.

    Hours run 00-23, minutes and seconds 00-59.  Raises
    ``ValidationError`` for anything else.
    """
    match = _DURATION_RE.match((text or "").strip())
    if match is None:
        raise ValidationError(INVALID_DURATION_MESSAGE)
    hours, minutes, seconds = (int(part) for part in match.groups())
    if hours > 23 or minutes > 59 or seconds > 59:
        raise ValidationError(INVALID_DURATION_MESSAGE)
    return timedelta(hours=hours, minutes=minutes, seconds=seconds)


def is_valid_duration(text: str) -> bool:
    try:
        parse_duration(text)
    except ValidationError:
        return False
    return True


def format_duration(value: timedelta | float | int) -> str:
    """Format seconds (or a timedelta) as ``hh:mm:ss``.

    Fractions of a second round up so a running countdown only shows
    ``00:00:00`` once the time is really up.
    """
    if isinstance(value, timedelta):
        value = value.total_seconds()
    total = max(0, math.ceil(value))
    h, rem = divmod(total, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"

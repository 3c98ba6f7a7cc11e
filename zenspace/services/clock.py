"""Conversion between ``HH:MM`` clock strings and minute offsets."""

from __future__ import annotations

import math
import re

from zenspace.domain.errors import MalformedTimeError, OutOfRangeError

MINUTES_PER_DAY = 24 * 60
SLOT_MINUTES = 15

_CLOCK_RE = re.compile(r"([01]\d|2[0-3]):([0-5]\d)")


def time_to_minutes(text: str) -> int:
    """Return the number of minutes since 00:00 for an ``HH:MM`` string.

    ``24:00`` is accepted as the end of the day. Any other shape raises
    ``MalformedTimeError``.
    """
    if not isinstance(text, str):
        raise MalformedTimeError(f"Expected an HH:MM string, got {text!r}")
    if text == "24:00":
        return MINUTES_PER_DAY
    match = _CLOCK_RE.fullmatch(text)
    if match is None:
        raise MalformedTimeError(f"Invalid clock time {text!r}, expected HH:MM")
    return int(match.group(1)) * 60 + int(match.group(2))


def minutes_to_time(minutes: int) -> str:
    """Format a minute offset within a single day as ``HH:MM``."""
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise OutOfRangeError(f"Expected an integer minute offset, got {minutes!r}")
    if not 0 <= minutes <= MINUTES_PER_DAY:
        raise OutOfRangeError(
            f"Minute offset {minutes} is outside 0..{MINUTES_PER_DAY}"
        )
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def snap_minutes(minutes: float, step: int = SLOT_MINUTES) -> int:
    """Round *minutes* to the nearest multiple of *step*."""
    return math.floor(minutes / step + 0.5) * step

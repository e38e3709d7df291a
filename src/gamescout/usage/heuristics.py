"""Unit and date guessing for loosely structured usage data.

Vendors that do not publish a usage store leave time-played numbers and
last-played dates in config, log and save files with no declared unit or
format. These pure functions turn such raw values into hours and
datetimes.

Both guesses are approximate by construction. A raw ``7200`` could be two
hours of seconds or 120 hours of minutes; magnitude is the only signal
available, so results must be treated as estimates, never as exact
accounting.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

# Raw integers above this many digits' worth are millisecond timestamps.
MILLISECOND_THRESHOLD = 10_000_000_000
# Integers at or below this are too small to be a plausible Unix timestamp.
MIN_UNIX_TIMESTAMP = 1_000_000_000

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}")
_DIGITS = re.compile(r"^\d+$")


@dataclass(frozen=True)
class UnitThresholds:
    """Magnitude cut-offs for guessing the unit of a time-played value.

    Attributes:
        seconds_above: Values strictly above this are taken as seconds.
        minutes_above: Values strictly above this (and not above
            ``seconds_above``) are taken as minutes. Anything smaller is
            taken as hours already.
    """

    seconds_above: float = 3600.0
    minutes_above: float = 60.0


DEFAULT_THRESHOLDS = UnitThresholds()


def normalize_hours(raw: float, thresholds: UnitThresholds = DEFAULT_THRESHOLDS) -> float:
    """Convert a raw time-played number of unknown unit to hours.

    Examples (default thresholds)::

        normalize_hours(7200)  # 2.0, seconds
        normalize_hours(90)    # 1.5, minutes
        normalize_hours(5)     # 5.0, already hours

    Args:
        raw: Non-negative number read from a vendor file.
        thresholds: Magnitude cut-offs.

    Returns:
        The estimated number of hours.
    """
    value = float(raw)
    if value > thresholds.seconds_above:
        return value / 3600.0
    if value > thresholds.minutes_above:
        return value / 60.0
    return value


def parse_activity_date(raw: str | int | float) -> datetime | None:
    """Interpret a raw last-played field as a datetime.

    Accepts an ISO date (``2024-03-01``) or ISO datetime, or a Unix
    timestamp in seconds or milliseconds. Integers greater than
    ``MILLISECOND_THRESHOLD`` are taken as milliseconds.

    Returns:
        The parsed local datetime, or ``None`` if the value fits none of
        the recognized forms.
    """
    text = str(raw).strip().strip("\"'")
    if not text:
        return None

    if _DIGITS.match(text):
        timestamp = int(text)
        if timestamp <= MIN_UNIX_TIMESTAMP:
            return None
        if timestamp > MILLISECOND_THRESHOLD:
            timestamp //= 1000
        try:
            return datetime.fromtimestamp(timestamp)
        except (OverflowError, OSError, ValueError):
            return None

    if _ISO_DATE.match(text):
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            try:
                parsed = datetime.fromisoformat(text[:10])
            except ValueError:
                return None
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone().replace(tzinfo=None)
        return parsed

    return None

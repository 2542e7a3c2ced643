"""Spreadsheet serial date/time decoding."""

from __future__ import annotations

import math
from datetime import date, timedelta

# Serials from 61 (1900-03-01) on agree with spreadsheet dates; the fictitious
# 1900-02-29 is not corrected for.
SERIAL_EPOCH = date(1899, 12, 30)
SECONDS_PER_DAY = 86_400


def _round_half_up(value: float) -> int:
    # Non-negative input only; ties go up, unlike the built-in round().
    whole = math.floor(value)
    return whole + 1 if value - whole >= 0.5 else whole


def decode(serial: float) -> tuple[str, str]:
    """Return ``(YYYY-MM-DD, HH:MM:SS)`` for a spreadsheet serial number.

    The integer part counts days from :data:`SERIAL_EPOCH`, the fractional part
    is a fraction of a 24-hour day rounded to the nearest second, with ties
    rounding up. A fraction that rounds up to a full day rolls over to midnight
    of the next date.

    Raises
    ------
    ValueError
        If *serial* is NaN or infinite.
    OverflowError
        If the resulting date is outside the supported calendar range.
    """
    if not math.isfinite(serial):
        raise ValueError(f"Serial date/time must be finite, got {serial!r}")

    whole_days = math.floor(serial)
    seconds_in_day = _round_half_up((serial - whole_days) * SECONDS_PER_DAY)
    if seconds_in_day >= SECONDS_PER_DAY:
        whole_days += 1
        seconds_in_day -= SECONDS_PER_DAY

    day = SERIAL_EPOCH + timedelta(days=whole_days)
    hours, remainder = divmod(seconds_in_day, 3600)
    minutes, seconds = divmod(remainder, 60)
    return day.isoformat(), f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def decode_timestamp(serial: float) -> str:
    """Return ``"YYYY-MM-DD HH:MM:SS"`` for *serial*."""
    date_str, time_str = decode(serial)
    return f"{date_str} {time_str}"

"""Numeric helpers shared by the timeline analytics.

Python's ``round`` rounds half to even; match-minute bucketing and the
published averages round halves up instead.
"""

from __future__ import annotations

import math
from typing import Final

MS_PER_MINUTE: Final[int] = 60_000


def round_half_up(value: float, digits: int = 0) -> float:
    """Round to ``digits`` decimals, halves rounding toward +infinity."""

    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    """Half-up rounding to an int."""

    return int(math.floor(value + 0.5))


def minute_of(timestamp_ms: int) -> int:
    """Nearest whole match minute for a millisecond timestamp."""

    return round_int(timestamp_ms / MS_PER_MINUTE)


def floor_minute_of(timestamp_ms: int) -> int:
    """Whole match minutes elapsed at a millisecond timestamp."""

    return timestamp_ms // MS_PER_MINUTE


def safe_ratio(numerator: float, denominator: float) -> float:
    """``numerator / denominator``, or 0.0 when the denominator is zero."""

    if not denominator:
        return 0.0
    return numerator / denominator


def safe_percent(numerator: float, denominator: float) -> float:
    """Percentage of ``numerator`` over ``denominator``, 0.0 when empty."""

    return safe_ratio(numerator, denominator) * 100

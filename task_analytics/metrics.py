"""Shared numeric helpers for analytics outputs."""

from __future__ import annotations

import math

SECONDS_PER_DAY = 86400.0


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves towards +infinity, as dashboards display them.

    Python's ``round`` uses banker's rounding, which would turn 2.5 into 2.
    """

    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def round_pct(value: float) -> int:
    return int(round_half_up(value))


def trend_pct(current: float, previous: float, *, when_no_baseline: int) -> int:
    """Relative change from ``previous`` to ``current`` as an integer percent."""

    if previous == 0:
        return when_no_baseline
    return round_pct((current - previous) / previous * 100.0)


def days_between(start, end) -> float:
    return (end - start).total_seconds() / SECONDS_PER_DAY

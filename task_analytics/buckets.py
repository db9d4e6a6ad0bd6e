"""Calendar-day bucketing for trailing windows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo

from task_analytics.errors import InvalidArgument

_WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True)
class DayBucket:
    day: date
    start: datetime
    end: datetime
    label: str


def validate_days(days) -> int:
    if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
        raise InvalidArgument(f"days must be a positive integer, got {days!r}")
    return days


def weekday_label(day: date) -> str:
    """Short English weekday name, independent of process locale."""

    return _WEEKDAY_LABELS[day.weekday()]


def local_midnight(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def day_buckets(days: int, now: datetime, tz: tzinfo) -> list[DayBucket]:
    """Return ``days`` buckets, oldest first, ending with today in ``tz``."""

    validate_days(days)
    today = now.astimezone(tz).date()
    buckets: list[DayBucket] = []
    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        buckets.append(
            DayBucket(
                day=day,
                start=local_midnight(day, tz),
                end=local_midnight(day + timedelta(days=1), tz),
                label=weekday_label(day),
            )
        )
    return buckets

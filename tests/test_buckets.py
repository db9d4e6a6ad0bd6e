from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from helpers import NOW
from task_analytics.buckets import day_buckets, validate_days, weekday_label
from task_analytics.errors import InvalidArgument


def test_buckets_end_today_oldest_first():
    buckets = day_buckets(7, NOW, timezone.utc)
    assert len(buckets) == 7
    assert [b.label for b in buckets] == ["Thu", "Fri", "Sat", "Sun", "Mon", "Tue", "Wed"]
    assert buckets[-1].day == NOW.date()
    assert all(b.start.hour == 0 and b.start.minute == 0 for b in buckets)
    assert all(earlier.day < later.day for earlier, later in zip(buckets, buckets[1:]))


def test_single_day_bucket_is_today():
    [bucket] = day_buckets(1, NOW, timezone.utc)
    assert bucket.label == "Wed"
    assert bucket.start <= NOW < bucket.end


def test_buckets_use_configured_zone():
    # 03:00 UTC on the 15th is still the 14th in New York.
    now = datetime(2025, 1, 15, 3, 0, tzinfo=timezone.utc)
    buckets = day_buckets(2, now, ZoneInfo("America/New_York"))
    assert [b.day.isoformat() for b in buckets] == ["2025-01-13", "2025-01-14"]
    assert buckets[-1].label == "Tue"


@pytest.mark.parametrize("days", [0, -3, 2.5, "7", True, None])
def test_invalid_day_counts(days):
    with pytest.raises(InvalidArgument):
        validate_days(days)


def test_weekday_label_is_locale_free():
    assert weekday_label(datetime(2025, 1, 13).date()) == "Mon"
    assert weekday_label(datetime(2025, 1, 19).date()) == "Sun"

"""Daily completion and creation trends."""

from __future__ import annotations

from datetime import datetime, tzinfo

from task_analytics.buckets import day_buckets
from task_analytics.schema import ACTION_CREATED, ACTION_STATUS_CHANGED, Status, TrendPoint
from task_analytics.scope import completion_trend_scope, creation_trend_scope
from task_analytics.source import EventFilter, EventSource, TimeRange


def completion_trends(
    source: EventSource,
    caller_id: str,
    scope,
    days: int,
    now: datetime,
    tz: tzinfo,
) -> list[TrendPoint]:
    """Return exactly ``days`` points, oldest first; empty days count as zero."""

    buckets = day_buckets(days, now, tz)
    window = TimeRange(start=buckets[0].start, end=now, end_inclusive=True)

    completions = dict(
        source.group_events_by_day(
            EventFilter(
                action=ACTION_STATUS_CHANGED,
                new_value=Status.COMPLETED.value,
                task_scope=completion_trend_scope(caller_id, scope),
            ),
            window,
            tz,
        )
    )
    creations = dict(
        source.group_events_by_day(
            EventFilter(action=ACTION_CREATED, task_scope=creation_trend_scope(caller_id, scope)),
            window,
            tz,
        )
    )

    return [
        TrendPoint(
            date_label=bucket.label,
            completed_count=int(completions.get(bucket.day, 0)),
            created_count=int(creations.get(bucket.day, 0)),
        )
        for bucket in buckets
    ]

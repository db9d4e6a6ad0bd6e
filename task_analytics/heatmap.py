"""Completion counts per calendar date."""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta, timezone

from task_analytics.schema import ACTION_STATUS_CHANGED, HeatmapPoint, Status
from task_analytics.scope import heatmap_scope
from task_analytics.source import EventFilter, EventSource, TimeRange


def activity_heatmap(
    source: EventSource,
    caller_id: str,
    scope,
    now: datetime,
    window_days: int = 90,
) -> dict[str, int]:
    """Map UTC ISO date -> completions; dates without completions are absent."""

    events = source.list_events(
        EventFilter(
            action=ACTION_STATUS_CHANGED,
            new_value=Status.COMPLETED.value,
            task_scope=heatmap_scope(caller_id, scope),
        ),
        TimeRange(start=now - timedelta(days=window_days), end=now, end_inclusive=True),
    )
    counts = Counter(event.created_at.astimezone(timezone.utc).date().isoformat() for event in events)
    return dict(sorted(counts.items()))


def heatmap_points(heatmap: dict[str, int]) -> list[HeatmapPoint]:
    return [HeatmapPoint(date=day, count=count) for day, count in sorted(heatmap.items())]

"""Throughput, lead time and composite performance score."""

from __future__ import annotations

from datetime import datetime, timedelta

import numpy as np

from task_analytics.buckets import validate_days
from task_analytics.clock import ensure_aware
from task_analytics.metrics import SECONDS_PER_DAY, round_half_up, trend_pct
from task_analytics.schema import ACTION_STATUS_CHANGED, HistoryEvent, ProductivityMetrics, Status
from task_analytics.scope import productivity_scope
from task_analytics.source import EventFilter, EventSource, TimeRange

VELOCITY_WEIGHT = 400.0
SPEED_WEIGHT = 300.0
VOLUME_WEIGHT = 300.0
TARGET_LEAD_DAYS = 2.0
MIN_LEAD_DAYS = 0.1
TARGET_VOLUME = 20.0
MAX_SCORE = 999


def average_lead_days(events: list[HistoryEvent]) -> float:
    """Mean days from task creation to completion; 0.0 without samples."""

    samples = [
        (event.created_at - ensure_aware(event.task_created_at)).total_seconds()
        for event in events
        if event.task_created_at is not None
    ]
    if not samples:
        return 0.0
    return float(np.maximum(np.asarray(samples, dtype=float), 0.0).mean() / SECONDS_PER_DAY)


def performance_score(completed: int, avg_lead_days: float, days: int, volume_count: int) -> int:
    """Weighted velocity + speed + volume score clamped to [0, 999].

    Speed only contributes once there is at least one completion to measure.
    """

    velocity = min(VELOCITY_WEIGHT, (completed / days) * VELOCITY_WEIGHT) if days > 0 else 0.0
    if volume_count > 0:
        speed = min(SPEED_WEIGHT, (TARGET_LEAD_DAYS / max(MIN_LEAD_DAYS, avg_lead_days)) * SPEED_WEIGHT)
    else:
        speed = 0.0
    volume = min(VOLUME_WEIGHT, (volume_count / TARGET_VOLUME) * VOLUME_WEIGHT)
    score = int(round_half_up(velocity + speed + volume))
    return max(0, min(MAX_SCORE, score))


def productivity_metrics(
    source: EventSource,
    caller_id: str,
    scope,
    days: int,
    now: datetime,
) -> ProductivityMetrics:
    validate_days(days)
    period = timedelta(days=days)
    period_start = now - period
    prev_period_start = now - 2 * period

    completions = EventFilter(
        action=ACTION_STATUS_CHANGED,
        new_value=Status.COMPLETED.value,
        task_scope=productivity_scope(caller_id, scope),
    )
    current = TimeRange(start=period_start, end=now)
    previous = TimeRange(start=prev_period_start, end=period_start)

    completed_this_period = source.count_events(completions, current)
    completed_prev_period = source.count_events(completions, previous)

    current_events = source.list_events(completions, current, include_task_meta=True)
    previous_events = source.list_events(completions, previous, include_task_meta=True)

    avg_lead = average_lead_days(current_events)
    prev_avg_lead = average_lead_days(previous_events)

    # Reported under two names from a single computation.
    completion_trend = trend_pct(completed_this_period, completed_prev_period, when_no_baseline=100)
    lead_time_trend = trend_pct(avg_lead, prev_avg_lead, when_no_baseline=0)

    return ProductivityMetrics(
        completed_this_period=completed_this_period,
        avg_lead_time_days=round_half_up(avg_lead, 1),
        total_completed=completed_this_period,
        performance_score=performance_score(completed_this_period, avg_lead, days, len(current_events)),
        throughput_trend_pct=completion_trend,
        # Shorter lead time is an improvement, so report it as a positive trend.
        lead_time_trend_pct=-lead_time_trend,
        productivity_trend_pct=completion_trend,
    )

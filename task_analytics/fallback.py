"""Caller-side degradation to a zeroed baseline when the store is unavailable."""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import Optional

from task_analytics.buckets import day_buckets
from task_analytics.efficiency import DEFAULT_REVIEW_FALLBACK_DAYS, TRACKED_STATUSES
from task_analytics.errors import DataUnavailable
from task_analytics.schema import (
    Dashboard,
    EfficiencyRow,
    PriorityDistribution,
    ProductivityMetrics,
    Status,
    TrendPoint,
)

logger = logging.getLogger(__name__)


def zero_productivity() -> ProductivityMetrics:
    return ProductivityMetrics(
        completed_this_period=0,
        avg_lead_time_days=0.0,
        total_completed=0,
        performance_score=0,
        throughput_trend_pct=100,
        lead_time_trend_pct=0,
        productivity_trend_pct=100,
    )


def zero_dashboard(
    days: int, now: datetime, tz: tzinfo, review_fallback_days: float = DEFAULT_REVIEW_FALLBACK_DAYS
) -> Dashboard:
    """The dashboard an empty store would produce."""

    return Dashboard(
        trends=[TrendPoint(bucket.label, 0, 0) for bucket in day_buckets(days, now, tz)],
        priorities=PriorityDistribution(),
        productivity=zero_productivity(),
        efficiency=[
            EfficiencyRow(status, review_fallback_days if status == Status.REVIEW.value else 0.0)
            for status in TRACKED_STATUSES
        ],
        heatmap={},
        insights=[],
    )


def dashboard_or_fallback(engine, caller_id: str, scope="personal", days: Optional[int] = None) -> tuple[Dashboard, bool]:
    """Return ``(dashboard, degraded)``; only DataUnavailable is absorbed."""

    try:
        return engine.dashboard(caller_id, scope, days), False
    except DataUnavailable as exc:
        logger.warning("analytics unavailable, serving zeroed baseline: %s", exc)
        period = engine.config.default_days if days is None else days
        baseline = zero_dashboard(
            period, engine.clock.now(), engine.config.zone(), engine.config.review_fallback_days
        )
        return baseline, True

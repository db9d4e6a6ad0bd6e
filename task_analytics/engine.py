"""Analytics engine: the exposed operations over an event source."""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from datetime import datetime
from typing import Any, Callable, Optional

from task_analytics.buckets import validate_days
from task_analytics.clock import Clock, SystemClock, ensure_aware
from task_analytics.config import EngineConfig
from task_analytics.distribution import priority_distribution
from task_analytics.efficiency import efficiency_metrics
from task_analytics.errors import AnalyticsError, DataUnavailable
from task_analytics.heatmap import activity_heatmap
from task_analytics.insights import build_insights
from task_analytics.productivity import productivity_metrics
from task_analytics.schema import (
    Dashboard,
    EfficiencyRow,
    PriorityDistribution,
    ProductivityMetrics,
    Scope,
    TrendPoint,
)
from task_analytics.source import EventSource
from task_analytics.trends import completion_trends

logger = logging.getLogger(__name__)

_QUERY_METHODS = (
    "count_events",
    "group_events_by_day",
    "list_events",
    "list_tasks",
    "list_recent_completed_tasks_with_history",
)


class GuardedSource:
    """Wrap an EventSource so store failures surface as DataUnavailable."""

    def __init__(self, source: EventSource):
        self._source = source

    def __getattr__(self, name: str):
        target = getattr(self._source, name)
        if name not in _QUERY_METHODS:
            return target

        def guarded(*args, **kwargs):
            logger.debug("event source query %s", name)
            try:
                return target(*args, **kwargs)
            except AnalyticsError:
                raise
            except Exception as exc:  # noqa: BLE001
                logger.exception("event source query %s failed", name)
                raise DataUnavailable(f"event source query {name} failed: {exc}") from exc

        return guarded


class AnalyticsEngine:
    """Stateless facade; every call recomputes from the source and the clock."""

    def __init__(
        self,
        source: EventSource,
        clock: Optional[Clock] = None,
        config: Optional[EngineConfig] = None,
    ):
        self.source = GuardedSource(source)
        self.clock = clock or SystemClock()
        self.config = config or EngineConfig()

    def _days(self, days: Optional[int]) -> int:
        return validate_days(self.config.default_days if days is None else days)

    def _now(self, now: Optional[datetime] = None) -> datetime:
        """Naive instants, from the caller or the clock, are read as UTC."""

        return ensure_aware(now or self.clock.now())

    def trends(
        self, caller_id: str, scope="personal", days: Optional[int] = None, now: Optional[datetime] = None
    ) -> list[TrendPoint]:
        return completion_trends(
            self.source,
            caller_id,
            Scope.parse(scope),
            self._days(days),
            self._now(now),
            self.config.zone(),
        )

    def priorities(
        self, caller_id: str, scope="personal", days: Optional[int] = None, now: Optional[datetime] = None
    ) -> PriorityDistribution:
        return priority_distribution(self.source, caller_id, Scope.parse(scope))

    def productivity(
        self, caller_id: str, scope="personal", days: Optional[int] = None, now: Optional[datetime] = None
    ) -> ProductivityMetrics:
        return productivity_metrics(
            self.source, caller_id, Scope.parse(scope), self._days(days), self._now(now)
        )

    def efficiency(
        self, caller_id: str, scope="personal", days: Optional[int] = None, now: Optional[datetime] = None
    ) -> list[EfficiencyRow]:
        return efficiency_metrics(
            self.source,
            caller_id,
            Scope.parse(scope),
            limit=self.config.efficiency_sample_limit,
            review_fallback_days=self.config.review_fallback_days,
        )

    def heatmap(
        self, caller_id: str, scope="personal", days: Optional[int] = None, now: Optional[datetime] = None
    ) -> dict[str, int]:
        return activity_heatmap(
            self.source,
            caller_id,
            Scope.parse(scope),
            self._now(now),
            window_days=self.config.heatmap_days,
        )

    def insights(
        self, caller_id: str, scope="personal", days: Optional[int] = None, now: Optional[datetime] = None
    ) -> list[str]:
        return build_insights(
            self.source,
            caller_id,
            Scope.parse(scope),
            self._days(days),
            self._now(now),
            limit=self.config.insight_limit,
        )

    def dashboard(self, caller_id: str, scope="personal", days: Optional[int] = None) -> Dashboard:
        """Compute all six views concurrently against a single instant.

        Either every view completes or DataUnavailable is raised.
        """

        resolved = Scope.parse(scope)
        period = self._days(days)
        now = self._now()

        jobs: dict[str, Callable[..., Any]] = {
            "trends": self.trends,
            "priorities": self.priorities,
            "productivity": self.productivity,
            "efficiency": self.efficiency,
            "heatmap": self.heatmap,
            "insights": self.insights,
        }

        executor = ThreadPoolExecutor(max_workers=self.config.max_workers)
        try:
            futures = {name: executor.submit(job, caller_id, resolved, period, now) for name, job in jobs.items()}
            done, pending = wait(
                futures.values(), timeout=self.config.query_timeout_seconds, return_when=FIRST_EXCEPTION
            )
            for future in done:
                exc = future.exception()
                if exc is not None:
                    raise exc
            if pending:
                names = sorted(name for name, future in futures.items() if future in pending)
                logger.warning("dashboard timed out waiting for %s", ", ".join(names))
                raise DataUnavailable(
                    f"dashboard queries timed out after {self.config.query_timeout_seconds}s: {', '.join(names)}"
                )
            results = {name: future.result() for name, future in futures.items()}
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        logger.debug("dashboard computed for %s (%s, %d days)", caller_id, resolved.value, period)
        return Dashboard(**results)

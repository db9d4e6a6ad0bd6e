import time
from datetime import timezone

import pytest

from helpers import NOW, ago, completed, created, fixed_clock, make_task, moved, source_of
from task_analytics.config import EngineConfig
from task_analytics.engine import AnalyticsEngine
from task_analytics.errors import DataUnavailable, InvalidArgument
from task_analytics.fallback import dashboard_or_fallback, zero_dashboard
from task_analytics.schema import Priority, Status


class BrokenSource:
    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise ConnectionError("database is down")

        return fail


class SlowSource:
    def __init__(self, inner, delay):
        self._inner = inner
        self._delay = delay

    def __getattr__(self, name):
        target = getattr(self._inner, name)

        def slow(*args, **kwargs):
            time.sleep(self._delay)
            return target(*args, **kwargs)

        return slow


def sample_source():
    tasks = [
        make_task("a", status=Status.COMPLETED, created=ago(days=4), priority=Priority.HIGH),
        make_task("b", status=Status.IN_PROGRESS, priority=Priority.URGENT, due=ago(days=1)),
        make_task("c", creator="bob", assignee="bob", priority=Priority.LOW),
    ]
    history = [
        created("a", ago(days=4)),
        moved("a", "IN_PROGRESS", ago(days=3)),
        completed("a", ago(days=1)),
        created("b", ago(days=2)),
        created("c", ago(days=2)),
    ]
    return source_of(tasks, history)


def test_empty_store_personal_dashboard():
    engine = AnalyticsEngine(source_of(), clock=fixed_clock())
    dashboard = engine.dashboard("alice", "personal", days=7)

    assert [(p.date_label, p.completed_count, p.created_count) for p in dashboard.trends] == [
        (label, 0, 0) for label in ("Thu", "Fri", "Sat", "Sun", "Mon", "Tue", "Wed")
    ]
    assert dashboard.priorities.to_dict() == {"low": 0, "medium": 0, "high": 0, "urgent": 0}
    assert list(dashboard.productivity.to_dict().values()) == [0, 0.0, 0, 0, 100, 0, 100]
    assert {row.status: row.avg_days for row in dashboard.efficiency} == {"TODO": 0, "IN_PROGRESS": 0, "REVIEW": 0.5}
    assert dashboard.heatmap == {}
    assert dashboard.insights == []


def test_empty_store_matches_zero_baseline():
    engine = AnalyticsEngine(source_of(), clock=fixed_clock())
    assert engine.dashboard("alice", "personal", 7) == zero_dashboard(7, NOW, timezone.utc)


def test_dashboard_matches_individual_operations():
    engine = AnalyticsEngine(sample_source(), clock=fixed_clock())
    dashboard = engine.dashboard("alice", "global", days=7)
    assert dashboard.trends == engine.trends("alice", "global", 7)
    assert dashboard.priorities == engine.priorities("alice", "global")
    assert dashboard.productivity == engine.productivity("alice", "global", 7)
    assert dashboard.efficiency == engine.efficiency("alice", "global")
    assert dashboard.heatmap == engine.heatmap("alice", "global")
    assert dashboard.insights == engine.insights("alice", "global", 7)
    assert dashboard.to_dict()["heatmap"] == {"2025-01-14": 1}


def test_default_days_come_from_config():
    engine = AnalyticsEngine(source_of(), clock=fixed_clock(), config=EngineConfig(default_days=3))
    assert len(engine.trends("alice")) == 3


def test_invalid_arguments():
    engine = AnalyticsEngine(source_of(), clock=fixed_clock())
    with pytest.raises(InvalidArgument):
        engine.trends("alice", "everyone")
    with pytest.raises(InvalidArgument):
        engine.dashboard("alice", "personal", days=0)
    with pytest.raises(InvalidArgument):
        engine.productivity("alice", "personal", days=-1)


def test_store_failure_is_data_unavailable():
    engine = AnalyticsEngine(BrokenSource(), clock=fixed_clock())
    with pytest.raises(DataUnavailable) as info:
        engine.priorities("alice")
    assert isinstance(info.value.__cause__, ConnectionError)
    with pytest.raises(DataUnavailable):
        engine.dashboard("alice", "global")


def test_dashboard_times_out_without_partial_result():
    config = EngineConfig(query_timeout_seconds=0.1)
    engine = AnalyticsEngine(SlowSource(sample_source(), delay=0.5), clock=fixed_clock(), config=config)
    with pytest.raises(DataUnavailable):
        engine.dashboard("alice")


def test_boundary_falls_back_to_zeroed_baseline():
    engine = AnalyticsEngine(BrokenSource(), clock=fixed_clock())
    dashboard, degraded = dashboard_or_fallback(engine, "alice", "personal", 5)
    assert degraded is True
    assert dashboard == zero_dashboard(5, NOW, timezone.utc)


def test_boundary_passes_through_healthy_results():
    engine = AnalyticsEngine(sample_source(), clock=fixed_clock())
    dashboard, degraded = dashboard_or_fallback(engine, "alice")
    assert degraded is False
    assert dashboard.productivity.completed_this_period == 1
    assert dashboard.insights[0] == "You have 1 overdue tasks that need attention."


def test_boundary_does_not_hide_invalid_arguments():
    engine = AnalyticsEngine(source_of(), clock=fixed_clock())
    with pytest.raises(InvalidArgument):
        dashboard_or_fallback(engine, "alice", "nobody")


class NaiveClock:
    def now(self):
        return NOW.replace(tzinfo=None)


def test_naive_clock_is_read_as_utc():
    source = source_of([make_task("a", created=ago(days=3))], [completed("a", ago(days=1))])
    engine = AnalyticsEngine(source, clock=NaiveClock())
    dashboard, degraded = dashboard_or_fallback(engine, "alice", "personal", 7)
    assert degraded is False
    assert dashboard.productivity.completed_this_period == 1
    assert dashboard.heatmap == {"2025-01-14": 1}
    assert engine.productivity("alice", now=NOW.replace(tzinfo=None)) == dashboard.productivity

"""Average dwell time per workflow status."""

from __future__ import annotations

from task_analytics.metrics import days_between, round_half_up
from task_analytics.schema import ACTION_CREATED, EfficiencyRow, Status, TaskWithHistory
from task_analytics.scope import efficiency_scope
from task_analytics.source import EventSource, TaskFilter

TRACKED_STATUSES = (Status.TODO.value, Status.IN_PROGRESS.value, Status.REVIEW.value)
DEFAULT_REVIEW_FALLBACK_DAYS = 0.5


def dwell_totals(tasks: list[TaskWithHistory]) -> dict[str, dict]:
    """Accumulate ``{total, count}`` per tracked status over consecutive events."""

    times = {status: {"total": 0.0, "count": 0} for status in TRACKED_STATUSES}
    for item in tasks:
        history = sorted(item.history, key=lambda e: e.created_at)
        for current, following in zip(history, history[1:]):
            status = current.new_value or (Status.TODO.value if current.action == ACTION_CREATED else "")
            if status not in times:
                continue
            times[status]["total"] += days_between(current.created_at, following.created_at)
            times[status]["count"] += 1
    return times


def summarize_dwell(
    times: dict[str, dict], review_fallback_days: float = DEFAULT_REVIEW_FALLBACK_DAYS
) -> list[EfficiencyRow]:
    rows = []
    for status in TRACKED_STATUSES:
        bucket = times[status]
        if bucket["count"]:
            avg_days = round_half_up(bucket["total"] / bucket["count"], 1)
        elif status == Status.REVIEW.value:
            # Empty review stage reports a nominal value, unlike the others.
            avg_days = review_fallback_days
        else:
            avg_days = 0.0
        rows.append(EfficiencyRow(status=status, avg_days=avg_days))
    return rows


def efficiency_metrics(
    source: EventSource,
    caller_id: str,
    scope,
    limit: int = 30,
    review_fallback_days: float = DEFAULT_REVIEW_FALLBACK_DAYS,
) -> list[EfficiencyRow]:
    tasks = source.list_recent_completed_tasks_with_history(
        TaskFilter(task_scope=efficiency_scope(caller_id, scope), status=Status.COMPLETED), limit
    )
    return summarize_dwell(dwell_totals(tasks), review_fallback_days)

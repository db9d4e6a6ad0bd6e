"""Deterministic rule-based insight feed."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from task_analytics.clock import ensure_aware
from task_analytics.metrics import round_pct
from task_analytics.productivity import productivity_metrics
from task_analytics.schema import Priority, ProductivityMetrics, Scope, Status, TaskRecord
from task_analytics.scope import insight_scope
from task_analytics.source import EventSource, TaskFilter

HIGH_THROUGHPUT_THRESHOLD = 10
BASELINE_COMPLETIONS = 5
ELITE_SCORE_THRESHOLD = 800
DEFAULT_INSIGHT_LIMIT = 4


@dataclass(frozen=True)
class InsightInputs:
    scope: Scope
    tasks: list[TaskRecord]
    productivity: ProductivityMetrics
    active_assignees: int = 0


def _is_overdue(task: TaskRecord, now: datetime) -> bool:
    return task.due_date is not None and ensure_aware(task.due_date) < now and task.is_active


def generate_insights(inputs: InsightInputs, now: datetime, limit: int = DEFAULT_INSIGHT_LIMIT) -> list[str]:
    """Evaluate each rule in order and keep the first ``limit`` messages."""

    insights: list[str] = []
    personal = inputs.scope == Scope.PERSONAL

    overdue = [task for task in inputs.tasks if _is_overdue(task, now)]
    if overdue:
        subject = "You have" if personal else "There are"
        insights.append(f"{subject} {len(overdue)} overdue tasks that need attention.")

    completed = inputs.productivity.completed_this_period
    if completed > HIGH_THROUGHPUT_THRESHOLD:
        above = round_pct(completed / BASELINE_COMPLETIONS * 100)
        insights.append(f"Exceptional week! Your throughput is {above}% above your baseline.")
    elif completed > 0:
        insights.append(f"Maintain momentum. {completed} tasks completed this period.")

    if inputs.productivity.performance_score > ELITE_SCORE_THRESHOLD:
        insights.append("Consistency reached 'Elite' status. Your lead time is among the top 10% of users.")

    urgent = [task for task in inputs.tasks if task.priority == Priority.URGENT and task.is_active]
    if urgent:
        insights.append(f"Urgent focus required: {len(urgent)} high-impact tasks are still open.")

    if inputs.scope == Scope.GLOBAL:
        insights.append(f"{inputs.active_assignees} teammates are currently pushing updates in real-time.")

    return insights[:limit]


def count_active_assignees(source: EventSource) -> int:
    tasks = source.list_tasks(TaskFilter(exclude_status=Status.COMPLETED, require_assignee=True))
    return len({task.assigned_to_id for task in tasks})


def build_insights(
    source: EventSource,
    caller_id: str,
    scope,
    days: int,
    now: datetime,
    limit: int = DEFAULT_INSIGHT_LIMIT,
    productivity: ProductivityMetrics | None = None,
) -> list[str]:
    """Gather rule inputs from the source and evaluate the insight rules.

    ``productivity`` may be passed in when the caller already computed it for
    the same instant.
    """

    resolved = Scope.parse(scope)
    tasks = source.list_tasks(TaskFilter(task_scope=insight_scope(caller_id, resolved)))
    if productivity is None:
        productivity = productivity_metrics(source, caller_id, resolved, days, now)
    active_assignees = count_active_assignees(source) if resolved == Scope.GLOBAL else 0
    inputs = InsightInputs(scope=resolved, tasks=tasks, productivity=productivity, active_assignees=active_assignees)
    return generate_insights(inputs, now, limit)

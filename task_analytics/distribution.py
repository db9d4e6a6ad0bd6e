"""Priority histogram of active tasks."""

from __future__ import annotations

from collections import Counter

from task_analytics.schema import Priority, PriorityDistribution, Status
from task_analytics.scope import distribution_scope
from task_analytics.source import EventSource, TaskFilter


def priority_distribution(source: EventSource, caller_id: str, scope) -> PriorityDistribution:
    """Count non-completed in-scope tasks per priority."""

    tasks = source.list_tasks(
        TaskFilter(task_scope=distribution_scope(caller_id, scope), exclude_status=Status.COMPLETED)
    )
    counts = Counter(Priority(task.priority) for task in tasks)
    return PriorityDistribution(
        low=counts[Priority.LOW],
        medium=counts[Priority.MEDIUM],
        high=counts[Priority.HIGH],
        urgent=counts[Priority.URGENT],
    )

from datetime import datetime, timedelta, timezone

from task_analytics.clock import FixedClock
from task_analytics.schema import HistoryEvent, Priority, Status, TaskRecord
from task_analytics.source import InMemoryEventSource

# Wednesday afternoon, UTC.
NOW = datetime(2025, 1, 15, 18, 0, tzinfo=timezone.utc)

_counter = {"n": 0}


def ago(days: float = 0, hours: float = 0) -> datetime:
    return NOW - timedelta(days=days, hours=hours)


def make_task(
    task_id,
    creator="alice",
    assignee="alice",
    priority=Priority.MEDIUM,
    status=Status.TODO,
    due=None,
    created=None,
):
    return TaskRecord(
        task_id=task_id,
        creator_id=creator,
        assigned_to_id=assignee,
        priority=priority,
        status=status,
        due_date=due,
        created_at=created or ago(days=10),
    )


def make_event(task_id, action, new_value=None, at=None, old_value=None):
    _counter["n"] += 1
    return HistoryEvent(
        event_id=f"e{_counter['n']}",
        task_id=task_id,
        action=action,
        old_value=old_value,
        new_value=new_value,
        created_at=at or NOW,
    )


def created(task_id, at):
    return make_event(task_id, "created", at=at)


def completed(task_id, at):
    return make_event(task_id, "status_changed", Status.COMPLETED.value, at=at)


def moved(task_id, status, at):
    return make_event(task_id, "status_changed", status, at=at)


def source_of(tasks=(), history=()):
    return InMemoryEventSource(tasks, history)


def fixed_clock():
    return FixedClock(NOW)

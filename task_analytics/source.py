"""Event source query contract and an in-memory implementation."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, replace
from datetime import date, datetime, tzinfo
from typing import Iterable, Optional, Protocol

from task_analytics.clock import ensure_aware
from task_analytics.schema import HistoryEvent, Status, TaskRecord, TaskWithHistory
from task_analytics.scope import TaskScope


@dataclass(frozen=True)
class TimeRange:
    """Start-inclusive range; ``None`` leaves a side unbounded."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    end_inclusive: bool = False

    def contains(self, value: datetime) -> bool:
        if self.start is not None and value < self.start:
            return False
        if self.end is not None:
            if self.end_inclusive:
                return value <= self.end
            return value < self.end
        return True


@dataclass(frozen=True)
class EventFilter:
    action: Optional[str] = None
    new_value: Optional[str] = None
    task_scope: Optional[TaskScope] = None


@dataclass(frozen=True)
class TaskFilter:
    task_scope: Optional[TaskScope] = None
    status: Optional[Status] = None
    exclude_status: Optional[Status] = None
    require_assignee: bool = False

    def matches(self, task: TaskRecord) -> bool:
        if self.task_scope is not None and not self.task_scope.matches(task):
            return False
        if self.status is not None and task.status != self.status:
            return False
        if self.exclude_status is not None and task.status == self.exclude_status:
            return False
        if self.require_assignee and task.assigned_to_id is None:
            return False
        return True


class EventSource(Protocol):
    """Read-only queries the engine issues against the task/event store."""

    def count_events(self, event_filter: EventFilter, time_range: TimeRange) -> int: ...

    def group_events_by_day(
        self, event_filter: EventFilter, time_range: TimeRange, tz: tzinfo
    ) -> list[tuple[date, int]]: ...

    def list_events(
        self, event_filter: EventFilter, time_range: TimeRange, include_task_meta: bool = False
    ) -> list[HistoryEvent]: ...

    def list_tasks(self, task_filter: TaskFilter) -> list[TaskRecord]: ...

    def list_recent_completed_tasks_with_history(
        self, task_filter: TaskFilter, limit: int
    ) -> list[TaskWithHistory]: ...


class InMemoryEventSource:
    """EventSource over plain lists of tasks and history events."""

    def __init__(self, tasks: Iterable[TaskRecord] = (), history: Iterable[HistoryEvent] = ()):
        self._tasks: dict[str, TaskRecord] = {task.task_id: task for task in tasks}
        self._history: list[HistoryEvent] = sorted(
            (replace(event, created_at=ensure_aware(event.created_at)) for event in history),
            key=lambda e: (e.created_at, e.event_id),
        )

    @property
    def tasks(self) -> list[TaskRecord]:
        return list(self._tasks.values())

    @property
    def history(self) -> list[HistoryEvent]:
        return list(self._history)

    def _event_matches(self, event: HistoryEvent, event_filter: EventFilter) -> bool:
        if event_filter.action is not None and event.action != event_filter.action:
            return False
        if event_filter.new_value is not None and event.new_value != event_filter.new_value:
            return False
        if event_filter.task_scope is not None:
            task = self._tasks.get(event.task_id)
            if task is None or not event_filter.task_scope.matches(task):
                return False
        return True

    def _select(self, event_filter: EventFilter, time_range: TimeRange) -> list[HistoryEvent]:
        return [
            event
            for event in self._history
            if time_range.contains(event.created_at) and self._event_matches(event, event_filter)
        ]

    def count_events(self, event_filter: EventFilter, time_range: TimeRange) -> int:
        return len(self._select(event_filter, time_range))

    def group_events_by_day(
        self, event_filter: EventFilter, time_range: TimeRange, tz: tzinfo
    ) -> list[tuple[date, int]]:
        counts = Counter(event.created_at.astimezone(tz).date() for event in self._select(event_filter, time_range))
        return sorted(counts.items())

    def list_events(
        self, event_filter: EventFilter, time_range: TimeRange, include_task_meta: bool = False
    ) -> list[HistoryEvent]:
        events = self._select(event_filter, time_range)
        if not include_task_meta:
            return events

        joined = []
        for event in events:
            task = self._tasks.get(event.task_id)
            if task is None:
                continue
            joined.append(replace(event, task_created_at=ensure_aware(task.created_at)))
        return joined

    def list_tasks(self, task_filter: TaskFilter) -> list[TaskRecord]:
        return [task for task in self._tasks.values() if task_filter.matches(task)]

    def list_recent_completed_tasks_with_history(
        self, task_filter: TaskFilter, limit: int
    ) -> list[TaskWithHistory]:
        by_task: dict[str, list[HistoryEvent]] = defaultdict(list)
        for event in self._history:
            by_task[event.task_id].append(event)

        completed = [
            task
            for task in self._tasks.values()
            if task.status == Status.COMPLETED and task_filter.matches(task)
        ]

        def completed_at(task: TaskRecord) -> datetime:
            stamps = [event.created_at for event in by_task.get(task.task_id, []) if event.is_completion]
            return max(stamps) if stamps else ensure_aware(task.created_at)

        ranked = sorted(completed, key=lambda task: (completed_at(task), task.task_id), reverse=True)
        return [
            TaskWithHistory(task=task, history=tuple(by_task.get(task.task_id, [])))
            for task in ranked[: max(0, limit)]
        ]

"""JSON adapter for task/history datasets."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Optional

from task_analytics.clock import ensure_aware
from task_analytics.errors import InvalidArgument
from task_analytics.schema import HistoryEvent, Priority, Status, TaskRecord
from task_analytics.source import InMemoryEventSource

logger = logging.getLogger(__name__)


def _field(item: dict, snake: str, camel: str, default: Any = None) -> Any:
    if snake in item and item[snake] not in (None, ""):
        return item[snake]
    if camel in item and item[camel] not in (None, ""):
        return item[camel]
    return default


def _timestamp(value: Any, label: str, name: str) -> datetime:
    try:
        return ensure_aware(datetime.fromisoformat(str(value).replace("Z", "+00:00")))
    except Exception as exc:  # noqa: BLE001
        raise InvalidArgument(f"{label}: malformed {name}") from exc


def _optional_timestamp(value: Any, label: str, name: str) -> Optional[datetime]:
    if value in (None, ""):
        return None
    return _timestamp(value, label, name)


def task_from_mapping(item: dict, label: str) -> TaskRecord:
    task_id = _field(item, "task_id", "id")
    creator_id = _field(item, "creator_id", "creatorId")
    created_at = _field(item, "created_at", "createdAt")
    missing = [name for name, value in (("id", task_id), ("creator_id", creator_id), ("created_at", created_at)) if value is None]
    if missing:
        raise InvalidArgument(f"{label}: missing required fields {missing}")

    try:
        priority = Priority(str(_field(item, "priority", "priority", "MEDIUM")).strip().upper())
        status = Status(str(_field(item, "status", "status", "TODO")).strip().upper())
    except ValueError as exc:
        raise InvalidArgument(f"{label}: {exc}") from exc

    assignee = _field(item, "assigned_to_id", "assignedToId")
    return TaskRecord(
        task_id=str(task_id).strip(),
        creator_id=str(creator_id).strip(),
        assigned_to_id=str(assignee).strip() if assignee is not None else None,
        priority=priority,
        status=status,
        due_date=_optional_timestamp(_field(item, "due_date", "dueDate"), label, "due_date"),
        created_at=_timestamp(created_at, label, "created_at"),
    )


def event_from_mapping(item: dict, label: str, fallback_id: str) -> HistoryEvent:
    task_id = _field(item, "task_id", "taskId")
    action = _field(item, "action", "action")
    created_at = _field(item, "created_at", "createdAt")
    missing = [name for name, value in (("task_id", task_id), ("action", action), ("created_at", created_at)) if value is None]
    if missing:
        raise InvalidArgument(f"{label}: missing required fields {missing}")

    old_value = _field(item, "old_value", "oldValue")
    new_value = _field(item, "new_value", "newValue")
    return HistoryEvent(
        event_id=str(_field(item, "event_id", "id", fallback_id)),
        task_id=str(task_id).strip(),
        action=str(action).strip(),
        old_value=str(old_value) if old_value is not None else None,
        new_value=str(new_value) if new_value is not None else None,
        created_at=_timestamp(created_at, label, "created_at"),
    )


def parse(file_path: str) -> InMemoryEventSource:
    """Parse a ``{"tasks": [...], "history": [...]}`` file into an event source."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, dict):
        raise InvalidArgument("JSON payload must be an object with 'tasks' and 'history' lists")

    raw_tasks = payload.get("tasks", [])
    raw_history = payload.get("history", [])
    if not isinstance(raw_tasks, list) or not isinstance(raw_history, list):
        raise InvalidArgument("'tasks' and 'history' must be lists")

    tasks = [task_from_mapping(item, f"Task {i}") for i, item in enumerate(raw_tasks, start=1)]
    history = [
        event_from_mapping(item, f"Event {i}", fallback_id=f"e{i}") for i, item in enumerate(raw_history, start=1)
    ]
    logger.debug("loaded %d tasks and %d events from %s", len(tasks), len(history), file_path)
    return InMemoryEventSource(tasks, history)

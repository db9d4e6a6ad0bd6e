"""CSV adapter for task/history datasets."""

from __future__ import annotations

import csv
import logging

from task_analytics.adapters.json_adapter import event_from_mapping, task_from_mapping
from task_analytics.schema import HistoryEvent, TaskRecord
from task_analytics.source import InMemoryEventSource

logger = logging.getLogger(__name__)


def _rows(file_path: str) -> list[tuple[int, dict]]:
    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []
        return [(row_number, row) for row_number, row in enumerate(reader, start=2)]


def parse_tasks(file_path: str) -> list[TaskRecord]:
    """Parse a tasks CSV (id, creator_id, assigned_to_id, priority, status, due_date, created_at)."""

    return [task_from_mapping(row, f"Row {row_number}") for row_number, row in _rows(file_path)]


def parse_history(file_path: str) -> list[HistoryEvent]:
    """Parse a history CSV (task_id, action, old_value, new_value, created_at)."""

    return [
        event_from_mapping(row, f"Row {row_number}", fallback_id=f"row{row_number}")
        for row_number, row in _rows(file_path)
    ]


def parse(tasks_path: str, history_path: str) -> InMemoryEventSource:
    tasks = parse_tasks(tasks_path)
    history = parse_history(history_path)
    logger.debug("loaded %d tasks and %d events from %s, %s", len(tasks), len(history), tasks_path, history_path)
    return InMemoryEventSource(tasks, history)

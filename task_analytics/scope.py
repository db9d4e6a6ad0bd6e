"""Per-metric scope predicates.

Each metric attributes work differently, so each gets its own named builder.
A builder returns ``None`` for global scope, meaning "keep every record".
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from task_analytics.schema import Scope, TaskRecord


class Relation(str, Enum):
    CREATOR = "creator"
    ASSIGNEE = "assignee"
    CREATOR_OR_ASSIGNEE = "creator_or_assignee"


@dataclass(frozen=True)
class TaskScope:
    user_id: str
    relation: Relation

    def matches(self, task: TaskRecord) -> bool:
        if self.relation == Relation.CREATOR:
            return task.creator_id == self.user_id
        if self.relation == Relation.ASSIGNEE:
            return task.assigned_to_id == self.user_id
        return task.creator_id == self.user_id or task.assigned_to_id == self.user_id


def _scoped(caller_id: str, scope, relation: Relation) -> Optional[TaskScope]:
    if Scope.parse(scope) == Scope.GLOBAL:
        return None
    return TaskScope(user_id=caller_id, relation=relation)


def completion_trend_scope(caller_id: str, scope) -> Optional[TaskScope]:
    return _scoped(caller_id, scope, Relation.CREATOR_OR_ASSIGNEE)


def creation_trend_scope(caller_id: str, scope) -> Optional[TaskScope]:
    """Creations are always attributed to the task creator."""

    return _scoped(caller_id, scope, Relation.CREATOR)


def distribution_scope(caller_id: str, scope) -> Optional[TaskScope]:
    return _scoped(caller_id, scope, Relation.CREATOR_OR_ASSIGNEE)


def insight_scope(caller_id: str, scope) -> Optional[TaskScope]:
    return _scoped(caller_id, scope, Relation.CREATOR_OR_ASSIGNEE)


def productivity_scope(caller_id: str, scope) -> Optional[TaskScope]:
    """Throughput and lead time only count work assigned to the caller."""

    return _scoped(caller_id, scope, Relation.ASSIGNEE)


def efficiency_scope(caller_id: str, scope) -> Optional[TaskScope]:
    return _scoped(caller_id, scope, Relation.ASSIGNEE)


def heatmap_scope(caller_id: str, scope) -> Optional[TaskScope]:
    return _scoped(caller_id, scope, Relation.ASSIGNEE)

"""Core data schema for tasks, history events and derived analytics."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from task_analytics.errors import InvalidArgument


class Priority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class Status(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    COMPLETED = "COMPLETED"


class Scope(str, Enum):
    PERSONAL = "personal"
    GLOBAL = "global"

    @classmethod
    def parse(cls, value) -> "Scope":
        """Accept a Scope or its string value; reject anything else."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidArgument(f"unknown scope {value!r}, expected 'personal' or 'global'")


ACTION_CREATED = "created"
ACTION_STATUS_CHANGED = "status_changed"


@dataclass(frozen=True)
class TaskRecord:
    """Current snapshot of a task, read-only for the engine."""

    task_id: str
    creator_id: str
    assigned_to_id: Optional[str]
    priority: Priority
    status: Status
    due_date: Optional[datetime]
    created_at: datetime

    @property
    def is_active(self) -> bool:
        return self.status != Status.COMPLETED


@dataclass(frozen=True)
class HistoryEvent:
    """Immutable task lifecycle event.

    ``task_created_at`` is only populated when the source joins task metadata.
    """

    event_id: str
    task_id: str
    action: str
    old_value: Optional[str]
    new_value: Optional[str]
    created_at: datetime
    task_created_at: Optional[datetime] = None

    @property
    def is_completion(self) -> bool:
        return self.action == ACTION_STATUS_CHANGED and self.new_value == Status.COMPLETED.value


@dataclass(frozen=True)
class TaskWithHistory:
    task: TaskRecord
    history: tuple[HistoryEvent, ...] = ()


@dataclass(frozen=True)
class TrendPoint:
    date_label: str
    completed_count: int
    created_count: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class PriorityDistribution:
    low: int = 0
    medium: int = 0
    high: int = 0
    urgent: int = 0

    @property
    def total(self) -> int:
        return self.low + self.medium + self.high + self.urgent

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ProductivityMetrics:
    completed_this_period: int
    avg_lead_time_days: float
    total_completed: int
    performance_score: int
    throughput_trend_pct: int
    lead_time_trend_pct: int
    productivity_trend_pct: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class EfficiencyRow:
    status: str
    avg_days: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class HeatmapPoint:
    date: str
    count: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Dashboard:
    """All six analytics views computed against the same instant."""

    trends: list[TrendPoint]
    priorities: PriorityDistribution
    productivity: ProductivityMetrics
    efficiency: list[EfficiencyRow]
    heatmap: dict[str, int]
    insights: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "trends": [point.to_dict() for point in self.trends],
            "priorities": self.priorities.to_dict(),
            "productivity": self.productivity.to_dict(),
            "efficiency": [row.to_dict() for row in self.efficiency],
            "heatmap": dict(self.heatmap),
            "insights": list(self.insights),
        }

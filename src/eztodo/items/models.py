# src/eztodo/items/models.py

"""
Todo / Plan records and their on-disk JSON shape.

Field names on disk are camelCase. Optional fields are written as null and
read back as None.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RepeatCycle(StrEnum):
    """
    Known plan cycles.

    Plan.repeat_cycle stays a plain string: unknown values are kept as-is and
    simply never reset.
    """

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class HistoryEventType(StrEnum):
    TODO_CREATED = "todo_created"
    TODO_COMPLETED = "todo_completed"


def _opt_str(raw: Any) -> str | None:
    return None if raw is None else str(raw)


def _opt_int(raw: Any) -> int | None:
    return None if raw is None else int(raw)


@dataclass(slots=True)
class Todo:
    id: str
    title: str
    description: str
    completed: bool
    important: bool
    due_date: str | None
    created_at: str
    completed_at: str | None
    priority: str
    category: str
    from_plan_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "completed": self.completed,
            "important": self.important,
            "dueDate": self.due_date,
            "createdAt": self.created_at,
            "completedAt": self.completed_at,
            "priority": self.priority,
            "category": self.category,
            "fromPlanId": self.from_plan_id,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Todo:
        # Required keys raise KeyError: one bad record invalidates the whole file.
        return cls(
            id=str(raw["id"]),
            title=str(raw["title"]),
            description=str(raw["description"]),
            completed=bool(raw["completed"]),
            important=bool(raw["important"]),
            due_date=_opt_str(raw.get("dueDate")),
            created_at=str(raw["createdAt"]),
            completed_at=_opt_str(raw.get("completedAt")),
            priority=str(raw["priority"]),
            category=str(raw["category"]),
            from_plan_id=_opt_str(raw.get("fromPlanId")),
        )


@dataclass(slots=True)
class Plan:
    id: str
    title: str
    description: str
    repeat_cycle: str
    plan_days: list[int]
    start_time: str
    end_time: str
    repeat_count: int | None
    current_count: int
    cycle_target_count: int
    total_completed_count: int
    last_reset_date: str
    created_at: str
    category: str
    active: bool
    important: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "repeatCycle": self.repeat_cycle,
            "planDays": list(self.plan_days),
            "startTime": self.start_time,
            "endTime": self.end_time,
            "repeatCount": self.repeat_count,
            "currentCount": self.current_count,
            "cycleTargetCount": self.cycle_target_count,
            "totalCompletedCount": self.total_completed_count,
            "lastResetDate": self.last_reset_date,
            "createdAt": self.created_at,
            "category": self.category,
            "active": self.active,
            "important": self.important,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Plan:
        return cls(
            id=str(raw["id"]),
            title=str(raw["title"]),
            description=str(raw["description"]),
            repeat_cycle=str(raw["repeatCycle"]),
            plan_days=[int(d) for d in raw["planDays"]],
            start_time=str(raw["startTime"]),
            end_time=str(raw["endTime"]),
            repeat_count=_opt_int(raw.get("repeatCount")),
            current_count=int(raw["currentCount"]),
            cycle_target_count=int(raw["cycleTargetCount"]),
            total_completed_count=int(raw["totalCompletedCount"]),
            last_reset_date=str(raw["lastResetDate"]),
            created_at=str(raw["createdAt"]),
            category=str(raw["category"]),
            active=bool(raw["active"]),
            important=bool(raw["important"]),
        )


@dataclass(slots=True)
class TodoCreateInput:
    title: str
    description: str = ""
    important: bool = False
    due_date: str | None = None
    priority: str = Priority.MEDIUM.value
    category: str = ""
    from_plan_id: str | None = None


@dataclass(slots=True)
class PlanCreateInput:
    title: str
    repeat_cycle: str = RepeatCycle.DAILY.value
    cycle_target_count: int = 1
    description: str = ""
    plan_days: list[int] = field(default_factory=list)
    start_time: str = ""
    end_time: str = ""
    repeat_count: int | None = None
    category: str = ""
    active: bool = True
    important: bool = False


@dataclass(slots=True, frozen=True)
class HistoryRecord:
    """Derived event; never persisted."""

    id: str
    type: HistoryEventType
    title: str
    timestamp: str
    item_id: str
    item_type: str = "todo"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "timestamp": self.timestamp,
            "itemId": self.item_id,
            "itemType": self.item_type,
        }

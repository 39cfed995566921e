# src/eztodo/items/stores.py

from __future__ import annotations

from typing import Any

from ..core.errors import InvalidInput
from ..store.entity_store import EntityStore, require_text
from .models import Plan, PlanCreateInput, Priority, Todo, TodoCreateInput

_PRIORITIES = {p.value for p in Priority}


class TodoStore(EntityStore[Todo, TodoCreateInput]):
    """Todos persisted as a JSON array (default file: todos.json)."""

    kind_name = "todo"

    def id_of(self, entity: Todo) -> str:
        return entity.id

    def encode(self, entity: Todo) -> dict[str, Any]:
        return entity.to_dict()

    def decode(self, raw: dict[str, Any]) -> Todo:
        return Todo.from_dict(raw)

    def build(self, data: TodoCreateInput, new_id: str, today: str) -> Todo:
        title = require_text(data.title, "title")
        priority = (data.priority or Priority.MEDIUM.value).strip().lower()
        if priority not in _PRIORITIES:
            raise InvalidInput(f"priority must be one of {sorted(_PRIORITIES)}, got {data.priority!r}")

        return Todo(
            id=new_id,
            title=title,
            description=data.description or "",
            completed=False,
            important=bool(data.important),
            due_date=data.due_date,
            created_at=today,
            completed_at=None,
            priority=priority,
            category=data.category or "",
            from_plan_id=data.from_plan_id,
        )


class PlanStore(EntityStore[Plan, PlanCreateInput]):
    """Recurring plans persisted as a JSON array (default file: plans.json)."""

    kind_name = "plan"

    def id_prefix(self) -> str:
        return "plan-"

    def id_of(self, entity: Plan) -> str:
        return entity.id

    def encode(self, entity: Plan) -> dict[str, Any]:
        return entity.to_dict()

    def decode(self, raw: dict[str, Any]) -> Plan:
        return Plan.from_dict(raw)

    def build(self, data: PlanCreateInput, new_id: str, today: str) -> Plan:
        title = require_text(data.title, "title")
        repeat_cycle = require_text(data.repeat_cycle, "repeat_cycle").strip().lower()
        try:
            cycle_target_count = int(data.cycle_target_count)
            repeat_count = None if data.repeat_count is None else int(data.repeat_count)
            plan_days = [int(d) for d in data.plan_days]
        except (TypeError, ValueError) as e:
            raise InvalidInput(f"plan numbers must be integers: {e}") from e

        if cycle_target_count <= 0:
            raise InvalidInput("cycle_target_count must be > 0")
        if repeat_count is not None and repeat_count <= 0:
            raise InvalidInput("repeat_count must be > 0 when set")

        return Plan(
            id=new_id,
            title=title,
            description=data.description or "",
            repeat_cycle=repeat_cycle,
            plan_days=plan_days,
            start_time=data.start_time or "",
            end_time=data.end_time or "",
            repeat_count=repeat_count,
            current_count=0,
            cycle_target_count=cycle_target_count,
            total_completed_count=0,
            last_reset_date=today,
            created_at=today,
            category=data.category or "",
            active=bool(data.active),
            important=bool(data.important),
        )

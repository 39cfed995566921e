# src/eztodo/items/tracker.py

"""
High-level todo/plan operations used by the console commands and the refresher.

Every function takes AppState and goes through the stores, so each operation
is one exclusive store section (or a short sequence of them) with the store's
durability guarantees. Store errors propagate unchanged.
"""

from __future__ import annotations

import logging
from datetime import date

from ..core.errors import DateParseError, NotFound
from ..core.state import AppState
from ..lib.dates import parse_date, sunday_weekday
from .history import project_history, sort_chronologically
from .models import (
    HistoryRecord,
    Plan,
    PlanCreateInput,
    Priority,
    RepeatCycle,
    Todo,
    TodoCreateInput,
)
from .recurrence import refresh_all

logger = logging.getLogger(__name__)


def _today_date(state: AppState, today: str | None = None) -> tuple[str, date]:
    today = today or state.today()
    parsed = parse_date(today)
    if parsed is None:
        raise DateParseError(f"cannot parse today {today!r}")
    return today, parsed


# ---- todos ----


def create_todo(state: AppState, data: TodoCreateInput) -> Todo:
    todo = state.todo_store.create(data)
    logger.info("Todo created id=%s title=%r", todo.id, todo.title)
    return todo


def set_todo_completed(state: AppState, todo_id: str, completed: bool) -> Todo:
    """
    Set the completion flag.

    false -> true stamps completed_at with today and counts one completion on
    the source plan (if the todo was spawned from one that still exists).
    true -> false clears completed_at. Setting the current value is a no-op.
    """
    today = state.today()
    transitioned: list[bool] = []

    def _apply(t: Todo) -> None:
        if t.completed == completed:
            return
        t.completed = completed
        t.completed_at = today if completed else None
        transitioned.append(True)

    todo = state.todo_store.modify(todo_id, _apply)

    if transitioned and completed and todo.from_plan_id:
        try:
            complete_plan_once(state, todo.from_plan_id)
        except NotFound:
            # Non-owning link: the plan may have been deleted since.
            logger.info("Todo %s completed; source plan %s no longer exists", todo.id, todo.from_plan_id)

    if transitioned:
        logger.info("Todo %s -> %s", todo.id, "completed" if completed else "open")
    return todo


def toggle_todo_complete(state: AppState, todo_id: str) -> Todo:
    current = state.todo_store.get(todo_id)
    return set_todo_completed(state, todo_id, not current.completed)


def toggle_todo_important(state: AppState, todo_id: str) -> Todo:
    def _apply(t: Todo) -> None:
        t.important = not t.important

    return state.todo_store.modify(todo_id, _apply)


def delete_todo(state: AppState, todo_id: str) -> bool:
    return state.todo_store.delete(todo_id)


# ---- plans ----


def create_plan(state: AppState, data: PlanCreateInput) -> Plan:
    plan = state.plan_store.create(data)
    logger.info("Plan created id=%s cycle=%s title=%r", plan.id, plan.repeat_cycle, plan.title)
    return plan


def complete_plan_once(state: AppState, plan_id: str) -> Plan:
    """
    Count one completion: current_count and total_completed_count both go up.
    Reaching repeat_count (when set) deactivates the plan.
    """

    def _apply(p: Plan) -> None:
        p.current_count += 1
        p.total_completed_count += 1
        if p.repeat_count and p.total_completed_count >= p.repeat_count:
            p.active = False

    plan = state.plan_store.modify(plan_id, _apply)
    logger.info(
        "Plan %s completed once (%s/%s this cycle, %s total)",
        plan.id,
        plan.current_count,
        plan.cycle_target_count,
        plan.total_completed_count,
    )
    return plan


def toggle_plan_active(state: AppState, plan_id: str) -> Plan:
    def _apply(p: Plan) -> None:
        p.active = not p.active

    return state.plan_store.modify(plan_id, _apply)


def toggle_plan_important(state: AppState, plan_id: str) -> Plan:
    def _apply(p: Plan) -> None:
        p.important = not p.important

    return state.plan_store.modify(plan_id, _apply)


def end_plan(state: AppState, plan_id: str) -> Plan:
    def _apply(p: Plan) -> None:
        p.active = False

    return state.plan_store.modify(plan_id, _apply)


def delete_plan(state: AppState, plan_id: str, *, cascade: bool = False) -> bool:
    """
    Delete a plan. With cascade=True, todos spawned from it are removed too
    (the plan is deleted first; a missing plan raises NotFound before any todo
    is touched).
    """
    state.plan_store.delete(plan_id)
    if cascade:
        removed = state.todo_store.remove_where(lambda t: t.from_plan_id == plan_id)
        logger.info("Plan %s deleted with %d spawned todo(s)", plan_id, len(removed))
    else:
        logger.info("Plan %s deleted", plan_id)
    return True


def refresh_plans(state: AppState, today: str | None = None) -> list[Plan]:
    return refresh_all(state.plan_store, today or state.today())


def is_plan_day(plan: Plan, today: date) -> bool:
    """plan_days holds 0=Sunday..6=Saturday for weekly plans, 1..31 for monthly ones."""
    cycle = plan.repeat_cycle
    if cycle == RepeatCycle.DAILY:
        return True
    if cycle == RepeatCycle.WEEKLY:
        return sunday_weekday(today) in plan.plan_days
    if cycle == RepeatCycle.MONTHLY:
        return today.day in plan.plan_days
    return False


def spawn_plan_todos(state: AppState, today: str | None = None) -> list[Todo]:
    """
    Create today's todo for every active plan scheduled today that does not
    have one yet (matched by from_plan_id + due_date).
    """
    today, today_date = _today_date(state, today)

    existing = {
        (t.from_plan_id, t.due_date) for t in state.todo_store.snapshot() if t.from_plan_id
    }

    created: list[Todo] = []
    for plan in state.plan_store.list():
        if not plan.active or not is_plan_day(plan, today_date):
            continue
        if (plan.id, today) in existing:
            continue

        description = plan.description
        if plan.start_time or plan.end_time:
            description = f"{description}\nTime: {plan.start_time} - {plan.end_time}".strip()

        todo = state.todo_store.create(
            TodoCreateInput(
                title=plan.title,
                description=description,
                important=plan.important,
                due_date=today,
                priority=Priority.MEDIUM.value,
                category=plan.category,
                from_plan_id=plan.id,
            )
        )
        created.append(todo)

    if created:
        logger.info("Spawned %d plan todo(s) for %s", len(created), today)
    return created


# ---- history ----


def list_history(state: AppState, *, chronological: bool = False) -> list[HistoryRecord]:
    records = project_history(state.todo_store.snapshot())
    if chronological:
        return sort_chronologically(records)
    return records

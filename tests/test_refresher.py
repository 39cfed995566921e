# tests/test_refresher.py

from __future__ import annotations

import asyncio

import pytest

from eztodo.core.state import AppState
from eztodo.items import tracker
from eztodo.items.models import PlanCreateInput
from eztodo.items.refresher import refresh_once, run_plan_refresher, start_refresher_in_background

from .fakes import BrokenPlanRepo


@pytest.mark.asyncio
async def test_refresher_resets_and_spawns_until_stopped(state, clock) -> None:
    plan = tracker.create_plan(state, PlanCreateInput(title="water plants", repeat_cycle="daily"))
    tracker.complete_plan_once(state, plan.id)
    clock.set("2025-01-02")

    stop = asyncio.Event()
    runner = asyncio.create_task(
        run_plan_refresher(state, interval_seconds=0.01, spawn_todos=True, stop_event=stop)
    )

    await asyncio.sleep(0.05)
    stop.set()
    await asyncio.wait_for(runner, timeout=1.0)

    p = state.plan_store.get(plan.id)
    assert p.current_count == 0
    assert p.last_reset_date == "2025-01-02"
    assert p.total_completed_count == 1

    # Several ticks ran, but only one todo exists for the day.
    spawned = [t for t in state.todo_store.list() if t.from_plan_id == plan.id]
    assert len(spawned) == 1
    assert spawned[0].due_date == "2025-01-02"


@pytest.mark.asyncio
async def test_refresher_can_be_cancelled(state) -> None:
    runner = asyncio.create_task(run_plan_refresher(state, interval_seconds=0.01, spawn_todos=False))

    await asyncio.sleep(0.03)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner


def test_refresh_once_survives_store_errors(state, clock) -> None:
    broken = BrokenPlanRepo()
    broken_state = AppState(
        settings=state.settings,
        todo_store=state.todo_store,
        plan_store=broken,
        today=clock,
    )

    refresh_once(broken_state, spawn_todos=True)
    assert broken.apply_calls == 1

    clock.set("not a date")
    refresh_once(broken_state, spawn_todos=True)
    assert broken.apply_calls == 1


def test_background_runner_starts_and_stops(state, clock) -> None:
    plan = tracker.create_plan(state, PlanCreateInput(title="p", repeat_cycle="daily"))
    tracker.complete_plan_once(state, plan.id)
    clock.set("2025-01-02")

    runner = start_refresher_in_background(state, interval_seconds=0.01, spawn_todos=False)
    assert runner is not None

    # The first tick runs immediately on start.
    for _ in range(200):
        if state.plan_store.get(plan.id).current_count == 0:
            break
        runner.thread.join(timeout=0.01)

    runner.stop()
    runner.join(timeout=2.0)

    assert not runner.thread.is_alive()
    assert state.plan_store.get(plan.id).current_count == 0
    assert state.todo_store.list() == []

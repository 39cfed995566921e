# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from eztodo.core.state import AppState
from eztodo.items.stores import PlanStore, TodoStore

from .fakes import FakeClock


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        data_dir=tmp_path,
        todos_path=tmp_path / "todos.json",
        plans_path=tmp_path / "plans.json",
        use_utc_dates=True,
        refresh_interval_seconds=0.01,
        spawn_plan_todos=True,
    )


@pytest.fixture()
def clock() -> FakeClock:
    # 2025-01-01 is a Wednesday.
    return FakeClock("2025-01-01")


@pytest.fixture()
def state(settings: SimpleNamespace, clock: FakeClock) -> AppState:
    """
    AppState wired with real JSON stores on tmp_path and a fixed clock.
    """
    return AppState(
        settings=settings,
        todo_store=TodoStore(settings.todos_path, today=clock),
        plan_store=PlanStore(settings.plans_path, today=clock),
        today=clock,
    )

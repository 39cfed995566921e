# src/eztodo/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from .ports import Clock, PlanRepo, TodoRepo


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    todo_store: TodoRepo
    plan_store: PlanRepo

    # Shared with the stores so created_at / last_reset_date agree with refreshes.
    today: Clock

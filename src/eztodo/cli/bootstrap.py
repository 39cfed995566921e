# src/eztodo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the data directory exists,
- wires the JSON stores and the shared clock into AppState.
"""

from __future__ import annotations

import functools
import logging

from ..config import get_settings
from ..core.state import AppState
from ..items.stores import PlanStore, TodoStore
from ..lib.dates import today_str

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.todos_path.parent.mkdir(parents=True, exist_ok=True)
    settings.plans_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    today = functools.partial(today_str, utc=bool(getattr(settings, "use_utc_dates", True)))

    state = AppState(
        settings=settings,
        todo_store=TodoStore(settings.todos_path, today=today),
        plan_store=PlanStore(settings.plans_path, today=today),
        today=today,
    )
    logger.info("State ready todos=%s plans=%s", settings.todos_path, settings.plans_path)
    return state

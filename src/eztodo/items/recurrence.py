# src/eztodo/items/recurrence.py

"""
Plan cycle resets.

A plan's current_count accumulates within one cycle (day / Monday-based week /
calendar month) and is zeroed the first time a refresh runs in a later cycle.
total_completed_count is a lifetime counter and is never touched here.
"""

from __future__ import annotations

import logging
from datetime import date

from ..core.errors import DateParseError
from ..core.ports import PlanRepo
from ..lib.dates import format_date, parse_date, same_week
from .models import Plan, RepeatCycle

logger = logging.getLogger(__name__)


def needs_reset(plan: Plan, today: date) -> bool:
    last = parse_date(plan.last_reset_date)
    if last is None:
        # Malformed stored date: never reset.
        return False

    cycle = plan.repeat_cycle
    if cycle == RepeatCycle.DAILY:
        return today != last
    if cycle == RepeatCycle.WEEKLY:
        return not same_week(today, last)
    if cycle == RepeatCycle.MONTHLY:
        return today.month != last.month or today.year != last.year
    return False


def reset_plan(plan: Plan, today: date) -> bool:
    """Reset `plan` in place if its cycle rolled over. Returns True when it did."""
    if not needs_reset(plan, today):
        return False
    plan.current_count = 0
    plan.last_reset_date = format_date(today)
    return True


def refresh_all(store: PlanRepo, today: str) -> list[Plan]:
    """
    Reset every plan whose cycle rolled over, as one exclusive batch with a
    single write. Returns the resulting snapshot.
    """
    today_date = parse_date(today)
    if today_date is None:
        raise DateParseError(f"cannot parse today {today!r}")

    reset_ids: list[str] = []

    def _apply(plan: Plan) -> None:
        if reset_plan(plan, today_date):
            reset_ids.append(plan.id)

    plans = store.apply_all(_apply)
    if reset_ids:
        logger.info("Plan refresh %s: reset %d plan(s) %s", today, len(reset_ids), reset_ids)
    else:
        logger.debug("Plan refresh %s: nothing to reset", today)
    return plans

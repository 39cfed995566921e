# tests/test_recurrence.py

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from eztodo.core.errors import DateParseError
from eztodo.items.models import Plan, PlanCreateInput
from eztodo.items.recurrence import needs_reset, refresh_all
from eztodo.items.stores import PlanStore

from .fakes import FakeClock


def _plan(cycle: str, last_reset: str, current: int = 3, total: int = 7) -> Plan:
    return Plan(
        id="plan-1",
        title="p",
        description="",
        repeat_cycle=cycle,
        plan_days=[],
        start_time="",
        end_time="",
        repeat_count=None,
        current_count=current,
        cycle_target_count=5,
        total_completed_count=total,
        last_reset_date=last_reset,
        created_at="2024-12-01",
        category="",
        active=True,
        important=False,
    )


@pytest.mark.parametrize(
    ("cycle", "last", "today", "expected"),
    [
        ("daily", "2025-01-01", date(2025, 1, 2), True),
        ("daily", "2025-01-02", date(2025, 1, 2), False),
        # 2025-01-05 is a Sunday, 2025-01-06 the following Monday.
        ("weekly", "2025-01-05", date(2025, 1, 6), True),
        # Monday -> Friday of the same week.
        ("weekly", "2025-01-06", date(2025, 1, 10), False),
        ("weekly", "2024-12-30", date(2025, 1, 5), False),
        ("monthly", "2025-01-31", date(2025, 2, 1), True),
        ("monthly", "2025-01-31", date(2025, 1, 15), False),
        ("monthly", "2024-01-15", date(2025, 1, 15), True),
        ("yearly", "2020-01-01", date(2025, 1, 1), False),
        ("daily", "not-a-date", date(2025, 1, 2), False),
        # An unpadded stored date names the same calendar day.
        ("daily", "2025-1-2", date(2025, 1, 2), False),
        ("daily", "2025-1-1", date(2025, 1, 2), True),
        ("weekly", "2025-02-30", date(2025, 3, 10), False),
    ],
)
def test_needs_reset(cycle: str, last: str, today: date, expected: bool) -> None:
    assert needs_reset(_plan(cycle, last), today) is expected


def test_daily_refresh_resets_once_per_day(tmp_path: Path) -> None:
    path = tmp_path / "plans.json"
    store = PlanStore(path, today=FakeClock("2025-01-01"))
    created = store.create(PlanCreateInput(title="p", repeat_cycle="daily"))

    seeded = store.get(created.id)
    seeded.current_count = 3
    seeded.total_completed_count = 7
    store.update(seeded)

    plans = refresh_all(store, "2025-01-02")
    assert plans[0].current_count == 0
    assert plans[0].last_reset_date == "2025-01-02"
    assert plans[0].total_completed_count == 7

    # Progress made later the same day survives a second refresh.
    bumped = store.get(created.id)
    bumped.current_count = 1
    store.update(bumped)

    again = refresh_all(store, "2025-01-02")
    assert again[0].current_count == 1
    assert again[0].last_reset_date == "2025-01-02"

    reloaded = PlanStore(path).get(created.id)
    assert reloaded.current_count == 1
    assert reloaded.last_reset_date == "2025-01-02"


def test_refresh_only_touches_plans_that_rolled_over(tmp_path: Path) -> None:
    store = PlanStore(tmp_path / "plans.json", today=FakeClock("2025-01-06"))
    daily = store.create(PlanCreateInput(title="d", repeat_cycle="daily"))
    weekly = store.create(PlanCreateInput(title="w", repeat_cycle="weekly"))

    for plan_id in (daily.id, weekly.id):
        p = store.get(plan_id)
        p.current_count = 2
        store.update(p)

    plans = {p.id: p for p in refresh_all(store, "2025-01-08")}

    assert plans[daily.id].current_count == 0
    assert plans[daily.id].last_reset_date == "2025-01-08"
    assert plans[weekly.id].current_count == 2
    assert plans[weekly.id].last_reset_date == "2025-01-06"


def test_refresh_skips_malformed_last_reset(tmp_path: Path) -> None:
    store = PlanStore(tmp_path / "plans.json")
    p = store.create(PlanCreateInput(title="p", repeat_cycle="daily"))
    broken = store.get(p.id)
    broken.last_reset_date = "yesterday"
    broken.current_count = 4
    store.update(broken)

    plans = refresh_all(store, "2025-06-01")
    assert plans[0].current_count == 4
    assert plans[0].last_reset_date == "yesterday"


def test_refresh_rejects_bad_today(tmp_path: Path) -> None:
    store = PlanStore(tmp_path / "plans.json")
    with pytest.raises(DateParseError):
        refresh_all(store, "2025/01/02")

# src/eztodo/lib/dates.py

"""Calendar-date helpers. All dates travel as YYYY-MM-DD strings."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from enum import StrEnum

DATE_FORMAT = "%Y-%m-%d"


class Urgency(StrEnum):
    NONE = "none"
    OVERDUE = "overdue"
    URGENT = "urgent"
    SOON = "soon"
    NORMAL = "normal"


def today_str(*, utc: bool = True) -> str:
    now = datetime.now(timezone.utc) if utc else datetime.now().astimezone()
    return format_date(now.date())


def format_date(d: date) -> str:
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def parse_date(s: str | None) -> date | None:
    """Parse YYYY-MM-DD. Returns None for anything else (including impossible dates)."""
    if not s:
        return None
    parts = s.strip().split("-")
    if len(parts) != 3:
        return None
    try:
        y, m, d = (int(p) for p in parts)
        return date(y, m, d)
    except ValueError:
        return None


def week_start(d: date) -> date:
    """Monday of the week containing d."""
    return d - timedelta(days=d.isoweekday() - 1)


def same_week(a: date, b: date) -> bool:
    return week_start(a) == week_start(b)


def sunday_weekday(d: date) -> int:
    # 0 = Sunday .. 6 = Saturday
    return d.isoweekday() % 7


def urgency_level(due_date: str | None, today: str) -> Urgency:
    due = parse_date(due_date)
    now = parse_date(today)
    if due is None or now is None:
        return Urgency.NONE

    diff_days = (due - now).days
    if diff_days < 0:
        return Urgency.OVERDUE
    if diff_days == 0:
        return Urgency.URGENT
    if diff_days <= 2:
        return Urgency.SOON
    return Urgency.NORMAL

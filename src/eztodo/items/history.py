# src/eztodo/items/history.py

from __future__ import annotations

from collections.abc import Iterable

from .models import HistoryEventType, HistoryRecord, Todo


def project_history(todos: Iterable[Todo]) -> list[HistoryRecord]:
    """
    Derive activity events from todo timestamps.

    Output follows input order (created, then completed, per todo), not
    timestamp order. Use sort_chronologically() when order matters.
    """
    records: list[HistoryRecord] = []
    for t in todos:
        records.append(
            HistoryRecord(
                id=f"h-{t.id}-created",
                type=HistoryEventType.TODO_CREATED,
                title=t.title,
                timestamp=t.created_at,
                item_id=t.id,
            )
        )
        if t.completed_at is not None:
            records.append(
                HistoryRecord(
                    id=f"h-{t.id}-completed",
                    type=HistoryEventType.TODO_COMPLETED,
                    title=t.title,
                    timestamp=t.completed_at,
                    item_id=t.id,
                )
            )
    return records


def sort_chronologically(records: Iterable[HistoryRecord]) -> list[HistoryRecord]:
    # Stable: same-day events keep their projected order (created before completed).
    return sorted(records, key=lambda r: r.timestamp)

# tests/test_history.py

from __future__ import annotations

from eztodo.items.history import project_history, sort_chronologically
from eztodo.items.models import HistoryEventType, Todo


def _todo(todo_id: str, created_at: str, completed_at: str | None = None) -> Todo:
    return Todo(
        id=todo_id,
        title=f"title {todo_id}",
        description="",
        completed=completed_at is not None,
        important=False,
        due_date=None,
        created_at=created_at,
        completed_at=completed_at,
        priority="medium",
        category="",
    )


def test_open_todo_yields_single_created_event() -> None:
    records = project_history([_todo("42", "2025-01-01")])

    assert len(records) == 1
    r = records[0]
    assert r.id == "h-42-created"
    assert r.type == HistoryEventType.TODO_CREATED
    assert r.timestamp == "2025-01-01"
    assert r.item_id == "42"
    assert r.item_type == "todo"
    assert r.title == "title 42"


def test_completed_todo_yields_created_then_completed() -> None:
    records = project_history([_todo("42", "2025-01-01", "2025-01-03")])

    assert [r.id for r in records] == ["h-42-created", "h-42-completed"]
    assert [r.type for r in records] == [HistoryEventType.TODO_CREATED, HistoryEventType.TODO_COMPLETED]
    assert records[1].timestamp == "2025-01-03"


def test_output_follows_input_order_not_time() -> None:
    todos = [_todo("b", "2025-02-01"), _todo("a", "2025-01-01", "2025-03-01")]

    records = project_history(todos)
    assert [r.id for r in records] == ["h-b-created", "h-a-created", "h-a-completed"]

    ordered = sort_chronologically(records)
    assert [r.id for r in ordered] == ["h-a-created", "h-b-created", "h-a-completed"]


def test_ids_are_deterministic_and_unique() -> None:
    todos = [_todo(str(i), "2025-01-01", "2025-01-02" if i % 2 else None) for i in range(20)]

    first = project_history(todos)
    second = project_history(todos)

    assert [r.id for r in first] == [r.id for r in second]
    assert len({r.id for r in first}) == len(first) == 30


def test_record_json_shape() -> None:
    record = project_history([_todo("7", "2025-01-01")])[0]
    assert record.to_dict() == {
        "id": "h-7-created",
        "type": "todo_created",
        "title": "title 7",
        "timestamp": "2025-01-01",
        "itemId": "7",
        "itemType": "todo",
    }

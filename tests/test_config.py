# tests/test_config.py

from __future__ import annotations

from pathlib import Path

from eztodo.cli.bootstrap import create_initial_state
from eztodo.config import Settings


def test_settings_defaults(monkeypatch) -> None:
    for name in ("EZTODO_DATA_DIR", "EZTODO_TODOS_PATH", "EZTODO_PLANS_PATH", "EZTODO_REFRESH_INTERVAL_SECONDS"):
        monkeypatch.delenv(name, raising=False)

    s = Settings.from_env()
    assert s.data_dir == Path("eztodo")
    assert s.todos_path == Path("eztodo") / "todos.json"
    assert s.plans_path == Path("eztodo") / "plans.json"
    assert s.refresh_interval_seconds == 300.0


def test_settings_from_env(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("EZTODO_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("EZTODO_PLANS_PATH", str(tmp_path / "elsewhere" / "p.json"))
    monkeypatch.setenv("EZTODO_REFRESH_INTERVAL_SECONDS", "not-a-number")
    monkeypatch.setenv("EZTODO_CONSOLE_ENABLED", "off")

    s = Settings.from_env()
    assert s.todos_path == tmp_path / "todos.json"
    assert s.plans_path == tmp_path / "elsewhere" / "p.json"
    assert s.refresh_interval_seconds == 300.0
    assert s.console_enabled is False


def test_bootstrap_wires_stores(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("EZTODO_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("EZTODO_TODOS_PATH", raising=False)
    monkeypatch.delenv("EZTODO_PLANS_PATH", raising=False)

    state = create_initial_state(settings=Settings.from_env())

    assert (tmp_path / "data").is_dir()
    assert state.todo_store.storage_path == tmp_path / "data" / "todos.json"
    assert state.plan_store.storage_path == tmp_path / "data" / "plans.json"
    assert len(state.today()) == 10

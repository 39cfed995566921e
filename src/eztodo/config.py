# src/eztodo/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Data file locations are configurable; nothing is read from disk at import time
  except the local .env.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "EZTODO"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Data files ----
    data_dir: Path
    todos_path: Path
    plans_path: Path

    # ---- Clock ----
    use_utc_dates: bool

    # ---- Connectors / background work ----
    console_enabled: bool
    refresher_enabled: bool
    refresh_interval_seconds: float
    spawn_plan_todos: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "eztodo")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path("eztodo"))
        todos_path = _env_path(_k("TODOS_PATH"), data_dir / "todos.json")
        plans_path = _env_path(_k("PLANS_PATH"), data_dir / "plans.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            todos_path=todos_path,
            plans_path=plans_path,
            use_utc_dates=_env_bool(_k("USE_UTC_DATES"), True),
            console_enabled=_env_bool(_k("CONSOLE_ENABLED"), True),
            refresher_enabled=_env_bool(_k("REFRESHER_ENABLED"), True),
            refresh_interval_seconds=_env_float(_k("REFRESH_INTERVAL_SECONDS"), 300.0),
            spawn_plan_todos=_env_bool(_k("SPAWN_PLAN_TODOS"), True),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS

# src/eztodo/items/refresher.py

from __future__ import annotations

"""
Plan refresher.

A small polling loop that, every interval:
- resets plan counters whose cycle rolled over (one batch, one write),
- optionally creates today's todos for scheduled plans.

Failures are logged and retried on the next tick; the loop never dies on a
store error.
"""

import asyncio
import contextlib
import logging
import threading
from dataclasses import dataclass

from ..core.errors import EzTodoError
from ..core.state import AppState
from .tracker import refresh_plans, spawn_plan_todos

logger = logging.getLogger(__name__)


def refresh_once(state: AppState, *, spawn_todos: bool = True) -> None:
    """One refresher tick. Errors are logged, never raised."""
    today = state.today()

    try:
        refresh_plans(state, today)
    except EzTodoError as e:
        logger.warning("Plan refresh failed (%s): %s", e.kind.value, e.message)
    except Exception:
        logger.exception("Plan refresh crashed")

    if not spawn_todos:
        return

    try:
        spawn_plan_todos(state, today)
    except EzTodoError as e:
        logger.warning("Spawning plan todos failed (%s): %s", e.kind.value, e.message)
    except Exception:
        logger.exception("Spawning plan todos crashed")


async def run_plan_refresher(
        state: AppState,
        *,
        interval_seconds: float = 300.0,
        spawn_todos: bool = True,
        stop_event: asyncio.Event | None = None,
) -> None:
    """
    Run refresh_once() immediately and then every interval_seconds.

    Stops when stop_event is set, or when the coroutine/task is cancelled.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        refresh_once(state, spawn_todos=spawn_todos)

        if stop_event is None:
            await asyncio.sleep(sleep_s)
            continue

        try:
            await asyncio.wait_for(stop_event.wait(), timeout=sleep_s)
        except TimeoutError:
            continue
        logger.info("Plan refresher stopped.")
        return


@dataclass(slots=True)
class RefresherBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except RuntimeError:
            # Loop already closed.
            logger.debug("Failed to signal refresher stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_refresher_in_background(
        state: AppState,
        *,
        interval_seconds: float = 300.0,
        spawn_todos: bool = True,
) -> RefresherBackgroundRunner | None:
    """
    Start the refresher on its own event loop in a daemon thread, so the
    blocking console REPL can run in the main thread.
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(
                run_plan_refresher(
                    state,
                    interval_seconds=interval_seconds,
                    spawn_todos=spawn_todos,
                    stop_event=stop_event,
                )
            )
        finally:
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="eztodo-refresher", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Refresher thread did not initialize properly.")
        return None

    logger.info("Plan refresher started (interval=%ss).", interval_seconds)
    return RefresherBackgroundRunner(thread=t, loop=loop, stop_event=stop_event)

# src/eztodo/cli/commands.py

from __future__ import annotations

import inspect
import logging
import shlex
from collections.abc import Callable
from typing import cast

from ..core.errors import EzTodoError
from ..core.state import AppState
from ..items import tracker
from ..items.models import Plan, PlanCreateInput, Todo, TodoCreateInput
from ..lib.dates import Urgency, urgency_level

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /todos, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Store errors are reported as "[KIND] message"; they never escape.
        """
        if not line.startswith("/"):
            return None

        try:
            parts = shlex.split(line[1:])
        except ValueError as e:
            return f"Cannot parse command: {e}"
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)

            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except EzTodoError as e:
            logger.info("/%s failed: %s", name, e)
            return f"[{e.kind.value}] {e.message}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _split_opts(
    args: list[str],
    *,
    flags: set[str] | frozenset[str] = frozenset(),
    options: set[str] | frozenset[str] = frozenset(),
) -> tuple[list[str], dict[str, str | bool]]:
    """Split "--flag" / "--opt value" tokens from positional args."""
    positional: list[str] = []
    opts: dict[str, str | bool] = {}
    it = iter(args)
    for tok in it:
        if tok in flags:
            opts[tok] = True
        elif tok in options:
            value = next(it, None)
            if value is None:
                raise ValueError(f"{tok} needs a value")
            opts[tok] = value
        else:
            positional.append(tok)
    return positional, opts


def _format_todo(t: Todo, today: str) -> str:
    mark = "[x]" if t.completed else "[ ]"
    star = " *" if t.important else ""
    due = ""
    if t.due_date:
        level = urgency_level(t.due_date, today)
        tag = f", {level.value}" if level not in (Urgency.NONE, Urgency.NORMAL) and not t.completed else ""
        due = f" (due {t.due_date}{tag})"
    cat = f" #{t.category}" if t.category else ""
    return f"{mark} {t.id} {t.title}{star} [{t.priority}]{due}{cat}"


def _format_plan(p: Plan) -> str:
    state = "active" if p.active else "paused"
    star = " *" if p.important else ""
    cap = f", cap {p.repeat_count}" if p.repeat_count else ""
    days = f" days={','.join(str(d) for d in p.plan_days)}" if p.plan_days else ""
    return (
        f"{p.id} {p.title}{star} ({p.repeat_cycle}, {state}) "
        f"{p.current_count}/{p.cycle_target_count} this cycle, {p.total_completed_count} total{cap}{days}"
    )


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    return (
        "Status:\n"
        f"  Today: {state.today()}\n"
        f"  Todos: {len(state.todo_store.list())} ({getattr(settings, 'todos_path', '?')})\n"
        f"  Plans: {len(state.plan_store.list())} ({getattr(settings, 'plans_path', '?')})"
    )


def cmd_todos(state: AppState, args: list[str]) -> str:
    """
    /todos        -> open todos
    /todos --all  -> include completed ones
    """
    show_all = "--all" in args
    todos = [t for t in state.todo_store.list() if show_all or not t.completed]
    if not todos:
        return "No todos."
    today = state.today()
    return "\n".join(_format_todo(t, today) for t in todos)


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <title> [--due YYYY-MM-DD] [--priority low|medium|high] [--cat NAME] [--important]"""
    try:
        words, opts = _split_opts(
            args,
            flags={"--important"},
            options={"--due", "--priority", "--cat", "--desc"},
        )
    except ValueError as e:
        return str(e)

    todo = tracker.create_todo(
        state,
        TodoCreateInput(
            title=" ".join(words),
            description=str(opts.get("--desc", "")),
            important=bool(opts.get("--important", False)),
            due_date=cast(str | None, opts.get("--due")),
            priority=str(opts.get("--priority", "medium")),
            category=str(opts.get("--cat", "")),
        ),
    )
    return f"Added {todo.id}: {todo.title}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <todo_id>"
    todo = tracker.toggle_todo_complete(state, args[0])
    if todo.completed:
        return f"Completed {todo.id} on {todo.completed_at}."
    return f"Reopened {todo.id}."


def cmd_important(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /important <todo_id>"
    todo = tracker.toggle_todo_important(state, args[0])
    return f"{todo.id} is {'now' if todo.important else 'no longer'} important."


def cmd_rm(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /rm <todo_id>"
    tracker.delete_todo(state, args[0])
    return f"Deleted {args[0]}."


def cmd_plans(state: AppState, args: list[str]) -> str:
    plans = state.plan_store.list()
    if not plans:
        return "No plans."
    return "\n".join(_format_plan(p) for p in plans)


def cmd_plan(state: AppState, args: list[str]) -> str:
    """
    /plan <daily|weekly|monthly> <target> <title>
          [--days 1,3,5] [--time HH:MM-HH:MM] [--cap N] [--cat NAME] [--important]
    """
    usage = "Usage: /plan <daily|weekly|monthly> <target> <title> [--days 1,3] [--time 20:00-21:00] [--cap N]"
    try:
        words, opts = _split_opts(
            args,
            flags={"--important"},
            options={"--days", "--time", "--cap", "--cat", "--desc"},
        )
        if len(words) < 3:
            return usage
        target = int(words[1])
        days = [int(d) for d in str(opts.get("--days", "")).split(",") if d.strip()]
        cap = int(str(opts["--cap"])) if "--cap" in opts else None
    except ValueError as e:
        return f"{e}\n{usage}"

    start_time, _, end_time = str(opts.get("--time", "")).partition("-")

    plan = tracker.create_plan(
        state,
        PlanCreateInput(
            title=" ".join(words[2:]),
            repeat_cycle=words[0],
            cycle_target_count=target,
            description=str(opts.get("--desc", "")),
            plan_days=days,
            start_time=start_time,
            end_time=end_time,
            repeat_count=cap,
            category=str(opts.get("--cat", "")),
            important=bool(opts.get("--important", False)),
        ),
    )
    return f"Added plan {plan.id}: {plan.title}"


def cmd_tick(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /tick <plan_id>"
    plan = tracker.complete_plan_once(state, args[0])
    suffix = " Plan finished (cap reached)." if not plan.active else ""
    return f"{plan.id}: {plan.current_count}/{plan.cycle_target_count} this cycle.{suffix}"


def cmd_pause(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /pause <plan_id>"
    plan = tracker.toggle_plan_active(state, args[0])
    return f"{plan.id} is {'active' if plan.active else 'paused'}."


def cmd_plan_important(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /planimportant <plan_id>"
    plan = tracker.toggle_plan_important(state, args[0])
    return f"{plan.id} is {'now' if plan.important else 'no longer'} important."


def cmd_endplan(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /endplan <plan_id>"
    plan = tracker.end_plan(state, args[0])
    return f"Ended plan {plan.id}; no more todos will be scheduled for it."


def cmd_rmplan(state: AppState, args: list[str]) -> str:
    """/rmplan <plan_id> [--cascade]"""
    words, opts = _split_opts(args, flags={"--cascade"})
    if not words:
        return "Usage: /rmplan <plan_id> [--cascade]"
    tracker.delete_plan(state, words[0], cascade=bool(opts.get("--cascade", False)))
    return f"Deleted plan {words[0]}."


def cmd_refresh(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    if emit:
        emit("Refreshing plan cycles...")
    plans = tracker.refresh_plans(state)
    spawned = tracker.spawn_plan_todos(state)
    return f"Refreshed {len(plans)} plan(s); spawned {len(spawned)} todo(s) for today."


def cmd_history(state: AppState, args: list[str]) -> str:
    """
    /history           -> events in todo order
    /history --sorted  -> events by date
    """
    records = tracker.list_history(state, chronological="--sorted" in args)
    if not records:
        return "No history yet."
    return "\n".join(f"{r.timestamp} {r.type.value:<15} {r.title} ({r.item_id})" for r in records)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show data files and counts.")
registry.register("todos", cmd_todos, help_text="List todos: /todos [--all].", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a todo: /add <title> [--due D] [--priority P] [--important].")
registry.register("done", cmd_done, help_text="Toggle completion: /done <todo_id>.")
registry.register("important", cmd_important, help_text="Toggle importance: /important <todo_id>.", aliases=["star"])
registry.register("rm", cmd_rm, help_text="Delete a todo: /rm <todo_id>.")
registry.register("plans", cmd_plans, help_text="List plans.")
registry.register("plan", cmd_plan, help_text="Add a plan: /plan <cycle> <target> <title> [--days ...].")
registry.register("tick", cmd_tick, help_text="Count one plan completion: /tick <plan_id>.")
registry.register("pause", cmd_pause, help_text="Pause/resume a plan: /pause <plan_id>.")
registry.register("planimportant", cmd_plan_important, help_text="Toggle plan importance: /planimportant <plan_id>.", aliases=["pstar"])
registry.register("endplan", cmd_endplan, help_text="Deactivate a plan for good: /endplan <plan_id>.")
registry.register("rmplan", cmd_rmplan, help_text="Delete a plan: /rmplan <plan_id> [--cascade].")
registry.register("refresh", cmd_refresh, help_text="Reset finished plan cycles and spawn today's plan todos.")
registry.register("history", cmd_history, help_text="Activity history: /history [--sorted].")

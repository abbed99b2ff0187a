# src/todo_desk/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..core.state import AppState
from ..tasks.task_models import Task, TaskFilter, TaskSort

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], Awaitable[str]]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str]]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /add, ...)."""

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

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
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

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return await h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return await h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  /exit - Quit.")
        lines.append("Any line that is not a command is added as a new task.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting ----


def format_timestamp(task: Task) -> str:
    return task.created_datetime.strftime("%b %d, %Y at %I:%M %p")


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    line = f"[{mark}] #{task.id} {task.title} ({format_timestamp(task)})"
    if task.description:
        line += f"\n      {task.description}"
    return line


def render_view(state: AppState) -> str:
    v = state.controller.view
    header = f"Tasks (filter: {v.task_filter.value}, sort: {v.sort.value}"
    if v.search:
        header += f", search: {v.search!r}"
    header += ")"

    if v.last_error is not None:
        return f"{header}\n  Could not read tasks from storage (see log)."
    if not v.tasks:
        return f"{header}\n  No tasks found."

    lines = [header]
    lines.extend(f"  {format_task(t)}" for t in v.tasks)
    n = len(v.tasks)
    footer = f"{n} task{'s' if n != 1 else ''} loaded"
    if v.has_more:
        footer += "; /more for the next page"
    lines.append(footer)
    return "\n".join(lines)


def split_title_description(text: str) -> tuple[str, str]:
    """'Buy milk | 2%' -> ('Buy milk', '2%')."""
    title, _, description = text.partition("|")
    return title.strip(), description.strip()


def parse_task_id(raw: str) -> int | None:
    try:
        return int(raw.lstrip("#"))
    except ValueError:
        return None


# ---- handlers ----


async def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


async def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <title>                -> new task
    /add <title> | <details>    -> new task with description
    """
    title, description = split_title_description(" ".join(args))
    if not title:
        return "Usage: /add <title> [| description]"
    task_id = await state.controller.add(title, description)
    if task_id < 0:
        return ""
    return f"#{task_id} {title}"


async def cmd_list(state: AppState, args: list[str]) -> str:
    await state.controller.refresh()
    return render_view(state)


async def cmd_more(state: AppState, args: list[str]) -> str:
    if not state.controller.view.has_more:
        return "No more tasks."
    loaded = await state.controller.load_more()
    if not loaded:
        return "No more tasks."
    lines = [f"Loaded {len(loaded)} more:"]
    lines.extend(f"  {format_task(t)}" for t in loaded)
    return "\n".join(lines)


async def cmd_search(state: AppState, args: list[str]) -> str:
    """/search <text> filters by title/description; /search alone clears it."""
    await state.controller.set_search(" ".join(args))
    return render_view(state)


async def cmd_filter(state: AppState, args: list[str]) -> str:
    if not args:
        return f"Filter is {state.controller.view.task_filter.value}. Usage: /filter all|active|completed"
    try:
        task_filter = TaskFilter.parse(args[0])
    except ValueError:
        return "Usage: /filter all|active|completed"
    await state.controller.set_filter(task_filter)
    return render_view(state)


async def cmd_sort(state: AppState, args: list[str]) -> str:
    usage = "Usage: /sort newest|oldest|az|za (or created_desc, created_asc, title_asc, title_desc)"
    if not args:
        return f"Sort is {state.controller.view.sort.value}. {usage}"
    try:
        sort = TaskSort.parse(args[0])
    except ValueError:
        return usage
    await state.controller.set_sort(sort)
    return render_view(state)


async def _set_completed(state: AppState, args: list[str], completed: bool) -> str:
    task_id = parse_task_id(args[0]) if args else None
    if task_id is None:
        return f"Usage: /{'done' if completed else 'undo'} <id>"
    ok = await state.controller.toggle(task_id, completed)
    if not ok:
        return ""
    return f"#{task_id} marked {'done' if completed else 'active'}."


async def cmd_done(state: AppState, args: list[str]) -> str:
    return await _set_completed(state, args, True)


async def cmd_undo(state: AppState, args: list[str]) -> str:
    return await _set_completed(state, args, False)


async def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <id> <title> [| description] replaces title and description."""
    usage = "Usage: /edit <id> <title> [| description]"
    task_id = parse_task_id(args[0]) if args else None
    if task_id is None:
        return usage
    title, description = split_title_description(" ".join(args[1:]))
    if not title:
        return usage
    await state.controller.edit(task_id, title, description)
    return ""


async def cmd_delete(state: AppState, args: list[str]) -> str:
    task_id = parse_task_id(args[0]) if args else None
    if task_id is None:
        return "Usage: /del <id>"
    await state.controller.delete(task_id)
    return ""


async def cmd_clear(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit("Removing completed tasks...")
    ok = await state.controller.clear_completed()
    return render_view(state) if ok else ""


async def cmd_count(state: AppState, args: list[str]) -> str:
    n = await state.controller.total()
    return f"{n} task{'s' if n != 1 else ''} in total."


async def cmd_status(state: AppState, args: list[str]) -> str:
    v = state.controller.view
    storage = f"OK ({state.store.db_path})" if state.storage_ok else "UNAVAILABLE (changes are not saved)"
    total = await state.controller.total()
    return (
        "Status:\n"
        f"  Storage: {storage}\n"
        f"  Search: {v.search!r}\n"
        f"  Filter: {v.task_filter.value}\n"
        f"  Sort: {v.sort.value}\n"
        f"  Loaded: {len(v.tasks)} of {total} (page size {state.controller.page_size})"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a task: /add <title> [| description].", aliases=["new"])
registry.register("list", cmd_list, help_text="Reload and show the first page.", aliases=["ls"])
registry.register("more", cmd_more, help_text="Load the next page.")
registry.register("search", cmd_search, help_text="Search title/description: /search <text> (empty clears).")
registry.register("filter", cmd_filter, help_text="Filter: /filter all | active | completed.")
registry.register("sort", cmd_sort, help_text="Sort: /sort newest | oldest | az | za.")
registry.register("done", cmd_done, help_text="Mark a task completed: /done <id>.")
registry.register("undo", cmd_undo, help_text="Mark a task active again: /undo <id>.")
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> <title> [| description].")
registry.register("del", cmd_delete, help_text="Delete a task: /del <id>.", aliases=["rm", "delete"])
registry.register("clear", cmd_clear, help_text="Delete all completed tasks.")
registry.register("count", cmd_count, help_text="Show the total number of tasks.")
registry.register("status", cmd_status, help_text="Show storage and list-view state.")

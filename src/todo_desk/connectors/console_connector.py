# src/todo_desk/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.commands import render_view
from ..core.state import AppState

logger = logging.getLogger(__name__)

PROMPT = ">>> "


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class ConsoleNotifier:
    """Prints transient notifications (the console's equivalent of a snackbar)."""

    def notify(self, text: str) -> None:
        _print_ts(f"* {text}")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    if sys.stdout.isatty():
        sys.stdout.write("\033[1A\033[2K\r")
        sys.stdout.write(line + "\n")
        sys.stdout.flush()
    else:
        print(line)


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (storage_ok=%s).", state.storage_ok)
    app_name = str(getattr(state.settings, "app_name", "todo-desk"))

    _print_ts(f"[{app_name}] Type a task title to add it. Use /help for commands, /exit to quit.")
    if not state.storage_ok:
        _print_ts("[STORE] Storage is unavailable: tasks will not be saved.")

    def emit(text: str) -> None:
        # Immediate feedback for operations that may take a moment.
        _print_ts(text)

    await state.controller.refresh()
    print(render_view(state), flush=True)

    while True:
        try:
            user_input = (await asyncio.to_thread(input, PROMPT)).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        _rewrite_prev_line(f"[{_ts_local()}] {PROMPT}{user_input}")

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        # Plain text is a quick "add".
        line = user_input if user_input.startswith("/") else f"/add {user_input}"

        try:
            reply = await command_registry.handle(state, line, emit=emit)
        except Exception:
            logger.exception("Command handler crashed line=%r", line)
            reply = "Internal error while handling a command."

        if reply:
            print(reply, flush=True)

    logger.info("Console connector finished.")

# src/todo_desk/cli/main.py

"""
CLI entrypoint.

Initializes logging, opens the task store, then runs the console REPL.
The store is always shut down on exit, including after a failed start.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import ConsoleNotifier, run_console_loop
from ..logging_setup import console_level_from_name, setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    log_file = setup_logging(
        log_dir=settings.log_dir,
        console_level=console_level_from_name(settings.log_level),
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )
    logger.info("Starting %s (log=%s)...", settings.app_name, log_file)

    state = create_initial_state(settings=settings, notifier=ConsoleNotifier())

    try:
        asyncio.run(run_console_loop(state))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    finally:
        state.store.shutdown()
        logger.info("Bye.")


if __name__ == "__main__":
    main()

# src/task_timer/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from ..timers.timer_models import Task

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def _announce_finished(task: Task, finished: bool) -> None:
    if finished:
        _print_ts(f"[TIMER] Countdown finished: {task.title or '(untitled)'}")


async def run_console_loop(state: AppState) -> None:
    """
    Interactive REPL on the event loop.

    input() runs in the default executor so ticks keep firing while the
    prompt waits; every command still executes on the loop thread.
    """
    logger.info("Console connector started (cards=%d).", len(state.tasks))
    app_name = str(getattr(state.settings, "app_name", "TaskTimer"))
    _print_ts(f"[{app_name}] Type /help for commands, /list to see cards, /exit to quit.\n")

    state.driver.add_listener(_announce_finished)
    loop = asyncio.get_running_loop()

    try:
        while True:
            try:
                line = await loop.run_in_executor(None, input, ">>> ")
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            line = line.strip()
            if not line:
                continue

            if line.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            if not line.startswith("/"):
                _print_ts("Commands start with '/'. Use /help to list them.")
                continue

            try:
                reply = command_registry.handle(state, line, emit=_print_ts)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if reply is not None:
                _print_ts(reply)
    finally:
        state.driver.remove_listener(_announce_finished)

    logger.info("Console connector finished.")

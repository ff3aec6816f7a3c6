# src/task_timer/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the tick driver, task list and configuration store into AppState,
- reads the stored configuration index.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..timers.config_store import ConfigurationStore
from ..timers.task_list import TaskList
from ..timers.tick_driver import TickDriver
from ..timers.timer_api import add_task

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.configs_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    driver = TickDriver(
        interval_seconds=settings.tick_interval,
        use_wall_clock=settings.use_wall_clock,
    )
    configs = ConfigurationStore(settings.configs_path)
    configs.load_all()

    state = AppState(
        settings=settings,
        driver=driver,
        tasks=TaskList(driver),
        configs=configs,
        use_random_colors=settings.use_random_colors,
    )

    # A fresh session starts with one blank card.
    if getattr(settings, "seed_initial_task", True):
        add_task(state, title="")

    logger.debug("Initial state ready tasks=%d configs=%d", len(state.tasks), len(configs.names()))
    return state

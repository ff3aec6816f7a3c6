# src/task_timer/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..timers.task_list import TaskList
from ..timers.tick_driver import TickDriver
from .ports import ConfigRepo


@dataclass(slots=True)
class AppState:
    """
    Shared session state.

    Passed explicitly to commands and connectors; nothing here is global.
    """

    # Settings object (real Settings or a test double).
    settings: Any

    driver: TickDriver
    tasks: TaskList
    configs: ConfigRepo

    use_random_colors: bool = False

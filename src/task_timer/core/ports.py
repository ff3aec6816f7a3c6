# src/task_timer/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the clock, listeners and storage swappable and makes testing easier.
"""

from collections.abc import Iterable
from typing import Protocol

from ..timers.timer_models import Task


class Clock(Protocol):
    """Returns the current time in seconds (epoch-based for stored timestamps)."""
    def __call__(self) -> float: ...


class TickListener(Protocol):
    """
    Notified by the tick driver on the event loop thread.

    `finished` is True exactly once per countdown, on the tick that reached zero.
    """
    def __call__(self, task: Task, finished: bool) -> None: ...


class ConfigRepo(Protocol):
    def load_all(self) -> dict[str, list[Task]]: ...
    def names(self) -> list[str]: ...
    def save(self, name: str, tasks: Iterable[Task]) -> bool: ...
    def load(self, name: str) -> list[Task] | None: ...
    def delete(self, name: str) -> bool: ...

# src/task_timer/timers/task_list.py

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from .tick_driver import TickDriver
from .timer_models import Task

logger = logging.getLogger(__name__)


class TaskList:
    """
    Ordered task cards for one session.

    Append order is kept; there is no reordering. Anything that drops a task
    stops its timer first so no callback outlives it.
    """

    def __init__(self, driver: TickDriver, tasks: Iterable[Task] | None = None) -> None:
        self._driver = driver
        self._tasks: list[Task] = list(tasks or [])

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def __len__(self) -> int:
        return len(self._tasks)

    def append(self, task: Task) -> Task:
        if self.get(task.id) is not None:
            raise ValueError(f"task {task.id} is already in the list")
        self._tasks.append(task)
        logger.debug("Task appended id=%s title=%r", task.id, task.title)
        return task

    def get(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def at(self, position: int) -> Task | None:
        """1-based lookup, matching how cards are numbered on screen."""
        if 1 <= position <= len(self._tasks):
            return self._tasks[position - 1]
        return None

    def index_of(self, task_id: str) -> int | None:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        return None

    def remove(self, task_id: str) -> Task | None:
        idx = self.index_of(task_id)
        if idx is None:
            return None
        self._driver.stop(task_id)
        task = self._tasks.pop(idx)
        logger.info("Task removed id=%s title=%r", task.id, task.title)
        return task

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Swap in copies of `tasks`; every current timer is stopped first."""
        for t in self._tasks:
            self._driver.stop(t.id)
        self._tasks = [t.snapshot() for t in tasks]

    def snapshot(self) -> list[Task]:
        return [t.snapshot() for t in self._tasks]

# src/task_timer/timers/tick_driver.py

from __future__ import annotations

"""
Tick driver.

Every running task owns exactly one asyncio task that:
- sleeps for the tick period,
- advances the task (stopwatch up, countdown down),
- stops itself when a countdown reaches zero.

Handles live in a registry keyed by task id, so pause/reset/remove can cancel
them explicitly. Everything runs on the event loop thread; no locks.
"""

import asyncio
import logging
import time
from dataclasses import dataclass

from ..core.ports import Clock, TickListener
from .timer_models import Task, TimerKind

logger = logging.getLogger(__name__)

# Float steps of 0.1 never land exactly on zero.
_EPSILON = 1e-9


@dataclass(slots=True)
class TimerHandle:
    task: Task
    runner: asyncio.Task[None]
    # Elapsed time when this run started; wall-clock mode adds (now - start_time).
    base_elapsed: float


def _current_task() -> asyncio.Task | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


class TickDriver:
    def __init__(
        self,
        *,
        interval_seconds: float = 0.1,
        use_wall_clock: bool = False,
        clock: Clock = time.time,
    ) -> None:
        self.interval = max(0.01, float(interval_seconds))
        self.use_wall_clock = bool(use_wall_clock)
        self._clock = clock
        self._handles: dict[str, TimerHandle] = {}
        self._listeners: list[TickListener] = []

    # ----- Listeners -----
    def add_listener(self, fn: TickListener) -> None:
        self._listeners.append(fn)

    def remove_listener(self, fn: TickListener) -> None:
        if fn in self._listeners:
            self._listeners.remove(fn)

    def _notify(self, task: Task, finished: bool) -> None:
        for fn in list(self._listeners):
            try:
                fn(task, finished)
            except Exception:
                logger.exception("tick listener failed task_id=%s", task.id)

    # ----- Registry -----
    def is_active(self, task_id: str) -> bool:
        handle = self._handles.get(task_id)
        return handle is not None and not handle.runner.done()

    def active_ids(self) -> list[str]:
        return [tid for tid in self._handles if self.is_active(tid)]

    def _cancel(self, task_id: str) -> TimerHandle | None:
        handle = self._handles.pop(task_id, None)
        if handle is None:
            return None
        # A countdown that hits zero stops itself from inside its own runner.
        if not handle.runner.done() and handle.runner is not _current_task():
            handle.runner.cancel()
        return handle

    # ----- Public API -----
    def start(self, task: Task) -> bool:
        """
        Begin ticking `task`. Requires a running event loop.

        Returns False when nothing was scheduled: the task already has a
        handle, or it is a countdown with nothing left.
        """
        if self.is_active(task.id):
            return False
        self._handles.pop(task.id, None)

        if task.kind == TimerKind.COUNTDOWN and task.countdown_time <= _EPSILON:
            task.countdown_time = 0.0
            task.running = False
            return False

        loop = asyncio.get_running_loop()

        now = self._clock()
        task.running = True
        task.start_time = now
        task.end_time = now + task.countdown_time if task.kind == TimerKind.COUNTDOWN else None

        runner = loop.create_task(self._run(task), name=f"tick:{task.id}")
        self._handles[task.id] = TimerHandle(task=task, runner=runner, base_elapsed=task.elapsed_time)
        logger.debug("Timer started task_id=%s kind=%s", task.id, task.kind.value)
        return True

    def pause(self, task: Task) -> None:
        """Stop ticking but keep the accumulated value."""
        handle = self._cancel(task.id)
        if not task.running:
            return

        expired = self.use_wall_clock and handle is not None and self._advance(task, handle, 0.0)

        task.running = False
        if expired:
            task.end_time = None
            logger.info("Countdown finished task_id=%s title=%r", task.id, task.title)
            self._notify(task, True)
            return
        if task.kind == TimerKind.STOPWATCH:
            task.end_time = self._clock()
        else:
            # Recomputed from the remaining time on the next start.
            task.end_time = None
        logger.debug("Timer paused task_id=%s value=%.2f", task.id, task.current_time)

    def reset(self, task: Task) -> None:
        """Stop ticking and restore the initial value for the task's kind."""
        self._cancel(task.id)
        task.running = False
        if task.kind == TimerKind.STOPWATCH:
            task.elapsed_time = 0.0
        else:
            task.countdown_time = task.countdown_target
        task.start_time = None
        task.end_time = None
        logger.debug("Timer reset task_id=%s", task.id)

    def stop(self, task_id: str) -> bool:
        """Cancel the handle without touching time values. True if one existed."""
        handle = self._cancel(task_id)
        if handle is None:
            return False
        handle.task.running = False
        return True

    def stop_all(self) -> None:
        for task_id in list(self._handles):
            self.stop(task_id)

    async def shutdown(self) -> None:
        """Cancel every handle and wait until the runners are gone."""
        runners = [h.runner for h in self._handles.values()]
        self.stop_all()
        if runners:
            await asyncio.gather(*runners, return_exceptions=True)

    def retarget(self, task: Task, seconds: float) -> None:
        """Set the countdown target; while running, the remaining time follows it."""
        seconds = max(0.0, float(seconds))
        task.countdown_target = seconds
        task.countdown_time = seconds
        if task.running and task.kind == TimerKind.COUNTDOWN:
            task.end_time = self._clock() + seconds

    def tick(self, task: Task, dt: float | None = None) -> bool:
        """
        Advance `task` by one period (or `dt` seconds).

        Returns True when this tick finished a countdown.
        """
        if not task.running:
            return False

        step = self.interval if dt is None else max(0.0, float(dt))
        handle = self._handles.get(task.id)
        finished = self._advance(task, handle, step)

        if finished:
            task.running = False
            self._cancel(task.id)
            logger.info("Countdown finished task_id=%s title=%r", task.id, task.title)

        self._notify(task, finished)
        return finished

    # ----- Internals -----
    def _advance(self, task: Task, handle: TimerHandle | None, step: float) -> bool:
        wall = self.use_wall_clock and handle is not None

        if task.kind == TimerKind.STOPWATCH:
            if wall and task.start_time is not None:
                task.elapsed_time = handle.base_elapsed + max(0.0, self._clock() - task.start_time)
            else:
                task.elapsed_time += step
            return False

        if wall and task.end_time is not None:
            remaining = task.end_time - self._clock()
        else:
            remaining = task.countdown_time - step

        if remaining <= _EPSILON:
            task.countdown_time = 0.0
            return True

        task.countdown_time = remaining
        return False

    def _owns(self, task: Task) -> bool:
        handle = self._handles.get(task.id)
        return handle is not None and handle.runner is _current_task()

    async def _run(self, task: Task) -> None:
        while True:
            await asyncio.sleep(self.interval)
            # A listener may have restarted the task; the new runner takes over.
            if not self._owns(task):
                return
            try:
                finished = self.tick(task)
            except Exception:
                logger.exception("tick failed task_id=%s; stopping timer", task.id)
                if self._owns(task):
                    self._handles.pop(task.id, None)
                    task.running = False
                return
            if finished or not task.running or not self._owns(task):
                return

# src/task_timer/timers/timer_api.py

from __future__ import annotations

import logging

from ..core.state import AppState
from .timer_models import DEFAULT_TITLE, SYSTEM_BACKGROUND, Color, Task, TimerKind

logger = logging.getLogger(__name__)


def add_task(state: AppState, title: str = DEFAULT_TITLE) -> Task:
    """
    Convenience helper: append a new card.
    Honors the random-colors switch and the configured default countdown.
    """
    countdown = float(getattr(state.settings, "default_countdown_seconds", 60.0))
    background = Color.random(alpha=0.2) if state.use_random_colors else SYSTEM_BACKGROUND
    task = Task(
        title=title,
        countdown_time=countdown,
        countdown_target=countdown,
        background_color=background,
    )
    return state.tasks.append(task)


def toggle_timer(state: AppState, task: Task) -> bool:
    """Start a paused timer or pause a running one. Returns the new running flag."""
    if task.running:
        state.driver.pause(task)
    else:
        state.driver.start(task)
    return task.running


def set_kind(state: AppState, task: Task, kind: TimerKind) -> None:
    """
    Switch between stopwatch and countdown.
    The active timer is stopped first; a countdown restarts from its target.
    """
    if task.kind == kind:
        return
    state.driver.stop(task.id)
    task.kind = kind
    task.start_time = None
    task.end_time = None
    if kind == TimerKind.COUNTDOWN:
        task.countdown_time = task.countdown_target
    logger.debug("Task kind changed id=%s kind=%s", task.id, kind.value)


def set_countdown(state: AppState, task: Task, seconds: float) -> None:
    """Last write wins, even while the countdown is running."""
    state.driver.retarget(task, seconds)


def apply_configuration(state: AppState, name: str) -> int | None:
    """
    Replace the session list with a stored configuration.
    Returns the number of loaded tasks, or None if the name is unknown.
    """
    tasks = state.configs.load(name)
    if tasks is None:
        return None
    state.tasks.replace_all(tasks)
    logger.info("Configuration applied name=%r tasks=%d", name, len(tasks))
    return len(tasks)


def save_configuration(state: AppState, name: str) -> bool:
    return state.configs.save(name, state.tasks.snapshot())

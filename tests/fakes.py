# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field

from task_timer.timers.timer_models import Task


class FakeClock:
    """Manually advanced clock for wall-clock driver tests."""

    def __init__(self, now: float = 1_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@dataclass(slots=True)
class TickEvent:
    task_id: str
    value: float
    finished: bool


@dataclass(slots=True)
class RecordingListener:
    """
    TickListener that captures every notification for assertions.
    """

    events: list[TickEvent] = field(default_factory=list)

    def __call__(self, task: Task, finished: bool) -> None:
        self.events.append(TickEvent(task_id=task.id, value=task.current_time, finished=finished))

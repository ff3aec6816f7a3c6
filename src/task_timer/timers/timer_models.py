# src/task_timer/timers/timer_models.py

from __future__ import annotations

import copy
import math
import random
import re
import uuid
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

DEFAULT_TITLE = "New Task"
DEFAULT_COUNTDOWN_SECONDS = 60.0


class TimerKind(StrEnum):
    """What a card's clock does while running."""

    STOPWATCH = "stopwatch"
    COUNTDOWN = "countdown"

    @classmethod
    def from_raw(cls, raw: str | None) -> TimerKind:
        if not raw:
            return cls.STOPWATCH
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return cls.STOPWATCH


def _clamp01(v: Any) -> float:
    return min(1.0, max(0.0, float(v)))


@dataclass(frozen=True, slots=True)
class Color:
    """RGBA color, every channel in [0, 1]. Serialized as a 4-item list."""

    red: float
    green: float
    blue: float
    alpha: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "red", _clamp01(self.red))
        object.__setattr__(self, "green", _clamp01(self.green))
        object.__setattr__(self, "blue", _clamp01(self.blue))
        object.__setattr__(self, "alpha", _clamp01(self.alpha))

    @classmethod
    def random(cls, alpha: float = 0.2, rng: random.Random | None = None) -> Color:
        r = rng or random
        return cls(r.random(), r.random(), r.random(), alpha)

    def to_list(self) -> list[float]:
        return [self.red, self.green, self.blue, self.alpha]

    @classmethod
    def from_any(cls, raw: Any, default: Color) -> Color:
        """Decode a stored color; anything malformed falls back to `default`."""
        if not isinstance(raw, (list, tuple)) or len(raw) not in (3, 4):
            return default
        try:
            return cls(*(float(v) for v in raw))
        except (TypeError, ValueError):
            return default


SYSTEM_BACKGROUND = Color(1.0, 1.0, 1.0, 1.0)
DEFAULT_BUTTON = Color(0.2, 0.78, 0.35, 0.7)


def format_time(seconds: float) -> str:
    """MM:SS, minutes are not wrapped into hours."""
    if not math.isfinite(seconds):
        seconds = 0
    total = max(0, int(seconds))
    return f"{total // 60:02d}:{total % 60:02d}"


_DURATION_SPLIT = re.compile(r"[:\s]+")


def _as_int(part: str) -> int:
    try:
        return max(0, int(part))
    except ValueError:
        return 0


def parse_duration(text: str) -> float:
    """
    Parse "MM:SS", "MM SS" or bare minutes "M" into seconds.
    Parts that are not numbers count as zero.
    """
    parts = [p for p in _DURATION_SPLIT.split((text or "").strip()) if p]
    if not parts:
        return 0.0
    if len(parts) == 1:
        return float(_as_int(parts[0]) * 60)
    return float(_as_int(parts[0]) * 60 + _as_int(parts[1]))


def _new_id() -> str:
    return uuid.uuid4().hex


def _non_negative(raw: Any, default: float) -> float:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    # json.loads happily yields inf and nan.
    if not math.isfinite(value):
        return default
    return max(0.0, value)


def _opt_float(raw: Any) -> float | None:
    if raw is None:
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


@dataclass(slots=True)
class Task:
    """
    One timer card.

    `elapsed_time` is only meaningful for stopwatches and `countdown_time`
    only for countdowns. `countdown_target` is what reset restores.
    """

    title: str = DEFAULT_TITLE
    kind: TimerKind = TimerKind.STOPWATCH
    elapsed_time: float = 0.0
    countdown_time: float = DEFAULT_COUNTDOWN_SECONDS
    countdown_target: float = DEFAULT_COUNTDOWN_SECONDS
    running: bool = False
    start_time: float | None = None
    end_time: float | None = None
    background_color: Color = SYSTEM_BACKGROUND
    button_color: Color = DEFAULT_BUTTON
    id: str = field(default_factory=_new_id)

    @property
    def current_time(self) -> float:
        if self.kind == TimerKind.COUNTDOWN:
            return self.countdown_time
        return self.elapsed_time

    @property
    def display_time(self) -> str:
        return format_time(self.current_time)

    def snapshot(self) -> Task:
        """Independent copy suitable for persisting; never marked running."""
        snap = copy.deepcopy(self)
        snap.running = False
        return snap

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "kind": self.kind.value,
            "elapsed_time": self.elapsed_time,
            "countdown_time": self.countdown_time,
            "countdown_target": self.countdown_target,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "background_color": self.background_color.to_list(),
            "button_color": self.button_color.to_list(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Task:
        if not isinstance(data, dict):
            raise ValueError("task entry must be an object")

        task_id = data.get("id")
        countdown_target = _non_negative(data.get("countdown_target"), DEFAULT_COUNTDOWN_SECONDS)
        return cls(
            id=str(task_id) if task_id else _new_id(),
            title=str(data.get("title") or ""),
            kind=TimerKind.from_raw(data.get("kind")),
            elapsed_time=_non_negative(data.get("elapsed_time"), 0.0),
            countdown_time=_non_negative(data.get("countdown_time"), countdown_target),
            countdown_target=countdown_target,
            running=False,
            start_time=_opt_float(data.get("start_time")),
            end_time=_opt_float(data.get("end_time")),
            background_color=Color.from_any(data.get("background_color"), SYSTEM_BACKGROUND),
            button_color=Color.from_any(data.get("button_color"), DEFAULT_BUTTON),
        )

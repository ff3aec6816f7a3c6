# src/task_timer/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Components receive settings explicitly; nothing reads env at call time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKTIMER"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    configs_path: Path

    # ---- Timers ----
    tick_interval: float
    default_countdown_seconds: float
    use_wall_clock: bool

    # ---- Cards ----
    use_random_colors: bool
    seed_initial_task: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "TaskTimer") or "TaskTimer"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/task_timer"))
        configs_path = _env_path(_k("CONFIGS_PATH"), data_dir / "configurations.json")

        # Anything faster than 10ms just burns the event loop.
        tick_interval = max(0.01, _env_float(_k("TICK_INTERVAL"), 0.1))
        default_countdown_seconds = max(0.0, _env_float(_k("DEFAULT_COUNTDOWN_SECONDS"), 60.0))
        use_wall_clock = _env_bool(_k("USE_WALL_CLOCK"), False)

        use_random_colors = _env_bool(_k("RANDOM_COLORS"), False)
        seed_initial_task = _env_bool(_k("SEED_INITIAL_TASK"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            configs_path=configs_path,
            tick_interval=tick_interval,
            default_countdown_seconds=default_countdown_seconds,
            use_wall_clock=use_wall_clock,
            use_random_colors=use_random_colors,
            seed_initial_task=seed_initial_task,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS

# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_timer.cli.bootstrap import create_initial_state
from task_timer.core.state import AppState


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="TaskTimer",
        log_level="DEBUG",
        # Paths (tmp per test run)
        data_dir=tmp_path,
        configs_path=tmp_path / "configurations.json",
        # Timers: fast ticks keep async tests short.
        tick_interval=0.01,
        default_countdown_seconds=60.0,
        use_wall_clock=False,
        # Cards
        use_random_colors=False,
        seed_initial_task=False,
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState built through the real bootstrap.

    NOTE: the configuration store writes real JSON under tmp_path because
    its error handling is part of what we want to test.
    """
    return create_initial_state(settings=settings)

# src/task_timer/timers/config_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .timer_models import Task

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def _clean_name(name: str) -> str:
    clean = (name or "").strip()
    if not clean:
        raise ValueError("configuration name is required")
    return clean


class ConfigurationStore:
    """
    Named task-list snapshots kept in one JSON file.

    File layout:
        {"version": 1, "configurations": {"<name>": [<task>, ...], ...}}

    Storage problems never escape: a missing or broken file reads as an
    empty index and a failed write leaves the in-memory index untouched.
    """

    def __init__(self, path: str | Path = "configurations.json") -> None:
        self._path = Path(path)
        self._configs: dict[str, list[Task]] = {}

    @property
    def path(self) -> Path:
        return self._path

    # ---- persistence ----

    def load_all(self) -> dict[str, list[Task]]:
        """Read the file into the in-memory index (called once at startup)."""
        self._configs = self._read()
        logger.info("Loaded configurations: %d from %s", len(self._configs), self._path)
        return {name: [t.snapshot() for t in tasks] for name, tasks in self._configs.items()}

    def _read(self) -> dict[str, list[Task]]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except Exception:
            logger.exception("Failed to read configurations from %s", self._path)
            return {}

        raw = data.get("configurations") if isinstance(data, dict) else None
        if not isinstance(raw, dict):
            logger.warning("Configurations file %s has no usable index; ignoring it", self._path)
            return {}

        out: dict[str, list[Task]] = {}
        for name, entries in raw.items():
            if not isinstance(name, str) or not name.strip() or not isinstance(entries, list):
                continue
            tasks: list[Task] = []
            for entry in entries:
                try:
                    tasks.append(Task.from_dict(entry))
                except ValueError:
                    logger.warning("Skipping malformed task in configuration %r", name)
            out[name.strip()] = tasks
        return out

    def _write(self, configs: dict[str, list[Task]]) -> bool:
        payload: dict[str, Any] = {
            "version": FORMAT_VERSION,
            "configurations": {
                name: [t.to_dict() for t in tasks] for name, tasks in configs.items()
            },
        }
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(".tmp")
            tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, self._path)
            with contextlib.suppress(Exception):
                os.chmod(self._path, 0o600)
        except Exception:
            logger.exception("Failed to save configurations to %s", self._path)
            return False
        return True

    # ---- public API ----

    def names(self) -> list[str]:
        return sorted(self._configs)

    def save(self, name: str, tasks: Iterable[Task]) -> bool:
        """Store copies of `tasks` under `name`, overwriting an existing entry."""
        name = _clean_name(name)
        updated = dict(self._configs)
        replaced = name in updated
        updated[name] = [t.snapshot() for t in tasks]
        if not self._write(updated):
            return False
        self._configs = updated
        logger.info(
            "Configuration %s name=%r tasks=%d",
            "overwritten" if replaced else "saved",
            name,
            len(updated[name]),
        )
        return True

    def load(self, name: str) -> list[Task] | None:
        tasks = self._configs.get((name or "").strip())
        if tasks is None:
            return None
        return [t.snapshot() for t in tasks]

    def delete(self, name: str) -> bool:
        name = (name or "").strip()
        if name not in self._configs:
            return False
        updated = {k: v for k, v in self._configs.items() if k != name}
        if not self._write(updated):
            return False
        self._configs = updated
        logger.info("Configuration deleted name=%r", name)
        return True

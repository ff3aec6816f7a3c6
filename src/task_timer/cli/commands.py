# src/task_timer/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..timers import timer_api
from ..timers.timer_models import Color, Task, TimerKind, format_time, parse_duration

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /start, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)

            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except ValueError as e:
            return f"Invalid input: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _resolve(state: AppState, args: list[str]) -> Task:
    if not args:
        raise ValueError("card number is required")
    try:
        position = int(args[0])
    except ValueError:
        raise ValueError(f"not a card number: {args[0]!r}") from None
    task = state.tasks.at(position)
    if task is None:
        raise ValueError(f"no card #{position} (have {len(state.tasks)})")
    return task


def _describe(position: int, task: Task) -> str:
    title = task.title or "(untitled)"
    state = "running" if task.running else "stopped"
    return f"{position}. {title} [{task.kind.value}] {task.display_time} {state}"


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    s = state.settings
    colors = "random" if state.use_random_colors else "plain"
    wall = "wall clock" if getattr(s, "use_wall_clock", False) else "tick count"
    return (
        "Status:\n"
        f"  Cards: {len(state.tasks)} ({len(state.driver.active_ids())} running)\n"
        f"  Saved configurations: {len(state.configs.names())}\n"
        f"  Tick: {state.driver.interval:.2f}s ({wall})\n"
        f"  New card colors: {colors}"
    )


def cmd_list(state: AppState, args: list[str]) -> str:
    if not len(state.tasks):
        return "No cards. Use /add to create one."
    return "\n".join(_describe(i, t) for i, t in enumerate(state.tasks, start=1))


def cmd_add(state: AppState, args: list[str]) -> str:
    title = " ".join(args).strip() or "New Task"
    timer_api.add_task(state, title=title)
    return f"Added card #{len(state.tasks)}: {title}"


def cmd_remove(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    state.tasks.remove(task.id)
    return f"Removed: {task.title or '(untitled)'}"


def cmd_title(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    task.title = " ".join(args[1:]).strip()
    return f"Renamed card #{args[0]} to {task.title or '(untitled)'}"


def cmd_start(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    if task.running:
        return "Already running."
    if not state.driver.start(task):
        return "Nothing to count down. Set a time with /countdown first."
    return f"Started: {_describe(int(args[0]), task)}"


def cmd_pause(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    if not task.running:
        return "Not running."
    state.driver.pause(task)
    return f"Paused at {task.display_time}"


def cmd_toggle(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    running = timer_api.toggle_timer(state, task)
    return f"{'Started' if running else 'Paused'}: {_describe(int(args[0]), task)}"


def cmd_reset(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    state.driver.reset(task)
    return f"Reset to {task.display_time}"


def cmd_kind(state: AppState, args: list[str]) -> str:
    """
    /kind N stopwatch
    /kind N countdown
    """
    task = _resolve(state, args)
    if len(args) < 2 or args[1].lower() not in {k.value for k in TimerKind}:
        return "Usage: /kind N stopwatch|countdown"
    timer_api.set_kind(state, task, TimerKind(args[1].lower()))
    return f"Card #{args[0]} is now a {task.kind.value} ({task.display_time})"


def cmd_countdown(state: AppState, args: list[str]) -> str:
    task = _resolve(state, args)
    if len(args) < 2:
        return "Usage: /countdown N MM:SS"
    seconds = parse_duration(" ".join(args[1:]))
    timer_api.set_countdown(state, task, seconds)
    return f"Countdown for card #{args[0]} set to {format_time(seconds)}"


def cmd_color(state: AppState, args: list[str]) -> str:
    """
    /color N bg r g b [a]
    /color N button r g b [a]
    /color N bg random
    """
    task = _resolve(state, args)
    usage = "Usage: /color N bg|button r g b [a] (0..1) or /color N bg|button random"
    if len(args) < 3 or args[1].lower() not in ("bg", "button"):
        return usage

    if args[2].lower() == "random":
        color = Color.random(alpha=0.2)
    else:
        try:
            channels = [float(v) for v in args[2:6]]
        except ValueError:
            return usage
        if len(channels) < 3:
            return usage
        color = Color(*channels)

    if args[1].lower() == "bg":
        task.background_color = color
    else:
        task.button_color = color
    return f"Card #{args[0]} {args[1].lower()} color: {color.to_list()}"


def cmd_random(state: AppState, args: list[str]) -> str:
    """
    /random       -> show status
    /random on    -> new cards get random background colors
    /random off   -> new cards use the plain background
    """
    if not args:
        return f"Random colors are {'ON' if state.use_random_colors else 'OFF'}. Use /random on or /random off."

    arg = args[0].lower()
    if arg in ("on", "1", "true", "yes"):
        state.use_random_colors = True
        return "Random colors enabled for new cards."
    if arg in ("off", "0", "false", "no"):
        state.use_random_colors = False
        return "Random colors disabled."
    return "Usage: /random on or /random off."


def cmd_save(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    name = " ".join(args).strip()
    if not name:
        return "Usage: /save NAME"
    replacing = name in state.configs.names()
    if replacing and emit:
        emit(f"Overwriting configuration {name!r}...")
    if not timer_api.save_configuration(state, name):
        return f"Could not save configuration {name!r} (see log)."
    return f"Saved {len(state.tasks)} cards as {name!r}."


def cmd_load(state: AppState, args: list[str]) -> str:
    name = " ".join(args).strip()
    if not name:
        return "Usage: /load NAME"
    count = timer_api.apply_configuration(state, name)
    if count is None:
        return f"No configuration named {name!r}. Use /configs to list them."
    return f"Loaded {count} cards from {name!r}."


def cmd_delete(state: AppState, args: list[str]) -> str:
    name = " ".join(args).strip()
    if not name:
        return "Usage: /delete NAME"
    if not state.configs.delete(name):
        return f"No configuration named {name!r} was deleted."
    return f"Deleted configuration {name!r}."


def cmd_configs(state: AppState, args: list[str]) -> str:
    names = state.configs.names()
    if not names:
        return "No saved configurations."
    lines = ["Saved configurations:"]
    for name in names:
        tasks = state.configs.load(name) or []
        lines.append(f"  {name} ({len(tasks)} cards)")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show session summary.")
registry.register("list", cmd_list, help_text="List cards with their timers.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a card: /add [title].")
registry.register("rm", cmd_remove, help_text="Remove a card: /rm N.", aliases=["remove"])
registry.register("title", cmd_title, help_text="Rename a card: /title N text.")
registry.register("start", cmd_start, help_text="Start a card's timer: /start N.")
registry.register("pause", cmd_pause, help_text="Pause a card's timer: /pause N.")
registry.register("toggle", cmd_toggle, help_text="Start or pause: /toggle N.", aliases=["t"])
registry.register("reset", cmd_reset, help_text="Reset a card's timer: /reset N.")
registry.register("kind", cmd_kind, help_text="Switch timer kind: /kind N stopwatch|countdown.")
registry.register("countdown", cmd_countdown, help_text="Set countdown time: /countdown N MM:SS.")
registry.register("color", cmd_color, help_text="Set card colors: /color N bg|button r g b [a].")
registry.register("random", cmd_random, help_text="Random colors for new cards: /random on|off.")
registry.register("save", cmd_save, help_text="Save cards as a configuration: /save NAME.")
registry.register("load", cmd_load, help_text="Replace cards with a configuration: /load NAME.")
registry.register("delete", cmd_delete, help_text="Delete a configuration: /delete NAME.")
registry.register("configs", cmd_configs, help_text="List saved configurations.")

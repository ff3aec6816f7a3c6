# tests/test_tick_driver.py

from __future__ import annotations

import asyncio

import pytest

from task_timer.timers.tick_driver import TickDriver
from task_timer.timers.timer_models import Task, TimerKind

from fakes import FakeClock, RecordingListener


def test_stopwatch_ticks_accumulate_period() -> None:
    driver = TickDriver(interval_seconds=0.1)
    task = Task(title="sw", running=True)

    for _ in range(25):
        assert driver.tick(task) is False

    assert task.elapsed_time == pytest.approx(2.5)
    assert task.running is True


def test_countdown_reaches_zero_and_stops() -> None:
    driver = TickDriver(interval_seconds=0.1)
    task = Task(title="cd", kind=TimerKind.COUNTDOWN, countdown_time=1.0, running=True)

    results = [driver.tick(task) for _ in range(10)]

    assert results[-1] is True
    assert results.count(True) == 1
    assert task.countdown_time == 0.0
    assert task.running is False

    # Further ticks on a stopped task do nothing.
    assert driver.tick(task) is False
    assert task.countdown_time == 0.0


def test_countdown_clamps_when_ticks_overshoot() -> None:
    driver = TickDriver(interval_seconds=0.1)
    task = Task(kind=TimerKind.COUNTDOWN, countdown_time=0.95, running=True)

    for _ in range(12):
        driver.tick(task)

    assert task.countdown_time == 0.0
    assert task.running is False


def test_tick_ignores_paused_task() -> None:
    driver = TickDriver(interval_seconds=0.1)
    task = Task(elapsed_time=4.0)
    assert driver.tick(task) is False
    assert task.elapsed_time == 4.0


def test_listener_errors_do_not_break_ticks() -> None:
    driver = TickDriver(interval_seconds=0.5)
    recorder = RecordingListener()

    def broken(task: Task, finished: bool) -> None:
        raise RuntimeError("boom")

    driver.add_listener(broken)
    driver.add_listener(recorder)
    task = Task(kind=TimerKind.COUNTDOWN, countdown_time=1.0, running=True)

    driver.tick(task)
    driver.tick(task)

    assert [e.finished for e in recorder.events] == [False, True]
    assert recorder.events[0].value == pytest.approx(0.5)


def test_reset_restores_initial_values() -> None:
    driver = TickDriver(interval_seconds=0.1)

    sw = Task(elapsed_time=12.0, running=True, start_time=1.0)
    driver.reset(sw)
    assert sw.elapsed_time == 0.0
    assert sw.running is False
    assert sw.start_time is None

    cd = Task(kind=TimerKind.COUNTDOWN, countdown_time=3.0, countdown_target=90.0)
    driver.reset(cd)
    assert cd.countdown_time == 90.0


@pytest.mark.asyncio
async def test_pause_then_resume_keeps_elapsed_time() -> None:
    # Long interval: the runner never fires, ticks are driven by hand.
    driver = TickDriver(interval_seconds=10.0)
    task = Task(title="resume")

    assert driver.start(task) is True
    for _ in range(5):
        driver.tick(task, dt=0.1)
    driver.pause(task)

    assert task.running is False
    assert not driver.is_active(task.id)
    assert task.elapsed_time == pytest.approx(0.5)
    assert task.end_time is not None

    assert driver.start(task) is True
    for _ in range(3):
        driver.tick(task, dt=0.1)

    assert task.elapsed_time == pytest.approx(0.8)
    await driver.shutdown()


@pytest.mark.asyncio
async def test_start_twice_keeps_a_single_handle() -> None:
    driver = TickDriver(interval_seconds=10.0)
    task = Task()

    assert driver.start(task) is True
    assert driver.start(task) is False
    assert driver.active_ids() == [task.id]

    await driver.shutdown()
    assert driver.active_ids() == []
    assert task.running is False


@pytest.mark.asyncio
async def test_empty_countdown_does_not_start() -> None:
    driver = TickDriver(interval_seconds=10.0)
    task = Task(kind=TimerKind.COUNTDOWN, countdown_time=0.0)

    assert driver.start(task) is False
    assert task.running is False
    assert driver.active_ids() == []


@pytest.mark.asyncio
async def test_scheduled_stopwatch_advances_until_paused() -> None:
    driver = TickDriver(interval_seconds=0.01)
    task = Task(title="live")

    driver.start(task)
    await asyncio.sleep(0.1)
    driver.pause(task)

    frozen = task.elapsed_time
    assert frozen > 0.0

    await asyncio.sleep(0.05)
    assert task.elapsed_time == frozen
    await driver.shutdown()


@pytest.mark.asyncio
async def test_scheduled_countdown_finishes_and_releases_handle() -> None:
    driver = TickDriver(interval_seconds=0.01)
    recorder = RecordingListener()
    driver.add_listener(recorder)
    task = Task(kind=TimerKind.COUNTDOWN, countdown_time=0.05)

    driver.start(task)
    await asyncio.sleep(0.3)

    assert task.countdown_time == 0.0
    assert task.running is False
    assert not driver.is_active(task.id)
    assert [e.finished for e in recorder.events].count(True) == 1


@pytest.mark.asyncio
async def test_wall_clock_mode_uses_timestamps() -> None:
    clock = FakeClock()
    driver = TickDriver(interval_seconds=10.0, use_wall_clock=True, clock=clock)
    task = Task(elapsed_time=2.0)

    driver.start(task)
    assert task.start_time == clock.now

    clock.advance(5.0)
    driver.tick(task)
    # 2s carried over + 5s of wall time, not 2 + interval.
    assert task.elapsed_time == pytest.approx(7.0)

    clock.advance(1.0)
    driver.pause(task)
    assert task.elapsed_time == pytest.approx(8.0)
    assert task.end_time == clock.now


@pytest.mark.asyncio
async def test_wall_clock_countdown_finishes_at_end_time() -> None:
    clock = FakeClock()
    driver = TickDriver(interval_seconds=10.0, use_wall_clock=True, clock=clock)
    task = Task(kind=TimerKind.COUNTDOWN, countdown_time=3.0)

    driver.start(task)
    assert task.end_time == pytest.approx(clock.now + 3.0)

    clock.advance(1.5)
    assert driver.tick(task) is False
    assert task.countdown_time == pytest.approx(1.5)

    clock.advance(2.0)
    assert driver.tick(task) is True
    assert task.countdown_time == 0.0
    assert not driver.is_active(task.id)


@pytest.mark.asyncio
async def test_retarget_while_running_is_last_write_wins() -> None:
    clock = FakeClock()
    driver = TickDriver(interval_seconds=10.0, clock=clock)
    task = Task(kind=TimerKind.COUNTDOWN, countdown_time=60.0, countdown_target=60.0)

    driver.start(task)
    driver.tick(task, dt=5.0)
    driver.retarget(task, 20.0)

    assert task.countdown_time == 20.0
    assert task.countdown_target == 20.0
    assert task.end_time == pytest.approx(clock.now + 20.0)
    assert task.running is True
    await driver.shutdown()


def _live_tick_runners() -> list[asyncio.Task]:
    return [t for t in asyncio.all_tasks() if t.get_name().startswith("tick:") and not t.done()]


@pytest.mark.asyncio
async def test_listener_restart_leaves_a_single_runner() -> None:
    driver = TickDriver(interval_seconds=0.01)
    task = Task(title="restart")
    restarted: list[str] = []

    def restart_once(t: Task, finished: bool) -> None:
        if not restarted:
            restarted.append(t.id)
            driver.pause(t)
            driver.start(t)

    driver.add_listener(restart_once)
    driver.start(task)
    await asyncio.sleep(0.1)

    assert restarted == [task.id]
    assert len(_live_tick_runners()) == 1
    assert driver.is_active(task.id)

    await driver.shutdown()
    await asyncio.sleep(0)
    assert _live_tick_runners() == []

    frozen = task.elapsed_time
    await asyncio.sleep(0.05)
    assert task.elapsed_time == frozen


@pytest.mark.asyncio
async def test_wall_clock_pause_after_expiry_reports_finished() -> None:
    clock = FakeClock()
    driver = TickDriver(interval_seconds=10.0, use_wall_clock=True, clock=clock)
    recorder = RecordingListener()
    driver.add_listener(recorder)
    task = Task(kind=TimerKind.COUNTDOWN, countdown_time=3.0)

    driver.start(task)
    clock.advance(5.0)
    driver.pause(task)

    assert task.countdown_time == 0.0
    assert task.running is False
    assert task.end_time is None
    assert [e.finished for e in recorder.events] == [True]

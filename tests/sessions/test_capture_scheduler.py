import asyncio

import pytest

from classroom_attendance.core.exceptions import ValidationError
from classroom_attendance.sessions.model import SessionConfig
from classroom_attendance.sessions.scheduler import AsyncioScheduler, CaptureScheduler


class FakeTimer:
    def __init__(self, callback):
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class RecordingScheduler:
    def __init__(self):
        self.every_calls = []
        self.after_calls = []

    def every(self, interval_ms, on_tick):
        timer = FakeTimer(on_tick)
        self.every_calls.append((interval_ms, timer))
        return timer

    def after(self, delay_ms, on_fire):
        timer = FakeTimer(on_fire)
        self.after_calls.append((delay_ms, timer))
        return timer


def test_first_tick_is_immediate_and_timers_are_armed():
    async def scenario():
        started = []

        async def cycle(idx):
            started.append(idx)

        timers = RecordingScheduler()
        captures = CaptureScheduler(
            timers, interval_ms=600000, duration_ms=3000000, total_captures=5, run_cycle=cycle, on_timeout=lambda: None
        )
        captures.start()
        await captures.wait_idle()
        return started, timers, captures

    started, timers, captures = asyncio.run(scenario())

    assert started == [1]
    assert timers.every_calls[0][0] == 600000
    assert timers.after_calls[0][0] == 3000000
    assert captures.capture_count == 1


def test_tick_is_skipped_while_cycle_in_flight():
    async def scenario():
        gate = asyncio.Event()
        started = []

        async def cycle(idx):
            started.append(idx)
            await gate.wait()

        timers = RecordingScheduler()
        captures = CaptureScheduler(
            timers, interval_ms=10, duration_ms=1000, total_captures=5, run_cycle=cycle, on_timeout=lambda: None
        )
        captures.start()
        await asyncio.sleep(0)
        on_tick = timers.every_calls[0][1].callback
        on_tick()
        on_tick()
        gate.set()
        await captures.wait_idle()
        on_tick()
        await captures.wait_idle()
        return started, captures

    started, captures = asyncio.run(scenario())

    assert started == [1, 2]
    assert captures.capture_count == 2


def test_cancel_stops_timers_and_later_ticks():
    async def scenario():
        started = []

        async def cycle(idx):
            started.append(idx)

        timers = RecordingScheduler()
        captures = CaptureScheduler(
            timers, interval_ms=10, duration_ms=1000, total_captures=5, run_cycle=cycle, on_timeout=lambda: None
        )
        captures.start()
        await captures.wait_idle()
        captures.cancel()
        timers.every_calls[0][1].callback()
        await captures.wait_idle()
        return started, timers, captures

    started, timers, captures = asyncio.run(scenario())

    assert started == [1]
    assert timers.every_calls[0][1].cancelled
    assert timers.after_calls[0][1].cancelled
    assert not captures.running


def test_crashing_cycle_does_not_stop_the_scheduler():
    async def scenario():
        async def cycle(idx):
            raise RuntimeError("boom")

        timers = RecordingScheduler()
        captures = CaptureScheduler(
            timers, interval_ms=10, duration_ms=1000, total_captures=3, run_cycle=cycle, on_timeout=lambda: None
        )
        captures.start()
        await captures.wait_idle()
        timers.every_calls[0][1].callback()
        await captures.wait_idle()
        return captures

    captures = asyncio.run(scenario())

    assert captures.capture_count == 2
    assert not captures.processing


def test_asyncio_scheduler_runs_real_timers():
    async def scenario():
        ended = asyncio.Event()
        ticks = []

        async def cycle(idx):
            ticks.append(idx)

        captures = CaptureScheduler(
            AsyncioScheduler(),
            interval_ms=5,
            duration_ms=200,
            total_captures=3,
            run_cycle=cycle,
            on_timeout=ended.set,
        )
        captures.start()
        await asyncio.wait_for(ended.wait(), timeout=2)
        captures.cancel()
        await captures.wait_idle()
        return ticks

    ticks = asyncio.run(scenario())

    assert ticks == [1, 2, 3]


def test_session_config_rejects_non_positive_values():
    with pytest.raises(ValidationError):
        SessionConfig(total_captures=0)

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None:
        raise NotImplementedError


class Scheduler(Protocol):
    """Timer source with no business logic; callbacks are plain callables."""

    def every(self, interval_ms: int, on_tick: Callable[[], None]) -> TimerHandle:
        raise NotImplementedError

    def after(self, delay_ms: int, on_fire: Callable[[], None]) -> TimerHandle:
        raise NotImplementedError


class _PeriodicTimer:
    def __init__(self, loop: asyncio.AbstractEventLoop, interval_s: float, callback: Callable[[], None]):
        self._loop = loop
        self._interval_s = interval_s
        self._callback = callback
        self._cancelled = False
        self._handle = loop.call_later(interval_s, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._handle = self._loop.call_later(self._interval_s, self._fire)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        self._handle.cancel()


class AsyncioScheduler(Scheduler):
    """Timers on the running asyncio loop (single-threaded, cooperative)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def every(self, interval_ms: int, on_tick: Callable[[], None]) -> TimerHandle:
        return _PeriodicTimer(self._get_loop(), interval_ms / 1000.0, on_tick)

    def after(self, delay_ms: int, on_fire: Callable[[], None]) -> TimerHandle:
        return self._get_loop().call_later(delay_ms / 1000.0, on_fire)


CaptureCycle = Callable[[int], Awaitable[None]]


class CaptureScheduler:
    """Drives the capture ticks of one session.

    - the first cycle runs immediately on ``start``
    - at most one cycle is in flight; a tick arriving meanwhile is dropped
    - no cycle starts once ``total_captures`` cycles have been started
    - ``on_timeout`` fires once after ``duration_ms``
    - ``cancel`` stops both timers but lets an in-flight cycle finish
    """

    def __init__(
        self,
        scheduler: Scheduler,
        *,
        interval_ms: int,
        duration_ms: int,
        total_captures: int,
        run_cycle: CaptureCycle,
        on_timeout: Callable[[], None],
    ):
        self._scheduler = scheduler
        self._interval_ms = int(interval_ms)
        self._duration_ms = int(duration_ms)
        self._total = int(total_captures)
        self._run_cycle = run_cycle
        self._on_timeout = on_timeout

        self._running = False
        self._capture_count = 0
        self._in_flight: Optional[asyncio.Future] = None
        self._interval_timer: Optional[TimerHandle] = None
        self._deadline_timer: Optional[TimerHandle] = None

    @property
    def capture_count(self) -> int:
        return self._capture_count

    @property
    def total_captures(self) -> int:
        return self._total

    @property
    def processing(self) -> bool:
        return self._in_flight is not None

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            raise RuntimeError("Capture scheduler already started")
        self._running = True
        self._on_tick()
        self._interval_timer = self._scheduler.every(self._interval_ms, self._on_tick)
        self._deadline_timer = self._scheduler.after(self._duration_ms, self._on_deadline)

    def cancel(self) -> None:
        self._running = False
        for timer in (self._interval_timer, self._deadline_timer):
            if timer is not None:
                timer.cancel()
        self._interval_timer = None
        self._deadline_timer = None

    async def wait_idle(self) -> None:
        if self._in_flight is not None:
            await self._in_flight

    def _on_tick(self) -> None:
        if not self._running:
            return
        if self._in_flight is not None:
            logger.info("Capture tick skipped: previous detection still running")
            return
        if self._capture_count >= self._total:
            logger.debug("Capture tick skipped: %d/%d captures done", self._capture_count, self._total)
            return

        self._capture_count += 1
        self._in_flight = asyncio.ensure_future(self._run(self._capture_count))

    async def _run(self, capture_index: int) -> None:
        try:
            await self._run_cycle(capture_index)
        except Exception:
            logger.exception("Capture cycle %d crashed", capture_index)
        finally:
            self._in_flight = None

    def _on_deadline(self) -> None:
        self._deadline_timer = None
        if self._running:
            logger.info("Session duration elapsed")
            self._on_timeout()

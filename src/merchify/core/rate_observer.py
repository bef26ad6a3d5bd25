"""Advisory request-rate counters.

The mockup service enforces rate limits server-side. The SDK keeps its own
per-client counters so applications can show how close they are to those
limits, but it never blocks or delays a request.

Every tracked request increments three counters:

- ``queue_length`` — requests started and not yet failed
- ``per_second`` — requests started in the last second
- ``per_minute`` — requests started in the last minute

The windowed counters are decremented by independent deferred callbacks, one
per request and window. The callbacks are scheduled through a
:class:`Scheduler` so they can be cancelled when the owning client closes.
The default scheduler runs them on timer threads, so they fire even after
the event loop that made the request has been closed.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Protocol

from pydantic import BaseModel, Field

from merchify.core.config import RATE_LIMITS

logger = logging.getLogger(__name__)

PER_SECOND_WINDOW = 1.0
PER_MINUTE_WINDOW = 60.0


class RateLimits(BaseModel):
    """Advisory limits published by the mockup service."""

    requests_per_minute: int = RATE_LIMITS["requests_per_minute"]
    requests_per_second: int = RATE_LIMITS["requests_per_second"]


class RateInfo(BaseModel):
    per_minute: int = Field(default=0, ge=0)
    per_second: int = Field(default=0, ge=0)
    limits: RateLimits = Field(default_factory=RateLimits)


class RateLimitInfo(BaseModel):
    """Snapshot returned by ``get_rate_limit_info()``."""

    queue_length: int = Field(default=0, ge=0)
    rate_info: RateInfo = Field(default_factory=RateInfo)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Runs a callback once after ``delay`` seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class ThreadTimerScheduler:
    """Schedules callbacks on daemon ``threading.Timer`` threads.

    Timers are independent of any asyncio loop, so a request made inside one
    ``asyncio.run`` call still expires after that loop is closed. Daemon
    threads never keep the interpreter alive at exit.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class RateObserver:
    """Per-client advisory rate counters.

    Args:
        limits: Limits reported in snapshots.
        scheduler: Timer source for the deferred decrements. Defaults to
            :class:`ThreadTimerScheduler`.
    """

    def __init__(self, limits: RateLimits | None = None, scheduler: Scheduler | None = None):
        self.limits = limits or RateLimits()
        self._scheduler = scheduler or ThreadTimerScheduler()
        # Timer callbacks may run on other threads
        self._lock = threading.Lock()
        self.queue_length = 0
        self.per_minute = 0
        self.per_second = 0
        self._pending: set[TimerHandle] = set()

    def track(self) -> None:
        """Record the start of a request and schedule its window expiries."""
        with self._lock:
            self.queue_length += 1
            self.per_minute += 1
            self.per_second += 1

        self._schedule(PER_SECOND_WINDOW, self._expire_second)
        self._schedule(PER_MINUTE_WINDOW, self._expire_minute)

    def decrease_queue(self) -> None:
        """Record that a request failed and is no longer queued."""
        with self._lock:
            self.queue_length = max(0, self.queue_length - 1)

    def snapshot(self) -> RateLimitInfo:
        with self._lock:
            return RateLimitInfo(
                queue_length=self.queue_length,
                rate_info=RateInfo(
                    per_minute=self.per_minute,
                    per_second=self.per_second,
                    limits=self.limits.model_copy(),
                ),
            )

    @property
    def pending_timers(self) -> int:
        with self._lock:
            return len(self._pending)

    def close(self) -> None:
        """Cancel every pending window expiry."""
        with self._lock:
            handles = list(self._pending)
            self._pending.clear()
        for handle in handles:
            handle.cancel()
        if handles:
            logger.debug(f"Cancelled {len(handles)} pending rate timers")

    def _schedule(self, delay: float, expire: Callable[[], None]) -> None:
        handle: TimerHandle | None = None
        ready = threading.Event()

        def fire() -> None:
            # The handle is only known once call_later has returned
            ready.wait()
            with self._lock:
                self._pending.discard(handle)
            expire()

        handle = self._scheduler.call_later(delay, fire)
        with self._lock:
            self._pending.add(handle)
        ready.set()

    def _expire_second(self) -> None:
        with self._lock:
            self.per_second = max(0, self.per_second - 1)

    def _expire_minute(self) -> None:
        with self._lock:
            self.per_minute = max(0, self.per_minute - 1)

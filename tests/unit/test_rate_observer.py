"""Tests for merchify.core.rate_observer — advisory rate counters."""

from __future__ import annotations

import asyncio
import time

import pytest

from merchify.core.rate_observer import (
    PER_MINUTE_WINDOW,
    PER_SECOND_WINDOW,
    RateLimits,
    RateObserver,
    ThreadTimerScheduler,
)


@pytest.mark.unit
class TestTrack:
    """Verify counter increments and deferred decrements."""

    def test_track_increments_all_counters(self, scheduler):
        observer = RateObserver(scheduler=scheduler)
        observer.track()

        info = observer.snapshot()
        assert info.queue_length == 1
        assert info.rate_info.per_minute == 1
        assert info.rate_info.per_second == 1

    def test_per_second_expires_before_per_minute(self, scheduler):
        observer = RateObserver(scheduler=scheduler)
        observer.track()

        scheduler.advance(PER_SECOND_WINDOW + 0.1)
        assert observer.per_second == 0
        assert observer.per_minute == 1

        scheduler.advance(PER_MINUTE_WINDOW)
        assert observer.per_minute == 0

    def test_burst_schedules_independent_decrements(self, scheduler):
        observer = RateObserver(scheduler=scheduler)
        observer.track()
        scheduler.advance(0.5)
        observer.track()
        observer.track()

        assert observer.per_second == 3

        # Only the first request's window has elapsed
        scheduler.advance(0.6)
        assert observer.per_second == 2

        scheduler.advance(0.5)
        assert observer.per_second == 0

    def test_track_does_not_expire_queue_length(self, scheduler):
        observer = RateObserver(scheduler=scheduler)
        observer.track()
        scheduler.advance(PER_MINUTE_WINDOW + 1)
        assert observer.queue_length == 1

    def test_decrements_floor_at_zero(self, scheduler):
        observer = RateObserver(scheduler=scheduler)
        observer.track()
        observer.per_second = 0
        observer.per_minute = 0

        scheduler.advance(PER_MINUTE_WINDOW + 1)
        assert observer.per_second == 0
        assert observer.per_minute == 0


@pytest.mark.unit
class TestQueue:
    def test_decrease_queue(self, scheduler):
        observer = RateObserver(scheduler=scheduler)
        observer.track()
        observer.decrease_queue()
        assert observer.queue_length == 0

    def test_decrease_queue_floors_at_zero(self, scheduler):
        observer = RateObserver(scheduler=scheduler)
        observer.decrease_queue()
        assert observer.queue_length == 0


@pytest.mark.unit
class TestSnapshot:
    def test_snapshot_reports_limits(self, scheduler):
        limits = RateLimits(requests_per_minute=100, requests_per_second=5)
        info = RateObserver(limits=limits, scheduler=scheduler).snapshot()
        assert info.rate_info.limits.requests_per_minute == 100
        assert info.rate_info.limits.requests_per_second == 5

    def test_default_limits(self, scheduler):
        info = RateObserver(scheduler=scheduler).snapshot()
        assert info.rate_info.limits.requests_per_minute == 450
        assert info.rate_info.limits.requests_per_second == 20

    def test_snapshot_is_a_copy(self, scheduler):
        observer = RateObserver(scheduler=scheduler)
        info = observer.snapshot()
        observer.track()
        assert info.queue_length == 0
        assert info.rate_info.per_minute == 0


@pytest.mark.unit
class TestClose:
    """Verify pending timers are cancellable."""

    def test_close_cancels_pending_timers(self, scheduler):
        observer = RateObserver(scheduler=scheduler)
        observer.track()
        observer.track()
        assert observer.pending_timers == 4

        observer.close()

        assert observer.pending_timers == 0
        assert scheduler.pending == 0
        scheduler.advance(PER_MINUTE_WINDOW + 1)
        assert observer.per_minute == 2

    def test_fired_timers_are_forgotten(self, scheduler):
        observer = RateObserver(scheduler=scheduler)
        observer.track()
        scheduler.advance(PER_SECOND_WINDOW)
        assert observer.pending_timers == 1


@pytest.mark.unit
class TestThreadTimerScheduler:
    """Verify the default scheduler with real timers."""

    def test_default_scheduler(self):
        assert isinstance(RateObserver()._scheduler, ThreadTimerScheduler)

    def test_track_outside_event_loop(self):
        observer = RateObserver()
        observer.track()
        try:
            assert observer.pending_timers == 2
        finally:
            observer.close()

    def test_windows_expire_across_event_loops(self):
        async def tracked_request(observer):
            observer.track()

        observer = RateObserver()
        try:
            asyncio.run(tracked_request(observer))
            time.sleep(PER_SECOND_WINDOW + 0.2)
            asyncio.run(tracked_request(observer))

            info = observer.snapshot()
            assert info.rate_info.per_second == 1
            assert info.rate_info.per_minute == 2
            assert observer.pending_timers == 3
        finally:
            observer.close()

    def test_close_cancels_real_timers(self):
        observer = RateObserver()
        observer.track()
        observer.close()

        time.sleep(PER_SECOND_WINDOW + 0.2)
        assert observer.per_second == 1
        assert observer.pending_timers == 0

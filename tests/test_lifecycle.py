from __future__ import annotations

import threading
import time

from cabin import Cabin, CabinPhase, CabinTiming, CancellableTimer, MemoryLogSink, RecordingDisplay
from scheduler import Direction

from conftest import wait_for


def start(cabin: Cabin) -> threading.Thread:
    worker = threading.Thread(target=cabin.run, daemon=True)
    worker.start()
    return worker


class TestCancellableTimer:
    def test_full_wait_completes(self):
        assert CancellableTimer(time_unit=0.001).wait(2) is True

    def test_cancelled_timer_returns_immediately(self):
        timer = CancellableTimer(time_unit=1.0)
        timer.cancel()
        began = time.monotonic()
        assert timer.wait(30) is False
        assert time.monotonic() - began < 0.5
        assert timer.cancelled

    def test_cancel_wakes_sleeping_waiter(self):
        timer = CancellableTimer(time_unit=1.0)
        results = []
        waiter = threading.Thread(target=lambda: results.append(timer.wait(30)))
        waiter.start()
        time.sleep(0.05)
        timer.cancel()
        waiter.join(1.0)
        assert not waiter.is_alive()
        assert results == [False]


class TestThreadedCabin:
    def test_stop_during_door_hold_ends_loop_promptly(self):
        cabin = Cabin(5, CabinTiming(time_unit=0.05), log_sink=MemoryLogSink())
        worker = start(cabin)
        cabin.add_outside_request(1, Direction.UP)
        assert wait_for(lambda: cabin.phase is CabinPhase.DOOR_HOLD)

        began = time.monotonic()
        cabin.stop()
        worker.join(1.0)

        assert not worker.is_alive()
        # the door cycle plus the idle wait alone would take 2.1 seconds
        assert time.monotonic() - began < 1.0
        assert cabin.phase is CabinPhase.STOPPED
        assert "Elevator waiting interrupted." in cabin.log_sink.lines

    def test_serves_calls_submitted_from_another_thread(self):
        display = RecordingDisplay()
        cabin = Cabin(5, CabinTiming(time_unit=0.002), display_sink=display)
        worker = start(cabin)
        try:
            cabin.add_inside_request(3)
            assert wait_for(lambda: 3 in display.floors_visited())
            assert wait_for(lambda: cabin.current_floor == 1 and cabin.phase is CabinPhase.IDLE)
        finally:
            cabin.stop()
            worker.join(1.0)
        assert display.floors_visited() == [1, 2, 3, 2, 1]
        assert not worker.is_alive()

    def test_stop_is_idempotent(self):
        cabin = Cabin(5, CabinTiming(time_unit=0.01))
        worker = start(cabin)
        cabin.stop()
        cabin.stop()
        worker.join(1.0)
        assert not worker.is_alive()
        assert not cabin.running

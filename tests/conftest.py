from __future__ import annotations

import time
from typing import Callable, List, Optional

import pytest

from cabin import Cabin, CabinTiming, CancellableTimer, MemoryLogSink, RecordingDisplay


class ScriptedTimer(CancellableTimer):
    """Zero-length timer that records each wait and runs hooks first."""

    def __init__(self) -> None:
        super().__init__(time_unit=0.0)
        self.waits: List[float] = []
        self.hooks: List[Callable[[float], None]] = []

    def wait(self, units: float) -> bool:
        self.waits.append(units)
        for hook in list(self.hooks):
            hook(units)
        return super().wait(units)


def wait_for(predicate: Callable[[], bool], timeout: float = 2.0, interval: float = 0.005) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()


@pytest.fixture
def timer() -> ScriptedTimer:
    return ScriptedTimer()


@pytest.fixture
def make_cabin(timer):
    def _make(top_floor: int = 5, timing: Optional[CabinTiming] = None) -> Cabin:
        return Cabin(
            top_floor,
            timing or CabinTiming(time_unit=0.0),
            log_sink=MemoryLogSink(),
            display_sink=RecordingDisplay(),
            timer=timer,
        )

    return _make

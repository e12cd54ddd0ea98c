"""Replay timed floor calls from a JSON scenario against a live cabin."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from scheduler import Direction

from .cabin import Cabin
from .config import CabinTiming
from .errors import AdmissionError
from .interface import QueueSnapshot
from .sinks import MemoryLogSink, RecordingDisplay
from .timer import CancellableTimer

logger = logging.getLogger(__name__)


@dataclass
class ScheduledCall:
    at: float
    kind: str
    floor: int
    direction: Optional[Direction] = None

    @classmethod
    def from_config(cls, item: Dict) -> "ScheduledCall":
        kind = item.get("type", "outside")
        if kind not in ("outside", "inside"):
            raise ValueError(f"Unknown request type '{kind}'")
        direction = item.get("direction")
        return cls(
            at=float(item.get("at", 0)),
            kind=kind,
            floor=int(item["floor"]),
            direction=Direction.parse(direction) if direction is not None else None,
        )

    def submit(self, cabin: Cabin) -> None:
        if self.kind == "inside":
            cabin.add_inside_request(self.floor)
        else:
            cabin.add_outside_request(self.floor, self.direction or Direction.NONE)


@dataclass
class ScenarioResult:
    name: str
    log: List[str]
    rejected: List[Dict]
    floors_visited: List[int]
    final: QueueSnapshot
    snapshots: int = 0
    metadata: Dict = field(default_factory=dict)

    def as_dict(self) -> Dict:
        return {
            "scenario": self.name,
            "log": self.log,
            "rejected": self.rejected,
            "floors_visited": self.floors_visited,
            "final": self.final.as_dict(),
            "snapshots": self.snapshots,
            **self.metadata,
        }


def build_timing(config: Dict) -> CabinTiming:
    timing_cfg = dict(config.get("timing", {}))
    timing_cfg.setdefault("time_unit", config.get("time_unit", 0.01))
    return CabinTiming(**timing_cfg)


def run_scenario(config: Dict, join_timeout: float = 5.0) -> ScenarioResult:
    """Run the cabin on a worker thread for ``duration`` units of the scenario.

    Calls are submitted at their ``at`` offsets; rejected calls are collected
    rather than raised.
    """

    timing = build_timing(config)
    top_floor = int(config.get("top_floor", 10))
    duration = float(config.get("duration", 120))
    calls = sorted(
        (ScheduledCall.from_config(item) for item in config.get("requests", [])),
        key=lambda call: call.at,
    )

    log = MemoryLogSink()
    display = RecordingDisplay()
    cabin = Cabin(top_floor, timing, log_sink=log, display_sink=display)
    worker = threading.Thread(target=cabin.run, name="cabin-service", daemon=True)
    worker.start()

    clock = CancellableTimer(timing.time_unit)
    elapsed = 0.0
    rejected: List[Dict] = []
    try:
        for call in calls:
            clock.wait(call.at - elapsed)
            elapsed = max(elapsed, call.at)
            try:
                call.submit(cabin)
            except AdmissionError as exc:
                rejected.append({"at": call.at, "type": call.kind, "floor": call.floor, "reason": exc.reason})
        if duration > elapsed:
            clock.wait(duration - elapsed)
    finally:
        cabin.stop()
        worker.join(join_timeout)
    if worker.is_alive():
        logger.warning("Cabin service loop did not stop within %.1f seconds", join_timeout)

    return ScenarioResult(
        name=config.get("name", "scenario"),
        log=log.lines,
        rejected=rejected,
        floors_visited=display.floors_visited(),
        final=cabin.snapshot(),
        snapshots=len(display.snapshots),
        metadata={"top_floor": top_floor, "duration": duration, "description": config.get("description")},
    )

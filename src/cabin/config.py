from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional


@dataclass
class CabinTiming:
    """Delays of the service loop, in time units.

    ``time_unit`` converts units to seconds; every wait scales with it.
    """

    time_unit: float = 1.0
    floor_travel_units: float = 3
    door_open_units: float = 1
    door_dwell_units: float = 10
    door_close_units: float = 1
    idle_poll_units: float = 1
    inside_wait_idle_units: int = 30
    inside_wait_busy_units: int = 10

    def __post_init__(self) -> None:
        if self.time_unit < 0:
            raise ValueError("time_unit must not be negative")


@dataclass
class CabinSettings:
    top_floor: int = 10
    timing: CabinTiming = field(default_factory=CabinTiming)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CabinSettings":
        env = os.environ if environ is None else environ
        top_floor = int(env.get("CABIN_TOP_FLOOR", "10"))
        if top_floor < 1:
            raise ValueError("CABIN_TOP_FLOOR must be at least 1")
        timing = CabinTiming(time_unit=float(env.get("CABIN_TIME_UNIT", "1.0")))
        log_level = env.get("CABIN_LOG_LEVEL", "INFO").upper()
        return cls(top_floor=top_floor, timing=timing, log_level=log_level)

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Tuple

from scheduler import Request


class CabinPhase(str, Enum):
    IDLE = "idle"
    RETURNING = "returning"
    SERVICING = "servicing"
    DOOR_HOLD = "door_hold"
    STOPPED = "stopped"


@dataclass(frozen=True)
class QueueSnapshot:
    """Read-only view of the cabin handed to display sinks."""

    active: Optional[Request]
    pending: Tuple[Request, ...]
    current_floor: int
    moving_up: bool
    phase: CabinPhase

    def as_dict(self) -> dict:
        return {
            "active": self.active.as_dict() if self.active else None,
            "pending": [request.as_dict() for request in self.pending],
            "current_floor": self.current_floor,
            "moving_up": self.moving_up,
            "phase": self.phase.value,
        }


class LogSink(Protocol):
    """Append-only receiver of cabin log lines."""

    def append(self, line: str) -> None:
        ...


class DisplaySink(Protocol):
    """Renders queue snapshots. Called often, from the service loop thread."""

    def show(self, snapshot: QueueSnapshot) -> None:
        ...

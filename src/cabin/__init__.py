"""Single-cabin elevator service loop for LiftQueue."""

from .cabin import HOME_FLOOR, Cabin
from .config import CabinSettings, CabinTiming
from .errors import (
    AdmissionError,
    CabinStopped,
    InvalidBoundaryDirection,
    InvalidDirection,
    OutOfRangeFloor,
    RedundantInsideCall,
)
from .interface import CabinPhase, DisplaySink, LogSink, QueueSnapshot
from .sinks import MemoryLogSink, RecordingDisplay, StreamLogSink, TextQueueDisplay, render_queue
from .timer import CancellableTimer

__all__ = [
    "AdmissionError",
    "Cabin",
    "CabinPhase",
    "CabinSettings",
    "CabinStopped",
    "CabinTiming",
    "CancellableTimer",
    "DisplaySink",
    "HOME_FLOOR",
    "InvalidBoundaryDirection",
    "InvalidDirection",
    "LogSink",
    "MemoryLogSink",
    "OutOfRangeFloor",
    "QueueSnapshot",
    "RecordingDisplay",
    "RedundantInsideCall",
    "StreamLogSink",
    "TextQueueDisplay",
    "render_queue",
]

from __future__ import annotations

import threading
from collections import deque
from typing import Deque, List, Optional, TextIO

from .interface import QueueSnapshot

SEPARATOR = "--------------------------------"


def render_queue(snapshot: QueueSnapshot) -> str:
    """Text for the queue panel; empty while nothing is being serviced."""

    if snapshot.active is None:
        return ""
    lines = [f"Current queue item: {snapshot.active}"]
    if snapshot.pending:
        lines.extend([SEPARATOR, "Awaiting queue items:", SEPARATOR])
        for request in snapshot.pending:
            direction = request.direction.value if request.has_direction else None
            lines.append(f"Floor: {request.floor}, Direction: {direction}")
    return "\n".join(lines) + "\n"


class MemoryLogSink:
    """Keeps the most recent log lines in memory."""

    def __init__(self, max_lines: Optional[int] = None) -> None:
        self._lines: Deque[str] = deque(maxlen=max_lines)
        self._lock = threading.Lock()

    def append(self, line: str) -> None:
        with self._lock:
            self._lines.append(line)

    @property
    def lines(self) -> List[str]:
        with self._lock:
            return list(self._lines)


class StreamLogSink:
    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self._lock = threading.Lock()

    def append(self, line: str) -> None:
        with self._lock:
            self.stream.write(line + "\n")
            self.stream.flush()


class TextQueueDisplay:
    """Holds the rendered queue text of the latest snapshot."""

    def __init__(self) -> None:
        self.text = ""
        self.latest: Optional[QueueSnapshot] = None

    def show(self, snapshot: QueueSnapshot) -> None:
        self.latest = snapshot
        self.text = render_queue(snapshot)


class RecordingDisplay:
    def __init__(self) -> None:
        self._snapshots: List[QueueSnapshot] = []
        self._lock = threading.Lock()

    def show(self, snapshot: QueueSnapshot) -> None:
        with self._lock:
            self._snapshots.append(snapshot)

    @property
    def snapshots(self) -> List[QueueSnapshot]:
        with self._lock:
            return list(self._snapshots)

    def floors_visited(self) -> List[int]:
        """Distinct consecutive floors seen across the recorded snapshots."""
        floors: List[int] = []
        for snapshot in self.snapshots:
            if not floors or floors[-1] != snapshot.current_floor:
                floors.append(snapshot.current_floor)
        return floors

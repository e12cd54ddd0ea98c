from __future__ import annotations

import logging
import threading
from collections import deque
from enum import Enum
from typing import Deque, Optional, Union

from scheduler import Direction, Request, sort_queue

from .config import CabinTiming
from .errors import (
    AdmissionError,
    CabinStopped,
    InvalidBoundaryDirection,
    InvalidDirection,
    OutOfRangeFloor,
    RedundantInsideCall,
)
from .interface import CabinPhase, DisplaySink, LogSink, QueueSnapshot
from .timer import CancellableTimer

logger = logging.getLogger(__name__)

BOTTOM_FLOOR = 1
HOME_FLOOR = BOTTOM_FLOOR


class Movement(Enum):
    ARRIVED = "arrived"
    INTERRUPTED = "interrupted"
    STOPPED = "stopped"


class Cabin:
    """A single elevator cabin: floor-call admission plus the service loop.

    Callers submit calls with :meth:`add_outside_request` and
    :meth:`add_inside_request` from any thread while :meth:`run` drives the
    cabin on its own thread. Every admission and every read-modify-write of
    the loop holds ``_lock``; the loop lets go of it while it sleeps so calls
    can land mid-flight.

    The state attributes are public for inspection. Only the cabin's own
    operations change them.
    """

    def __init__(
        self,
        top_floor: int,
        timing: Optional[CabinTiming] = None,
        log_sink: Optional[LogSink] = None,
        display_sink: Optional[DisplaySink] = None,
        timer: Optional[CancellableTimer] = None,
    ) -> None:
        if top_floor < 1:
            raise ValueError("top_floor must be at least 1")
        self.top_floor = top_floor
        self.timing = timing or CabinTiming()
        self.log_sink = log_sink
        self.display_sink = display_sink
        self.timer = timer or CancellableTimer(self.timing.time_unit)
        self.current_floor = HOME_FLOOR
        self.moving_up = False
        self.active: Optional[Request] = None
        self.pending: Deque[Request] = deque()
        self.running = True
        self.phase = CabinPhase.IDLE
        self._lock = threading.RLock()
        self._log("Elevator initialized at floor 1.")
        self._publish()

    # Admission

    def add_outside_request(self, floor: int, direction: Union[Direction, str]) -> Request:
        """Admit a hall call and fold it into the plan.

        Raises an :class:`AdmissionError` subclass, without touching any
        state, when the call is out of range or points out of the building.
        """
        with self._lock:
            self._check_running()
            self._check_range(floor)
            direction = self._coerce_direction(direction)
            if (floor == BOTTOM_FLOOR and direction is not Direction.UP) or (
                floor == self.top_floor and direction is not Direction.DOWN
            ):
                self._reject(
                    InvalidBoundaryDirection(
                        "Invalid request. Floor 1 can only go up, and the top floor can only go down."
                    )
                )
            request = Request.outside(floor, direction)
            self._prioritize(request)
            self._reoptimize()
        self._publish()
        return request

    def add_inside_request(self, floor: int) -> Request:
        """Admit a cabin-panel call. Panel calls jump to the head of the queue."""
        with self._lock:
            self._check_running()
            self._check_range(floor)
            if floor == self.current_floor:
                self._reject(RedundantInsideCall(f"You are already on floor {floor}."))
            request = Request.inside(floor)
            self._log(f"Inside button pressed for floor {floor}.")
            self.pending.appendleft(request)
            self._reoptimize()
        self._publish()
        return request

    def _prioritize(self, request: Request) -> None:
        active = self.active
        floor = request.floor
        if active is None:
            self._log("Elevator is idle, adding request to the queue.")
            self.pending.append(request)
            return

        if self.moving_up and self.current_floor < floor < active.floor:
            self._log(f"Prioritizing request to stop at floor {floor} on the way up.")
            self._promote(request)
        elif not self.moving_up and active.floor < floor < self.current_floor:
            self._log(f"Prioritizing request to stop at floor {floor} on the way down.")
            self._promote(request)
        elif self.pending:
            head = self.pending[0]
            if (
                self.moving_up
                and request.direction is Direction.UP
                and self.current_floor < floor < head.floor
            ):
                self._log(f"Inserting outside request at floor {floor} on the way up.")
                self.pending.appendleft(request)
            elif (
                not self.moving_up
                and request.direction is Direction.DOWN
                and head.floor < floor < self.current_floor
            ):
                self._log(f"Inserting outside request at floor {floor} on the way down.")
                self.pending.appendleft(request)
            else:
                self._log(f"Adding request for floor {floor} to the end of the queue.")
                self.pending.append(request)
        else:
            self._log(f"Adding request for floor {floor} to the end of the queue.")
            self.pending.append(request)

    def _promote(self, request: Request) -> None:
        self.pending.appendleft(self.active)
        self.active = request

    def _reoptimize(self) -> None:
        self.pending = deque(sort_queue(self.pending, self.active, self.current_floor))

    def _check_running(self) -> None:
        if not self.running:
            self._reject(CabinStopped("Elevator is stopped. Request ignored."))

    def _check_range(self, floor: int) -> None:
        if floor < BOTTOM_FLOOR or floor > self.top_floor:
            self._reject(
                OutOfRangeFloor(f"Invalid floor. Please select a floor between 1 and {self.top_floor}.")
            )

    def _coerce_direction(self, direction: Union[Direction, str]) -> Direction:
        try:
            direction = Direction(direction)
        except ValueError:
            direction = Direction.NONE
        if direction is Direction.NONE:
            self._reject(InvalidDirection("Invalid direction. Please enter 'up' or 'down'."))
        return direction

    def _reject(self, error: AdmissionError) -> None:
        self._log(error.reason, level=logging.WARNING)
        raise error

    # Lifecycle

    def run(self) -> None:
        """Serve calls until :meth:`stop` is called. Blocks the calling thread."""
        self._log("Elevator service loop started.")
        while self.running:
            self.step()
        with self._lock:
            self.phase = CabinPhase.STOPPED
        self._log("Elevator stopped.")
        self._publish()

    def stop(self) -> None:
        with self._lock:
            if not self.running:
                return
            self.running = False
            self._log("Forcing elevator system to stop.")
        self.timer.cancel()

    def step(self) -> None:
        """Run one tick of the service loop."""
        with self._lock:
            if not self.running:
                self.phase = CabinPhase.STOPPED
                return
            if self.active is None and self.pending:
                self.active = self.pending.popleft()
            request = self.active
            returning = request is None and self.current_floor != HOME_FLOOR
        self._publish()

        if request is not None:
            self._service(request)
        elif returning:
            self._log("Returning to floor 1 as no more requests are in the queue.")
            self._return_home()
        else:
            self._enter(CabinPhase.IDLE)
            self._sleep(self.timing.idle_poll_units)
        self._publish()

    # Service loop internals

    def _service(self, request: Request) -> None:
        self._enter(CabinPhase.SERVICING)
        outcome = self._travel(request, tracked=request)
        while outcome is Movement.INTERRUPTED:
            with self._lock:
                request = self.active
            outcome = self._travel(request, tracked=request)

        go_home = False
        if outcome is Movement.ARRIVED:
            self._arrive(request)
            go_home = self._hold_doors()
        with self._lock:
            self.active = None
        self._publish()

        if go_home:
            self._log("No more requests. Returning to floor 1.")
            self._return_home()

    def _return_home(self) -> None:
        self._enter(CabinPhase.RETURNING)
        home = Request.outside(HOME_FLOOR, Direction.UP)
        if self._travel(home, tracked=None) is Movement.ARRIVED:
            self._arrive(home)
        self._enter(CabinPhase.IDLE)

    def _travel(self, request: Request, tracked: Optional[Request]) -> Movement:
        """Move one floor per tick toward ``request``.

        ``tracked`` is what the active slot held when the loop committed to
        this trip; any other occupant seen after a step is a promoted call.
        """
        target = request.floor
        with self._lock:
            self.moving_up = target > self.current_floor
        self._log(f"Starting movement to floor {target}")

        while True:
            with self._lock:
                if not self.running:
                    return Movement.STOPPED
                if self.current_floor == target:
                    return Movement.ARRIVED
                self.current_floor += 1 if self.current_floor < target else -1
                floor = self.current_floor
                # A call promoted into the active slot since departure means
                # there is a closer stop to head for.
                retargeted = self.active is not tracked
            if floor != target:
                self._log(f"Passing floor {floor}")
            self._publish()
            if retargeted:
                self._log(f"Changing course at floor {floor} for a closer stop.")
                return Movement.INTERRUPTED
            self._sleep(self.timing.floor_travel_units)

    def _arrive(self, request: Request) -> None:
        with self._lock:
            floor = self.current_floor
            if self.pending and self.pending[0].floor == floor:
                self.pending.popleft()
            if request.direction is Direction.UP:
                self.moving_up = True
            elif request.direction is Direction.DOWN:
                self.moving_up = False
        self._log(f"Arrived at floor {floor}")
        self._publish()

    def _hold_doors(self) -> bool:
        """Cycle the doors, then linger for panel calls.

        Returns True when the cabin should head home afterwards.
        """
        self._enter(CabinPhase.DOOR_HOLD)
        door_cycle = (
            ("Opening doors...", self.timing.door_open_units),
            ("Waiting for passengers to enter/exit...", self.timing.door_dwell_units),
            ("Closing doors...", self.timing.door_close_units),
        )
        for message, units in door_cycle:
            self._log(message)
            if not self._sleep(units):
                return False

        if self._has_inside_request():
            self._log("Inside button pressed. Processing inside request...")
            return False

        self._log("Waiting for inside button calls...")
        with self._lock:
            if self.pending:
                wait_units = self.timing.inside_wait_busy_units
            else:
                wait_units = self.timing.inside_wait_idle_units
        for _ in range(wait_units):
            if self._has_inside_request():
                self._log("Inside button pressed. Processing inside request...")
                return False
            if not self._sleep(1):
                return False

        with self._lock:
            return self.running and not self.pending

    def _has_inside_request(self) -> bool:
        with self._lock:
            return any(request.is_inside for request in self.pending)

    def _sleep(self, units: float) -> bool:
        if self.timer.wait(units):
            return True
        self._log("Elevator waiting interrupted.")
        return False

    def _enter(self, phase: CabinPhase) -> None:
        with self._lock:
            if self.running:
                self.phase = phase

    # Status projection

    def snapshot(self) -> QueueSnapshot:
        with self._lock:
            return QueueSnapshot(
                active=self.active,
                pending=tuple(self.pending),
                current_floor=self.current_floor,
                moving_up=self.moving_up,
                phase=self.phase,
            )

    def _publish(self) -> None:
        if self.display_sink is not None:
            self.display_sink.show(self.snapshot())

    def _log(self, message: str, level: int = logging.INFO) -> None:
        logger.log(level, message)
        if self.log_sink is not None:
            self.log_sink.append(message)

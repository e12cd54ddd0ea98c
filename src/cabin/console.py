"""Text menu for driving a cabin from a terminal."""
from __future__ import annotations

import logging
import sys
import threading
from typing import Iterator, Optional, TextIO

from scheduler import Direction

from .cabin import Cabin
from .config import CabinTiming
from .errors import AdmissionError
from .interface import LogSink
from .sinks import TextQueueDisplay

logger = logging.getLogger(__name__)

MENU = (
    "\nChoose an action:\n"
    "1. Add an outside request\n"
    "2. Add an inside button request\n"
    "3. Exit\n"
    "4. Show the request queue\n"
    "> "
)


class InvalidInput(ValueError):
    pass


class Console:
    """Reads floor calls from a text stream and hands them to a cabin.

    Raw input is validated here (integers, floor range, direction tokens)
    before the cabin sees it; the cabin still re-checks every call.
    """

    def __init__(
        self,
        stdin: TextIO = sys.stdin,
        stdout: TextIO = sys.stdout,
        timing: Optional[CabinTiming] = None,
        log_sink: Optional[LogSink] = None,
        join_timeout: float = 5.0,
    ) -> None:
        self.stdin = stdin
        self.stdout = stdout
        self.timing = timing or CabinTiming()
        self.log_sink = log_sink
        self.join_timeout = join_timeout
        self.display = TextQueueDisplay()
        self.cabin: Optional[Cabin] = None
        self._tokens = self._read_tokens()

    def run(self) -> int:
        try:
            top_floor = self.prompt_top_floor()
        except EOFError:
            return 1
        logger.info("Console session started with top floor %d", top_floor)
        self.cabin = Cabin(top_floor, self.timing, log_sink=self.log_sink, display_sink=self.display)
        worker = threading.Thread(target=self.cabin.run, name="cabin-service", daemon=True)
        worker.start()
        try:
            self.loop(self.cabin)
        except EOFError:
            self._write("\nInput closed. Stopping the elevator...\n")
        finally:
            self.cabin.stop()
            worker.join(self.join_timeout)
        return 0

    def prompt_top_floor(self) -> int:
        while True:
            try:
                top_floor = self._read_int("Enter the top floor of the building: ")
            except InvalidInput:
                self._write("Invalid input. Please enter a valid integer.\n")
                continue
            if top_floor < 1:
                self._write("Invalid input. The top floor must be at least 1.\n")
                continue
            return top_floor

    def loop(self, cabin: Cabin) -> None:
        while True:
            try:
                choice = self._read_int(MENU)
            except InvalidInput:
                self._write("Invalid input. Please enter a valid number.\n")
                continue

            if choice == 1:
                self._outside_call(cabin)
            elif choice == 2:
                self._inside_call(cabin)
            elif choice == 3:
                self._write("Stopping the elevator...\n")
                cabin.stop()
                return
            elif choice == 4:
                self._write(self.display.text or "No request in progress.\n")
            else:
                self._write("Invalid choice. Please try again.\n")

    def _outside_call(self, cabin: Cabin) -> None:
        try:
            floor = self._read_int("Enter the floor number: ")
        except InvalidInput:
            self._write("Invalid input. Please enter a valid number.\n")
            return
        token = self._next_token("Enter direction (up/down): ")
        try:
            direction = Direction.parse(token)
        except ValueError as exc:
            self._write(f"{exc}\n")
            return
        if self._in_range(cabin, floor):
            self._submit(cabin.add_outside_request, floor, direction)

    def _inside_call(self, cabin: Cabin) -> None:
        try:
            floor = self._read_int("Enter the inside floor button: ")
        except InvalidInput:
            self._write("Invalid input. Please enter a valid number.\n")
            return
        if self._in_range(cabin, floor):
            self._submit(cabin.add_inside_request, floor)

    def _in_range(self, cabin: Cabin, floor: int) -> bool:
        if 1 <= floor <= cabin.top_floor:
            return True
        self._write(f"Invalid floor. Please select a floor between 1 and {cabin.top_floor}.\n")
        return False

    def _submit(self, admit, *args) -> None:
        try:
            request = admit(*args)
        except AdmissionError as exc:
            self._write(f"{exc.reason}\n")
            return
        self._write(f"Queued {request}.\n")

    def _read_int(self, prompt: str) -> int:
        token = self._next_token(prompt)
        try:
            return int(token)
        except ValueError:
            raise InvalidInput(token) from None

    def _next_token(self, prompt: str) -> str:
        self._write(prompt)
        try:
            return next(self._tokens)
        except StopIteration:
            raise EOFError from None

    def _read_tokens(self) -> Iterator[str]:
        for line in self.stdin:
            yield from line.split()

    def _write(self, text: str) -> None:
        self.stdout.write(text)
        self.stdout.flush()

from __future__ import annotations


class AdmissionError(ValueError):
    """A floor call the cabin refused. Scheduler state is left untouched."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class OutOfRangeFloor(AdmissionError):
    pass


class InvalidDirection(AdmissionError):
    pass


class InvalidBoundaryDirection(InvalidDirection):
    """Floor 1 can only call up and the top floor can only call down."""


class RedundantInsideCall(AdmissionError):
    pass


class CabinStopped(AdmissionError):
    pass

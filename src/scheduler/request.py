from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    NONE = "none"  # inside calls carry no direction

    @classmethod
    def parse(cls, token: str) -> "Direction":
        """Parse an ``up``/``down`` token typed by a caller."""
        value = token.strip().lower()
        if value == cls.UP.value:
            return cls.UP
        if value == cls.DOWN.value:
            return cls.DOWN
        raise ValueError(f"Invalid direction '{token}'. Please enter 'up' or 'down'.")


@dataclass(frozen=True)
class Request:
    """A floor call, either from a hall button or from the cabin panel."""

    floor: int
    direction: Direction = Direction.NONE
    is_inside: bool = False

    @classmethod
    def outside(cls, floor: int, direction: Direction) -> "Request":
        return cls(floor=floor, direction=direction, is_inside=False)

    @classmethod
    def inside(cls, floor: int) -> "Request":
        return cls(floor=floor, direction=Direction.NONE, is_inside=True)

    @property
    def has_direction(self) -> bool:
        return self.direction is not Direction.NONE

    def as_dict(self) -> dict:
        return {
            "floor": self.floor,
            "direction": self.direction.value if self.has_direction else None,
            "inside": self.is_inside,
        }

    def __str__(self) -> str:
        if self.is_inside:
            return f"Request [Floor: {self.floor} (inside)]"
        return f"Request [Floor: {self.floor}, Direction: {self.direction.value}]"

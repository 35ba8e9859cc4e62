from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Protocol


class Direction(Enum):
    IDLE = "Idle"
    UP = "Up"
    DOWN = "Down"

    @property
    def opposite(self) -> "Direction":
        if self is Direction.UP:
            return Direction.DOWN
        if self is Direction.DOWN:
            return Direction.UP
        return Direction.IDLE

    def __str__(self) -> str:
        return self.value


class CarState(Enum):
    IDLE = "Idle"
    MOVING_UP = "MovingUp"
    MOVING_DOWN = "MovingDown"
    DOOR_OPEN = "DoorOpen"

    def __str__(self) -> str:
        return self.value


class RequestKind(Enum):
    HALL_CALL = "HallCall"
    CAB_CALL = "CabCall"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Request:
    """A single call for service; direction only matters for hall calls."""

    floor: int
    direction: Direction = Direction.IDLE
    kind: RequestKind = RequestKind.CAB_CALL

    @classmethod
    def hall(cls, floor: int, direction: Direction) -> "Request":
        return cls(floor=floor, direction=direction, kind=RequestKind.HALL_CALL)

    @classmethod
    def cab(cls, floor: int) -> "Request":
        return cls(floor=floor, kind=RequestKind.CAB_CALL)

    @property
    def is_hall_call(self) -> bool:
        return self.kind is RequestKind.HALL_CALL

    def __str__(self) -> str:
        if self.is_hall_call:
            return f"HallCall(floor={self.floor}, dir={self.direction})"
        return f"CabCall(floor={self.floor})"


@dataclass(frozen=True)
class CarSnapshot:
    """Lightweight view of a car for dispatch decisions."""

    car_id: int
    floor: int
    state: CarState
    direction: Direction
    pending: int

    @property
    def idle(self) -> bool:
        return self.state is CarState.IDLE or self.direction is Direction.IDLE


class StopSetCapacityError(ValueError):
    """Raised when a fixed-width stop set cannot cover the floor range."""


class FloorOutOfRangeError(ValueError):
    """Raised when a floor outside a stop set's range is marked."""


def check_floor(floor: int, min_floor: int, max_floor: int) -> None:
    if not min_floor <= floor <= max_floor:
        raise FloorOutOfRangeError(f"Floor {floor} outside [{min_floor}, {max_floor}]")


class StopSet(Protocol):
    """Floors that need a stop for one travel direction.

    Floors are absolute building floors inside the range the set was built
    for. Marking a floor outside that range raises
    ``FloorOutOfRangeError``; testing or clearing one is a no-op that
    reports it unmarked. ``has_above``/``has_below`` look strictly
    above/below the given floor. ``snapshot`` returns the marked floors in ascending order.
    """

    def mark(self, floor: int) -> None:
        ...

    def clear(self, floor: int) -> None:
        ...

    def test(self, floor: int) -> bool:
        ...

    def has_above(self, floor: int) -> bool:
        ...

    def has_below(self, floor: int) -> bool:
        ...

    def any(self) -> bool:
        ...

    def count(self) -> int:
        ...

    def snapshot(self) -> List[int]:
        ...

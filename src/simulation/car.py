from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from scheduler import CarSnapshot, CarState, Direction, Request, StopSet, get_stop_set

logger = logging.getLogger(__name__)


class CarAction(Enum):
    IDLE = "idle"
    DEPARTING = "departing"
    MOVED = "moved"
    STOPPED = "stopped"
    DOOR_OPEN = "door_open"
    DOOR_CLOSED = "door_closed"


@dataclass(frozen=True)
class StepOutcome:
    """What a single car did during one tick."""

    car_id: int
    action: CarAction
    floor: int
    state: CarState
    direction: Direction
    door_timer: int = 0

    @property
    def stopped(self) -> bool:
        return self.action is CarAction.STOPPED

    def __str__(self) -> str:
        prefix = f"Car {self.car_id}:"
        if self.action is CarAction.MOVED:
            return f"{prefix} moved to floor {self.floor}"
        if self.action is CarAction.STOPPED:
            return f"{prefix} moved to floor {self.floor} [stop, door opening]"
        if self.action is CarAction.DOOR_OPEN:
            return f"{prefix} door open at floor {self.floor} (closing in {self.door_timer})"
        if self.action is CarAction.DOOR_CLOSED:
            return f"{prefix} door closed at floor {self.floor}, direction={self.direction}"
        if self.action is CarAction.DEPARTING:
            return f"{prefix} idle at floor {self.floor}, starting {self.direction}"
        return f"{prefix} idle at floor {self.floor}"


@dataclass
class Car:
    """A single elevator car scheduled with the LOOK policy.

    The car keeps one stop set for floors to serve while travelling up and
    one for floors to serve while travelling down. It sweeps in its current
    direction while any stop remains ahead and only then turns around, so it
    reverses at the farthest outstanding request instead of the shaft end.
    """

    car_id: int
    min_floor: int
    max_floor: int
    stop_set: str = "flags"
    door_open_ticks: int = 2
    start_floor: Optional[int] = None
    current_floor: int = field(init=False)
    state: CarState = field(default=CarState.IDLE, init=False)
    direction: Direction = field(default=Direction.IDLE, init=False)
    up_stops: StopSet = field(init=False, repr=False)
    down_stops: StopSet = field(init=False, repr=False)
    _door_timer: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.min_floor > self.max_floor:
            raise ValueError(f"min_floor {self.min_floor} is above max_floor {self.max_floor}")
        if self.door_open_ticks < 1:
            raise ValueError("door_open_ticks must be at least 1")
        start = self.min_floor if self.start_floor is None else self.start_floor
        if not self.min_floor <= start <= self.max_floor:
            raise ValueError(
                f"Start floor {start} outside [{self.min_floor}, {self.max_floor}]"
            )
        self.current_floor = start
        self.up_stops = get_stop_set(self.stop_set, self.min_floor, self.max_floor)
        self.down_stops = get_stop_set(self.stop_set, self.min_floor, self.max_floor)

    @property
    def door_timer(self) -> int:
        return self._door_timer

    def add_request(self, request: Request) -> None:
        floor = request.floor
        if not self.min_floor <= floor <= self.max_floor:
            logger.debug(
                "Car %d ignoring %s outside [%d, %d]",
                self.car_id,
                request,
                self.min_floor,
                self.max_floor,
            )
            return

        if floor == self.current_floor and self.state in (CarState.IDLE, CarState.DOOR_OPEN):
            self._open_door(Direction.IDLE)
            return

        if request.is_hall_call:
            target = self.up_stops if request.direction is Direction.UP else self.down_stops
        elif floor > self.current_floor:
            target = self.up_stops
        elif floor < self.current_floor:
            target = self.down_stops
        else:
            # cab call for the floor a moving car is passing
            logger.debug("Car %d passing floor %d, dropping %s", self.car_id, floor, request)
            return
        target.mark(floor)

        if self.state is CarState.IDLE:
            self._start_moving(Direction.UP if floor > self.current_floor else Direction.DOWN)

    def step(self) -> StepOutcome:
        if self.state is CarState.DOOR_OPEN:
            return self._step_door_open()
        if self.state is CarState.MOVING_UP:
            return self._step_move(Direction.UP)
        if self.state is CarState.MOVING_DOWN:
            return self._step_move(Direction.DOWN)
        return self._step_idle()

    def has_pending_requests(self) -> bool:
        return self.up_stops.any() or self.down_stops.any()

    def pending_count(self) -> int:
        return self.up_stops.count() + self.down_stops.count()

    def stops_snapshot(self) -> Tuple[List[int], List[int]]:
        return self.up_stops.snapshot(), self.down_stops.snapshot()

    def snapshot(self) -> CarSnapshot:
        return CarSnapshot(
            car_id=self.car_id,
            floor=self.current_floor,
            state=self.state,
            direction=self.direction,
            pending=self.pending_count(),
        )

    def status(self) -> str:
        return (
            f"[Car {self.car_id}] floor={self.current_floor} state={self.state} "
            f"dir={self.direction} pending={self.pending_count()}"
        )

    def _step_door_open(self) -> StepOutcome:
        self._door_timer -= 1
        if self._door_timer > 0:
            return self._outcome(CarAction.DOOR_OPEN)
        self.state = CarState.IDLE
        self._select_direction()
        return self._outcome(CarAction.DOOR_CLOSED)

    def _step_move(self, direction: Direction) -> StepOutcome:
        next_floor = self.current_floor + (1 if direction is Direction.UP else -1)
        if not self.min_floor <= next_floor <= self.max_floor:
            logger.warning(
                "Car %d in %s at floor %d cannot move past [%d, %d]; reselecting direction",
                self.car_id,
                self.state,
                self.current_floor,
                self.min_floor,
                self.max_floor,
            )
            self.state = CarState.IDLE
            return self._step_idle()

        self.current_floor = next_floor
        if self._should_stop(direction):
            self._open_door(direction)
            return self._outcome(CarAction.STOPPED)
        return self._outcome(CarAction.MOVED)

    def _step_idle(self) -> StepOutcome:
        self._select_direction()
        if self.state is CarState.IDLE:
            return self._outcome(CarAction.IDLE)
        return self._outcome(CarAction.DEPARTING)

    def _stop_sets(self, direction: Direction) -> Tuple[StopSet, StopSet]:
        """Return (same-direction set, opposite set) for ``direction``."""
        if direction is Direction.UP:
            return self.up_stops, self.down_stops
        return self.down_stops, self.up_stops

    def _has_stops_ahead(self, direction: Direction) -> bool:
        floor = self.current_floor
        if direction is Direction.UP:
            return self.up_stops.has_above(floor) or self.down_stops.has_above(floor)
        return self.up_stops.has_below(floor) or self.down_stops.has_below(floor)

    def _should_stop(self, direction: Direction) -> bool:
        same, opposite = self._stop_sets(direction)
        if same.test(self.current_floor):
            return True
        # end of the sweep: pick up a call for the other direction before turning
        return not self._has_stops_ahead(direction) and opposite.test(self.current_floor)

    def _open_door(self, direction: Direction) -> None:
        floor = self.current_floor
        self.state = CarState.DOOR_OPEN
        self._door_timer = self.door_open_ticks
        if direction is Direction.IDLE:
            self.up_stops.clear(floor)
            self.down_stops.clear(floor)
        else:
            same, opposite = self._stop_sets(direction)
            same.clear(floor)
            if not self._has_stops_ahead(direction):
                opposite.clear(floor)
        logger.debug("Car %d door opening at floor %d", self.car_id, floor)

    def _select_direction(self) -> None:
        preferred = Direction.UP if self.direction is Direction.IDLE else self.direction
        for candidate in (preferred, preferred.opposite):
            if self._has_stops_ahead(candidate):
                self._start_moving(candidate)
                return
        self.direction = Direction.IDLE
        self.state = CarState.IDLE

    def _start_moving(self, direction: Direction) -> None:
        self.direction = direction
        self.state = CarState.MOVING_UP if direction is Direction.UP else CarState.MOVING_DOWN

    def _outcome(self, action: CarAction) -> StepOutcome:
        return StepOutcome(
            car_id=self.car_id,
            action=action,
            floor=self.current_floor,
            state=self.state,
            direction=self.direction,
            door_timer=self._door_timer,
        )

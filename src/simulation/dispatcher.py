from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from scheduler import CarState, Request, dispatch_cost

from .car import Car, StepOutcome
from .config import CarConstraints, DispatchPolicy

logger = logging.getLogger(__name__)


@dataclass
class Dispatcher:
    """Group controller that owns a bank of cars and routes calls to them."""

    car_count: int
    min_floor: int
    max_floor: int
    car_constraints: CarConstraints = field(default_factory=CarConstraints)
    policy: DispatchPolicy = field(default_factory=DispatchPolicy)
    start_floors: Optional[List[int]] = None
    cars: List[Car] = field(init=False)

    def __post_init__(self) -> None:
        if self.start_floors is not None and len(self.start_floors) != self.car_count:
            raise ValueError(
                f"Expected {self.car_count} start floors, got {len(self.start_floors)}"
            )
        starts = self.start_floors or [self.min_floor] * self.car_count
        self.cars = [
            Car(
                car_id=index + 1,
                min_floor=self.min_floor,
                max_floor=self.max_floor,
                stop_set=self.car_constraints.stop_set,
                door_open_ticks=self.car_constraints.door_open_ticks,
                start_floor=start,
            )
            for index, start in enumerate(starts)
        ]

    def dispatch(self, request: Request) -> Optional[Car]:
        best: Optional[Car] = None
        best_cost = float("inf")
        for car in self.cars:
            cost = self.cost(car, request)
            if cost < best_cost:
                best_cost = cost
                best = car

        if best is not None:
            logger.debug("Dispatching %s to car %d (cost %.1f)", request, best.car_id, best_cost)
            best.add_request(request)
        return best

    def cost(self, car: Car, request: Request) -> float:
        return dispatch_cost(
            car.snapshot(),
            request,
            self.min_floor,
            self.max_floor,
            load_penalty=self.policy.load_penalty,
        )

    def request_cab(self, car_id: int, floor: int) -> Car:
        return self.assign(car_id, Request.cab(floor))

    def assign(self, car_id: int, request: Request) -> Car:
        """Hand a request straight to one car, bypassing the cost function."""
        car = self.get_car(car_id)
        if car is None:
            raise KeyError(f"No car with id {car_id}")
        car.add_request(request)
        return car

    def step_all(self) -> List[StepOutcome]:
        return [car.step() for car in self.cars]

    def all_idle(self) -> bool:
        return all(car.state is CarState.IDLE and not car.has_pending_requests() for car in self.cars)

    def get_car(self, car_id: int) -> Optional[Car]:
        for car in self.cars:
            if car.car_id == car_id:
                return car
        return None

    def status(self) -> str:
        return "\n".join(f"  {car.status()}" for car in self.cars)

    def snapshot(self) -> dict:
        return {
            "floors": [self.min_floor, self.max_floor],
            "cars": [
                {
                    "id": car.car_id,
                    "floor": car.current_floor,
                    "state": car.state.value,
                    "direction": car.direction.value,
                    "door_timer": car.door_timer,
                    "up_stops": car.up_stops.snapshot(),
                    "down_stops": car.down_stops.snapshot(),
                }
                for car in self.cars
            ],
        }

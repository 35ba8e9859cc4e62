from __future__ import annotations

from typing import Callable, List

import pytest

from scheduler import CarState
from simulation import Car

STOP_SET_NAMES = ["flags", "bitmask", "bitvector"]


@pytest.fixture(params=STOP_SET_NAMES)
def stop_set_name(request) -> str:
    """Run the test once per stop-set strategy."""
    return request.param


@pytest.fixture
def make_car(stop_set_name: str) -> Callable[..., Car]:
    def factory(start_floor: int = 1, min_floor: int = 1, max_floor: int = 10, **kwargs) -> Car:
        return Car(
            car_id=1,
            min_floor=min_floor,
            max_floor=max_floor,
            stop_set=stop_set_name,
            start_floor=start_floor,
            **kwargs,
        )

    return factory


def run_until_idle(car: Car, max_steps: int = 100) -> List[int]:
    """Step ``car`` until it rests and return the floors it stopped at."""
    stops: List[int] = []
    for _ in range(max_steps):
        outcome = car.step()
        if outcome.stopped:
            stops.append(outcome.floor)
        if outcome.state is CarState.IDLE and not car.has_pending_requests():
            break
    return stops


@pytest.fixture
def drive() -> Callable[..., List[int]]:
    return run_until_idle

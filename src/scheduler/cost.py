from __future__ import annotations

from .interface import CarSnapshot, Direction, Request


def is_on_the_way(car: CarSnapshot, floor: int) -> bool:
    """Whether ``floor`` is at or ahead of the car along its travel direction."""

    if car.direction is Direction.UP:
        return floor >= car.floor
    if car.direction is Direction.DOWN:
        return floor <= car.floor
    return True


def dispatch_cost(
    car: CarSnapshot,
    request: Request,
    min_floor: int,
    max_floor: int,
    load_penalty: float = 0.5,
) -> float:
    """Score how expensive it is for ``car`` to serve ``request``.

    Lower is better. The estimate is in floors travelled:

    * idle car: straight distance
    * moving toward the floor in the requested direction (or a cab call):
      straight distance
    * moving toward the floor but the hall call wants the other way: the
      distance plus half the shaft, since the car passes without stopping
    * moving away: run out to the shaft end in the current direction and
      come back

    Every pending stop adds ``load_penalty`` so near-ties go to the less
    loaded car.
    """

    penalty = load_penalty * car.pending
    distance = abs(car.floor - request.floor)

    if car.idle:
        return distance + penalty

    if is_on_the_way(car, request.floor):
        if not request.is_hall_call or request.direction is car.direction:
            return distance + penalty
        span = max_floor - min_floor
        return distance + span / 2 + penalty

    if car.direction is Direction.UP:
        detour = (max_floor - car.floor) + (max_floor - request.floor)
    else:
        detour = (car.floor - min_floor) + (request.floor - min_floor)
    return detour + penalty

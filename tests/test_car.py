"""Tests for the single-car LOOK state machine, run against every stop set."""

import logging
import random

import pytest

from scheduler import CarState, Direction, Request
from simulation import Car, CarAction

from .conftest import STOP_SET_NAMES


class TestBasicMovement:
    def test_move_up(self, make_car, drive):
        car = make_car()
        car.add_request(Request.cab(5))
        assert drive(car) == [5]
        assert car.current_floor == 5
        assert car.state is CarState.IDLE
        assert car.direction is Direction.IDLE

    def test_move_down(self, make_car, drive):
        car = make_car(start_floor=8)
        car.add_request(Request.cab(3))
        assert drive(car) == [3]

    def test_request_adopts_direction_immediately(self, make_car):
        car = make_car(start_floor=4)
        car.add_request(Request.cab(2))
        assert car.state is CarState.MOVING_DOWN
        assert car.direction is Direction.DOWN

    def test_door_stays_open_for_configured_ticks(self, make_car):
        car = make_car(door_open_ticks=3)
        car.add_request(Request.cab(2))
        actions = [car.step().action for _ in range(4)]
        assert actions == [
            CarAction.STOPPED,
            CarAction.DOOR_OPEN,
            CarAction.DOOR_OPEN,
            CarAction.DOOR_CLOSED,
        ]
        assert car.door_timer == 0

    def test_door_timer_only_while_open(self, make_car):
        car = make_car()
        car.add_request(Request.cab(3))
        for _ in range(10):
            outcome = car.step()
            assert (outcome.door_timer > 0) == (outcome.state is CarState.DOOR_OPEN)


class TestRequestHandling:
    def test_already_at_floor_opens_door(self, make_car):
        car = make_car(start_floor=5)
        car.add_request(Request.cab(5))
        assert car.state is CarState.DOOR_OPEN
        assert car.door_timer == 2
        assert not car.has_pending_requests()

    def test_call_at_open_door_resets_timer(self, make_car):
        car = make_car()
        car.add_request(Request.cab(3))
        while car.state is not CarState.DOOR_OPEN:
            car.step()
        car.step()
        assert car.door_timer == 1
        car.add_request(Request.hall(3, Direction.DOWN))
        assert car.door_timer == 2
        assert not car.has_pending_requests()

    @pytest.mark.parametrize("floor", [0, 11, -4, 99])
    def test_out_of_range_is_ignored(self, make_car, floor):
        car = make_car()
        car.add_request(Request.cab(floor))
        car.add_request(Request.hall(floor, Direction.UP))
        assert not car.has_pending_requests()
        assert car.state is CarState.IDLE

    def test_hall_call_classified_by_direction(self, make_car):
        car = make_car(start_floor=5)
        car.add_request(Request.hall(8, Direction.DOWN))
        car.add_request(Request.hall(2, Direction.UP))
        assert car.stops_snapshot() == ([2], [8])

    def test_cab_call_classified_by_position(self, make_car):
        car = make_car(start_floor=5)
        car.add_request(Request.cab(8))
        car.add_request(Request.cab(2))
        assert car.stops_snapshot() == ([8], [2])
        assert car.pending_count() == 2


class TestLookOrdering:
    def test_sweeps_up_in_floor_order(self, make_car, drive):
        car = make_car()
        for floor in (7, 3, 5):
            car.add_request(Request.cab(floor))
        assert drive(car) == [3, 5, 7]

    def test_finishes_sweep_before_reversing(self, make_car, drive):
        car = make_car(start_floor=5)
        car.direction = Direction.UP
        car.add_request(Request.cab(8))
        car.add_request(Request.cab(2))
        assert drive(car) == [8, 2]

    def test_hall_call_direction_filtering(self, make_car, drive):
        car = make_car()
        car.add_request(Request.hall(5, Direction.UP))
        car.add_request(Request.hall(3, Direction.DOWN))
        assert drive(car) == [5, 3]

    def test_mixed_requests(self, make_car, drive):
        car = make_car()
        car.add_request(Request.hall(6, Direction.UP))
        car.add_request(Request.cab(4))
        car.add_request(Request.cab(8))
        assert drive(car) == [4, 6, 8]

    def test_down_call_at_top_of_sweep(self, make_car, drive):
        car = make_car()
        car.add_request(Request.cab(4))
        car.add_request(Request.hall(7, Direction.DOWN))
        car.add_request(Request.cab(2))
        assert drive(car) == [2, 4, 7]

    def test_turnaround_serves_both_calls_once(self, make_car, drive):
        car = make_car()
        car.add_request(Request.cab(5))
        car.add_request(Request.hall(5, Direction.DOWN))
        assert drive(car) == [5]
        assert not car.has_pending_requests()

    def test_opposite_call_kept_while_stops_remain_ahead(self, make_car, drive):
        car = make_car()
        car.add_request(Request.hall(5, Direction.DOWN))
        car.add_request(Request.cab(5))
        car.add_request(Request.cab(8))
        assert drive(car) == [5, 8, 5]

    def test_up_call_behind_car_served_at_bottom(self, make_car, drive):
        car = make_car()
        car.add_request(Request.cab(8))
        car.step()
        assert car.current_floor == 2
        car.add_request(Request.hall(2, Direction.UP))
        assert drive(car) == [8, 2]

    def test_reverses_at_farthest_request_not_shaft_end(self, make_car):
        car = make_car(start_floor=3)
        car.add_request(Request.cab(6))
        car.add_request(Request.cab(1))
        floors = [car.step().floor for _ in range(30)]
        assert max(floors) == 6
        assert min(floors) == 1


class TestTermination:
    def test_idle_car_stays_idle(self, make_car):
        car = make_car(start_floor=4)
        for _ in range(20):
            outcome = car.step()
            assert outcome.action is CarAction.IDLE
            assert outcome.floor == 4
        assert car.state is CarState.IDLE

    def test_idle_after_work_is_stable(self, make_car, drive):
        car = make_car()
        car.add_request(Request.cab(3))
        drive(car)
        for _ in range(5):
            assert car.step().action is CarAction.IDLE
        assert car.current_floor == 3

    def test_move_past_shaft_end_is_logged(self, make_car, caplog):
        car = make_car(start_floor=10)
        car.state = CarState.MOVING_UP
        car.direction = Direction.UP
        with caplog.at_level(logging.WARNING, logger="simulation.car"):
            outcome = car.step()
        assert outcome.action is CarAction.IDLE
        assert car.current_floor == 10
        assert car.state is CarState.IDLE
        assert "cannot move past" in caplog.text

    def test_step_descriptions(self, make_car):
        car = make_car()
        assert str(car.step()) == "Car 1: idle at floor 1"
        car.add_request(Request.cab(2))
        assert str(car.step()) == "Car 1: moved to floor 2 [stop, door opening]"
        assert str(car.step()) == "Car 1: door open at floor 2 (closing in 1)"
        assert str(car.step()) == "Car 1: door closed at floor 2, direction=Idle"


class TestConstruction:
    def test_defaults_to_lowest_floor(self):
        car = Car(car_id=7, min_floor=-2, max_floor=5)
        assert car.current_floor == -2
        assert car.status() == "[Car 7] floor=-2 state=Idle dir=Idle pending=0"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"min_floor": 5, "max_floor": 1},
            {"min_floor": 1, "max_floor": 10, "start_floor": 11},
            {"min_floor": 1, "max_floor": 10, "door_open_ticks": 0},
            {"min_floor": 1, "max_floor": 10, "stop_set": "btree"},
        ],
    )
    def test_misconfiguration_raises(self, kwargs):
        with pytest.raises(ValueError):
            Car(car_id=1, **kwargs)

    def test_bitmask_car_rejects_tall_building(self):
        with pytest.raises(ValueError):
            Car(car_id=1, min_floor=1, max_floor=80, stop_set="bitmask")


def _random_timeline(seed, min_floor, max_floor, length=40):
    rng = random.Random(seed)
    timeline = []
    for tick in range(length):
        for _ in range(rng.randint(0, 2)):
            floor = rng.randint(min_floor - 1, max_floor + 1)
            if rng.random() < 0.5:
                request = Request.cab(floor)
            else:
                request = Request.hall(floor, rng.choice([Direction.UP, Direction.DOWN]))
            timeline.append((tick, request))
    return timeline


def _replay(stop_set, timeline, min_floor=1, max_floor=20, check=None):
    car = Car(car_id=1, min_floor=min_floor, max_floor=max_floor, stop_set=stop_set, start_floor=10)
    outcomes = []
    pending = list(timeline)
    for tick in range(400):
        while pending and pending[0][0] <= tick:
            car.add_request(pending.pop(0)[1])
            if check:
                check(car)
        outcomes.append(car.step())
        if check:
            check(car)
        if not pending and car.state is CarState.IDLE and not car.has_pending_requests():
            break
    return car, outcomes


class TestStrategyEquivalence:
    @pytest.mark.parametrize("seed", range(10))
    def test_same_stops_for_every_strategy(self, seed):
        timeline = _random_timeline(seed, 1, 20)
        runs = {name: _replay(name, timeline)[1] for name in STOP_SET_NAMES}
        stop_floors = {
            name: [o.floor for o in outcomes if o.stopped] for name, outcomes in runs.items()
        }
        assert stop_floors["flags"] == stop_floors["bitmask"] == stop_floors["bitvector"]
        assert runs["flags"] == runs["bitmask"] == runs["bitvector"]

    @pytest.mark.parametrize("seed", range(5))
    def test_pending_matches_stop_sets(self, stop_set_name, seed):
        def check(car):
            up, down = car.stops_snapshot()
            assert car.has_pending_requests() == bool(up or down)
            assert car.pending_count() == len(up) + len(down)
            assert car.min_floor <= car.current_floor <= car.max_floor

        car, _ = _replay(stop_set_name, _random_timeline(seed, 1, 20), check=check)
        assert not car.has_pending_requests()

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from scheduler import Request

from .car import StepOutcome
from .dispatcher import Dispatcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduledRequest:
    """A request released into the building at a given tick.

    ``car_id`` routes a cab call to one car; without it the dispatcher
    chooses.
    """

    at_tick: int
    request: Request
    car_id: Optional[int] = None


@dataclass(frozen=True)
class StopEvent:
    time_step: int
    car_id: int
    floor: int


class Simulation:
    """Tick-driven loop around a dispatcher.

    Releases scheduled requests, advances every car once per tick and keeps
    a log of the floors each car stopped at.
    """

    def __init__(self, dispatcher: Dispatcher, max_ticks: int = 1000) -> None:
        self.dispatcher = dispatcher
        self.max_ticks = max_ticks
        self.current_time: int = 0
        self.stop_events: List[StopEvent] = []
        self.event_hooks: Dict[str, List[Callable[[object], None]]] = {}
        self._scheduled: List[ScheduledRequest] = []

    @property
    def finished(self) -> bool:
        return not self._scheduled and self.dispatcher.all_idle()

    def schedule(self, request: Request, at_tick: int = 0, car_id: Optional[int] = None) -> None:
        self._scheduled.append(ScheduledRequest(at_tick=at_tick, request=request, car_id=car_id))
        self._scheduled.sort(key=lambda item: item.at_tick)

    def run(self, max_ticks: Optional[int] = None) -> int:
        """Step until every car is idle with nothing left to release.

        Returns the number of ticks taken. Stops early once ``max_ticks``
        is reached.
        """

        limit = self.max_ticks if max_ticks is None else max_ticks
        start = self.current_time
        while not self.finished and self.current_time - start < limit:
            self.step()
        if not self.finished:
            logger.warning("Simulation stopped after %d ticks with work outstanding", limit)
        return self.current_time - start

    def step(self) -> List[StepOutcome]:
        self._release_due_requests()
        outcomes = self.dispatcher.step_all()
        for outcome in outcomes:
            if outcome.stopped:
                event = StopEvent(self.current_time, outcome.car_id, outcome.floor)
                self.stop_events.append(event)
                self._emit("stop", event)
        self._emit("step", {"time": self.current_time, "outcomes": outcomes})
        self.current_time += 1
        return outcomes

    def stop_sequence(self, car_id: int) -> List[int]:
        return [event.floor for event in self.stop_events if event.car_id == car_id]

    def on_event(self, event: str, callback: Callable[[object], None]) -> None:
        self.event_hooks.setdefault(event, []).append(callback)

    def summary(self) -> dict:
        stops = Counter(event.car_id for event in self.stop_events)
        return {
            "ticks": self.current_time,
            "finished": self.finished,
            "stops_per_car": {car.car_id: stops.get(car.car_id, 0) for car in self.dispatcher.cars},
            "stop_sequences": {
                car.car_id: self.stop_sequence(car.car_id) for car in self.dispatcher.cars
            },
            "building": self.dispatcher.snapshot(),
        }

    def _release_due_requests(self) -> None:
        while self._scheduled and self._scheduled[0].at_tick <= self.current_time:
            item = self._scheduled.pop(0)
            if item.car_id is not None:
                car = self.dispatcher.assign(item.car_id, item.request)
            else:
                car = self.dispatcher.dispatch(item.request)
            self._emit(
                "dispatch",
                {
                    "time": self.current_time,
                    "request": item.request,
                    "car_id": car.car_id if car is not None else None,
                },
            )

    def _emit(self, event: str, payload: object) -> None:
        for callback in self.event_hooks.get(event, []):
            callback(payload)

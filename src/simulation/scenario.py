"""Scenario files: a building layout plus a timeline of calls."""
from __future__ import annotations

import json
from pathlib import Path
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from scheduler import Direction, Request

from .config import CarConstraints, DispatchPolicy
from .dispatcher import Dispatcher
from .simulation import Simulation


class BuildingConfig(BaseModel):
    min_floor: int = 1
    max_floor: int = 10
    car_count: int = Field(1, ge=1)
    stop_set: Literal["flags", "bitmask", "bitvector"] = "flags"
    start_floors: Optional[List[int]] = None
    door_open_ticks: int = Field(2, ge=1)
    load_penalty: float = Field(0.5, ge=0)

    @model_validator(mode="after")
    def check_floors(self) -> "BuildingConfig":
        if self.min_floor > self.max_floor:
            raise ValueError("min_floor must not exceed max_floor")
        if self.start_floors is not None:
            if len(self.start_floors) != self.car_count:
                raise ValueError("start_floors must list one floor per car")
            for floor in self.start_floors:
                if not self.min_floor <= floor <= self.max_floor:
                    raise ValueError(f"start floor {floor} is outside the building")
        return self


class RequestConfig(BaseModel):
    at_tick: int = Field(0, ge=0)
    floor: int
    kind: Literal["hall", "cab"] = "hall"
    direction: Optional[Literal["up", "down"]] = None
    car_id: Optional[int] = None

    @model_validator(mode="after")
    def check_direction(self) -> "RequestConfig":
        if self.kind == "hall" and self.direction is None:
            raise ValueError("hall calls need a direction")
        return self

    def to_request(self) -> Request:
        if self.kind == "cab":
            return Request.cab(self.floor)
        direction = Direction.UP if self.direction == "up" else Direction.DOWN
        return Request.hall(self.floor, direction)


class ScenarioConfig(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    building: BuildingConfig = Field(default_factory=BuildingConfig)
    max_ticks: int = Field(1000, ge=1)
    requests: List[RequestConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_car_ids(self) -> "ScenarioConfig":
        for entry in self.requests:
            if entry.car_id is not None and not 1 <= entry.car_id <= self.building.car_count:
                raise ValueError(
                    f"car_id {entry.car_id} does not name one of {self.building.car_count} cars"
                )
        return self


def load_scenario(path: Union[str, Path]) -> ScenarioConfig:
    data = json.loads(Path(path).read_text())
    return ScenarioConfig.model_validate(data)


def build_simulation(config: ScenarioConfig) -> Simulation:
    building = config.building
    dispatcher = Dispatcher(
        car_count=building.car_count,
        min_floor=building.min_floor,
        max_floor=building.max_floor,
        car_constraints=CarConstraints(
            door_open_ticks=building.door_open_ticks,
            stop_set=building.stop_set,
        ),
        policy=DispatchPolicy(load_penalty=building.load_penalty),
        start_floors=building.start_floors,
    )
    simulation = Simulation(dispatcher, max_ticks=config.max_ticks)
    for entry in config.requests:
        simulation.schedule(entry.to_request(), at_tick=entry.at_tick, car_id=entry.car_id)
    return simulation

"""Simulation primitives for the LOOK elevator dispatcher."""

from .car import Car, CarAction, StepOutcome
from .config import CarConstraints, DispatchPolicy
from .dispatcher import Dispatcher
from .scenario import ScenarioConfig, build_simulation, load_scenario
from .simulation import ScheduledRequest, Simulation, StopEvent

__all__ = [
    "Car",
    "CarAction",
    "CarConstraints",
    "DispatchPolicy",
    "Dispatcher",
    "ScenarioConfig",
    "ScheduledRequest",
    "Simulation",
    "StepOutcome",
    "StopEvent",
    "build_simulation",
    "load_scenario",
]

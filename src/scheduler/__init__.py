from __future__ import annotations

from typing import Dict, Type

from .bitmask import BITMASK_WIDTH, BitmaskStopSet
from .bitvector import BitVectorStopSet
from .cost import dispatch_cost, is_on_the_way
from .flags import FlagStopSet
from .interface import (
    CarSnapshot,
    CarState,
    Direction,
    FloorOutOfRangeError,
    Request,
    RequestKind,
    StopSet,
    StopSetCapacityError,
)

__all__ = [
    "BITMASK_WIDTH",
    "BitVectorStopSet",
    "BitmaskStopSet",
    "CarSnapshot",
    "CarState",
    "Direction",
    "FlagStopSet",
    "FloorOutOfRangeError",
    "Request",
    "RequestKind",
    "StopSet",
    "StopSetCapacityError",
    "dispatch_cost",
    "get_stop_set",
    "is_on_the_way",
]


STOP_SET_REGISTRY: Dict[str, Type[StopSet]] = {
    "flags": FlagStopSet,
    "bitmask": BitmaskStopSet,
    "bitvector": BitVectorStopSet,
}


def get_stop_set(name: str, min_floor: int, max_floor: int) -> StopSet:
    cls = STOP_SET_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown stop set '{name}'. Available: {', '.join(STOP_SET_REGISTRY)}")
    return cls(min_floor, max_floor)

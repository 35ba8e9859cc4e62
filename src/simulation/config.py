from __future__ import annotations

from dataclasses import dataclass


@dataclass
class CarConstraints:
    """Per-car settings applied by the dispatcher."""

    door_open_ticks: int = 2
    stop_set: str = "flags"


@dataclass
class DispatchPolicy:
    """Weights used when scoring cars for a call."""

    load_penalty: float = 0.5

from __future__ import annotations

from typing import List

from .interface import StopSetCapacityError, check_floor

BITMASK_WIDTH = 64


class BitmaskStopSet:
    """Stops packed into a single fixed-width integer mask.

    Bit ``i`` stands for floor ``min_floor + i``. Above/below queries shift
    or mask the word instead of scanning, and ``count`` is a popcount. The
    width is capped at 64 floors to mirror a machine word.
    """

    def __init__(self, min_floor: int, max_floor: int) -> None:
        floors = max_floor - min_floor + 1
        if floors > BITMASK_WIDTH:
            raise StopSetCapacityError(
                f"Bitmask stop set supports at most {BITMASK_WIDTH} floors, got {floors}"
            )
        self.min_floor = min_floor
        self.max_floor = max_floor
        self._bits = 0

    def _bit(self, floor: int) -> int:
        return floor - self.min_floor

    def _in_range(self, floor: int) -> bool:
        return self.min_floor <= floor <= self.max_floor

    def mark(self, floor: int) -> None:
        check_floor(floor, self.min_floor, self.max_floor)
        self._bits |= 1 << self._bit(floor)

    def clear(self, floor: int) -> None:
        if not self._in_range(floor):
            return
        self._bits &= ~(1 << self._bit(floor))

    def test(self, floor: int) -> bool:
        return self._in_range(floor) and bool(self._bits & (1 << self._bit(floor)))

    def has_above(self, floor: int) -> bool:
        bit = self._bit(floor)
        if bit < 0:
            return self._bits != 0
        return (self._bits >> (bit + 1)) != 0

    def has_below(self, floor: int) -> bool:
        bit = self._bit(floor)
        if bit <= 0:
            return False
        return (self._bits & ((1 << bit) - 1)) != 0

    def any(self) -> bool:
        return self._bits != 0

    def count(self) -> int:
        return bin(self._bits).count("1")

    def snapshot(self) -> List[int]:
        floors: List[int] = []
        bits = self._bits
        while bits:
            lowest = bits & -bits
            floors.append(lowest.bit_length() - 1 + self.min_floor)
            bits ^= lowest
        return floors

    def __repr__(self) -> str:
        return f"BitmaskStopSet({self.snapshot()})"

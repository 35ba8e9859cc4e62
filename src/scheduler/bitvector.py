from __future__ import annotations

from typing import List

from bitarray import bitarray
from bitarray.util import zeros

from .interface import check_floor


class BitVectorStopSet:
    """Stops held in a ``bitarray``, one bit per floor.

    There is no width limit: the vector is sized to the floor range at
    construction. Above/below checks use ``find`` as a next-set-bit query rather
    than walking floor by floor.
    """

    def __init__(self, min_floor: int, max_floor: int) -> None:
        self.min_floor = min_floor
        self.max_floor = max_floor
        self._bits: bitarray = zeros(max_floor - min_floor + 1)

    def _index(self, floor: int) -> int:
        return floor - self.min_floor

    def mark(self, floor: int) -> None:
        check_floor(floor, self.min_floor, self.max_floor)
        self._bits[self._index(floor)] = 1

    def clear(self, floor: int) -> None:
        index = self._index(floor)
        if 0 <= index < len(self._bits):
            self._bits[index] = 0

    def test(self, floor: int) -> bool:
        index = self._index(floor)
        return 0 <= index < len(self._bits) and bool(self._bits[index])

    def has_above(self, floor: int) -> bool:
        start = max(self._index(floor) + 1, 0)
        if start >= len(self._bits):
            return False
        return self._bits.find(1, start) != -1

    def has_below(self, floor: int) -> bool:
        stop = min(self._index(floor), len(self._bits))
        if stop <= 0:
            return False
        return self._bits.find(1, 0, stop) != -1

    def any(self) -> bool:
        return self._bits.any()

    def count(self) -> int:
        return self._bits.count(1)

    def snapshot(self) -> List[int]:
        floors: List[int] = []
        index = self._bits.find(1)
        while index != -1:
            floors.append(index + self.min_floor)
            index = self._bits.find(1, index + 1)
        return floors

    def __repr__(self) -> str:
        return f"BitVectorStopSet({self.snapshot()})"

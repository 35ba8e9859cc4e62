from __future__ import annotations

from typing import List

from .interface import check_floor


class FlagStopSet:
    """One boolean per floor plus cached bounds of the marked floors.

    ``has_above``/``has_below`` only compare against the cached bounds. The
    bounds are rebuilt by a full scan, and only when the floor being cleared
    was one of them.
    """

    def __init__(self, min_floor: int, max_floor: int) -> None:
        self.min_floor = min_floor
        self.max_floor = max_floor
        self._flags: List[bool] = [False] * (max_floor - min_floor + 1)
        # lowest > highest means empty
        self._lowest = max_floor + 1
        self._highest = min_floor - 1

    def _index(self, floor: int) -> int:
        return floor - self.min_floor

    def _in_range(self, floor: int) -> bool:
        return self.min_floor <= floor <= self.max_floor

    def mark(self, floor: int) -> None:
        check_floor(floor, self.min_floor, self.max_floor)
        self._flags[self._index(floor)] = True
        if floor < self._lowest:
            self._lowest = floor
        if floor > self._highest:
            self._highest = floor

    def clear(self, floor: int) -> None:
        if not self.test(floor):
            return
        self._flags[self._index(floor)] = False
        if floor == self._lowest or floor == self._highest:
            self._recalculate_bounds()

    def test(self, floor: int) -> bool:
        return self._in_range(floor) and self._flags[self._index(floor)]

    def has_above(self, floor: int) -> bool:
        return self._highest > floor

    def has_below(self, floor: int) -> bool:
        return self._lowest < floor

    def any(self) -> bool:
        return self._lowest <= self._highest

    def count(self) -> int:
        return sum(self._flags)

    def snapshot(self) -> List[int]:
        return [i + self.min_floor for i, flag in enumerate(self._flags) if flag]

    def _recalculate_bounds(self) -> None:
        self._lowest = self.max_floor + 1
        self._highest = self.min_floor - 1
        for index, flag in enumerate(self._flags):
            if not flag:
                continue
            floor = index + self.min_floor
            if floor < self._lowest:
                self._lowest = floor
            self._highest = floor

    def __repr__(self) -> str:
        return f"FlagStopSet({self.snapshot()})"

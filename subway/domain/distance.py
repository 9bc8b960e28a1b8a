"""Distance between two adjacent stations."""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering

from subway.domain.errors import InvalidDistanceError

MIN_DISTANCE = 1


@total_ordering
@dataclass(frozen=True)
class Distance:
    """A positive integer distance."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            msg = f"Distance must be an integer, got {self.value!r}"
            raise InvalidDistanceError(msg)
        if self.value < MIN_DISTANCE:
            msg = f"Distance must be at least {MIN_DISTANCE}, got {self.value}"
            raise InvalidDistanceError(msg)

    def __add__(self, other: Distance) -> Distance:
        return Distance(self.value + other.value)

    def __sub__(self, other: Distance) -> Distance:
        remainder = self.value - other.value
        if remainder < MIN_DISTANCE:
            msg = f"Cannot subtract {other.value} from {self.value}: remainder must be at least {MIN_DISTANCE}"
            raise InvalidDistanceError(msg)
        return Distance(remainder)

    def __lt__(self, other: Distance) -> bool:
        return self.value < other.value

    def __int__(self) -> int:
        return self.value

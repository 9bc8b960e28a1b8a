"""Section: a directed, distance-weighted edge between two adjacent stations."""

from __future__ import annotations

from dataclasses import dataclass

from subway.domain.distance import Distance
from subway.domain.errors import InvalidSectionError
from subway.domain.station import Station


@dataclass(frozen=True)
class Section:
    """An edge from ``up`` to ``down``; ``up`` precedes ``down`` on the path."""

    up: Station
    down: Station
    distance: Distance

    def __post_init__(self) -> None:
        if self.up == self.down:
            msg = f"A section cannot start and end at the same station ({self.up.name})"
            raise InvalidSectionError(msg)

    @classmethod
    def of(cls, up: Station, down: Station, distance: int) -> Section:
        return cls(up, down, Distance(distance))

    def contains(self, station: Station) -> bool:
        """True if ``station`` is either endpoint, regardless of direction."""
        return station in (self.up, self.down)

    def __repr__(self) -> str:
        return f"<Section({self.up.name} -> {self.down.name}, {self.distance.value})>"

"""The ordered chain of sections that makes up one line."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from subway.domain.distance import Distance
from subway.domain.errors import (
    BrokenTopologyError,
    DisconnectedSectionError,
    DuplicateSectionError,
    InvalidDistanceError,
    SingleSectionError,
    StationNotFoundError,
)
from subway.domain.section import Section
from subway.domain.station import Station


class Sections:
    """
    Immutable set of sections forming exactly one simple path.

    Edge order is irrelevant to identity: two values with the same edges are
    equal. Path order is derived on demand by walking from the only station
    that never appears as a ``down`` end.

    Every constructor call validates the path, so an instance that exists is
    always a single chain with ``len(edges) + 1`` distinct stations (or empty,
    before a line's first section has been added).
    """

    __slots__ = ("_edges", "_by_up", "_by_down")

    def __init__(self, edges: Iterable[Section] = ()) -> None:
        self._edges: tuple[Section, ...] = tuple(edges)
        self._by_up: dict[Station, Section] = {}
        self._by_down: dict[Station, Section] = {}
        for edge in self._edges:
            if edge.up in self._by_up:
                msg = f"Station {edge.up.name} has more than one next station"
                raise BrokenTopologyError(msg)
            if edge.down in self._by_down:
                msg = f"Station {edge.down.name} has more than one previous station"
                raise BrokenTopologyError(msg)
            self._by_up[edge.up] = edge
            self._by_down[edge.down] = edge
        # Walk once so cycles and disconnected pieces fail at construction
        self._walk()

    # ------------------------------------------------------------------
    # Path derivation
    # ------------------------------------------------------------------

    def _head(self) -> Station | None:
        if not self._edges:
            return None
        starts = [edge.up for edge in self._edges if edge.up not in self._by_down]
        if len(starts) != 1:
            msg = f"Expected exactly one start station, found {len(starts)}"
            raise BrokenTopologyError(msg)
        return starts[0]

    def _walk(self) -> list[Section]:
        head = self._head()
        path: list[Section] = []
        current = head
        while current is not None and (edge := self._by_up.get(current)) is not None:
            path.append(edge)
            if len(path) > len(self._edges):
                msg = "Section chain loops back on itself"
                raise BrokenTopologyError(msg)
            current = edge.down
        if len(path) != len(self._edges):
            msg = f"Walk reached {len(path)} of {len(self._edges)} sections; the path is not connected"
            raise BrokenTopologyError(msg)
        return path

    def ordered_sections(self) -> list[Section]:
        """Edges in path order, head first."""
        return self._walk()

    def iter_stations(self) -> Iterator[Station]:
        """Lazily yield stations in path order. Each call starts a fresh walk."""
        path = self._walk()
        if not path:
            return
        yield path[0].up
        for edge in path:
            yield edge.down

    def ordered_stations(self) -> list[Station]:
        """Stations in path order; ``len(edges) + 1`` of them, or none."""
        return list(self.iter_stations())

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def edges(self) -> frozenset[Section]:
        return frozenset(self._edges)

    def is_empty(self) -> bool:
        return not self._edges

    def contains_station(self, station: Station) -> bool:
        return station in self._by_up or station in self._by_down

    def first_station(self) -> Station | None:
        return self._head()

    def last_station(self) -> Station | None:
        path = self._walk()
        return path[-1].down if path else None

    def total_distance(self) -> int:
        return sum(edge.distance.value for edge in self._edges)

    def __len__(self) -> int:
        return len(self._edges)

    def __iter__(self) -> Iterator[Section]:
        return iter(self.ordered_sections())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sections):
            return NotImplemented
        return self.edges == other.edges

    def __hash__(self) -> int:
        return hash(self.edges)

    def __repr__(self) -> str:
        names = " -> ".join(station.name for station in self.iter_stations())
        return f"<Sections({names or 'empty'})>"

    # ------------------------------------------------------------------
    # Mutations (each returns a new value)
    # ------------------------------------------------------------------

    def insert(self, section: Section) -> Sections:
        """
        Return a new Sections with ``section`` added.

        Extends the head or tail when ``section`` touches an end of the path,
        otherwise splits the existing edge that starts (or ends) at the shared
        station. A split keeps the total distance of the replaced edge.

        Raises:
            DuplicateSectionError: both stations are already on the path
            DisconnectedSectionError: neither station is on the path
            InvalidDistanceError: the new distance does not fit inside the edge being split
        """
        if self.is_empty():
            return Sections([section])

        has_up = self.contains_station(section.up)
        has_down = self.contains_station(section.down)
        if has_up and has_down:
            msg = f"Stations {section.up.name} and {section.down.name} are already connected"
            raise DuplicateSectionError(msg)
        if not has_up and not has_down:
            msg = f"Neither {section.up.name} nor {section.down.name} is on the line"
            raise DisconnectedSectionError(msg)

        if has_up:
            if section.up == self.last_station():
                return Sections([*self._edges, section])
            existing = self._by_up[section.up]
            remainder = self._split_remainder(existing, section.distance)
            replacement = [section, Section(section.down, existing.down, remainder)]
        else:
            if section.down == self.first_station():
                return Sections([*self._edges, section])
            existing = self._by_down[section.down]
            remainder = self._split_remainder(existing, section.distance)
            replacement = [Section(existing.up, section.up, remainder), section]

        return Sections([*self._without(existing), *replacement])

    def remove_station(self, station: Station) -> Sections:
        """
        Return a new Sections without ``station``.

        An end station takes its one edge with it; an interior station's two
        edges are merged into one spanning both distances.

        Raises:
            SingleSectionError: only one section remains
            StationNotFoundError: ``station`` is not on the path
        """
        if len(self._edges) == 1:
            msg = "Cannot remove a station from a line with a single section"
            raise SingleSectionError(msg)
        if not self.contains_station(station):
            msg = f"Station {station.name} is not on the line"
            raise StationNotFoundError(msg)

        incoming = self._by_down.get(station)
        outgoing = self._by_up.get(station)
        if incoming is None or outgoing is None:
            endpoint_edge = incoming or outgoing
            return Sections(self._without(endpoint_edge))

        merged = Section(incoming.up, outgoing.down, incoming.distance + outgoing.distance)
        return Sections([*self._without(incoming, outgoing), merged])

    @staticmethod
    def _split_remainder(existing: Section, distance: Distance) -> Distance:
        if distance >= existing.distance:
            msg = (
                f"New section distance {distance.value} must be shorter than the "
                f"{existing.distance.value} between {existing.up.name} and {existing.down.name}"
            )
            raise InvalidDistanceError(msg)
        return existing.distance - distance

    def _without(self, *removed: Section) -> list[Section]:
        return [edge for edge in self._edges if edge not in removed]

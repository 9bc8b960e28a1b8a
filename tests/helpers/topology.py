"""Stations and section builders for database-free topology tests."""

from subway.domain import Distance, Section, Sections, Station

A = Station(1, "Gangnam")
B = Station(2, "Yeoksam")
C = Station(3, "Seolleung")
D = Station(4, "Samseong")
E = Station(5, "Jamsil")


def section(up: Station, down: Station, distance: int) -> Section:
    return Section(up, down, Distance(distance))


def sections(*edges: Section) -> Sections:
    return Sections(edges)


def names(value: Sections) -> list[str]:
    """Station names in path order."""
    return [station.name for station in value.ordered_stations()]


def distances(value: Sections) -> list[int]:
    """Edge distances in path order."""
    return [edge.distance.value for edge in value.ordered_sections()]

"""Pure line topology model: no database access happens in this package."""

from subway.domain.distance import Distance
from subway.domain.errors import (
    BrokenTopologyError,
    DisconnectedSectionError,
    DomainError,
    DuplicateSectionError,
    InvalidDistanceError,
    InvalidNameError,
    InvalidSectionError,
    PersistenceError,
    ResourceNotFoundError,
    SingleSectionError,
    StationNotFoundError,
    SubwayError,
)
from subway.domain.line import Line
from subway.domain.section import Section
from subway.domain.sections import Sections
from subway.domain.station import Station

__all__ = [
    # Values
    "Distance",
    "Station",
    "Section",
    "Sections",
    "Line",
    # Errors
    "SubwayError",
    "DomainError",
    "InvalidDistanceError",
    "InvalidSectionError",
    "InvalidNameError",
    "DuplicateSectionError",
    "DisconnectedSectionError",
    "StationNotFoundError",
    "SingleSectionError",
    "BrokenTopologyError",
    "PersistenceError",
    "ResourceNotFoundError",
]

"""Line aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from subway.domain.errors import InvalidNameError
from subway.domain.section import Section
from subway.domain.sections import Sections
from subway.domain.station import Station


def _require_text(value: str, label: str) -> None:
    if not value or not value.strip():
        msg = f"Line {label} must not be blank"
        raise InvalidNameError(msg)


@dataclass(frozen=True)
class Line:
    """
    A named, coloured transit line that owns its chain of sections.

    Every operation returns a new Line; the receiver is never modified.
    Name uniqueness is a storage constraint and is not checked here.
    """

    id: int | None
    name: str
    color: str
    sections: Sections = field(default_factory=Sections)

    def __post_init__(self) -> None:
        _require_text(self.name, "name")
        _require_text(self.color, "color")

    def add_section(self, section: Section) -> Line:
        return replace(self, sections=self.sections.insert(section))

    def delete_station(self, station: Station) -> Line:
        return replace(self, sections=self.sections.remove_station(station))

    def rename(self, name: str) -> Line:
        return replace(self, name=name)

    def recolor(self, color: str) -> Line:
        return replace(self, color=color)

    def ordered_stations(self) -> list[Station]:
        return self.sections.ordered_stations()

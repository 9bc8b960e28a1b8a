"""Station value object."""

from __future__ import annotations

from dataclasses import dataclass

from subway.domain.errors import InvalidNameError


@dataclass(frozen=True, eq=False)
class Station:
    """
    A named stop that can sit on any number of lines.

    Persisted stations are identified by id alone, so a renamed station still
    matches the copy loaded before the rename. Stations without an id are
    identified by name, and never equal a persisted station.
    """

    id: int | None
    name: str

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            msg = "Station name must not be blank"
            raise InvalidNameError(msg)

    @classmethod
    def of(cls, name: str) -> Station:
        """Create a station that has not been persisted yet."""
        return cls(id=None, name=name)

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Station):
            return NotImplemented
        return self._identity == other._identity

    def __hash__(self) -> int:
        return hash(self._identity)

    @property
    def _identity(self) -> tuple[str, int | str]:
        if self.id is not None:
            return ("id", self.id)
        return ("name", self.name)

    def __repr__(self) -> str:
        return f"<Station(id={self.id}, name={self.name})>"

"""Station, line and section rows."""

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from subway.models.base import BaseModel


class StationEntity(BaseModel):
    """A persisted station."""

    __tablename__ = "stations"

    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation of the station."""
        return f"<StationEntity(id={self.id}, name={self.name})>"


class LineEntity(BaseModel):
    """A persisted line (scalar fields only; topology lives in SectionEntity rows)."""

    __tablename__ = "lines"

    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    color: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation of the line."""
        return f"<LineEntity(id={self.id}, name={self.name}, color={self.color})>"


class SectionEntity(BaseModel):
    """One edge of a line's station chain."""

    __tablename__ = "sections"

    line_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("lines.id", ondelete="CASCADE"),
        nullable=False,
    )
    up_station_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("stations.id", ondelete="RESTRICT"),
        nullable=False,
    )
    down_station_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("stations.id", ondelete="RESTRICT"),
        nullable=False,
    )
    distance: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # Relationships
    up_station: Mapped[StationEntity] = relationship(foreign_keys=[up_station_id])
    down_station: Mapped[StationEntity] = relationship(foreign_keys=[down_station_id])

    # A station has at most one next and one previous station per line
    __table_args__ = (
        UniqueConstraint("line_id", "up_station_id", name="uq_section_line_up_station"),
        UniqueConstraint("line_id", "down_station_id", name="uq_section_line_down_station"),
        CheckConstraint("distance > 0", name="ck_section_distance_positive"),
        CheckConstraint("up_station_id <> down_station_id", name="ck_section_distinct_stations"),
        Index("ix_sections_line_id", "line_id"),
    )

    @property
    def key(self) -> tuple[int, int, int]:
        """Structural identity used when diffing against an edited chain."""
        return (self.up_station_id, self.down_station_id, self.distance)

    def __repr__(self) -> str:
        """String representation of the section."""
        return (
            f"<SectionEntity(id={self.id}, line={self.line_id}, "
            f"{self.up_station_id}->{self.down_station_id}, distance={self.distance})>"
        )

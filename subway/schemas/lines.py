"""Pydantic schemas for line and section management."""

from pydantic import BaseModel, Field, model_validator

from subway.domain.line import Line
from subway.schemas.stations import StationResponse

# ==================== Request Schemas ====================


class SectionRequest(BaseModel):
    """Request to add a section between two stations of a line."""

    up_station_id: int = Field(..., ge=1, description="Station the section starts from")
    down_station_id: int = Field(..., ge=1, description="Station the section ends at")
    distance: int = Field(..., ge=1, description="Distance between the two stations")

    @model_validator(mode="after")
    def validate_distinct_stations(self) -> "SectionRequest":
        """A section must join two different stations."""
        if self.up_station_id == self.down_station_id:
            msg = "up_station_id and down_station_id must differ"
            raise ValueError(msg)
        return self


class LineRequest(SectionRequest):
    """Request to create a line together with its first section."""

    name: str = Field(..., min_length=1, max_length=255, description="Unique line name")
    color: str = Field(..., min_length=1, max_length=50, description="Display color")


class LineUpdateRequest(BaseModel):
    """Request to update a line's name and/or color."""

    name: str | None = Field(None, min_length=1, max_length=255)
    color: str | None = Field(None, min_length=1, max_length=50)


# ==================== Response Schemas ====================


class SectionResponse(BaseModel):
    """One edge of a line, in path order."""

    up_station: StationResponse
    down_station: StationResponse
    distance: int


class LineResponse(BaseModel):
    """A line with its stations in travel order."""

    id: int
    name: str
    color: str
    stations: list[StationResponse]
    sections: list[SectionResponse]
    total_distance: int

    @classmethod
    def of(cls, line: Line) -> "LineResponse":
        """Build a response from a persisted domain line."""
        return cls(
            id=line.id,
            name=line.name,
            color=line.color,
            stations=[StationResponse.of(station) for station in line.ordered_stations()],
            sections=[
                SectionResponse(
                    up_station=StationResponse.of(section.up),
                    down_station=StationResponse.of(section.down),
                    distance=section.distance.value,
                )
                for section in line.sections.ordered_sections()
            ],
            total_distance=line.sections.total_distance(),
        )

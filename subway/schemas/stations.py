"""Pydantic schemas for station management."""

from pydantic import BaseModel, ConfigDict, Field

from subway.domain.station import Station


class StationRequest(BaseModel):
    """Request to create or rename a station."""

    name: str = Field(..., min_length=1, max_length=255, description="Station name")


class StationResponse(BaseModel):
    """A persisted station."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str

    @classmethod
    def of(cls, station: Station) -> "StationResponse":
        """Build a response from a domain station (must be persisted)."""
        return cls(id=station.id, name=station.name)

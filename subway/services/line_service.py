"""Line management service."""

from dataclasses import replace

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from subway.core.telemetry import service_span
from subway.domain import Distance, Line, ResourceNotFoundError, Section
from subway.repositories.line_repository import LineRepository
from subway.schemas.lines import LineRequest, LineResponse, LineUpdateRequest, SectionRequest
from subway.services.station_service import StationService

logger = structlog.get_logger(__name__)


class LineService:
    """
    Service for managing lines and their topology.

    Each topology change loads a fresh snapshot, applies one domain
    operation and hands the resulting line to the repository for
    reconciliation.
    """

    def __init__(
        self,
        db: AsyncSession,
        line_repository: LineRepository | None = None,
        station_service: StationService | None = None,
    ) -> None:
        """
        Initialize the line service.

        Args:
            db: Database session
            line_repository: Line repository (defaults to one on ``db``)
            station_service: Station lookups (defaults to one on ``db``)
        """
        self.db = db
        self.line_repository = line_repository or LineRepository(db)
        self.station_service = station_service or StationService(db)

    async def get_line(self, line_id: int) -> Line:
        """
        Load a line with its sections.

        Raises:
            ResourceNotFoundError: If no line has this id
        """
        if not (line := await self.line_repository.find_by_id(line_id)):
            msg = f"Line {line_id} not found"
            raise ResourceNotFoundError(msg)
        return line

    async def save_line(self, request: LineRequest) -> LineResponse:
        """
        Create a line with its first section.

        Raises:
            ResourceNotFoundError: If either station does not exist
            PersistenceError: If the line name is taken
        """
        section = await self._to_section(request)
        line = Line(id=None, name=request.name, color=request.color).add_section(section)
        line_id = await self.line_repository.save(line)
        return LineResponse.of(replace(line, id=line_id))

    async def add_section(self, line_id: int, request: SectionRequest) -> LineResponse:
        """
        Add a section to a line, extending an end or splitting an existing section.

        Raises:
            ResourceNotFoundError: If the line or a station does not exist
            DuplicateSectionError: If both stations are already on the line
            DisconnectedSectionError: If neither station is on the line
            InvalidDistanceError: If a split distance is not shorter than the section it splits
        """
        with service_span(
            "line_service.add_section",
            "line-service",
            **{"line.id": line_id},
        ):
            line = await self.get_line(line_id)
            section = await self._to_section(request)
            updated = line.add_section(section)
            await self.line_repository.update_sections(updated)
        logger.info(
            "section_added",
            line_id=line_id,
            up_station_id=request.up_station_id,
            down_station_id=request.down_station_id,
            distance=request.distance,
        )
        return LineResponse.of(updated)

    async def delete_station(self, line_id: int, station_id: int) -> LineResponse:
        """
        Remove a station from a line, merging its neighbouring sections.

        Raises:
            ResourceNotFoundError: If the line or station does not exist
            StationNotFoundError: If the station is not on the line
            SingleSectionError: If the line has only one section left
        """
        with service_span(
            "line_service.delete_station",
            "line-service",
            **{"line.id": line_id, "station.id": station_id},
        ):
            line = await self.get_line(line_id)
            station = await self.station_service.get_station(station_id)
            updated = line.delete_station(station)
            await self.line_repository.update_sections(updated)
        logger.info("station_removed_from_line", line_id=line_id, station_id=station_id)
        return LineResponse.of(updated)

    async def find_line_response_by_id(self, line_id: int) -> LineResponse:
        return LineResponse.of(await self.get_line(line_id))

    async def find_line_responses(self) -> list[LineResponse]:
        return [LineResponse.of(line) for line in await self.line_repository.find_all_lines()]

    async def update_line(self, line_id: int, request: LineUpdateRequest) -> LineResponse:
        """Update the provided fields of a line; sections are untouched."""
        line = await self.get_line(line_id)
        if request.name is not None:
            line = line.rename(request.name)
        if request.color is not None:
            line = line.recolor(request.color)
        await self.line_repository.update(line)
        return LineResponse.of(line)

    async def delete_line(self, line_id: int) -> None:
        line = await self.get_line(line_id)
        await self.line_repository.delete(line)

    async def _to_section(self, request: SectionRequest) -> Section:
        found = await self.station_service.get_stations(request.up_station_id, request.down_station_id)
        return Section(found[request.up_station_id], found[request.down_station_id], Distance(request.distance))

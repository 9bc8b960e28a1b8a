"""Station management service."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from subway.core.database import transaction
from subway.dao import StationDao
from subway.domain import ResourceNotFoundError, Station
from subway.schemas.stations import StationRequest, StationResponse

logger = structlog.get_logger(__name__)


class StationService:
    """Service for creating, reading, renaming and deleting stations."""

    def __init__(self, db: AsyncSession, station_dao: StationDao | None = None) -> None:
        """
        Initialize the station service.

        Args:
            db: Database session
            station_dao: Station row store (defaults to one on ``db``)
        """
        self.db = db
        self.station_dao = station_dao or StationDao(db)

    async def save_station(self, request: StationRequest) -> int:
        """
        Create a station.

        Returns:
            The new station id

        Raises:
            InvalidNameError: If the name is blank
            PersistenceError: If a station with the same name exists
        """
        station = Station.of(request.name)
        async with transaction(self.db, f"save station {station.name}"):
            station_id = await self.station_dao.insert(station.name)
        logger.info("station_saved", station_id=station_id, name=station.name)
        return station_id

    async def get_station(self, station_id: int) -> Station:
        """
        Load a station as a domain value.

        Raises:
            ResourceNotFoundError: If no station has this id
        """
        async with transaction(self.db, f"load station {station_id}", commit=False):
            entity = await self.station_dao.find_by_id(station_id)
        if entity is None:
            msg = f"Station {station_id} not found"
            raise ResourceNotFoundError(msg)
        return Station(id=entity.id, name=entity.name)

    async def get_stations(self, *station_ids: int) -> dict[int, Station]:
        """
        Load several stations in one query, keyed by id.

        Raises:
            ResourceNotFoundError: If any of the ids is unknown
        """
        async with transaction(self.db, "load stations", commit=False):
            entities = await self.station_dao.find_by_ids(station_ids)
        if missing := sorted(set(station_ids) - entities.keys()):
            msg = f"Stations {missing} not found"
            raise ResourceNotFoundError(msg)
        return {station_id: Station(id=entity.id, name=entity.name) for station_id, entity in entities.items()}

    async def find_station_response_by_id(self, station_id: int) -> StationResponse:
        return StationResponse.of(await self.get_station(station_id))

    async def find_all_station_responses(self) -> list[StationResponse]:
        async with transaction(self.db, "load stations", commit=False):
            entities = await self.station_dao.find_all()
        return [StationResponse.model_validate(entity) for entity in entities]

    async def update_station(self, station_id: int, request: StationRequest) -> None:
        """
        Rename a station.

        Raises:
            ResourceNotFoundError: If no station has this id
            PersistenceError: If the new name is taken
        """
        station = Station(id=station_id, name=request.name)
        async with transaction(self.db, f"update station {station_id}"):
            if not await self.station_dao.update(station_id, station.name):
                msg = f"Station {station_id} not found"
                raise ResourceNotFoundError(msg)
        logger.info("station_updated", station_id=station_id, name=station.name)

    async def delete_station(self, station_id: int) -> None:
        """
        Delete a station.

        Raises:
            ResourceNotFoundError: If no station has this id
            PersistenceError: If a section still references the station
        """
        async with transaction(self.db, f"delete station {station_id}"):
            if not await self.station_dao.delete_by_id(station_id):
                msg = f"Station {station_id} not found"
                raise ResourceNotFoundError(msg)
        logger.info("station_deleted", station_id=station_id)

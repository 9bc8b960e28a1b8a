"""Tests for StationService."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from subway.dao import LineDao, SectionDao
from subway.domain import InvalidNameError, PersistenceError, ResourceNotFoundError
from subway.schemas.stations import StationRequest, StationResponse
from subway.services.station_service import StationService

from tests.helpers.network import NetworkStations


class TestStationService:
    """Station CRUD through a real database."""

    @pytest.mark.asyncio
    async def test_save_and_find_station(self, db_session: AsyncSession) -> None:
        service = StationService(db_session)

        station_id = await service.save_station(StationRequest(name="Gangnam"))

        assert await service.find_station_response_by_id(station_id) == StationResponse(id=station_id, name="Gangnam")

    @pytest.mark.asyncio
    async def test_save_blank_name_raises(self, db_session: AsyncSession) -> None:
        """Test that whitespace-only names pass the schema but fail the domain check."""
        with pytest.raises(InvalidNameError):
            await StationService(db_session).save_station(StationRequest(name="   "))

    @pytest.mark.asyncio
    async def test_save_duplicate_name_raises(self, db_session: AsyncSession, stations: NetworkStations) -> None:
        with pytest.raises(PersistenceError):
            await StationService(db_session).save_station(StationRequest(name="Gangnam"))

    @pytest.mark.asyncio
    async def test_get_missing_station_raises(self, db_session: AsyncSession) -> None:
        with pytest.raises(ResourceNotFoundError):
            await StationService(db_session).get_station(999)

    @pytest.mark.asyncio
    async def test_get_stations_loads_several_at_once(
        self, db_session: AsyncSession, stations: NetworkStations
    ) -> None:
        found = await StationService(db_session).get_stations(stations.gangnam.id, stations.jamsil.id)

        assert found == {stations.gangnam.id: stations.gangnam, stations.jamsil.id: stations.jamsil}
        assert found[stations.jamsil.id].name == "Jamsil"

    @pytest.mark.asyncio
    async def test_get_stations_with_unknown_id_raises(
        self, db_session: AsyncSession, stations: NetworkStations
    ) -> None:
        with pytest.raises(ResourceNotFoundError, match=r"Stations \[999\] not found"):
            await StationService(db_session).get_stations(stations.gangnam.id, 999)

    @pytest.mark.asyncio
    async def test_find_all_station_responses(self, db_session: AsyncSession, stations: NetworkStations) -> None:
        responses = await StationService(db_session).find_all_station_responses()

        assert [response.name for response in responses] == ["Gangnam", "Yeoksam", "Seolleung", "Samseong", "Jamsil"]
        assert responses[0].id == stations.gangnam.id

    @pytest.mark.asyncio
    async def test_update_station(self, db_session: AsyncSession, stations: NetworkStations) -> None:
        service = StationService(db_session)

        await service.update_station(stations.gangnam.id, StationRequest(name="Gangnam Station"))

        station = await service.get_station(stations.gangnam.id)
        assert station.name == "Gangnam Station"

    @pytest.mark.asyncio
    async def test_update_missing_station_raises(self, db_session: AsyncSession) -> None:
        with pytest.raises(ResourceNotFoundError):
            await StationService(db_session).update_station(999, StationRequest(name="Nowhere"))

    @pytest.mark.asyncio
    async def test_delete_station(self, db_session: AsyncSession, stations: NetworkStations) -> None:
        service = StationService(db_session)

        await service.delete_station(stations.jamsil.id)

        with pytest.raises(ResourceNotFoundError):
            await service.get_station(stations.jamsil.id)
        with pytest.raises(ResourceNotFoundError):
            await service.delete_station(stations.jamsil.id)

    @pytest.mark.asyncio
    async def test_delete_station_on_a_line_raises(self, db_session: AsyncSession, stations: NetworkStations) -> None:
        """Test that a station referenced by a section cannot be deleted."""
        line_id = await LineDao(db_session).insert("Line 2", "green")
        await SectionDao(db_session).insert(line_id, stations.gangnam.id, stations.yeoksam.id, 5)
        await db_session.commit()

        with pytest.raises(PersistenceError):
            await StationService(db_session).delete_station(stations.gangnam.id)

        assert (await StationService(db_session).get_station(stations.gangnam.id)).name == "Gangnam"

"""Station row store."""

from collections.abc import Iterable

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from subway.models.network import StationEntity


class StationDao:
    """Insert, look up and delete station rows."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def insert(self, name: str) -> int:
        station = StationEntity(name=name)
        self.db.add(station)
        await self.db.flush()
        return station.id

    async def find_by_id(self, station_id: int) -> StationEntity | None:
        result = await self.db.execute(select(StationEntity).where(StationEntity.id == station_id))
        return result.scalar_one_or_none()

    async def find_by_ids(self, station_ids: Iterable[int]) -> dict[int, StationEntity]:
        """Load several stations at once, keyed by id. Unknown ids are left out."""
        ids = set(station_ids)
        if not ids:
            return {}
        result = await self.db.execute(select(StationEntity).where(StationEntity.id.in_(ids)))
        return {station.id: station for station in result.scalars().all()}

    async def find_all(self) -> list[StationEntity]:
        result = await self.db.execute(select(StationEntity).order_by(StationEntity.id))
        return list(result.scalars().all())

    async def update(self, station_id: int, name: str) -> int:
        """Rename a station. Returns the number of rows changed."""
        result = await self.db.execute(
            update(StationEntity).where(StationEntity.id == station_id).values(name=name)
        )
        return result.rowcount

    async def delete_by_id(self, station_id: int) -> int:
        """Delete a station. Returns the number of rows removed."""
        result = await self.db.execute(delete(StationEntity).where(StationEntity.id == station_id))
        return result.rowcount

"""Section row store."""

from collections.abc import Iterable
from typing import NamedTuple

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from subway.models.network import SectionEntity


class SectionRow(NamedTuple):
    """Column values for a section row that has not been inserted yet."""

    up_station_id: int
    down_station_id: int
    distance: int


class SectionDao:
    """Bulk insert, find-by-line and delete for section rows."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def insert(self, line_id: int, up_station_id: int, down_station_id: int, distance: int) -> int:
        section = SectionEntity(
            line_id=line_id,
            up_station_id=up_station_id,
            down_station_id=down_station_id,
            distance=distance,
        )
        self.db.add(section)
        await self.db.flush()
        return section.id

    async def insert_all(self, line_id: int, rows: Iterable[SectionRow]) -> list[int]:
        sections = [
            SectionEntity(
                line_id=line_id,
                up_station_id=row.up_station_id,
                down_station_id=row.down_station_id,
                distance=row.distance,
            )
            for row in rows
        ]
        if not sections:
            return []
        self.db.add_all(sections)
        await self.db.flush()
        return [section.id for section in sections]

    async def find_all_by_line_id(self, line_id: int) -> list[SectionEntity]:
        """All section rows of a line with both stations eagerly loaded."""
        result = await self.db.execute(
            select(SectionEntity)
            .where(SectionEntity.line_id == line_id)
            .options(
                selectinload(SectionEntity.up_station),
                selectinload(SectionEntity.down_station),
            )
            .order_by(SectionEntity.id)
            # Rows inserted earlier in this session have no stations loaded yet
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def delete_by_ids(self, section_ids: Iterable[int]) -> int:
        ids = list(section_ids)
        if not ids:
            return 0
        result = await self.db.execute(delete(SectionEntity).where(SectionEntity.id.in_(ids)))
        return result.rowcount

    async def delete_by_line_id(self, line_id: int) -> int:
        result = await self.db.execute(delete(SectionEntity).where(SectionEntity.line_id == line_id))
        return result.rowcount

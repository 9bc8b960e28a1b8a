"""Line row store (scalar fields only)."""

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from subway.models.network import LineEntity


class LineDao:
    """Insert, look up, update and delete line rows."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def insert(self, name: str, color: str) -> int:
        line = LineEntity(name=name, color=color)
        self.db.add(line)
        await self.db.flush()
        return line.id

    async def find_by_id(self, line_id: int) -> LineEntity | None:
        result = await self.db.execute(select(LineEntity).where(LineEntity.id == line_id))
        return result.scalar_one_or_none()

    async def find_by_name(self, name: str) -> LineEntity | None:
        result = await self.db.execute(select(LineEntity).where(LineEntity.name == name))
        return result.scalar_one_or_none()

    async def find_all(self) -> list[LineEntity]:
        result = await self.db.execute(select(LineEntity).order_by(LineEntity.id))
        return list(result.scalars().all())

    async def update(self, line_id: int, name: str, color: str) -> int:
        """Rewrite name and color. Returns the number of rows changed."""
        result = await self.db.execute(
            update(LineEntity).where(LineEntity.id == line_id).values(name=name, color=color)
        )
        return result.rowcount

    async def delete_by_id(self, line_id: int) -> int:
        result = await self.db.execute(delete(LineEntity).where(LineEntity.id == line_id))
        return result.rowcount

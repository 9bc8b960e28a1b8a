"""Tests for the transaction helper."""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from subway.core.database import transaction
from subway.dao import StationDao
from subway.domain import PersistenceError


class TestTransaction:
    """Tests for transaction()."""

    @pytest.mark.asyncio
    async def test_commits_on_success(self, db_session: AsyncSession) -> None:
        dao = StationDao(db_session)

        async with transaction(db_session, "save station"):
            station_id = await dao.insert("Gangnam")
        await db_session.rollback()

        assert await dao.find_by_id(station_id) is not None

    @pytest.mark.asyncio
    async def test_database_error_becomes_persistence_error(self, db_session: AsyncSession) -> None:
        """Test that SQLAlchemy errors are rolled back and re-raised as PersistenceError."""
        dao = StationDao(db_session)

        with pytest.raises(PersistenceError, match="Failed to save stations") as exc_info:
            async with transaction(db_session, "save stations"):
                await dao.insert("Gangnam")
                await dao.insert("Gangnam")

        assert isinstance(exc_info.value.__cause__, IntegrityError)
        assert await dao.find_all() == []

    @pytest.mark.asyncio
    async def test_other_errors_roll_back_and_propagate(self, db_session: AsyncSession) -> None:
        dao = StationDao(db_session)

        with pytest.raises(RuntimeError):
            async with transaction(db_session, "save station"):
                await dao.insert("Gangnam")
                raise RuntimeError("boom")

        assert await dao.find_all() == []

    @pytest.mark.asyncio
    async def test_read_only_block_does_not_commit(self, db_session: AsyncSession) -> None:
        dao = StationDao(db_session)

        async with transaction(db_session, "stage station", commit=False):
            await dao.insert("Gangnam")
        await db_session.rollback()

        assert await dao.find_all() == []

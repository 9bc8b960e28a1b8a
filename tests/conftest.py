"""Pytest configuration and fixtures."""

import os

# Settings are read on import, so configure them before any subway import
os.environ["DEBUG"] = "true"
os.environ.setdefault("SECRET_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncGenerator, Generator
from typing import Any

import pytest
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from subway.dao import StationDao
from subway.domain import Station
from subway.models import Base

from tests.helpers.network import NetworkStations

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """
    Create an isolated in-memory SQLite database for one test.

    StaticPool keeps the single in-memory connection alive for the whole test,
    and foreign keys are switched on so RESTRICT/CASCADE behave like Postgres.

    Yields:
        AsyncEngine bound to a freshly created schema
    """
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """
    Database session for a test.

    Args:
        db_engine: Per-test engine

    Yields:
        AsyncSession with expire_on_commit disabled (matches the application factory)
    """
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def stations(db_session: AsyncSession) -> NetworkStations:
    """Five persisted stations."""
    station_dao = StationDao(db_session)
    created = {}
    for attr, name in [
        ("gangnam", "Gangnam"),
        ("yeoksam", "Yeoksam"),
        ("seolleung", "Seolleung"),
        ("samseong", "Samseong"),
        ("jamsil", "Jamsil"),
    ]:
        created[attr] = Station(id=await station_dao.insert(name), name=name)
    await db_session.commit()
    return NetworkStations(**created)


@pytest.fixture
def otel_enabled_provider() -> Generator[tuple[TracerProvider, InMemorySpanExporter]]:
    """
    TracerProvider with an InMemorySpanExporter installed as the global provider.

    Spans go to memory only; use exporter.get_finished_spans() to inspect them.

    Yields:
        Tuple of (TracerProvider, InMemorySpanExporter)
    """
    exporter = InMemorySpanExporter()
    resource = Resource(
        attributes={
            "service.name": "subway-test",
            "deployment.environment": "test",
        }
    )
    provider = TracerProvider(resource=resource)
    # SimpleSpanProcessor exports synchronously, which keeps assertions deterministic
    provider.add_span_processor(SimpleSpanProcessor(exporter))

    # Bypass set_tracer_provider() which refuses to override an existing provider
    trace._TRACER_PROVIDER = provider  # type: ignore[attr-defined]

    yield provider, exporter

    exporter.clear()
    trace._TRACER_PROVIDER = None  # type: ignore[attr-defined]

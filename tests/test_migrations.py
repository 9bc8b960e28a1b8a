"""Tests for the Alembic migration chain."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect
from subway.core.utils import convert_async_db_url_to_sync
from subway.models import Base


def _alembic_config(database_url: str) -> Config:
    alembic_cfg = Config()
    alembic_dir = Path(__file__).resolve().parent.parent / "alembic"
    alembic_cfg.set_main_option("script_location", str(alembic_dir))
    alembic_cfg.set_main_option("sqlalchemy.url", convert_async_db_url_to_sync(database_url))
    alembic_cfg.set_main_option("configure_logger", "false")
    return alembic_cfg


class TestMigrations:
    """Upgrade and downgrade against a throwaway SQLite file."""

    def test_upgrade_creates_model_tables(self, tmp_path: Path) -> None:
        """Test that the migrated schema matches the declarative models."""
        database_url = f"sqlite+aiosqlite:///{tmp_path / 'subway.db'}"

        command.upgrade(_alembic_config(database_url), "head")

        engine = create_engine(convert_async_db_url_to_sync(database_url))
        try:
            inspector = inspect(engine)
            assert set(Base.metadata.tables) <= set(inspector.get_table_names())
            unique_names = {constraint["name"] for constraint in inspector.get_unique_constraints("sections")}
            assert {"uq_section_line_up_station", "uq_section_line_down_station"} <= unique_names
            assert "ix_sections_line_id" in {index["name"] for index in inspector.get_indexes("sections")}
        finally:
            engine.dispose()

    def test_downgrade_removes_tables(self, tmp_path: Path) -> None:
        database_url = f"sqlite+aiosqlite:///{tmp_path / 'subway.db'}"
        alembic_cfg = _alembic_config(database_url)

        command.upgrade(alembic_cfg, "head")
        command.downgrade(alembic_cfg, "base")

        engine = create_engine(convert_async_db_url_to_sync(database_url))
        try:
            assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
        finally:
            engine.dispose()

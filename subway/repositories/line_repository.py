"""Line repository: whole-line CRUD and section reconciliation."""

from collections.abc import Iterable
from typing import NamedTuple

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from subway.core.database import transaction
from subway.core.telemetry import service_span
from subway.dao import LineDao, SectionDao, SectionRow, StationDao
from subway.domain import (
    BrokenTopologyError,
    Distance,
    Line,
    PersistenceError,
    ResourceNotFoundError,
    Section,
    Sections,
    Station,
)
from subway.models.network import LineEntity, SectionEntity, StationEntity

logger = structlog.get_logger(__name__)


class SectionDiff(NamedTuple):
    """Rows that must change to turn the persisted chain into the edited one."""

    to_insert: frozenset[SectionRow]
    to_delete: frozenset[SectionRow]

    @property
    def is_empty(self) -> bool:
        return not self.to_insert and not self.to_delete


def diff_sections(persisted: Iterable[SectionRow], edited: Iterable[SectionRow]) -> SectionDiff:
    """
    Compute the minimal insert/delete set between stored and edited sections.

    Rows are compared structurally on (up, down, distance); a section whose
    distance changed counts as one delete plus one insert. Removing station 2
    from 1-2-3 (distances 5, 5) deletes (1, 2, 5) and (2, 3, 5) and inserts
    (1, 3, 10).
    """
    persisted_set = frozenset(persisted)
    edited_set = frozenset(edited)
    return SectionDiff(
        to_insert=edited_set - persisted_set,
        to_delete=persisted_set - edited_set,
    )


def section_to_row(section: Section) -> SectionRow:
    """Column values for a domain section. Both stations must already be persisted."""
    if section.up.id is None or section.down.id is None:
        msg = f"Stations of {section!r} must be saved before the section can be stored"
        raise PersistenceError(msg)
    return SectionRow(section.up.id, section.down.id, section.distance.value)


def _to_station(entity: StationEntity) -> Station:
    return Station(id=entity.id, name=entity.name)


class LineRepository:
    """
    Translate between Line values and line/section rows.

    Topology edits reach storage only through update_sections(), which writes
    the difference between the stored rows and the edited chain inside one
    transaction.
    """

    def __init__(
        self,
        db: AsyncSession,
        *,
        line_dao: LineDao | None = None,
        section_dao: SectionDao | None = None,
        station_dao: StationDao | None = None,
    ) -> None:
        """
        Initialize the repository.

        Args:
            db: Database session; owns the transaction boundary
            line_dao: Line row store (defaults to one on ``db``)
            section_dao: Section row store (defaults to one on ``db``)
            station_dao: Station row store (defaults to one on ``db``)
        """
        self.db = db
        self.line_dao = line_dao or LineDao(db)
        self.section_dao = section_dao or SectionDao(db)
        self.station_dao = station_dao or StationDao(db)

    async def save(self, line: Line) -> int:
        """
        Persist a new line and every one of its sections.

        Returns:
            The generated line id

        Raises:
            PersistenceError: If a station is unsaved or a row operation fails (e.g. duplicate name)
        """
        rows = [section_to_row(section) for section in line.sections.edges]
        async with transaction(self.db, "save line"):
            line_id = await self.line_dao.insert(line.name, line.color)
            await self.section_dao.insert_all(line_id, rows)
        logger.info("line_saved", line_id=line_id, name=line.name, sections=len(rows))
        return line_id

    async def update_sections(self, line: Line) -> SectionDiff:
        """
        Reconcile stored section rows with ``line.sections``.

        Algorithm:
        1. Load the persisted rows for the line
        2. Diff them structurally against the edited chain
        3. Delete rows that are gone, insert rows that are new, commit

        Deletes run before inserts so the per-line uniqueness of up/down
        stations holds at every statement. Nothing is written when the diff
        is empty.

        Returns:
            The applied diff

        Raises:
            PersistenceError: If the line is unsaved, a station is unsaved, or any
                row operation fails (the transaction is rolled back)
        """
        if line.id is None:
            msg = f"Line {line.name} must be saved before its sections can be updated"
            raise PersistenceError(msg)
        line_id = line.id
        edited_rows = [section_to_row(section) for section in line.sections.edges]

        with service_span(
            "line_repository.update_sections",
            "line-repository",
            **{"line.id": line_id},
        ) as span:
            async with transaction(self.db, f"update sections of line {line_id}"):
                persisted = await self.section_dao.find_all_by_line_id(line_id)
                row_ids = {SectionRow(*entity.key): entity.id for entity in persisted}
                diff = diff_sections(row_ids, edited_rows)

                if not diff.is_empty:
                    await self.section_dao.delete_by_ids(row_ids[row] for row in diff.to_delete)
                    await self.section_dao.insert_all(line_id, diff.to_insert)

            span.set_attribute("sections.inserted", len(diff.to_insert))
            span.set_attribute("sections.deleted", len(diff.to_delete))

        logger.info(
            "line_sections_reconciled",
            line_id=line_id,
            inserted=len(diff.to_insert),
            deleted=len(diff.to_delete),
        )
        return diff

    async def find_by_id(self, line_id: int) -> Line | None:
        async with transaction(self.db, f"load line {line_id}", commit=False):
            if not (entity := await self.line_dao.find_by_id(line_id)):
                return None
            return await self._to_domain(entity)

    async def find_by_name(self, name: str) -> Line | None:
        async with transaction(self.db, f"load line {name}", commit=False):
            if not (entity := await self.line_dao.find_by_name(name)):
                return None
            return await self._to_domain(entity)

    async def find_all_lines(self) -> list[Line]:
        async with transaction(self.db, "load lines", commit=False):
            entities = await self.line_dao.find_all()
            return [await self._to_domain(entity) for entity in entities]

    async def update(self, line: Line) -> None:
        """
        Rewrite a line's name and color. Sections are untouched.

        Raises:
            ResourceNotFoundError: If no line has ``line.id``
            PersistenceError: If the row update fails (e.g. duplicate name)
        """
        if line.id is None:
            msg = f"Line {line.name} has not been saved"
            raise ResourceNotFoundError(msg)
        async with transaction(self.db, f"update line {line.id}"):
            if not await self.line_dao.update(line.id, line.name, line.color):
                msg = f"Line {line.id} not found"
                raise ResourceNotFoundError(msg)
        logger.info("line_updated", line_id=line.id, name=line.name, color=line.color)

    async def delete(self, line: Line) -> None:
        """Delete a line together with all of its section rows."""
        if line.id is None:
            msg = f"Line {line.name} has not been saved"
            raise ResourceNotFoundError(msg)
        async with transaction(self.db, f"delete line {line.id}"):
            await self.section_dao.delete_by_line_id(line.id)
            await self.line_dao.delete_by_id(line.id)
        logger.info("line_deleted", line_id=line.id)

    async def _to_domain(self, entity: LineEntity) -> Line:
        rows = await self.section_dao.find_all_by_line_id(entity.id)
        return Line(
            id=entity.id,
            name=entity.name,
            color=entity.color,
            sections=self._assemble(entity.id, rows),
        )

    @staticmethod
    def _assemble(line_id: int, rows: list[SectionEntity]) -> Sections:
        try:
            return Sections(
                Section(_to_station(row.up_station), _to_station(row.down_station), Distance(row.distance))
                for row in rows
            )
        except BrokenTopologyError:
            # Stored rows are corrupt; this is a bug, not a user error
            logger.critical("line_topology_broken", line_id=line_id, sections=len(rows))
            raise

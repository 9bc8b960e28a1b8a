"""Row stores for stations, lines and sections.

DAOs share the caller's session and never commit; the caller owns the
transaction boundary.
"""

from subway.dao.line_dao import LineDao
from subway.dao.section_dao import SectionDao, SectionRow
from subway.dao.station_dao import StationDao

__all__ = ["LineDao", "SectionDao", "SectionRow", "StationDao"]

#!/usr/bin/env python3
"""CLI tool for managing stations and lines.

Usage:
    # Create the database schema
    python -m subway.cli init-db

    # Add stations
    python -m subway.cli add-station "Gangnam"
    python -m subway.cli list-stations

    # Create a line with its first section (up station, down station, distance)
    python -m subway.cli create-line "Line 2" green 1 2 10

    # Extend or split a line
    python -m subway.cli add-section 1 1 3 4

    # Remove a station from a line (neighbouring sections are merged)
    python -m subway.cli remove-station 1 3

    # Show lines
    python -m subway.cli show-line 1
    python -m subway.cli list-lines
"""

import argparse
import asyncio
import sys
from collections.abc import Awaitable, Callable

from alembic import command
from alembic.config import Config
from opentelemetry import trace
from sqlalchemy.ext.asyncio import AsyncSession

from subway.core.config import settings
from subway.core.database import dispose_engine, get_session_factory
from subway.core.logging import configure_logging
from subway.core.telemetry import get_tracer_provider
from subway.domain import SubwayError
from subway.schemas.lines import LineRequest, LineResponse, SectionRequest
from subway.schemas.stations import StationRequest
from subway.services.line_service import LineService
from subway.services.station_service import StationService

CommandHandler = Callable[[argparse.Namespace, AsyncSession], Awaitable[int]]


def _print_line(line: LineResponse) -> None:
    print(f"Line {line.id}: {line.name} ({line.color}), total distance {line.total_distance}")
    if not line.sections:
        print("   (no sections)")
        return
    path = [line.sections[0].up_station.name]
    for section in line.sections:
        path.append(f"-({section.distance})-> {section.down_station.name}")
    print("   " + " ".join(path))


async def cmd_add_station(args: argparse.Namespace, session: AsyncSession) -> int:
    """
    Create a station.

    Args:
        args: Parsed command-line arguments
        session: Database session

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        station_id = await StationService(session).save_station(StationRequest(name=args.name))
    except (SubwayError, ValueError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1
    print(f"✅ Created station {args.name} (id {station_id})")
    return 0


async def cmd_list_stations(args: argparse.Namespace, session: AsyncSession) -> int:
    try:
        stations = await StationService(session).find_all_station_responses()
    except SubwayError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1
    if not stations:
        print("No stations found")
        return 0

    print(f"{'ID':<8} Name")
    print("-" * 40)
    for station in stations:
        print(f"{station.id:<8} {station.name}")
    return 0


async def cmd_create_line(args: argparse.Namespace, session: AsyncSession) -> int:
    """
    Create a line with its first section.

    Args:
        args: Parsed command-line arguments
        session: Database session

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        request = LineRequest(
            name=args.name,
            color=args.color,
            up_station_id=args.up_station_id,
            down_station_id=args.down_station_id,
            distance=args.distance,
        )
        line = await LineService(session).save_line(request)
    except (SubwayError, ValueError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1
    print("✅ Created line")
    _print_line(line)
    return 0


async def cmd_add_section(args: argparse.Namespace, session: AsyncSession) -> int:
    """
    Add a section to an existing line.

    Args:
        args: Parsed command-line arguments
        session: Database session

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        request = SectionRequest(
            up_station_id=args.up_station_id,
            down_station_id=args.down_station_id,
            distance=args.distance,
        )
        line = await LineService(session).add_section(args.line_id, request)
    except (SubwayError, ValueError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1
    print("✅ Added section")
    _print_line(line)
    return 0


async def cmd_remove_station(args: argparse.Namespace, session: AsyncSession) -> int:
    try:
        line = await LineService(session).delete_station(args.line_id, args.station_id)
    except SubwayError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1
    print(f"✅ Removed station {args.station_id}")
    _print_line(line)
    return 0


async def cmd_show_line(args: argparse.Namespace, session: AsyncSession) -> int:
    try:
        line = await LineService(session).find_line_response_by_id(args.line_id)
    except SubwayError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1
    _print_line(line)
    return 0


async def cmd_list_lines(args: argparse.Namespace, session: AsyncSession) -> int:
    try:
        lines = await LineService(session).find_line_responses()
    except SubwayError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1
    if not lines:
        print("No lines found")
        return 0
    for line in lines:
        _print_line(line)
    return 0


def _init_db() -> int:
    """Run Alembic migrations up to head."""
    alembic_cfg = Config(settings.ALEMBIC_INI_PATH)
    # Logging is already configured by structlog
    alembic_cfg.set_main_option("configure_logger", "false")
    command.upgrade(alembic_cfg, "head")
    print("✅ Database schema is up to date")
    return 0


def main() -> int:
    """
    Main entry point for the CLI tool.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="Subway line management CLI tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("init-db", help="Create or upgrade the database schema")

    add_station_parser = subparsers.add_parser("add-station", help="Create a station")
    add_station_parser.add_argument("name", type=str, help="Station name (must be unique)")

    subparsers.add_parser("list-stations", help="List all stations")

    create_line_parser = subparsers.add_parser(
        "create-line",
        help="Create a line with its first section",
    )
    create_line_parser.add_argument("name", type=str, help="Line name (must be unique)")
    create_line_parser.add_argument("color", type=str, help="Line color")
    create_line_parser.add_argument("up_station_id", type=int, help="Station the first section starts from")
    create_line_parser.add_argument("down_station_id", type=int, help="Station the first section ends at")
    create_line_parser.add_argument("distance", type=int, help="Distance of the first section")

    add_section_parser = subparsers.add_parser(
        "add-section",
        help="Extend a line or split one of its sections",
    )
    add_section_parser.add_argument("line_id", type=int, help="Line ID")
    add_section_parser.add_argument("up_station_id", type=int, help="Station the section starts from")
    add_section_parser.add_argument("down_station_id", type=int, help="Station the section ends at")
    add_section_parser.add_argument("distance", type=int, help="Section distance")

    remove_station_parser = subparsers.add_parser(
        "remove-station",
        help="Remove a station from a line",
    )
    remove_station_parser.add_argument("line_id", type=int, help="Line ID")
    remove_station_parser.add_argument("station_id", type=int, help="Station ID")

    show_line_parser = subparsers.add_parser("show-line", help="Show a line's stations in order")
    show_line_parser.add_argument("line_id", type=int, help="Line ID")

    subparsers.add_parser("list-lines", help="List all lines")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(log_level=settings.LOG_LEVEL)
    if tracer_provider := get_tracer_provider():
        trace.set_tracer_provider(tracer_provider)

    if args.command == "init-db":
        return _init_db()

    command_handlers: dict[str, CommandHandler] = {
        "add-station": cmd_add_station,
        "list-stations": cmd_list_stations,
        "create-line": cmd_create_line,
        "add-section": cmd_add_section,
        "remove-station": cmd_remove_station,
        "show-line": cmd_show_line,
        "list-lines": cmd_list_lines,
    }

    if handler := command_handlers.get(args.command):

        async def run_with_session() -> int:
            try:
                async with get_session_factory()() as session:
                    return await handler(args, session)
            finally:
                await dispose_engine()

        return asyncio.run(run_with_session())

    print(f"❌ Unknown command: {args.command}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())

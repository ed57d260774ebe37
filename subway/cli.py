#!/usr/bin/env python3
"""CLI tool for line and section management.

Usage:
    # Create the tables (first run only)
    python -m subway.cli init-db

    # Create stations
    python -m subway.cli create-station "Gangnam"

    # Create a line with its first section
    python -m subway.cli create-line "Line 2" green <up-station-id> <down-station-id> 10

    # Add a section (extends the line or splits an existing section)
    python -m subway.cli add-section <line-id> <up-station-id> <down-station-id> 4

    # Remove a station (merges its neighbouring sections)
    python -m subway.cli remove-station <line-id> <station-id>

    # Show a line's stations in order
    python -m subway.cli show-line <line-id>

    # List all lines / stations
    python -m subway.cli list-lines
    python -m subway.cli list-stations
"""

import argparse
import asyncio
import sys
import uuid

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from subway.core.config import settings
from subway.core.database import get_session_factory, init_models
from subway.core.logging import configure_logging
from subway.helpers.section_chain import SectionError
from subway.models import Line
from subway.schemas.lines import LineCreateRequest, LineResponse, SectionCreateRequest
from subway.services.line_service import LineService, LineServiceError


def _print_line(line: Line) -> None:
    response = LineResponse.from_line(line)
    print(f"   Line ID:   {response.id}")
    print(f"   Name:      {response.name}")
    print(f"   Color:     {response.color}")
    print(f"   Distance:  {response.total_distance}")
    print(f"   Stations:  {' -> '.join(station.name for station in response.stations)}")
    print("   Sections:")
    for section in response.sections:
        print(f"     {section.up_station.name} -> {section.down_station.name} ({section.distance})")


async def cmd_init_db(args: argparse.Namespace, session: AsyncSession) -> int:
    """
    Create all tables.

    Args:
        args: Parsed command-line arguments
        session: Database session

    Returns:
        Exit code (0 for success, 1 for error)
    """
    await init_models(session.bind)

    print("✅ Database tables created")
    return 0


async def cmd_create_station(args: argparse.Namespace, session: AsyncSession) -> int:
    """Create a station."""
    station = await LineService(session).create_station(args.name)

    print("✅ Created station successfully!")
    print(f"   Station ID: {station.id}")
    print(f"   Name:       {station.name}")
    return 0


async def cmd_list_stations(args: argparse.Namespace, session: AsyncSession) -> int:
    """List all stations."""
    stations = await LineService(session).list_stations()

    if not stations:
        print("No stations found")
        return 0

    print(f"Found {len(stations)} station(s):\n")
    print(f"{'Station ID':<38} Name")
    print("-" * 70)
    for station in stations:
        print(f"{station.id!s:<38} {station.name}")

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
        request = LineCreateRequest(
            name=args.name,
            color=args.color,
            up_station_id=args.up_station_id,
            down_station_id=args.down_station_id,
            distance=args.distance,
        )
        line = await LineService(session).create_line(request)
    except (ValidationError, LineServiceError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    print("✅ Created line successfully!")
    _print_line(line)
    return 0


async def cmd_add_section(args: argparse.Namespace, session: AsyncSession) -> int:
    """
    Add a section to a line.

    Args:
        args: Parsed command-line arguments
        session: Database session

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        request = SectionCreateRequest(
            up_station_id=args.up_station_id,
            down_station_id=args.down_station_id,
            distance=args.distance,
        )
        line = await LineService(session).add_section(args.line_id, request)
    except (ValidationError, LineServiceError, SectionError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    print("✅ Added section successfully!")
    _print_line(line)
    return 0


async def cmd_remove_station(args: argparse.Namespace, session: AsyncSession) -> int:
    """
    Remove a station from a line.

    Args:
        args: Parsed command-line arguments
        session: Database session

    Returns:
        Exit code (0 for success, 1 for error)
    """
    try:
        line = await LineService(session).remove_station(args.line_id, args.station_id)
    except (LineServiceError, SectionError) as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    print("✅ Removed station successfully!")
    _print_line(line)
    return 0


async def cmd_show_line(args: argparse.Namespace, session: AsyncSession) -> int:
    """Show a line's stations in order."""
    try:
        line = await LineService(session).get_line(args.line_id)
    except LineServiceError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    _print_line(line)
    return 0


async def cmd_list_lines(args: argparse.Namespace, session: AsyncSession) -> int:
    """List all lines with their terminal stations."""
    lines = await LineService(session).list_lines()

    if not lines:
        print("No lines found")
        return 0

    print(f"Found {len(lines)} line(s):\n")
    print(f"{'Line ID':<38} {'Name':<20} {'Color':<10} Route")
    print("-" * 110)
    for line in lines:
        stations = line.stations()
        route = f"{stations[0].name} -> {stations[-1].name}" if stations else "(no sections)"
        print(f"{line.id!s:<38} {line.name:<20} {line.color:<10} {route}")

    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        description="Line and section management CLI tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("init-db", help="Create database tables")

    create_station_parser = subparsers.add_parser("create-station", help="Create a station")
    create_station_parser.add_argument("name", type=str, help="Station name")

    subparsers.add_parser("list-stations", help="List all stations")

    create_line_parser = subparsers.add_parser(
        "create-line",
        help="Create a line with its first section",
    )
    create_line_parser.add_argument("name", type=str, help="Line name")
    create_line_parser.add_argument("color", type=str, help="Line color")
    create_line_parser.add_argument("up_station_id", type=uuid.UUID, help="Up station UUID")
    create_line_parser.add_argument("down_station_id", type=uuid.UUID, help="Down station UUID")
    create_line_parser.add_argument("distance", type=int, help="Distance between the stations")

    add_section_parser = subparsers.add_parser(
        "add-section",
        help="Add a section to a line",
        description="Extend the line at either end, or split an existing section.",
    )
    add_section_parser.add_argument("line_id", type=uuid.UUID, help="Line UUID")
    add_section_parser.add_argument("up_station_id", type=uuid.UUID, help="Up station UUID")
    add_section_parser.add_argument("down_station_id", type=uuid.UUID, help="Down station UUID")
    add_section_parser.add_argument("distance", type=int, help="Distance between the stations")

    remove_station_parser = subparsers.add_parser(
        "remove-station",
        help="Remove a station from a line",
        description="Drop a terminal station, or merge the sections around an interior station.",
    )
    remove_station_parser.add_argument("line_id", type=uuid.UUID, help="Line UUID")
    remove_station_parser.add_argument("station_id", type=uuid.UUID, help="Station UUID")

    show_line_parser = subparsers.add_parser("show-line", help="Show a line's stations in order")
    show_line_parser.add_argument("line_id", type=uuid.UUID, help="Line UUID")

    subparsers.add_parser("list-lines", help="List all lines")

    return parser


COMMAND_HANDLERS = {
    "init-db": cmd_init_db,
    "create-station": cmd_create_station,
    "list-stations": cmd_list_stations,
    "create-line": cmd_create_line,
    "add-section": cmd_add_section,
    "remove-station": cmd_remove_station,
    "show-line": cmd_show_line,
    "list-lines": cmd_list_lines,
}


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CLI tool.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    # Show help if no command provided
    if not args.command:
        parser.print_help()
        return 1

    configure_logging(log_level=settings.LOG_LEVEL)

    handler = COMMAND_HANDLERS[args.command]

    async def run_with_session() -> int:
        async with get_session_factory()() as session:
            try:
                return await handler(args, session)
            except Exception as e:
                print(f"❌ Unexpected error: {e}", file=sys.stderr)
                return 1

    return asyncio.run(run_with_session())


if __name__ == "__main__":
    sys.exit(main())

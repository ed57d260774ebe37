"""Line and section management service."""

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from subway.helpers.section_chain import SectionError
from subway.models.line import Line, Section, Station
from subway.schemas.lines import LineCreateRequest, LineUpdateRequest, SectionCreateRequest

logger = structlog.get_logger(__name__)


class LineServiceError(Exception):
    """Base exception for line service lookups."""

    pass


class LineNotFoundError(LineServiceError):
    """Raised when the requested line doesn't exist."""

    def __init__(self, line_id: uuid.UUID) -> None:
        self.line_id = line_id
        super().__init__(f"Line '{line_id}' not found.")


class StationLookupError(LineServiceError):
    """Raised when a referenced station doesn't exist."""

    def __init__(self, station_id: uuid.UUID) -> None:
        self.station_id = station_id
        super().__init__(f"Station '{station_id}' not found.")


class LineService:
    """Service for managing lines and their sections."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize the line service.

        Args:
            db: Database session
        """
        self.db = db

    # ==================== Stations ====================

    async def create_station(self, name: str) -> Station:
        """
        Create a station.

        Args:
            name: Unique station name

        Returns:
            Created station
        """
        station = Station(name=name)
        self.db.add(station)
        await self.db.commit()
        await self.db.refresh(station)

        logger.info("station_created", station_id=str(station.id), name=name)
        return station

    async def get_station(self, station_id: uuid.UUID) -> Station:
        """
        Get a station by ID.

        Raises:
            StationLookupError: If the station doesn't exist
        """
        if not (station := await self.db.get(Station, station_id)):
            raise StationLookupError(station_id)
        return station

    async def list_stations(self) -> list[Station]:
        result = await self.db.execute(select(Station).order_by(Station.name))
        return list(result.scalars().all())

    # ==================== Lines ====================

    async def get_line(self, line_id: uuid.UUID) -> Line:
        """
        Get a line with its sections and their stations loaded.

        Args:
            line_id: Line UUID

        Returns:
            Line object

        Raises:
            LineNotFoundError: If the line doesn't exist
        """
        result = await self.db.execute(
            select(Line)
            .where(Line.id == line_id)
            .options(
                selectinload(Line.sections).selectinload(Section.up_station),
                selectinload(Line.sections).selectinload(Section.down_station),
            )
        )

        if not (line := result.scalar_one_or_none()):
            raise LineNotFoundError(line_id)

        return line

    async def list_lines(self) -> list[Line]:
        """
        List all lines.

        Returns:
            Lines with sections and stations loaded, oldest first
        """
        result = await self.db.execute(
            select(Line)
            .options(
                selectinload(Line.sections).selectinload(Section.up_station),
                selectinload(Line.sections).selectinload(Section.down_station),
            )
            .order_by(Line.created_at)
        )
        return list(result.scalars().all())

    async def create_line(self, request: LineCreateRequest) -> Line:
        """
        Create a line together with its first section.

        Args:
            request: Line creation request

        Returns:
            Created line

        Raises:
            StationLookupError: If either station doesn't exist
        """
        up_station = await self.get_station(request.up_station_id)
        down_station = await self.get_station(request.down_station_id)

        line = Line(name=request.name, color=request.color)
        line.section_chain.add(
            Section(up_station=up_station, down_station=down_station, distance=request.distance)
        )

        self.db.add(line)
        await self.db.commit()

        logger.info(
            "line_created",
            line_id=str(line.id),
            name=line.name,
            up_station=up_station.name,
            down_station=down_station.name,
        )
        return line

    async def update_line(self, line_id: uuid.UUID, request: LineUpdateRequest) -> Line:
        """
        Update line metadata.

        Args:
            line_id: Line UUID
            request: Update request

        Returns:
            Updated line

        Raises:
            LineNotFoundError: If the line doesn't exist
        """
        line = await self.get_line(line_id)

        # Update only provided fields
        if request.name is not None:
            line.name = request.name
        if request.color is not None:
            line.color = request.color

        await self.db.commit()
        return line

    async def delete_line(self, line_id: uuid.UUID) -> None:
        """
        Delete a line (and all its sections via cascade).

        Raises:
            LineNotFoundError: If the line doesn't exist
        """
        line = await self.get_line(line_id)

        await self.db.delete(line)
        await self.db.commit()

        logger.info("line_deleted", line_id=str(line_id))

    async def get_line_stations(self, line_id: uuid.UUID) -> list[Station]:
        """
        Get a line's stations in path order.

        Raises:
            LineNotFoundError: If the line doesn't exist
        """
        line = await self.get_line(line_id)
        return line.stations()

    # ==================== Sections ====================

    async def add_section(self, line_id: uuid.UUID, request: SectionCreateRequest) -> Line:
        """
        Add a section to a line, splitting an existing section if needed.

        The section chain validates before mutating, so a rejected section
        leaves the line untouched. The session is rolled back before the
        error propagates.

        Args:
            line_id: Line UUID
            request: Section creation request

        Returns:
            Updated line

        Raises:
            LineNotFoundError: If the line doesn't exist
            StationLookupError: If either station doesn't exist
            SectionError: If the section can't be added to the line
        """
        line = await self.get_line(line_id)
        up_station = await self.get_station(request.up_station_id)
        down_station = await self.get_station(request.down_station_id)

        section = Section(up_station=up_station, down_station=down_station, distance=request.distance)
        try:
            line.section_chain.insert(section)
        except SectionError as e:
            logger.warning(
                "section_rejected",
                line_id=str(line_id),
                up_station=up_station.name,
                down_station=down_station.name,
                error_type=type(e).__name__,
                error=str(e),
            )
            await self.db.rollback()
            raise

        await self.db.commit()

        logger.info(
            "section_added",
            line_id=str(line_id),
            up_station=up_station.name,
            down_station=down_station.name,
            distance=request.distance,
        )
        return line

    async def remove_station(self, line_id: uuid.UUID, station_id: uuid.UUID) -> Line:
        """
        Remove a station from a line, merging its neighbouring sections.

        Args:
            line_id: Line UUID
            station_id: Station UUID

        Returns:
            Updated line

        Raises:
            LineNotFoundError: If the line doesn't exist
            StationLookupError: If the station doesn't exist
            SectionError: If the station can't be removed from the line
        """
        line = await self.get_line(line_id)
        station = await self.get_station(station_id)

        try:
            line.section_chain.delete(station)
        except SectionError as e:
            logger.warning(
                "station_removal_rejected",
                line_id=str(line_id),
                station=station.name,
                error_type=type(e).__name__,
                error=str(e),
            )
            await self.db.rollback()
            raise

        await self.db.commit()

        logger.info("station_removed", line_id=str(line_id), station=station.name)
        return line

"""Pydantic schemas for line and section management."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from subway.models.line import Line

# ==================== Helper Functions ====================


def _validate_distinct_stations(up_station_id: UUID, down_station_id: UUID) -> None:
    """
    Validate that a section joins two different stations - reusable helper.

    Raises:
        ValueError: If both ends are the same station
    """
    if up_station_id == down_station_id:
        msg = "up_station_id and down_station_id must be different stations"
        raise ValueError(msg)


# ==================== Request Schemas ====================


class SectionCreateRequest(BaseModel):
    """Request to add a section to a line."""

    up_station_id: UUID
    down_station_id: UUID
    distance: int = Field(..., gt=0, description="Distance between the two stations")

    @model_validator(mode="after")
    def validate_stations(self) -> "SectionCreateRequest":
        """Ensure up and down stations differ."""
        _validate_distinct_stations(self.up_station_id, self.down_station_id)
        return self


class LineCreateRequest(SectionCreateRequest):
    """Request to create a line together with its first section."""

    name: str = Field(..., min_length=1, max_length=255)
    color: str = Field(..., min_length=1, max_length=50)


class LineUpdateRequest(BaseModel):
    """Request to update line metadata. Only provided fields are changed."""

    name: str | None = Field(None, min_length=1, max_length=255)
    color: str | None = Field(None, min_length=1, max_length=50)


# ==================== Response Schemas ====================


class StationResponse(BaseModel):
    """Station reference."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str


class SectionResponse(BaseModel):
    """A single section of a line."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    up_station: StationResponse
    down_station: StationResponse
    distance: int


class LineResponse(BaseModel):
    """Line with its stations in path order."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    color: str
    stations: list[StationResponse]
    sections: list[SectionResponse]
    total_distance: int

    @classmethod
    def from_line(cls, line: Line) -> "LineResponse":
        """
        Build a response from a loaded line.

        Args:
            line: Line with sections and their stations loaded

        Returns:
            LineResponse with stations and sections ordered start to end
        """
        chain = line.section_chain
        stations = chain.stations()
        position = {station: index for index, station in enumerate(stations)}
        sections = sorted(chain, key=lambda section: position.get(section.up_station, len(stations)))
        return cls(
            id=line.id,
            name=line.name,
            color=line.color,
            stations=[StationResponse.model_validate(station) for station in stations],
            sections=[SectionResponse.model_validate(section) for section in sections],
            total_distance=chain.total_distance(),
        )

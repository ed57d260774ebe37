"""Line, station and section models."""

import uuid

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from subway.helpers.section_chain import InvalidSectionLengthError, Sections
from subway.models.base import BaseModel


class Station(BaseModel):
    """Station model. Identity is the row; stations are never edited by a line."""

    __tablename__ = "stations"

    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        """String representation of the station."""
        return f"<Station(id={self.id}, name={self.name})>"


class Line(BaseModel):
    """Line model owning an unordered collection of sections."""

    __tablename__ = "lines"

    name: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    color: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )

    # Relationships
    sections: Mapped[list["Section"]] = relationship(
        back_populates="line",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def section_chain(self) -> Sections:
        """Section chain operating directly on this line's sections."""
        return Sections(self.sections)

    def stations(self) -> list[Station]:
        """Stations of the line in path order."""
        return self.section_chain.stations()

    def __repr__(self) -> str:
        """String representation of the line."""
        return f"<Line(id={self.id}, name={self.name}, color={self.color})>"


class Section(BaseModel):
    """
    Directed section between two adjacent stations on a line.

    Endpoints and distance are updated in place when a new section splits this
    one or when a neighbouring section is merged into it.
    """

    __tablename__ = "sections"

    line_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("lines.id", ondelete="CASCADE"),
        nullable=False,
    )
    up_station_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("stations.id", ondelete="RESTRICT"),
        nullable=False,
    )
    down_station_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("stations.id", ondelete="RESTRICT"),
        nullable=False,
    )
    distance: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # Relationships
    line: Mapped[Line | None] = relationship(back_populates="sections")
    up_station: Mapped[Station] = relationship(
        foreign_keys=[up_station_id],
        lazy="selectin",
    )
    down_station: Mapped[Station] = relationship(
        foreign_keys=[down_station_id],
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint("distance > 0", name="ck_sections_distance_positive"),
        Index("ix_sections_line", "line_id"),
    )

    @validates("distance")
    def validate_distance(self, key: str, distance: int) -> int:
        """Reject non-positive distances on construction and on every update."""
        if distance <= 0:
            raise InvalidSectionLengthError(distance)
        return distance

    def is_same_up_station(self, other: "Section") -> bool:
        return self.up_station == other.up_station

    def is_same_down_station(self, other: "Section") -> bool:
        return self.down_station == other.down_station

    def update_up_station(self, other: "Section") -> None:
        """
        Shorten this section from the up side.

        ``other`` starts where this section starts, so this section now starts
        where ``other`` ends and loses ``other``'s distance.
        """
        self.distance = self.distance - other.distance
        self.up_station = other.down_station

    def update_down_station(self, other: "Section") -> None:
        """
        Shorten this section from the down side.

        ``other`` ends where this section ends, so this section now ends where
        ``other`` starts and loses ``other``'s distance.
        """
        self.distance = self.distance - other.distance
        self.down_station = other.up_station

    def delete_between_section(self, other: "Section") -> None:
        """Absorb the following section, bridging the station between them."""
        self.distance = self.distance + other.distance
        self.down_station = other.down_station

    def clear_line(self) -> None:
        """Release this section from its line."""
        self.line = None

    def __repr__(self) -> str:
        """String representation of the section."""
        return (
            f"<Section(id={self.id}, up={self.up_station_id}, down={self.down_station_id}, distance={self.distance})>"
        )

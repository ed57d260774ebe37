"""
Section chain helpers for line topology.

A line is stored as an unordered collection of directed sections
(up station -> down station, with a distance). The functions and the
Sections class in this module rebuild the ordered station sequence from that
collection and apply the two mutations a line supports: inserting a section
(splitting an existing one when the new section subdivides it) and deleting a
station (dropping a terminal section or merging the two sections around an
interior station).

Nothing here touches the database. Sections are mutated in place, so the ORM
sees updates to existing rows rather than delete-and-insert pairs.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, MutableSequence, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from subway.models.line import Section, Station

# A line with a single section has exactly two stations and cannot shrink further
MINIMUM_STATION_COUNT = 2


# Custom domain exceptions


class SectionError(Exception):
    """Base exception for section chain errors."""

    pass


class DisconnectedSectionError(SectionError):
    """Raised when neither endpoint of a new section is already on the line."""

    def __init__(self, up_station: Station, down_station: Station) -> None:
        self.up_station = up_station
        self.down_station = down_station
        super().__init__(
            f"Section '{_label(up_station)}' -> '{_label(down_station)}' "
            "does not connect to any station on the line."
        )


class DuplicateSectionError(SectionError):
    """
    Raised when both endpoints of a new section are already on the line.

    The segment between them is already represented, so adding it would create
    a cycle or a parallel branch.
    """

    def __init__(self, up_station: Station, down_station: Station) -> None:
        self.up_station = up_station
        self.down_station = down_station
        super().__init__(
            f"Section '{_label(up_station)}' -> '{_label(down_station)}' is already part of the line."
        )


class StationNotFoundError(SectionError):
    """Raised when the station to delete is not on the line."""

    def __init__(self, station: Station) -> None:
        self.station = station
        super().__init__(f"Station '{_label(station)}' is not on the line.")


class SectionTooShortError(SectionError):
    """Raised when deleting a station would leave the line without a section."""

    def __init__(self, station_count: int) -> None:
        self.station_count = station_count
        super().__init__(
            f"Line has only {station_count} stations; at least {MINIMUM_STATION_COUNT} must remain."
        )


class InvalidSectionLengthError(SectionError):
    """
    Raised when a section distance is not usable.

    Either the distance itself is not positive, or the section would split an
    existing section without leaving a positive remainder.
    """

    def __init__(self, distance: int, available: int | None = None) -> None:
        self.distance = distance
        self.available = available
        if available is None:
            message = f"Section distance must be positive, got {distance}."
        else:
            message = (
                f"Section distance {distance} must be shorter than the section it splits ({available})."
            )
        super().__init__(message)


def _label(station: Station) -> str:
    return str(getattr(station, "name", None) or station)


# Index helpers


def index_by_up_station(sections: Iterable[Section]) -> dict[Station, Section]:
    """
    Map each up station to the first section that starts there.

    Args:
        sections: Sections in backing-collection order

    Returns:
        Dict of up station -> section
    """
    index: dict[Station, Section] = {}
    for section in sections:
        index.setdefault(section.up_station, section)
    return index


def index_by_down_station(sections: Iterable[Section]) -> dict[Station, Section]:
    """
    Map each down station to the first section that ends there.

    Args:
        sections: Sections in backing-collection order

    Returns:
        Dict of down station -> section
    """
    index: dict[Station, Section] = {}
    for section in sections:
        index.setdefault(section.down_station, section)
    return index


def order_stations(sections: Sequence[Section]) -> list[Station]:
    """
    Rebuild the ordered station path from an unordered set of sections.

    Starts from any section, walks backward to the section with no predecessor,
    then walks forward emitting each down station. Both walks use station
    indexes built once up front, so the whole reconstruction is O(n).
    A section is never visited twice, so a corrupted cyclic collection
    terminates instead of looping.

    Args:
        sections: Unordered sections of a single line

    Returns:
        Stations from the start of the line to its end (empty if no sections)

    Examples:
        >>> order_stations([
        ...     Section(up_station=b, down_station=c, distance=3),
        ...     Section(up_station=a, down_station=b, distance=5),
        ... ])
        [a, b, c]
    """
    if not sections:
        return []

    by_up_station = index_by_up_station(sections)
    by_down_station = index_by_down_station(sections)

    first = sections[0]
    visited = {first}
    while (previous := by_down_station.get(first.up_station)) is not None and previous not in visited:
        visited.add(previous)
        first = previous

    stations = [first.up_station, first.down_station]
    walked = {first}
    current = by_up_station.get(first.down_station)
    while current is not None and current not in walked:
        walked.add(current)
        stations.append(current.down_station)
        current = by_up_station.get(current.down_station)

    return stations


def _release_section(section: Section) -> None:
    section.clear_line()


class Sections:
    """
    The section collection of a single line.

    Wraps a mutable sequence of sections (typically the ORM-instrumented
    ``Line.sections`` list) and keeps it a single simple path. The wrapped
    sequence is mutated directly; sections removed from it are handed to
    ``on_remove``, which by default releases them from their line.

    Not thread-safe. Callers serialize mutations per line.
    """

    def __init__(
        self,
        sections: MutableSequence[Section] | None = None,
        *,
        on_remove: Callable[[Section], None] | None = None,
    ) -> None:
        """
        Initialize the chain.

        Args:
            sections: Backing collection to operate on (a new list if omitted)
            on_remove: Called with each section removed from the chain
        """
        self._sections: MutableSequence[Section] = sections if sections is not None else []
        self._on_remove = on_remove or _release_section

    def __len__(self) -> int:
        return len(self._sections)

    def __iter__(self) -> Iterator[Section]:
        return iter(self._sections)

    def add(self, section: Section) -> None:
        """Append a section without validation (used for a line's first section)."""
        self._sections.append(section)

    def stations(self) -> list[Station]:
        """Ordered stations of the line, start to end."""
        return order_stations(self._sections)

    def station_set(self) -> set[Station]:
        """Every station referenced by a section, in no particular order."""
        present: set[Station] = set()
        for section in self._sections:
            present.add(section.up_station)
            present.add(section.down_station)
        return present

    def total_distance(self) -> int:
        return sum(section.distance for section in self._sections)

    def insert(self, new_section: Section) -> None:
        """
        Add a section to the line, splitting an existing section if needed.

        If the new section starts where an existing section starts, that
        section is shortened from its up side. Otherwise, if it ends where an
        existing section ends, that section is shortened from its down side.
        Otherwise the new section extends the line at one end.
        All validation happens before anything is mutated.

        Args:
            new_section: Section to add

        Raises:
            DuplicateSectionError: Both endpoints are already on the line
            DisconnectedSectionError: Neither endpoint is on the line
            InvalidSectionLengthError: The split would leave no positive remainder
        """
        if not self._sections:
            if new_section.up_station == new_section.down_station:
                raise DuplicateSectionError(new_section.up_station, new_section.down_station)
            self.add(new_section)
            return

        present = self.station_set()
        up_exists = new_section.up_station in present
        down_exists = new_section.down_station in present

        if not up_exists and not down_exists:
            raise DisconnectedSectionError(new_section.up_station, new_section.down_station)
        if up_exists and down_exists:
            raise DuplicateSectionError(new_section.up_station, new_section.down_station)

        if split := self._find_split(new_section):
            target, update = split
            if new_section.distance >= target.distance:
                raise InvalidSectionLengthError(new_section.distance, target.distance)
            update(new_section)

        self._sections.append(new_section)

    def delete(self, station: Station) -> None:
        """
        Remove a station from the line.

        An interior station's two sections are merged into the incoming one.
        A terminal station's only section is removed.

        Args:
            station: Station to remove

        Raises:
            StationNotFoundError: Station is not on the line
            SectionTooShortError: Line is already at its minimum size
        """
        stations = self.stations()
        if station not in stations:
            raise StationNotFoundError(station)
        if len(stations) <= MINIMUM_STATION_COUNT:
            raise SectionTooShortError(len(stations))

        out_section = next((s for s in self._sections if s.up_station == station), None)
        in_section = next((s for s in self._sections if s.down_station == station), None)

        if in_section is not None and out_section is not None:
            in_section.delete_between_section(out_section)
            self._remove(out_section)
            return

        if in_section is not None:
            self._remove(in_section)
        elif out_section is not None:
            self._remove(out_section)

    def _find_split(self, new_section: Section) -> tuple[Section, Callable[[Section], None]] | None:
        for section in self._sections:
            if section.is_same_up_station(new_section):
                return section, section.update_up_station
        for section in self._sections:
            if section.is_same_down_station(new_section):
                return section, section.update_down_station
        return None

    def _remove(self, section: Section) -> None:
        self._sections.remove(section)
        self._on_remove(section)

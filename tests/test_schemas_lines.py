"""Tests for line and section schemas."""

import uuid

import pytest
from pydantic import ValidationError
from subway.schemas.lines import (
    LineCreateRequest,
    LineResponse,
    LineUpdateRequest,
    SectionCreateRequest,
    SectionResponse,
)

from tests.helpers.line_network import make_line, make_stations


class TestSectionCreateRequest:
    """Tests for SectionCreateRequest validation."""

    def test_valid_request(self) -> None:
        up, down = uuid.uuid4(), uuid.uuid4()
        request = SectionCreateRequest(up_station_id=up, down_station_id=down, distance=5)

        assert request.up_station_id == up
        assert request.down_station_id == down
        assert request.distance == 5

    @pytest.mark.parametrize("distance", [0, -3])
    def test_non_positive_distance_rejected(self, distance: int) -> None:
        with pytest.raises(ValidationError):
            SectionCreateRequest(up_station_id=uuid.uuid4(), down_station_id=uuid.uuid4(), distance=distance)

    def test_same_station_rejected(self) -> None:
        station_id = uuid.uuid4()
        with pytest.raises(ValidationError, match="must be different stations"):
            SectionCreateRequest(up_station_id=station_id, down_station_id=station_id, distance=5)


class TestLineCreateRequest:
    """Tests for LineCreateRequest validation."""

    def test_valid_request(self) -> None:
        request = LineCreateRequest(
            name="Line 2",
            color="green",
            up_station_id=uuid.uuid4(),
            down_station_id=uuid.uuid4(),
            distance=10,
        )
        assert request.name == "Line 2"

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LineCreateRequest(
                name="",
                color="green",
                up_station_id=uuid.uuid4(),
                down_station_id=uuid.uuid4(),
                distance=10,
            )

    def test_inherits_station_validation(self) -> None:
        station_id = uuid.uuid4()
        with pytest.raises(ValidationError, match="must be different stations"):
            LineCreateRequest(
                name="Line 2",
                color="green",
                up_station_id=station_id,
                down_station_id=station_id,
                distance=10,
            )


def test_line_update_request_all_optional() -> None:
    request = LineUpdateRequest()
    assert request.name is None
    assert request.color is None


class TestLineResponse:
    """Tests for LineResponse.from_line()."""

    def test_stations_ordered_and_distance_summed(self) -> None:
        """Should list stations in path order whatever the section order."""
        stations = make_stations("A", "B", "C")
        line = make_line(stations, [("B", "C", 3), ("A", "B", 5)])
        for section in line.sections:
            section.id = uuid.uuid4()

        response = LineResponse.from_line(line)

        assert response.id == line.id
        assert response.name == "Line 2"
        assert [station.name for station in response.stations] == ["A", "B", "C"]
        assert [station.id for station in response.stations] == [stations[n].id for n in "ABC"]
        assert [(s.up_station.name, s.down_station.name, s.distance) for s in response.sections] == [
            ("A", "B", 5),
            ("B", "C", 3),
        ]
        assert response.total_distance == 8


def test_section_response_from_model() -> None:
    stations = make_stations("A", "B")
    line = make_line(stations, [("A", "B", 5)])
    section = line.sections[0]
    section.id = uuid.uuid4()

    response = SectionResponse.model_validate(section)

    assert response.up_station.name == "A"
    assert response.down_station.name == "B"
    assert response.distance == 5

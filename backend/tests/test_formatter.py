"""
Tests for journey serialization and relative departure descriptors.
"""

import pytest
from datetime import datetime, timedelta, timezone

from itinerary.models import InvalidQueryError, JourneyModel, RankingCriterion
from itinerary.models.route import as_utc
from itinerary.services import formatter
from itinerary.services import (
    describe_departure,
    journey_to_dict,
    journeys_to_list,
    parse_relative_departure,
)

from conftest import BASE_TIME


class TestDescribeDeparture:
    """Test relative departure descriptors."""

    @pytest.mark.parametrize("offset,expected", [
        (timedelta(minutes=59), "now"),
        (timedelta(hours=-3), "now"),
        (timedelta(hours=1), "+1 hour"),
        (timedelta(hours=5, minutes=40), "+5 hour"),
        (timedelta(days=2), "+2 day"),
        (timedelta(days=6, hours=12), "+6 day 12 hour"),
    ])
    def test_descriptors(self, offset, expected):
        """Test each descriptor form."""
        assert describe_departure(BASE_TIME + offset, BASE_TIME) == expected

    def test_none_departure(self):
        """Test that a missing departure stays missing."""
        assert describe_departure(None, BASE_TIME) is None

    def test_naive_values_are_utc(self):
        """Test comparing naive and aware datetimes."""
        departure = datetime(2025, 1, 2, 8, 0)
        assert describe_departure(departure, BASE_TIME) == "+1 day"

    def test_offset_values_use_model_normalisation(self):
        """Test that an aware non-UTC departure is normalised like model values."""
        departure = datetime(2025, 1, 2, 10, 0, tzinfo=timezone(timedelta(hours=2)))
        assert formatter.as_utc is as_utc
        assert describe_departure(departure, BASE_TIME) == "+1 day"


class TestParseRelativeDeparture:
    """Test resolving relative descriptors."""

    @pytest.mark.parametrize("text,offset", [
        ("+6 day 12 hour", timedelta(days=6, hours=12)),
        ("+1 day", timedelta(days=1)),
        ("+3 hour", timedelta(hours=3)),
        ("+2 days 4 hours", timedelta(days=2, hours=4)),
        ("now", timedelta()),
    ])
    def test_offsets(self, text, offset):
        """Test day and hour offsets."""
        assert parse_relative_departure(text, BASE_TIME) == BASE_TIME + offset

    def test_unrecognized_text(self):
        """Test that text without offsets is rejected."""
        with pytest.raises(ValueError):
            parse_relative_departure("tomorrow", BASE_TIME)

    def test_result_is_utc(self):
        """Test that resolved departures are timezone-aware."""
        assert parse_relative_departure("+1 hour").tzinfo == timezone.utc


class TestJourneyToDict:
    """Test outward journey serialization."""

    @pytest.fixture
    def journey(self, abc_flights):
        return JourneyModel.from_flights("A", "C", abc_flights)

    def test_exchanges_output(self, journey):
        """Test the default shape with per-flight prices."""
        data = journey_to_dict(journey, RankingCriterion.EXCHANGES, BASE_TIME)

        assert data["origin"] == "A"
        assert data["destination"] == "C"
        assert data["departure"] == "+1 day"
        assert data["exchanges"] == 1
        assert "total_price" not in data
        assert "total_duration" not in data
        assert data["flights"][0] == {
            "flight_id": 1,
            "provider": "Skyline",
            "from": "A",
            "to": "B",
            "price": "100",
            "departure": "2025-01-02T08:00:00+00:00",
        }

    def test_price_output(self, journey):
        """Test that price ranking includes the total price."""
        data = journey_to_dict(journey, "price", BASE_TIME)
        assert data["total_price"] == "150"
        assert all("price" in flight for flight in data["flights"])

    def test_duration_output(self, journey):
        """Test that duration ranking swaps prices for durations."""
        data = journey_to_dict(journey, RankingCriterion.DURATION, BASE_TIME)
        assert data["total_duration"] == 150
        assert [flight["duration"] for flight in data["flights"]] == [60, 90]
        assert all("price" not in flight for flight in data["flights"])

    def test_list_output(self, journey):
        """Test serializing several journeys."""
        data = journeys_to_list([journey, journey], RankingCriterion.PRICE, BASE_TIME)
        assert len(data) == 2
        assert data[0] == data[1]

    def test_unknown_criterion(self, journey):
        """Test that an unknown criterion is rejected."""
        with pytest.raises(InvalidQueryError):
            journey_to_dict(journey, "comfort", BASE_TIME)

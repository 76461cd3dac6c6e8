"""
Tests for the adjacency index and breadth-first journey enumeration.
"""

import pytest
from datetime import timedelta
from decimal import Decimal

from itinerary.models import JourneyQuery
from itinerary.services import AdjacencyIndex, PathEnumerator

from conftest import BASE_TIME, make_flight, make_route


def enumerate_paths(flights, origin, destination, **options):
    strict = options.pop("strict_connections", False)
    enumerator = PathEnumerator(AdjacencyIndex.build(flights), strict_connections=strict)
    return enumerator.enumerate(origin, destination, **options)


class TestAdjacencyIndex:
    """Test grouping of flights by departure location."""

    def test_groups_by_origin_in_input_order(self, diamond_graph):
        """Test that each group keeps the order flights were supplied in."""
        _, flights = diamond_graph
        index = AdjacencyIndex.build(flights)

        assert [f.flight_id for f in index.departures_from("A")] == [1, 3, 5]
        assert [f.flight_id for f in index.departures_from("D")] == [6]
        assert "A" in index
        assert len(index) == 4

    def test_unknown_location_has_no_departures(self, abc_flights):
        """Test lookups for locations with no outgoing flights."""
        index = AdjacencyIndex.build(abc_flights)
        assert index.departures_from("C") == ()
        assert index.departures_from("Z") == ()

    def test_empty_flight_set(self):
        """Test building an index with no flights."""
        index = AdjacencyIndex.build([])
        assert len(index) == 0
        assert list(index) == []


class TestPathEnumerator:
    """Test journey discovery rules."""

    def test_single_connection_scenario(self, abc_flights):
        """Test A->C through B yields exactly one journey with the expected totals."""
        journeys = enumerate_paths(abc_flights, "A", "C", max_results=10)

        assert len(journeys) == 1
        journey = journeys[0]
        assert journey.flight_ids == [1, 2]
        assert journey.number_of_exchanges == 1
        assert journey.total_price == Decimal("150")
        assert journey.total_duration == 150

    def test_unreachable_destination(self, abc_flights):
        """Test that a destination with no inbound path yields no journeys."""
        assert enumerate_paths(abc_flights, "A", "D", max_results=10) == []

    def test_return_edge_does_not_revisit_origin(self, abc_routes, abc_flights):
        """Test that a B->A flight neither loops nor changes A->C results."""
        ba = make_route("BA", "B", "A", 60)
        flights = abc_flights + [make_flight(3, ba, 70, BASE_TIME + timedelta(days=1, hours=1))]

        journeys = enumerate_paths(flights, "A", "C")

        assert [j.flight_ids for j in journeys] == [[1, 2]]
        assert all(j.locations.count("A") == 1 for j in journeys)

    def test_same_origin_and_destination_yields_nothing(self, diamond_graph):
        """Test that a zero-length path is never returned and cycles are not followed."""
        _, flights = diamond_graph
        assert enumerate_paths(flights, "A", "A") == []

    def test_breadth_first_discovery_order(self, diamond_graph):
        """Test that direct journeys are discovered before connecting ones."""
        _, flights = diamond_graph
        journeys = enumerate_paths(flights, "A", "D")

        assert [j.flight_ids for j in journeys] == [[5], [1, 2], [3, 4]]

    def test_max_exchanges_bound(self, diamond_graph):
        """Test that journeys never exceed max_exchanges connections."""
        _, flights = diamond_graph

        direct = enumerate_paths(flights, "A", "D", max_exchanges=0)
        assert [j.flight_ids for j in direct] == [[5]]

        for journey in enumerate_paths(flights, "A", "D", max_exchanges=1):
            assert journey.number_of_exchanges <= 1

    def test_max_results_keeps_fewest_connections(self, diamond_graph):
        """Test that the discovery cap stops after the first journeys found."""
        _, flights = diamond_graph
        journeys = enumerate_paths(flights, "A", "D", max_results=1)
        assert [j.flight_ids for j in journeys] == [[5]]

    def test_min_departure_filters_first_leg(self, diamond_graph):
        """Test that flights departing before min_departure are skipped."""
        _, flights = diamond_graph
        min_departure = BASE_TIME + timedelta(days=1, hours=1)

        journeys = enumerate_paths(flights, "A", "D", min_departure=min_departure)

        assert [j.flight_ids for j in journeys] == [[5], [3, 4]]
        for journey in journeys:
            assert journey.departure_time >= min_departure

    def test_untimed_search_ignores_departure_order(self, abc_routes):
        """Test that without min_departure a connection may leave before the previous flight."""
        ab, bc = abc_routes
        flights = [
            make_flight(1, ab, 100, BASE_TIME + timedelta(days=5)),
            make_flight(2, bc, 50, BASE_TIME + timedelta(days=1)),
        ]
        assert [j.flight_ids for j in enumerate_paths(flights, "A", "C")] == [[1, 2]]

    def test_timed_search_rejects_earlier_connection(self, abc_routes):
        """Test that with min_departure a connection leaving before the previous flight is skipped."""
        ab, bc = abc_routes
        flights = [
            make_flight(1, ab, 100, BASE_TIME + timedelta(days=5)),
            make_flight(2, bc, 50, BASE_TIME + timedelta(days=1)),
        ]
        assert enumerate_paths(flights, "A", "C", min_departure=BASE_TIME) == []

    def test_lenient_connection_allows_overlap_with_flight_time(self, abc_routes):
        """Test that by default only departure times are compared."""
        ab, bc = abc_routes
        flights = [
            make_flight(1, ab, 100, BASE_TIME),
            make_flight(2, bc, 50, BASE_TIME + timedelta(minutes=30)),
        ]
        journeys = enumerate_paths(flights, "A", "C", min_departure=BASE_TIME)
        assert [j.flight_ids for j in journeys] == [[1, 2]]

    def test_strict_connection_requires_arrival(self, abc_routes):
        """Test that strict mode requires departing after the previous arrival."""
        ab, bc = abc_routes
        flights = [
            make_flight(1, ab, 100, BASE_TIME),
            make_flight(2, bc, 50, BASE_TIME + timedelta(minutes=30)),
            make_flight(3, bc, 80, BASE_TIME + timedelta(minutes=60)),
        ]
        journeys = enumerate_paths(flights, "A", "C", strict_connections=True, min_departure=BASE_TIME)
        assert [j.flight_ids for j in journeys] == [[1, 3]]

    def test_strict_connection_needs_a_time_constraint(self, abc_routes):
        """Test that strict mode changes nothing for an untimed search."""
        ab, bc = abc_routes
        flights = [
            make_flight(1, ab, 100, BASE_TIME),
            make_flight(2, bc, 50, BASE_TIME + timedelta(minutes=30)),
            make_flight(3, bc, 80, BASE_TIME + timedelta(minutes=60)),
        ]
        journeys = enumerate_paths(flights, "A", "C", strict_connections=True)
        assert [j.flight_ids for j in journeys] == [[1, 2], [1, 3]]

    def test_naive_min_departure_is_utc(self, diamond_graph):
        """Test that a naive min_departure is compared as UTC."""
        _, flights = diamond_graph
        naive = (BASE_TIME + timedelta(days=1, hours=1)).replace(tzinfo=None)

        journeys = enumerate_paths(flights, "A", "D", min_departure=naive)

        assert [j.flight_ids for j in journeys] == [[5], [3, 4]]

    def test_timed_journeys_are_chronological(self, diamond_graph):
        """Test that every time-constrained journey has non-decreasing departures."""
        _, flights = diamond_graph
        for journey in enumerate_paths(flights, "A", "D", min_departure=BASE_TIME):
            departures = [flight.departure for flight in journey.flights]
            assert departures == sorted(departures)

    def test_enumeration_is_deterministic(self, diamond_graph):
        """Test that repeated runs over the same snapshot give identical results."""
        _, flights = diamond_graph
        first = enumerate_paths(flights, "A", "D")
        second = enumerate_paths(flights, "A", "D")
        assert [j.flight_ids for j in first] == [j.flight_ids for j in second]

    def test_endpoints_match_query(self, diamond_graph):
        """Test that every journey starts and ends where the query asked."""
        _, flights = diamond_graph
        for journey in enumerate_paths(flights, "A", "D"):
            assert journey.flights[0].origin == "A"
            assert journey.flights[-1].destination == "D"
            assert len(set(journey.flight_ids)) == len(journey.flight_ids)

    def test_enumerate_query(self, diamond_graph):
        """Test running a search from a JourneyQuery."""
        _, flights = diamond_graph
        enumerator = PathEnumerator(AdjacencyIndex.build(flights))
        query = JourneyQuery(origin="A", destination="D", max_exchanges=0)

        assert [j.flight_ids for j in enumerator.enumerate_query(query)] == [[5]]

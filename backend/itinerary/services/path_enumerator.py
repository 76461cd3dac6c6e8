"""
Breadth-first journey enumeration over an adjacency index.

Produces every simple flight path from an origin to a destination. When an
earliest departure is given the search is time-constrained: the first flight
leaves at or after it and each later flight leaves no earlier than the
connection threshold set by the flight before.

Paths never revisit a location or reuse a flight, so the search space is
finite and the search always terminates. Because the frontier is
explored level by level, an early `max_results` cap keeps the journeys with
the fewest connections.
"""

import logging
from collections import deque
from datetime import datetime, timedelta
from typing import Deque, FrozenSet, List, NamedTuple, Optional, Tuple

from ..models.journey import JourneyModel
from ..models.query import JourneyQuery
from ..models.route import FlightModel, as_utc
from .adjacency import AdjacencyIndex

logger = logging.getLogger(__name__)


class _Frontier(NamedTuple):
    location: str
    path: Tuple[FlightModel, ...]
    used_flights: FrozenSet[int]
    visited: FrozenSet[str]
    not_before: Optional[datetime]


class PathEnumerator:
    """
    Constrained path enumerator.

    Connection rules only apply to time-constrained searches. By default a
    connection is feasible when the next flight departs no earlier than the
    previous one. With `strict_connections` the next flight must depart no
    earlier than the previous flight's arrival (departure plus route duration).
    """

    def __init__(self, index: AdjacencyIndex, strict_connections: bool = False):
        self.index = index
        self.strict_connections = strict_connections

    def enumerate_query(self, query: JourneyQuery) -> List[JourneyModel]:
        """Run the search described by a JourneyQuery."""
        return self.enumerate(
            query.origin,
            query.destination,
            max_exchanges=query.max_exchanges,
            min_departure=query.min_departure,
            max_results=query.max_results,
        )

    def enumerate(
        self,
        origin: str,
        destination: str,
        max_exchanges: Optional[int] = None,
        min_departure: Optional[datetime] = None,
        max_results: Optional[int] = None,
    ) -> List[JourneyModel]:
        """
        Find journeys from origin to destination in discovery order.

        Args:
            origin: Departure location code
            destination: Arrival location code
            max_exchanges: Maximum connections per journey (None for no limit)
            min_departure: Earliest departure of the first flight; None disables
                every departure check
            max_results: Stop after this many journeys (None for no cap)

        Returns:
            Journeys in the order the breadth-first search reached them
        """
        timed = min_departure is not None
        if timed:
            min_departure = as_utc(min_departure)
        results: List[JourneyModel] = []
        max_flights = max_exchanges + 1 if max_exchanges is not None else None

        queue: Deque[_Frontier] = deque()
        queue.append(_Frontier(origin, (), frozenset(), frozenset({origin}), min_departure))
        expanded = 0

        while queue and (max_results is None or len(results) < max_results):
            state = queue.popleft()

            if state.location == destination and state.path:
                results.append(JourneyModel.from_flights(origin, destination, list(state.path)))
                continue

            expanded += 1
            for flight in self.index.departures_from(state.location):
                if flight.flight_id in state.used_flights:
                    continue
                if flight.destination in state.visited:
                    continue
                if state.not_before is not None and flight.departure < state.not_before:
                    continue
                if max_flights is not None and len(state.path) + 1 > max_flights:
                    continue

                queue.append(_Frontier(
                    flight.destination,
                    state.path + (flight,),
                    state.used_flights | {flight.flight_id},
                    state.visited | {flight.destination},
                    self._ready_at(flight) if timed else None,
                ))

        logger.debug(
            "Enumerated %s -> %s: %d journeys, %d states expanded, %d left in frontier",
            origin, destination, len(results), expanded, len(queue),
        )
        return results

    def _ready_at(self, flight: FlightModel) -> datetime:
        """Earliest departure allowed for the flight after this one."""
        if self.strict_connections:
            return flight.departure + timedelta(minutes=flight.duration)
        return flight.departure

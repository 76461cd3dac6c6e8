"""
Adjacency index over a flight set.

Maps each location to the flights departing from it. The index is a pure
function of the flight list and keeps the input order inside every group,
which is what makes path enumeration reproducible.
"""

from collections import defaultdict
from typing import Dict, Iterable, Iterator, List, Tuple

from ..models.route import FlightModel


class AdjacencyIndex:
    """Read-only mapping from location code to departing flights."""

    def __init__(self, departures: Dict[str, Tuple[FlightModel, ...]]):
        self._departures = departures

    @classmethod
    def build(cls, flights: Iterable[FlightModel]) -> "AdjacencyIndex":
        """Group flights by their route's departure location."""
        grouped: Dict[str, List[FlightModel]] = defaultdict(list)
        for flight in flights:
            grouped[flight.origin].append(flight)
        return cls({location: tuple(group) for location, group in grouped.items()})

    def departures_from(self, location: str) -> Tuple[FlightModel, ...]:
        return self._departures.get(location, ())

    def __contains__(self, location: object) -> bool:
        return location in self._departures

    def __iter__(self) -> Iterator[str]:
        return iter(self._departures)

    def __len__(self) -> int:
        return len(self._departures)

    def __repr__(self) -> str:
        flight_count = sum(len(group) for group in self._departures.values())
        return f"<AdjacencyIndex(locations={len(self._departures)}, flights={flight_count})>"

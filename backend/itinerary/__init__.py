"""
Itinerary: journey discovery over a scheduled flight graph.

Answers "all simple paths from A to B" queries over routes and flights,
filtered by departure feasibility and connection limits, ranked by
exchanges, price or duration, and optionally paginated. The graph is read
from storage into a time-bounded snapshot cache shared by all queries.
"""

__version__ = "0.1.0"

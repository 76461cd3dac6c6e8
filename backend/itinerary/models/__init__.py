"""
Itinerary Pydantic models package.

Immutable value records for routes, flights and derived journeys, plus the
query configuration model shared by the services.
"""

from .enums import RankingCriterion

from .route import (
    RouteModel,
    FlightModel,
)

from .journey import (
    JourneyLegModel,
    JourneyModel,
    JourneyPage,
)

from .query import (
    InvalidQueryError,
    JourneyQuery,
    build_query,
    parse_criterion,
)

__all__ = [
    # Enums
    "RankingCriterion",

    # Reference data
    "RouteModel",
    "FlightModel",

    # Derived results
    "JourneyLegModel",
    "JourneyModel",
    "JourneyPage",

    # Queries
    "InvalidQueryError",
    "JourneyQuery",
    "build_query",
    "parse_criterion",
]

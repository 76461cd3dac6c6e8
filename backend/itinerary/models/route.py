"""
Route and flight Pydantic models for the itinerary application.

Routes and flights are immutable reference data loaded from storage into a
graph snapshot. A flight carries a copy of its route so a journey never needs
to navigate back into the snapshot to compute its totals.
"""

from datetime import datetime, timezone
from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict, field_validator


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so every comparison is between aware values."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class RouteModel(BaseModel):
    """
    Directed edge template between two locations.

    Many flights share one route; the route fixes the transit duration.
    """
    model_config = ConfigDict(from_attributes=True, frozen=True)

    route_id: str = Field(..., min_length=1, max_length=50, description="Unique route identifier")
    from_location: str = Field(..., min_length=1, max_length=1, description="Departure location code")
    to_location: str = Field(..., min_length=1, max_length=1, description="Arrival location code")
    duration: int = Field(..., ge=0, description="Transit duration in minutes")


class FlightModel(BaseModel):
    """
    Scheduled, priced instance of a route.

    The route is resolved by the storage layer and embedded by value.
    """
    model_config = ConfigDict(from_attributes=True, frozen=True)

    flight_id: int = Field(..., description="Unique flight identifier")
    route: RouteModel = Field(..., description="Route flown by this flight")
    provider: str = Field(..., max_length=100, description="Operating provider")
    price: Decimal = Field(..., ge=0, decimal_places=2, description="Ticket price")
    departure: datetime = Field(..., description="Scheduled departure time")

    @field_validator("departure")
    @classmethod
    def normalize_departure(cls, v: datetime) -> datetime:
        return as_utc(v)

    @property
    def route_id(self) -> str:
        return self.route.route_id

    @property
    def origin(self) -> str:
        return self.route.from_location

    @property
    def destination(self) -> str:
        return self.route.to_location

    @property
    def duration(self) -> int:
        return self.route.duration

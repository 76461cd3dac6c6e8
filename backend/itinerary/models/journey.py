"""
Journey Pydantic models for the itinerary application.

Journeys are derived, in-memory results: an ordered chain of flights from an
origin to a destination. They are built fresh for each query and never
persisted. Totals are computed from the embedded flight values.
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple
from pydantic import BaseModel, Field, ConfigDict, computed_field, model_validator

from .route import FlightModel


class JourneyLegModel(BaseModel):
    """One flight of a journey together with its position in the chain."""
    model_config = ConfigDict(frozen=True)

    sequence: int = Field(..., ge=0, description="Zero-based position in the journey")
    flight: FlightModel


class JourneyModel(BaseModel):
    """
    Simple path of flights connecting an origin to a destination.

    Construction validates the path invariants: legs are chained, ordered by
    sequence, and neither a flight nor a location appears twice. Departure
    order is left to the search: only time-constrained queries enforce it.
    """
    model_config = ConfigDict(frozen=True)

    origin: str = Field(..., min_length=1, description="Origin location code")
    destination: str = Field(..., min_length=1, description="Destination location code")
    legs: Tuple[JourneyLegModel, ...] = Field(default=(), description="Ordered journey legs")

    @classmethod
    def from_flights(cls, origin: str, destination: str, flights: List[FlightModel]) -> "JourneyModel":
        """Build a journey from an ordered flight path."""
        legs = tuple(
            JourneyLegModel(sequence=index, flight=flight)
            for index, flight in enumerate(flights)
        )
        return cls(origin=origin, destination=destination, legs=legs)

    @model_validator(mode="after")
    def check_path(self) -> "JourneyModel":
        if not self.legs:
            return self

        sequences = [leg.sequence for leg in self.legs]
        if any(later <= earlier for earlier, later in zip(sequences, sequences[1:])):
            raise ValueError("journey legs must be in strictly increasing sequence order")

        if self.legs[0].flight.origin != self.origin:
            raise ValueError(f"first leg does not depart from {self.origin}")
        if self.legs[-1].flight.destination != self.destination:
            raise ValueError(f"last leg does not arrive at {self.destination}")

        for previous, current in zip(self.legs, self.legs[1:]):
            if current.flight.origin != previous.flight.destination:
                raise ValueError(
                    f"leg {current.sequence} departs from {current.flight.origin}, "
                    f"expected {previous.flight.destination}"
                )

        if len(set(self.flight_ids)) != len(self.legs):
            raise ValueError("a flight appears more than once in the journey")
        if len(set(self.locations)) != len(self.locations):
            raise ValueError("a location is visited more than once in the journey")
        return self

    @property
    def flights(self) -> List[FlightModel]:
        return [leg.flight for leg in self.legs]

    @property
    def flight_ids(self) -> List[int]:
        return [leg.flight.flight_id for leg in self.legs]

    @property
    def locations(self) -> List[str]:
        """Every location on the path, origin first."""
        return [self.origin] + [leg.flight.destination for leg in self.legs]

    @computed_field
    @property
    def departure_time(self) -> Optional[datetime]:
        return self.legs[0].flight.departure if self.legs else None

    @computed_field
    @property
    def number_of_exchanges(self) -> int:
        return len(self.legs) - 1

    @computed_field
    @property
    def total_price(self) -> Decimal:
        return sum((leg.flight.price for leg in self.legs), Decimal("0"))

    @computed_field
    @property
    def total_duration(self) -> int:
        return sum(leg.flight.duration for leg in self.legs)


class JourneyPage(BaseModel):
    """One page of a ranked journey list with its pagination metadata."""
    model_config = ConfigDict(frozen=True)

    items: Tuple[JourneyModel, ...] = Field(default=())
    total_count: int = Field(..., ge=0, description="Journeys across all pages")
    current_page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total_pages: int = Field(..., ge=0)

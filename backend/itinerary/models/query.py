"""
Query configuration model for journey searches.

A single value carries every recognized search option so the services take
one argument instead of a growing list of keyword parameters.
"""

from datetime import datetime
from typing import Any, Optional, Union
from pydantic import BaseModel, Field, ConfigDict, ValidationError, field_validator

from .enums import RankingCriterion
from .route import as_utc


class InvalidQueryError(ValueError):
    """Raised when a journey query is missing required fields or is malformed."""
    pass


class JourneyQuery(BaseModel):
    """
    Search options for a single origin/destination journey query.

    `min_departure` switches on the departure-time filter; `max_results`
    caps how many journeys the search discovers (None means no cap).
    """
    model_config = ConfigDict(frozen=True)

    origin: str = Field(..., description="Origin location code")
    destination: str = Field(..., description="Destination location code")
    min_departure: Optional[datetime] = Field(None, description="Earliest allowed departure")
    max_exchanges: Optional[int] = Field(None, ge=0, description="Maximum connections per journey")
    max_results: Optional[int] = Field(100, ge=1, description="Discovery cap")
    order_by: RankingCriterion = Field(default=RankingCriterion.EXCHANGES)
    ascending: bool = True

    @field_validator("origin", "destination")
    @classmethod
    def require_location(cls, v: str) -> str:
        """Strip whitespace and reject empty location codes."""
        v = v.strip() if isinstance(v, str) else v
        if not v:
            raise ValueError("origin and destination are required")
        return v

    @field_validator("min_departure")
    @classmethod
    def normalize_departure(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else None


def parse_criterion(value: Union[str, RankingCriterion]) -> RankingCriterion:
    """
    Resolve a ranking criterion from its name.

    Raises:
        InvalidQueryError: If the name is not a recognized criterion
    """
    try:
        return RankingCriterion(value)
    except ValueError:
        valid = ", ".join(c.value for c in RankingCriterion)
        raise InvalidQueryError(f"Unknown ranking criterion '{value}', expected one of: {valid}") from None


def build_query(**options: Any) -> JourneyQuery:
    """
    Create a JourneyQuery, turning validation failures into InvalidQueryError.

    Raises:
        InvalidQueryError: If the options fail validation
    """
    if "order_by" in options:
        options["order_by"] = parse_criterion(options["order_by"])
    if options.get("origin") is None or options.get("destination") is None:
        raise InvalidQueryError("origin and destination are required")
    try:
        return JourneyQuery(**options)
    except ValidationError as e:
        raise InvalidQueryError(f"Invalid journey query: {e}") from e

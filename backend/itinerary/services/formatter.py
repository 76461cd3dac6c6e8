"""
Outward serialization of journeys.

Turns JourneyModel values into plain dictionaries for JSON output and
converts between absolute departure times and the relative descriptors
("now", "+2 day 6 hour", "+3 hour") used in listings and sample data.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from ..models.enums import RankingCriterion
from ..models.journey import JourneyModel
from ..models.query import parse_criterion
from ..models.route import as_utc

_RELATIVE_PART = re.compile(r"([+-]?\d+)\s*(day|hour)s?", re.IGNORECASE)


def describe_departure(departure: Optional[datetime], now: Optional[datetime] = None) -> Optional[str]:
    """
    Describe a departure relative to now.

    Departures less than an hour away (or already past) read "now"; later
    ones read "+D day H hour", "+D day" or "+H hour" using whole units.
    """
    if departure is None:
        return None

    delta = as_utc(departure) - as_utc(now or datetime.now(timezone.utc))
    total_hours = int(delta.total_seconds() // 3600)
    if total_hours < 1:
        return "now"

    days, hours = divmod(total_hours, 24)
    if days and hours:
        return f"+{days} day {hours} hour"
    if days:
        return f"+{days} day"
    return f"+{hours} hour"


def parse_relative_departure(text: str, now: Optional[datetime] = None) -> datetime:
    """
    Resolve a relative descriptor like "+6 day 12 hour" against now (UTC).

    Raises:
        ValueError: If the text contains no day or hour offsets
    """
    base = as_utc(now or datetime.now(timezone.utc))
    if text.strip().lower() == "now":
        return base

    parts = _RELATIVE_PART.findall(text)
    if not parts:
        raise ValueError(f"Unrecognized relative departure: '{text}'")

    offset = timedelta()
    for amount, unit in parts:
        if unit.lower() == "day":
            offset += timedelta(days=int(amount))
        else:
            offset += timedelta(hours=int(amount))
    return base + offset


def journey_to_dict(
    journey: JourneyModel,
    criterion: Union[RankingCriterion, str] = RankingCriterion.EXCHANGES,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Serialize a journey with the totals relevant to its ranking criterion.

    Price-ranked output carries total and per-flight prices, duration-ranked
    output carries durations, and exchange-ranked output carries prices.
    """
    criterion = parse_criterion(criterion)
    show_duration = criterion is RankingCriterion.DURATION

    data: Dict[str, Any] = {
        "origin": journey.origin,
        "destination": journey.destination,
        "departure": describe_departure(journey.departure_time, now),
        "departure_time": journey.departure_time.isoformat() if journey.departure_time else None,
        "exchanges": journey.number_of_exchanges,
    }
    if criterion is RankingCriterion.PRICE:
        data["total_price"] = str(journey.total_price)
    elif show_duration:
        data["total_duration"] = journey.total_duration

    flights = []
    for flight in journey.flights:
        entry: Dict[str, Any] = {
            "flight_id": flight.flight_id,
            "provider": flight.provider,
            "from": flight.origin,
            "to": flight.destination,
        }
        if show_duration:
            entry["duration"] = flight.duration
        else:
            entry["price"] = str(flight.price)
        entry["departure"] = flight.departure.isoformat()
        flights.append(entry)

    data["flights"] = flights
    return data


def journeys_to_list(
    journeys: Iterable[JourneyModel],
    criterion: Union[RankingCriterion, str] = RankingCriterion.EXCHANGES,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    """Serialize journeys against a single reference instant."""
    now = now or datetime.now(timezone.utc)
    return [journey_to_dict(journey, criterion, now) for journey in journeys]

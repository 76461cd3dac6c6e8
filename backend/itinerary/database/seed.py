"""
Sample data loader for the route and flight tables.

Reads routes.json and flights.json and inserts them only into empty tables,
so seeding an existing database is a no-op. Flight departures in the sample
files are relative offsets ("+6 day 12 hour") resolved against the current
UTC time, which keeps the sample schedule in the future.
"""

import json
import logging
import os
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from sqlalchemy import func, select

from ..services.formatter import parse_relative_departure
from .config import DatabaseConfig
from .models import Flight, Route

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "sample_data"


def _read_json(path: Path) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _parse_departure(value: str, now: Optional[datetime]) -> datetime:
    if value.lstrip().startswith(("+", "-")) or value.strip().lower() == "now":
        return parse_relative_departure(value, now)
    return datetime.fromisoformat(value)


def seed_database(
    db_config: DatabaseConfig,
    data_dir: Optional[Union[str, Path]] = None,
    now: Optional[datetime] = None,
) -> Dict[str, int]:
    """
    Load the sample routes and flights into empty tables.

    Args:
        db_config: Initialized database configuration
        data_dir: Directory holding routes.json and flights.json
            (defaults to SAMPLE_DATA_DIR or the sample_data/ shipped in this package)
        now: Reference instant for relative departures (defaults to UTC now)

    Returns:
        Number of routes and flights inserted
    """
    data_dir = Path(data_dir or os.getenv("SAMPLE_DATA_DIR", DEFAULT_DATA_DIR))
    inserted = {"routes": 0, "flights": 0}

    with db_config.get_session_context() as session:
        if session.scalar(select(func.count()).select_from(Route)) == 0:
            routes = [
                Route(
                    route_id=item["route_id"],
                    from_location=item["from"],
                    to_location=item["to"],
                    duration=int(item["duration"]),
                )
                for item in _read_json(data_dir / "routes.json")
            ]
            session.add_all(routes)
            session.flush()
            inserted["routes"] = len(routes)
        else:
            logger.info("Route table already populated, skipping")

        if session.scalar(select(func.count()).select_from(Flight)) == 0:
            flights = [
                Flight(
                    flight_id=item.get("flight_id"),
                    route_id=item["route"],
                    provider=item["provider"],
                    price=Decimal(str(item["price"])),
                    departure=_parse_departure(item["departure"], now),
                )
                for item in _read_json(data_dir / "flights.json")
            ]
            session.add_all(flights)
            inserted["flights"] = len(flights)
        else:
            logger.info("Flight table already populated, skipping")

    logger.info(f"Seeded {inserted['routes']} routes and {inserted['flights']} flights from {data_dir}")
    return inserted

"""
Read-only storage access for the journey engine.

The graph snapshot cache depends only on the JourneyRepository protocol, so
tests and other backends can supply any object with the two async loaders.
"""

import logging
from typing import List, Protocol

from sqlalchemy import select
from sqlalchemy.orm import joinedload

from ..models.route import FlightModel, RouteModel
from .config import DatabaseConfig
from .models import Flight, Route

logger = logging.getLogger(__name__)


class JourneyRepository(Protocol):
    """Source of the routes and flights a graph snapshot is built from."""

    async def list_routes(self) -> List[RouteModel]:
        ...

    async def list_flights(self) -> List[FlightModel]:
        ...


class SqlAlchemyJourneyRepository:
    """
    JourneyRepository backed by the SQLAlchemy route and flight tables.

    Rows are converted to frozen pydantic values inside the session, so
    nothing returned keeps a reference to the ORM.
    """

    def __init__(self, db_config: DatabaseConfig):
        self.db_config = db_config

    async def list_routes(self) -> List[RouteModel]:
        with self.db_config.get_session_context() as session:
            rows = session.scalars(select(Route).order_by(Route.route_id)).all()
            routes = [RouteModel.model_validate(row) for row in rows]

        logger.debug(f"Loaded {len(routes)} routes from storage")
        return routes

    async def list_flights(self) -> List[FlightModel]:
        """All flights with their routes resolved, ordered by flight id."""
        with self.db_config.get_session_context() as session:
            query = (
                select(Flight)
                .options(joinedload(Flight.route))
                .order_by(Flight.flight_id)
            )
            rows = session.scalars(query).all()
            flights = [FlightModel.model_validate(row) for row in rows]

        logger.debug(f"Loaded {len(flights)} flights from storage")
        return flights

"""
SQLAlchemy database models for the itinerary system.

This module defines the read-mostly reference tables the journey engine
builds its graph from:
- Route: Directed connection between two locations with a fixed duration
- Flight: Scheduled departure on a route by a provider at a price
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, Numeric
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import relationship

# Create the declarative base for all models
Base = declarative_base()


class Route(Base):
    """
    Route model representing a directed edge between two locations.

    Locations are single-character codes; duration is in minutes and is
    shared by every flight on the route.
    """
    __tablename__ = 'route'

    # Primary key
    route_id = Column(String(20), primary_key=True)

    # Endpoints and flying time
    from_location = Column(String(1), nullable=False, index=True)
    to_location = Column(String(1), nullable=False, index=True)
    duration = Column(Integer, nullable=False)  # Minutes

    # Relationships
    flights = relationship("Flight", back_populates="route", lazy="select")

    def __repr__(self):
        return f"<Route(id='{self.route_id}', from='{self.from_location}', to='{self.to_location}', duration={self.duration})>"


class Flight(Base):
    """
    Flight model representing one scheduled departure on a route.
    """
    __tablename__ = 'flight'

    # Primary key
    flight_id = Column(Integer, primary_key=True, autoincrement=True)

    # Schedule and fare
    route_id = Column(String(20), ForeignKey('route.route_id'), nullable=False, index=True)
    provider = Column(String(100), nullable=False)
    price = Column(Numeric(18, 2), nullable=False)
    departure = Column(DateTime, nullable=False, index=True)

    # Relationships
    route = relationship("Route", back_populates="flights", lazy="select")

    # Composite index for per-route schedule scans
    __table_args__ = (
        Index('idx_flight_route_departure', 'route_id', 'departure'),
    )

    def __repr__(self):
        return f"<Flight(id={self.flight_id}, route='{self.route_id}', provider='{self.provider}', departure={self.departure})>"


def create_all_tables(engine):
    """
    Create all database tables using the provided SQLAlchemy engine.

    Args:
        engine: SQLAlchemy engine instance
    """
    Base.metadata.create_all(bind=engine)


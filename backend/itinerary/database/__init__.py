"""
Database package for the itinerary system.

This package provides the SQLAlchemy route and flight tables, database
configuration, the read-only journey repository and the sample data seeder.
"""

from .models import (
    Base,
    Route,
    Flight,
    create_all_tables,
)

from .config import (
    DEFAULT_DATABASE_URL,
    DatabaseConfig,
    engine_options,
    initialize_database,
)

from .repository import (
    JourneyRepository,
    SqlAlchemyJourneyRepository,
)

from .seed import DEFAULT_DATA_DIR, seed_database

__all__ = [
    # Models
    'Base',
    'Route',
    'Flight',
    'create_all_tables',

    # Configuration
    'DEFAULT_DATABASE_URL',
    'DatabaseConfig',
    'engine_options',
    'initialize_database',

    # Access
    'JourneyRepository',
    'SqlAlchemyJourneyRepository',
    'DEFAULT_DATA_DIR',
    'seed_database',
]

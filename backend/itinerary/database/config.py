"""
Engine and session handling for the route and flight tables.

The URL is always handed in by the caller (ItineraryConfig.database_url on the
CLI path). SQLite, the default, runs on one shared connection so in-memory
databases keep their tables between sessions. Any other backend gets
SQLAlchemy's default pool with pre-ping.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import create_all_tables

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///itinerary.db"


def engine_options(database_url: str, echo: bool = False) -> Dict[str, Any]:
    """create_engine() keyword arguments for the backend named by the URL."""
    if database_url.startswith("sqlite"):
        return {
            "echo": echo,
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {"echo": echo, "pool_pre_ping": True}


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseConfig:
    """Owns the engine and session factory for one database URL."""

    def __init__(self, database_url: str = DEFAULT_DATABASE_URL, echo: bool = False):
        self.database_url = database_url
        self.is_sqlite = database_url.startswith("sqlite")
        self.engine_kwargs = engine_options(database_url, echo)
        self.engine: Optional[Engine] = None
        self._sessions: Optional[sessionmaker] = None

    def initialize(self) -> None:
        """
        Create the engine and check that it can connect.

        Raises:
            SQLAlchemyError: If the database cannot be reached
        """
        if self.engine is not None:
            return

        engine = create_engine(self.database_url, **self.engine_kwargs)
        if self.is_sqlite:
            event.listen(engine, "connect", _enable_foreign_keys)

        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            engine.dispose()
            logger.error(f"Failed to open {engine.url.get_backend_name()} database: {e}")
            raise

        self.engine = engine
        self._sessions = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        logger.info(f"Database engine ready ({engine.url.get_backend_name()})")

    def create_tables(self) -> None:
        """Create the route and flight tables if they are missing."""
        self.initialize()
        create_all_tables(self.engine)
        logger.debug("Route and flight tables ensured")

    @contextmanager
    def get_session_context(self) -> Iterator[Session]:
        """
        Yield a session that commits on success and rolls back on error.

        Usage:
            with db_config.get_session_context() as session:
                session.add(route)
        """
        self.initialize()
        session = self._sessions()
        try:
            yield session
            session.commit()
        except Exception as e:
            session.rollback()
            logger.error(f"Database session error: {e}")
            raise
        finally:
            session.close()

    def close(self) -> None:
        """Dispose of the engine; the next session reconnects."""
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
            self._sessions = None
            logger.info("Database connections closed")


def initialize_database(
    database_url: str = DEFAULT_DATABASE_URL,
    echo: bool = False,
    create_tables: bool = True,
) -> DatabaseConfig:
    """Build a DatabaseConfig, connect it and (by default) create the tables."""
    db_config = DatabaseConfig(database_url, echo=echo)
    db_config.initialize()
    if create_tables:
        db_config.create_tables()
    return db_config


__all__ = [
    'DEFAULT_DATABASE_URL',
    'DatabaseConfig',
    'engine_options',
    'initialize_database',
]

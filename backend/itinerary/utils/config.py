"""
Environment configuration loader with validation for the itinerary engine.
"""

import os
import logging
from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, field_validator, model_validator
from dotenv import load_dotenv

from ..cache.config import ValkeyConfig

_TRUE_VALUES = ("true", "1", "yes", "on")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ItineraryConfig(BaseModel):
    """Configuration model for the itinerary engine with validation."""

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///itinerary.db", description="Database connection URL"
    )

    # Journey Search Configuration
    snapshot_ttl_seconds: int = Field(
        default=1800, ge=1, description="Sliding TTL of the graph snapshot in seconds"
    )
    default_max_results: int = Field(
        default=100, ge=1, description="Discovery cap when a query gives none"
    )
    default_page_size: int = Field(
        default=100, ge=1, description="Page size used by the CLI listing"
    )
    max_page_size: int = Field(
        default=1000, ge=1, le=1000, description="Largest page a caller may request"
    )
    strict_connections: bool = Field(
        default=False,
        description="Require connections to depart after the previous flight arrives",
    )

    # Valkey Cache Configuration
    valkey_enabled: bool = Field(
        default=False, description="Share graph snapshots through Valkey"
    )
    valkey_host: str = Field(default="localhost", description="Valkey server host")
    valkey_port: int = Field(
        default=6379, ge=1, le=65535, description="Valkey server port"
    )
    valkey_password: Optional[str] = Field(
        default=None, description="Valkey server password"
    )
    valkey_database: int = Field(
        default=0, ge=0, le=15, description="Valkey database number"
    )

    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @model_validator(mode="after")
    def validate_page_sizes(self) -> "ItineraryConfig":
        """Ensure the default page size fits within the maximum."""
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                "Default page size must be less than or equal to max page size"
            )
        return self

    def valkey_config(self) -> ValkeyConfig:
        """Connection settings for the shared snapshot tier."""
        return ValkeyConfig(
            host=self.valkey_host,
            port=self.valkey_port,
            password=self.valkey_password,
            database=self.valkey_database,
        )


def load_config(env_file: Optional[str] = None) -> ItineraryConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Optional path to .env file. If None, looks for .env in current directory.

    Returns:
        ItineraryConfig: Validated configuration object

    Raises:
        ValueError: If configuration is missing or invalid
    """
    if env_file is None:
        env_file = ".env"

    if os.path.exists(env_file):
        load_dotenv(env_file)

    try:
        config_data: Dict[str, Any] = {
            "database_url": os.getenv("DATABASE_URL", "sqlite:///itinerary.db"),
            "snapshot_ttl_seconds": int(os.getenv("SNAPSHOT_TTL_SECONDS", "1800")),
            "default_max_results": int(os.getenv("DEFAULT_MAX_RESULTS", "100")),
            "default_page_size": int(os.getenv("DEFAULT_PAGE_SIZE", "100")),
            "max_page_size": int(os.getenv("MAX_PAGE_SIZE", "1000")),
            "strict_connections": os.getenv("JOURNEY_STRICT_CONNECTIONS", "false").lower()
            in _TRUE_VALUES,
            "valkey_enabled": os.getenv("VALKEY_ENABLED", "false").lower()
            in _TRUE_VALUES,
            "valkey_host": os.getenv("VALKEY_HOST", "localhost"),
            "valkey_port": int(os.getenv("VALKEY_PORT", "6379")),
            "valkey_password": os.getenv("VALKEY_PASSWORD") or None,
            "valkey_database": int(os.getenv("VALKEY_DATABASE", "0")),
            "log_level": os.getenv("LOG_LEVEL", "INFO"),
        }
        return ItineraryConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}") from e


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once at the entry point."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


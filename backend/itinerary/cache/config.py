"""
Connection settings for the shared snapshot tier.

Values come from ItineraryConfig.valkey_config(); this module never reads the
environment itself.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ValkeyConfig:
    """Where the shared snapshot lives and how long to wait for it."""

    host: str = "localhost"
    port: int = 6379
    password: Optional[str] = None
    database: int = 0
    max_connections: int = 10
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0
    health_check_interval: int = 30

    def to_connection_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for valkey.ConnectionPool; payloads are JSON text."""
        kwargs: Dict[str, Any] = dict(
            host=self.host,
            port=self.port,
            db=self.database,
            max_connections=self.max_connections,
            socket_timeout=self.socket_timeout,
            socket_connect_timeout=self.socket_connect_timeout,
            decode_responses=True,
        )
        if self.password:
            kwargs["password"] = self.password
        return kwargs

    def __str__(self) -> str:
        secret = "***" if self.password else "None"
        return f"ValkeyConfig({self.host}:{self.port}/{self.database}, password={secret})"


class ValkeyConnectionError(Exception):
    """Raised when the Valkey server cannot be reached."""

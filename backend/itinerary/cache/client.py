"""
Valkey client wrapper with health checks and reconnection.
"""

import logging
import time
from typing import Optional

import valkey
from valkey.connection import ConnectionPool
from valkey.exceptions import ConnectionError, TimeoutError

from .config import ValkeyConfig, ValkeyConnectionError

logger = logging.getLogger(__name__)


class ValkeyClient:
    """
    Pooled Valkey client.

    Connection problems raise ValkeyConnectionError; callers decide whether to
    degrade. No retry loop: a failed connect is reported immediately.
    """

    def __init__(self, config: ValkeyConfig):
        self.config = config
        self._client: Optional[valkey.Valkey] = None
        self._connection_pool: Optional[ConnectionPool] = None
        self._is_connected = False
        self._last_health_check = 0.0

        logger.info(f"Initializing Valkey client: {self.config}")

    async def connect(self) -> None:
        """
        Establish connection to the Valkey server.

        Raises:
            ValkeyConnectionError: If the server does not answer a ping
        """
        if self._is_connected and self._client:
            return

        try:
            self._connection_pool = ConnectionPool(**self.config.to_connection_kwargs())
            self._client = valkey.Valkey(connection_pool=self._connection_pool)
            self._test_connection()
        except (ConnectionError, TimeoutError, OSError) as e:
            self._client = None
            self._connection_pool = None
            raise ValkeyConnectionError(f"Failed to connect to Valkey: {e}") from e

        self._is_connected = True
        self._last_health_check = time.time()
        logger.info("Successfully connected to Valkey server")

    async def disconnect(self) -> None:
        """Gracefully disconnect from the Valkey server."""
        if self._connection_pool:
            try:
                self._connection_pool.disconnect()
                logger.info("Disconnected from Valkey server")
            finally:
                self._connection_pool = None
                self._client = None
                self._is_connected = False

    def _test_connection(self) -> None:
        if not self._client:
            raise ValkeyConnectionError("Client not initialized")
        if not self._client.ping():
            raise ValkeyConnectionError("Ping returned False")

    async def ensure_connection(self) -> None:
        """
        Reconnect if the last health check is stale and the ping fails.

        Raises:
            ValkeyConnectionError: If the connection cannot be re-established
        """
        now = time.time()
        if self._is_connected and (now - self._last_health_check) < self.config.health_check_interval:
            return

        if self._is_connected:
            try:
                self._test_connection()
                self._last_health_check = now
                return
            except (ConnectionError, TimeoutError, ValkeyConnectionError) as e:
                logger.warning(f"Valkey health check failed: {e}")
                self._is_connected = False

        await self.connect()

    @property
    def is_connected(self) -> bool:
        return self._is_connected and self._client is not None

    @property
    def client(self) -> valkey.Valkey:
        """
        Get the underlying Valkey client.

        Raises:
            ValkeyConnectionError: If client is not connected
        """
        if not self._client or not self._is_connected:
            raise ValkeyConnectionError("Client not connected. Call connect() first.")
        return self._client

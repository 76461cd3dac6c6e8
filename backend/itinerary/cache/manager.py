"""
Cache manager with error handling and graceful degradation.

Wraps Valkey operations so that a missing or failing server never breaks a
query: every failure is counted, logged, and turned into a cache miss. After
repeated failures a circuit breaker skips Valkey entirely for a while.
"""

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Optional

from valkey.exceptions import ConnectionError, TimeoutError, ResponseError

from .client import ValkeyClient
from .config import ValkeyConfig, ValkeyConnectionError

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """Cache operation statistics."""

    hit_count: int = 0
    miss_count: int = 0
    set_count: int = 0
    error_count: int = 0
    degraded_operations: int = 0
    start_time: datetime = field(default_factory=datetime.now)

    @property
    def hit_ratio(self) -> float:
        total_reads = self.hit_count + self.miss_count
        return self.hit_count / total_reads if total_reads > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hit_count": self.hit_count,
            "miss_count": self.miss_count,
            "set_count": self.set_count,
            "error_count": self.error_count,
            "degraded_operations": self.degraded_operations,
            "hit_ratio": self.hit_ratio,
        }


class CacheManager:
    """
    High-level Valkey cache manager.

    Features:
    - JSON serialization of cached values
    - Sliding expiration through touch()
    - Graceful degradation: failures become misses, never exceptions
    - Circuit breaker for a failing server
    """

    def __init__(
        self,
        config: ValkeyConfig,
        client: Optional[ValkeyClient] = None,
        circuit_breaker_threshold: int = 5,
        circuit_breaker_timeout: int = 60,
    ):
        """
        Initialize cache manager.

        Args:
            config: Connection settings used when no client is given
            client: Already constructed ValkeyClient, mainly for tests
            circuit_breaker_threshold: Consecutive failures before circuit opens
            circuit_breaker_timeout: Seconds to wait before retrying after circuit opens
        """
        self.config = config
        self.client = client
        self.stats = CacheStats()

        self.circuit_breaker_threshold = circuit_breaker_threshold
        self.circuit_breaker_timeout = circuit_breaker_timeout
        self.consecutive_failures = 0
        self.circuit_open_time: Optional[float] = None

    async def initialize(self) -> None:
        """Create and connect the client; stay degraded if the server is down."""
        if self.client is None:
            self.client = ValkeyClient(self.config)
        try:
            await self.client.ensure_connection()
            logger.info("CacheManager connected to Valkey")
        except ValkeyConnectionError as e:
            logger.warning(f"Valkey unavailable, shared cache disabled for now: {e}")
            self._record_error()

    @property
    def is_circuit_open(self) -> bool:
        if self.circuit_open_time is None:
            return False
        if time.monotonic() - self.circuit_open_time >= self.circuit_breaker_timeout:
            logger.info("Circuit breaker timeout expired, allowing retry")
            self.circuit_open_time = None
            return False
        return True

    def _record_error(self) -> None:
        self.stats.error_count += 1
        self.consecutive_failures += 1
        if self.consecutive_failures >= self.circuit_breaker_threshold and self.circuit_open_time is None:
            self.circuit_open_time = time.monotonic()
            logger.warning(
                f"Circuit breaker opened after {self.consecutive_failures} consecutive failures"
            )

    def _record_success(self) -> None:
        self.consecutive_failures = 0

    async def _execute(self, operation: Callable[[], Awaitable[Any]], description: str) -> Any:
        """Run a Valkey operation, turning failures into None."""
        if self.client is None or self.is_circuit_open:
            self.stats.degraded_operations += 1
            return None

        try:
            await self.client.ensure_connection()
            result = await operation()
        except (ConnectionError, TimeoutError, ResponseError, ValkeyConnectionError) as e:
            logger.warning(f"Cache {description} failed: {e}")
            self._record_error()
            return None

        self._record_success()
        return result

    async def get(self, key: str) -> Any:
        """
        Get a JSON value from the cache.

        Returns:
            The decoded value, or None on a miss or failure
        """
        async def operation():
            raw = self.client.client.get(key)
            if raw is None:
                self.stats.miss_count += 1
                return None
            self.stats.hit_count += 1
            try:
                return json.loads(raw)
            except (json.JSONDecodeError, TypeError):
                logger.warning(f"Discarding undecodable cache entry {key}")
                return None

        return await self._execute(operation, f"get {key}")

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Store a JSON-serializable value, optionally with a TTL in seconds.

        Returns:
            True if the value was stored
        """
        async def operation():
            serialized = json.dumps(value)
            if ttl:
                stored = self.client.client.setex(key, int(ttl), serialized)
            else:
                stored = self.client.client.set(key, serialized)
            self.stats.set_count += 1
            return bool(stored)

        return bool(await self._execute(operation, f"set {key}"))

    async def touch(self, key: str, ttl: int) -> bool:
        """
        Reset the TTL of an existing key (sliding expiration).

        Returns:
            True if the key exists and its TTL was reset
        """
        async def operation():
            return bool(self.client.client.expire(key, int(ttl)))

        return bool(await self._execute(operation, f"touch {key}"))

    async def delete(self, key: str) -> bool:
        """Delete a key. Returns True if it existed."""
        async def operation():
            return bool(self.client.client.delete(key))

        return bool(await self._execute(operation, f"delete {key}"))

    def get_stats(self) -> Dict[str, Any]:
        stats = self.stats.to_dict()
        stats.update({
            "circuit_breaker_open": self.circuit_open_time is not None,
            "consecutive_failures": self.consecutive_failures,
            "connected": bool(self.client and self.client.is_connected),
        })
        return stats

    async def close(self) -> None:
        """Close cache manager and cleanup resources."""
        if self.client:
            await self.client.disconnect()
        logger.info("CacheManager closed")

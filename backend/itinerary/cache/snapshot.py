"""
Graph snapshot cache.

Holds one immutable snapshot of all routes and flights for a sliding
time-to-live: every access pushes the deadline back, so a busy cache never
expires and an idle one is dropped and rebuilt on next use.

Cache misses are single-flight per key. The first caller starts the refresh
and every concurrent caller awaits that same refresh instead of reading
storage again. A failed refresh stores nothing and raises to the callers
that were waiting on it.

When a CacheManager is supplied, the serialized snapshot is also shared
through Valkey so other processes can skip their own storage read.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from pydantic import ValidationError

from ..models.route import FlightModel, RouteModel
from .manager import CacheManager
from .utils import TTLPreset, snapshot_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class GraphSnapshot:
    """Immutable view of all routes and flights, compared by identity."""

    routes: Tuple[RouteModel, ...]
    flights: Tuple[FlightModel, ...]
    routes_by_id: Dict[str, RouteModel]
    loaded_at: datetime

    @classmethod
    def build(
        cls,
        routes: Sequence[RouteModel],
        flights: Sequence[FlightModel],
        loaded_at: Optional[datetime] = None,
    ) -> "GraphSnapshot":
        return cls(
            routes=tuple(routes),
            flights=tuple(flights),
            routes_by_id={route.route_id: route for route in routes},
            loaded_at=loaded_at or datetime.now(timezone.utc),
        )

    @property
    def locations(self) -> Tuple[str, ...]:
        """Every location that appears as a route or flight endpoint, sorted."""
        found = set()
        for route in self.routes:
            found.update((route.from_location, route.to_location))
        for flight in self.flights:
            found.update((flight.origin, flight.destination))
        return tuple(sorted(found))

    def to_payload(self) -> Dict[str, Any]:
        """JSON-compatible form used by the shared cache tier."""
        return {
            "loaded_at": self.loaded_at.isoformat(),
            "routes": [route.model_dump(mode="json") for route in self.routes],
            "flights": [flight.model_dump(mode="json") for flight in self.flights],
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "GraphSnapshot":
        return cls.build(
            routes=[RouteModel.model_validate(item) for item in payload["routes"]],
            flights=[FlightModel.model_validate(item) for item in payload["flights"]],
            loaded_at=datetime.fromisoformat(payload["loaded_at"]),
        )


@dataclass
class SnapshotCacheStats:
    """Snapshot cache counters."""

    hit_count: int = 0
    miss_count: int = 0
    storage_loads: int = 0
    shared_loads: int = 0
    failed_loads: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "hit_count": self.hit_count,
            "miss_count": self.miss_count,
            "storage_loads": self.storage_loads,
            "shared_loads": self.shared_loads,
            "failed_loads": self.failed_loads,
        }


@dataclass
class _Entry:
    snapshot: GraphSnapshot
    expires_at: float


class GraphSnapshotCache:
    """
    Sliding-TTL snapshot cache owned by a service instance.

    Args:
        repository: Storage collaborator with async list_routes()/list_flights()
        ttl_seconds: Idle time after which the snapshot is dropped
        cache_manager: Optional shared Valkey tier
        clock: Monotonic clock in seconds, injectable for tests
    """

    def __init__(
        self,
        repository,
        ttl_seconds: int = TTLPreset.GRAPH_SNAPSHOT,
        cache_manager: Optional[CacheManager] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.repository = repository
        self.ttl_seconds = int(ttl_seconds)
        self.cache_manager = cache_manager
        self.clock = clock
        self.key = snapshot_key()
        self.stats = SnapshotCacheStats()
        self._entries: Dict[str, _Entry] = {}
        self._inflight: Dict[str, asyncio.Future] = {}

    async def get_snapshot(self) -> GraphSnapshot:
        """
        Return the current snapshot, loading it if missing or expired.

        Raises:
            Exception: Whatever the repository raised while loading
        """
        key = self.key
        entry = self._entries.get(key)
        now = self.clock()

        if entry is not None and entry.expires_at > now:
            entry.expires_at = now + self.ttl_seconds
            self.stats.hit_count += 1
            return entry.snapshot

        if entry is not None:
            logger.info("Graph snapshot idle for over %ds, dropping it", self.ttl_seconds)
            del self._entries[key]

        self.stats.miss_count += 1
        refresh = self._inflight.get(key)
        if refresh is None:
            refresh = asyncio.ensure_future(self._refresh(key))
            self._inflight[key] = refresh
            refresh.add_done_callback(lambda done: self._finish_refresh(key, done))
        else:
            logger.debug("Awaiting in-flight snapshot refresh for %s", key)

        # Shielded so a caller timing out does not cancel the refresh for the others
        return await asyncio.shield(refresh)

    def invalidate(self) -> None:
        """Drop the in-process snapshot; the next call reloads it."""
        self._entries.pop(self.key, None)

    async def clear(self) -> None:
        """Drop the snapshot from both tiers, e.g. after reseeding storage."""
        self.invalidate()
        if self.cache_manager is not None:
            await self.cache_manager.delete(self.key)
        logger.info("Graph snapshot cleared")

    @property
    def current(self) -> Optional[GraphSnapshot]:
        entry = self._entries.get(self.key)
        return entry.snapshot if entry is not None else None

    def _finish_refresh(self, key: str, done: asyncio.Future) -> None:
        if self._inflight.get(key) is done:
            del self._inflight[key]
        if not done.cancelled():
            # Mark the exception retrieved even if every waiter went away
            done.exception()

    async def _refresh(self, key: str) -> GraphSnapshot:
        snapshot = await self._load_shared(key)

        if snapshot is None:
            try:
                routes = await self.repository.list_routes()
                flights = await self.repository.list_flights()
            except Exception as e:
                self.stats.failed_loads += 1
                logger.error(f"Failed to load graph snapshot from storage: {e}")
                raise

            snapshot = GraphSnapshot.build(routes, flights)
            self.stats.storage_loads += 1
            logger.info(
                "Loaded graph snapshot from storage: %d routes, %d flights",
                len(snapshot.routes), len(snapshot.flights),
            )
            if self.cache_manager is not None:
                await self.cache_manager.set(key, snapshot.to_payload(), ttl=self.ttl_seconds)

        self._entries[key] = _Entry(snapshot, self.clock() + self.ttl_seconds)
        return snapshot

    async def _load_shared(self, key: str) -> Optional[GraphSnapshot]:
        if self.cache_manager is None:
            return None

        payload = await self.cache_manager.get(key)
        if payload is None:
            return None

        try:
            snapshot = GraphSnapshot.from_payload(payload)
        except (ValidationError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring malformed shared snapshot {key}: {e}")
            return None

        await self.cache_manager.touch(key, self.ttl_seconds)
        self.stats.shared_loads += 1
        logger.info(
            "Loaded graph snapshot from shared cache: %d routes, %d flights",
            len(snapshot.routes), len(snapshot.flights),
        )
        return snapshot

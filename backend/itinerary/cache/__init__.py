"""
Caching layer for the itinerary engine.

The graph snapshot cache keeps routes and flights in process with a sliding
TTL and single-flight refresh; the optional Valkey tier shares snapshots
between processes.
"""

from .config import ValkeyConfig, ValkeyConnectionError
from .client import ValkeyClient
from .utils import CacheKeyPrefix, TTLPreset, CacheKeyBuilder, snapshot_key
from .manager import CacheManager, CacheStats
from .snapshot import GraphSnapshot, GraphSnapshotCache, SnapshotCacheStats

__all__ = [
    # Configuration
    "ValkeyConfig",
    "ValkeyConnectionError",

    # Client and manager
    "ValkeyClient",
    "CacheManager",
    "CacheStats",

    # Snapshot
    "GraphSnapshot",
    "GraphSnapshotCache",
    "SnapshotCacheStats",

    # Utilities
    "CacheKeyPrefix",
    "TTLPreset",
    "CacheKeyBuilder",
    "snapshot_key",
]

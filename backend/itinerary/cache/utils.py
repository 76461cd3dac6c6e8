"""
Cache key naming conventions and TTL presets.
"""

from enum import Enum
from typing import Any, Union


class CacheKeyPrefix(str, Enum):
    """Standard cache key prefixes."""

    GRAPH_SNAPSHOT = "graph:snapshot"


class TTLPreset(int, Enum):
    """Standard TTL presets in seconds."""

    GRAPH_SNAPSHOT = 1800   # 30 minutes, sliding


class CacheKeyBuilder:
    """Builder for consistent, colon-separated cache keys."""

    @staticmethod
    def build_key(prefix: Union[CacheKeyPrefix, str], *parts: Any, **params: Any) -> str:
        """
        Build a cache key with prefix, parts, and parameters.

        Example:
            build_key(CacheKeyPrefix.GRAPH_SNAPSHOT, "v1", source="db")
            # Returns: "graph:snapshot:v1:source=db"
        """
        prefix_str = prefix.value if isinstance(prefix, CacheKeyPrefix) else str(prefix)
        key_parts = [prefix_str]

        for part in parts:
            if part is not None:
                key_parts.append(str(part))

        # Sorted for consistency
        for key, value in sorted(params.items()):
            if value is not None:
                key_parts.append(f"{key}={value}")

        return ":".join(key_parts)


def snapshot_key(*parts: Any) -> str:
    """Cache key of a graph snapshot."""
    return CacheKeyBuilder.build_key(CacheKeyPrefix.GRAPH_SNAPSHOT, *parts)

# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Simple LRU cache using stdlib OrderedDict.

Instances are owned by a single estimator or boundary finder; nothing here
is shared process-wide. Access is not synchronised.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Dict, Generic, Hashable, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

logger = logging.getLogger(__name__)


class LRUCache(Generic[K, V]):
    """In-memory cache with least-recently-used eviction."""

    def __init__(self, max_size: int = 1_000) -> None:
        """Initialize the LRU cache.

        Args:
            max_size (int): Maximum number of entries before the least
                recently used one is evicted.
        """
        self._max_size = max(1, max_size)
        self._store: "OrderedDict[K, V]" = OrderedDict()
        self._hits = 0
        self._misses = 0

    def get(self, key: K) -> Optional[V]:
        """Return the cached value and mark it as recently used, else None.

        Args:
            key (K): The cache key to look up.

        Returns:
            Optional[V]: The cached value, or None if the key is missing.
        """
        if key not in self._store:
            self._misses += 1
            return None
        self._hits += 1
        self._store.move_to_end(key)
        return self._store[key]

    def set(self, key: K, value: V) -> None:
        """Store a value. Evicts the oldest entries if over max_size.

        Args:
            key (K): The cache key under which to store the value.
            value (V): The value to cache.
        """
        if key in self._store:
            self._store.move_to_end(key)
        self._store[key] = value
        while len(self._store) > self._max_size:
            evicted, _ = self._store.popitem(last=False)
            logger.debug("LRU evicted key=%r", evicted)

    def clear(self) -> None:
        """Clear all cached entries and reset hit statistics."""
        self._store.clear()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def stats(self) -> Dict[str, float]:
        """Size, capacity and hit rate of the cache.

        Returns:
            Dict[str, float]: ``size``, ``max_size``, ``hits``, ``misses``
                and ``hit_rate`` (0.0 when the cache was never queried).
        """
        lookups = self._hits + self._misses
        return {
            "size": len(self._store),
            "max_size": self._max_size,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": self._hits / lookups if lookups else 0.0,
        }

"""Process-lifetime memo of computed GCDs.

Keys are canonical unordered operand pairs tagged with their arity, so
``gcd(u, v)`` and ``gcd(v, u)`` share one entry. The map is unbounded and
only shrinks on ``clear()``.
"""
from __future__ import annotations

import threading
from typing import Any, Dict, FrozenSet, Optional, Tuple

from algebra.polynomial import Polynomial

CacheKey = Tuple[int, FrozenSet[Polynomial]]


def cache_key(u: Polynomial, v: Polynomial) -> CacheKey:
    return (u.arity, frozenset((u, v)))


class GcdCache:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._entries: Dict[CacheKey, Any] = {}

    def get(self, key: CacheKey) -> Optional[Any]:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: CacheKey, value: Any) -> None:
        with self._lock:
            self._entries[key] = value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries


__all__ = ["CacheKey", "cache_key", "GcdCache"]

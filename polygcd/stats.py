"""GCD engine diagnostics: cache hit/miss and fast-path counters.

Counters are observability only; they never influence results. All updates
go through one lock so concurrent callers never need to synchronize.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional

from .utils.logging import log_metrics

FAST_PATHS = ("trivial", "disjoint", "monomial", "univariate", "multivariate", "unit")


@dataclass(frozen=True)
class GcdStatsSnapshot:
    cache_hits: int = 0
    cache_misses: int = 0
    fast_paths: Dict[str, int] = field(default_factory=dict)

    @property
    def lookups(self) -> int:
        return self.cache_hits + self.cache_misses

    @property
    def hit_rate(self) -> Optional[float]:
        if self.lookups == 0:
            return None
        return self.cache_hits / self.lookups

    def report(self) -> str:
        if self.hit_rate is None:
            return "gcd cache: no lookups"
        return (
            f"gcd cache: {self.cache_hits} hits / {self.lookups} lookups "
            f"({100.0 * self.hit_rate:.1f}% hit rate)"
        )

    def as_metrics(self) -> Dict[str, float]:
        out: Dict[str, float] = {
            "cache_hits": float(self.cache_hits),
            "cache_misses": float(self.cache_misses),
        }
        if self.hit_rate is not None:
            out["hit_rate"] = float(self.hit_rate)
        for k, v in self.fast_paths.items():
            out[f"path_{k}"] = float(v)
        return out


class GcdStats:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._paths: Dict[str, int] = {k: 0 for k in FAST_PATHS}

    def record_hit(self) -> None:
        with self._lock:
            self._hits += 1

    def record_miss(self) -> None:
        with self._lock:
            self._misses += 1

    def record_path(self, name: str) -> None:
        with self._lock:
            self._paths[name] = self._paths.get(name, 0) + 1

    def snapshot(self) -> GcdStatsSnapshot:
        with self._lock:
            return GcdStatsSnapshot(
                cache_hits=self._hits,
                cache_misses=self._misses,
                fast_paths=dict(self._paths),
            )

    def reset(self) -> None:
        with self._lock:
            self._hits = 0
            self._misses = 0
            self._paths = {k: 0 for k in FAST_PATHS}

    def log(self, logger: Optional[logging.Logger] = None) -> None:
        log_metrics(self.snapshot().as_metrics(), logger=logger)


__all__ = ["FAST_PATHS", "GcdStats", "GcdStatsSnapshot"]

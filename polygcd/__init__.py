"""Multivariate polynomial GCD engine.

Exports:
- GcdEngine, GcdConfig, GcdResult, FailureKind
- gcd, lcm, gcd_dpartials, try_gcd, try_lcm: wrappers over one process-wide engine
- configure, override, clear_cache, gcd_stats, default_engine
- time_budget, with_time_budget, BudgetStatus

The module-level functions are a convenience; code that needs its own cache,
counters or configuration should hold a GcdEngine instance.
"""
from typing import Any, ContextManager

from .engine import FailureKind, GcdConfig, GcdEngine, GcdResult
from .stats import GcdStats, GcdStatsSnapshot
from .timebox import BudgetStatus, TimeBox, time_budget, with_time_budget

_default_engine = GcdEngine()


def default_engine() -> GcdEngine:
    return _default_engine


def gcd(*operands: Any) -> Any:
    return _default_engine.gcd(*operands)


def lcm(*operands: Any) -> Any:
    return _default_engine.lcm(*operands)


def gcd_dpartials(p: Any) -> Any:
    return _default_engine.gcd_dpartials(p)


def try_gcd(*operands: Any) -> GcdResult:
    return _default_engine.try_gcd(*operands)


def try_lcm(*operands: Any) -> GcdResult:
    return _default_engine.try_lcm(*operands)


def configure(**changes: Any) -> GcdConfig:
    return _default_engine.configure(**changes)


def override(**changes: Any) -> ContextManager[GcdConfig]:
    return _default_engine.override(**changes)


def clear_cache() -> None:
    _default_engine.clear_cache()


def gcd_stats() -> GcdStatsSnapshot:
    return _default_engine.stats.snapshot()


__all__ = [
    "GcdEngine",
    "GcdConfig",
    "GcdResult",
    "FailureKind",
    "GcdStats",
    "GcdStatsSnapshot",
    "BudgetStatus",
    "TimeBox",
    "time_budget",
    "with_time_budget",
    "default_engine",
    "gcd",
    "lcm",
    "gcd_dpartials",
    "try_gcd",
    "try_lcm",
    "configure",
    "override",
    "clear_cache",
    "gcd_stats",
]

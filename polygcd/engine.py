"""Memoizing GCD orchestrator.

Pipeline for one pair of operands (``GcdEngine._gcd_pair``):
  trivial cases → disjoint variable footprints → variable reordering →
  ``_inner_gcd`` (checkpoint, cache, dispatch) → un-permute → unit normalization

``_inner_gcd`` dispatches to the univariate Euclid loop, the monomial fast
path, or the general path (lower arity → strip content → Euclid with
``_inner_gcd`` as the coefficient GCD → reattach content → raise arity).

Each engine owns its cache, counters and configuration. Configuration
changes made with ``override`` are scoped to the current context; changes
made with ``configure`` apply to every later call on the engine.
"""
from __future__ import annotations

import logging
import math
import threading
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple

from algebra.coefficient import ensure_exact, scalar_gcd
from algebra.errors import (
    AlgebraError,
    ExactDivisionFailure,
    GcdTimeout,
    InvalidInput,
    UnsupportedOperation,
)
from algebra.polynomial import Polynomial, exact_divide

from .arity import with_lower_arity
from .cache import GcdCache, cache_key
from .content import GcdFn, content, content_primitive
from .euclid import euclid_gcd
from .monomial import monomial_gcd
from .reorder import is_identity, permute, unpermute, variable_order
from .stats import GcdStats
from .timebox import check_or_fail, time_budget
from .trivial import resolve_trivial

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GcdConfig:
    time_limit_s: Optional[float] = 1.0
    cache_enabled: bool = True
    debug: bool = False
    euclid_breakpoint_arity: int = 3
    optimize_variable_order: bool = True
    monomial_fast_path: bool = True
    cut_losses: Optional[Callable[..., Any]] = None  # policy hook, not consulted yet

    def __post_init__(self) -> None:
        if self.time_limit_s is not None:
            t = float(self.time_limit_s)
            if math.isnan(t) or t < 0.0:
                raise ValueError("time_limit_s must be None or ≥ 0")
        if isinstance(self.euclid_breakpoint_arity, bool) or int(self.euclid_breakpoint_arity) < 1:
            raise ValueError("euclid_breakpoint_arity must be ≥ 1")
        if self.cut_losses is not None and not callable(self.cut_losses):
            raise ValueError("cut_losses must be callable or None")


class FailureKind(Enum):
    INVALID_INPUT = auto()
    EXACT_DIVISION = auto()
    TIMEOUT = auto()
    UNSUPPORTED = auto()


_FAILURE_KINDS: Tuple[Tuple[type, FailureKind], ...] = (
    (GcdTimeout, FailureKind.TIMEOUT),
    (InvalidInput, FailureKind.INVALID_INPUT),
    (ExactDivisionFailure, FailureKind.EXACT_DIVISION),
    (UnsupportedOperation, FailureKind.UNSUPPORTED),
)


@dataclass(frozen=True)
class GcdResult:
    value: Any = None
    failure: Optional[FailureKind] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def _normalize_operands(operands: Sequence[Any]) -> Tuple[List[Any], Optional[int]]:
    """
    Validate top-level operands and return them with their common arity
    (None when every operand is a scalar).
    """
    out: List[Any] = []
    arity: Optional[int] = None
    for op in operands:
        if isinstance(op, Polynomial):
            for c in op.coefficients():
                if isinstance(c, Polynomial):
                    raise InvalidInput("operands must have scalar coefficients")
            if arity is None:
                arity = op.arity
            elif op.arity != arity:
                raise InvalidInput(f"arity mismatch: {arity} vs {op.arity}")
            out.append(op)
        else:
            out.append(ensure_exact(op))
    return out, arity


def _pair_arity(u: Any, v: Any) -> Optional[int]:
    u_poly = isinstance(u, Polynomial)
    v_poly = isinstance(v, Polynomial)
    if u_poly and v_poly:
        if u.arity != v.arity:
            raise InvalidInput(f"arity mismatch: {u.arity} vs {v.arity}")
        return u.arity
    if u_poly:
        return u.arity
    if v_poly:
        return v.arity
    return None


def _embed(value: Any, arity: Optional[int]) -> Any:
    if arity is None or isinstance(value, Polynomial):
        return value
    return Polynomial.constant(arity, value)


def _normalize_unit(g: Any, u: Polynomial, v: Polynomial) -> Any:
    """
    Canonical associate of ``g``: its primitive part with positive leading
    coefficient, scaled by the GCD of the operands' scalar contents.

    Over the rationals the recursive path fixes ``g`` only up to a rational
    unit.
    """
    c = scalar_gcd(content(u, scalar_gcd), content(v, scalar_gcd))
    if not isinstance(g, Polynomial):
        return c
    _, prim = content_primitive(g, scalar_gcd)
    return abs(prim).scale(c)


def _reattach(g: Any, c: Any) -> Any:
    if isinstance(g, Polynomial):
        return g.scale(c)
    return g * c


class GcdEngine:
    """
    Multivariate polynomial GCD over exact coefficients.

    Holds a synchronized memo cache, diagnostic counters and a base
    configuration. Safe to share between threads.
    """

    def __init__(
        self,
        config: Optional[GcdConfig] = None,
        *,
        cache: Optional[GcdCache] = None,
        stats: Optional[GcdStats] = None,
    ) -> None:
        self._base = config or GcdConfig()
        self._config_lock = threading.Lock()
        self._override: ContextVar[Optional[GcdConfig]] = ContextVar(
            f"polygcd_config_{id(self)}", default=None
        )
        self.cache = cache if cache is not None else GcdCache()
        self.stats = stats if stats is not None else GcdStats()

    # --- Configuration ---

    @property
    def config(self) -> GcdConfig:
        scoped = self._override.get()
        return scoped if scoped is not None else self._base

    def configure(self, **changes: Any) -> GcdConfig:
        with self._config_lock:
            self._base = replace(self._base, **changes)
            return self._base

    @contextmanager
    def override(self, **changes: Any) -> Iterator[GcdConfig]:
        """Apply ``changes`` for the dynamic extent of the block only."""
        cfg = replace(self.config, **changes)
        token = self._override.set(cfg)
        try:
            yield cfg
        finally:
            self._override.reset(token)

    def clear_cache(self) -> None:
        self.cache.clear()

    # --- Public API ---

    def gcd(self, *operands: Any) -> Any:
        """
        GCD of any number of exact scalars and/or polynomials of one arity.

        Returns a scalar when every operand is a scalar, otherwise a
        Polynomial of the operands' arity. ``gcd()`` is 0.

        Raises
        ------
        InvalidInput, UnsupportedOperation
            For malformed, mismatched or inexact operands.
        GcdTimeout
            When the call exceeds ``time_limit_s``.
        """
        ops, arity = _normalize_operands(operands)
        if not ops:
            return 0
        cfg = self.config
        with time_budget(cfg.time_limit_s, "gcd") as box:
            result = abs(ops[0])
            for op in ops[1:]:
                if result == 1:
                    self.stats.record_path("unit")
                    break
                result = self._gcd_pair(result, op, cfg)
        if cfg.debug:
            _logger.debug("gcd of %d operands: %d steps in %.6fs", len(ops), box.steps, box.elapsed_s())
        return _embed(result, arity)

    def lcm(self, *operands: Any) -> Any:
        """Least common multiple, ``abs(u * v / gcd(u, v))`` folded pairwise; ``lcm()`` is 1."""
        ops, arity = _normalize_operands(operands)
        if not ops:
            return 1
        result = abs(ops[0])
        for op in ops[1:]:
            if result == 0 or op == 0:
                result = 0
                break
            g = self.gcd(result, op)
            result = abs(exact_divide(_embed(result, arity) * op, g))
        return _embed(result, arity)

    def gcd_dpartials(self, p: Any) -> Any:
        """GCD of all first partial derivatives of ``p``; 1 for a non-polynomial."""
        if not isinstance(p, Polynomial):
            return 1
        return self.gcd(*(p.partial_derivative(i) for i in range(p.arity)))

    def try_gcd(self, *operands: Any) -> GcdResult:
        return self._attempt(self.gcd, operands)

    def try_lcm(self, *operands: Any) -> GcdResult:
        return self._attempt(self.lcm, operands)

    # --- Pipeline ---

    def _attempt(self, fn: Callable[..., Any], operands: Sequence[Any]) -> GcdResult:
        try:
            return GcdResult(value=fn(*operands))
        except AlgebraError as e:
            for exc_type, kind in _FAILURE_KINDS:
                if isinstance(e, exc_type):
                    return GcdResult(failure=kind, message=str(e))
            raise

    def _coefficient_gcd(self, cfg: GcdConfig) -> GcdFn:
        return lambda a, b: self._inner_gcd(a, b, cfg)

    def _gcd_pair(self, u: Any, v: Any, cfg: GcdConfig) -> Any:
        gcd_fn = self._coefficient_gcd(cfg)
        trivial = resolve_trivial(u, v, gcd_fn)
        if trivial is not None:
            self.stats.record_path("trivial")
            return abs(trivial)
        _pair_arity(u, v)
        if u.variables().isdisjoint(v.variables()):
            self.stats.record_path("disjoint")
            return abs(gcd_fn(content(u, gcd_fn), content(v, gcd_fn)))
        if cfg.optimize_variable_order and u.arity > 1:
            order = variable_order(u, v)
            if not is_identity(order):
                if cfg.debug:
                    _logger.debug("gcd: variable order %s", order)
                g = self._inner_gcd(permute(u, order), permute(v, order), cfg)
                return _normalize_unit(unpermute(g, order), u, v)
        return _normalize_unit(self._inner_gcd(u, v, cfg), u, v)

    def _inner_gcd(self, u: Any, v: Any, cfg: GcdConfig) -> Any:
        arity = _pair_arity(u, v)
        if arity is not None and arity >= cfg.euclid_breakpoint_arity:
            check_or_fail(f"gcd at arity {arity}")
        key = None
        if cfg.cache_enabled and isinstance(u, Polynomial) and isinstance(v, Polynomial):
            key = cache_key(u, v)
            hit = self.cache.get(key)
            if hit is not None:
                self.stats.record_hit()
                return hit
        result = self._dispatch(u, v, arity, cfg)
        if key is not None:
            self.stats.record_miss()
            self.cache.put(key, result)
        return result

    def _dispatch(self, u: Any, v: Any, arity: Optional[int], cfg: GcdConfig) -> Any:
        gcd_fn = self._coefficient_gcd(cfg)
        trivial = resolve_trivial(u, v, gcd_fn)
        if trivial is not None:
            return trivial
        if arity == 1:
            self.stats.record_path("univariate")
            return self._content_euclid(u, v, gcd_fn, cfg)
        if cfg.monomial_fast_path and (u.is_monomial() or v.is_monomial()):
            self.stats.record_path("monomial")
            m, p = (u, v) if u.is_monomial() else (v, u)
            return monomial_gcd(m, p, gcd_fn)
        self.stats.record_path("multivariate")
        if cfg.debug:
            _logger.debug("gcd: lowering arity %d (%d x %d terms)", arity, len(u), len(v))
        return with_lower_arity(u, v, lambda lu, lv: self._content_euclid(lu, lv, gcd_fn, cfg))

    def _content_euclid(self, u: Polynomial, v: Polynomial, gcd_fn: GcdFn, cfg: GcdConfig) -> Any:
        cu, pu = content_primitive(u, gcd_fn)
        cv, pv = content_primitive(v, gcd_fn)
        g = euclid_gcd(pu, pv, gcd_fn, debug=cfg.debug)
        return _reattach(g, gcd_fn(cu, cv))


__all__ = ["GcdConfig", "GcdEngine", "GcdResult", "FailureKind"]

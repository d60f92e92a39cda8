"""Arity reduction around a GCD computation.

An arity-N pair (N > 1) is viewed as univariate in its last variable with
arity N-1 polynomial coefficients. The univariate GCD is lifted back to arity
N; a scalar result has no main-variable structure and is returned as is.
"""
from __future__ import annotations

from typing import Any, Callable

from algebra.errors import InvalidInput
from algebra.polynomial import Polynomial


def lift(g: Any, inner_arity: int) -> Any:
    if isinstance(g, Polynomial):
        return g.raise_arity(inner_arity)
    return g


def with_lower_arity(u: Polynomial, v: Polynomial, fn: Callable[[Polynomial, Polynomial], Any]) -> Any:
    if u.arity != v.arity:
        raise InvalidInput(f"arity mismatch: {u.arity} vs {v.arity}")
    if u.arity < 2:
        raise InvalidInput("with_lower_arity() needs arity >= 2")
    return lift(fn(u.lower_arity(), v.lower_arity()), u.arity - 1)


__all__ = ["lift", "with_lower_arity"]

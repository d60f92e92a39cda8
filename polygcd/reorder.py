"""Variable-order heuristic (Liao–Fateman).

Variables are sorted by the largest exponent they reach in any single term of
either operand, ascending, so the variable of highest degree becomes the
main variable after ``lower_arity``. Purely a performance heuristic: the GCD
is the same with or without it.

A permutation ``order`` maps new positions to old ones: new[j] = old[order[j]].
"""
from __future__ import annotations

from typing import Any, Sequence, Tuple

import numpy as np

from algebra.errors import InvalidInput
from algebra.polynomial import Polynomial

Order = Tuple[int, ...]


def max_exponents(u: Polynomial, v: Polynomial) -> np.ndarray:
    if u.arity != v.arity:
        raise InvalidInput(f"arity mismatch: {u.arity} vs {v.arity}")
    rows = u.exponents() + v.exponents()
    if not rows:
        return np.zeros(u.arity, dtype=np.int64)
    return np.asarray(rows, dtype=np.int64).max(axis=0)


def variable_order(u: Polynomial, v: Polynomial) -> Order:
    maxes = max_exponents(u, v)
    return tuple(int(i) for i in np.argsort(maxes, kind="stable"))


def inverse_order(order: Sequence[int]) -> Order:
    inv = [0] * len(order)
    for j, i in enumerate(order):
        inv[i] = j
    return tuple(inv)


def permute(p: Any, order: Sequence[int]) -> Any:
    if not isinstance(p, Polynomial):
        return p
    if len(order) != p.arity:
        raise InvalidInput(f"permutation of length {len(order)} for arity {p.arity}")
    return p.map_exponents(lambda e: tuple(e[i] for i in order))


def unpermute(p: Any, order: Sequence[int]) -> Any:
    return permute(p, inverse_order(order))


def is_identity(order: Sequence[int]) -> bool:
    return all(i == j for j, i in enumerate(order))


__all__ = ["Order", "max_exponents", "variable_order", "inverse_order", "permute", "unpermute", "is_identity"]

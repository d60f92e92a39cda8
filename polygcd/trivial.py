"""Cases with an immediate answer.

``resolve_trivial`` returns the GCD, or None when no shortcut applies.
"""
from __future__ import annotations

from typing import Any, Optional

from algebra.coefficient import scalar_gcd
from algebra.polynomial import Polynomial

from .content import GcdFn


def _fold(c: Any, p: Polynomial, gcd_fn: GcdFn) -> Any:
    g = abs(c)
    for x in p.coefficients():
        if g == 1:
            break
        g = gcd_fn(g, x)
    return g


def resolve_trivial(u: Any, v: Any, gcd_fn: GcdFn) -> Optional[Any]:
    u_poly = isinstance(u, Polynomial)
    v_poly = isinstance(v, Polynomial)
    if u == 0:
        return abs(v)
    if v == 0:
        return abs(u)
    if not u_poly and not v_poly:
        return scalar_gcd(u, v)
    if u == v:
        return abs(u)
    if not u_poly:
        return _fold(u, v, gcd_fn)
    if not v_poly:
        return _fold(v, u, gcd_fn)
    return None


__all__ = ["resolve_trivial"]

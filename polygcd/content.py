"""Content / primitive-part separation.

content(p) is the GCD of p's coefficients, folded from 0 and stopped as soon
as the running value is 1. primitive(p) is p with every coefficient divided
exactly by the content, so content(p) * primitive(p) == p and
content(primitive(p)) == 1.

``gcd_fn`` is the coefficient-domain GCD: the scalar GCD for polynomials with
scalar coefficients, or the engine's own recursive GCD for coefficients that
are themselves polynomials.
"""
from __future__ import annotations

from typing import Any, Callable, Tuple

from algebra.polynomial import Polynomial

GcdFn = Callable[[Any, Any], Any]


def content(p: Polynomial, gcd_fn: GcdFn) -> Any:
    g: Any = 0
    for c in p.coefficients():
        g = gcd_fn(g, c)
        if g == 1:
            break
    return g


def content_primitive(p: Polynomial, gcd_fn: GcdFn) -> Tuple[Any, Polynomial]:
    if p.is_zero():
        return 0, p
    c = content(p, gcd_fn)
    if c == 1:
        return c, p
    return c, p.divide_coefficients(c)


__all__ = ["GcdFn", "content", "content_primitive"]

"""GCD of a monomial with an arbitrary polynomial, without recursion."""
from __future__ import annotations

from typing import Any

import numpy as np

from algebra.errors import InvalidInput
from algebra.polynomial import Polynomial

from .content import GcdFn, content


def monomial_gcd(m: Polynomial, p: Polynomial, gcd_fn: GcdFn) -> Polynomial:
    """
    GCD of the monomial ``m`` and the polynomial ``p``.

    Exponents: element-wise minimum of m's exponent vector and the column
    minimum over p's exponent vectors. Coefficient: GCD of m's coefficient
    with the content of p.
    """
    if not m.is_monomial():
        raise InvalidInput(f"monomial_gcd: {m} is not a monomial")
    if m.arity != p.arity:
        raise InvalidInput(f"arity mismatch: {m.arity} vs {p.arity}")
    ((m_exps, m_coeff),) = m.items()
    if p.is_zero():
        return abs(m)
    exps = np.asarray(p.exponents(), dtype=np.int64)
    floor = np.minimum(np.asarray(m_exps, dtype=np.int64), exps.min(axis=0))
    coeff: Any = gcd_fn(m_coeff, content(p, gcd_fn))
    return Polynomial(m.arity, {tuple(int(x) for x in floor): coeff})


__all__ = ["monomial_gcd"]

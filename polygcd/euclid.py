"""Primitive pseudo-remainder sequence for univariate polynomials.

Coefficients may be scalars or polynomials of lower arity; ``gcd_fn`` is the
GCD of that coefficient domain. Every remainder is made primitive before the
next step, which keeps coefficient growth in check.
"""
from __future__ import annotations

import logging
from typing import Any

from algebra.polynomial import Polynomial

from .content import GcdFn, content_primitive
from .timebox import check_or_fail
from .trivial import resolve_trivial

_logger = logging.getLogger(__name__)


def euclid_gcd(u: Polynomial, v: Polynomial, gcd_fn: GcdFn, debug: bool = False) -> Any:
    """
    GCD of two primitive univariate polynomials.

    Consults the active time box before every step; expiry raises GcdTimeout
    and no partial answer is returned.
    """
    step = 0
    while True:
        check_or_fail(f"euclid step {step}")
        trivial = resolve_trivial(u, v, gcd_fn)
        if trivial is not None:
            return trivial
        if u.degree() < v.degree():
            u, v = v, u
        r = u.pseudo_remainder(v)
        if debug:
            _logger.debug(
                "euclid step %d: deg u=%d deg v=%d remainder terms=%d",
                step, u.degree(), v.degree(), len(r),
            )
        if r.is_zero():
            return v
        _, r = content_primitive(r, gcd_fn)
        u, v = v, r
        step += 1


__all__ = ["euclid_gcd"]

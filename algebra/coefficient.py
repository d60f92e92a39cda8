"""Exact scalar coefficients.

Scalars are Python ``int`` and ``fractions.Fraction``. A Fraction whose
denominator is 1 is normalized to ``int`` so that structurally equal values
compare and hash alike.

Public API
- is_scalar(x) -> bool
- ensure_exact(x) -> int | Fraction
- scalar_gcd(a, b) -> int | Fraction   (always >= 0)
- exact_div(a, b) -> int | Fraction
- is_zero(x) / is_one(x) -> bool
"""
from __future__ import annotations

import math
import numbers
from fractions import Fraction
from typing import Union

from .errors import ExactDivisionFailure, InvalidInput, UnsupportedOperation

Scalar = Union[int, Fraction]


def is_scalar(x: object) -> bool:
    return isinstance(x, (int, Fraction)) and not isinstance(x, bool)


def normalize(x: Scalar) -> Scalar:
    if isinstance(x, Fraction) and x.denominator == 1:
        return int(x.numerator)
    return x


def ensure_exact(x: object) -> Scalar:
    """
    Validate that x is an exact scalar and return it normalized.

    Raises
    ------
    UnsupportedOperation
        For inexact numbers (float, complex, Decimal, numpy floats, ...).
    InvalidInput
        For booleans and anything that is not a number at all.
    """
    if isinstance(x, bool):
        raise InvalidInput("bool is not a valid coefficient")
    if isinstance(x, (int, Fraction)):
        return normalize(x)
    if isinstance(x, numbers.Integral):
        # numpy integer scalars and friends
        return int(x)
    if isinstance(x, numbers.Rational):
        return normalize(Fraction(int(x.numerator), int(x.denominator)))
    if isinstance(x, numbers.Number) or hasattr(x, "__float__"):
        raise UnsupportedOperation(
            f"inexact coefficient {x!r} of type {type(x).__name__} is not supported"
        )
    raise InvalidInput(f"not a coefficient: {x!r}")


def is_zero(x: object) -> bool:
    return x == 0


def is_one(x: object) -> bool:
    return x == 1


def scalar_gcd(a: Scalar, b: Scalar) -> Scalar:
    """
    Non-negative GCD of two exact scalars.

    For rationals gcd(p/q, r/s) = gcd(p, r) / lcm(q, s), the largest rational
    that divides both with an integral quotient.
    """
    if isinstance(a, int) and isinstance(b, int):
        return math.gcd(a, b)
    fa = Fraction(a)
    fb = Fraction(b)
    num = math.gcd(fa.numerator, fb.numerator)
    if num == 0:
        return 0
    den = fa.denominator * fb.denominator // math.gcd(fa.denominator, fb.denominator)
    return normalize(Fraction(num, den))


def exact_div(a: Scalar, b: Scalar) -> Scalar:
    """Divide a by b; integer division must leave no remainder."""
    if b == 0:
        raise ExactDivisionFailure(f"division of {a!r} by zero")
    if isinstance(a, int) and isinstance(b, int):
        q, r = divmod(a, b)
        if r != 0:
            raise ExactDivisionFailure(f"{a} is not divisible by {b}")
        return q
    return normalize(Fraction(a) / Fraction(b))


__all__ = [
    "Scalar",
    "is_scalar",
    "normalize",
    "ensure_exact",
    "is_zero",
    "is_one",
    "scalar_gcd",
    "exact_div",
]

from decimal import Decimal
from fractions import Fraction

import numpy as np
import pytest

from algebra.coefficient import ensure_exact, exact_div, scalar_gcd
from algebra.errors import ExactDivisionFailure, InvalidInput, UnsupportedOperation


def test_scalar_gcd_integers():
    assert scalar_gcd(12, 18) == 6
    assert scalar_gcd(-4, 6) == 2
    assert scalar_gcd(0, -7) == 7
    assert scalar_gcd(0, 0) == 0


def test_scalar_gcd_rationals():
    assert scalar_gcd(Fraction(1, 2), Fraction(1, 3)) == Fraction(1, 6)
    assert scalar_gcd(Fraction(2, 3), 4) == Fraction(2, 3)
    g = scalar_gcd(Fraction(4, 2), 6)
    assert g == 2
    assert type(g) is int


def test_exact_div():
    assert exact_div(6, 3) == 2
    assert exact_div(-6, 3) == -2
    assert exact_div(Fraction(1, 2), 3) == Fraction(1, 6)
    with pytest.raises(ExactDivisionFailure):
        exact_div(7, 2)
    with pytest.raises(ExactDivisionFailure):
        exact_div(1, 0)


def test_ensure_exact_accepts_and_normalizes():
    v = ensure_exact(Fraction(4, 2))
    assert v == 2 and type(v) is int
    assert ensure_exact(np.int64(5)) == 5
    assert type(ensure_exact(np.int64(5))) is int
    assert ensure_exact(Fraction(1, 3)) == Fraction(1, 3)


def test_ensure_exact_rejects_inexact_and_garbage():
    for bad in (0.5, 1.0, complex(1, 0), Decimal("1.5"), np.float64(2.0)):
        with pytest.raises(UnsupportedOperation):
            ensure_exact(bad)
    for bad in ("3", None, True, [1]):
        with pytest.raises(InvalidInput):
            ensure_exact(bad)

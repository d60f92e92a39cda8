import pytest

from algebra.coefficient import scalar_gcd
from algebra.errors import GcdTimeout
from algebra.polynomial import Polynomial
from polygcd.euclid import euclid_gcd
from polygcd.timebox import time_budget


def _t():
    return Polynomial.variable(1, 0)


def test_common_linear_factor():
    t = _t()
    u = (t + 1) * (t - 2)
    v = (t + 1) * (t + 3)
    assert abs(euclid_gcd(u, v, scalar_gcd)) == t + 1


def test_argument_order_does_not_matter():
    t = _t()
    u = (t ** 2 + 1) * (t - 5)
    v = (t ** 2 + 1) * (2 * t + 3)
    assert abs(euclid_gcd(u, v, scalar_gcd)) == t ** 2 + 1
    assert abs(euclid_gcd(v, u, scalar_gcd)) == t ** 2 + 1


def test_coprime_gives_unit():
    t = _t()
    g = euclid_gcd(t ** 2 + 1, t + 1, scalar_gcd)
    assert abs(g) == 1


def test_divisor_is_returned():
    t = _t()
    assert abs(euclid_gcd(t ** 3 - t, t - 1, scalar_gcd)) == t - 1


def test_expired_budget_raises_before_first_step():
    t = _t()
    with pytest.raises(GcdTimeout):
        with time_budget(0.0, "euclid"):
            euclid_gcd(t ** 2 - 1, t - 1, scalar_gcd)


def test_debug_trace(caplog):
    t = _t()
    with caplog.at_level("DEBUG", logger="polygcd.euclid"):
        euclid_gcd(t ** 2 - 1, t ** 2 + 2 * t + 1, scalar_gcd, debug=True)
    assert any("euclid step 0" in r.getMessage() for r in caplog.records)

"""Exact algebra primitives: coefficients, sparse polynomials, errors.

Exports:
- Polynomial, exact_divide
- scalar_gcd, exact_div, ensure_exact
- AlgebraError, InvalidInput, ExactDivisionFailure, UnsupportedOperation, GcdTimeout
"""

from .coefficient import ensure_exact, exact_div, scalar_gcd
from .errors import (
    AlgebraError,
    ExactDivisionFailure,
    GcdTimeout,
    InvalidInput,
    UnsupportedOperation,
)
from .polynomial import Polynomial, exact_divide

__all__ = [
    "Polynomial",
    "exact_divide",
    "ensure_exact",
    "exact_div",
    "scalar_gcd",
    "AlgebraError",
    "InvalidInput",
    "ExactDivisionFailure",
    "UnsupportedOperation",
    "GcdTimeout",
]

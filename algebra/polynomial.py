"""Sparse multivariate polynomials with exact coefficients.

Invariants
- Immutable: every operation returns a new Polynomial.
- Exponent vectors are tuples of non-negative ints, all of length ``arity``.
- No zero coefficients are stored; exponent vectors are unique.
- Coefficients are exact scalars (int / Fraction) or, after ``lower_arity``,
  Polynomials of one common lower arity.

Term order is lexicographic with the highest-indexed variable most
significant, so for an arity-1 polynomial the leading term is the term of
highest degree and ``lower_arity`` splits off the leading variable.

A constant polynomial compares equal to, and hashes like, its scalar value.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from . import coefficient as coeffs
from .errors import ExactDivisionFailure, InvalidInput

Exponents = Tuple[int, ...]
TermsLike = Union[Mapping[Exponents, Any], Iterable[Tuple[Exponents, Any]]]


def _order_key(e: Exponents) -> Exponents:
    return e[::-1]


def _check_exponents(exps: Any, arity: int) -> Exponents:
    try:
        e = tuple(exps)
    except TypeError as err:
        raise InvalidInput(f"exponent vector must be a sequence, got {exps!r}") from err
    if len(e) != arity:
        raise InvalidInput(f"exponent vector {e} does not match arity {arity}")
    out = []
    for x in e:
        if isinstance(x, bool) or not isinstance(x, int) and not hasattr(x, "__index__"):
            raise InvalidInput(f"exponents must be ints, got {x!r}")
        xi = int(x)
        if xi < 0:
            raise InvalidInput(f"exponents must be non-negative, got {e}")
        out.append(xi)
    return tuple(out)


def _check_coefficient(c: Any) -> Any:
    if isinstance(c, Polynomial):
        return c
    return coeffs.ensure_exact(c)


def _prune(acc: Dict[Exponents, Any]) -> Dict[Exponents, Any]:
    return {
        e: coeffs.normalize(c) if isinstance(c, coeffs.Fraction) else c
        for e, c in acc.items()
        if c != 0
    }


def _sign(c: Any) -> int:
    if isinstance(c, Polynomial):
        return c.leading_sign()
    return (c > 0) - (c < 0)


class Polynomial:
    __slots__ = ("_arity", "_terms", "_hash")

    def __init__(self, arity: int, terms: TermsLike = ()) -> None:
        if isinstance(arity, bool) or not isinstance(arity, int) or arity < 1:
            raise InvalidInput(f"arity must be an int >= 1, got {arity!r}")
        items = terms.items() if isinstance(terms, Mapping) else terms
        acc: Dict[Exponents, Any] = {}
        for exps, coeff in items:
            e = _check_exponents(exps, arity)
            c = _check_coefficient(coeff)
            acc[e] = acc[e] + c if e in acc else c
        self._arity = arity
        self._terms = _prune(acc)
        self._hash: Optional[int] = None

    # --- Construction ---

    @classmethod
    def _make(cls, arity: int, terms: Dict[Exponents, Any]) -> "Polynomial":
        # Trusted path: terms are validated and pruned by the caller.
        p = object.__new__(cls)
        p._arity = arity
        p._terms = terms
        p._hash = None
        return p

    @classmethod
    def from_dict(cls, terms: Mapping[Exponents, Any], arity: Optional[int] = None) -> "Polynomial":
        """Build from ``{exponents: coefficient}``, inferring arity from the keys."""
        if arity is None:
            if not terms:
                raise InvalidInput("cannot infer arity from an empty term map")
            arity = len(next(iter(terms)))
        return cls(arity, terms)

    @classmethod
    def constant(cls, arity: int, c: Any) -> "Polynomial":
        return cls(arity, {(0,) * arity: c})

    @classmethod
    def zero(cls, arity: int) -> "Polynomial":
        return cls(arity)

    @classmethod
    def variable(cls, arity: int, index: int) -> "Polynomial":
        if not 0 <= index < arity:
            raise InvalidInput(f"variable index {index} out of range for arity {arity}")
        e = [0] * arity
        e[index] = 1
        return cls._make(arity, {tuple(e): 1})

    # --- Introspection ---

    @property
    def arity(self) -> int:
        return self._arity

    def __len__(self) -> int:
        return len(self._terms)

    def items(self) -> List[Tuple[Exponents, Any]]:
        """Terms as ``(exponents, coefficient)`` pairs in ascending term order."""
        return sorted(self._terms.items(), key=lambda t: _order_key(t[0]))

    def exponents(self) -> List[Exponents]:
        return [e for e, _ in self.items()]

    def coefficients(self) -> List[Any]:
        return [c for _, c in self.items()]

    def coefficient(self, exps: Exponents) -> Any:
        return self._terms.get(tuple(exps), 0)

    def is_zero(self) -> bool:
        return not self._terms

    def is_constant(self) -> bool:
        if not self._terms:
            return True
        return len(self._terms) == 1 and (0,) * self._arity in self._terms

    def is_monomial(self) -> bool:
        return len(self._terms) == 1

    def constant_value(self) -> Any:
        if not self.is_constant():
            raise InvalidInput("constant_value() of a non-constant polynomial")
        return self._terms.get((0,) * self._arity, 0)

    def variables(self) -> FrozenSet[int]:
        """Indices of the variables that occur with a positive exponent."""
        used = set()
        for e in self._terms:
            used.update(i for i, x in enumerate(e) if x > 0)
        return frozenset(used)

    def degree(self, var: Optional[int] = None) -> int:
        """Degree in ``var`` (default: the main, highest-indexed variable); -1 for zero."""
        i = self._arity - 1 if var is None else var
        if not self._terms:
            return -1
        return max(e[i] for e in self._terms)

    def leading_term(self) -> Tuple[Exponents, Any]:
        if not self._terms:
            raise InvalidInput("the zero polynomial has no leading term")
        e = max(self._terms, key=_order_key)
        return e, self._terms[e]

    def leading_coefficient(self) -> Any:
        return self.leading_term()[1]

    def leading_sign(self) -> int:
        if not self._terms:
            return 0
        return _sign(self.leading_coefficient())

    # --- Transforms ---

    def map_coefficients(self, fn: Callable[[Any], Any]) -> "Polynomial":
        return Polynomial._make(self._arity, _prune({e: fn(c) for e, c in self._terms.items()}))

    def map_exponents(self, fn: Callable[[Exponents], Exponents]) -> "Polynomial":
        acc: Dict[Exponents, Any] = {}
        for e, c in self._terms.items():
            ne = tuple(fn(e))
            if len(ne) != self._arity:
                raise InvalidInput(f"exponent map changed arity: {e} -> {ne}")
            acc[ne] = acc[ne] + c if ne in acc else c
        return Polynomial._make(self._arity, _prune(acc))

    def scale(self, c: Any) -> "Polynomial":
        """Multiply every coefficient by a coefficient-domain value ``c``."""
        if c == 0:
            return Polynomial._make(self._arity, {})
        if c == 1:
            return self
        return self.map_coefficients(lambda a: a * c)

    def divide_coefficients(self, c: Any) -> "Polynomial":
        """Divide every coefficient exactly by a coefficient-domain value ``c``."""
        if c == 1:
            return self
        return Polynomial._make(self._arity, {e: exact_divide(a, c) for e, a in self._terms.items()})

    def shift(self, k: int, var: Optional[int] = None) -> "Polynomial":
        """Multiply by ``x_var ** k`` (default: the main variable)."""
        i = self._arity - 1 if var is None else var
        if k == 0:
            return self
        return Polynomial._make(
            self._arity,
            {e[:i] + (e[i] + k,) + e[i + 1:]: c for e, c in self._terms.items()},
        )

    def partial_derivative(self, var: int) -> "Polynomial":
        if not 0 <= var < self._arity:
            raise InvalidInput(f"variable index {var} out of range for arity {self._arity}")
        acc: Dict[Exponents, Any] = {}
        for e, c in self._terms.items():
            if e[var] > 0:
                acc[e[:var] + (e[var] - 1,) + e[var + 1:]] = c * e[var]
        return Polynomial._make(self._arity, _prune(acc))

    def lower_arity(self) -> "Polynomial":
        """
        View an arity-N polynomial (N > 1) as univariate in its last variable
        with arity N-1 polynomial coefficients.
        """
        if self._arity < 2:
            raise InvalidInput("lower_arity() needs arity >= 2")
        inner = self._arity - 1
        groups: Dict[int, Dict[Exponents, Any]] = {}
        for e, c in self._terms.items():
            groups.setdefault(e[-1], {})[e[:-1]] = c
        return Polynomial._make(1, {(d,): Polynomial._make(inner, ts) for d, ts in groups.items()})

    def raise_arity(self, inner_arity: int) -> "Polynomial":
        """Inverse of ``lower_arity``; scalar coefficients are read as constants."""
        if self._arity != 1:
            raise InvalidInput("raise_arity() needs a univariate polynomial")
        terms: Dict[Exponents, Any] = {}
        for (d,), c in self._terms.items():
            if isinstance(c, Polynomial):
                if c.arity != inner_arity:
                    raise InvalidInput(f"coefficient arity {c.arity} != {inner_arity}")
                for e, cc in c._terms.items():
                    terms[e + (d,)] = cc
            else:
                terms[(0,) * inner_arity + (d,)] = c
        return Polynomial._make(inner_arity + 1, terms)

    # --- Arithmetic ---

    def _coerce(self, other: Any) -> Optional["Polynomial"]:
        if isinstance(other, Polynomial):
            if other._arity != self._arity:
                raise InvalidInput(f"arity mismatch: {self._arity} vs {other._arity}")
            return other
        if isinstance(other, (int, float, complex)) or coeffs.is_scalar(other):
            c = coeffs.ensure_exact(other)
            return Polynomial._make(self._arity, _prune({(0,) * self._arity: c}))
        return None

    def _add(self, other: "Polynomial", sign: int) -> "Polynomial":
        acc = dict(self._terms)
        for e, c in other._terms.items():
            acc[e] = acc[e] + c * sign if e in acc else c * sign
        return Polynomial._make(self._arity, _prune(acc))

    def __add__(self, other: Any) -> "Polynomial":
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return self._add(o, 1)

    def __radd__(self, other: Any) -> "Polynomial":
        return self.__add__(other)

    def __sub__(self, other: Any) -> "Polynomial":
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return self._add(o, -1)

    def __rsub__(self, other: Any) -> "Polynomial":
        o = self._coerce(other)
        if o is None:
            return NotImplemented
        return o._add(self, -1)

    def __neg__(self) -> "Polynomial":
        return Polynomial._make(self._arity, {e: -c for e, c in self._terms.items()})

    def __mul__(self, other: Any) -> "Polynomial":
        if isinstance(other, Polynomial):
            o = self._coerce(other)
            acc: Dict[Exponents, Any] = {}
            for e1, c1 in self._terms.items():
                for e2, c2 in o._terms.items():
                    e = tuple(a + b for a, b in zip(e1, e2))
                    acc[e] = acc[e] + c1 * c2 if e in acc else c1 * c2
            return Polynomial._make(self._arity, _prune(acc))
        if isinstance(other, (int, float, complex)) or coeffs.is_scalar(other):
            return self.scale(coeffs.ensure_exact(other))
        return NotImplemented

    def __rmul__(self, other: Any) -> "Polynomial":
        return self.__mul__(other)

    def __pow__(self, n: int) -> "Polynomial":
        if isinstance(n, bool) or not isinstance(n, int) or n < 0:
            raise InvalidInput(f"exponent must be a non-negative int, got {n!r}")
        result = Polynomial.constant(self._arity, 1)
        base = self
        while n:
            if n & 1:
                result = result * base
            base = base * base
            n >>= 1
        return result

    def __abs__(self) -> "Polynomial":
        return -self if self.leading_sign() < 0 else self

    def pseudo_remainder(self, divisor: "Polynomial") -> "Polynomial":
        """
        Pseudo-remainder of univariate polynomials.

        Each reduction step scales the running remainder by the divisor's
        leading coefficient before cancelling its leading term, so the result
        stays inside the coefficient ring (no fractions are introduced).
        """
        if self._arity != 1 or divisor._arity != 1:
            raise InvalidInput("pseudo_remainder() needs univariate polynomials")
        if divisor.is_zero():
            raise ExactDivisionFailure("pseudo-remainder by the zero polynomial")
        n = divisor.degree()
        b = divisor.leading_coefficient()
        r = self
        while not r.is_zero() and r.degree() >= n:
            k = r.degree() - n
            lc = r.leading_coefficient()
            r = r.scale(b) - divisor.shift(k).scale(lc)
        return r

    def exact_quotient(self, divisor: Any) -> "Polynomial":
        """
        Quotient of an exact division.

        Raises
        ------
        ExactDivisionFailure
            If ``divisor`` does not divide ``self`` exactly.
        """
        if not isinstance(divisor, Polynomial):
            return self.divide_coefficients(divisor)
        if divisor._arity != self._arity:
            raise InvalidInput(f"arity mismatch: {self._arity} vs {divisor._arity}")
        if divisor.is_zero():
            raise ExactDivisionFailure("division by the zero polynomial")
        if divisor.is_constant():
            return self.divide_coefficients(divisor.constant_value())
        lead_e, lead_c = divisor.leading_term()
        quotient: Dict[Exponents, Any] = {}
        r = self
        while not r.is_zero():
            e, c = r.leading_term()
            step = tuple(a - b for a, b in zip(e, lead_e))
            if min(step) < 0:
                raise ExactDivisionFailure(f"{divisor} does not divide {self}")
            qc = exact_divide(c, lead_c)
            quotient[step] = qc
            r = r - Polynomial._make(self._arity, {step: qc}) * divisor
        return Polynomial._make(self._arity, quotient)

    # --- Equality / hashing / display ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Polynomial):
            return self._arity == other._arity and self._terms == other._terms
        if coeffs.is_scalar(other):
            return self.is_constant() and self.constant_value() == other
        return NotImplemented

    def __hash__(self) -> int:
        if self._hash is None:
            if self.is_constant():
                self._hash = hash(self.constant_value())
            else:
                self._hash = hash((self._arity, frozenset(self._terms.items())))
        return self._hash

    def __repr__(self) -> str:
        return f"Polynomial({self._arity}, {dict(self.items())!r})"

    def __str__(self) -> str:
        if not self._terms:
            return "0"
        parts = []
        for e, c in reversed(self.items()):
            mono = "*".join(
                f"x{i}" if x == 1 else f"x{i}^{x}" for i, x in enumerate(e) if x > 0
            )
            cs = f"({c})" if isinstance(c, Polynomial) or isinstance(c, coeffs.Fraction) else str(c)
            if not mono:
                parts.append(cs)
            elif c == 1 and not isinstance(c, Polynomial):
                parts.append(mono)
            else:
                parts.append(f"{cs}*{mono}")
        return " + ".join(parts)


def exact_divide(a: Any, b: Any) -> Any:
    """Exact division of two values of the same domain (scalars or same-arity polynomials)."""
    if isinstance(a, Polynomial):
        return a.exact_quotient(b)
    if isinstance(b, Polynomial):
        if b.is_constant():
            return exact_divide(a, b.constant_value())
        if a == 0:
            return 0
        raise ExactDivisionFailure(f"{b} does not divide {a}")
    return coeffs.exact_div(a, b)


__all__ = ["Exponents", "Polynomial", "exact_divide"]

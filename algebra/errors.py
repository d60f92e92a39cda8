from __future__ import annotations

from typing import Optional


class AlgebraError(Exception):
    pass


class InvalidInput(AlgebraError, ValueError):
    """Arity mismatch or a malformed operand."""


class ExactDivisionFailure(AlgebraError, ArithmeticError):
    """A division that had to be exact left a remainder."""


class UnsupportedOperation(AlgebraError, TypeError):
    """The operation is not defined over the operand's domain (e.g. floats)."""


class GcdTimeout(AlgebraError, TimeoutError):
    """The active time box expired before the computation converged."""

    def __init__(self, description: str, elapsed_s: float, limit_s: Optional[float] = None) -> None:
        self.description = description
        self.elapsed_s = float(elapsed_s)
        self.limit_s = limit_s
        msg = f"{description}: timed out after {self.elapsed_s:.6f}s"
        if limit_s is not None:
            msg += f" (budget {float(limit_s):.6f}s)"
        super().__init__(msg)

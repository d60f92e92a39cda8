"""Time box: a cooperative deadline for one top-level GCD computation.

The active box lives in a ContextVar, so a deadline is visible only inside the
dynamic extent that established it. Threads and asyncio tasks each see their
own box; nested boxes are restored on exit and never extend an enclosing
deadline.

Lifecycle per box:
  IDLE → RUNNING → (CONVERGED | TIMED_OUT | FAILED)
RUNNING self-loops once per ``check_or_fail`` step.

Timing uses a monotonic microsecond clock.
"""
from __future__ import annotations

import time
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterator, Optional, TypeVar

from algebra.errors import GcdTimeout

T = TypeVar("T")


class BudgetStatus(Enum):
    IDLE = auto()
    RUNNING = auto()
    CONVERGED = auto()
    TIMED_OUT = auto()
    FAILED = auto()


def _now_us() -> int:
    return int(time.monotonic_ns() // 1_000)


@dataclass
class TimeBox:
    duration_s: Optional[float]
    description: str = "gcd"
    status: BudgetStatus = BudgetStatus.IDLE
    started_us: Optional[int] = None
    deadline_us: Optional[int] = None
    steps: int = 0

    def start(self, parent: Optional["TimeBox"] = None) -> None:
        if self.status is not BudgetStatus.IDLE:
            raise RuntimeError(f"time box already started: {self.status.name}")
        self.started_us = _now_us()
        if self.duration_s is not None:
            self.deadline_us = self.started_us + int(float(self.duration_s) * 1_000_000)
        if parent is not None and parent.deadline_us is not None:
            if self.deadline_us is None or parent.deadline_us < self.deadline_us:
                self.deadline_us = parent.deadline_us
        self.status = BudgetStatus.RUNNING

    def elapsed_s(self) -> float:
        if self.started_us is None:
            return 0.0
        return (_now_us() - self.started_us) / 1_000_000

    def expired(self) -> bool:
        return self.deadline_us is not None and _now_us() >= self.deadline_us

    def step(self, description: str) -> None:
        self.steps += 1
        if self.expired():
            self.status = BudgetStatus.TIMED_OUT
            raise GcdTimeout(f"{self.description}: {description}", self.elapsed_s(), self.duration_s)


_ACTIVE: ContextVar[Optional[TimeBox]] = ContextVar("polygcd_time_box", default=None)


def _validate_duration(duration_s: Optional[float]) -> Optional[float]:
    if duration_s is None:
        return None
    d = float(duration_s)
    if d != d or d < 0.0:
        raise ValueError(f"time budget must be a non-negative number of seconds, got {duration_s!r}")
    return d


@contextmanager
def time_budget(duration_s: Optional[float], description: str = "gcd") -> Iterator[TimeBox]:
    """
    Establish a deadline of ``duration_s`` seconds for the enclosed block.

    ``None`` tracks status and steps without imposing a deadline.
    """
    box = TimeBox(duration_s=_validate_duration(duration_s), description=description)
    box.start(parent=_ACTIVE.get())
    token = _ACTIVE.set(box)
    try:
        yield box
    except GcdTimeout:
        box.status = BudgetStatus.TIMED_OUT
        raise
    except BaseException:
        box.status = BudgetStatus.FAILED
        raise
    else:
        box.status = BudgetStatus.CONVERGED
    finally:
        _ACTIVE.reset(token)


def with_time_budget(duration_s: Optional[float], thunk: Callable[[], T], description: str = "gcd") -> T:
    with time_budget(duration_s, description):
        return thunk()


def current() -> Optional[TimeBox]:
    return _ACTIVE.get()


def expired() -> bool:
    box = _ACTIVE.get()
    return box is not None and box.expired()


def check_or_fail(description: str) -> None:
    """Raise GcdTimeout if the active time box has expired; no-op without one."""
    box = _ACTIVE.get()
    if box is not None:
        box.step(description)


__all__ = [
    "BudgetStatus",
    "TimeBox",
    "time_budget",
    "with_time_budget",
    "current",
    "expired",
    "check_or_fail",
]

"""Logging utilities for the GCD engine.

Invariants
- Idempotent handler installation per logger.
- Library modules log through ``logging.getLogger(__name__)`` under the
  ``polygcd`` namespace; nothing is printed unless an embedder installs a
  handler (``get_logger`` does that for scripts and the bench harness).
- Metric values must be finite numbers.

Public API
- get_logger(name="polygcd", level=logging.INFO) -> logging.Logger
- log_metric(name, value, logger=None) -> None
- log_metrics(metrics: dict[str, float], logger=None) -> None
"""
from __future__ import annotations

import logging
import math
from typing import Mapping, Optional


def get_logger(name: str = "polygcd", level: int = logging.INFO) -> logging.Logger:
    """
    Return a configured logger with a concise formatter.

    Idempotent: installs at most one StreamHandler marked by _polygcd_handler.
    """
    logger = logging.getLogger(name)
    logger.setLevel(int(level))

    has_handler = any(getattr(h, "_polygcd_handler", False) for h in logger.handlers)
    if not has_handler:
        handler = logging.StreamHandler()
        handler._polygcd_handler = True  # type: ignore[attr-defined]
        handler.setLevel(int(level))
        formatter = logging.Formatter(
            fmt="%(asctime)s %(name)s %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def _ensure_finite_float(x: object, name: str) -> float:
    try:
        val = float(x)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise TypeError(f"{name} must be a real number convertible to float") from e
    if not math.isfinite(val):
        raise ValueError(f"{name} must be finite, got {val}")
    return val


def _format_float(x: float) -> str:
    return f"{x:.10g}"


def log_metric(name: str, value: float, logger: Optional[logging.Logger] = None) -> None:
    """
    Log one engine counter (e.g. ``gcd_timeouts``) as ``metric name=value``.

    Defaults to the ``polygcd`` logger.
    """
    if not isinstance(name, str) or not name:
        raise ValueError("name must be a non-empty string")
    v = _ensure_finite_float(value, "value")
    lg = logger if logger is not None else logging.getLogger("polygcd")
    lg.info(f"metric {name}={_format_float(v)}")


def log_metrics(metrics: Mapping[str, float], logger: Optional[logging.Logger] = None) -> None:
    """
    Log a counter snapshot on one line: ``metrics cache_hits=3 cache_misses=1 ...``.

    Sink for ``GcdStats.log()``. Names are sorted.
    """
    if not isinstance(metrics, Mapping) or not metrics:
        raise ValueError("counter snapshot must be a non-empty mapping")
    if not all(isinstance(k, str) and k for k in metrics):
        raise ValueError("counter names must be non-empty strings")
    parts = [f"{k}={_format_float(_ensure_finite_float(metrics[k], k))}" for k in sorted(metrics)]
    lg = logger if logger is not None else logging.getLogger("polygcd")
    lg.info("metrics " + " ".join(parts))


__all__ = ["get_logger", "log_metric", "log_metrics"]

# xirr_solver/core/finance/errors.py
"""
Typed errors + utilities for the XIRR solver.

Exports
-------
- XirrError, ValidationError, ConvergenceError, DivergenceError
- XIRR_ERRORS
- error_for_kind(kind, message)
- solver_error_guard()

The solver never lets these escape `solve()`; they are raised internally and
folded into an `XirrResult`. Callers who prefer exceptions can get them back via
`XirrResult.raise_for_error()`.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Literal

ErrorKind = Literal["validation", "convergence", "divergence"]

# =========================
# Exception types
# =========================


class XirrError(ValueError):
    """Base class for XIRR computation failures."""

    kind: ErrorKind

    def __init__(self, message: str = "", *, iterations: int = 0) -> None:
        super().__init__(message)
        self.iterations = iterations


class ValidationError(XirrError):
    """Schedule is malformed or cannot have a rate (too short, single-signed, zero span)."""

    kind: ErrorKind = "validation"


class ConvergenceError(XirrError):
    """Iteration cap reached before NPV fell within tolerance. A different guess may help."""

    kind: ErrorKind = "convergence"


class DivergenceError(XirrError):
    """Iterates left the valid domain (rate <= -100%, flat slope, overflow). Do not retry the same guess."""

    kind: ErrorKind = "divergence"


# Selector tuple for grouped exception handling
XIRR_ERRORS = (
    ValidationError,
    ConvergenceError,
    DivergenceError,
)

_BY_KIND: dict[str, type[XirrError]] = {cls.kind: cls for cls in XIRR_ERRORS}


def error_for_kind(kind: str, message: str = "") -> XirrError:
    """Rebuild the exception instance matching a result's error kind."""
    try:
        return _BY_KIND[kind](message)
    except KeyError:
        raise ValueError(f"Unknown XIRR error kind: {kind!r}") from None


@contextmanager
def solver_error_guard(*, iterations: int = 0) -> Iterator[None]:
    """
    Map arithmetic blow-ups inside an iteration to DivergenceError.

    OverflowError/ZeroDivisionError come from extreme rates; ValueError covers
    math domain errors and fsum() meeting +inf and -inf together.
    """
    try:
        yield
    except XIRR_ERRORS:
        raise
    except (OverflowError, ZeroDivisionError, ValueError) as exc:
        raise DivergenceError(f"{type(exc).__name__}: {exc}", iterations=iterations) from exc


__all__ = [
    "ErrorKind",
    "XirrError",
    "ValidationError",
    "ConvergenceError",
    "DivergenceError",
    "XIRR_ERRORS",
    "error_for_kind",
    "solver_error_guard",
]

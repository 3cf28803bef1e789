# xirr_solver/core/finance/__init__.py

from .errors import (
    XIRR_ERRORS,
    ConvergenceError,
    DivergenceError,
    ValidationError,
    XirrError,
    error_for_kind,
    solver_error_guard,
)
from .xirr import XirrResult, solve, validate_schedule, xnpv, xnpv_derivative, year_fraction

__all__ = [
    "solve",
    "xnpv",
    "xnpv_derivative",
    "year_fraction",
    "validate_schedule",
    "XirrResult",
    "XirrError",
    "ValidationError",
    "ConvergenceError",
    "DivergenceError",
    "XIRR_ERRORS",
    "error_for_kind",
    "solver_error_guard",
]

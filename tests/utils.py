# tests/utils.py
"""
Single source of truth for test data, factories, and canonical payloads.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from xirr_solver.schemas.models import CashFlow, Schedule, SolverOptions

# -----------------------------
# Global defaults (edit once)
# -----------------------------

DAY_ZERO = date(2023, 1, 1)
ONE_YEAR = timedelta(days=365)
DEFAULT_OUTFLOW = -1000.0

# Environment variables the inputs loader reads; cleared for every test
XIRR_ENV_VARS = ("XIRR_GUESS", "XIRR_MAX_ITERATIONS", "XIRR_TOLERANCE", "XIRR_DEBUG", "XIRR_LOG_PATH")


# -----------------------------
# Schedule factories
# -----------------------------


def years_after(n: float, start: date = DAY_ZERO) -> date:
    """Date exactly n * 365 days after start (n may be fractional)."""
    return start + timedelta(days=round(365 * n))


def make_schedule(pairs: list[tuple[date, float]]) -> Schedule:
    return Schedule(flows=tuple(CashFlow(date=d, amount=a) for d, a in pairs))


def make_one_period_schedule(rate: float, outflow: float = DEFAULT_OUTFLOW) -> Schedule:
    """Outflow at day zero and outflow * (1 + rate) back exactly one 365-day year later."""
    return make_schedule([(DAY_ZERO, outflow), (DAY_ZERO + ONE_YEAR, -outflow * (1.0 + rate))])


def make_multi_year_schedule(final_inflow: float = 900.0) -> Schedule:
    """-1000 today, +300 after one year, `final_inflow` after two."""
    return make_schedule(
        [
            (DAY_ZERO, -1000.0),
            (years_after(1), 300.0),
            (years_after(2), final_inflow),
        ]
    )


def make_no_root_schedule() -> Schedule:
    """
    Alternating large flows whose NPV stays positive for every rate > -100%:
    1000 - 3000v + 3000v^2 has its minimum (250) at v = 0.5.
    """
    return make_schedule(
        [
            (DAY_ZERO, 1000.0),
            (years_after(1), -3000.0),
            (years_after(2), 3000.0),
        ]
    )


def make_options(**overrides: Any) -> SolverOptions:
    return SolverOptions(**overrides)


# -----------------------------
# Payload factories
# -----------------------------


def make_payload(rate: float = 0.10, **extra: Any) -> dict[str, Any]:
    """JSON-style tool payload for a one-period schedule at `rate`."""
    payload: dict[str, Any] = {
        "cashflows": [
            {"date": DAY_ZERO.isoformat(), "amount": DEFAULT_OUTFLOW},
            {"date": (DAY_ZERO + ONE_YEAR).isoformat(), "amount": -DEFAULT_OUTFLOW * (1.0 + rate)},
        ]
    }
    payload.update(extra)
    return payload


__all__ = [
    "DAY_ZERO",
    "ONE_YEAR",
    "DEFAULT_OUTFLOW",
    "XIRR_ENV_VARS",
    "years_after",
    "make_schedule",
    "make_one_period_schedule",
    "make_multi_year_schedule",
    "make_no_root_schedule",
    "make_options",
    "make_payload",
]

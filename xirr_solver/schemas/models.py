# xirr_solver/schemas/models.py

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# =========================
# Cash flows
# =========================


class CashFlow(BaseModel):
    """
    One dated cash movement. Positive amounts are inflows, negative amounts are outflows.
    """

    model_config = ConfigDict(frozen=True)

    date: dt.date = Field(..., description="Calendar date of the cash flow. Datetimes are truncated to their date.")
    amount: float = Field(..., allow_inf_nan=False, description="Signed amount (currency units). Must be finite.")

    @field_validator("date", mode="before")
    @classmethod
    def _truncate_datetime(cls, v: Any) -> Any:
        if isinstance(v, dt.datetime):
            return v.date()
        return v

    @field_validator("amount", mode="before")
    @classmethod
    def _decimal_to_float(cls, v: Any) -> Any:
        if isinstance(v, Decimal):
            return float(v)
        return v


class Schedule(BaseModel):
    """
    Immutable sequence of cash flows owned by a single computation.

    Only types are validated here. Business preconditions (two or more entries,
    mixed signs, non-zero span) are checked by the solver so a violation comes
    back as a result instead of blowing up at construction time.
    """

    model_config = ConfigDict(frozen=True)

    flows: tuple[CashFlow, ...] = Field(default_factory=tuple, description="Cash flows in caller order.")

    @classmethod
    def from_pairs(cls, pairs: Iterable[Any]) -> Schedule:
        """Build from `(date, amount)` pairs, `CashFlow` objects or `{"date", "amount"}` dicts."""
        flows: list[Any] = []
        for item in pairs:
            if isinstance(item, CashFlow | dict):
                flows.append(item)
            else:
                when, amount = item
                flows.append({"date": when, "amount": amount})
        return cls.model_validate({"flows": flows})

    def __len__(self) -> int:
        return len(self.flows)

    @property
    def amounts(self) -> list[float]:
        return [cf.amount for cf in self.flows]

    @property
    def earliest(self) -> dt.date | None:
        return min((cf.date for cf in self.flows), default=None)

    @property
    def latest(self) -> dt.date | None:
        return max((cf.date for cf in self.flows), default=None)

    @property
    def span_days(self) -> int:
        if not self.flows:
            return 0
        return (self.latest - self.earliest).days  # type: ignore[operator]

    @property
    def has_mixed_signs(self) -> bool:
        return any(a > 0 for a in self.amounts) and any(a < 0 for a in self.amounts)


# =========================
# Solver configuration
# =========================


class SolverOptions(BaseModel):
    """Tuning knobs for a single XIRR computation."""

    model_config = ConfigDict(frozen=True)

    guess: float = Field(0.1, gt=-1.0, allow_inf_nan=False, description="Initial rate estimate (0.1 = 10%).")
    max_iterations: int = Field(50, ge=1, description="Newton steps allowed before giving up.")
    tolerance: float = Field(
        1e-7, gt=0, description="Converged once |NPV(rate)| < tolerance * max(1, largest |amount|) in the schedule."
    )
    min_derivative: float = Field(
        1e-12, gt=0, description="Slopes with a smaller magnitude are treated as flat and abort the solve."
    )
    days_per_year: float = Field(365.0, gt=0, description="Day-count denominator used for year fractions.")

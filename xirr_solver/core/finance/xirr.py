# xirr_solver/core/finance/xirr.py

from __future__ import annotations

import datetime as dt
import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from xirr_solver.core.finance.errors import (
    ConvergenceError,
    DivergenceError,
    ErrorKind,
    ValidationError,
    XirrError,
    error_for_kind,
    solver_error_guard,
)
from xirr_solver.core.logs import get_logger
from xirr_solver.schemas.models import Schedule, SolverOptions

ScheduleLike = Schedule | Iterable[Any]


@dataclass(frozen=True)
class XirrResult:
    """
    Outcome of one solve() call.

    Attributes:
        rate (float | None): Annualized rate as a fraction (0.1534 = 15.34%); None on failure.
        iterations (int): Newton steps taken.
        error (str | None): "validation", "convergence" or "divergence" on failure.
        message (str): Human-readable failure reason (empty on success).
    """

    rate: float | None
    iterations: int = 0
    error: ErrorKind | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def percent(self) -> float | None:
        return None if self.rate is None else self.rate * 100.0

    def raise_for_error(self) -> float:
        """Return the rate, or raise the XirrError subclass matching the failure."""
        if self.error is not None:
            raise error_for_kind(self.error, self.message)
        if self.rate is None:
            raise ValidationError("Result carries neither a rate nor an error.")
        return self.rate

    @classmethod
    def failure(cls, exc: XirrError) -> XirrResult:
        return cls(rate=None, iterations=exc.iterations, error=exc.kind, message=str(exc))


# =========================
# NPV building blocks
# =========================


def year_fraction(start: dt.date, end: dt.date, days_per_year: float = 365.0) -> float:
    """Actual days between two dates over a fixed-length year."""
    return (end - start).days / days_per_year


def _terms(schedule: Schedule, days_per_year: float) -> list[tuple[float, float]]:
    """(amount, t) pairs with t measured from the earliest date in the schedule."""
    t0 = schedule.earliest
    if t0 is None:
        return []
    return [(cf.amount, year_fraction(t0, cf.date, days_per_year)) for cf in schedule.flows]


def _npv(terms: list[tuple[float, float]], rate: float) -> float:
    base = 1.0 + rate
    return math.fsum(a / base**t for a, t in terms)


def _dnpv(terms: list[tuple[float, float]], rate: float) -> float:
    # d/dr of a * (1+r)^-t; t == 0 terms are constant
    base = 1.0 + rate
    return math.fsum(-t * a / base ** (t + 1.0) for a, t in terms if t != 0.0)


def xnpv(schedule: ScheduleLike, rate: float, *, days_per_year: float = 365.0) -> float:
    """
    Net present value of a dated schedule at an annual rate.

    NPV(r) = sum_i a_i / (1 + r)^t_i, t_i in years since the earliest date.
    """
    if rate <= -1.0:
        raise ValueError("rate must be > -1.0 (a -100% rate has no present value)")
    return _npv(_terms(_coerce(schedule), days_per_year), rate)


def xnpv_derivative(schedule: ScheduleLike, rate: float, *, days_per_year: float = 365.0) -> float:
    """Closed-form slope of xnpv() with respect to the rate."""
    if rate <= -1.0:
        raise ValueError("rate must be > -1.0 (a -100% rate has no present value)")
    return _dnpv(_terms(_coerce(schedule), days_per_year), rate)


# =========================
# Validation
# =========================


def _coerce(schedule: ScheduleLike) -> Schedule:
    if isinstance(schedule, Schedule):
        return schedule
    try:
        return Schedule.from_pairs(schedule)
    except PydanticValidationError as e:
        raise ValidationError(f"Malformed cash flow schedule: {e.error_count()} invalid field(s)") from e
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Malformed cash flow schedule: {e}") from e


def validate_schedule(schedule: Schedule) -> None:
    """Raise ValidationError unless the schedule can possibly have an XIRR."""
    if len(schedule) < 2:
        raise ValidationError(f"Schedule needs at least 2 cash flows, got {len(schedule)}.")
    if not schedule.has_mixed_signs:
        raise ValidationError("Schedule needs at least one positive and one negative amount.")
    if schedule.span_days == 0:
        raise ValidationError("All cash flows fall on the same date; the schedule spans zero days.")


def _resolve_options(
    options: SolverOptions | None,
    guess: float | None,
    max_iterations: int | None,
    tolerance: float | None,
) -> SolverOptions:
    base = options or SolverOptions()
    updates: dict[str, Any] = {}
    if guess is not None:
        updates["guess"] = guess
    if max_iterations is not None:
        updates["max_iterations"] = max_iterations
    if tolerance is not None:
        updates["tolerance"] = tolerance
    if not updates:
        return base
    try:
        # model_copy skips validation; re-validate the merged payload
        return SolverOptions.model_validate({**base.model_dump(), **updates})
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid solver options: {e.error_count()} invalid field(s)") from e


# =========================
# Solver
# =========================


def _npv_threshold(terms: list[tuple[float, float]], tolerance: float) -> float:
    """|NPV| cutoff scaled to the largest flow so big schedules (e.g. amounts in cents) stay reachable in float64."""
    return tolerance * max(1.0, max((abs(a) for a, _ in terms), default=0.0))


def _newton(terms: list[tuple[float, float]], opts: SolverOptions) -> tuple[float, int]:
    """
    Newton-Raphson on NPV(r) = 0.

    Every iterate is checked, including the one produced by the last allowed step,
    so `steps` never exceeds max_iterations and a capped run agrees with an uncapped one.

    Returns:
        (rate, steps taken)

    Raises:
        DivergenceError: rate <= -100%, flat slope or non-finite iterate.
        ConvergenceError: max_iterations steps without |NPV| under the threshold.
    """
    log = get_logger(__name__)
    threshold = _npv_threshold(terms, opts.tolerance)
    r = opts.guess
    step = 0
    while True:
        with solver_error_guard(iterations=step):
            f = _npv(terms, r)
        if not math.isfinite(f):
            raise DivergenceError(f"Non-finite NPV at rate {r:.6g}.", iterations=step)
        if abs(f) < threshold:
            return r, step
        if step >= opts.max_iterations:
            raise ConvergenceError(
                f"No convergence within {opts.max_iterations} iteration(s) (last rate {r:.6g}); try another guess.",
                iterations=step,
            )

        with solver_error_guard(iterations=step):
            df = _dnpv(terms, r)
        if not math.isfinite(df):
            raise DivergenceError(f"Non-finite NPV slope at rate {r:.6g}.", iterations=step)
        if abs(df) < opts.min_derivative:
            raise DivergenceError(f"NPV slope {df:.3g} is effectively flat at rate {r:.6g}.", iterations=step)

        r_next = r - f / df
        step += 1
        if not math.isfinite(r_next):
            raise DivergenceError(f"Newton step from rate {r:.6g} is not finite.", iterations=step)
        if 1.0 + r_next <= 0.0:
            raise DivergenceError(f"Rate fell to {r_next:.6g} (<= -100%) after {step} step(s).", iterations=step)
        log.debug("step=%d rate=%.10g npv=%.6g dnpv=%.6g next=%.10g", step, r, f, df, r_next)
        r = r_next


def solve(
    schedule: ScheduleLike,
    guess: float | None = None,
    *,
    max_iterations: int | None = None,
    tolerance: float | None = None,
    options: SolverOptions | None = None,
) -> XirrResult:
    """
    Compute the XIRR of a dated cash-flow schedule.

    Accepts either a Schedule or any iterable of CashFlow / (date, amount) pairs /
    {"date", "amount"} dicts. Dates need not be sorted; the earliest one is day zero.

    Keyword overrides (guess, max_iterations, tolerance) take precedence over `options`.
    The default guess is 0.1 (10%).

    Returns:
        XirrResult. Failures are returned, never raised:
          - "validation": malformed input, < 2 flows, one-signed amounts, zero span
          - "convergence": iteration cap reached
          - "divergence": unstable trajectory (retrying the same guess is pointless)
    """
    try:
        opts = _resolve_options(options, guess, max_iterations, tolerance)
        sched = _coerce(schedule)
        validate_schedule(sched)
        terms = _terms(sched, opts.days_per_year)
        rate, steps = _newton(terms, opts)
    except XirrError as exc:
        get_logger(__name__).info("XIRR %s failure: %s", exc.kind, exc)
        return XirrResult.failure(exc)

    return XirrResult(rate=rate, iterations=steps)


__all__ = [
    "XirrResult",
    "year_fraction",
    "xnpv",
    "xnpv_derivative",
    "validate_schedule",
    "solve",
]

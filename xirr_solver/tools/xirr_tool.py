# xirr_solver/tools/xirr_tool.py

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from xirr_solver.core.finance import XirrResult, solve
from xirr_solver.core.finance.errors import ValidationError
from xirr_solver.core.logs import get_logger
from xirr_solver.inputs.inputs import XirrRequest
from xirr_solver.schemas.models import SolverOptions

_OPTION_KEYS = ("guess", "max_iterations", "tolerance")


def _request_from_payload(payload: Mapping[str, Any] | XirrRequest) -> XirrRequest:
    """
    Normalize an incoming record that may be:
      - an XirrRequest instance,
      - a structured dict {"cashflows": [...], "options": {...}},
      - or a flat dict {"cashflows": [...], "guess": ..., "max_iterations": ..., "tolerance": ...}.

    Flat option keys win over the nested "options" block.
    """
    if isinstance(payload, XirrRequest):
        return payload

    opts: dict[str, Any] = dict(payload.get("options") or {})
    for key in _OPTION_KEYS:
        if payload.get(key) is not None:
            opts[key] = payload[key]

    return XirrRequest.model_validate(
        {
            "cashflows": payload.get("cashflows") or [],
            "options": SolverOptions.model_validate(opts),
        }
    )


def _to_record(result: XirrResult) -> dict[str, Any]:
    """Flatten an XirrResult into a JSON-friendly dict for the host system to store/display."""
    return {
        "ok": result.ok,
        "rate": result.rate,
        "rate_pct": round(result.percent, 4) if result.percent is not None else None,
        "iterations": result.iterations,
        "error": result.error,
        "message": result.message,
    }


def run_xirr_tool(payload: Mapping[str, Any] | XirrRequest) -> dict[str, Any]:
    """
    Pipeline-callable XIRR entrypoint.

    Args:
        payload: XirrRequest or dict with "cashflows" ([{"date", "amount"}, ...]) and optional
                 "guess" / "max_iterations" / "tolerance" (flat or under "options").

    Returns:
        {"ok", "rate", "rate_pct", "iterations", "error", "message"}.
        Malformed payloads come back as error="validation"; nothing is raised.
    """
    try:
        req = _request_from_payload(payload)
    except PydanticValidationError as e:
        msg = f"Malformed XIRR request: {e.error_count()} invalid field(s)"
        get_logger(__name__).info(msg)
        return _to_record(XirrResult.failure(ValidationError(msg)))
    except (AttributeError, TypeError) as e:
        msg = f"Malformed XIRR request: {e}"
        get_logger(__name__).info(msg)
        return _to_record(XirrResult.failure(ValidationError(msg)))

    return _to_record(solve(req.schedule, options=req.options))


def run_xirr_batch(payloads: Iterable[Mapping[str, Any] | XirrRequest]) -> list[dict[str, Any]]:
    """Solve independent records one by one; one record's failure never affects another."""
    results = [run_xirr_tool(p) for p in payloads]
    failed = sum(1 for r in results if not r["ok"])
    if failed:
        get_logger(__name__).info("XIRR batch: %d of %d record(s) failed", failed, len(results))
    return results

# xirr_solver/inputs/inputs.py
"""
Inputs loader for XIRR requests.

Goals
-----
- File-first request payloads validated with Pydantic.
- Accept a bare list of [date, amount] pairs as well as the structured shape.
- Minimal environment-variable overrides for solver tuning in CI/batch jobs.

Supported JSON shapes
---------------------
1) Bare (root = list of pairs)
   [["2024-01-01", -1000], ["2025-01-01", 1100]]

2) Structured (root = XirrRequest)
   {
     "cashflows": [
       {"date": "2024-01-01", "amount": -1000},
       {"date": "2025-01-01", "amount": 1100}
     ],
     "options": {"guess": 0.1, "max_iterations": 50, "tolerance": 1e-7}
   }

Environment overrides (optional)
--------------------------------
- XIRR_GUESS           -> XirrRequest.options.guess (float)
- XIRR_MAX_ITERATIONS  -> XirrRequest.options.max_iterations (int)
- XIRR_TOLERANCE       -> XirrRequest.options.tolerance (float)

Unparseable or out-of-range override values are ignored.

Public API
----------
- class InputsLoader:
    - load(path: str | Path | None) -> XirrRequest
    - load_json(text: str) -> XirrRequest
    - with_overrides(req, **kwargs) -> XirrRequest (non-destructive copies)
- function load_inputs(path: str | Path | None) -> XirrRequest  (convenience)
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from xirr_solver.core.logs import get_logger
from xirr_solver.schemas.models import CashFlow, Schedule, SolverOptions

# ----------------------------
# Pydantic models for structured inputs
# ----------------------------


class XirrRequest(BaseModel):
    """
    Full request payload.

    Attributes:
        cashflows: Dated cash flows, any order.
        options:   Solver tuning for this request.
    """

    cashflows: list[CashFlow] = Field(default_factory=list, description="Dated cash flows (any order).")
    options: SolverOptions = Field(default_factory=SolverOptions, description="Solver tuning for this request.")

    @property
    def schedule(self) -> Schedule:
        return Schedule(flows=tuple(self.cashflows))


# ----------------------------
# Loader
# ----------------------------


@dataclass(frozen=True)
class InputsLoader:
    """
    File-first request loader with light env overrides.

    Default search (when path=None):
        1) ./data/sample/xirr.json
        2) ./xirr.json
    """

    env_prefix: str = "XIRR_"

    # ---------- Public API ----------

    def load(self, path: str | Path | None = None) -> XirrRequest:
        """Load a request from a JSON file. If path is None, try defaults."""
        p = self._resolve_path(path)
        raw = self._read_json_file(p)
        return self._finish(raw)

    def load_json(self, text: str) -> XirrRequest:
        """Load a request from a JSON string (bare or structured shape)."""
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON payload: {e}") from e
        return self._finish(raw)

    def with_overrides(
        self,
        req: XirrRequest,
        *,
        guess: float | None = None,
        max_iterations: int | None = None,
        tolerance: float | None = None,
    ) -> XirrRequest:
        """
        Return a *new* XirrRequest with provided non-null option overrides applied.
        Does not mutate the original instance.
        """
        updates: dict[str, Any] = {}
        if guess is not None:
            updates["guess"] = guess
        if max_iterations is not None:
            updates["max_iterations"] = max_iterations
        if tolerance is not None:
            updates["tolerance"] = tolerance

        if not updates:
            return req

        try:
            opts = SolverOptions.model_validate({**req.options.model_dump(), **updates})
        except ValidationError as e:
            raise ValueError(f"Invalid solver overrides:\n{e}") from e
        return req.model_copy(update={"options": opts})

    # ---------- Internals ----------

    def _finish(self, raw: Any) -> XirrRequest:
        data = self._maybe_translate_bare(raw)
        req = self._parse_root(data)
        return self._apply_env_overrides(req)

    def _resolve_path(self, path: str | Path | None) -> Path:
        if path is not None:
            p = Path(path)
            if not p.exists():
                raise FileNotFoundError(f"Inputs file not found: {p}")
            return p

        for candidate in (Path("data/sample/xirr.json"), Path("xirr.json")):
            if candidate.exists():
                return candidate
        raise FileNotFoundError(
            "No inputs path provided and no default inputs found. Looked for ./data/sample/xirr.json and ./xirr.json."
        )

    def _read_json_file(self, p: Path) -> Any:
        if p.suffix.lower() != ".json":
            raise ValueError(f"Unsupported inputs format for {p.name}; only .json is supported.")
        try:
            return json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {p}: {e}") from e

    def _maybe_translate_bare(self, raw: Any) -> dict[str, Any]:
        """Wrap a bare list of [date, amount] pairs into the structured shape."""
        if isinstance(raw, dict):
            return raw
        if isinstance(raw, list):
            flows: list[Any] = []
            for item in raw:
                if isinstance(item, list | tuple) and len(item) == 2:
                    flows.append({"date": item[0], "amount": item[1]})
                else:
                    flows.append(item)
            return {"cashflows": flows}
        raise ValueError(f"Unsupported inputs root: expected object or list, got {type(raw).__name__}.")

    def _parse_root(self, data: dict[str, Any]) -> XirrRequest:
        try:
            return XirrRequest.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Inputs validation failed:\n{e}") from e

    def _apply_env_overrides(self, req: XirrRequest) -> XirrRequest:
        prefix = self.env_prefix
        updates: dict[str, Any] = {}

        for key, cast in (("GUESS", float), ("MAX_ITERATIONS", int), ("TOLERANCE", float)):
            value = os.getenv(f"{prefix}{key}")
            if not value:
                continue
            try:
                updates[key.lower()] = cast(value)
            except ValueError:
                get_logger(__name__).warning("Ignoring unparseable %s%s=%r", prefix, key, value)

        if not updates:
            return req

        try:
            opts = SolverOptions.model_validate({**req.options.model_dump(), **updates})
        except ValidationError:
            # Out-of-range env values: keep the validated options
            get_logger(__name__).warning("Ignoring out-of-range solver overrides from environment: %s", updates)
            return req
        return req.model_copy(update={"options": opts})


# ----------------------------
# Convenience function
# ----------------------------


def load_inputs(path: str | Path | None = None) -> XirrRequest:
    """Convenience wrapper for one-shot callers."""
    return InputsLoader().load(path)

# xirr_solver/tools/__init__.py
"""
XIRR solver — tools package

Exports only modules that live under `xirr_solver/tools`:
  - run_xirr_tool / run_xirr_batch  (from .xirr_tool)

The solver itself should be imported from `xirr_solver.core.finance`.
"""

from __future__ import annotations

from .xirr_tool import run_xirr_batch, run_xirr_tool

__all__ = ["run_xirr_tool", "run_xirr_batch"]

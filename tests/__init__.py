# tests/__init__.py
"""
Expose common test utilities so tests can import directly:
    from tests import make_schedule, make_one_period_schedule
"""

from .utils import make_one_period_schedule, make_payload, make_schedule

__all__ = ["make_schedule", "make_one_period_schedule", "make_payload"]

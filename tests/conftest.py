# tests/conftest.py
from __future__ import annotations

import pytest

from tests.utils import (
    XIRR_ENV_VARS,
    make_multi_year_schedule,
    make_no_root_schedule,
    make_one_period_schedule,
    make_payload,
)


# -------- Isolate from the caller's environment --------
@pytest.fixture(autouse=True)
def _clean_xirr_env(monkeypatch):
    for name in XIRR_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


# -------- Schedule fixtures --------
@pytest.fixture
def ten_percent_schedule():
    return make_one_period_schedule(0.10)


@pytest.fixture
def one_period_schedule():
    """Factory: one-period schedule whose exact XIRR is `rate`."""

    def _factory(rate: float, outflow: float = -1000.0):
        return make_one_period_schedule(rate, outflow=outflow)

    return _factory


@pytest.fixture
def multi_year_schedule():
    """Factory: three-flow schedule with an adjustable final inflow."""

    def _factory(final_inflow: float = 900.0):
        return make_multi_year_schedule(final_inflow=final_inflow)

    return _factory


@pytest.fixture
def no_root_schedule():
    return make_no_root_schedule()


# -------- Payload fixtures --------
@pytest.fixture
def payload_factory():
    """Callable factory for JSON-style tool payloads."""

    def _factory(rate: float = 0.10, **extra):
        return make_payload(rate, **extra)

    return _factory


# -------- Pytest markers --------
def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
    config.addinivalue_line("markers", "integration: marks integration tests")

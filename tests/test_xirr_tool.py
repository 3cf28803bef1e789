import pytest

from xirr_solver.inputs.inputs import XirrRequest
from xirr_solver.tools import run_xirr_batch, run_xirr_tool

RECORD_KEYS = {"ok", "rate", "rate_pct", "iterations", "error", "message"}


def test_tool_returns_json_friendly_record(payload_factory):
    out = run_xirr_tool(payload_factory(0.10))
    assert set(out) == RECORD_KEYS
    assert out["ok"] is True
    assert out["error"] is None
    assert out["message"] == ""
    assert out["rate"] == pytest.approx(0.10, abs=1e-6)
    assert out["rate_pct"] == pytest.approx(10.0, abs=1e-4)


def test_tool_accepts_request_model(payload_factory):
    req = XirrRequest.model_validate(payload_factory(0.5))
    out = run_xirr_tool(req)
    assert out["ok"]
    assert out["rate"] == pytest.approx(0.5, abs=1e-6)


def test_flat_option_keys_override_nested_options(payload_factory):
    payload = payload_factory(0.05, options={"max_iterations": 50}, max_iterations=1)
    out = run_xirr_tool(payload)
    assert out["ok"] is False
    assert out["error"] == "convergence"
    assert out["rate"] is None
    assert out["rate_pct"] is None


def test_tool_reports_divergence(payload_factory):
    out = run_xirr_tool(payload_factory(0.10, guess=1e9))
    assert out["error"] == "divergence"


@pytest.mark.parametrize(
    "payload",
    [
        {"cashflows": [{"date": "garbage", "amount": 1}, {"date": "2024-01-01", "amount": -1}]},
        {"cashflows": []},
        {},
        {"cashflows": [{"date": "2024-01-01", "amount": -1}], "guess": -7},
        ["not", "a", "mapping"],
    ],
)
def test_tool_turns_bad_payloads_into_validation_records(payload):
    out = run_xirr_tool(payload)  # type: ignore[arg-type]
    assert out["ok"] is False
    assert out["error"] == "validation"
    assert out["message"]


def test_batch_records_are_independent(payload_factory):
    good = payload_factory(0.10)
    bad = {"cashflows": [{"date": "2024-01-01", "amount": 5}, {"date": "2025-01-01", "amount": 5}]}
    results = run_xirr_batch([good, bad, good])
    assert [r["ok"] for r in results] == [True, False, True]
    assert results[1]["error"] == "validation"
    assert results[0] == results[2]


def test_batch_of_nothing():
    assert run_xirr_batch([]) == []

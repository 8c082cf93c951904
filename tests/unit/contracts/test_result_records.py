# tests/unit/contracts/test_result_records.py
"""Tests for Outcome, failure records and PropertyTestResult invariants."""

from __future__ import annotations

import json

import pytest

from propengine.contracts import (
    EXAMPLE_CASE,
    ConfigurationError,
    EngineError,
    ErrorCode,
    GenerationStats,
    InvariantCategory,
    InvariantViolation,
    Outcome,
    PropertyFailure,
    PropertyTestResult,
    ShrinkingResult,
    TestStatistics,
)


def _result(**overrides) -> PropertyTestResult:
    fields = {
        "test_name": "demo",
        "success": True,
        "total_tests": 10,
        "failures": (),
        "statistics": TestStatistics(passed=10),
        "shrinking_results": (),
        "invariant_violations": (),
        "execution_time_ms": 1.5,
        "seed": 42,
        "max_tests": 10,
    }
    fields.update(overrides)
    return PropertyTestResult(**fields)


class TestOutcome:
    def test_ok_defaults_to_true(self) -> None:
        outcome = Outcome.ok()
        assert outcome.is_success
        assert outcome.value is True
        assert outcome.holds

    def test_ok_false_is_success_but_does_not_hold(self) -> None:
        outcome = Outcome.ok(False)
        assert outcome.is_success
        assert not outcome.holds

    def test_ok_none_holds(self) -> None:
        """Only a literal False value is a negative verdict."""
        assert Outcome.ok(None).holds
        assert Outcome.ok(0).holds

    def test_fail_carries_error(self) -> None:
        outcome = Outcome.fail(ErrorCode.TIMEOUT, "too slow")
        assert not outcome.is_success
        assert outcome.error == EngineError(ErrorCode.TIMEOUT, "too slow")

    def test_from_exception(self) -> None:
        outcome = Outcome.from_exception(KeyError("k"), context="property")
        assert outcome.error is not None
        assert outcome.error.code == ErrorCode.INTERNAL_ERROR
        assert outcome.error.exception_type == "KeyError"
        assert outcome.error.message.startswith("property: ")

    def test_error_status_requires_error(self) -> None:
        with pytest.raises(ValueError, match="MUST provide"):
            Outcome(status="error")

    def test_success_status_rejects_error(self) -> None:
        with pytest.raises(ValueError, match="MUST NOT"):
            Outcome(status="success", error=EngineError(ErrorCode.TIMEOUT, "x"))

    def test_exception_without_message_uses_type_name(self) -> None:
        assert EngineError.from_exception(RuntimeError()).message == "RuntimeError"


class TestPropertyFailure:
    def test_example_sentinel(self) -> None:
        failure = PropertyFailure(EXAMPLE_CASE, (1,), EngineError(ErrorCode.PROPERTY_FALSIFIED, "no"))
        assert failure.is_example
        assert not failure.shrunk
        assert failure.counterexample == (1,)

    def test_minimal_counterexample_keeps_original_inputs(self) -> None:
        failure = PropertyFailure(3, (1500,), EngineError(ErrorCode.PROPERTY_FALSIFIED, "no"))
        shrunk = failure.with_minimal_counterexample((1000,))
        assert shrunk.inputs == (1500,)
        assert shrunk.minimal_counterexample == (1000,)
        assert shrunk.counterexample == (1000,)
        assert shrunk.shrunk
        assert not failure.shrunk


class TestStatisticsRecords:
    def test_rates_with_no_data(self) -> None:
        stats = TestStatistics()
        assert stats.cache_hit_rate == 0.0
        assert stats.generation.rejection_rate == 0.0
        assert stats.generation.average_size == 0.0

    def test_generation_rates(self) -> None:
        gen = GenerationStats(total_generated=10, valid_accepted=8, rejected=2, size_distribution={1: 1, 3: 1})
        assert gen.rejection_rate == pytest.approx(0.2)
        assert gen.average_size == pytest.approx(2.0)

    def test_size_distribution_keys_stringified(self) -> None:
        gen = GenerationStats(size_distribution={5: 2, 1: 1})
        assert gen.to_dict()["size_distribution"] == {"1": 1, "5": 2}


class TestPropertyTestResult:
    def test_success_must_match_failures(self) -> None:
        failure = PropertyFailure(0, (1,), EngineError(ErrorCode.PROPERTY_FALSIFIED, "no"))
        with pytest.raises(ValueError, match="contradicts"):
            _result(success=True, failures=(failure,))
        with pytest.raises(ValueError, match="contradicts"):
            _result(success=False, failures=())

    def test_total_tests_bounded_by_max_tests(self) -> None:
        with pytest.raises(ValueError, match="total_tests"):
            _result(total_tests=11, max_tests=10)
        with pytest.raises(ValueError, match="total_tests"):
            _result(total_tests=-1)

    def test_first_failure(self) -> None:
        assert _result().first_failure is None

    def test_reproduction_names_seed(self) -> None:
        assert _result().reproduction() == "demo: replay with .with_seed(42).with_max_tests(10)"

    def test_to_dict_is_json_serializable(self) -> None:
        error = EngineError(ErrorCode.BUSINESS_RULE_VIOLATION, "quorum")
        failure = PropertyFailure(2, (object(),), error, output={"x": float("inf")})
        violation = InvariantViolation("quorum", InvariantCategory.BUSINESS_RULE, True, 2, (1,), "Invariant returned False")
        shrink = ShrinkingResult(2, False, (1,), (1,), 0, 3, False, error)
        result = _result(
            success=False,
            total_tests=3,
            failures=(failure,),
            shrinking_results=(shrink,),
            invariant_violations=(violation,),
        )

        payload = json.loads(json.dumps(result.to_dict()))
        assert payload["failures"][0]["error"]["code"] == "BUSINESS_RULE_VIOLATION"
        assert payload["invariant_violations"][0]["category"] == "business-rule"
        assert payload["seed"] == 42


class TestConfigurationError:
    def test_is_value_error_with_validation_code(self) -> None:
        error = ConfigurationError("bad", field="max_tests")
        assert isinstance(error, ValueError)
        assert error.code == ErrorCode.VALIDATION_ERROR
        assert error.field == "max_tests"

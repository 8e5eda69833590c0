"""Tests for jsreporter.models."""

from __future__ import annotations

import dataclasses

import pytest

from jsreporter.models import (
    ExpectationEvent,
    FailureRecord,
    Report,
    SpecEvent,
    SpecRecord,
    SuiteEvent,
    SuiteRecord,
    SuiteState,
)


class TestEventsFromDict:
    def test_suite_event_camel_case(self) -> None:
        event = SuiteEvent.from_dict(
            {"id": "suite1", "description": "A", "fullName": "A", "extra": [1, 2]}
        )
        assert event == SuiteEvent(id="suite1", description="A", full_name="A")

    def test_missing_id_raises(self) -> None:
        with pytest.raises(ValueError, match="missing 'id'"):
            SuiteEvent.from_dict({"description": "A"})
        with pytest.raises(ValueError, match="spec event"):
            SpecEvent.from_dict({"status": "passed"})

    def test_numeric_id_becomes_string(self) -> None:
        assert SpecEvent.from_dict({"id": 7}).id == "7"

    def test_spec_event_optional_counts_absent(self) -> None:
        event = SpecEvent.from_dict({"id": "spec0", "status": "passed"})
        assert event.total_expectations is None
        assert event.passed_expectations is None
        assert event.failed_expectations is None

    def test_spec_event_rejects_malformed_expectations(self) -> None:
        with pytest.raises(ValueError, match="'failedExpectations' must be a list, got int"):
            SpecEvent.from_dict({"id": "spec0", "failedExpectations": 5})
        with pytest.raises(ValueError, match="failed expectation must be an object, got str"):
            SpecEvent.from_dict({"id": "spec0", "failedExpectations": ["boom"]})
        with pytest.raises(ValueError, match="'passedExpectations' must be a list"):
            SpecEvent.from_dict({"id": "spec0", "passedExpectations": 3})
        with pytest.raises(ValueError, match="'totalExpectations' must be a number"):
            SpecEvent.from_dict({"id": "spec0", "totalExpectations": True})

    def test_suite_event_ignores_status(self) -> None:
        event = SuiteEvent.from_dict({"id": "suite1", "status": "finished"})
        assert not hasattr(event, "status")

    def test_spec_event_failed_expectations(self) -> None:
        event = SpecEvent.from_dict(
            {
                "id": "spec0",
                "status": "failed",
                "totalExpectations": 3,
                "passedExpectations": [{}, {}],
                "failedExpectations": [
                    {
                        "message": "Expected 1 to be 2.",
                        "stack": "at <anonymous>",
                        "expected": 2,
                        "actual": 1,
                        "matcherName": "toBe",
                    }
                ],
            }
        )
        assert event.total_expectations == 3
        assert len(event.passed_expectations or []) == 2
        assert event.failed_expectations == [
            ExpectationEvent(
                message="Expected 1 to be 2.",
                stack="at <anonymous>",
                expected=2,
                matcher_name="toBe",
            )
        ]


class TestSuiteState:
    def test_to_record_drops_transient_fields(self) -> None:
        state = SuiteState.from_event(SuiteEvent(id="suite1", description="A", full_name="A"))
        state.parent_id = "suite0"
        state.duration = 1500.0
        record = state.to_record()
        assert record == SuiteRecord(
            description="A", passed=True, duration=1500.0, duration_sec=1.5
        )
        names = {f.name for f in dataclasses.fields(record)}
        assert names.isdisjoint({"id", "parent_id", "full_name", "timer", "status"})


class TestRecordsToDict:
    def test_failure_wire_shape(self) -> None:
        failure = FailureRecord(message="boom", expected=2, matcher_name="toBe", stack="trace")
        assert failure.to_dict() == {
            "type": "expect",
            "expected": 2,
            "passed": False,
            "message": "boom",
            "matcherName": "toBe",
            "trace": {"stack": "trace"},
        }

    def test_report_wire_shape(self) -> None:
        spec = SpecRecord(
            description="t1",
            passed=True,
            skipped=False,
            duration=5.0,
            duration_sec=0.005,
            total_count=1,
            passed_count=1,
        )
        suite = SuiteRecord(
            description="A", passed=True, duration=10.0, duration_sec=0.01, specs=(spec,)
        )
        data = Report(passed=True, duration_sec=0.01, suites=(suite,)).to_dict()

        assert list(data) == ["passed", "durationSec", "suites"]
        assert list(data["suites"][0]) == [
            "description",
            "passed",
            "duration",
            "durationSec",
            "suites",
            "specs",
        ]
        assert data["suites"][0]["specs"][0] == {
            "description": "t1",
            "passed": True,
            "skipped": False,
            "duration": 5.0,
            "durationSec": 0.005,
            "totalCount": 1,
            "passedCount": 1,
            "failedCount": 0,
            "failures": [],
        }

    def test_records_are_frozen(self) -> None:
        report = Report(passed=True, duration_sec=0.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            report.passed = False  # type: ignore[misc]

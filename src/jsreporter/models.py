"""Data models for jsreporter.

Three layers live here:

* **Events** (``SuiteEvent``, ``SpecEvent``, ``ExpectationEvent``): the
  payloads a test engine hands to the lifecycle hooks.  Only the fields
  the reporter reads are modelled; anything else in a raw payload is
  ignored.
* **State** (``SuiteState``, ``SpecState``): mutable accumulators that
  collect fields across the start/done events of one entity.
* **Records** (``FailureRecord``, ``SpecRecord``, ``SuiteRecord``,
  ``Report``): the frozen, reportable result.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from jsreporter.timer import Timer

PENDING_STATUS = "pending"
PASSED_STATUS = "passed"
EXPECTATION_FAILURE = "expect"

MS_PER_SECOND = 1000.0


def _first_key(data: Mapping[str, Any], *keys: str) -> Any:
    """Return the value of the first key present in *data*, else ``None``."""
    for key in keys:
        if key in data:
            return data[key]
    return None


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _require_id(data: Mapping[str, Any], kind: str) -> str:
    value = data.get("id")
    if value is None:
        raise ValueError(f"{kind} event is missing 'id'")
    return str(value)


def merge_fields(target: Any, event: Any) -> None:
    """Copy every field set on *event* onto *target*.

    A field whose value is ``None`` counts as absent and leaves the
    target untouched.  Present fields overwrite; last written wins.
    """
    for f in fields(event):
        value = getattr(event, f.name)
        if value is not None:
            setattr(target, f.name, value)


# ── Inbound events ───────────────────────────────────────────────


@dataclass
class ExpectationEvent:
    """One failed expectation as reported by the engine."""

    message: str = ""
    stack: str = ""
    expected: Any = None
    matcher_name: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ExpectationEvent:
        return cls(
            message=str(data.get("message") or ""),
            stack=str(data.get("stack") or ""),
            expected=data.get("expected"),
            matcher_name=str(_first_key(data, "matcherName", "matcher_name") or ""),
        )


@dataclass
class SuiteEvent:
    """Payload of ``suiteStarted`` / ``suiteDone``."""

    id: str
    description: str | None = None
    full_name: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SuiteEvent:
        return cls(
            id=_require_id(data, "suite"),
            description=_optional_str(data.get("description")),
            full_name=_optional_str(_first_key(data, "fullName", "full_name")),
        )


@dataclass
class SpecEvent:
    """Payload of ``specStarted`` / ``specDone``.

    ``total_expectations`` and ``passed_expectations`` are optional
    upstream; the reporter treats their absence as zero.
    """

    id: str
    description: str | None = None
    full_name: str | None = None
    status: str | None = None
    failed_expectations: list[ExpectationEvent] | None = None
    total_expectations: int | None = None
    passed_expectations: list[Any] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SpecEvent:
        """Build a spec event from a raw payload.

        Raises:
            ValueError: If ``id`` is missing or an expectation field has
                the wrong shape.
        """
        spec_id = _require_id(data, "spec")
        failed_raw = _optional_list(data, spec_id, "failedExpectations", "failed_expectations")
        passed_raw = _optional_list(data, spec_id, "passedExpectations", "passed_expectations")
        return cls(
            id=spec_id,
            description=_optional_str(data.get("description")),
            full_name=_optional_str(_first_key(data, "fullName", "full_name")),
            status=_optional_str(data.get("status")),
            failed_expectations=(
                [_to_expectation(item, spec_id) for item in failed_raw]
                if failed_raw is not None
                else None
            ),
            total_expectations=_optional_count(
                _first_key(data, "totalExpectations", "total_expectations"), spec_id
            ),
            passed_expectations=passed_raw,
        )


def _optional_list(data: Mapping[str, Any], spec_id: str, *keys: str) -> list[Any] | None:
    value = _first_key(data, *keys)
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValueError(
            f"spec {spec_id!r}: '{keys[0]}' must be a list, got {type(value).__name__}"
        )
    return list(value)


def _optional_count(value: Any, spec_id: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(
            f"spec {spec_id!r}: 'totalExpectations' must be a number, got {type(value).__name__}"
        )
    return int(value)


def _to_expectation(item: Any, spec_id: str) -> ExpectationEvent:
    if isinstance(item, ExpectationEvent):
        return item
    if not isinstance(item, Mapping):
        raise ValueError(
            f"spec {spec_id!r}: failed expectation must be an object, got {type(item).__name__}"
        )
    return ExpectationEvent.from_dict(item)


# ── Accumulators ─────────────────────────────────────────────────


@dataclass
class SpecState:
    """Mutable record of one spec while its events arrive."""

    id: str
    description: str | None = None
    full_name: str | None = None
    status: str | None = None
    failed_expectations: list[ExpectationEvent] | None = None
    total_expectations: int | None = None
    passed_expectations: list[Any] | None = None

    suite_id: str | None = None
    timer: Timer | None = None
    duration: float | None = None
    skipped: bool = False
    passed: bool = False
    total_count: int = 0
    passed_count: int = 0
    failed_count: int = 0
    failures: list[FailureRecord] = field(default_factory=list)
    started: bool = False
    done: bool = False

    @classmethod
    def from_event(cls, event: SpecEvent) -> SpecState:
        state = cls(id=event.id)
        merge_fields(state, event)
        return state

    def strip(self) -> None:
        """Drop fields only needed while the spec is running."""
        self.timer = None
        self.suite_id = None
        self.failed_expectations = None
        self.total_expectations = None
        self.passed_expectations = None

    def to_record(self) -> SpecRecord:
        duration = self.duration or 0.0
        return SpecRecord(
            description=self.description or "",
            passed=self.passed,
            skipped=self.skipped,
            duration=duration,
            duration_sec=duration / MS_PER_SECOND,
            total_count=self.total_count,
            passed_count=self.passed_count,
            failed_count=self.failed_count,
            failures=tuple(self.failures),
        )


@dataclass
class SuiteState:
    """Mutable record of one suite while its events arrive."""

    id: str
    description: str | None = None
    full_name: str | None = None

    parent_id: str | None = None
    suites: list[SuiteState] = field(default_factory=list)
    specs: list[SpecState] = field(default_factory=list)
    passed: bool = True
    timer: Timer | None = None
    duration: float | None = None
    started: bool = False
    done: bool = False

    @classmethod
    def from_event(cls, event: SuiteEvent) -> SuiteState:
        state = cls(id=event.id)
        merge_fields(state, event)
        return state

    def strip(self) -> None:
        """Drop fields only needed while the suite is open."""
        self.timer = None
        self.parent_id = None

    def to_record(self) -> SuiteRecord:
        duration = self.duration or 0.0
        return SuiteRecord(
            description=self.description or "",
            passed=self.passed,
            duration=duration,
            duration_sec=duration / MS_PER_SECOND,
            suites=tuple(child.to_record() for child in self.suites),
            specs=tuple(spec.to_record() for spec in self.specs),
        )


# ── Final records ────────────────────────────────────────────────


@dataclass(frozen=True)
class FailureRecord:
    """One failed expectation in the final report."""

    message: str
    expected: Any = None
    matcher_name: str = ""
    stack: str = ""
    type: str = EXPECTATION_FAILURE
    passed: bool = False

    @classmethod
    def from_expectation(cls, expectation: ExpectationEvent) -> FailureRecord:
        return cls(
            message=expectation.message,
            expected=expectation.expected,
            matcher_name=expectation.matcher_name,
            stack=expectation.stack,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "expected": self.expected,
            "passed": self.passed,
            "message": self.message,
            "matcherName": self.matcher_name,
            "trace": {"stack": self.stack},
        }


@dataclass(frozen=True)
class SpecRecord:
    """A finished spec."""

    description: str
    passed: bool
    skipped: bool
    duration: float
    """Duration in milliseconds."""

    duration_sec: float
    total_count: int = 0
    passed_count: int = 0
    failed_count: int = 0
    failures: tuple[FailureRecord, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "passed": self.passed,
            "skipped": self.skipped,
            "duration": self.duration,
            "durationSec": self.duration_sec,
            "totalCount": self.total_count,
            "passedCount": self.passed_count,
            "failedCount": self.failed_count,
            "failures": [failure.to_dict() for failure in self.failures],
        }


@dataclass(frozen=True)
class SuiteRecord:
    """A finished suite with its nested suites and direct specs."""

    description: str
    passed: bool
    duration: float
    """Duration in milliseconds."""

    duration_sec: float
    suites: tuple[SuiteRecord, ...] = ()
    specs: tuple[SpecRecord, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "passed": self.passed,
            "duration": self.duration,
            "durationSec": self.duration_sec,
            "suites": [suite.to_dict() for suite in self.suites],
            "specs": [spec.to_dict() for spec in self.specs],
        }


@dataclass(frozen=True)
class Report:
    """The finalized result of one run."""

    passed: bool
    duration_sec: float
    suites: tuple[SuiteRecord, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "durationSec": self.duration_sec,
            "suites": [suite.to_dict() for suite in self.suites],
        }

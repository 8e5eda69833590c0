"""Lifecycle-event reporter that aggregates a run into a nested report.

A ``JSReporter`` receives ``suite_started`` / ``suite_done`` /
``spec_started`` / ``spec_done`` in strictly nested order, builds the
suite tree as events arrive, and freezes it into a ``Report`` once
``run_finished`` fires.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from jsreporter.cache import EntityCache
from jsreporter.models import (
    MS_PER_SECOND,
    PASSED_STATUS,
    PENDING_STATUS,
    FailureRecord,
    Report,
    SpecEvent,
    SpecState,
    SuiteEvent,
    SuiteState,
)
from jsreporter.reporters.json_reporter import report_to_json
from jsreporter.timer import Timer

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class ReporterError(Exception):
    """Base exception for reporter errors."""


class ConfigurationError(ReporterError):
    """Raised when the reporter cannot be wired to its collaborators."""


class ProtocolError(ReporterError):
    """Raised when lifecycle events arrive out of nesting order."""


def _as_suite_event(suite: SuiteEvent | Mapping[str, Any]) -> SuiteEvent:
    if isinstance(suite, Mapping):
        return SuiteEvent.from_dict(suite)
    return suite


def _as_spec_event(spec: SpecEvent | Mapping[str, Any]) -> SpecEvent:
    if isinstance(spec, Mapping):
        return SpecEvent.from_dict(spec)
    return spec


class JSReporter:
    """Build a hierarchical pass/fail report from lifecycle events.

    Each instance owns its own caches, active-suite stack and report, so
    independent runs need independent instances.

    Args:
        clock: Time source in seconds passed to every ``Timer``.
            Defaults to ``time.monotonic``.
    """

    def __init__(self, *, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock
        self._specs: EntityCache[SpecEvent, SpecState] = EntityCache(SpecState.from_event)
        self._suites: EntityCache[SuiteEvent, SuiteState] = EntityCache(SuiteState.from_event)
        self._root_suites: list[str] = []
        self._suite_stack: list[str] = []
        self._report: Report | None = None

    @property
    def done(self) -> bool:
        """``True`` once ``run_finished`` has built the report."""
        return self._report is not None

    @property
    def spec_count(self) -> int:
        """Number of distinct specs seen so far."""
        return self._specs.size

    @property
    def suite_count(self) -> int:
        """Number of distinct suites seen so far."""
        return self._suites.size

    @property
    def open_suites(self) -> list[str]:
        """Ids of suites started but not yet done, outermost first."""
        return list(self._suite_stack)

    # ── Suite hooks ──────────────────────────────────────────────

    def suite_started(self, suite: SuiteEvent | Mapping[str, Any]) -> None:
        event = _as_suite_event(suite)
        state = self._suites.get_or_create(event)
        if state.started:
            logger.debug("Ignoring repeated suiteStarted for %s", event.id)
            return

        state.suites = []
        state.specs = []
        state.passed = True
        state.parent_id = self._suite_stack[-1] if self._suite_stack else None
        if state.parent_id is not None:
            self._require_suite(state.parent_id).suites.append(state)
        else:
            self._root_suites.append(state.id)
        self._suite_stack.append(state.id)
        state.timer = Timer(self._clock).start()
        state.started = True
        logger.debug("Suite %s started (parent=%s)", state.id, state.parent_id)

    def suite_done(self, suite: SuiteEvent | Mapping[str, Any]) -> None:
        event = _as_suite_event(suite)
        existing = self._suites.get(event.id)
        if existing is None or not existing.started:
            raise ProtocolError(f"suiteDone for suite {event.id!r} that never started")

        state = self._suites.get_or_create(event)
        if state.done:
            logger.debug("Ignoring repeated suiteDone for %s", event.id)
            return

        top = self._suite_stack[-1] if self._suite_stack else None
        if top != state.id:
            raise ProtocolError(
                f"suiteDone for suite {state.id!r} but the innermost open suite is {top!r}"
            )
        running = [spec.id for spec in state.specs if not spec.done]
        if running:
            raise ProtocolError(
                f"suiteDone for suite {state.id!r} while specs are still running: "
                + ", ".join(running)
            )

        state.duration = state.timer.elapsed() if state.timer else 0.0
        self._suite_stack.pop()

        if state.parent_id is not None:
            parent = self._require_suite(state.parent_id)
            parent.passed = parent.passed and state.passed

        state.strip()
        state.done = True
        logger.debug("Suite %s done (passed=%s, %.1fms)", state.id, state.passed, state.duration)

    # ── Spec hooks ───────────────────────────────────────────────

    def spec_started(self, spec: SpecEvent | Mapping[str, Any]) -> None:
        event = _as_spec_event(spec)
        existing = self._specs.get(event.id)
        if existing is not None and existing.started:
            self._specs.get_or_create(event)
            logger.debug("Ignoring repeated specStarted for %s", event.id)
            return
        if not self._suite_stack:
            raise ProtocolError(f"specStarted for spec {event.id!r} with no open suite")

        state = self._specs.get_or_create(event)
        state.timer = Timer(self._clock).start()
        state.suite_id = self._suite_stack[-1]
        self._require_suite(state.suite_id).specs.append(state)
        state.started = True
        logger.debug("Spec %s started in suite %s", state.id, state.suite_id)

    def spec_done(self, spec: SpecEvent | Mapping[str, Any]) -> None:
        event = _as_spec_event(spec)
        existing = self._specs.get(event.id)
        if existing is None or not existing.started:
            raise ProtocolError(f"specDone for spec {event.id!r} that never started")

        state = self._specs.get_or_create(event)
        if state.done:
            logger.debug("Ignoring repeated specDone for %s", event.id)
            return

        # suite_done refuses to close a suite with running specs, so the
        # parent is still open here.
        parent = self._require_suite(state.suite_id)
        state.duration = state.timer.elapsed() if state.timer else 0.0
        state.skipped = state.status == PENDING_STATUS
        state.passed = state.skipped or state.status == PASSED_STATUS

        # Expectation counts are optional upstream.
        state.total_count = state.total_expectations or 0
        state.passed_count = len(state.passed_expectations or [])

        failed = state.failed_expectations or []
        state.failed_count = len(failed)
        state.failures = [FailureRecord.from_expectation(expectation) for expectation in failed]

        parent.passed = parent.passed and state.passed

        state.strip()
        state.done = True
        logger.debug("Spec %s done (status=%s, %.1fms)", state.id, state.status, state.duration)

    # ── Finalization ─────────────────────────────────────────────

    def run_finished(self) -> None:
        """Freeze the report.  Later calls return without recomputing."""
        if self._report is not None:
            return
        if self._suite_stack:
            raise ProtocolError(
                "runFinished while suites are still open: " + ", ".join(self._suite_stack)
            )

        overall_duration = 0.0
        overall_passed = True
        suites = []
        for suite_id in self._root_suites:
            suite = self._require_suite(suite_id)
            overall_duration += suite.duration or 0.0
            overall_passed = overall_passed and suite.passed
            suites.append(suite.to_record())

        self._report = Report(
            passed=overall_passed,
            duration_sec=overall_duration / MS_PER_SECOND,
            suites=tuple(suites),
        )
        logger.info(
            "Run finished: %d suite(s), %d spec(s), passed=%s",
            self._suites.size,
            self._specs.size,
            overall_passed,
        )

    def get_report(self) -> Report | None:
        """Return the report, or ``None`` before ``run_finished``."""
        return self._report

    def get_report_as_text(self, *, indent: int | None = None) -> str | None:
        """Return the report as canonical JSON, or ``None`` before ``run_finished``."""
        if self._report is None:
            return None
        return report_to_json(self._report, indent=indent)

    # ── Internals ────────────────────────────────────────────────

    def _require_suite(self, suite_id: str | None) -> SuiteState:
        suite = self._suites.get(suite_id) if suite_id is not None else None
        if suite is None:
            raise ProtocolError(f"unknown parent suite {suite_id!r}")
        return suite


def attach_reporter(engine: Any, reporter: JSReporter | None = None) -> JSReporter:
    """Register a reporter with *engine* and return it.

    The engine must expose a callable ``add_reporter``; anything else is
    rejected before a single event is processed.
    """
    if engine is None:
        raise ConfigurationError("No test engine given to attach the reporter to")
    add_reporter = getattr(engine, "add_reporter", None)
    if not callable(add_reporter):
        raise ConfigurationError(
            f"Test engine {type(engine).__name__} has no callable 'add_reporter'"
        )

    reporter = reporter or JSReporter()
    add_reporter(reporter)
    logger.debug("Attached reporter to %s", type(engine).__name__)
    return reporter

"""Replay a recorded lifecycle event stream into a reporter.

An event log is JSON lines, one event per line::

    {"event": "suiteStarted", "payload": {"id": "suite1", "description": "A"}}
    {"event": "specStarted", "payload": {"id": "spec0", "description": "t1"}}
    {"event": "specDone", "payload": {"id": "spec0", "status": "passed", ...}}
    {"event": "suiteDone", "payload": {"id": "suite1"}}
    {"event": "jasmineDone"}

Event names follow the Jasmine reporter interface.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jsreporter.reporter import JSReporter, ReporterError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

_IGNORED_EVENTS = frozenset({"jasmineStarted"})
_FINISH_EVENTS = frozenset({"jasmineDone", "runFinished"})


class EventStreamError(ReporterError):
    """Raised when an event log line cannot be decoded or dispatched."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


def dispatch_event(reporter: JSReporter, name: str, payload: dict[str, Any] | None = None) -> None:
    """Invoke the reporter hook matching the Jasmine event *name*."""
    if name in _IGNORED_EVENTS:
        logger.debug("Skipping %s", name)
        return
    if name in _FINISH_EVENTS:
        reporter.run_finished()
        return

    hooks = {
        "suiteStarted": reporter.suite_started,
        "suiteDone": reporter.suite_done,
        "specStarted": reporter.spec_started,
        "specDone": reporter.spec_done,
    }
    hook = hooks.get(name)
    if hook is None:
        raise EventStreamError(f"unknown event {name!r}")
    if not isinstance(payload, dict):
        raise EventStreamError(f"event {name!r} needs an object payload")
    hook(payload)


def replay_events(lines: Iterable[str], reporter: JSReporter | None = None) -> JSReporter:
    """Feed every event in *lines* to *reporter* and return it.

    Blank lines are skipped.  A line that is not a JSON object with an
    ``event`` name raises ``EventStreamError``; so does a payload the
    event models reject.  Protocol violations propagate unchanged.
    """
    reporter = reporter or JSReporter()
    count = 0
    for line_number, line in enumerate(lines, start=1):
        text = line.strip()
        if not text:
            continue
        try:
            record = json.loads(text)
        except json.JSONDecodeError as exc:
            raise EventStreamError(f"invalid JSON ({exc.msg})", line_number) from exc
        if not isinstance(record, dict) or not isinstance(record.get("event"), str):
            raise EventStreamError("expected an object with an 'event' name", line_number)

        try:
            dispatch_event(reporter, record["event"], record.get("payload"))
        except EventStreamError as exc:
            if exc.line_number is None:
                raise EventStreamError(str(exc), line_number) from exc
            raise
        except ValueError as exc:
            raise EventStreamError(str(exc), line_number) from exc
        count += 1

    logger.info("Replayed %d event(s)", count)
    return reporter


def read_event_log(path: str | Path, reporter: JSReporter | None = None) -> JSReporter:
    """Replay the JSON-lines event log at *path*."""
    with Path(path).open(encoding="utf-8") as handle:
        return replay_events(handle, reporter)

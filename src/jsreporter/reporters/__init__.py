"""Reporters for outputting finished run reports."""

from __future__ import annotations

from jsreporter.reporters.json_reporter import JSONReporter, report_to_json

__all__ = [
    "JSONReporter",
    "report_to_json",
]

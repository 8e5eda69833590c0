"""jsreporter — nested pass/fail reports from test lifecycle events."""

from __future__ import annotations

__version__ = "0.1.0"

from jsreporter.models import (  # noqa: E402
    FailureRecord,
    Report,
    SpecEvent,
    SpecRecord,
    SuiteEvent,
    SuiteRecord,
)
from jsreporter.reporter import (  # noqa: E402
    ConfigurationError,
    JSReporter,
    ProtocolError,
    ReporterError,
    attach_reporter,
)

__all__ = [
    "ConfigurationError",
    "FailureRecord",
    "JSReporter",
    "ProtocolError",
    "Report",
    "ReporterError",
    "SpecEvent",
    "SpecRecord",
    "SuiteEvent",
    "SuiteRecord",
    "__version__",
    "attach_reporter",
]

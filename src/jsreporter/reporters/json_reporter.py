"""JSON reporter — serializes a finished run report.

Produces the canonical wire form of a ``Report``: only reportable
fields, keys in a fixed order, no internal ids or parent references.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from jsreporter.models import Report

logger = logging.getLogger(__name__)


def report_to_json(report: Report, *, indent: int | None = None) -> str:
    """Return *report* as a JSON string.

    ``indent=None`` gives the compact canonical form.  Expected values
    that JSON cannot represent are rendered with ``str``.
    """
    separators = (",", ":") if indent is None else None
    return json.dumps(
        report.to_dict(),
        indent=indent,
        separators=separators,
        ensure_ascii=False,
        default=str,
    )


class JSONReporter:
    """Write finished reports as JSON files or strings."""

    def __init__(self, *, indent: int | None = None) -> None:
        self.indent = indent

    def generate(self, output_path: Path, report: Report) -> Path:
        """Write *report* to *output_path* and return the path."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.generate_string(report), encoding="utf-8")
        logger.info("JSON report written to %s", output_path)
        return output_path

    def generate_string(self, report: Report) -> str:
        """Return *report* as a JSON string."""
        return report_to_json(report, indent=self.indent)

"""Configuration parsing from ``.jsreport.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from jsreporter.reporter import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".jsreport.yml"

OUTPUT_FORMATS = ("json", "terminal")

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        else:
            result[key] = value
    return result


@dataclass
class OutputConfig:
    """Where and how the finished report is written."""

    format: str = "json"
    """Output format: json or terminal."""

    path: str = ""
    """File to write the report to (empty = stdout)."""

    indent: int = 0
    """JSON indentation (0 = compact canonical form)."""

    @property
    def json_indent(self) -> int | None:
        return self.indent or None


@dataclass
class JSReportConfig:
    """Complete jsreporter configuration from ``.jsreport.yml``."""

    root: str
    """Directory the configuration was loaded from."""

    output: OutputConfig = field(default_factory=OutputConfig)
    """Report output configuration."""

    raw: dict[str, Any] = field(default_factory=dict)
    """Raw parsed YAML for extension/debugging."""


def _parse_output_config(raw: dict[str, Any]) -> OutputConfig:
    """Parse the ``output`` section, falling back to environment variables."""
    return OutputConfig(
        format=str(raw.get("format", os.environ.get("JSREPORT_OUTPUT_FORMAT", "json"))),
        path=str(raw.get("path", os.environ.get("JSREPORT_OUTPUT_PATH", "")) or ""),
        indent=int(raw.get("indent", 0) or 0),
    )


def load_config(root: str | Path) -> JSReportConfig:
    """Load and parse ``.jsreport.yml`` from *root*.

    Falls back to defaults and environment variables when the file is
    missing or incomplete.  A file whose top level is not a mapping is
    a configuration error.
    """
    root_path = Path(root).resolve()
    config_file = root_path / CONFIG_FILENAME

    raw: dict[str, Any] = {}
    if config_file.is_file():
        parsed = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        if parsed is not None and not isinstance(parsed, dict):
            raise ConfigurationError(f"{config_file} must contain a mapping")
        raw = _resolve_dict(parsed or {})

    output_raw = raw.get("output", {})
    if not isinstance(output_raw, dict):
        output_raw = {}

    return JSReportConfig(
        root=str(root_path),
        output=_parse_output_config(output_raw),
        raw=raw,
    )


def validate_config(config: JSReportConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []

    if config.output.format not in OUTPUT_FORMATS:
        errors.append(
            f"output.format must be one of {', '.join(OUTPUT_FORMATS)} "
            f"(got {config.output.format!r})"
        )
    if config.output.indent < 0:
        errors.append(f"output.indent must be >= 0 (got {config.output.indent})")

    return errors

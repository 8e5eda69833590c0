"""Tests for config.py — .jsreport.yml parsing and validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from jsreporter.config import (
    JSReportConfig,
    OutputConfig,
    _resolve_dict,
    _resolve_env_vars,
    load_config,
    validate_config,
)
from jsreporter.reporter import ConfigurationError


def _write_config(root: Path, data: Any) -> None:
    """Write .jsreport.yml with given data."""
    (root / ".jsreport.yml").write_text(yaml.dump(data), encoding="utf-8")


# ── _resolve_env_vars / _resolve_dict ─────────────────────────────────


class TestResolveEnvVars:
    def test_resolves_existing_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_VAR", "hello")
        assert _resolve_env_vars("${MY_VAR}") == "hello"

    def test_missing_var_returns_empty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MISSING_VAR", raising=False)
        assert _resolve_env_vars("${MISSING_VAR}") == ""

    def test_no_vars_unchanged(self) -> None:
        assert _resolve_env_vars("plain text") == "plain text"

    def test_resolve_dict_nested(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OUT_DIR", "/tmp/reports")
        resolved = _resolve_dict({"output": {"path": "${OUT_DIR}/r.json", "indent": 2}})
        assert resolved == {"output": {"path": "/tmp/reports/r.json", "indent": 2}}


# ── load_config ───────────────────────────────────────────────────────


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("JSREPORT_OUTPUT_FORMAT", raising=False)
        monkeypatch.delenv("JSREPORT_OUTPUT_PATH", raising=False)
        config = load_config(tmp_path)
        assert config.root == str(tmp_path.resolve())
        assert config.output == OutputConfig()
        assert config.output.json_indent is None

    def test_reads_output_section(self, tmp_path: Path) -> None:
        _write_config(
            tmp_path, {"output": {"format": "terminal", "path": "out/report.json", "indent": 2}}
        )
        config = load_config(tmp_path)
        assert config.output.format == "terminal"
        assert config.output.path == "out/report.json"
        assert config.output.json_indent == 2

    def test_env_fallbacks(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JSREPORT_OUTPUT_FORMAT", "terminal")
        monkeypatch.setenv("JSREPORT_OUTPUT_PATH", "env.json")
        config = load_config(tmp_path)
        assert config.output.format == "terminal"
        assert config.output.path == "env.json"

    def test_file_wins_over_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JSREPORT_OUTPUT_FORMAT", "terminal")
        _write_config(tmp_path, {"output": {"format": "json"}})
        assert load_config(tmp_path).output.format == "json"

    def test_non_dict_output_section_ignored(self, tmp_path: Path) -> None:
        _write_config(tmp_path, {"output": "nope"})
        config = load_config(tmp_path)
        assert config.raw == {"output": "nope"}
        assert config.output.indent == 0

    def test_empty_file(self, tmp_path: Path) -> None:
        (tmp_path / ".jsreport.yml").write_text("", encoding="utf-8")
        assert load_config(tmp_path).raw == {}

    def test_non_mapping_file_is_configuration_error(self, tmp_path: Path) -> None:
        _write_config(tmp_path, ["a", "b"])
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_config(tmp_path)


# ── validate_config ───────────────────────────────────────────────────


class TestValidateConfig:
    def test_valid(self) -> None:
        assert validate_config(JSReportConfig(root=".")) == []

    def test_bad_format(self) -> None:
        config = JSReportConfig(root=".", output=OutputConfig(format="xml"))
        errors = validate_config(config)
        assert len(errors) == 1
        assert "output.format" in errors[0]

    def test_negative_indent(self) -> None:
        config = JSReportConfig(root=".", output=OutputConfig(indent=-1))
        assert any("output.indent" in e for e in validate_config(config))

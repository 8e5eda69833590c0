"""jsreport CLI — top-level command group."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import asdict, replace
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from jsreporter import __version__
from jsreporter.config import OUTPUT_FORMATS, load_config, validate_config
from jsreporter.events import read_event_log
from jsreporter.reporter import ReporterError
from jsreporter.reporters.json_reporter import JSONReporter
from jsreporter.reporters.terminal import CLIReporter

logger = logging.getLogger(__name__)
console = Console()
err_console = Console(stderr=True)

EXIT_FAILED = 1
EXIT_ERROR = 2


def _configure_logging(*, verbose: bool) -> None:
    root = logging.getLogger("jsreporter")
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(isinstance(h, RichHandler) for h in root.handlers):
        root.addHandler(RichHandler(console=err_console, show_path=False))


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log every lifecycle event.")
@click.version_option(version=__version__, prog_name="jsreport")
@click.pass_context
def cli(ctx: click.Context, *, verbose: bool) -> None:
    """jsreport — aggregate test lifecycle events into a nested report."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    _configure_logging(verbose=verbose)


@cli.command("replay")
@click.argument("events_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default=None,
    help="Output format (defaults to output.format from .jsreport.yml).",
)
@click.option(
    "--output",
    "-o",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the JSON report to this file.",
)
@click.option(
    "--indent",
    type=click.IntRange(min=0),
    default=None,
    help="JSON indentation (0 = compact).",
)
@click.option(
    "--path",
    "project_path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Directory holding .jsreport.yml.",
)
def replay(
    events_file: Path,
    output_format: str | None,
    output_path: Path | None,
    indent: int | None,
    project_path: Path,
) -> None:
    """Replay a JSON-lines event log and print the finished report."""
    try:
        config = load_config(project_path)
        reporter = read_event_log(events_file)
    except ReporterError as exc:
        err_console.print(f"[red]✗[/red] {exc}")
        sys.exit(EXIT_ERROR)

    report = reporter.get_report()
    if report is None:
        err_console.print(f"[red]✗[/red] {events_file} ended before the run finished")
        sys.exit(EXIT_ERROR)

    fmt = output_format or config.output.format
    output = config.output if indent is None else replace(config.output, indent=indent)
    destination = output_path or (Path(output.path) if output.path else None)

    json_reporter = JSONReporter(indent=output.json_indent)
    if destination is not None:
        json_reporter.generate(destination, report)
    if fmt == "terminal":
        CLIReporter(console).print_report(report)
    elif destination is None:
        click.echo(json_reporter.generate_string(report))

    if not report.passed:
        sys.exit(EXIT_FAILED)


@cli.group("config")
def config_group() -> None:
    """Inspect the .jsreport.yml configuration."""


@config_group.command("show")
@click.option(
    "--path",
    "project_path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
def config_show(project_path: Path) -> None:
    """Print the effective configuration as JSON."""
    config = load_config(project_path)
    data = asdict(config)
    data.pop("raw", None)
    click.echo(json.dumps(data, indent=2))


@config_group.command("validate")
@click.option(
    "--path",
    "project_path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
def config_validate(project_path: Path) -> None:
    """Check .jsreport.yml and exit non-zero on errors."""
    errors = validate_config(load_config(project_path))
    if errors:
        for error in errors:
            err_console.print(f"[red]✗[/red] {error}")
        sys.exit(EXIT_FAILED)
    console.print("[green]✓[/green] Configuration is valid")


def main() -> None:
    cli(obj={})

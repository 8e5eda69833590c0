"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

if TYPE_CHECKING:
    from jsreporter.models import Report, SpecRecord, SuiteRecord

console = Console()

_SECONDS_PER_MINUTE = 60.0
_MAX_MESSAGE_LENGTH = 120


def _format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string."""
    if seconds >= _SECONDS_PER_MINUTE:
        return f"{seconds / _SECONDS_PER_MINUTE:.1f}m"
    return f"{seconds:.2f}s"


@dataclass
class SpecTally:
    """Spec outcome counts across a report."""

    passed: int = 0
    failed: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.skipped


def tally_specs(report: Report) -> SpecTally:
    """Count passed, failed and skipped specs anywhere in *report*."""
    tally = SpecTally()

    def _visit(suite: SuiteRecord) -> None:
        for spec in suite.specs:
            if spec.skipped:
                tally.skipped += 1
            elif spec.passed:
                tally.passed += 1
            else:
                tally.failed += 1
        for child in suite.suites:
            _visit(child)

    for suite in report.suites:
        _visit(suite)
    return tally


def _spec_label(spec: SpecRecord) -> str:
    if spec.skipped:
        return f"[yellow]⊘[/yellow] [dim]{escape(spec.description)}[/dim]"
    took = f"[dim]({_format_duration(spec.duration_sec)})[/dim]"
    if spec.passed:
        return f"[green]✓[/green] {escape(spec.description)} {took}"
    return f"[red]✗ {escape(spec.description)}[/red] {took}"


def _suite_label(suite: SuiteRecord) -> str:
    color = "green" if suite.passed else "red"
    return (
        f"[bold {color}]{escape(suite.description)}[/bold {color}] "
        f"[dim]({_format_duration(suite.duration_sec)})[/dim]"
    )


class CLIReporter:
    """Rich terminal rendering of a finished report."""

    def __init__(self, output: Console | None = None) -> None:
        self.console = output or console

    def build_tree(self, report: Report) -> Tree:
        """Return the suite/spec hierarchy as a rich ``Tree``."""
        status = (
            "[bold green]PASSED[/bold green]" if report.passed else "[bold red]FAILED[/bold red]"
        )
        root = Tree(f"{status} [dim]({_format_duration(report.duration_sec)})[/dim]")

        def _add(node: Tree, suite: SuiteRecord) -> None:
            branch = node.add(_suite_label(suite))
            for child in suite.suites:
                _add(branch, child)
            for spec in suite.specs:
                leaf = branch.add(_spec_label(spec))
                for failure in spec.failures:
                    message = escape(failure.message[:_MAX_MESSAGE_LENGTH])
                    leaf.add(f"[dim red]{message}[/dim red]")

        for suite in report.suites:
            _add(root, suite)
        return root

    def print_report(self, report: Report) -> None:
        """Print the report tree followed by a one-line summary."""
        self.console.print(self.build_tree(report))

        tally = tally_specs(report)
        if tally.total == 0:
            self.console.print("  [dim]No specs executed[/dim]")
            return

        parts: list[str] = []
        if tally.passed:
            parts.append(f"[green]✓ {tally.passed} passed[/green]")
        if tally.failed:
            parts.append(f"[red]✗ {tally.failed} failed[/red]")
        if tally.skipped:
            parts.append(f"[yellow]⊘ {tally.skipped} skipped[/yellow]")
        self.console.print()
        self.console.print(f"  [bold]{tally.total}[/bold] specs  {'  '.join(parts)}")


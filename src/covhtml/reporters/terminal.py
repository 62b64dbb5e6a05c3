"""Terminal reporter with rich output formatting."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from covhtml.report.builder import ReportData

# Report output goes to stdout; everything human-facing goes to stderr
console = Console(stderr=True)

_GOOD_COVERAGE = 80.0
_FAIR_COVERAGE = 60.0

_MAX_FUNCTIONS_DISPLAY = 5
_MAX_FUNCTION_NAME_LENGTH = 40


def _get_coverage_color(percent: float) -> str:
    """Return a Rich color name for a coverage percentage."""
    if percent >= _GOOD_COVERAGE:
        return "green"
    if percent >= _FAIR_COVERAGE:
        return "yellow"
    return "red"


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[: limit - 1] + "…"


class CLIReporter:
    """Rich terminal output for report summaries and diagnostics."""

    def __init__(self, output: Console | None = None) -> None:
        self.console = output or console

    def print_success(self, message: str) -> None:
        """Print a success message."""
        self.console.print(f"[green]✓[/green] {message}")

    def print_error(self, message: str) -> None:
        """Print an error message."""
        self.console.print(f"[red]✗[/red] {message}")

    def print_info(self, message: str) -> None:
        """Print an info message."""
        self.console.print(f"[dim]{message}[/dim]")

    def print_coverage_summary(self, data: ReportData) -> None:
        """Print per-package coverage with the report total."""
        if not data.packages:
            self.print_info("No package matches the coverage filters")
            return

        table = Table(title="Coverage Summary", title_style="bold cyan")
        table.add_column("Package", style="bold")
        table.add_column("Coverage", justify="right")
        table.add_column("Statements", justify="right")
        table.add_column("Functions", justify="right")

        for rp in data.packages:
            pct = rp.percentage_reached
            color = _get_coverage_color(pct)
            table.add_row(
                rp.name,
                f"[{color}]{pct:.1f}%[/{color}]",
                f"{rp.reached_statements}/{rp.total_statements}",
                str(len(rp.functions)),
            )

        if data.overview is not None:
            pct = data.overview.percentage_reached
            color = _get_coverage_color(pct)
            table.add_section()
            table.add_row(
                f"[bold]{data.overview.name}[/bold]",
                f"[bold {color}]{pct:.1f}%[/bold {color}]",
                f"{data.overview.reached_statements}/{data.overview.total_statements}",
                "",
            )

        self.console.print(table)

    def print_least_covered(self, data: ReportData) -> None:
        """Print the least covered displayed functions across all packages."""
        functions = [fn for rp in data.packages for fn in rp.functions]
        if not functions:
            return
        functions.sort(key=lambda fn: (fn.coverage_percent, -fn.total_statements))

        table = Table(title="Least Covered Functions", title_style="bold yellow")
        table.add_column("Function", style="bold")
        table.add_column("File")
        table.add_column("Coverage", justify="right")

        for fn in functions[:_MAX_FUNCTIONS_DISPLAY]:
            pct = fn.coverage_percent
            color = _get_coverage_color(pct)
            table.add_row(
                _truncate(fn.name, _MAX_FUNCTION_NAME_LENGTH),
                fn.short_file_name,
                f"[{color}]{pct:.1f}%[/{color}]",
            )
        self.console.print(table)


reporter = CLIReporter()

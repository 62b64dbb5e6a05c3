"""covhtml CLI — render gocov JSON coverage data as an HTML report."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Any

import click
from rich.logging import RichHandler

from covhtml import __version__
from covhtml.config import ConfigError, ReportOptions, load_config, normalize_options
from covhtml.report.builder import ReportError, prepare_report, render_report
from covhtml.reporters.terminal import console, reporter
from covhtml.themes import get_theme, list_themes

logger = logging.getLogger(__name__)


def _setup_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _apply_overrides(options: ReportOptions, overrides: dict[str, Any]) -> ReportOptions:
    """Return *options* with every non-None override applied."""
    changes = {key: value for key, value in overrides.items() if value is not None}
    return dataclasses.replace(options, **changes)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("data", required=False, type=click.Path(dir_okay=False, allow_dash=True))
@click.option("-s", "--stylesheet", default=None, help="Path to a custom CSS file.")
@click.option("-t", "--theme", default=None, help="Theme to use for rendering.")
@click.option("-r", "--reverse", is_flag=True, help="Put lower coverage functions on top.")
@click.option(
    "--sort",
    "sort_order",
    default=None,
    help="Sort functions by high-coverage, low-coverage or location.",
)
@click.option("--fmin", type=int, default=None, help="Only show functions with coverage >= fmin.")
@click.option("--fmax", type=int, default=None, help="Only show functions with coverage <= fmax.")
@click.option("--pmin", type=int, default=None, help="Only show packages with coverage >= pmin.")
@click.option("--pmax", type=int, default=None, help="Only show packages with coverage <= pmax.")
@click.option("-d", "--default-css", is_flag=True, help="Output the CSS of the selected theme.")
@click.option("--list-themes", "show_themes", is_flag=True, help="List available themes.")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, writable=True),
    default=None,
    help="Write the report to this file instead of stdout.",
)
@click.option("--summary", is_flag=True, help="Print a coverage summary table on stderr.")
@click.option(
    "--config",
    "config_dir",
    type=click.Path(exists=True, file_okay=False),
    default=".",
    help="Directory containing .covhtml.yml.",
)
@click.option("-v", "--verbose", is_flag=True, help="Log progress to stderr.")
@click.version_option(version=__version__, prog_name="covhtml")
def cli(
    data: str | None,
    *,
    stylesheet: str | None,
    theme: str | None,
    reverse: bool,
    sort_order: str | None,
    fmin: int | None,
    fmax: int | None,
    pmin: int | None,
    pmax: int | None,
    default_css: bool,
    show_themes: bool,
    output: str | None,
    summary: bool,
    config_dir: str,
    verbose: bool,
) -> None:
    """Render gocov JSON coverage DATA (a file, or stdin) as an HTML report."""
    _setup_logging(verbose=verbose)

    if show_themes:
        for th in list_themes():
            click.echo(f"{th.name:<10} -- {th.description}")
        return

    try:
        options = _apply_overrides(
            load_config(config_dir),
            {
                "stylesheet": stylesheet,
                "theme": theme,
                "sort_order": sort_order,
                "reverse": True if reverse else None,
                "function_min": fmin,
                "function_max": fmax,
                "package_min": pmin,
                "package_max": pmax,
            },
        )
        options = normalize_options(options)
    except ConfigError as e:
        raise click.UsageError(str(e)) from e

    if default_css:
        click.echo(get_theme(options.theme).style)
        return

    try:
        with click.open_file(data or "-", "rb") as stream:
            selected, report_data = prepare_report(stream, options)
        html = render_report(selected, report_data)
    except ReportError as e:
        reporter.print_error(f"HTML report: {e}")
        raise click.Abort from e
    except OSError as e:
        reporter.print_error(f"open coverage data: {e}")
        raise click.Abort from e

    if output:
        Path(output).write_text(html, encoding="utf-8")
        reporter.print_success(f"Report written to {output}")
    else:
        click.echo(html, nl=False)

    if summary:
        reporter.print_coverage_summary(report_data)
        reporter.print_least_covered(report_data)

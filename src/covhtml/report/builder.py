"""Report assembly: merged packages, filtered and ordered, ready to render."""

from __future__ import annotations

import logging
import sys
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import IO, TYPE_CHECKING

from covhtml.analysis.functions import ReportFunction
from covhtml.config import normalize_options
from covhtml.models.coverage import CoverageDataError, Package, load_packages
from covhtml.report.merger import PackageSet
from covhtml.report.ordering import filter_functions, in_window, sort_functions
from covhtml.themes import get_theme
from covhtml.utils.sources import SourceCache, SourceReadError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from covhtml.config import ReportOptions
    from covhtml.themes.base import Theme

logger = logging.getLogger(__name__)

OVERVIEW_NAME = "Report Total"


class ReportError(RuntimeError):
    """Terminal report generation failure, labelled with the failing step."""

    def __init__(self, context: str, cause: BaseException | None = None) -> None:
        self.context = context
        message = f"{context}: {cause}" if cause is not None else context
        super().__init__(message)


@dataclass
class ReportPackage:
    """A package with aggregate statement counts and its displayed functions."""

    package: Package
    functions: list[ReportFunction] = field(default_factory=list)
    total_statements: int = 0
    reached_statements: int = 0

    @property
    def name(self) -> str:
        return self.package.name

    @property
    def percentage_reached(self) -> float:
        """Percentage of reached statements; 0.0 for a package without statements."""
        if self.total_statements == 0:
            return 0.0
        return self.reached_statements / self.total_statements * 100


def build_report_package(package: Package, options: ReportOptions) -> ReportPackage:
    """Aggregate *package* and select the functions to display.

    Totals cover every function; only the displayed list is filtered by
    the function coverage window and then ordered.
    """
    rv = ReportPackage(package=package)
    candidates: list[ReportFunction] = []
    for fn in package.functions:
        rf = ReportFunction.from_function(fn)
        candidates.append(rf)
        rv.total_statements += rf.total_statements
        rv.reached_statements += rf.statements_reached

    kept = filter_functions(candidates, options.function_min, options.function_max)
    rv.functions = sort_functions(kept, options.order)
    return rv


@dataclass
class ReportData:
    """Everything a theme needs to render a report."""

    packages: list[ReportPackage]
    overview: ReportPackage | None = None
    style: str = ""
    script: str = ""
    command: str = ""
    generated_at: str = ""
    sources: SourceCache = field(default_factory=SourceCache)


class Report:
    """Coverage report for one invocation.

    Packages are accumulated through :meth:`add_package`; :meth:`build`
    applies the package window and produces the displayed packages.
    """

    def __init__(self, options: ReportOptions) -> None:
        self.options = options
        self._packages = PackageSet()

    @classmethod
    def from_packages(cls, packages: Iterable[Package], options: ReportOptions) -> Report:
        report = cls(options)
        for pkg in packages:
            report.add_package(pkg)
        return report

    def add_package(self, package: Package) -> None:
        """Add a package's coverage, merging it with a same-named one."""
        self._packages.add(package)

    def clear(self) -> None:
        """Drop all coverage information."""
        self._packages.clear()

    @property
    def packages(self) -> list[Package]:
        """Merged packages in ascending name order."""
        return self._packages.packages

    def build(self) -> list[ReportPackage]:
        """Return the packages inside the package window, in name order."""
        result: list[ReportPackage] = []
        for pkg in self._packages:
            rp = build_report_package(pkg, self.options)
            percent = rp.percentage_reached
            logger.debug(
                "[%s] reached statements: %d, total statements: %d, percent: %.2f",
                pkg.name,
                rp.reached_statements,
                rp.total_statements,
                percent,
            )
            if in_window(percent, self.options.package_min, self.options.package_max):
                result.append(rp)
        return result

    def data(
        self,
        theme: Theme,
        *,
        command_args: Sequence[str] | None = None,
        sources: SourceCache | None = None,
    ) -> ReportData:
        """Assemble the render input for *theme*.

        Raises:
            ReportError: If the custom stylesheet cannot be read.
        """
        style = theme.style
        if self.options.stylesheet:
            try:
                style = Path(self.options.stylesheet).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise ReportError("read style", e) from e

        packages = self.build()
        args = sys.argv[1:] if command_args is None else command_args
        names = " ".join(rp.name for rp in packages)
        command = f"gocov test {names} | covhtml {' '.join(args)}"
        return ReportData(
            packages=packages,
            overview=overview(packages),
            style=style,
            script=theme.script,
            command=command,
            generated_at=datetime.now(UTC).isoformat(),
            sources=sources if sources is not None else SourceCache(),
        )


def overview(packages: Sequence[ReportPackage]) -> ReportPackage | None:
    """Return the synthetic total of *packages*, or None for a single package."""
    if len(packages) <= 1:
        return None
    total = ReportPackage(package=Package(name=OVERVIEW_NAME))
    for rp in packages:
        total.reached_statements += rp.reached_statements
        total.total_statements += rp.total_statements
    return total


def prepare_report(
    stream: IO[bytes] | IO[str],
    options: ReportOptions,
    *,
    theme: Theme | None = None,
    command_args: Sequence[str] | None = None,
    sources: SourceCache | None = None,
) -> tuple[Theme, ReportData]:
    """Validate *options*, read gocov JSON from *stream* and assemble the report.

    Options are validated before any input is read.

    Raises:
        ConfigError: If *options* are invalid.
        ReportError: If the stylesheet or coverage data cannot be read or decoded.
    """
    options = normalize_options(options)
    if theme is None:
        theme = get_theme(options.theme)

    if options.stylesheet and not Path(options.stylesheet).exists():
        raise ReportError("stylesheet", FileNotFoundError(options.stylesheet))

    try:
        raw = stream.read()
    except OSError as e:
        raise ReportError("read coverage data", e) from e

    try:
        packages = load_packages(raw)
    except CoverageDataError as e:
        raise ReportError("unmarshal coverage data", e) from e

    report = Report.from_packages(packages, options)
    return theme, report.data(theme, command_args=command_args, sources=sources)


def render_report(theme: Theme, data: ReportData) -> str:
    """Render *data* with *theme*.

    Raises:
        ReportError: If a function's source file cannot be read.
    """
    try:
        return theme.render(data)
    except SourceReadError as e:
        raise ReportError("render report", e) from e


def generate_report(
    stream: IO[bytes] | IO[str],
    options: ReportOptions,
    *,
    theme: Theme | None = None,
    command_args: Sequence[str] | None = None,
    sources: SourceCache | None = None,
) -> str:
    """Read gocov JSON from *stream* and return the rendered report.

    Nothing is returned on failure; every step error is raised as a
    labelled :class:`ReportError`.

    Raises:
        ConfigError: If *options* are invalid.
        ReportError: If reading, decoding or rendering fails.
    """
    t0 = time.monotonic()
    theme, data = prepare_report(
        stream, options, theme=theme, command_args=command_args, sources=sources
    )
    output = render_report(theme, data)
    logger.info(
        "Rendered %d packages with theme %s in %.3fs",
        len(data.packages),
        theme.name,
        time.monotonic() - t0,
    )
    return output

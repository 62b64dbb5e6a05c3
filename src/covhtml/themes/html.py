"""Shared HTML rendering for the bundled themes.

Produces a single self-contained page: an overview table of packages,
then one section per package listing its functions and their annotated
source. Lines whose statements were never reached are flagged ``MISS``.
"""

from __future__ import annotations

import html
from typing import TYPE_CHECKING

from covhtml.themes.base import Theme

if TYPE_CHECKING:
    from covhtml.analysis.functions import ReportFunction
    from covhtml.report.builder import ReportData, ReportPackage
    from covhtml.utils.sources import SourceCache

# Coverage thresholds for colouring percentages
_COVERAGE_THRESHOLD_SUCCESS = 80
_COVERAGE_THRESHOLD_WARNING = 60

_HIT_PREFIX = "    "
_MISS_PREFIX = "MISS"

_SCRIPT = """\
document.addEventListener("DOMContentLoaded", function () {
    document.querySelectorAll(".fn-toggle").forEach(function (link) {
        link.addEventListener("click", function (ev) {
            ev.preventDefault();
            var target = document.getElementById(link.dataset.target);
            if (target) {
                target.classList.toggle("hidden");
            }
        });
    });
});
"""


def _coverage_class(percent: float) -> str:
    if percent >= _COVERAGE_THRESHOLD_SUCCESS:
        return "success"
    if percent >= _COVERAGE_THRESHOLD_WARNING:
        return "warning"
    return "error"


def _anchor(package: str, index: int | None = None) -> str:
    slug = "".join(ch if ch.isalnum() else "-" for ch in package)
    return f"pkg-{slug}" if index is None else f"fn-{slug}-{index}"


class HTMLTheme(Theme):
    """Base class of the bundled HTML themes; subclasses supply the CSS."""

    title = "Coverage Report"

    @property
    def script(self) -> str:
        return _SCRIPT

    def render(self, data: ReportData) -> str:
        overview = self._render_overview(data)
        sections = "\n".join(
            self._render_package(rp, data.sources) for rp in data.packages
        )
        if not data.packages:
            sections = '<p class="empty-state">No package matches the coverage filters</p>'

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(self.title)}</title>
    <style>
{data.style}
    </style>
</head>
<body>
    <div class="container">
        <h1>{html.escape(self.title)}</h1>
        <p class="subtitle">Generated: {html.escape(data.generated_at)}</p>
        <p class="command"><code>{html.escape(data.command)}</code></p>
        {overview}
        {sections}
    </div>
    <script>
{data.script}
    </script>
</body>
</html>
"""

    def _render_overview(self, data: ReportData) -> str:
        """Render the package table, with the report total when present."""
        if not data.packages:
            return ""

        rows = "\n".join(
            self._render_package_row(rp, link=True) for rp in data.packages
        )
        if data.overview is not None:
            rows += "\n" + self._render_package_row(data.overview, link=False, total=True)

        return f"""
        <table class="overview">
            <thead>
                <tr><th>Package</th><th>Coverage</th><th>Statements</th></tr>
            </thead>
            <tbody>
{rows}
            </tbody>
        </table>
        """

    def _render_package_row(
        self, rp: ReportPackage, *, link: bool, total: bool = False
    ) -> str:
        percent = rp.percentage_reached
        name = html.escape(rp.name)
        if link:
            name = f'<a href="#{_anchor(rp.name)}">{name}</a>'
        row_class = ' class="total"' if total else ""
        return (
            f"                <tr{row_class}><td>{name}</td>"
            f'<td class="percent {_coverage_class(percent)}">{percent:.2f}%</td>'
            f"<td>{rp.reached_statements}/{rp.total_statements}</td></tr>"
        )

    def _render_package(self, rp: ReportPackage, sources: SourceCache) -> str:
        """Render one package: its function table then each function's source."""
        rows: list[str] = []
        listings: list[str] = []
        for index, fn in enumerate(rp.functions):
            anchor = _anchor(rp.name, index)
            percent = fn.coverage_percent
            rows.append(
                f'<tr><td><a class="fn-toggle" href="#{anchor}" data-target="{anchor}">'
                f"{html.escape(fn.name)}</a></td>"
                f"<td>{html.escape(fn.short_file_name)}</td>"
                f'<td class="percent {_coverage_class(percent)}">{percent:.2f}%</td>'
                f"<td>{fn.statements_reached}/{fn.total_statements}</td></tr>"
            )
            listings.append(self._render_function(fn, anchor, sources))

        percent = rp.percentage_reached
        table_rows = "\n".join(rows) or (
            '<tr><td colspan="4" class="empty-state">'
            "No function matches the coverage filters</td></tr>"
        )
        return f"""
        <div class="package" id="{_anchor(rp.name)}">
            <h2>{html.escape(rp.name)}
                <span class="percent {_coverage_class(percent)}">{percent:.2f}%</span>
            </h2>
            <table class="functions">
                <thead>
                    <tr><th>Function</th><th>File</th><th>Coverage</th><th>Statements</th></tr>
                </thead>
                <tbody>
{table_rows}
                </tbody>
            </table>
{"".join(listings)}
        </div>
        """

    def _render_function(self, fn: ReportFunction, anchor: str, sources: SourceCache) -> str:
        lines = []
        for line in fn.lines(sources):
            prefix = _MISS_PREFIX if line.missed else _HIT_PREFIX
            css_class = "miss" if line.missed else "hit"
            lines.append(
                f'<span class="{css_class}"><span class="lineno">{line.line_number:>5}</span>'
                f" {prefix} {line.code}</span>"
            )
        body = "\n".join(lines)
        return f"""
            <div class="function hidden" id="{anchor}">
                <h3>{html.escape(fn.name)}
                    <span class="file">{html.escape(fn.file)}</span>
                </h3>
                <pre class="source">{body}</pre>
            </div>
"""

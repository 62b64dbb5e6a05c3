"""Default theme, styled after the golang.org documentation pages."""

from __future__ import annotations

from covhtml.themes.html import HTMLTheme

_STYLE = """\
body {
    background: #fff;
    color: #222;
    font-family: Arial, sans-serif;
    margin: 0;
    padding: 1rem 2rem;
}
.container { max-width: 1200px; margin: 0 auto; }
h1 { color: #375eab; font-size: 1.75rem; }
h2 {
    background: #e0ebf5;
    color: #375eab;
    font-size: 1.25rem;
    margin-top: 2rem;
    padding: 0.25rem 0.5rem;
}
h3 { font-size: 1rem; margin-bottom: 0.25rem; }
a { color: #375eab; text-decoration: none; }
a:hover { text-decoration: underline; }
.subtitle, .file { color: #666; font-size: 0.875rem; }
.command code { background: #f8f8f8; padding: 0.25rem 0.5rem; }
table { border-collapse: collapse; margin: 0.5rem 0 1rem; width: 100%; }
th { background: #e0ebf5; text-align: left; }
th, td { border: 1px solid #ccc; padding: 0.25rem 0.5rem; }
tr.total td { font-weight: bold; }
.percent.success { color: #1a7f37; }
.percent.warning { color: #9a6700; }
.percent.error { color: #cf222e; }
pre.source {
    background: #f8f8f8;
    border: 1px solid #ccc;
    font-family: Menlo, monospace;
    font-size: 0.8125rem;
    overflow-x: auto;
    padding: 0.5rem;
}
pre.source .lineno { color: #999; }
pre.source .miss { background: #ffdddd; display: block; }
pre.source .hit { display: block; }
.empty-state { color: #666; font-style: italic; }
.hidden { display: none; }
"""


class GolangTheme(HTMLTheme):
    """Theme mimicking the golang.org look."""

    title = "Coverage Report"

    @property
    def name(self) -> str:
        return "golang"

    @property
    def description(self) -> str:
        return "Original golang.org color theme (default)"

    @property
    def style(self) -> str:
        return _STYLE

"""Dark dashboard theme."""

from __future__ import annotations

from covhtml.themes.html import HTMLTheme

_STYLE = """\
* { margin: 0; padding: 0; box-sizing: border-box; }
body {
    font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif;
    background: #0d1117;
    color: #c9d1d9;
    padding: 2rem;
    line-height: 1.6;
}
.container { max-width: 1400px; margin: 0 auto; }
h1 { font-size: 2rem; margin-bottom: 0.5rem; color: #58a6ff; }
h2 {
    font-size: 1.25rem;
    margin: 2rem 0 1rem;
    color: #58a6ff;
    border-bottom: 1px solid #30363d;
    padding-bottom: 0.5rem;
}
h3 { font-size: 1rem; margin: 1rem 0 0.25rem; }
a { color: #58a6ff; text-decoration: none; }
.subtitle, .file { color: #8b949e; font-size: 0.875rem; }
.command { margin-bottom: 1.5rem; }
.command code { background: #161b22; padding: 0.25rem 0.5rem; border-radius: 6px; }
.package, table.overview {
    background: #161b22;
    border: 1px solid #30363d;
    border-radius: 6px;
    padding: 1.5rem;
    margin-bottom: 1.5rem;
}
table { border-collapse: collapse; width: 100%; }
th { color: #8b949e; text-align: left; }
th, td { padding: 0.5rem; border-bottom: 1px solid #21262d; }
tr.total td { font-weight: 600; }
.percent { font-weight: 600; }
.percent.success { color: #3fb950; }
.percent.warning { color: #d29922; }
.percent.error { color: #f85149; }
pre.source {
    background: #0d1117;
    border: 1px solid #30363d;
    border-radius: 6px;
    font-size: 0.8125rem;
    overflow-x: auto;
    padding: 0.75rem;
}
pre.source .lineno { color: #6e7681; }
pre.source .miss { background: #4d1a1a; color: #ff7b72; display: block; }
pre.source .hit { display: block; }
.empty-state { color: #8b949e; font-style: italic; text-align: center; padding: 1rem; }
.hidden { display: none; }
"""


class KitTheme(HTMLTheme):
    """Dark theme with card-style package sections."""

    @property
    def name(self) -> str:
        return "kit"

    @property
    def description(self) -> str:
        return "Dark dashboard theme"

    @property
    def style(self) -> str:
        return _STYLE

"""Per-function coverage analysis."""

from __future__ import annotations

from covhtml.analysis.functions import (
    FunctionLine,
    ReportFunction,
    annotate_lines,
    coverage_percent,
    coverage_ratio,
    reached_count,
)

__all__ = [
    "FunctionLine",
    "ReportFunction",
    "annotate_lines",
    "coverage_percent",
    "coverage_ratio",
    "reached_count",
]

"""Console reporters."""

from __future__ import annotations

from covhtml.reporters.terminal import CLIReporter, reporter

__all__ = ["CLIReporter", "reporter"]

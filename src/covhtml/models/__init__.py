"""Coverage data models."""

from __future__ import annotations

from covhtml.models.coverage import (
    CoverageDataError,
    Function,
    Package,
    Statement,
    load_packages,
    read_packages,
)

__all__ = [
    "CoverageDataError",
    "Function",
    "Package",
    "Statement",
    "load_packages",
    "read_packages",
]

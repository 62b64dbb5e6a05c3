"""Shared fixtures for integration tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

# ── Marker registration ──────────────────────────────────────────


def pytest_configure(config: pytest.Config) -> None:
    """Register the ``integration`` marker."""
    config.addinivalue_line("markers", "integration: integration tests")


# ── File creation helpers ────────────────────────────────────────


def write_file(root: Path, rel: str, content: str) -> Path:
    """Write *content* to a file under *root*."""
    f = root / rel
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")
    return f


def write_json(root: Path, rel: str, data: dict[str, Any]) -> Path:
    """Write a JSON file under *root*."""
    return write_file(root, rel, json.dumps(data, indent=2))


def go_function(path: Path, source: str, name: str, reached: dict[str, int]) -> dict[str, Any]:
    """Describe function *name* of *source* in gocov JSON form.

    The body runs from ``func name`` to the next line holding only ``}``;
    each key of *reached* is a statement snippet and its reach count.
    """
    start = source.index(f"func {name}")
    end = source.index("\n}", start) + 2
    statements = []
    for snippet, count in reached.items():
        offset = source.index(snippet, start)
        statements.append({"Start": offset, "End": offset + len(snippet), "Reached": count})
    return {
        "Name": name,
        "File": str(path),
        "Start": start,
        "End": end,
        "Statements": statements,
    }


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a tiny Go project with two packages."""
    write_file(
        tmp_path,
        "mathx/mathx.go",
        "package mathx\n\n"
        "func Abs(x int) int {\n\tif x < 0 {\n\t\treturn -x\n\t}\n\treturn x\n}\n\n"
        "func Max(a, b int) int {\n\tif a > b {\n\t\treturn a\n\t}\n\treturn b\n}\n",
    )
    write_file(
        tmp_path,
        "strx/strx.go",
        "package strx\n\nfunc Empty(s string) bool {\n\treturn s == \"\"\n}\n",
    )
    return tmp_path

"""Coverage records decoded from gocov JSON output.

The collection tool emits one document of the form::

    {"Packages": [{"Name": ..., "Functions": [{"Name": ..., "File": ...,
      "Start": ..., "End": ..., "Statements": [{"Start": ..., "End": ...,
      "Reached": ...}]}]}]}

Offsets are byte offsets into the function's source file.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import IO, Any

logger = logging.getLogger(__name__)


class CoverageDataError(ValueError):
    """Raised when the coverage document is malformed or structurally invalid."""


@dataclass(frozen=True)
class Statement:
    """A single executable statement and how often it was reached."""

    start: int
    """Byte offset of the statement start."""

    end: int
    """Byte offset one past the statement end."""

    reached: int = 0
    """Instrumentation counter (number of executions)."""

    @property
    def is_reached(self) -> bool:
        """Return True if the statement executed at least once."""
        return self.reached > 0

    @property
    def key(self) -> tuple[int, int]:
        """Identity of the statement within its function."""
        return (self.start, self.end)


@dataclass
class Function:
    """A function and the statements it owns."""

    name: str
    file: str
    start: int
    end: int
    statements: list[Statement] = field(default_factory=list)

    @property
    def key(self) -> tuple[str, str, int]:
        """Identity of the function within its package."""
        return (self.name, self.file, self.start)


@dataclass
class Package:
    """A named package. Functions are kept in load order, never deduplicated."""

    name: str
    functions: list[Function] = field(default_factory=list)

    @property
    def total_statements(self) -> int:
        """Return the number of statements across all functions."""
        return sum(len(fn.statements) for fn in self.functions)

    @property
    def reached_statements(self) -> int:
        """Return the number of reached statements across all functions."""
        return sum(1 for fn in self.functions for stmt in fn.statements if stmt.is_reached)


# ── Decoding ─────────────────────────────────────────────────────


def _lookup(data: dict[str, Any], key: str, where: str, *, required: bool = True) -> Any:
    """Fetch *key* from *data* ignoring case (gocov emits ``Name``, not ``name``)."""
    if key in data:
        return data[key]
    lowered = key.lower()
    for candidate, value in data.items():
        if isinstance(candidate, str) and candidate.lower() == lowered:
            return value
    if required:
        raise CoverageDataError(f"{where}: missing field {key!r}")
    return None


def _as_int(value: Any, where: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise CoverageDataError(f"{where}: expected integer, got {value!r}")
    return value


def _as_list(value: Any, where: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise CoverageDataError(f"{where}: expected array, got {type(value).__name__}")
    return value


def _as_object(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise CoverageDataError(f"{where}: expected object, got {type(value).__name__}")
    return value


def _decode_statement(data: Any, where: str) -> Statement:
    obj = _as_object(data, where)
    reached = _lookup(obj, "Reached", where, required=False)
    stmt = Statement(
        start=_as_int(_lookup(obj, "Start", where), f"{where}.Start"),
        end=_as_int(_lookup(obj, "End", where), f"{where}.End"),
        reached=_as_int(reached, f"{where}.Reached") if reached is not None else 0,
    )
    if stmt.reached < 0:
        raise CoverageDataError(f"{where}.Reached: negative reach count {stmt.reached}")
    return stmt


def _decode_function(data: Any, where: str) -> Function:
    obj = _as_object(data, where)
    name = _lookup(obj, "Name", where)
    file_path = _lookup(obj, "File", where)
    if not isinstance(name, str) or not isinstance(file_path, str):
        raise CoverageDataError(f"{where}: Name and File must be strings")
    statements = _as_list(_lookup(obj, "Statements", where, required=False), where)
    return Function(
        name=name,
        file=file_path,
        start=_as_int(_lookup(obj, "Start", where), f"{where}.Start"),
        end=_as_int(_lookup(obj, "End", where), f"{where}.End"),
        statements=[
            _decode_statement(stmt, f"{where}.Statements[{i}]")
            for i, stmt in enumerate(statements)
        ],
    )


def _decode_package(data: Any, where: str) -> Package:
    obj = _as_object(data, where)
    name = _lookup(obj, "Name", where)
    if not isinstance(name, str):
        raise CoverageDataError(f"{where}.Name: expected string, got {name!r}")
    functions = _as_list(_lookup(obj, "Functions", where, required=False), where)
    return Package(
        name=name,
        functions=[
            _decode_function(fn, f"{where}.Functions[{i}]") for i, fn in enumerate(functions)
        ],
    )


def load_packages(data: str | bytes) -> list[Package]:
    """Decode a gocov JSON document into packages, in document order.

    Raises:
        CoverageDataError: If the document is not valid JSON or does not
            have the expected shape.
    """
    try:
        document = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CoverageDataError(f"invalid JSON: {e}") from e

    root = _as_object(document, "document")
    raw_packages = _as_list(_lookup(root, "Packages", "document", required=False), "Packages")
    packages = [
        _decode_package(pkg, f"Packages[{i}]") for i, pkg in enumerate(raw_packages)
    ]
    logger.debug("Decoded %d packages", len(packages))
    return packages


def read_packages(stream: IO[bytes] | IO[str]) -> list[Package]:
    """Read an entire coverage stream and decode it."""
    return load_packages(stream.read())

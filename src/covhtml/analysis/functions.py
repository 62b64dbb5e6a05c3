"""Function-level coverage metrics and source line annotation."""

from __future__ import annotations

import html
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from covhtml.utils.sources import SourceReadError

if TYPE_CHECKING:
    from covhtml.models.coverage import Function, Statement
    from covhtml.utils.sources import SourceCache, SourceFile

_TAB_EXPANSION = "    "


def reached_count(function: Function) -> int:
    """Return the number of statements of *function* executed at least once."""
    return sum(1 for stmt in function.statements if stmt.is_reached)


def coverage_percent(function: Function, reached: int) -> float:
    """Return statement coverage of *function* as a percentage (0.0-100.0).

    A function without statements is vacuously fully covered.
    """
    total = len(function.statements)
    if total == 0:
        return 100.0
    return reached / total * 100


def coverage_ratio(function: Function, reached: int) -> float:
    """Return reached/total as a fraction, 0.0 for a function without statements.

    This is the ordering key used by the coverage sort policies.
    """
    total = len(function.statements)
    if total == 0:
        return 0.0
    return reached / total


@dataclass(frozen=True)
class FunctionLine:
    """One physical source line of a function body."""

    code: str
    """Line text, HTML-escaped with tabs expanded."""

    line_number: int
    """1-based line number in the source file."""

    missed: bool
    """True if statements start on this line and none of them were reached."""


def _statement_lines(statements: list[Statement], source: SourceFile) -> list[tuple[int, bool]]:
    return sorted((source.line_of(stmt.start), stmt.is_reached) for stmt in statements)


def annotate_lines(function: Function, source: SourceFile) -> list[FunctionLine]:
    """Map the statements of *function* onto the lines of its body.

    The byte span ``[start, end)`` is split on ``\\n``; each statement is
    attributed to exactly one line, the one holding its start offset.

    Raises:
        SourceReadError: If the function span lies outside the source file.
    """
    if not 0 <= function.start <= function.end <= len(source.content):
        raise SourceReadError(
            f"{source.path}: span [{function.start}, {function.end}) of {function.name} "
            f"is outside the file ({len(source.content)} bytes)"
        )

    first_line = source.line_of(function.start)
    segments = source.content[function.start : function.end].split(b"\n")
    stmt_lines = _statement_lines(function.statements, source)

    # Statements starting before the body can never match a body line
    cursor = 0
    while cursor < len(stmt_lines) and stmt_lines[cursor][0] < first_line:
        cursor += 1

    lines: list[FunctionLine] = []
    for index, segment in enumerate(segments):
        line_number = first_line + index
        found = False
        hit = False
        while cursor < len(stmt_lines) and stmt_lines[cursor][0] == line_number:
            found = True
            hit = hit or stmt_lines[cursor][1]
            cursor += 1
        text = segment.decode("utf-8", errors="replace").replace("\t", _TAB_EXPANSION)
        lines.append(
            FunctionLine(
                code=html.escape(text),
                line_number=line_number,
                missed=found and not hit,
            )
        )
    return lines


@dataclass
class ReportFunction:
    """A function together with its computed reach statistics."""

    function: Function
    statements_reached: int

    @classmethod
    def from_function(cls, function: Function) -> ReportFunction:
        return cls(function=function, statements_reached=reached_count(function))

    @property
    def name(self) -> str:
        return self.function.name

    @property
    def file(self) -> str:
        return self.function.file

    @property
    def start(self) -> int:
        return self.function.start

    @property
    def total_statements(self) -> int:
        return len(self.function.statements)

    @property
    def coverage_percent(self) -> float:
        """Percentage of reached statements; 100 for a function without statements."""
        return coverage_percent(self.function, self.statements_reached)

    @property
    def coverage_ratio(self) -> float:
        return coverage_ratio(self.function, self.statements_reached)

    @property
    def short_file_name(self) -> str:
        """Base name of the function's source file."""
        return os.path.basename(self.function.file)

    def lines(self, sources: SourceCache) -> list[FunctionLine]:
        """Return the annotated lines of this function's body.

        Raises:
            SourceReadError: If the source file cannot be read.
        """
        return annotate_lines(self.function, sources.load(self.function.file))

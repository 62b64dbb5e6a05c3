"""Name-ordered package collection with reach-count accumulation.

Coverage for one package may arrive several times (for instance one
``gocov test`` run per build tag). Instances sharing a name are folded into
a single entry by summing the reach counts of matching statements.
"""

from __future__ import annotations

import bisect
import dataclasses
import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from covhtml.models.coverage import Function

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterator

    from covhtml.models.coverage import Package, Statement

logger = logging.getLogger(__name__)


def _index_by_key(items: list[Function] | list[Statement]) -> dict[Hashable, list[int]]:
    """Map each item key to the positions holding it, in order."""
    index: dict[Hashable, list[int]] = defaultdict(list)
    for pos, item in enumerate(items):
        index[item.key].append(pos)
    return index


def _accumulate_function(target: Function, source: Function) -> None:
    positions = _index_by_key(target.statements)
    for stmt in source.statements:
        matches = positions.get(stmt.key)
        if not matches:
            logger.warning(
                "Statement %s of %s has no counterpart in the merged package; appending it",
                stmt.key,
                target.name,
            )
            target.statements.append(stmt)
            continue
        pos = matches.pop(0)
        existing = target.statements[pos]
        target.statements[pos] = dataclasses.replace(
            existing, reached=existing.reached + stmt.reached
        )


def accumulate_package(target: Package, source: Package) -> None:
    """Add the reach counts of *source* into *target* in place.

    Functions are matched on ``(name, file, start)`` and statements on
    ``(start, end)``. Items of *source* with no counterpart are appended
    to *target*.
    """
    positions = _index_by_key(target.functions)
    for fn in source.functions:
        matches = positions.get(fn.key)
        if not matches:
            logger.warning(
                "Function %s (%s) is not in the merged package %s; appending it",
                fn.name,
                fn.file,
                target.name,
            )
            target.functions.append(
                Function(
                    name=fn.name,
                    file=fn.file,
                    start=fn.start,
                    end=fn.end,
                    statements=list(fn.statements),
                )
            )
            continue
        _accumulate_function(target.functions[matches.pop(0)], fn)


class PackageSet:
    """Packages kept in ascending name order, unique by name."""

    def __init__(self) -> None:
        self._packages: list[Package] = []

    def add(self, package: Package) -> None:
        """Insert *package*, or accumulate it into an existing same-named entry."""
        index = bisect.bisect_left(self._packages, package.name, key=lambda p: p.name)
        if index < len(self._packages) and self._packages[index].name == package.name:
            logger.debug("Accumulating duplicate package %s", package.name)
            accumulate_package(self._packages[index], package)
        else:
            self._packages.insert(index, package)

    def clear(self) -> None:
        """Remove all packages."""
        self._packages = []

    @property
    def packages(self) -> list[Package]:
        """Packages in ascending name order."""
        return list(self._packages)

    @property
    def names(self) -> list[str]:
        return [pkg.name for pkg in self._packages]

    def __len__(self) -> int:
        return len(self._packages)

    def __iter__(self) -> Iterator[Package]:
        return iter(self._packages)

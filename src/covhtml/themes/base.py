"""Theme interface consumed by report generation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from covhtml.report.builder import ReportData


class Theme(ABC):
    """A named rendering of :class:`~covhtml.report.builder.ReportData`.

    Each theme ships a default stylesheet and script; a custom stylesheet
    supplied by the user replaces ``style`` in the data passed to
    :meth:`render`.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Theme identifier used on the command line (e.g. 'golang')."""

    @property
    @abstractmethod
    def description(self) -> str:
        """One-line description shown by ``--list-themes``."""

    @property
    @abstractmethod
    def style(self) -> str:
        """Default CSS of the theme."""

    @property
    def script(self) -> str:
        """JavaScript embedded in the page. Empty by default."""
        return ""

    @abstractmethod
    def render(self, data: ReportData) -> str:
        """Render *data* to a complete document.

        Raises:
            SourceReadError: If a function's source file cannot be read.
        """

"""Report themes and their registry."""

from __future__ import annotations

from covhtml.themes.base import Theme
from covhtml.themes.golang import GolangTheme
from covhtml.themes.kit import KitTheme

DEFAULT_THEME = "golang"

_THEMES: dict[str, Theme] = {theme.name: theme for theme in (GolangTheme(), KitTheme())}


class UnknownThemeError(KeyError):
    """Raised when a theme name is not registered."""


def list_themes() -> list[Theme]:
    """Return all registered themes sorted by name."""
    return [_THEMES[name] for name in sorted(_THEMES)]


def theme_names() -> list[str]:
    return sorted(_THEMES)


def get_theme(name: str) -> Theme:
    """Return the theme registered as *name*.

    Raises:
        UnknownThemeError: If no such theme exists.
    """
    try:
        return _THEMES[name]
    except KeyError:
        raise UnknownThemeError(f"unknown theme {name!r}") from None


__all__ = [
    "DEFAULT_THEME",
    "GolangTheme",
    "KitTheme",
    "Theme",
    "UnknownThemeError",
    "get_theme",
    "list_themes",
    "theme_names",
]

"""Report options and their parsing from ``.covhtml.yml``."""

from __future__ import annotations

import dataclasses
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from covhtml.report.ordering import SortOrder
from covhtml.themes import DEFAULT_THEME, theme_names

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".covhtml.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")

_MIN_PERCENT = 0
_MAX_PERCENT = 100


class ConfigError(ValueError):
    """Raised when report options are invalid or cannot be loaded."""


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        else:
            result[key] = value
    return result


@dataclass
class ReportOptions:
    """Options controlling which packages and functions a report shows."""

    sort_order: str = SortOrder.HIGH_COVERAGE.value
    """Function ordering: high-coverage, low-coverage or location."""

    reverse: bool = False
    """Put lower coverage functions on top (forces low-coverage)."""

    stylesheet: str = ""
    """Path to a CSS file replacing the theme's default style."""

    function_min: int = _MIN_PERCENT
    """Only show functions whose coverage is at least this percentage."""

    function_max: int = _MAX_PERCENT
    """Only show functions whose coverage is at most this percentage."""

    package_min: int = _MIN_PERCENT
    """Only show packages whose coverage is at least this percentage."""

    package_max: int = _MAX_PERCENT
    """Only show packages whose coverage is at most this percentage."""

    theme: str = DEFAULT_THEME
    """Name of the theme used for rendering."""

    @property
    def order(self) -> SortOrder:
        """Parsed sort order. Raises ValueError for an unknown value."""
        return SortOrder.parse(self.sort_order)


def _as_int(raw: dict[str, Any], key: str, default: int) -> int:
    value = raw.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"report.{key} must be an integer (got: {value!r})") from e


def _as_str(raw: dict[str, Any], key: str, default: str) -> str:
    # An empty YAML key (``theme:``) loads as None; treat it as unset
    value = raw.get(key)
    if value is None:
        return default
    return str(value)


def _as_bool(raw: dict[str, Any], key: str) -> bool:
    value = raw.get(key)
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes"}
    raise ConfigError(f"report.{key} must be a boolean (got: {value!r})")


def _parse_report_options(raw: dict[str, Any]) -> ReportOptions:
    """Parse the ``report`` section of the raw YAML."""
    report_raw = raw.get("report", {})
    if not isinstance(report_raw, dict):
        report_raw = {}

    return ReportOptions(
        sort_order=_as_str(report_raw, "sort", SortOrder.HIGH_COVERAGE.value),
        reverse=_as_bool(report_raw, "reverse"),
        stylesheet=_as_str(
            report_raw, "stylesheet", os.environ.get("COVHTML_STYLESHEET", "")
        ),
        function_min=_as_int(report_raw, "fmin", _MIN_PERCENT),
        function_max=_as_int(report_raw, "fmax", _MAX_PERCENT),
        package_min=_as_int(report_raw, "pmin", _MIN_PERCENT),
        package_max=_as_int(report_raw, "pmax", _MAX_PERCENT),
        theme=_as_str(report_raw, "theme", os.environ.get("COVHTML_THEME", DEFAULT_THEME)),
    )


def load_config(root: str | Path) -> ReportOptions:
    """Load report options from ``.covhtml.yml`` in *root*.

    Falls back to defaults (and environment variables) when the file is
    missing or has no ``report`` section.

    Raises:
        ConfigError: If the file is not valid YAML or holds malformed values.
    """
    config_path = Path(root).resolve() / CONFIG_FILE_NAME

    raw: dict[str, Any] = {}
    if config_path.is_file():
        try:
            parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(f"{config_path}: invalid YAML: {e}") from e
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)
        logger.debug("Loaded report options from %s", config_path)

    return _parse_report_options(raw)


def validate_options(options: ReportOptions) -> list[str]:
    """Validate report options and return a list of error messages.

    Returns an empty list if the options are valid.
    """
    errors: list[str] = []

    if not SortOrder.is_valid(options.sort_order):
        choices = ", ".join(order.value for order in SortOrder)
        errors.append(f"invalid sort order {options.sort_order!r} (expected one of: {choices})")

    if options.function_min > options.function_max:
        errors.append(
            f"empty report if fmin > fmax (got fmin={options.function_min}, "
            f"fmax={options.function_max}), please use a smaller fmin value"
        )

    if options.theme not in theme_names():
        errors.append(
            f"unknown theme {options.theme!r} (available: {', '.join(theme_names())})"
        )

    return errors


def _clamp(value: int) -> int:
    return max(_MIN_PERCENT, min(_MAX_PERCENT, value))


def normalize_options(options: ReportOptions) -> ReportOptions:
    """Validate *options* and return a copy ready for report generation.

    Percentage bounds are clamped into ``[0, 100]`` and ``reverse`` is
    folded into the sort order.

    Raises:
        ConfigError: If :func:`validate_options` reports any error.
    """
    errors = validate_options(options)
    if errors:
        raise ConfigError("; ".join(errors))

    sort_order = SortOrder.LOW_COVERAGE.value if options.reverse else options.sort_order
    return dataclasses.replace(
        options,
        sort_order=sort_order,
        reverse=False,
        function_min=_clamp(options.function_min),
        function_max=_clamp(options.function_max),
        package_min=_clamp(options.package_min),
        package_max=_clamp(options.package_max),
    )

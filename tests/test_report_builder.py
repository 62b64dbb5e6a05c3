"""Tests for covhtml.report.builder — report assembly and generation."""

from __future__ import annotations

import io
import json
from typing import TYPE_CHECKING, Any

import pytest

from covhtml.config import ConfigError, ReportOptions
from covhtml.models.coverage import Function, Package, Statement, load_packages
from covhtml.report.builder import (
    OVERVIEW_NAME,
    Report,
    ReportError,
    ReportPackage,
    build_report_package,
    generate_report,
    overview,
    prepare_report,
)
from covhtml.themes import get_theme

if TYPE_CHECKING:
    from pathlib import Path

_GO_SOURCE = """\
package p

func Half() int {
\tx := 1
\treturn x
}
"""


def _function(name: str, *reach: int, file: str = "p.go", start: int = 0) -> Function:
    return Function(
        name=name,
        file=file,
        start=start,
        end=start + 100,
        statements=[Statement(start + i, start + i + 1, r) for i, r in enumerate(reach)],
    )


def _document(packages: list[dict[str, Any]]) -> bytes:
    return json.dumps({"Packages": packages}).encode("utf-8")


def _half_package(file_path: str, name: str = "p") -> dict[str, Any]:
    """A package whose single function has one reached and one missed statement."""
    start = _GO_SOURCE.index("func")
    end = _GO_SOURCE.index("}") + 1
    x = _GO_SOURCE.index("x := 1")
    ret = _GO_SOURCE.index("return x")
    return {
        "Name": name,
        "Functions": [
            {
                "Name": "Half",
                "File": file_path,
                "Start": start,
                "End": end,
                "Statements": [
                    {"Start": x, "End": x + 6, "Reached": 1},
                    {"Start": ret, "End": ret + 8, "Reached": 0},
                ],
            }
        ],
    }


class TestReportPackage:
    def test_percentage(self) -> None:
        rp = ReportPackage(package=Package("p"), total_statements=4, reached_statements=1)
        assert rp.percentage_reached == 25.0

    def test_empty_package_is_zero(self) -> None:
        assert ReportPackage(package=Package("p")).percentage_reached == 0.0


class TestBuildReportPackage:
    def test_totals_cover_all_functions(self) -> None:
        pkg = Package("p", [_function("full", 1, 1), _function("none", 0, 0, 0, start=200)])
        rp = build_report_package(pkg, ReportOptions(function_min=100, function_max=100))
        assert rp.total_statements == 5
        assert rp.reached_statements == 2
        assert [fn.name for fn in rp.functions] == ["full"]

    def test_functions_sorted(self) -> None:
        pkg = Package(
            "p",
            [_function("full", 1, 1), _function("none", 0, start=200), _function("half", 1, 0, start=400)],
        )
        rp = build_report_package(pkg, ReportOptions())
        assert [fn.name for fn in rp.functions] == ["none", "half", "full"]
        rp = build_report_package(pkg, ReportOptions(sort_order="location"))
        assert [fn.name for fn in rp.functions] == ["full", "none", "half"]


class TestReport:
    def test_end_to_end_single_package(self) -> None:
        packages = load_packages(_document([_half_package("p.go")]))
        report = Report.from_packages(packages, ReportOptions())
        built = report.build()
        assert len(built) == 1
        rp = built[0]
        assert rp.name == "p"
        assert rp.total_statements == 2
        assert rp.reached_statements == 1
        assert rp.percentage_reached == 50.0

    def test_duplicate_packages_are_merged(self) -> None:
        report = Report(ReportOptions())
        report.add_package(Package("p", [_function("f", 0, 1)]))
        report.add_package(Package("p", [_function("f", 2, 0)]))
        assert [p.name for p in report.packages] == ["p"]
        reach = [s.reached for s in report.packages[0].functions[0].statements]
        assert reach == [2, 1]
        assert report.build()[0].reached_statements == 2

    def test_package_window(self) -> None:
        report = Report.from_packages(
            [
                Package("full", [_function("f", 1, 1)]),
                Package("half", [_function("f", 1, 0)]),
                Package("none", [_function("f", 0, 0)]),
            ],
            ReportOptions(package_min=40, package_max=60),
        )
        assert [rp.name for rp in report.build()] == ["half"]

    def test_package_window_ignores_function_filter(self) -> None:
        report = Report.from_packages(
            [Package("p", [_function("full", 1, 1), _function("none", 0, 0, start=200)])],
            ReportOptions(function_min=0, function_max=0, package_min=50, package_max=50),
        )
        built = report.build()
        assert [rp.name for rp in built] == ["p"]
        assert [fn.name for fn in built[0].functions] == ["none"]

    def test_packages_in_name_order(self) -> None:
        report = Report.from_packages(
            [Package("zeta", [_function("f", 1)]), Package("alpha", [_function("f", 1)])],
            ReportOptions(),
        )
        assert [rp.name for rp in report.build()] == ["alpha", "zeta"]

    def test_clear(self) -> None:
        report = Report.from_packages([Package("p", [_function("f", 1)])], ReportOptions())
        report.clear()
        assert report.build() == []

    def test_data_command_and_overview(self) -> None:
        report = Report.from_packages(
            [Package("a", [_function("f", 1, 0)]), Package("b", [_function("f", 1, 1)])],
            ReportOptions(),
        )
        data = report.data(get_theme("golang"), command_args=["--sort", "location"])
        assert data.command == "gocov test a b | covhtml --sort location"
        assert data.overview is not None
        assert data.overview.name == OVERVIEW_NAME
        assert (data.overview.reached_statements, data.overview.total_statements) == (3, 4)
        assert data.style == get_theme("golang").style

    def test_data_custom_stylesheet(self, tmp_path: Path) -> None:
        css = tmp_path / "custom.css"
        css.write_text("body { color: red; }", encoding="utf-8")
        report = Report(ReportOptions(stylesheet=str(css)))
        data = report.data(get_theme("golang"), command_args=[])
        assert data.style == "body { color: red; }"


class TestOverview:
    def test_single_package_has_no_overview(self) -> None:
        assert overview([ReportPackage(package=Package("p"), total_statements=2)]) is None

    def test_sums_totals(self) -> None:
        total = overview(
            [
                ReportPackage(package=Package("a"), total_statements=2, reached_statements=1),
                ReportPackage(package=Package("b"), total_statements=3, reached_statements=3),
            ]
        )
        assert total is not None
        assert total.functions == []
        assert total.percentage_reached == 80.0


class TestGenerateReport:
    def test_invalid_window_rejected_before_reading(self) -> None:
        stream = io.BytesIO(_document([_half_package("p.go")]))
        with pytest.raises(ConfigError, match="fmin > fmax"):
            generate_report(stream, ReportOptions(function_min=80, function_max=20))
        assert stream.tell() == 0

    def test_invalid_sort_order_rejected(self) -> None:
        stream = io.BytesIO(b"{}")
        with pytest.raises(ConfigError, match="invalid sort order"):
            generate_report(stream, ReportOptions(sort_order="size"))
        assert stream.tell() == 0

    def test_malformed_json(self) -> None:
        with pytest.raises(ReportError) as excinfo:
            generate_report(io.BytesIO(b"{oops"), ReportOptions(), command_args=[])
        assert excinfo.value.context == "unmarshal coverage data"

    def test_missing_stylesheet(self, tmp_path: Path) -> None:
        options = ReportOptions(stylesheet=str(tmp_path / "missing.css"))
        with pytest.raises(ReportError) as excinfo:
            generate_report(io.BytesIO(b"{}"), options, command_args=[])
        assert excinfo.value.context == "stylesheet"

    def test_unreadable_stream(self) -> None:
        class _Broken(io.BytesIO):
            def read(self, *args: Any) -> bytes:
                raise OSError("device gone")

        with pytest.raises(ReportError) as excinfo:
            generate_report(_Broken(), ReportOptions(), command_args=[])
        assert excinfo.value.context == "read coverage data"
        assert "device gone" in str(excinfo.value)

    def test_missing_source_is_fatal(self, tmp_path: Path) -> None:
        stream = io.BytesIO(_document([_half_package(str(tmp_path / "gone.go"))]))
        with pytest.raises(ReportError) as excinfo:
            generate_report(stream, ReportOptions(), command_args=[])
        assert excinfo.value.context == "render report"

    def test_renders_annotated_html(self, tmp_path: Path) -> None:
        source = tmp_path / "half.go"
        source.write_text(_GO_SOURCE, encoding="utf-8")
        stream = io.BytesIO(_document([_half_package(str(source))]))
        html = generate_report(stream, ReportOptions(), command_args=["half.json"])
        assert "<!DOCTYPE html>" in html
        assert "Half" in html
        assert "50.00%" in html
        assert "MISS" in html
        assert "gocov test p | covhtml half.json" in html

    def test_prepare_applies_reverse(self) -> None:
        stream = io.BytesIO(
            _document(
                [
                    {
                        "Name": "p",
                        "Functions": [
                            {"Name": "none", "File": "p.go", "Start": 0, "End": 1,
                             "Statements": [{"Start": 0, "End": 1, "Reached": 0}]},
                            {"Name": "full", "File": "p.go", "Start": 2, "End": 3,
                             "Statements": [{"Start": 2, "End": 3, "Reached": 1}]},
                        ],
                    }
                ]
            )
        )
        theme, data = prepare_report(stream, ReportOptions(reverse=True), command_args=[])
        assert theme.name == "golang"
        assert [fn.name for fn in data.packages[0].functions] == ["full", "none"]

"""Tests for the geoid-height command."""

from __future__ import annotations

import pytest

from domain.geoid.value_objects import HeightReport
from interfaces.cli import (
    EXIT_INVALID_INPUT,
    EXIT_OK,
    EXIT_OUT_OF_BOUNDS,
    build_parser,
    format_report,
    main,
)
from tests.conftest_utils import get_fixtures_dir

MODEL_2X2 = str(get_fixtures_dir() / "geoid_2x2.dat")
MODEL_LEGACY = str(get_fixtures_dir() / "geoid_legacy_pt08.dat")


def test_prints_four_result_lines(capsys) -> None:
    code = main(
        ["--model", MODEL_2X2, "--lat", "40.5", "--lon", "-8.5", "--height", "148"],
        environ={},
    )

    assert code == EXIT_OK
    assert capsys.readouterr().out.splitlines() == [
        "GPS Coordinates: (40.5, -8.5)",
        "Ellipsoid height: 148 m",
        "Geoid height: 49.75 m",
        "Topographic height: 98.25 m",
    ]


def test_reference_query_is_default(capsys) -> None:
    code = main(["--model", MODEL_2X2], environ={})

    assert code == EXIT_OK
    out = capsys.readouterr().out
    assert out.startswith("GPS Coordinates: (41.1579, ")
    assert "Ellipsoid height: 148 m" in out


def test_environment_supplies_missing_options(capsys) -> None:
    environ = {
        "GEOID_MODEL": MODEL_2X2,
        "GEOID_LATITUDE": "40.5",
        "GEOID_LONGITUDE": "-8.5",
        "GEOID_ELLIPSOID_HEIGHT": "100",
    }
    assert main([], environ=environ) == EXIT_OK
    assert "Topographic height: 50.25 m" in capsys.readouterr().out


def test_arguments_override_environment(capsys) -> None:
    environ = {"GEOID_MODEL": MODEL_2X2, "GEOID_LATITUDE": "40.0"}
    assert main(["--lat", "41", "--lon", "-9", "--height", "50"], environ) == EXIT_OK
    assert "Geoid height: 48 m" in capsys.readouterr().out


def test_legacy_layout_option(capsys) -> None:
    argv = ["--model", MODEL_LEGACY, "--layout", "legacy-flat"]
    argv += ["--lat", "36.9", "--lon", "-9.5", "--height", "0"]
    assert main(argv, environ={}) == EXIT_OK
    assert "Geoid height: -9.5 m" in capsys.readouterr().out


def test_missing_model_is_invalid_configuration(capsys) -> None:
    assert main([], environ={}) == EXIT_INVALID_INPUT
    assert "Invalid configuration" in capsys.readouterr().err


def test_latitude_out_of_range_rejected(capsys) -> None:
    assert main(["--model", MODEL_2X2, "--lat", "95"], environ={}) == (
        EXIT_INVALID_INPUT
    )
    assert "Invalid configuration" in capsys.readouterr().err


def test_unreadable_model(tmp_path, capsys) -> None:
    code = main(["--model", str(tmp_path / "missing.dat")], environ={})
    assert code == EXIT_INVALID_INPUT
    assert "Cannot load geoid model" in capsys.readouterr().err


def test_malformed_model(capsys) -> None:
    code = main(["--model", str(get_fixtures_dir() / "two_tokens.dat")], environ={})
    assert code == EXIT_INVALID_INPUT


def test_model_outside_valid_coordinates(tmp_path, capsys) -> None:
    path = tmp_path / "polar.dat"
    rows = [(0, 89), (1, 89), (0, 95), (1, 95)]
    path.write_text(
        "Longitude\tLatitude\tHeight\n"
        + "".join(f"{lon}\t{lat}\t10\n" for lon, lat in rows),
        encoding="utf-8",
    )
    argv = ["--model", str(path), "--lat", "89.5", "--lon", "0.5", "--strict"]

    assert main(argv, environ={}) == EXIT_INVALID_INPUT
    assert "Cannot load geoid model" in capsys.readouterr().err


def test_strict_rejects_point_outside_model(capsys) -> None:
    argv = ["--model", MODEL_2X2, "--lat", "45", "--lon", "-8.5", "--strict"]
    assert main(argv, environ={}) == EXIT_OUT_OF_BOUNDS
    assert "outside bounds" in capsys.readouterr().err


def test_clamps_without_strict(capsys) -> None:
    argv = ["--model", MODEL_2X2, "--lat", "45", "--lon", "-8.5", "--height", "0"]
    assert main(argv, environ={}) == EXIT_OK
    assert "Geoid height: 48.5 m" in capsys.readouterr().out


def test_invalid_layout_choice_exits() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--layout", "cubic"])


def test_format_report_uses_short_general_format() -> None:
    report = HeightReport(
        latitude=41.157944,
        longitude=-8.5,
        ellipsoid_height_m=148.0,
        geoid_height_m=50.0,
        topographic_height_m=98.0,
    )
    assert format_report(report).splitlines()[0] == "GPS Coordinates: (41.1579, -8.5)"
    assert format_report(report).splitlines()[3] == "Topographic height: 98 m"

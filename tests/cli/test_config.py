"""Tests for height query configuration resolution."""

from __future__ import annotations

import argparse
from pathlib import Path

import pytest
from pydantic import ValidationError

from domain.geoid.value_objects import GridLayout
from interfaces.config import (
    DEFAULT_ELLIPSOID_HEIGHT_M,
    DEFAULT_LATITUDE,
    DEFAULT_LONGITUDE,
    HeightQueryConfig,
)


def namespace(**kwargs) -> argparse.Namespace:
    fields = {
        "model_path": None,
        "latitude": None,
        "longitude": None,
        "ellipsoid_height_m": None,
        "layout": None,
        "strict": False,
    }
    fields.update(kwargs)
    return argparse.Namespace(**fields)


def test_defaults() -> None:
    config = HeightQueryConfig.from_sources(namespace(model_path="m.dat"), {})
    assert config.model_path == Path("m.dat")
    assert config.latitude == DEFAULT_LATITUDE
    assert config.longitude == DEFAULT_LONGITUDE
    assert config.ellipsoid_height_m == DEFAULT_ELLIPSOID_HEIGHT_M
    assert config.layout is GridLayout.REGULAR
    assert config.strict is False


def test_environment_strings_are_coerced() -> None:
    environ = {
        "GEOID_MODEL": "env.dat",
        "GEOID_LATITUDE": "40.5",
        "GEOID_LONGITUDE": "-8.5",
        "GEOID_ELLIPSOID_HEIGHT": "12.25",
        "GEOID_LAYOUT": "legacy-flat",
    }
    config = HeightQueryConfig.from_sources(namespace(), environ)
    assert config.model_path == Path("env.dat")
    assert config.latitude == 40.5
    assert config.longitude == -8.5
    assert config.ellipsoid_height_m == 12.25
    assert config.layout is GridLayout.LEGACY_FLAT


def test_arguments_take_precedence() -> None:
    config = HeightQueryConfig.from_sources(
        namespace(model_path="arg.dat", latitude=10.0, strict=True),
        {"GEOID_MODEL": "env.dat", "GEOID_LATITUDE": "20"},
    )
    assert config.model_path == Path("arg.dat")
    assert config.latitude == 10.0
    assert config.strict is True


def test_model_path_required() -> None:
    with pytest.raises(ValidationError):
        HeightQueryConfig.from_sources(namespace(), {})


@pytest.mark.parametrize(
    "environ",
    [
        {"GEOID_LATITUDE": "north"},
        {"GEOID_LATITUDE": "91"},
        {"GEOID_LONGITUDE": "-181"},
        {"GEOID_LAYOUT": "spline"},
    ],
)
def test_invalid_values_rejected(environ: dict[str, str]) -> None:
    with pytest.raises(ValidationError):
        HeightQueryConfig.from_sources(namespace(model_path="m.dat"), environ)


def test_frozen() -> None:
    config = HeightQueryConfig.from_sources(namespace(model_path="m.dat"), {})
    with pytest.raises(ValidationError):
        config.latitude = 0.0  # type: ignore[misc]

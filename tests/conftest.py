"""Root pytest configuration for all tests.

Provides fixtures shared by every layer: a factory that writes model tables
to tmp_path, and the reference 2x2 grid used across domain tests.

Domain tests construct GeoidGrid directly; only tests/gis/ reads files.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from domain.geoid.value_objects import GeoidGrid
from tests.conftest_utils import make_grid, model_text

# Corners: lat {40, 41} x lon {-9, -8}
GRID_2X2_ROWS: list[tuple[float, float, float]] = [
    (-9.0, 40.0, 50.0),
    (-8.0, 40.0, 52.0),
    (-9.0, 41.0, 48.0),
    (-8.0, 41.0, 49.0),
]


@pytest.fixture
def write_model(tmp_path: Path) -> Callable[..., Path]:
    """Factory fixture: write rows (or raw text) to a .dat file in tmp_path."""

    def _write(
        rows: Sequence[Sequence[float]] = (),
        *,
        text: str | None = None,
        name: str = "model.dat",
        **kwargs: str,
    ) -> Path:
        path = tmp_path / name
        path.write_text(
            text if text is not None else model_text(rows, **kwargs),
            encoding="utf-8",
        )
        return path

    return _write


@pytest.fixture
def grid_2x2() -> GeoidGrid:
    """2x2 grid: (40,-9)=50, (40,-8)=52, (41,-9)=48, (41,-8)=49."""
    return make_grid([[50.0, 52.0], [48.0, 49.0]], 40.0, -9.0, 1.0, 1.0)

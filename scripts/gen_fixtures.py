#!/usr/bin/env python3
"""Generate synthetic geoid model fixtures for loader and query tests.

Fixtures are small synthetic tables - not real geoid data.

Usage:
    python scripts/gen_fixtures.py

Requirements:
    pip install numpy

Output:
    tests/fixtures/*.dat

Dependencies:
    This script imports from shared/fixtures_expected.py (not tests/) to avoid
    circular dependencies between scripts and tests packages.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import numpy as np

from shared.fixtures_expected import EXPECTED_FIXTURE_COUNT, EXPECTED_FIXTURES

# Output directory
FIXTURES_DIR = Path(__file__).parent.parent / "tests" / "fixtures"

HEADER = "Longitude\tLatitude\tHeight"

# =============================================================================
# Grid Definitions
# =============================================================================
# 2x2 grid around Aveiro: lat {40, 41}, lon {-9, -8}
GRID_2X2: list[tuple[float, float, float]] = [
    (-9.0, 40.0, 50.0),
    (-8.0, 40.0, 52.0),
    (-9.0, 41.0, 48.0),
    (-8.0, 41.0, 49.0),
]

# 3x4 grid listed north to south; undulation is a plane so bilinear
# interpolation reproduces it exactly:
#     N(lat, lon) = 50 + 2 (lon + 9) - 4 (lat - 40)
REGULAR_LATS = np.array([41.0, 40.5, 40.0])
REGULAR_LONS = np.array([-9.0, -8.5, -8.0, -7.5])

# Excerpt in the layout of the original PT08 sample file
LEGACY_PT08: list[tuple[float, float, float]] = [
    (-9.5, 36.9, 51.2),
    (-9.0, 36.9, 51.5),
    (-8.5, 36.9, 51.9),
    (-9.5, 37.4, 51.0),
]


def plane_undulation(lat: float, lon: float) -> float:
    return 50.0 + 2.0 * (lon + 9.0) - 4.0 * (lat - 40.0)


def format_rows(rows: Iterable[tuple[float, float, float]], sep: str = "\t") -> str:
    return "".join(f"{lon:g}{sep}{lat:g}{sep}{h:g}\n" for lon, lat, h in rows)


def regular_rows() -> list[tuple[float, float, float]]:
    lat_grid, lon_grid = np.meshgrid(REGULAR_LATS, REGULAR_LONS, indexing="ij")
    return [
        (float(lon), float(lat), plane_undulation(float(lat), float(lon)))
        for lat, lon in zip(lat_grid.ravel(), lon_grid.ravel())
    ]


def build_fixtures() -> dict[str, str]:
    """Return {filename: file text} for every fixture."""
    return {
        "bad_header.dat": "Lon\tLat\tHeight\n" + format_rows(GRID_2X2),
        "geoid_2x2.dat": HEADER + "\n" + format_rows(GRID_2X2),
        "geoid_legacy_pt08.dat": HEADER + "\n" + format_rows(LEGACY_PT08),
        "geoid_regular_3x4.dat": HEADER + "\n" + format_rows(regular_rows(), " "),
        "header_only.dat": HEADER + "\n",
        "single_row.dat": HEADER + "\n" + format_rows(GRID_2X2[:1]),
        "two_tokens.dat": HEADER
        + "\n"
        + format_rows(GRID_2X2[:1])
        + "-8\t40\n"
        + format_rows(GRID_2X2[2:]),
    }


def main() -> None:
    FIXTURES_DIR.mkdir(parents=True, exist_ok=True)
    fixtures = build_fixtures()

    if sorted(fixtures) != EXPECTED_FIXTURES:
        raise SystemExit(
            f"Fixture definitions out of sync with shared/fixtures_expected.py: "
            f"{sorted(set(fixtures) ^ set(EXPECTED_FIXTURES))}"
        )

    for name, text in fixtures.items():
        (FIXTURES_DIR / name).write_text(text, encoding="utf-8")
        print(f"Wrote {name}")

    print(f"Generated {len(fixtures)}/{EXPECTED_FIXTURE_COUNT} fixtures")


if __name__ == "__main__":
    main()

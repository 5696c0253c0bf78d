"""Geoid Bounded Context - Domain Services.

Pure domain logic for geoid height queries.
NO I/O operations - model loading is implemented by infrastructure adapters
under `src/infrastructure/geoid/tabular_adapter.py` via domain ports.

Query pipeline:
    locate_cell -> interpolate_undulation -> compute_topographic_height

Out-of-bounds queries are clamped to the nearest edge cell. Callers that want
strict rejection validate first with `require_within_bounds` (or pass
``strict=True``).
"""

from __future__ import annotations

import math

from domain.geoid.errors import PointOutOfBoundsError
from domain.geoid.value_objects import CellIndices, GeoidGrid, GeoPoint, HeightReport


# ---------------------------------------------------------------------------
# Query Validation
# ---------------------------------------------------------------------------
def is_within_bounds(grid: GeoidGrid, lat: float, lon: float) -> bool:
    """Check if a query lies within the grid extent (inclusive at both edges).

    A query exactly on the last row or column is inside the grid.
    """
    return grid.bounds.contains(lat, lon)


def require_within_bounds(grid: GeoidGrid, lat: float, lon: float) -> None:
    """Raise PointOutOfBoundsError if the query is outside the grid extent."""
    if not is_within_bounds(grid, lat, lon):
        # model_construct: the offending point may not even be a valid coordinate
        point = GeoPoint.model_construct(latitude=lat, longitude=lon)
        raise PointOutOfBoundsError(point, grid.bounds)


# ---------------------------------------------------------------------------
# Cell Location
# ---------------------------------------------------------------------------
def _clamp(index: int, count: int) -> int:
    return max(0, min(index, count - 1))


def locate_cell(grid: GeoidGrid, lat: float, lon: float) -> CellIndices:
    """Find the four grid nodes surrounding a query coordinate.

    Fractional positions are floored/ceiled and then clamped into the grid,
    so queries beyond the edges map onto the nearest edge cell instead of
    raising. A query exactly on a grid line yields equal low/high indices.

    Args:
        grid: Loaded geoid grid
        lat: Query latitude in degrees
        lon: Query longitude in degrees

    Returns:
        CellIndices(row_low, col_low, row_high, col_high)

    Raises:
        ValueError: If lat or lon is NaN or infinite
    """
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise ValueError(f"Query coordinate must be finite: ({lat}, {lon})")

    row = (lat - grid.lat_min) / grid.lat_step
    col = (lon - grid.lon_min) / grid.lon_step

    return CellIndices(
        row_low=_clamp(math.floor(row), grid.row_count),
        col_low=_clamp(math.floor(col), grid.col_count),
        row_high=_clamp(math.ceil(row), grid.row_count),
        col_high=_clamp(math.ceil(col), grid.col_count),
    )


# ---------------------------------------------------------------------------
# Bilinear Interpolation
# ---------------------------------------------------------------------------
def interpolate_undulation(grid: GeoidGrid, lat: float, lon: float) -> float:
    """Interpolate the geoid undulation at a point from the 4 surrounding nodes.

    Interpolates along longitude on both rows, then along latitude between
    the two results. Offsets are measured from the low corner and are not
    clamped to [0, 1].

    Args:
        grid: Loaded geoid grid
        lat: Query latitude in degrees
        lon: Query longitude in degrees

    Returns:
        Undulation in meters
    """
    cell = locate_cell(grid, lat, lon)

    h11 = grid.value_at(cell.row_low, cell.col_low)
    h12 = grid.value_at(cell.row_low, cell.col_high)
    h21 = grid.value_at(cell.row_high, cell.col_low)
    h22 = grid.value_at(cell.row_high, cell.col_high)

    dlat = (lat - grid.lat_min - cell.row_low * grid.lat_step) / grid.lat_step
    dlon = (lon - grid.lon_min - cell.col_low * grid.lon_step) / grid.lon_step

    h1 = h11 + dlon * (h12 - h11)
    h2 = h21 + dlon * (h22 - h21)
    return float(h1 + dlat * (h2 - h1))


# ---------------------------------------------------------------------------
# Topographic Height
# ---------------------------------------------------------------------------
def compute_topographic_height(
    grid: GeoidGrid,
    lat: float,
    lon: float,
    ellipsoid_height: float,
    *,
    strict: bool = False,
) -> float:
    """Convert an ellipsoidal height to a topographic (orthometric) height.

    Args:
        grid: Loaded geoid grid
        lat: Query latitude in degrees
        lon: Query longitude in degrees
        ellipsoid_height: Height above the ellipsoid in meters
        strict: Reject queries outside the grid instead of clamping

    Returns:
        ellipsoid_height minus the interpolated undulation, in meters

    Raises:
        PointOutOfBoundsError: If strict and the query is outside the grid

    Example:
        >>> grid = load_geoid_model("GeodPT08.dat")
        >>> compute_topographic_height(grid, 41.157944, -8.629105, 148.0)
    """
    if strict:
        require_within_bounds(grid, lat, lon)
    return ellipsoid_height - interpolate_undulation(grid, lat, lon)


def report_height(
    grid: GeoidGrid,
    point: GeoPoint,
    ellipsoid_height_m: float,
    *,
    strict: bool = False,
) -> HeightReport:
    """Build a HeightReport with the values a driver prints for one query."""
    if strict:
        require_within_bounds(grid, point.latitude, point.longitude)

    geoid_height = interpolate_undulation(grid, point.latitude, point.longitude)
    return HeightReport(
        latitude=point.latitude,
        longitude=point.longitude,
        ellipsoid_height_m=ellipsoid_height_m,
        geoid_height_m=geoid_height,
        topographic_height_m=ellipsoid_height_m - geoid_height,
    )

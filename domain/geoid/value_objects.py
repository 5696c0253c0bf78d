"""Geoid Bounded Context - Value Objects.

Immutable data structures representing geoid models and height queries.
All validation occurs at construction time via Pydantic.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Numeric Constants
# ---------------------------------------------------------------------------
# Geoid grids are published both as [-180, 180] and [0, 360] longitudes
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 360.0
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0

# Tolerance for the topographic height identity in HeightReport
HEIGHT_TOLERANCE_M = 1e-9


class GridLayout(str, Enum):
    """How records of a tabular geoid model map onto grid cells."""

    # One record per grid node; rows are latitudes, columns are longitudes
    REGULAR = "regular"
    # Record r is row r, and cell (r, c) is the c-th number of that record
    LEGACY_FLAT = "legacy-flat"


class BoundingBox(BaseModel):
    """Geographic extent of a geoid grid (Value Object).

    Invariants are enforced at construction time - invalid BoundingBox
    cannot be instantiated.
    """

    min_x: float  # Western boundary (longitude)
    min_y: float  # Southern boundary (latitude)
    max_x: float  # Eastern boundary (longitude)
    max_y: float  # Northern boundary (latitude)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_bounds(self) -> "BoundingBox":
        # Longitude range
        if not (MIN_LONGITUDE <= self.min_x <= MAX_LONGITUDE):
            raise ValueError(f"min_x longitude out of range: {self.min_x}")
        if not (MIN_LONGITUDE <= self.max_x <= MAX_LONGITUDE):
            raise ValueError(f"max_x longitude out of range: {self.max_x}")
        # Latitude range
        if not (MIN_LATITUDE <= self.min_y <= MAX_LATITUDE):
            raise ValueError(f"min_y latitude out of range: {self.min_y}")
        if not (MIN_LATITUDE <= self.max_y <= MAX_LATITUDE):
            raise ValueError(f"max_y latitude out of range: {self.max_y}")
        # Ordering (a single-row or single-column grid has zero extent)
        if self.min_x > self.max_x:
            raise ValueError(
                f"Invalid x ordering: min_x={self.min_x} > max_x={self.max_x}"
            )
        if self.min_y > self.max_y:
            raise ValueError(
                f"Invalid y ordering: min_y={self.min_y} > max_y={self.max_y}"
            )
        return self

    def contains(self, latitude: float, longitude: float) -> bool:
        """Inclusive containment test on both edges."""
        return (
            self.min_x <= longitude <= self.max_x
            and self.min_y <= latitude <= self.max_y
        )


class GeoPoint(BaseModel):
    """Geographic coordinate of a height query (Value Object).

    Invariants:
        GP-1: latitude in [-90, 90]
        GP-2: longitude in [-180, 360]
    """

    latitude: float = Field(ge=MIN_LATITUDE, le=MAX_LATITUDE)
    longitude: float = Field(ge=MIN_LONGITUDE, le=MAX_LONGITUDE)

    model_config = ConfigDict(frozen=True)


class CellIndices(NamedTuple):
    """Row/column indices of the four grid nodes surrounding a query."""

    row_low: int
    col_low: int
    row_high: int
    col_high: int


class GeoidGrid(BaseModel):
    """Immutable geoid undulation grid with its geometry (Value Object).

    Samples are stored as a flat row-major float64 array; cell (r, c) lives at
    offset ``r * col_count + c``. The array is made read-only at construction
    time, so a loaded grid can be shared between any number of queries.

    Steps are signed: a file listed north to south yields a negative
    ``lat_step`` and ``lat_min`` is then the northern edge. Zero or
    non-finite steps are rejected so interpolation never divides by zero.

    ``lat_last``/``lon_last`` hold the coordinates of the last row and column
    as read from the source; ``lat_min + (row_count - 1) * lat_step`` can miss
    them by an ulp, so the extent uses the recorded values when present.
    Every edge coordinate must be a valid latitude/longitude.
    """

    row_count: int = Field(ge=1)
    col_count: int = Field(ge=1)
    lat_min: float  # Latitude of row 0
    lon_min: float  # Longitude of column 0
    lat_step: float  # Signed latitude spacing between rows
    lon_step: float  # Signed longitude spacing between columns
    lat_last: float | None = None  # Latitude of the last row, as recorded
    lon_last: float | None = None  # Longitude of the last column, as recorded
    samples: NDArray[np.float64]  # Flat, read-only, row_count * col_count values
    layout: GridLayout = GridLayout.REGULAR
    source_name: str | None = None  # File name the grid was loaded from

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @model_validator(mode="after")
    def validate_grid(self) -> "GeoidGrid":
        if self.samples.ndim != 1:
            raise ValueError(f"Samples must be 1D, got {self.samples.ndim}D")
        expected = self.row_count * self.col_count
        if self.samples.size != expected:
            raise ValueError(
                f"Expected {expected} samples for a {self.row_count}x"
                f"{self.col_count} grid, got {self.samples.size}"
            )
        for name in ("lat_min", "lon_min", "lat_step", "lon_step"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite: {getattr(self, name)}")
        if self.lat_step == 0 or self.lon_step == 0:
            raise ValueError(
                f"Steps must be non-zero: lat_step={self.lat_step}, "
                f"lon_step={self.lon_step}"
            )
        for name in ("lat_last", "lon_last"):
            value = getattr(self, name)
            if value is not None and not math.isfinite(value):
                raise ValueError(f"{name} must be finite: {value}")

        # Extent (bounds must always be constructible)
        for lat in (self.lat_min, self.lat_max):
            if not (MIN_LATITUDE <= lat <= MAX_LATITUDE):
                raise ValueError(f"Grid latitude out of range: {lat}")
        for lon in (self.lon_min, self.lon_max):
            if not (MIN_LONGITUDE <= lon <= MAX_LONGITUDE):
                raise ValueError(f"Grid longitude out of range: {lon}")

        # Own a contiguous float64 copy and freeze it; never flip flags on
        # the caller's array.
        immutable = np.array(self.samples, dtype=np.float64, copy=True, order="C")
        immutable.flags.writeable = False
        object.__setattr__(self, "samples", immutable)

        return self

    @property
    def lat_max(self) -> float:
        """Latitude of the last row."""
        if self.lat_last is not None:
            return self.lat_last
        return self.lat_min + (self.row_count - 1) * self.lat_step

    @property
    def lon_max(self) -> float:
        """Longitude of the last column."""
        if self.lon_last is not None:
            return self.lon_last
        return self.lon_min + (self.col_count - 1) * self.lon_step

    @property
    def bounds(self) -> BoundingBox:
        """Ordered extent covered by the grid nodes, whatever the step signs."""
        lats = (self.lat_min, self.lat_max)
        lons = (self.lon_min, self.lon_max)
        return BoundingBox(
            min_x=min(lons), min_y=min(lats), max_x=max(lons), max_y=max(lats)
        )

    def value_at(self, row: int, col: int) -> float:
        """Return the stored value of logical cell (row, col)."""
        if not (0 <= row < self.row_count and 0 <= col < self.col_count):
            raise IndexError(
                f"Cell ({row}, {col}) outside {self.row_count}x{self.col_count} grid"
            )
        return float(self.samples[row * self.col_count + col])

    def as_array(self) -> NDArray[np.float64]:
        """Return a read-only (row_count, col_count) view of the samples."""
        return self.samples.reshape(self.row_count, self.col_count)


class HeightReport(BaseModel):
    """Result of converting one ellipsoidal height (Value Object).

    Invariants:
        HR-1: topographic_height_m == ellipsoid_height_m - geoid_height_m
    """

    latitude: float
    longitude: float
    ellipsoid_height_m: float  # Height above the reference ellipsoid
    geoid_height_m: float  # Interpolated geoid undulation
    topographic_height_m: float  # Height above the geoid

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_identity(self) -> "HeightReport":
        expected = self.ellipsoid_height_m - self.geoid_height_m
        if abs(self.topographic_height_m - expected) > HEIGHT_TOLERANCE_M:
            raise ValueError(
                f"topographic_height_m ({self.topographic_height_m}) must equal "
                f"ellipsoid_height_m - geoid_height_m ({expected})"
            )
        return self

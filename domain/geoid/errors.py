"""Geoid Bounded Context - Error Hierarchy.

Custom exceptions for loading geoid models and querying them.

Loading errors abort the load; no partially built GeoidGrid is ever returned.
Query errors are only raised when strict bounds validation is requested.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.geoid.value_objects import BoundingBox, GeoPoint


class GeoidError(Exception):
    """Base error for geoid operations."""


# ---------------------------------------------------------------------------
# Loading Errors
# ---------------------------------------------------------------------------
class FormatError(GeoidError):
    """Model source is malformed: bad header, bad data row, or bad counts."""


class SourceUnavailableError(FormatError):
    """Model source cannot be opened or read."""


class DegenerateGridError(GeoidError):
    """Grid has a single row/column or a zero step; interpolation undefined."""


class InsufficientMemoryError(GeoidError):
    """Model would allocate more samples than the configured budget."""


# ---------------------------------------------------------------------------
# Query Errors
# ---------------------------------------------------------------------------
class PointOutOfBoundsError(GeoidError):
    """Point is outside the geoid grid bounds.

    Attributes:
        point: The offending GeoPoint
        bounds: The grid's BoundingBox
    """

    def __init__(self, point: "GeoPoint", bounds: "BoundingBox") -> None:
        self.point = point
        self.bounds = bounds
        super().__init__(
            f"Point ({point.latitude:.6f}, {point.longitude:.6f}) outside bounds "
            f"[lat: {bounds.min_y:.6f} to {bounds.max_y:.6f}, "
            f"lon: {bounds.min_x:.6f} to {bounds.max_x:.6f}]"
        )

"""Geoid Height Domain Layer.

This package contains the core business logic organized by bounded contexts:
- geoid: Geoid models, cell location, undulation interpolation, height conversion
"""

from domain import geoid

__all__ = ["geoid"]

"""Geoid Bounded Context.

Responsible for geoid models and height conversion:
- Value Objects: GeoidGrid, BoundingBox, GeoPoint, CellIndices, HeightReport
- Services: locate_cell, interpolate_undulation, compute_topographic_height
"""

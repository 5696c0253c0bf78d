"""Infrastructure adapters for the geoid bounded context.

This module provides the infrastructure layer implementations for geoid
operations, including loading geoid models from tab-separated tables.
"""

from .tabular_adapter import TabularGeoidAdapter, load_geoid_model

__all__ = ["TabularGeoidAdapter", "load_geoid_model"]

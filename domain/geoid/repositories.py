"""Domain Port(s) for Geoid Model I/O.

Defines interfaces (Protocols) that infrastructure adapters must implement.
No concrete I/O here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, TextIO

from .value_objects import GeoidGrid


class GeoidModelRepository(Protocol):
    """Port for obtaining geoid grids from external sources.

    Implementations live in infrastructure (e.g., tab-separated adapter).
    """

    def load_model(self, source: Path | str | TextIO) -> GeoidGrid:
        """Load a geoid model and return an immutable GeoidGrid."""
        ...

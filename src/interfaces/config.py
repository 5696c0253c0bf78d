"""Height query configuration.

Each setting is resolved from, in order: command-line argument, environment
variable, built-in default. Validation happens once, in HeightQueryConfig.
"""

from __future__ import annotations

import argparse
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from domain.geoid.value_objects import MAX_LONGITUDE, MIN_LONGITUDE, GridLayout

# Environment variables, keyed by config field
ENV_VARS: dict[str, str] = {
    "model_path": "GEOID_MODEL",
    "latitude": "GEOID_LATITUDE",
    "longitude": "GEOID_LONGITUDE",
    "ellipsoid_height_m": "GEOID_ELLIPSOID_HEIGHT",
    "layout": "GEOID_LAYOUT",
}

# Reference query: Porto, Portugal, against the PT08 geoid model
DEFAULT_LATITUDE = 41.157944
DEFAULT_LONGITUDE = -8.629105
DEFAULT_ELLIPSOID_HEIGHT_M = 148.0


class HeightQueryConfig(BaseModel):
    """Validated settings for one height conversion."""

    model_path: Path
    latitude: float = Field(default=DEFAULT_LATITUDE, ge=-90, le=90)
    longitude: float = Field(
        default=DEFAULT_LONGITUDE, ge=MIN_LONGITUDE, le=MAX_LONGITUDE
    )
    ellipsoid_height_m: float = DEFAULT_ELLIPSOID_HEIGHT_M
    layout: GridLayout = GridLayout.REGULAR
    strict: bool = False

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_sources(
        cls, args: argparse.Namespace, environ: Mapping[str, str]
    ) -> "HeightQueryConfig":
        """Merge parsed arguments over environment variables.

        Raises:
            pydantic.ValidationError: If a value is missing or invalid
        """
        values: dict[str, Any] = {}
        for field, env_var in ENV_VARS.items():
            value = getattr(args, field, None)
            if value is None:
                value = environ.get(env_var)
            if value is not None:
                values[field] = value
        values["strict"] = bool(getattr(args, "strict", False))
        return cls(**values)

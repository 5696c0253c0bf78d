"""`geoid-height` command: convert a GPS ellipsoidal height to a topographic height.

Usage:
    geoid-height --model GeodPT08.dat --lat 41.157944 --lon -8.629105 --height 148

Any option left out falls back to its GEOID_* environment variable, then to
the built-in reference query. The model path has no default.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Mapping, Sequence

from pydantic import ValidationError

from domain.geoid.errors import GeoidError, PointOutOfBoundsError
from domain.geoid.services import report_height
from domain.geoid.value_objects import GeoPoint, GridLayout, HeightReport
from infrastructure.geoid.tabular_adapter import TabularGeoidAdapter
from interfaces.config import ENV_VARS, HeightQueryConfig

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID_INPUT = 2
EXIT_OUT_OF_BOUNDS = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geoid-height",
        description=(
            "Subtract the interpolated geoid undulation from an ellipsoidal "
            "height to obtain the topographic height."
        ),
    )
    parser.add_argument(
        "--model",
        dest="model_path",
        help=f"Geoid model table (env: {ENV_VARS['model_path']})",
    )
    parser.add_argument(
        "--lat",
        dest="latitude",
        type=float,
        help=f"Latitude in degrees (env: {ENV_VARS['latitude']})",
    )
    parser.add_argument(
        "--lon",
        dest="longitude",
        type=float,
        help=f"Longitude in degrees (env: {ENV_VARS['longitude']})",
    )
    parser.add_argument(
        "--height",
        dest="ellipsoid_height_m",
        type=float,
        help=f"Ellipsoidal height in meters (env: {ENV_VARS['ellipsoid_height_m']})",
    )
    parser.add_argument(
        "--layout",
        choices=[layout.value for layout in GridLayout],
        help=f"How model records map to grid cells (env: {ENV_VARS['layout']})",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject points outside the model instead of clamping to its edge",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug)",
    )
    return parser


def format_report(report: HeightReport) -> str:
    """Render a report the way the reference tool printed it."""
    return "\n".join(
        [
            f"GPS Coordinates: ({report.latitude:g}, {report.longitude:g})",
            f"Ellipsoid height: {report.ellipsoid_height_m:g} m",
            f"Geoid height: {report.geoid_height_m:g} m",
            f"Topographic height: {report.topographic_height_m:g} m",
        ]
    )


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def main(
    argv: Sequence[str] | None = None, environ: Mapping[str, str] | None = None
) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    try:
        config = HeightQueryConfig.from_sources(
            args, os.environ if environ is None else environ
        )
    except ValidationError as e:
        print(f"[ERROR] Invalid configuration:\n{e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    try:
        grid = TabularGeoidAdapter(layout=config.layout).load_model(config.model_path)
    except GeoidError as e:
        print(f"[ERROR] Cannot load geoid model: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    point = GeoPoint(latitude=config.latitude, longitude=config.longitude)
    try:
        report = report_height(
            grid, point, config.ellipsoid_height_m, strict=config.strict
        )
    except PointOutOfBoundsError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return EXIT_OUT_OF_BOUNDS

    logger.debug(
        "Query (%s, %s) resolved against %s",
        point.latitude,
        point.longitude,
        grid.source_name,
    )
    print(format_report(report))
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

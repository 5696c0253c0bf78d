"""Tab-separated adapter for GeoidModelRepository.

Implements loading of geoid models stored as text tables and returns a domain
GeoidGrid Value Object.

File format:
    Longitude<TAB>Latitude<TAB>Height
    <lon> <lat> <height>
    ...

Data rows accept any whitespace between the three numbers.

Lifecycle:
1) Open the source (path or text stream); buffer non-seekable streams
2) Validate the header line against the exact expected text
3) Count data rows (first pass) and check the sample budget
4) Rewind and parse every row into a preallocated buffer (second pass)
5) Arrange the buffer according to the GridLayout
6) Derive origin and signed steps; reject degenerate geometry
7) Return GeoidGrid
"""

from __future__ import annotations

import io
import logging
import math
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

import numpy as np
from numpy.typing import NDArray
from pydantic import ValidationError

from domain.geoid.errors import (
    DegenerateGridError,
    FormatError,
    InsufficientMemoryError,
    SourceUnavailableError,
)
from domain.geoid.value_objects import GeoidGrid, GridLayout

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)

HEADER = "Longitude\tLatitude\tHeight"
FIELDS_PER_ROW = 3

# Regular grids whose axis spacing deviates more than this from uniform are
# still loaded, but logged.
SPACING_WARN_RATIO = 0.01


def _source_name(source: Path | str | TextIO) -> str:
    if isinstance(source, (str, Path)):
        return Path(source).name
    name = getattr(source, "name", None)
    return Path(name).name if isinstance(name, str) else "<stream>"


def _strip_terminator(line: str) -> str:
    return line.rstrip("\r\n")


def _parse_row(line: str, line_no: int) -> tuple[float, float, float]:
    """Parse one data row into (lon, lat, height)."""
    tokens = line.split()
    if len(tokens) != FIELDS_PER_ROW:
        raise FormatError(
            f"Line {line_no}: expected {FIELDS_PER_ROW} numbers, got {len(tokens)}"
        )
    try:
        lon, lat, height = (float(t) for t in tokens)
    except ValueError as e:
        raise FormatError(f"Line {line_no}: {e}") from e
    if not all(math.isfinite(v) for v in (lon, lat, height)):
        raise FormatError(f"Line {line_no}: non-finite value in {line!r}")
    return lon, lat, height


def _axis(values: NDArray[np.float64]) -> list[float]:
    """Distinct coordinates ordered in the file's direction."""
    axis = sorted(set(values.tolist()))
    if values[0] > values[-1]:
        axis.reverse()
    return axis


def _step(first: float, last: float, count: int, name: str) -> float:
    if count < 2:
        raise DegenerateGridError(f"Grid has a single {name}; step is undefined")
    step = (last - first) / (count - 1)
    if step == 0 or not math.isfinite(step):
        raise DegenerateGridError(f"Grid {name} step is {step}")
    return step


class TabularGeoidAdapter:
    """Infrastructure adapter for loading geoid models from text tables.

    Parameters
    ----------
    layout: GridLayout
        REGULAR treats each record as one grid node. LEGACY_FLAT reproduces
        the historical reading where record r is row r and the three numbers
        of the record are its columns.
    max_samples: int | None
        Optional budget for the number of stored samples. Checked after the
        counting pass, before the buffer is allocated.
    """

    def __init__(
        self, layout: GridLayout = GridLayout.REGULAR, max_samples: int | None = None
    ) -> None:
        self.layout = layout
        self.max_samples = max_samples

    def load_model(self, source: Path | str | TextIO) -> GeoidGrid:
        """Load a geoid model and return an immutable GeoidGrid.

        Raises:
            SourceUnavailableError: Source cannot be opened or read
            FormatError: Bad header, malformed row, no rows, bad counts, or
                coordinates outside the valid latitude/longitude range
            DegenerateGridError: Single row/column or zero step
            InsufficientMemoryError: Sample budget exceeded
        """
        name = _source_name(source)
        try:
            with self._open(source) as stream:
                records, col_count = self._read_records(stream, name)
        except UnicodeDecodeError as e:
            raise FormatError(f"{name}: not a text file ({e.reason})") from e
        except OSError as e:
            raise SourceUnavailableError(f"Error reading {name}") from e

        try:
            if self.layout is GridLayout.LEGACY_FLAT:
                grid = self._build_legacy(records, col_count, name)
            else:
                grid = self._build_regular(records, name)
        except ValidationError as e:
            raise FormatError(f"{name}: invalid grid geometry\n{e}") from e

        logger.debug(
            "Geoid model %s: Loaded %dx%d grid (%s)",
            name,
            grid.row_count,
            grid.col_count,
            grid.layout.value,
        )
        return grid

    # ------------------------------------------------------------------
    # Source handling
    # ------------------------------------------------------------------
    @contextmanager
    def _open(self, source: Path | str | TextIO) -> Iterator[TextIO]:
        if not isinstance(source, (str, Path)):
            if source.seekable():
                yield source
            else:
                # Two passes need a rewindable stream
                yield io.StringIO(source.read())
            return

        path = Path(source)
        try:
            stream = path.open("r", encoding="utf-8", newline="")
        except OSError as e:
            # Log only filename and errno to avoid leaking absolute paths
            logger.error(
                "Failed to open %s (errno=%s, strerror=%s)",
                path.name,
                getattr(e, "errno", "unknown"),
                getattr(e, "strerror", "unknown"),
            )
            raise SourceUnavailableError(f"Error opening file {path.name}") from e
        with stream:
            yield stream

    def _read_header(self, stream: TextIO, name: str) -> str:
        header = _strip_terminator(stream.readline())
        if header != HEADER:
            raise FormatError(f"{name}: invalid header {header!r}")
        return header

    def _read_records(
        self, stream: TextIO, name: str
    ) -> tuple[NDArray[np.float64], int]:
        """Two-pass read: count rows, then fill a preallocated buffer.

        Returns the (row_count, col_count) buffer and the header field count.
        """
        start = stream.tell()
        self._read_header(stream, name)
        row_count = sum(1 for _ in stream)
        if row_count == 0:
            raise FormatError(f"{name}: no data rows after header")

        stream.seek(start)
        header = self._read_header(stream, name)
        col_count = header.count("\t") + 1

        if self.max_samples is not None and row_count * col_count > self.max_samples:
            raise InsufficientMemoryError(
                f"{name}: {row_count * col_count} samples exceed budget "
                f"{self.max_samples}"
            )

        # Columns beyond the three parsed values stay zero
        records = np.zeros((row_count, col_count), dtype=np.float64)
        lines = iter(stream)
        for i in range(row_count):
            line = next(lines, None)
            if line is None:
                raise FormatError(f"{name}: file shrank while reading row {i + 1}")
            records[i, :FIELDS_PER_ROW] = _parse_row(_strip_terminator(line), i + 2)
        if next(lines, None) is not None:
            raise FormatError(f"{name}: file grew while reading")

        return records, col_count

    # ------------------------------------------------------------------
    # Grid construction
    # ------------------------------------------------------------------
    def _build_legacy(
        self, records: NDArray[np.float64], col_count: int, name: str
    ) -> GeoidGrid:
        row_count = records.shape[0]
        flat = records.reshape(-1)
        logger.info(
            "Geoid model %s: using legacy flat layout (%d records as rows)",
            name,
            row_count,
        )

        lon_min = float(flat[0])
        lat_min = float(flat[1])
        lat_max = float(flat[(row_count - 1) * col_count + 1])
        lat_step = _step(lat_min, lat_max, row_count, "row")

        # lon_max is read from the longitude slot of record col_count - 1
        lon_max_offset = (col_count - 1) * FIELDS_PER_ROW
        if lon_max_offset >= flat.size:
            raise FormatError(
                f"{name}: legacy layout needs at least {col_count} records, "
                f"got {row_count}"
            )
        lon_max = float(flat[lon_max_offset])

        return GeoidGrid(
            row_count=row_count,
            col_count=col_count,
            lat_min=lat_min,
            lon_min=lon_min,
            lat_step=lat_step,
            lon_step=_step(lon_min, lon_max, col_count, "column"),
            lat_last=lat_max,
            lon_last=lon_max,
            samples=flat,
            layout=GridLayout.LEGACY_FLAT,
            source_name=name,
        )

    def _build_regular(self, records: NDArray[np.float64], name: str) -> GeoidGrid:
        lons = records[:, 0]
        lats = records[:, 1]
        lat_axis = _axis(lats)
        lon_axis = _axis(lons)
        row_count = len(lat_axis)
        col_count = len(lon_axis)

        lat_step = _step(lat_axis[0], lat_axis[-1], row_count, "row")
        lon_step = _step(lon_axis[0], lon_axis[-1], col_count, "column")

        if row_count * col_count != records.shape[0]:
            raise FormatError(
                f"{name}: {records.shape[0]} records do not form a complete "
                f"{row_count}x{col_count} grid"
            )

        row_of = {lat: i for i, lat in enumerate(lat_axis)}
        col_of = {lon: j for j, lon in enumerate(lon_axis)}
        samples = np.full(row_count * col_count, np.nan, dtype=np.float64)
        for lon, lat, height in records[:, :FIELDS_PER_ROW].tolist():
            offset = row_of[lat] * col_count + col_of[lon]
            if not np.isnan(samples[offset]):
                raise FormatError(f"{name}: duplicate node at ({lat}, {lon})")
            samples[offset] = height

        self._check_spacing(lat_axis, lat_step, "latitude", name)
        self._check_spacing(lon_axis, lon_step, "longitude", name)

        return GeoidGrid(
            row_count=row_count,
            col_count=col_count,
            lat_min=lat_axis[0],
            lon_min=lon_axis[0],
            lat_step=lat_step,
            lon_step=lon_step,
            lat_last=lat_axis[-1],
            lon_last=lon_axis[-1],
            samples=samples,
            layout=GridLayout.REGULAR,
            source_name=name,
        )

    def _check_spacing(
        self, axis: list[float], step: float, label: str, name: str
    ) -> None:
        deviation = float(np.max(np.abs(np.diff(axis) - step)))
        if deviation > abs(step) * SPACING_WARN_RATIO:
            logger.warning(
                "Geoid model %s: irregular %s spacing (max deviation %.6g, step %.6g)",
                name,
                label,
                deviation,
                step,
            )


def load_geoid_model(
    source: Path | str | TextIO, layout: GridLayout = GridLayout.REGULAR
) -> GeoidGrid:
    """Load a geoid model with default adapter settings."""
    return TabularGeoidAdapter(layout=layout).load_model(source)

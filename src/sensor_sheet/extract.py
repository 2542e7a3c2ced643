"""Sheet extraction: turn a typed cell grid into a :class:`SensorDataset`.

Pure functions, no I/O, no logging. Every structural problem raises the
matching :mod:`sensor_sheet.errors` class and aborts the whole extraction.
"""

from __future__ import annotations

import math
import re
from collections.abc import Sequence

import numpy as np

from sensor_sheet import (
    FIRST_DATA_ROW,
    FIRST_VALUE_COLUMN,
    HEADER_ROW,
    SENSOR_ID_PREFIX,
    SENSOR_ID_ROW,
    TIMESTAMP_COLUMNS,
)
from sensor_sheet.cells import Cell, DateTimeNumber, Empty, Number, Other, Text
from sensor_sheet.codec import decode_timestamp
from sensor_sheet.errors import (
    CellParsingError,
    EmptySheetError,
    InvalidDateTimeError,
    InvalidHeaderError,
    InvalidSensorIdError,
    MissingDateTimeError,
)
from sensor_sheet.models import INT32_MAX, INT32_MIN, Entry, SensorDataset

Grid = Sequence[Sequence[Cell]]

_SIGNED_INT_RE = re.compile(r"[+-]?[0-9]+")


# ── Cell helpers ─────────────────────────────────────────────────


def format_number(value: float) -> str:
    """Shortest round-trip decimal, never in exponent form (``60.0`` -> ``"60"``)."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    return np.format_float_positional(value, trim="-")


def _cell_at(row: Sequence[Cell], col_idx: int) -> Cell | None:
    return row[col_idx] if col_idx < len(row) else None


# ── Preamble ─────────────────────────────────────────────────────


def parse_sensor_id(row: Sequence[Cell]) -> int:
    """Parse ``"Sensor ID: <int>"`` from the first cell of *row*."""
    cell = _cell_at(row, 0)
    if not isinstance(cell, Text) or not cell.value.startswith(SENSOR_ID_PREFIX):
        raise InvalidSensorIdError(cell)
    raw = cell.value[len(SENSOR_ID_PREFIX):]
    if not _SIGNED_INT_RE.fullmatch(raw):
        raise InvalidSensorIdError(cell)
    sensor_id = int(raw)
    if not INT32_MIN <= sensor_id <= INT32_MAX:
        raise InvalidSensorIdError(cell)
    return sensor_id


def parse_headers(row: Sequence[Cell], *, row_idx: int = HEADER_ROW) -> list[str | None]:
    """Return the header text per column; slots before the value columns are ``None``."""
    headers: list[str | None] = [None] * min(FIRST_VALUE_COLUMN, len(row))
    for col_idx in range(FIRST_VALUE_COLUMN, len(row)):
        cell = row[col_idx]
        if not isinstance(cell, Text):
            raise InvalidHeaderError(row=row_idx, column=col_idx, cell=cell)
        headers.append(cell.value)
    return headers


# ── Data rows ────────────────────────────────────────────────────


def row_timestamp(row: Sequence[Cell], *, row_idx: int) -> str:
    """Decode the row's timestamp from the first non-empty timestamp column."""
    for col_idx in TIMESTAMP_COLUMNS:
        cell = _cell_at(row, col_idx)
        if cell is None or isinstance(cell, Empty):
            continue
        if not isinstance(cell, (Number, DateTimeNumber)):
            raise InvalidDateTimeError(row=row_idx, column=col_idx, cell=cell)
        try:
            return decode_timestamp(cell.value)
        except (ValueError, OverflowError) as exc:
            raise InvalidDateTimeError(row=row_idx, column=col_idx, cell=cell) from exc
    raise MissingDateTimeError(row=row_idx)


def cell_value(cell: Cell, *, row_idx: int, col_idx: int) -> str | None:
    """Return the string value of a data cell, or ``None`` for a blank cell."""
    if isinstance(cell, Text):
        return cell.value
    if isinstance(cell, Number):
        return format_number(cell.value)
    if isinstance(cell, Empty):
        return None
    if isinstance(cell, (DateTimeNumber, Other)):
        raise CellParsingError(row=row_idx, column=col_idx, cell=cell)
    raise TypeError(f"Unknown cell kind: {type(cell).__name__}")


def _consume_row(
    row: Sequence[Cell],
    headers: Sequence[str | None],
    series: dict[str, list[Entry]],
    *,
    row_idx: int,
) -> None:
    timestamp = row_timestamp(row, row_idx=row_idx)
    for col_idx in range(FIRST_VALUE_COLUMN, min(len(row), len(headers))):
        header = headers[col_idx]
        if header is None or header not in series:
            raise CellParsingError(row=row_idx, column=col_idx, cell=row[col_idx])
        value = cell_value(row[col_idx], row_idx=row_idx, col_idx=col_idx)
        if value is not None:
            series[header].append((timestamp, value))


# ── Main extraction function ─────────────────────────────────────


def extract(grid: Grid) -> SensorDataset:
    """Extract a :class:`SensorDataset` from a worksheet's cell grid.

    Layout: sensor id row, ignored designation row, header row, then one
    timestamped reading per row. Duplicate header texts share one series.

    Raises
    ------
    EmptySheetError
        If *grid* has no rows (a :class:`SheetNotFoundError`).
    InvalidSensorIdError, InvalidHeaderError, MissingDateTimeError,
    InvalidDateTimeError, CellParsingError
        On the first malformed row; no partial dataset is returned.
    """
    if len(grid) <= SENSOR_ID_ROW:
        raise EmptySheetError()
    sensor_id = parse_sensor_id(grid[SENSOR_ID_ROW])

    # The designation row is never validated.
    if len(grid) <= HEADER_ROW:
        return SensorDataset(sensor_id=sensor_id)

    headers = parse_headers(grid[HEADER_ROW])
    series: dict[str, list[Entry]] = {h: [] for h in headers if h is not None}

    for row_idx in range(FIRST_DATA_ROW, len(grid)):
        _consume_row(grid[row_idx], headers, series, row_idx=row_idx)

    return SensorDataset(sensor_id=sensor_id, series=series)

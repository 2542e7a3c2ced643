"""I/O helpers: load a worksheet as a cell grid, write JSON artifacts."""

from __future__ import annotations

import json
import logging
import zipfile
from datetime import date, datetime
from pathlib import Path
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from sensor_sheet.cells import EMPTY, Cell, Empty, cell_from_value
from sensor_sheet.errors import SheetNotFoundError, WorkbookNotFoundError

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".xlsx", ".xlsm", ".xltx", ".xltm")

# ── Loading ──────────────────────────────────────────────────────


def _used_width(cells: list[Cell]) -> int:
    end = len(cells)
    while end and isinstance(cells[end - 1], Empty):
        end -= 1
    return end


def _fit_row(cells: list[Cell], width: int) -> list[Cell]:
    if len(cells) >= width:
        return cells[:width]
    return cells + [EMPTY] * (width - len(cells))


def load_grid(path: Path, sheet_index: int = 0) -> list[list[Cell]]:
    """Load one worksheet (the first by default) as a grid of typed cells.

    Every row spans the sheet's used width: columns up to the rightmost
    non-blank cell of any row, short rows padded with blank cells. Trailing
    blank rows are dropped.

    Raises
    ------
    WorkbookNotFoundError
        If *path* does not exist, is not a file, has an unsupported
        extension, or cannot be opened as a workbook.
    SheetNotFoundError
        If the workbook has no sheet at *sheet_index*.
    """
    path = Path(path)
    if not path.exists():
        raise WorkbookNotFoundError(path)
    if not path.is_file():
        raise WorkbookNotFoundError(path, "not a file")

    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise WorkbookNotFoundError(
            path, f"unsupported file type {suffix!r}, use {', '.join(SUPPORTED_SUFFIXES)}"
        )

    try:
        wb = load_workbook(path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as exc:
        raise WorkbookNotFoundError(path, "cannot open workbook") from exc

    try:
        sheets = wb.worksheets
        if sheet_index < 0 or sheet_index >= len(sheets):
            raise SheetNotFoundError(
                f"Could not read sheet #{sheet_index} (workbook has {len(sheets)})."
            )
        ws = sheets[sheet_index]
        logger.debug("Reading sheet %r from %s", ws.title, path)

        rows: list[list[Cell]] = [
            [
                cell_from_value(cell.value, is_date=bool(getattr(cell, "is_date", False)))
                for cell in row
            ]
            for row in ws.iter_rows()
        ]
    finally:
        wb.close()

    width = max((_used_width(cells) for cells in rows), default=0)
    grid = [_fit_row(cells, width) for cells in rows]
    while grid and all(isinstance(cell, Empty) for cell in grid[-1]):
        grid.pop()
    logger.debug("Loaded %d rows from %s", len(grid), path)
    return grid


# ── Writing ──────────────────────────────────────────────────────


def _json_default(obj: Any) -> Any:
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    item = getattr(obj, "item", None)
    if callable(item):
        converted = item()
        if isinstance(converted, (str, int, float, bool)) or converted is None:
            return converted
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def write_json(path: Path, data: Any, *, sort_keys: bool = True) -> Path:
    """Write *data* as pretty-printed JSON to *path* (atomic + deterministic).

    Pass ``sort_keys=False`` where mapping order carries meaning.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = json.dumps(
        data,
        indent=2,
        sort_keys=sort_keys,
        ensure_ascii=False,
        default=_json_default,
    ) + "\n"
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(payload, encoding="utf-8")
    tmp_path.replace(path)
    return path

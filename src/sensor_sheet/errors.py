"""Extraction error taxonomy.

Each class identifies exactly one malformed-input scenario and exposes a
stable ``kind`` string for callers that report errors outside Python.
"""

from __future__ import annotations

from pathlib import Path

from sensor_sheet.cells import Cell


class ExtractionError(ValueError):
    """Base class for every structural-validity failure."""

    kind: str = "ExtractionError"

    def __init__(
        self,
        message: str,
        *,
        row: int | None = None,
        column: int | None = None,
        cell: Cell | None = None,
    ) -> None:
        self.row = row
        self.column = column
        self.cell = cell
        super().__init__(message)

    def location(self) -> str:
        parts: list[str] = []
        if self.row is not None:
            parts.append(f"row {self.row + 1}")
        if self.column is not None:
            parts.append(f"column {self.column + 1}")
        return ", ".join(parts)

    def __str__(self) -> str:
        message = super().__str__()
        where = self.location()
        return f"{message} ({where})" if where else message


class WorkbookNotFoundError(ExtractionError):
    kind = "FileNotFound"

    def __init__(self, path: Path | str, reason: str = "") -> None:
        self.path = str(path)
        message = f"File not found: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class SheetNotFoundError(ExtractionError):
    kind = "SheetNotFound"

    def __init__(self, message: str = "Could not read the worksheet.") -> None:
        super().__init__(message)


class EmptySheetError(SheetNotFoundError):
    """The worksheet exists but holds no rows; still reported as SheetNotFound."""

    def __init__(self) -> None:
        super().__init__("Worksheet has no rows.")


class InvalidSensorIdError(ExtractionError):
    kind = "InvalidSensorIdFormat"

    def __init__(self, cell: Cell | None = None) -> None:
        super().__init__(
            "Sensor ID format is invalid or cannot be parsed.", row=0, column=0, cell=cell
        )


class InvalidHeaderError(ExtractionError):
    kind = "InvalidHeaderValue"

    def __init__(self, *, row: int, column: int, cell: Cell) -> None:
        super().__init__(
            f"Invalid header value encountered: {cell.describe()}",
            row=row,
            column=column,
            cell=cell,
        )


class MissingDateTimeError(ExtractionError):
    kind = "MissingDateTime"

    def __init__(self, *, row: int) -> None:
        super().__init__("Missing valid date/time value in row.", row=row)


class InvalidDateTimeError(ExtractionError):
    kind = "InvalidDateTimeValue"

    def __init__(self, *, row: int, column: int, cell: Cell) -> None:
        super().__init__(
            f"Invalid date/time value encountered: {cell.describe()}",
            row=row,
            column=column,
            cell=cell,
        )


class CellParsingError(ExtractionError):
    kind = "CellParsingError"

    def __init__(self, *, row: int, column: int, cell: Cell | None = None) -> None:
        detail = f": {cell.describe()}" if cell is not None else ""
        super().__init__(
            f"Cell parsing error occurred{detail}", row=row, column=column, cell=cell
        )

"""Typed spreadsheet cells: the closed set of kinds the extractor understands."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Any, Union

from openpyxl.utils.datetime import to_excel


@dataclass(frozen=True)
class Empty:
    """A blank cell."""

    def describe(self) -> str:
        return "Empty"


@dataclass(frozen=True)
class Text:
    value: str

    def describe(self) -> str:
        return f"Text({self.value!r})"


@dataclass(frozen=True)
class Number:
    value: float

    def describe(self) -> str:
        return f"Number({self.value!r})"


@dataclass(frozen=True)
class DateTimeNumber:
    """A serial date/time: days since the workbook epoch, fraction = time of day."""

    value: float

    def describe(self) -> str:
        return f"DateTimeNumber({self.value!r})"


@dataclass(frozen=True)
class Other:
    """Any cell kind without a meaning here (booleans, errors, formulas, ...)."""

    value: Any = None

    def describe(self) -> str:
        return f"Other({self.value!r})"


Cell = Union[Empty, Text, Number, DateTimeNumber, Other]

EMPTY = Empty()


def cell_from_value(value: Any, *, is_date: bool = False) -> Cell:
    """Map a plain Python cell value (as openpyxl yields it) onto a :data:`Cell`.

    ``is_date`` marks a raw number stored under a date number format.
    Temporal values are converted back to serials on the 1899-12-30 epoch.
    """
    if value is None:
        return EMPTY
    if isinstance(value, str):
        return Text(value)
    if isinstance(value, bool):
        return Other(value)
    if isinstance(value, (int, float)):
        return DateTimeNumber(float(value)) if is_date else Number(float(value))
    if isinstance(value, (datetime, date, time, timedelta)):
        return DateTimeNumber(float(to_excel(value)))
    return Other(value)

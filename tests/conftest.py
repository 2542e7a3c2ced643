from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook

WorkbookFactory = Callable[..., Path]


def sample_rows() -> list[list[Any]]:
    return [
        ["Sensor ID: 7"],
        ["Boiler room probe"],
        [None, None, "Temp", "Humidity"],
        [datetime(2020, 6, 18, 6, 0), None, 21.5, "60"],
        [datetime(2020, 6, 18, 7, 30), None, None, 61],
    ]


@pytest.fixture
def make_workbook(tmp_path: Path) -> WorkbookFactory:
    """Return a factory writing ``rows`` into the first sheet of a new workbook."""

    def _make(
        rows: list[list[Any]] | None = None,
        name: str = "data.xlsx",
        extra_sheets: dict[str, list[list[Any]]] | None = None,
    ) -> Path:
        wb = Workbook()
        ws = wb.active
        ws.title = "Readings"
        for row in sample_rows() if rows is None else rows:
            ws.append(row)
        for title, sheet_rows in (extra_sheets or {}).items():
            extra = wb.create_sheet(title)
            for row in sheet_rows:
                extra.append(row)
        path = tmp_path / name
        wb.save(path)
        return path

    return _make

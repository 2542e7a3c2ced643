"""Data models used across the package."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from numbers import Integral
from types import MappingProxyType
from typing import Any

import pandas as pd

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$")

Entry = tuple[str, str]


def _to_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise TypeError(f"{field_name} must be an integer")
    return int(value)


def _to_non_negative_int(value: Any, field_name: str) -> int:
    result = _to_int(value, field_name)
    if result < 0:
        raise ValueError(f"{field_name} must be >= 0")
    return result


def _to_entries(header: str, values: Iterable[Any]) -> tuple[Entry, ...]:
    if isinstance(values, str):
        raise TypeError(f"series[{header!r}] must be a sequence of (timestamp, value) pairs")
    entries: list[Entry] = []
    for item in values:
        if not isinstance(item, Sequence) or isinstance(item, str) or len(item) != 2:
            raise TypeError(f"series[{header!r}] items must be (timestamp, value) pairs")
        timestamp, value = item
        if not isinstance(timestamp, str) or not isinstance(value, str):
            raise TypeError(f"series[{header!r}] timestamps and values must be strings")
        if not TIMESTAMP_RE.fullmatch(timestamp):
            raise ValueError(
                f"series[{header!r}] timestamp {timestamp!r} is not YYYY-MM-DD HH:MM:SS"
            )
        entries.append((timestamp, value))
    return tuple(entries)


@dataclass(frozen=True)
class SensorDataset:
    """Per-header time series extracted from one sensor sheet.

    ``series`` maps each header to its ``(timestamp, value)`` pairs in row
    order. Headers keep the order of the header row. Sequences of different
    headers are not aligned: empty cells are skipped per column.
    The dataset is read-only once built.
    """

    sensor_id: int
    series: Mapping[str, tuple[Entry, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        sensor_id = _to_int(self.sensor_id, "sensor_id")
        if not INT32_MIN <= sensor_id <= INT32_MAX:
            raise ValueError("sensor_id must fit in a signed 32-bit integer")
        if not isinstance(self.series, Mapping):
            raise TypeError("series must be a mapping of header -> entries")
        frozen: dict[str, tuple[Entry, ...]] = {}
        for header, values in self.series.items():
            if not isinstance(header, str):
                raise TypeError("series headers must be strings")
            frozen[header] = _to_entries(header, values)
        object.__setattr__(self, "sensor_id", sensor_id)
        object.__setattr__(self, "series", MappingProxyType(frozen))

    @property
    def entry_count(self) -> int:
        return sum(len(entries) for entries in self.series.values())

    def list_headers(self) -> list[str]:
        return list(self.series)

    def get_series(self, headers: Iterable[str]) -> dict[str, list[Entry]]:
        """Project the requested headers onto their own ``(timestamp, value)`` pairs.

        The result follows the dataset's header order, not the request order.

        Raises
        ------
        KeyError
            If any requested header is not part of the dataset.
        """
        wanted = {headers} if isinstance(headers, str) else set(headers)
        unknown = sorted(wanted - set(self.series))
        if unknown:
            raise KeyError(f"Unknown header(s): {', '.join(unknown)}")
        return {
            header: list(entries)
            for header, entries in self.series.items()
            if header in wanted
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "sensor_id": self.sensor_id,
            "series": {
                header: [[timestamp, value] for timestamp, value in entries]
                for header, entries in self.series.items()
            },
        }

    def to_frame(self) -> pd.DataFrame:
        """Return a long DataFrame with ``header``, ``timestamp`` and ``value`` columns."""
        records = [
            {"header": header, "timestamp": timestamp, "value": value}
            for header, entries in self.series.items()
            for timestamp, value in entries
        ]
        return pd.DataFrame(records, columns=["header", "timestamp", "value"], dtype="string")


@dataclass
class RunManifest:
    """Audit-trail manifest for a single extraction run."""

    tool: str = "sensor-sheet"
    version: str = ""
    input_path: str = ""
    sheet_index: int = 0
    created_at_utc: str = ""
    sensor_id: int | None = None
    header_count: int = 0
    entry_count: int = 0
    sha256: str = ""
    status: str = "success"
    error_kind: str | None = None
    error_message: str = ""

    def __post_init__(self) -> None:
        self.sheet_index = _to_non_negative_int(self.sheet_index, "sheet_index")
        self.header_count = _to_non_negative_int(self.header_count, "header_count")
        self.entry_count = _to_non_negative_int(self.entry_count, "entry_count")
        if self.sensor_id is not None:
            self.sensor_id = _to_int(self.sensor_id, "sensor_id")
        if self.status not in {"success", "failed"}:
            raise ValueError("status must be 'success' or 'failed'")

    def to_dict(self) -> dict[str, Any]:
        return {
            "tool": self.tool,
            "version": self.version,
            "input_path": self.input_path,
            "sheet_index": self.sheet_index,
            "created_at_utc": self.created_at_utc,
            "sensor_id": self.sensor_id,
            "header_count": self.header_count,
            "entry_count": self.entry_count,
            "sha256": self.sha256,
            "status": self.status,
            "error_kind": self.error_kind,
            "error_message": self.error_message,
        }

from __future__ import annotations

import hashlib
import json
from pathlib import Path

import pandas as pd

from sensor_sheet import __version__
from sensor_sheet.cells import Number
from sensor_sheet.errors import InvalidHeaderError
from sensor_sheet.export import (
    build_manifest,
    sha256_file,
    write_dataset_json,
    write_manifest,
    write_series_csv,
)
from sensor_sheet.models import SensorDataset

TS = "2020-06-18 06:00:00"


def _dataset() -> SensorDataset:
    return SensorDataset(
        sensor_id=7,
        series={"Temp": [(TS, "21.5")], "Humidity": [(TS, "60"), (TS, "61")]},
    )


def test_write_dataset_json_keeps_header_order(tmp_path: Path) -> None:
    out = write_dataset_json(tmp_path, _dataset())

    assert out == tmp_path / "dataset.json"
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["sensor_id"] == 7
    assert list(data["series"]) == ["Temp", "Humidity"]
    assert data["series"]["Temp"] == [[TS, "21.5"]]


def test_write_series_csv_is_long_format(tmp_path: Path) -> None:
    out = write_series_csv(tmp_path / "nested", _dataset())

    frame = pd.read_csv(out, dtype=str)
    assert list(frame.columns) == ["header", "timestamp", "value"]
    assert frame["value"].tolist() == ["21.5", "60", "61"]
    assert not out.with_suffix(out.suffix + ".tmp").exists()


def test_build_manifest_success(tmp_path: Path) -> None:
    input_file = tmp_path / "data.xlsx"
    input_file.write_bytes(b"payload")

    manifest = build_manifest(input_file, 0, "2024-01-01T00:00:00+00:00", _dataset())

    assert manifest.status == "success"
    assert manifest.version == __version__
    assert manifest.sensor_id == 7
    assert manifest.header_count == 2
    assert manifest.entry_count == 3
    assert manifest.sha256 == hashlib.sha256(b"payload").hexdigest()
    assert manifest.error_kind is None


def test_build_manifest_failure_records_error_kind(tmp_path: Path) -> None:
    error = InvalidHeaderError(row=2, column=2, cell=Number(1.0))

    manifest = build_manifest(tmp_path / "missing.xlsx", 1, "now", error=error)

    assert manifest.status == "failed"
    assert manifest.sensor_id is None
    assert manifest.sha256 == ""
    assert manifest.sheet_index == 1
    assert manifest.error_kind == "InvalidHeaderValue"
    assert "row 3, column 3" in manifest.error_message


def test_write_manifest_writes_expected_file(tmp_path: Path) -> None:
    input_file = tmp_path / "data.xlsx"
    input_file.write_bytes(b"x")
    manifest = build_manifest(input_file, 0, "now", _dataset())

    out = write_manifest(tmp_path / "out", manifest)

    assert out == tmp_path / "out" / "run_manifest.json"
    assert json.loads(out.read_text(encoding="utf-8")) == manifest.to_dict()


def test_sha256_file_matches_hashlib(tmp_path: Path) -> None:
    path = tmp_path / "blob.bin"
    path.write_bytes(b"a" * 20000)

    assert sha256_file(path) == hashlib.sha256(b"a" * 20000).hexdigest()

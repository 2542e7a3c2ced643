"""Artifact persistence for extracted datasets (JSON, CSV, run manifest)."""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from pathlib import Path

from sensor_sheet import __version__
from sensor_sheet.errors import ExtractionError
from sensor_sheet.io import write_json
from sensor_sheet.models import RunManifest, SensorDataset


def sha256_file(path: Path) -> str:
    """Return the hex SHA-256 digest of *path*."""
    h = hashlib.sha256()
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_manifest(
    input_file: Path,
    sheet_index: int,
    created_at: str,
    dataset: SensorDataset | None = None,
    *,
    error: ExtractionError | None = None,
    error_message: str = "",
) -> RunManifest:
    """Describe one extraction run; a missing *dataset* marks the run as failed."""
    input_file = Path(input_file)
    sha256 = ""
    try:
        sha256 = sha256_file(input_file)
    except OSError:
        pass

    return RunManifest(
        version=__version__,
        input_path=str(input_file.resolve()),
        sheet_index=sheet_index,
        created_at_utc=created_at,
        sensor_id=dataset.sensor_id if dataset is not None else None,
        header_count=len(dataset.series) if dataset is not None else 0,
        entry_count=dataset.entry_count if dataset is not None else 0,
        sha256=sha256,
        status="success" if dataset is not None else "failed",
        error_kind=error.kind if error is not None else None,
        error_message=error_message or (str(error) if error is not None else ""),
    )


def write_dataset_json(out_dir: Path, dataset: SensorDataset) -> Path:
    """Write ``dataset.json`` into *out_dir*, keeping header order."""
    return write_json(Path(out_dir) / "dataset.json", dataset.to_dict(), sort_keys=False)


def write_series_csv(out_dir: Path, dataset: SensorDataset) -> Path:
    """Write ``series.csv`` (header, timestamp, value) into *out_dir*."""
    path = Path(out_dir) / "series.csv"
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    dataset.to_frame().to_csv(tmp_path, index=False, encoding="utf-8")
    tmp_path.replace(path)
    return path


def write_manifest(out_dir: Path, manifest: RunManifest) -> Path:
    return write_json(Path(out_dir) / "run_manifest.json", manifest.to_dict())

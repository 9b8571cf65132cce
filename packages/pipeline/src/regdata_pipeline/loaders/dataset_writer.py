"""
loaders/dataset_writer.py — Persist DataFrames as CSV with a metadata sidecar.

Every dataset the pipeline writes lands as `<name>.csv` plus a
`<name>_metadata.json` sibling recording filename, creation time, shape,
description and column names. The sidecar is derived only from the frame
written in the same call.

Usage:
    from regdata_pipeline.loaders.dataset_writer import write_dataset, read_dataset

    meta = write_dataset(df, Path("data/processed/key_indicators_population.csv"),
                         "Key population indicators")
    df, meta = read_dataset(Path("data/processed/key_indicators_population.csv"))
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import polars as pl
import structlog

from regdata_shared.errors import InvalidInput, MissingInput
from regdata_shared.models import DatasetMetadata

log = structlog.get_logger(__name__)

METADATA_SUFFIX = "_metadata.json"


def metadata_path_for(path: Path) -> Path:
    """Sidecar path: the data file's extension replaced by the metadata suffix."""
    return path.with_name(f"{path.stem}{METADATA_SUFFIX}")


def write_dataset(df: pl.DataFrame, path: Path, description: str = "") -> DatasetMetadata:
    """
    Write df as CSV (with header) and its metadata sidecar.

    Intermediate directories are created as needed. The CSV is written
    first, then the sidecar.

    Args:
        df:          Table to persist.
        path:        Destination CSV path.
        description: Free-text description stored in the sidecar.

    Returns:
        The DatasetMetadata written to the sidecar.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    df.write_csv(path)

    metadata = DatasetMetadata.from_frame(df, path, description)
    metadata_path_for(path).write_text(metadata.model_dump_json(indent=2), encoding="utf-8")

    log.info(
        "dataset_saved",
        path=str(path),
        rows=metadata.rows,
        columns=metadata.columns,
    )
    return metadata


def read_metadata(path: Path) -> DatasetMetadata:
    """Load the sidecar of a data file (pass the CSV path, not the sidecar)."""
    sidecar = metadata_path_for(Path(path))
    if not sidecar.is_file():
        raise MissingInput(sidecar)
    return DatasetMetadata.model_validate_json(sidecar.read_text(encoding="utf-8"))


def read_csv_table(path: Path) -> pl.DataFrame:
    """
    Read a CSV with every column as String.

    Values stay exactly as published; stages cast where they need numbers.

    Raises:
        MissingInput: If the file does not exist.
        InvalidInput: If polars cannot parse the file (bad encoding,
            malformed quoting, ...).
    """
    path = Path(path)
    if not path.is_file():
        raise MissingInput(path)
    try:
        return pl.read_csv(path, infer_schema_length=0, truncate_ragged_lines=True)
    except pl.exceptions.PolarsError as exc:
        log.warning("csv_parse_failed", path=str(path), error=str(exc))
        raise InvalidInput(path, f"{type(exc).__name__}: {exc}") from exc


def read_dataset(path: Path) -> tuple[pl.DataFrame, DatasetMetadata]:
    """Read a persisted dataset together with its sidecar."""
    return read_csv_table(path), read_metadata(path)


def check_required_files(paths: Iterable[Path]) -> list[Path]:
    """
    Return the paths that do not exist (empty list when all are present).
    """
    missing = [Path(p) for p in paths if not Path(p).exists()]
    if missing:
        log.warning("required_files_missing", missing=[str(p) for p in missing])
    else:
        log.debug("required_files_present")
    return missing

"""
loaders/reference.py — Read and write the municipality reference mapping file.
"""

from __future__ import annotations

from pathlib import Path

import polars as pl
import structlog

from regdata_shared.models import DatasetMetadata, TableSchema
from regdata_pipeline.loaders.dataset_writer import read_csv_table, write_dataset
from regdata_pipeline.transforms.reference import ReferenceMapping

log = structlog.get_logger(__name__)

REFERENCE_DESCRIPTION = (
    "List of Amazon region municipalities with codes and state information"
)


def load_reference(path: Path, table_schema: TableSchema) -> ReferenceMapping:
    """
    Load the reference mapping CSV.

    Raises:
        MissingInput: If the file does not exist.
        SchemaError: If required columns are missing.
        ReferenceIntegrityError: If a municipality code appears twice.
    """
    df = read_csv_table(path)
    log.info("reference_file_read", path=str(path), rows=df.height)
    return ReferenceMapping.from_frame(df, table_schema)


def save_reference(df: pl.DataFrame, path: Path) -> DatasetMetadata:
    """Persist a reference frame with its metadata sidecar."""
    return write_dataset(df, path, REFERENCE_DESCRIPTION)

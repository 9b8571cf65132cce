"""
regdata_pipeline.loaders — CSV persistence with metadata sidecars.
"""

from regdata_pipeline.loaders.dataset_writer import (
    check_required_files,
    metadata_path_for,
    read_csv_table,
    read_dataset,
    read_metadata,
    write_dataset,
)
from regdata_pipeline.loaders.reference import load_reference, save_reference

__all__ = [
    "write_dataset",
    "read_dataset",
    "read_metadata",
    "read_csv_table",
    "metadata_path_for",
    "check_required_files",
    "load_reference",
    "save_reference",
]

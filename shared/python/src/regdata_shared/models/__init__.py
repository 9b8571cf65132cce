"""
regdata_shared.models — Pydantic models shared by every pipeline stage.

  ComponentSpec    — one entry of the component registry (file + taxonomy)
  TableSchema      — essential key columns vs. discovered data columns
  DatasetMetadata  — the metadata sidecar written next to each CSV
"""

from regdata_shared.models.components import ComponentSpec, TableSchema
from regdata_shared.models.metadata import DatasetMetadata

__all__ = [
    "ComponentSpec",
    "TableSchema",
    "DatasetMetadata",
]

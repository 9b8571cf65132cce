"""
regdata_pipeline.transforms — pure DataFrame stages, applied in this order:

  standardize_codes       — 7-digit zero-padded entity codes
  filter_to_reference     — keep reference-mapped entities only
  resolve_latest_period   — one row per entity from the latest period
  attach_reference        — left-join region code / name
  extract_key_variables   — canonical indicators by fuzzy column match
"""

from regdata_pipeline.transforms.enrich import attach_reference
from regdata_pipeline.transforms.normalize import (
    drop_missing_codes,
    filter_to_reference,
    standardize_codes,
)
from regdata_pipeline.transforms.reference import ReferenceMapping
from regdata_pipeline.transforms.time_series import latest_period, resolve_latest_period
from regdata_pipeline.transforms.variables import (
    ExtractionResult,
    VariableMatch,
    extract_key_variables,
    match_key_variables,
)

__all__ = [
    "ReferenceMapping",
    "standardize_codes",
    "drop_missing_codes",
    "filter_to_reference",
    "latest_period",
    "resolve_latest_period",
    "attach_reference",
    "ExtractionResult",
    "VariableMatch",
    "match_key_variables",
    "extract_key_variables",
]

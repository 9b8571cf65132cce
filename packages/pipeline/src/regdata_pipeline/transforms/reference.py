"""
transforms/reference.py — The reference mapping of valid municipalities.

The reference mapping (entity id → region code, region name) is loaded once
per run and shared by every component: it is both the membership filter
for the Region Filter and the lookup table for the Join Enricher. Entity
ids must be unique; a duplicate makes every downstream join ambiguous and
is raised as ReferenceIntegrityError.

Usage:
    from regdata_pipeline.transforms.reference import ReferenceMapping

    reference = ReferenceMapping.from_frame(municipalities_df, schema)
    len(reference)            # number of municipalities
    "1100015" in reference    # membership by normalized code
"""

from __future__ import annotations

from dataclasses import dataclass

import polars as pl
import structlog

from regdata_shared.errors import ReferenceIntegrityError
from regdata_shared.models import TableSchema
from regdata_pipeline.transforms.normalize import drop_missing_codes, standardize_codes

log = structlog.get_logger(__name__)


@dataclass(frozen=True, eq=False)
class ReferenceMapping:
    """Validated reference table keyed by normalized entity id."""

    frame: pl.DataFrame
    table_schema: TableSchema

    @classmethod
    def from_frame(cls, df: pl.DataFrame, table_schema: TableSchema) -> "ReferenceMapping":
        """
        Build a mapping from a raw reference frame.

        Standardizes entity ids, drops rows without a usable id, casts the
        region columns to strings, and checks id uniqueness.

        Raises:
            SchemaError: If the entity or region columns are missing.
            ReferenceIntegrityError: If an entity id appears more than once.
        """
        table_schema.require(
            df,
            [table_schema.entity_col, *table_schema.region_columns],
            "reference_mapping",
        )
        frame = drop_missing_codes(standardize_codes(df, table_schema), table_schema)
        frame = frame.with_columns(
            [pl.col(c).cast(pl.String) for c in table_schema.region_columns]
        )
        mapping = cls(frame=frame, table_schema=table_schema)
        mapping.validate()
        log.info("reference_loaded", entities=frame.height)
        return mapping

    def validate(self) -> None:
        """Raise ReferenceIntegrityError if any entity id is duplicated."""
        col = self.table_schema.entity_col
        duplicated = (
            self.frame.filter(pl.col(col).is_duplicated())
            .get_column(col)
            .unique(maintain_order=True)
            .to_list()
        )
        if duplicated:
            log.error("reference_duplicate_ids", count=len(duplicated))
            raise ReferenceIntegrityError(duplicated)

    @property
    def codes(self) -> list[str]:
        return self.frame.get_column(self.table_schema.entity_col).to_list()

    def lookup_frame(self) -> pl.DataFrame:
        """Entity id plus region code/name, the columns attached by the enricher."""
        s = self.table_schema
        return self.frame.select([s.entity_col, s.region_code_col, s.region_name_col])

    def __len__(self) -> int:
        return self.frame.height

    def __contains__(self, code: object) -> bool:
        return code in set(self.codes)

"""
transforms/enrich.py — Attach reference attributes (state, municipality name).

A left join on the normalized entity code: every input row survives, rows
without a reference match carry an explicit "unknown" marker instead of
nulls. Region columns already present on a component are replaced by the
reference values.

Usage:
    from regdata_pipeline.transforms.enrich import attach_reference

    df = attach_reference(df, reference, schema)
"""

from __future__ import annotations

import polars as pl
import structlog

from regdata_shared.constants import UNKNOWN_REGION
from regdata_shared.models import TableSchema
from regdata_pipeline.transforms.reference import ReferenceMapping

log = structlog.get_logger(__name__)

_ROW_INDEX = "__row_nr"


def attach_reference(
    df: pl.DataFrame,
    reference: ReferenceMapping,
    table_schema: TableSchema,
    *,
    unknown: str = UNKNOWN_REGION,
    component: str | None = None,
) -> pl.DataFrame:
    """
    Left-join region code and name onto df by entity code.

    Args:
        df:           DataFrame with a standardized entity column.
        reference:    Validated reference mapping.
        table_schema: Names the entity and region columns.
        unknown:      Value written for rows with no reference match.
        component:    Component name, for log context only.

    Returns:
        New DataFrame with the same rows in the same order, plus region
        code and region name columns.

    Raises:
        ReferenceIntegrityError: If the reference mapping has duplicate ids.
    """
    entity = table_schema.entity_col
    table_schema.require(df, [entity], "attach_reference")
    reference.validate()

    region_cols = list(table_schema.region_columns)
    replaced = [c for c in region_cols if c in df.columns]
    if replaced:
        log.debug("region_columns_replaced", component=component, columns=replaced)
        df = df.drop(replaced)

    joined = (
        df.with_columns(pl.col(entity).cast(pl.String))
        .with_row_index(_ROW_INDEX)
        .join(reference.lookup_frame(), on=entity, how="left")
        .sort(_ROW_INDEX)
        .drop(_ROW_INDEX)
    )

    unmatched = joined.get_column(table_schema.region_code_col).null_count()
    if unmatched:
        log.warning(
            "reference_unmatched_rows",
            component=component,
            count=unmatched,
            total=joined.height,
        )

    return joined.with_columns(
        [pl.col(c).fill_null(unknown) for c in region_cols]
    )

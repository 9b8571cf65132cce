"""
transforms/normalize.py — Entity code normalization and region filtering.

Every component table passes through standardize_codes() first so that the
entity column holds 7-digit zero-padded strings. Unparseable codes become
null (and are counted in the log); the Region Filter then keeps only rows
whose code appears in the reference mapping.

Usage:
    from regdata_pipeline.transforms.normalize import (
        standardize_codes,
        filter_to_reference,
    )

    df = standardize_codes(raw, schema, component="socioeconomic")
    df = filter_to_reference(df, reference, schema)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import polars as pl
import structlog

from regdata_shared.codes import standardize_entity_code
from regdata_shared.constants import ENTITY_CODE_WIDTH
from regdata_shared.errors import InvalidId
from regdata_shared.models import TableSchema

if TYPE_CHECKING:
    from regdata_pipeline.transforms.reference import ReferenceMapping

log = structlog.get_logger(__name__)


def standardize_codes(
    df: pl.DataFrame,
    table_schema: TableSchema,
    *,
    width: int = ENTITY_CODE_WIDTH,
    component: str | None = None,
) -> pl.DataFrame:
    """
    Rewrite the entity column as fixed-width zero-padded code strings.

    Missing codes stay null. Codes that raise InvalidId are also nulled so
    the row can be dropped downstream instead of aborting the table.

    Args:
        df:           Input DataFrame.
        table_schema: Names the entity column.
        width:        Code width.
        component:    Component name, for log context only.

    Returns:
        New DataFrame with a String entity column.
    """
    col = table_schema.entity_col
    table_schema.require(df, [col], "standardize_codes")

    invalid: list[Any] = []

    def to_code(value: Any) -> str | None:
        try:
            return standardize_entity_code(value, width)
        except InvalidId:
            invalid.append(value)
            return None

    codes = [to_code(v) for v in df.get_column(col).to_list()]
    if invalid:
        log.warning(
            "invalid_entity_codes",
            component=component,
            count=len(invalid),
            sample=[str(v) for v in invalid[:5]],
        )
    return df.with_columns(pl.Series(col, codes, dtype=pl.String))


def drop_missing_codes(df: pl.DataFrame, table_schema: TableSchema) -> pl.DataFrame:
    """Drop rows whose entity code is null."""
    col = table_schema.entity_col
    table_schema.require(df, [col], "drop_missing_codes")
    result = df.filter(pl.col(col).is_not_null())
    dropped = df.height - result.height
    if dropped:
        log.debug("missing_codes_dropped", dropped=dropped)
    return result


def filter_to_reference(
    df: pl.DataFrame,
    reference: ReferenceMapping,
    table_schema: TableSchema,
    *,
    component: str | None = None,
) -> pl.DataFrame:
    """
    Keep only rows whose entity code is in the reference mapping.

    Row order is preserved; rows with a null code are excluded.

    Args:
        df:           DataFrame with a standardized entity column.
        reference:    Reference mapping of valid entities.
        table_schema: Names the entity column.
        component:    Component name, for log context only.

    Returns:
        Filtered DataFrame (a subset of df's rows).
    """
    col = table_schema.entity_col
    table_schema.require(df, [col], "filter_to_reference")

    valid = pl.Series(reference.codes, dtype=pl.String)
    result = df.filter(pl.col(col).cast(pl.String).is_in(valid))
    log.info(
        "region_filter_applied",
        component=component,
        before=df.height,
        after=result.height,
    )
    return result


# ---------------------------------------------------------------------------
# Stateless helper functions
# ---------------------------------------------------------------------------


def clean_string_columns(df: pl.DataFrame) -> pl.DataFrame:
    """Strip whitespace from all String columns."""
    return df.with_columns(
        [
            pl.col(c).str.strip_chars()
            for c in df.columns
            if df[c].dtype == pl.String
        ]
    )


def drop_all_null_rows(df: pl.DataFrame) -> pl.DataFrame:
    """Drop rows where every column is null."""
    if df.width == 0:
        return df
    return df.filter(
        pl.any_horizontal([pl.col(c).is_not_null() for c in df.columns])
    )

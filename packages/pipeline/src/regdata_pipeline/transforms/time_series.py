"""
transforms/time_series.py — Collapse multi-year component tables to one row per entity.

Trajetorias components repeat each municipality once per reference year.
The integrated table keeps a single record per municipality, taken from the
latest year present in the whole table.

The latest year is global, not per municipality: a municipality with no
row in the table's latest year is dropped even if it has older rows. This
matches how the published dataset has been consumed so far and differs from
a per-entity "most recent row" policy when coverage is uneven.

Usage:
    from regdata_pipeline.transforms.time_series import resolve_latest_period

    df = resolve_latest_period(df, schema, component="environmental")
"""

from __future__ import annotations

import polars as pl
import structlog

from regdata_shared.models import TableSchema

log = structlog.get_logger(__name__)


def _period_key(period_col: str) -> pl.Expr:
    """Numeric view of the period column; non-numeric values become null."""
    return pl.col(period_col).cast(pl.Float64, strict=False)


def _display_period(value: float) -> int | float:
    return int(value) if float(value).is_integer() else value


def latest_period(df: pl.DataFrame, table_schema: TableSchema) -> int | float | None:
    """
    Return the maximum period value in df, or None.

    None when there is no period column or no numeric period value.
    """
    if not table_schema.has_period(df) or df.is_empty():
        return None
    periods = df.select(_period_key(table_schema.period_col).alias("_period")).get_column(
        "_period"
    )
    latest = periods.max()
    if latest is None:
        return None
    return _display_period(latest)


def resolve_latest_period(
    df: pl.DataFrame,
    table_schema: TableSchema,
    *,
    component: str | None = None,
) -> pl.DataFrame:
    """
    Reduce df to at most one row per entity from the latest period.

    - No period column: df is returned unchanged.
    - More than one distinct period: keep rows whose period equals the
      table-wide maximum; rows with a null or non-numeric period are dropped.
    - Within the kept period, the first row encountered per entity wins;
      later duplicates are dropped and counted in a warning.

    Args:
        df:           DataFrame with a standardized entity column.
        table_schema: Names the entity and period columns.
        component:    Component name, for log context only.

    Returns:
        New DataFrame, input row order preserved.
    """
    entity = table_schema.entity_col
    table_schema.require(df, [entity], "resolve_latest_period")

    if not table_schema.has_period(df):
        log.debug("no_period_column", component=component)
        return df

    key = _period_key(table_schema.period_col)
    periods = df.select(key.alias("_period")).get_column("_period").drop_nulls()

    result = df
    if periods.n_unique() > 1:
        latest = periods.max()
        result = df.filter(key == latest)
        log.info(
            "latest_period_selected",
            component=component,
            period=_display_period(latest),
            periods_available=periods.n_unique(),
            before=df.height,
            after=result.height,
        )

    deduped = result.unique(subset=[entity], keep="first", maintain_order=True)
    dropped = result.height - deduped.height
    if dropped:
        log.warning(
            "duplicate_entities_in_period",
            component=component,
            dropped=dropped,
            policy="keep_first",
        )
    return deduped

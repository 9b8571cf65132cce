"""
transforms/variables.py — Key variable extraction by fuzzy column-name matching.

Component files name their indicators freely ("MPI_Rural_2010",
"avg_income_pc", ...). Each component has an ordered taxonomy of canonical
variable names; extraction binds each canonical name to one source column
and projects the table down to the essential keys plus those columns,
renamed to their canonical names.

Matching rules:
  - a column matches a canonical name when it contains it as a
    case-insensitive substring;
  - the candidate for a canonical name is the first matching column in the
    table's own column order (essential key columns are never candidates);
  - canonical names are processed in taxonomy order and each column can be
    bound once: if a later canonical name's candidate is already bound to an
    earlier one, the later name is reported unmatched.

Usage:
    from regdata_pipeline.transforms.variables import extract_key_variables

    result = extract_key_variables(df, spec.key_variables, schema, component="socioeconomic")
    if result.empty:
        ...  # nothing to persist for this component
    else:
        result.table  # essential keys + canonical columns
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import polars as pl
import structlog

from regdata_shared.errors import EmptyExtraction
from regdata_shared.models import TableSchema

log = structlog.get_logger(__name__)


@dataclass
class VariableMatch:
    """Outcome of matching a taxonomy against a list of column names."""

    bindings: dict[str, str] = field(default_factory=dict)   # canonical → source column
    unmatched: list[str] = field(default_factory=list)
    # canonical → earlier canonical that already holds its candidate column
    conflicts: dict[str, str] = field(default_factory=dict)

    @property
    def found(self) -> list[str]:
        return list(self.bindings)

    def __bool__(self) -> bool:
        return bool(self.bindings)


@dataclass
class ExtractionResult:
    """Key variables extracted from one component table."""

    component: str
    match: VariableMatch
    table: pl.DataFrame | None = None
    essential: list[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return self.table is None

    def raise_if_empty(self) -> pl.DataFrame:
        """Return the extracted table, or raise EmptyExtraction."""
        if self.table is None:
            raise EmptyExtraction(self.component)
        return self.table


def match_key_variables(
    columns: Sequence[str],
    taxonomy: Iterable[str],
    *,
    exclude: Iterable[str] = (),
) -> VariableMatch:
    """
    Bind canonical variable names to source columns.

    Args:
        columns:  Available column names, in table order.
        taxonomy: Canonical names in precedence order.
        exclude:  Column names that may not be bound (essential keys). A
                  canonical name equal to one of these is never matched.

    Returns:
        VariableMatch with bindings in taxonomy order.
    """
    excluded = set(exclude)
    candidates = [c for c in columns if c not in excluded]
    match = VariableMatch()
    claimed: dict[str, str] = {}   # source column → canonical

    for canonical in taxonomy:
        if canonical in match.bindings or canonical in match.unmatched:
            continue
        needle = canonical.lower()
        if not needle or canonical in excluded:
            match.unmatched.append(canonical)
            continue

        source = next((c for c in candidates if needle in c.lower()), None)
        if source is None:
            match.unmatched.append(canonical)
        elif source in claimed:
            match.unmatched.append(canonical)
            match.conflicts[canonical] = claimed[source]
        else:
            match.bindings[canonical] = source
            claimed[source] = canonical

    return match


def extract_key_variables(
    df: pl.DataFrame,
    taxonomy: Iterable[str],
    table_schema: TableSchema,
    *,
    component: str = "",
) -> ExtractionResult:
    """
    Project df to essential key columns plus matched canonical variables.

    Args:
        df:           Enriched component table.
        taxonomy:     Canonical names for this component, in precedence order.
        table_schema: Names the essential columns.
        component:    Component name, carried on the result.

    Returns:
        ExtractionResult; .table is None when no canonical name matched.
    """
    table_schema.require(df, [table_schema.entity_col], "extract_key_variables")

    essential = table_schema.essential_present(df.columns)
    match = match_key_variables(df.columns, taxonomy, exclude=essential)

    for canonical, source in match.bindings.items():
        log.debug("key_variable_found", component=component, variable=canonical, column=source)
    for canonical, holder in match.conflicts.items():
        log.warning(
            "key_variable_column_taken",
            component=component,
            variable=canonical,
            column=match.bindings[holder],
            claimed_by=holder,
        )

    if not match:
        log.warning("no_key_variables_matched", component=component, columns=df.width)
        return ExtractionResult(component=component, match=match, essential=essential)

    table = df.select(
        [pl.col(c) for c in essential]
        + [pl.col(source).alias(canonical) for canonical, source in match.bindings.items()]
    )
    log.info(
        "key_variables_extracted",
        component=component,
        found=len(match.bindings),
        unmatched=len(match.unmatched),
        essential=len(essential),
    )
    return ExtractionResult(component=component, match=match, table=table, essential=essential)

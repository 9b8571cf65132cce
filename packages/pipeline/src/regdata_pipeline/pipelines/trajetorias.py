"""
pipelines/trajetorias.py — Trajetorias component integration pipeline.

Orchestrates, per component:
  1. Source → raw component table (live download or synthetic, caller's choice)
  2. standardize_codes      → 7-digit municipality codes
  3. filter_to_reference    → Legal Amazon municipalities only
  4. resolve_latest_period  → one row per municipality, latest year
  5. attach_reference       → state abbreviation + municipality name
  6. write processed table  → data/processed/trajetorias_<component>_amazon.csv
  7. extract_key_variables  → canonical indicators
  8. write key indicators   → data/processed/key_indicators_<component>.csv

Downloads for all components run concurrently in source.prepare(); every
later stage runs sequentially, one component at a time.

Failure policy:
  - FetchFailure / MissingInput / InvalidInput / SchemaError: the component
    is recorded as failed and skipped; the run continues
  - no rows left after the region filter: the component is recorded as
    empty and nothing is written for it
  - no key variable matched: the component is recorded as empty and its
    key-indicator file is not written
  - ReferenceIntegrityError: propagates, the whole run stops

Usage:
    from regdata_pipeline.pipelines.trajetorias import run
    report = await run(config, TrajetoriasSource(config), reference)
    print("\\n".join(report.summary_lines()))
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from pathlib import Path

import polars as pl

from regdata_shared.config import PipelineConfig
from regdata_shared.errors import FetchFailure, InvalidInput, MissingInput, SchemaError
from regdata_shared.models import ComponentSpec
from regdata_pipeline.loaders.dataset_writer import write_dataset
from regdata_pipeline.pipelines.report import ComponentResult, RunReport
from regdata_pipeline.sources.base import BaseSource
from regdata_pipeline.transforms.enrich import attach_reference
from regdata_pipeline.transforms.normalize import (
    drop_missing_codes,
    filter_to_reference,
    standardize_codes,
)
from regdata_pipeline.transforms.reference import ReferenceMapping
from regdata_pipeline.transforms.time_series import resolve_latest_period
from regdata_pipeline.transforms.variables import ExtractionResult, extract_key_variables
from regdata_pipeline.utils.logging import get_logger

log = get_logger(__name__, pipeline="trajetorias")

# Errors that only cost the component they occur in
COMPONENT_ERRORS = (FetchFailure, MissingInput, InvalidInput, SchemaError)


def process_component(
    raw: pl.DataFrame,
    spec: ComponentSpec,
    reference: ReferenceMapping | None,
    config: PipelineConfig,
) -> pl.DataFrame:
    """
    Standardize, filter, resolve and enrich one raw component table.

    Without a reference mapping, rows are only cleared of missing codes and
    no region columns are attached.
    """
    schema = config.table_schema
    df = standardize_codes(raw, schema, component=spec.name)
    if reference is not None:
        df = filter_to_reference(df, reference, schema, component=spec.name)
    else:
        df = drop_missing_codes(df, schema)
    df = resolve_latest_period(df, schema, component=spec.name)
    if reference is not None:
        df = attach_reference(
            df,
            reference,
            schema,
            unknown=config.unknown_marker,
            component=spec.name,
        )
    return df


def extract_component(
    processed: pl.DataFrame,
    spec: ComponentSpec,
    config: PipelineConfig,
) -> ExtractionResult:
    """Extract the component's canonical key variables."""
    return extract_key_variables(
        processed,
        spec.key_variables,
        config.table_schema,
        component=spec.name,
    )


async def _run_component(
    spec: ComponentSpec,
    source: BaseSource,
    reference: ReferenceMapping | None,
    config: PipelineConfig,
    *,
    write: bool,
) -> ComponentResult:
    clog = log.bind(component=spec.name)
    try:
        raw = await source.run(component=spec.name)
        processed = process_component(raw, spec, reference, config)
    except COMPONENT_ERRORS as exc:
        clog.warning("component_skipped", error_kind=exc.kind, error=str(exc))
        return ComponentResult.failed(spec.name, exc)

    if processed.is_empty():
        clog.warning("component_has_no_rows", raw_rows=raw.height)
        return ComponentResult(
            component=spec.name,
            status="empty",
            error_kind="no_rows",
            error="no rows left after region filter and period resolution",
        )

    outputs: list[Path] = []
    if write:
        path = config.processed_path(spec.name)
        write_dataset(
            processed,
            path,
            f"Processed {spec.name} indicators from Trajetorias dataset for Amazon region",
        )
        outputs.append(path)

    extraction = extract_component(processed, spec, config)
    if extraction.empty:
        clog.warning("component_has_no_key_variables", rows=processed.height)
        return ComponentResult(
            component=spec.name,
            status="empty",
            rows=processed.height,
            unmatched=list(extraction.match.unmatched),
            outputs=outputs,
            error_kind="empty_extraction",
        )

    table = extraction.raise_if_empty()
    if write:
        path = config.key_indicators_path(spec.name)
        write_dataset(
            table,
            path,
            f"Key {spec.name} indicators from Trajetorias dataset",
        )
        outputs.append(path)

    clog.info(
        "component_complete",
        rows=table.height,
        indicators=extraction.match.found,
    )
    return ComponentResult(
        component=spec.name,
        status="success",
        rows=table.height,
        indicators=extraction.match.found,
        unmatched=list(extraction.match.unmatched),
        outputs=outputs,
    )


async def run(
    config: PipelineConfig,
    source: BaseSource,
    reference: ReferenceMapping | None,
    *,
    components: Sequence[str] | None = None,
    write: bool = True,
) -> RunReport:
    """
    Run the integration end-to-end for the selected components.

    Args:
        config:     Run configuration.
        source:     Raw component source (TrajetoriasSource or SyntheticSource).
        reference:  Reference mapping; None skips filtering and enrichment.
        components: Component names (default: all, in registry order).
        write:      If False, transform and extract but persist nothing.

    Returns:
        RunReport with one ComponentResult per component.

    Raises:
        ReferenceIntegrityError: If the reference mapping is not unique.
    """
    specs = config.select(components)
    log.info(
        "trajetorias_start",
        source=source.name,
        components=[s.name for s in specs],
        reference_entities=len(reference) if reference is not None else None,
        write=write,
    )
    if reference is None:
        log.warning("no_reference_mapping", detail="processing all municipalities")
    else:
        reference.validate()

    t0 = time.monotonic()
    report = RunReport(source=source.name)
    failures = await source.prepare(specs)

    for spec in specs:
        failure = failures.get(spec.name)
        if failure is not None:
            report.add(ComponentResult.failed(spec.name, failure))
            continue
        report.add(await _run_component(spec, source, reference, config, write=write))

    report.duration_ms = int((time.monotonic() - t0) * 1000)
    log.info(
        "trajetorias_complete",
        status=report.status,
        succeeded=report.succeeded,
        empty=report.empty,
        failed=report.failed,
        duration_ms=report.duration_ms,
    )
    return report

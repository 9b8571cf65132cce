"""
pipelines/reference.py — Build the Legal Amazon municipality reference mapping.

Steps:
  1. IBGESource → all Brazilian municipalities, filtered to the Legal Amazon
     (or synthetic_municipalities() when synthetic=True)
  2. ReferenceMapping.from_frame → unique 7-digit codes, validated
  3. save_reference → data/raw/census/amazon_municipalities.csv + sidecar

Usage:
    from regdata_pipeline.pipelines.reference import run
    reference = await run(config)
    reference = await run(config, synthetic=True, seed=7)
"""

from __future__ import annotations

import time

from regdata_shared.config import PipelineConfig
from regdata_pipeline.loaders.reference import save_reference
from regdata_pipeline.sources.ibge import IBGESource
from regdata_pipeline.sources.synthetic import synthetic_municipalities
from regdata_pipeline.transforms.reference import ReferenceMapping
from regdata_pipeline.utils.logging import get_logger

log = get_logger(__name__, pipeline="reference")


async def run(
    config: PipelineConfig,
    *,
    synthetic: bool = False,
    seed: int = 42,
    write: bool = True,
) -> ReferenceMapping:
    """
    Fetch (or generate), validate and persist the reference mapping.

    Raises:
        FetchFailure: If the IBGE request fails.
        ReferenceIntegrityError: If the source lists a municipality twice.
    """
    t0 = time.monotonic()
    log.info("reference_start", synthetic=synthetic, states=len(config.region_states))

    if synthetic:
        df = synthetic_municipalities(config.region_states, seed=seed)
    else:
        df = await IBGESource(config).run()

    reference = ReferenceMapping.from_frame(df, config.table_schema)
    if write:
        save_reference(reference.frame, config.reference_path)

    by_state = (
        reference.frame.group_by(config.table_schema.region_code_col)
        .len()
        .sort(config.table_schema.region_code_col)
    )
    log.info(
        "reference_complete",
        municipalities=len(reference),
        by_state=dict(by_state.iter_rows()),
        path=str(config.reference_path) if write else None,
        duration_ms=int((time.monotonic() - t0) * 1000),
    )
    return reference

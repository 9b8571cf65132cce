"""
regdata_pipeline — Regional statistics integration for Brazilian Legal Amazon municipalities.

Architecture:
  sources/     — raw component sources (Trajetorias on Zenodo, IBGE, synthetic)
  transforms/  — code standardization, region filter, latest-period resolution,
                 reference enrichment, key variable extraction
  loaders/     — CSV persistence with JSON metadata sidecars
  pipelines/   — orchestrators that wire sources -> transforms -> loaders
  utils/       — structlog configuration

Quick start:
    import asyncio
    from regdata_shared.config import PipelineConfig, Settings
    from regdata_pipeline.pipelines import reference, trajetorias
    from regdata_pipeline.sources import TrajetoriasSource

    config = PipelineConfig.from_settings(Settings())
    mapping = asyncio.run(reference.run(config))
    report = asyncio.run(trajetorias.run(config, TrajetoriasSource(config), mapping))

CLI:
    regdata reference
    regdata run --component socioeconomic --component environmental
    regdata run --synthetic
    regdata status

Shared code from regdata_shared:
    from regdata_shared.config import PipelineConfig, Settings
    from regdata_shared.codes import standardize_entity_code
    from regdata_shared.errors import RegdataError, FetchFailure
    from regdata_shared.constants import AMAZON_STATES, KEY_VARIABLES
"""

__version__ = "0.1.0"

"""
regdata_pipeline.sources — data source adapters.

  TrajetoriasSource — Trajetorias component CSVs on Zenodo
  IBGESource        — IBGE localities API (municipality reference)
  SyntheticSource   — seeded sample component tables (explicit fallback)
"""

from regdata_pipeline.sources.base import BaseSource
from regdata_pipeline.sources.ibge import IBGESource
from regdata_pipeline.sources.synthetic import SyntheticSource, synthetic_municipalities
from regdata_pipeline.sources.trajetorias import FetchResult, TrajetoriasSource

__all__ = [
    "BaseSource",
    "TrajetoriasSource",
    "FetchResult",
    "IBGESource",
    "SyntheticSource",
    "synthetic_municipalities",
]

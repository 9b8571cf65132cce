"""
regdata_pipeline.pipelines — End-to-end pipeline orchestrators.

  reference.run()    — build and persist the municipality reference mapping
  trajetorias.run()  — integrate the Trajetorias components into key-indicator
                       tables, returning a RunReport

    from regdata_pipeline.pipelines import reference, trajetorias

    mapping = await reference.run(config)
    report = await trajetorias.run(config, source, mapping)
"""

from regdata_pipeline.pipelines.report import ComponentResult, RunReport

__all__ = ["ComponentResult", "RunReport"]

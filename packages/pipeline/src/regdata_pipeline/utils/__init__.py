"""
regdata_pipeline.utils — structlog configuration helpers.
"""

"""
regdata_shared — shared configuration, constants, errors and models for regdata.

Usage:
    from regdata_shared.config import PipelineConfig, Settings
    from regdata_shared.codes import standardize_entity_code
    from regdata_shared.constants import AMAZON_STATES, KEY_VARIABLES
    from regdata_shared.errors import FetchFailure, MissingInput
    from regdata_shared.models import ComponentSpec, TableSchema, DatasetMetadata
"""

__version__ = "0.1.0"

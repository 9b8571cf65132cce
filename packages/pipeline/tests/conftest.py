"""
tests/conftest.py — Shared pytest fixtures for the pipeline test suite.

Provides:
  fixture_path()   — resolves paths to tests/fixtures/
  config           — PipelineConfig rooted in a temporary data directory
  schema           — the default TableSchema
  reference_df     — small municipality reference table (3 states)
  reference        — ReferenceMapping built from reference_df
  ibge_payload     — parsed IBGE localities JSON sample
  mock_http        — configured respx router for faking HTTP responses
"""

from __future__ import annotations

import json
from pathlib import Path

import polars as pl
import pytest
import respx

from regdata_shared.config import PipelineConfig
from regdata_shared.models import TableSchema
from regdata_pipeline.transforms.reference import ReferenceMapping

FIXTURES_DIR = Path(__file__).parent / "fixtures"

TEST_ZENODO_URL = "https://zenodo.test/records/1/files"
TEST_IBGE_URL = "https://ibge.test/api/v1"


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def fixture_path() -> Path:
    return FIXTURES_DIR


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def config(tmp_path: Path) -> PipelineConfig:
    """Run configuration writing under tmp_path, pointing at fake hosts."""
    return PipelineConfig(
        data_dir=tmp_path / "data",
        zenodo_base_url=TEST_ZENODO_URL,
        ibge_base_url=TEST_IBGE_URL,
        metadata_timeout=5.0,
        download_timeout=5.0,
    )


@pytest.fixture
def schema() -> TableSchema:
    return TableSchema()


# ---------------------------------------------------------------------------
# Sample DataFrames
# ---------------------------------------------------------------------------

@pytest.fixture
def reference_df() -> pl.DataFrame:
    """Municipality reference CSV loaded as polars DataFrame."""
    return pl.read_csv(FIXTURES_DIR / "amazon_municipalities_sample.csv", infer_schema_length=0)


@pytest.fixture
def reference(reference_df: pl.DataFrame, schema: TableSchema) -> ReferenceMapping:
    return ReferenceMapping.from_frame(reference_df, schema)


@pytest.fixture
def ibge_payload() -> list[dict]:
    """Parsed IBGE localities payload."""
    return json.loads((FIXTURES_DIR / "ibge_municipios_sample.json").read_text(encoding="utf-8"))


# ---------------------------------------------------------------------------
# respx HTTP mock router
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_http():
    """
    Activate the respx mock router for all httpx requests.

    Usage in tests:
        def test_something(mock_http):
            mock_http.get("https://...").mock(return_value=httpx.Response(200, json={...}))
    """
    with respx.mock(assert_all_called=False) as router:
        yield router

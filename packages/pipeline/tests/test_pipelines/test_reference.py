"""
tests/test_pipelines/test_reference.py — Tests for the reference mapping pipeline.
"""

from __future__ import annotations

import httpx
import pytest

from regdata_shared.errors import FetchFailure
from regdata_pipeline.loaders.reference import load_reference
from regdata_pipeline.pipelines.reference import run


class TestReferencePipeline:
    @pytest.mark.asyncio
    async def test_ibge_reference_written(self, config, mock_http, ibge_payload):
        mock_http.get(f"{config.ibge_base_url}/localidades/municipios").mock(
            return_value=httpx.Response(200, json=ibge_payload)
        )
        mapping = await run(config)

        assert len(mapping) == 3
        assert config.reference_path.is_file()
        reloaded = load_reference(config.reference_path, config.table_schema)
        assert sorted(reloaded.codes) == sorted(mapping.codes)

    @pytest.mark.asyncio
    async def test_synthetic_reference(self, config):
        mapping = await run(config, synthetic=True, seed=11)
        assert len(mapping) >= 15 * len(config.region_states)
        assert config.reference_path.is_file()

    @pytest.mark.asyncio
    async def test_fetch_failure_propagates(self, config, mock_http):
        mock_http.get(f"{config.ibge_base_url}/localidades/municipios").mock(
            return_value=httpx.Response(500)
        )
        with pytest.raises(FetchFailure):
            await run(config)
        assert not config.reference_path.exists()

    @pytest.mark.asyncio
    async def test_no_write(self, config):
        await run(config, synthetic=True, write=False)
        assert not config.reference_path.exists()

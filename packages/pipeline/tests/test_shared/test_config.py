"""
tests/test_shared/test_config.py — Tests for Settings and PipelineConfig.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from regdata_shared.config import PipelineConfig, Settings
from regdata_shared.constants import AMAZON_STATES, COMPONENT_NAMES
from regdata_shared.errors import ConfigError


class TestSettings:
    def test_reads_prefixed_environment(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("REGDATA_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("REGDATA_DOWNLOAD_TIMEOUT", "12.5")
        monkeypatch.setenv("REGDATA_ZENODO_BASE_URL", "https://example.org/files/")
        settings = Settings()
        assert settings.data_dir == tmp_path
        assert settings.download_timeout == pytest.approx(12.5)
        assert settings.zenodo_base_url == "https://example.org/files"

    def test_rejects_non_positive_timeout(self, monkeypatch):
        monkeypatch.setenv("REGDATA_METADATA_TIMEOUT", "0")
        with pytest.raises(ValidationError):
            Settings()


class TestPipelineConfig:
    def test_from_settings_copies_values(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("REGDATA_DATA_DIR", str(tmp_path))
        config = PipelineConfig.from_settings(Settings(), download_timeout=9.0)
        assert config.data_dir == tmp_path
        assert config.download_timeout == pytest.approx(9.0)

    def test_default_registry(self):
        config = PipelineConfig()
        assert list(config.components) == list(COMPONENT_NAMES)
        assert config.region_states == tuple(AMAZON_STATES)
        assert len(config.region_states) == 9

    def test_is_frozen(self):
        config = PipelineConfig()
        with pytest.raises(ValidationError):
            config.data_dir = Path("/elsewhere")

    def test_paths(self, tmp_path: Path):
        config = PipelineConfig(data_dir=tmp_path)
        assert config.raw_path("socioeconomic") == tmp_path / "raw" / "trajetorias" / "socioeconomic_indicators.csv"
        assert config.processed_path("population") == tmp_path / "processed" / "trajetorias_population_amazon.csv"
        assert config.key_indicators_path("environmental") == tmp_path / "processed" / "key_indicators_environmental.csv"
        assert config.reference_path == tmp_path / "raw" / "census" / "amazon_municipalities.csv"

    def test_component_url(self):
        config = PipelineConfig(zenodo_base_url="https://zenodo.test/files/")
        spec = config.component("epidemiological")
        assert config.component_url("epidemiological") == f"https://zenodo.test/files/{spec.filename}"

    def test_unknown_component_raises(self):
        with pytest.raises(ConfigError):
            PipelineConfig().component("weather")

    def test_select_keeps_registry_order(self):
        config = PipelineConfig()
        names = [s.name for s in config.select(["environmental", "population"])]
        assert names == [n for n in COMPONENT_NAMES if n in ("environmental", "population")]

    def test_select_all_by_default(self):
        config = PipelineConfig()
        assert len(config.select()) == len(COMPONENT_NAMES)

    def test_key_variables_are_ordered_tuples(self):
        spec = PipelineConfig().component("socioeconomic")
        assert isinstance(spec.key_variables, tuple)
        assert spec.key_variables[0] == "mpi_rural"

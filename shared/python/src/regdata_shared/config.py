"""
config.py — pydantic-settings Settings class and the per-run PipelineConfig.

Settings reads environment variables (and the nearest .env file). The
pipeline never reads Settings directly: callers build one PipelineConfig
from it at startup and pass that value into every source, stage and
pipeline.

Usage:
    from regdata_shared.config import PipelineConfig, Settings

    config = PipelineConfig.from_settings(Settings())
    config.component("socioeconomic").key_variables
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from regdata_shared.constants import (
    AMAZON_STATES,
    COMPONENT_DESCRIPTIONS,
    COMPONENT_FILES,
    COMPONENT_NAMES,
    DEFAULT_USER_AGENT,
    KEY_VARIABLES,
    UNKNOWN_REGION,
)
from regdata_shared.errors import ConfigError
from regdata_shared.models.components import ComponentSpec, TableSchema


def _find_dotenv() -> Path | None:
    """Walk up from CWD to find the nearest .env file."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        candidate = parent / ".env"
        if candidate.is_file():
            return candidate
    return None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_find_dotenv() or ".env",
        env_file_encoding="utf-8",
        env_prefix="REGDATA_",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------
    data_dir: Path = Field(default=Path("./data"))

    # -------------------------------------------------------------------------
    # Data sources
    # -------------------------------------------------------------------------
    zenodo_base_url: str = Field(default="https://zenodo.org/records/7098053/files")
    ibge_base_url: str = Field(default="https://servicodados.ibge.gov.br/api/v1")
    user_agent: str = Field(default=DEFAULT_USER_AGENT)

    # Seconds. Small JSON calls vs. bulk CSV downloads.
    metadata_timeout: float = Field(default=30.0, gt=0)
    download_timeout: float = Field(default=300.0, gt=0)

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO"
    )
    log_format: Literal["json", "console"] = Field(default="console")

    @field_validator("zenodo_base_url", "ibge_base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/") if isinstance(v, str) else v


def default_components() -> dict[str, ComponentSpec]:
    """The fixed Trajetorias component registry."""
    return {
        name: ComponentSpec(
            name=name,
            filename=COMPONENT_FILES[name],
            description=COMPONENT_DESCRIPTIONS[name],
            key_variables=KEY_VARIABLES[name],
        )
        for name in COMPONENT_NAMES
    }


class PipelineConfig(BaseModel):
    """Immutable configuration for one pipeline run."""

    model_config = ConfigDict(frozen=True)

    data_dir: Path = Path("./data")
    zenodo_base_url: str = "https://zenodo.org/records/7098053/files"
    ibge_base_url: str = "https://servicodados.ibge.gov.br/api/v1"
    user_agent: str = DEFAULT_USER_AGENT
    metadata_timeout: float = 30.0
    download_timeout: float = 300.0

    components: dict[str, ComponentSpec] = Field(default_factory=default_components)
    table_schema: TableSchema = Field(default_factory=TableSchema)
    region_states: tuple[str, ...] = tuple(AMAZON_STATES)
    unknown_marker: str = UNKNOWN_REGION

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: object) -> "PipelineConfig":
        values: dict[str, object] = {
            "data_dir": settings.data_dir,
            "zenodo_base_url": settings.zenodo_base_url,
            "ibge_base_url": settings.ibge_base_url,
            "user_agent": settings.user_agent,
            "metadata_timeout": settings.metadata_timeout,
            "download_timeout": settings.download_timeout,
        }
        values.update(overrides)
        return cls(**values)

    # -------------------------------------------------------------------------
    # Derived paths
    # -------------------------------------------------------------------------
    @property
    def raw_dir(self) -> Path:
        return self.data_dir / "raw" / "trajetorias"

    @property
    def census_dir(self) -> Path:
        return self.data_dir / "raw" / "census"

    @property
    def processed_dir(self) -> Path:
        return self.data_dir / "processed"

    @property
    def reference_path(self) -> Path:
        return self.census_dir / "amazon_municipalities.csv"

    def raw_path(self, component: str) -> Path:
        return self.raw_dir / self.component(component).raw_filename

    def processed_path(self, component: str) -> Path:
        return self.processed_dir / f"trajetorias_{component}_amazon.csv"

    def key_indicators_path(self, component: str) -> Path:
        return self.processed_dir / f"key_indicators_{component}.csv"

    def component_url(self, component: str) -> str:
        return f"{self.zenodo_base_url.rstrip('/')}/{self.component(component).filename}"

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------
    def component(self, name: str) -> ComponentSpec:
        try:
            return self.components[name]
        except KeyError:
            raise ConfigError(
                f"unknown component {name!r}; expected one of {', '.join(self.components)}"
            ) from None

    def select(self, names: list[str] | tuple[str, ...] | None = None) -> list[ComponentSpec]:
        """Component specs in registry order, optionally restricted to names."""
        if not names:
            return list(self.components.values())
        wanted = [self.component(n).name for n in names]
        return [spec for spec in self.components.values() if spec.name in wanted]

"""
sources/synthetic.py — Seeded synthetic stand-ins for the live sources.

Used when the network sources are unavailable and the caller explicitly
asks for sample data (`regdata run --synthetic`). The tables honour the same
raw contract as the Trajetorias files: an unpadded integer municipality
code, a year column repeated across several years, and indicator columns
whose names only loosely follow the canonical taxonomy.

Usage:
    reference_df = synthetic_municipalities(seed=42)
    source = SyntheticSource(config, entity_codes=reference_df["code_muni"].to_list())
    df = await source.run(component="environmental")
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import Any

import polars as pl
import structlog

from regdata_shared.codes import standardize_entity_code
from regdata_shared.config import PipelineConfig
from regdata_shared.constants import AMAZON_STATE_CODES, AMAZON_STATES
from regdata_pipeline.sources.base import BaseSource

log = structlog.get_logger(__name__)

DEFAULT_YEARS: tuple[int, ...] = (2016, 2018, 2020)

# How canonical names appear in published files
_NAME_TEMPLATES: tuple[str, ...] = (
    "{var}",
    "{VAR}",
    "avg_{var}",
    "{var}_pct",
    "{var}_{year}",
)

_NOISE_COLUMNS: tuple[str, ...] = ("data_source_note", "quality_flag")


def synthetic_municipalities(
    states: Sequence[str] = tuple(AMAZON_STATES),
    *,
    seed: int = 42,
    start_code: int = 1100000,
) -> pl.DataFrame:
    """
    Generate a municipality reference table, 15–35 municipalities per state.

    Returns:
        DataFrame with code_muni, name_muni, abbrev_state, name_state, code_state.
    """
    rng = random.Random(seed)
    rows: list[dict[str, Any]] = []
    code = start_code
    for state in states:
        for i in range(1, rng.randint(15, 35) + 1):
            code += 1
            rows.append(
                {
                    "code_muni": standardize_entity_code(code),
                    "name_muni": f"{state}-Municipality-{i:02d}",
                    "abbrev_state": state,
                    "name_state": AMAZON_STATES.get(state, state),
                    "code_state": AMAZON_STATE_CODES.get(state),
                }
            )
    log.info("synthetic_municipalities_created", count=len(rows), states=len(states))
    return pl.DataFrame(
        rows,
        schema={c: pl.String for c in ("code_muni", "name_muni", "abbrev_state", "name_state", "code_state")},
    )


class SyntheticSource(BaseSource):
    """Deterministic generator of raw component tables."""

    name = "Synthetic"

    def __init__(
        self,
        config: PipelineConfig,
        entity_codes: Sequence[str | int] | None = None,
        *,
        years: Sequence[int] = DEFAULT_YEARS,
        seed: int = 42,
        coverage: float = 0.95,
        outside_share: float = 0.25,
    ) -> None:
        """
        Args:
            config:        Pipeline configuration (component taxonomies).
            entity_codes:  Municipality codes to generate rows for. Defaults
                           to synthetic_municipalities() plus outside_share
                           extra codes from outside the Legal Amazon.
            years:         Reference years; every entity gets the earlier ones.
            seed:          Base seed, combined with the component name.
            coverage:      Share of entities present in the latest year.
            outside_share: Extra non-Amazon codes, as a share of the default set.
        """
        super().__init__()
        self._config = config
        self._years = sorted(years)
        self._seed = seed
        self._coverage = coverage
        if entity_codes is None:
            base = synthetic_municipalities(config.region_states, seed=seed)
            codes: list[str | int] = base.get_column("code_muni").to_list()
            extra = int(len(codes) * outside_share)
            codes += [2900000 + i for i in range(1, extra + 1)]
            entity_codes = codes
        self._entity_codes = list(entity_codes)

    def _indicator_names(self, rng: random.Random, key_variables: Sequence[str]) -> list[str]:
        latest = self._years[-1] if self._years else 0
        names: list[str] = []
        for i, var in enumerate(key_variables):
            # The first two are always published; later ones are patchy
            if i >= 2 and rng.random() < 0.3:
                continue
            template = rng.choice(_NAME_TEMPLATES)
            names.append(template.format(var=var, VAR=var.upper(), year=latest))
        return names

    async def extract(self, *, component: str, **kwargs: Any) -> pl.DataFrame:
        spec = self._config.component(component)
        rng = random.Random(f"{self._seed}-{spec.name}")
        indicators = self._indicator_names(rng, spec.key_variables)
        schema = self._config.table_schema
        latest = self._years[-1] if self._years else None

        columns: dict[str, list[Any]] = {
            schema.entity_col: [],
            schema.period_col: [],
            **{name: [] for name in indicators},
            **{name: [] for name in _NOISE_COLUMNS},
        }
        for code in self._entity_codes:
            for year in self._years:
                if year == latest and rng.random() > self._coverage:
                    continue
                columns[schema.entity_col].append(int(code))
                columns[schema.period_col].append(year)
                for name in indicators:
                    columns[name].append(round(rng.uniform(0, 100), 2))
                columns["data_source_note"].append("synthetic")
                columns["quality_flag"].append(rng.choice(["A", "B", "C"]))

        df = pl.DataFrame(columns)
        self._log.info(
            "synthetic_component_created",
            component=spec.name,
            rows=df.height,
            indicators=indicators,
        )
        return df

    async def get_metadata(self) -> dict[str, Any]:
        return {
            "source_name": self.name,
            "seed": self._seed,
            "years": self._years,
            "entities": len(self._entity_codes),
            "description": "Synthetic sample data (explicit fallback)",
        }

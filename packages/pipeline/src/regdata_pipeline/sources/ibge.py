"""
sources/ibge.py — IBGE localities API source for the municipality reference mapping.

Fetches the full list of Brazilian municipalities from the IBGE service
and keeps those in the Legal Amazon states. The result is the reference
mapping every component is filtered and enriched against.

API: GET {ibge_base_url}/localidades/municipios  (JSON array)

Each record nests the state under microrregiao → mesorregiao → UF. A few
municipalities have a null microrregiao; for those the state is read from
regiao-imediata → regiao-intermediaria → UF instead.

Usage:
    source = IBGESource(config)
    reference_df = await source.run()
    # columns: code_muni, name_muni, abbrev_state, name_state, code_state
"""

from __future__ import annotations

from typing import Any

import httpx
import polars as pl
import structlog

from regdata_shared.config import PipelineConfig
from regdata_shared.errors import FetchFailure
from regdata_pipeline.sources.base import BaseSource
from regdata_pipeline.transforms.normalize import standardize_codes

log = structlog.get_logger(__name__)

REFERENCE_COLUMNS: list[str] = [
    "code_muni",
    "name_muni",
    "abbrev_state",
    "name_state",
    "code_state",
]


def _text(value: Any) -> str | None:
    return None if value is None else str(value)


def _state_of(record: dict[str, Any]) -> dict[str, Any]:
    """Return the UF dict of a municipality record ({} when absent)."""
    micro = record.get("microrregiao")
    if micro:
        return (micro.get("mesorregiao") or {}).get("UF") or {}
    imediata = record.get("regiao-imediata")
    if imediata:
        return (imediata.get("regiao-intermediaria") or {}).get("UF") or {}
    return {}


class IBGESource(BaseSource):
    """Municipality list from the IBGE localities API."""

    name = "IBGE"

    def __init__(self, config: PipelineConfig) -> None:
        super().__init__()
        self._config = config
        self._url = f"{config.ibge_base_url.rstrip('/')}/localidades/municipios"

    async def _fetch_json(self) -> list[dict[str, Any]]:
        self._log.info("fetching_municipalities", url=self._url)
        try:
            async with httpx.AsyncClient(
                timeout=self._config.metadata_timeout,
                headers={"User-Agent": self._config.user_agent},
            ) as client:
                response = await client.get(self._url)
        except httpx.TimeoutException as exc:
            raise FetchFailure(
                "reference", f"timed out after {self._config.metadata_timeout}s"
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchFailure("reference", f"{type(exc).__name__}: {exc}") from exc

        if response.status_code != 200:
            raise FetchFailure("reference", f"API request failed: HTTP {response.status_code}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise FetchFailure("reference", f"invalid JSON: {exc}") from exc
        if not isinstance(payload, list):
            raise FetchFailure("reference", "unexpected payload, expected a JSON array")
        return payload

    async def extract(self, **kwargs: Any) -> pl.DataFrame:
        """Fetch all municipalities and flatten them to one row each."""
        records = await self._fetch_json()
        rows = []
        for record in records:
            uf = _state_of(record)
            rows.append(
                {
                    "code_muni": _text(record.get("id")),
                    "name_muni": _text(record.get("nome")),
                    "abbrev_state": _text(uf.get("sigla")),
                    "name_state": _text(uf.get("nome")),
                    "code_state": _text(uf.get("id")),
                }
            )
        return pl.DataFrame(rows, schema={c: pl.String for c in REFERENCE_COLUMNS})

    def transform(self, raw: pl.DataFrame) -> pl.DataFrame:
        """Keep Legal Amazon states and normalize municipality codes."""
        states = list(self._config.region_states)
        df = raw.filter(pl.col("abbrev_state").is_in(states))
        df = standardize_codes(df, self._config.table_schema, component="reference")
        self._log.info(
            "amazon_municipalities_found",
            total=raw.height,
            amazon=df.height,
            states=len(states),
        )
        return df.select(REFERENCE_COLUMNS)

    async def get_metadata(self) -> dict[str, Any]:
        return {
            "source_name": self.name,
            "base_url": self._config.ibge_base_url,
            "description": "IBGE localities API — municipalities",
        }

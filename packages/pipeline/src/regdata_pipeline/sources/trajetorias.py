"""
sources/trajetorias.py — Trajetorias dataset (Zenodo) component source.

Downloads the four Trajetorias component CSVs — population, socioeconomic,
epidemiological and environmental indicators for Brazilian Legal Amazon
municipalities — and loads them as raw polars DataFrames.

Zenodo record: https://zenodo.org/records/7098053 (DOI 10.5281/zenodo.7098053)

Download contract:
  - GET {zenodo_base_url}/{component file} with a custom User-Agent
  - only HTTP 200 is success; redirects are followed
  - the body is streamed to a temporary file next to the destination and
    moved into place only after the byte count checks out against
    Content-Length, so a failed download never leaves a partial file
  - timeouts, transport errors, non-200 and size mismatches all raise
    FetchFailure; there are no automatic retries

Usage:
    source = TrajetoriasSource(config)
    failures = await source.prepare(config.select())   # concurrent downloads
    df = await source.run(component="socioeconomic")

    # Re-use files downloaded by an earlier run:
    source = TrajetoriasSource(config, download=False)
"""

from __future__ import annotations

import asyncio
import os
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx
import polars as pl
import structlog

from regdata_shared.config import PipelineConfig
from regdata_shared.errors import FetchFailure, RegdataError
from regdata_shared.models import ComponentSpec
from regdata_pipeline.loaders.dataset_writer import read_csv_table
from regdata_pipeline.sources.base import BaseSource

log = structlog.get_logger(__name__)

CHUNK_SIZE = 256 * 1024


@dataclass(frozen=True)
class FetchResult:
    """A completed component download."""

    component: str
    path: Path
    bytes_written: int
    content_length: int | None = None

    @property
    def size_mb(self) -> float:
        return round(self.bytes_written / 1024 / 1024, 1)


class TrajetoriasSource(BaseSource):
    """Downloads and reads Trajetorias component CSVs."""

    name = "Trajetorias"

    def __init__(self, config: PipelineConfig, *, download: bool = True) -> None:
        super().__init__()
        self._config = config
        self._download = download

    @property
    def download(self) -> bool:
        return self._download

    # ------------------------------------------------------------------
    # HTTP fetch
    # ------------------------------------------------------------------

    async def fetch_component(self, spec: ComponentSpec, dest: Path | None = None) -> FetchResult:
        """
        Download one component file verbatim to dest.

        Args:
            spec: Component to download.
            dest: Destination path (default: config.raw_path(spec.name)).

        Returns:
            FetchResult with the number of bytes written.

        Raises:
            FetchFailure: On timeout, transport error, non-200 status, or a
                body shorter/longer than the announced Content-Length.
        """
        dest = Path(dest) if dest is not None else self._config.raw_path(spec.name)
        url = self._config.component_url(spec.name)
        timeout = self._config.download_timeout
        fetch_log = self._log.bind(component=spec.name, url=url)

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{dest.name}.", suffix=".part", dir=dest.parent)
        except OSError as exc:
            raise FetchFailure(spec.name, f"cannot write to {dest.parent}: {exc}") from exc
        tmp = Path(tmp_name)

        fetch_log.info("download_start", timeout_s=timeout)
        written = 0
        expected: int | None = None
        try:
            with os.fdopen(fd, "wb") as fh:
                async with httpx.AsyncClient(
                    timeout=timeout,
                    follow_redirects=True,
                    headers={"User-Agent": self._config.user_agent},
                ) as client:
                    async with client.stream("GET", url) as response:
                        if response.status_code != 200:
                            raise FetchFailure(spec.name, f"HTTP error: {response.status_code}")
                        expected = _expected_length(response)
                        async for chunk in response.aiter_bytes(chunk_size=CHUNK_SIZE):
                            fh.write(chunk)
                            written += len(chunk)

            if expected is not None and written != expected:
                raise FetchFailure(
                    spec.name,
                    f"size mismatch: received {written} bytes, expected {expected}",
                )
            os.replace(tmp, dest)
        except httpx.TimeoutException as exc:
            raise FetchFailure(spec.name, f"timed out after {timeout}s") from exc
        except httpx.HTTPError as exc:
            raise FetchFailure(spec.name, f"{type(exc).__name__}: {exc}") from exc
        except OSError as exc:
            raise FetchFailure(spec.name, f"write failed: {exc}") from exc
        finally:
            tmp.unlink(missing_ok=True)

        result = FetchResult(
            component=spec.name,
            path=dest,
            bytes_written=written,
            content_length=expected,
        )
        fetch_log.info("download_complete", bytes=written, size_mb=result.size_mb)
        return result

    async def fetch_all(
        self, specs: Sequence[ComponentSpec]
    ) -> dict[str, FetchResult | FetchFailure]:
        """
        Download several components concurrently.

        A failed component never aborts the others; its FetchFailure is
        returned in place of a FetchResult.
        """
        results = await asyncio.gather(
            *(self.fetch_component(spec) for spec in specs),
            return_exceptions=True,
        )

        outcome: dict[str, FetchResult | FetchFailure] = {}
        for spec, result in zip(specs, results):
            if isinstance(result, FetchFailure):
                self._log.warning("download_failed", component=spec.name, error=result.reason)
                outcome[spec.name] = result
            elif isinstance(result, BaseException):
                raise result
            else:
                outcome[spec.name] = result

        ok = sum(isinstance(r, FetchResult) for r in outcome.values())
        self._log.info("download_summary", successful=ok, total=len(specs))
        return outcome

    # ------------------------------------------------------------------
    # BaseSource interface
    # ------------------------------------------------------------------

    async def prepare(self, specs: Sequence[ComponentSpec]) -> dict[str, RegdataError]:
        if not self._download:
            return {}
        outcome = await self.fetch_all(specs)
        return {name: r for name, r in outcome.items() if isinstance(r, FetchFailure)}

    def read_component(self, spec: ComponentSpec) -> pl.DataFrame:
        """
        Read a downloaded component file.

        Raises:
            MissingInput: If the component has not been downloaded.
        """
        df = read_csv_table(self._config.raw_path(spec.name))
        _log_structure(df, spec.name, self._config)
        return df

    async def extract(self, *, component: str, **kwargs: Any) -> pl.DataFrame:
        """Read one component's raw file (downloaded by prepare())."""
        return self.read_component(self._config.component(component))

    async def get_metadata(self) -> dict[str, Any]:
        return {
            "source_name": self.name,
            "base_url": self._config.zenodo_base_url,
            "components": list(self._config.components),
            "description": "Trajetorias dataset, Brazilian Legal Amazon municipalities",
        }


def _expected_length(response: httpx.Response) -> int | None:
    """Content-Length of the decoded body, when the server announced one."""
    if response.headers.get("Content-Encoding", "identity").lower() != "identity":
        return None
    raw = response.headers.get("Content-Length")
    if raw is None or not raw.strip().isdigit():
        return None
    return int(raw)


def _log_structure(df: pl.DataFrame, component: str, config: PipelineConfig) -> None:
    """Log shape, municipality count and year coverage of a raw component."""
    schema = config.table_schema
    info: dict[str, Any] = {
        "rows": df.height,
        "columns": df.width,
        "data_columns": len(schema.data_columns(df.columns)),
    }
    if schema.entity_col in df.columns:
        info["municipalities"] = df.get_column(schema.entity_col).n_unique()
    if schema.period_col in df.columns:
        years = sorted(
            {y for y in df.get_column(schema.period_col).drop_nulls().to_list()}
        )
        info["years"] = years if len(years) <= 10 else f"{years[0]}-{years[-1]} ({len(years)} years)"
    log.info("component_loaded", component=component, **info)

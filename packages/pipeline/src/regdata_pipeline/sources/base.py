"""
sources/base.py — Abstract base class for raw component sources.

Each concrete source must implement:
  extract()      — produce the raw component table as a polars DataFrame
  get_metadata() — return dict with source info for the run report

transform() defaults to whitespace-stripped string values and no all-null
rows. Column names are kept exactly as published, since key variables are
matched against them; sources override transform() when they reshape data.

prepare() runs once before any component is extracted. Live sources use
it to download every requested component concurrently and report the
components that failed; the default does nothing.

The run() method orchestrates extract → transform → return and handles
timing/logging automatically. Pipelines call run() rather than the
individual methods.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

import polars as pl
import structlog

from regdata_shared.errors import RegdataError
from regdata_shared.models import ComponentSpec
from regdata_pipeline.transforms.normalize import clean_string_columns, drop_all_null_rows

log = structlog.get_logger(__name__)


class BaseSource(ABC):
    """Abstract base for all regdata raw component sources."""

    # Override in subclass — used for logging and the run report
    name: str = "unknown"

    def __init__(self) -> None:
        self._log = log.bind(source_name=self.name)

    # ------------------------------------------------------------------
    # Abstract interface
    # ------------------------------------------------------------------

    @abstractmethod
    async def extract(self, **kwargs: Any) -> pl.DataFrame:
        """
        Produce the raw table for one component.

        Implementations should return every original column; the entity id
        column may still be unnormalized.

        Args:
            **kwargs: Source-specific parameters (component=..., etc.)

        Returns:
            Raw polars DataFrame.
        """
        ...

    @abstractmethod
    async def get_metadata(self) -> dict[str, Any]:
        """
        Return source-level metadata for observability.

        Should include at minimum: source_name, description.
        """
        ...

    # ------------------------------------------------------------------
    # Overridable hooks
    # ------------------------------------------------------------------

    async def prepare(self, specs: Sequence[ComponentSpec]) -> dict[str, RegdataError]:
        """
        Run once before extraction. Returns component name → failure.
        """
        return {}

    def transform(self, raw: pl.DataFrame) -> pl.DataFrame:
        """Strip string values and drop all-null rows; column names stay as published."""
        return drop_all_null_rows(clean_string_columns(raw))

    # ------------------------------------------------------------------
    # Orchestration — pipelines call this
    # ------------------------------------------------------------------

    async def run(self, **kwargs: Any) -> pl.DataFrame:
        """
        Extract + transform in sequence with timing and structured logging.

        Args:
            **kwargs: Forwarded to extract().

        Returns:
            Transformed polars DataFrame.

        Raises:
            Any exception from extract() or transform() after logging it.
        """
        run_log = self._log.bind(**{k: str(v) for k, v in kwargs.items()})
        run_log.info("source_run_start")

        t0 = time.monotonic()
        try:
            raw = await self.extract(**kwargs)
            extract_ms = int((time.monotonic() - t0) * 1000)
            run_log.info(
                "extract_complete",
                raw_rows=len(raw),
                raw_cols=raw.width,
                duration_ms=extract_ms,
            )

            t1 = time.monotonic()
            result = self.transform(raw)
            run_log.info(
                "transform_complete",
                result_rows=len(result),
                result_cols=result.width,
                duration_ms=int((time.monotonic() - t1) * 1000),
            )
            return result

        except RegdataError as exc:
            run_log.warning(
                "source_run_failed",
                error_kind=exc.kind,
                error=str(exc),
                duration_ms=int((time.monotonic() - t0) * 1000),
            )
            raise
        except Exception as exc:
            run_log.error(
                "source_run_failed",
                error=str(exc),
                duration_ms=int((time.monotonic() - t0) * 1000),
                exc_info=True,
            )
            raise

"""
models/metadata.py — Pydantic model for the dataset metadata sidecar.

Every persisted CSV gets a `<stem>_metadata.json` sibling with exactly
these fields, derived from the frame as written.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import polars as pl
from pydantic import BaseModel, Field


class DatasetMetadata(BaseModel):
    """Shape and provenance of one persisted dataset."""

    filename: str
    created: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    rows: int
    columns: int
    description: str = ""
    column_names: list[str]

    @classmethod
    def from_frame(cls, df: pl.DataFrame, path: Path, description: str = "") -> "DatasetMetadata":
        return cls(
            filename=path.name,
            rows=df.height,
            columns=df.width,
            description=description,
            column_names=list(df.columns),
        )

    def matches(self, df: pl.DataFrame) -> bool:
        """True if df has the shape and column order recorded here."""
        return (
            df.height == self.rows
            and df.width == self.columns
            and list(df.columns) == self.column_names
        )

"""
models/components.py — Pydantic models describing component tables.

ComponentSpec is one entry of the fixed Trajetorias component registry.
TableSchema separates the essential key columns every stage relies on from
the data columns discovered at runtime in each component file.
"""

from __future__ import annotations

from collections.abc import Iterable

import polars as pl
from pydantic import BaseModel, ConfigDict, Field, field_validator

from regdata_shared.errors import SchemaError


class ComponentSpec(BaseModel):
    """One named thematic dataset: where it lives and which variables to extract."""

    model_config = ConfigDict(frozen=True)

    name: str
    filename: str                                  # remote file name, appended to the base URL
    description: str = ""
    key_variables: tuple[str, ...] = Field(default_factory=tuple)

    @field_validator("key_variables", mode="before")
    @classmethod
    def coerce_tuple(cls, v: object) -> object:
        return tuple(v) if isinstance(v, list) else v

    @property
    def raw_filename(self) -> str:
        """Local file name the raw download is stored under."""
        return f"{self.name}_indicators.csv"


class TableSchema(BaseModel):
    """
    Names of the essential columns in every component table.

    Only entity_col is mandatory in a table; the other essential columns
    are carried when present.
    """

    model_config = ConfigDict(frozen=True)

    entity_col: str = "code_muni"
    period_col: str = "year"
    region_code_col: str = "abbrev_state"
    region_name_col: str = "name_muni"

    @property
    def essential_columns(self) -> tuple[str, ...]:
        return (self.entity_col, self.period_col, self.region_code_col, self.region_name_col)

    @property
    def region_columns(self) -> tuple[str, str]:
        return (self.region_code_col, self.region_name_col)

    def essential_present(self, columns: Iterable[str]) -> list[str]:
        """Essential columns found in columns, in canonical key order."""
        available = set(columns)
        return [c for c in self.essential_columns if c in available]

    def data_columns(self, columns: Iterable[str]) -> list[str]:
        """Discovered (non-essential) columns, in table order."""
        essential = set(self.essential_columns)
        return [c for c in columns if c not in essential]

    def has_period(self, df: pl.DataFrame) -> bool:
        return self.period_col in df.columns

    def require(self, df: pl.DataFrame, columns: Iterable[str], stage: str) -> None:
        """Raise SchemaError if any of columns is absent from df."""
        missing = [c for c in columns if c not in df.columns]
        if missing:
            raise SchemaError(stage, missing)

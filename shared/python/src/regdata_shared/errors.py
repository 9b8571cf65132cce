"""
errors.py — regdata exception hierarchy.

Each pipeline stage raises a specific error type so the orchestrator can
decide whether a failure is local to one component or fatal to the run.
"""

from __future__ import annotations


class RegdataError(Exception):
    """Base exception for all regdata failures."""

    kind: str = "error"


class ConfigError(RegdataError):
    """Raised for invalid runtime configuration."""

    kind = "config_error"


class FetchFailure(RegdataError):
    """Raised when a component download fails (network, timeout, non-200, size mismatch)."""

    kind = "fetch_failure"

    def __init__(self, component: str, reason: str) -> None:
        super().__init__(f"{component}: {reason}")
        self.component = component
        self.reason = reason


class MissingInput(RegdataError):
    """Raised when an expected upstream file is absent."""

    kind = "missing_input"

    def __init__(self, path: object, component: str | None = None) -> None:
        label = f"{component}: " if component else ""
        super().__init__(f"{label}missing input file {path}")
        self.path = path
        self.component = component


class InvalidId(RegdataError, ValueError):
    """Raised when an entity id cannot be read as a non-negative integer."""

    kind = "invalid_id"

    def __init__(self, value: object, reason: str = "not a non-negative integer") -> None:
        super().__init__(f"invalid entity id {value!r}: {reason}")
        self.value = value


class ReferenceIntegrityError(RegdataError):
    """Raised when the reference mapping holds duplicate entity ids."""

    kind = "reference_integrity"

    def __init__(self, duplicates: list[str]) -> None:
        preview = ", ".join(duplicates[:10])
        more = f" (+{len(duplicates) - 10} more)" if len(duplicates) > 10 else ""
        super().__init__(f"duplicate entity ids in reference mapping: {preview}{more}")
        self.duplicates = duplicates


class EmptyExtraction(RegdataError):
    """Raised when no taxonomy variable matched any column of a component."""

    kind = "empty_extraction"

    def __init__(self, component: str) -> None:
        super().__init__(f"{component}: no key variables matched")
        self.component = component


class SchemaError(RegdataError):
    """Raised when a stage receives a table missing a required column."""

    kind = "schema_error"

    def __init__(self, stage: str, missing: list[str]) -> None:
        super().__init__(f"{stage}: missing required column(s) {', '.join(missing)}")
        self.stage = stage
        self.missing = missing


class InvalidInput(RegdataError):
    """Raised when an input file exists but cannot be parsed as a table."""

    kind = "invalid_input"

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"cannot read {path}: {reason}")
        self.path = path
        self.reason = reason

"""
pipelines/report.py — Per-component outcomes and the run-level summary.

A run never unwinds because one component failed: each component ends in
a ComponentResult (success, empty, or failed with a typed error kind) and
the RunReport aggregates them. Partial success is a normal outcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from regdata_shared.constants import ComponentStatus, RunStatus
from regdata_shared.errors import RegdataError

_STATUS_MARKS: dict[str, str] = {"success": "✓", "empty": "⚠", "failed": "✗"}


@dataclass
class ComponentResult:
    """Outcome of one component's pass through the pipeline."""

    component: str
    status: ComponentStatus
    rows: int = 0
    indicators: list[str] = field(default_factory=list)
    unmatched: list[str] = field(default_factory=list)
    outputs: list[Path] = field(default_factory=list)
    error_kind: str | None = None
    error: str | None = None

    @classmethod
    def failed(cls, component: str, exc: RegdataError) -> "ComponentResult":
        return cls(component=component, status="failed", error_kind=exc.kind, error=str(exc))

    @property
    def ok(self) -> bool:
        return self.status == "success"

    def summary_line(self) -> str:
        mark = _STATUS_MARKS.get(self.status, "?")
        if self.status == "success":
            detail = f"{self.rows} rows, {len(self.indicators)} indicators"
        elif self.status == "empty" and self.error_kind == "no_rows":
            detail = "no rows in the reference region"
        elif self.status == "empty":
            detail = f"{self.rows} rows, no key variables matched"
        else:
            detail = f"{self.error_kind}: {self.error}"
        return f"  {mark} {self.component:18s} {self.status:8s} {detail}"


@dataclass
class RunReport:
    """Summary of one integration run."""

    source: str
    results: list[ComponentResult] = field(default_factory=list)
    duration_ms: int = 0

    def add(self, result: ComponentResult) -> None:
        self.results.append(result)

    def result(self, component: str) -> ComponentResult | None:
        return next((r for r in self.results if r.component == component), None)

    @property
    def succeeded(self) -> list[str]:
        return [r.component for r in self.results if r.status == "success"]

    @property
    def failed(self) -> list[str]:
        return [r.component for r in self.results if r.status == "failed"]

    @property
    def empty(self) -> list[str]:
        return [r.component for r in self.results if r.status == "empty"]

    @property
    def status(self) -> RunStatus:
        if self.results and len(self.succeeded) == len(self.results):
            return "success"
        if self.succeeded:
            return "partial_failure"
        return "failure"

    def summary_lines(self) -> list[str]:
        lines = [f"Run via {self.source}: {self.status} ({len(self.succeeded)}/{len(self.results)} components)"]
        lines.extend(r.summary_line() for r in self.results)
        return lines

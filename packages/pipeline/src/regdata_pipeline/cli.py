"""
cli.py — Click CLI entrypoint for the regdata pipeline.

Usage:
    regdata reference
    regdata reference --synthetic
    regdata run
    regdata run --component socioeconomic --component environmental
    regdata run --no-download          # re-use files from an earlier download
    regdata run --synthetic            # seeded sample data, no network
    regdata status
"""

from __future__ import annotations

import asyncio
import sys

import click
import structlog

from regdata_shared.config import PipelineConfig, Settings
from regdata_shared.constants import COMPONENT_NAMES
from regdata_shared.errors import MissingInput, RegdataError
from regdata_pipeline.utils.logging import configure_logging

log = structlog.get_logger(__name__)


@click.group()
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level (default: REGDATA_LOG_LEVEL or INFO)",
)
@click.option(
    "--log-format",
    default=None,
    type=click.Choice(["console", "json"]),
    help="Log renderer (default: REGDATA_LOG_FORMAT or console)",
)
@click.pass_context
def main(ctx: click.Context, log_level: str | None, log_format: str | None) -> None:
    """regdata — Legal Amazon regional statistics integration."""
    settings = Settings()
    configure_logging(
        log_level=log_level or settings.log_level,
        log_format=log_format or settings.log_format,
    )
    ctx.obj = PipelineConfig.from_settings(settings)


@main.command()
@click.option("--synthetic", is_flag=True, help="Generate sample municipalities instead of calling IBGE")
@click.option("--seed", default=42, show_default=True, help="Seed for --synthetic")
@click.pass_obj
def reference(config: PipelineConfig, synthetic: bool, seed: int) -> None:
    """Build the Legal Amazon municipality reference mapping."""
    from regdata_pipeline.pipelines.reference import run

    try:
        mapping = asyncio.run(run(config, synthetic=synthetic, seed=seed))
    except RegdataError as exc:
        click.echo(f"  ✗ reference: {exc}", err=True)
        sys.exit(1)
    click.echo(f"  ✓ {len(mapping)} municipalities → {config.reference_path}")


@main.command()
@click.option(
    "--component",
    "components",
    multiple=True,
    type=click.Choice(list(COMPONENT_NAMES), case_sensitive=False),
    help="Component to process (repeatable; default: all)",
)
@click.option("--synthetic", is_flag=True, help="Use seeded sample component tables")
@click.option("--no-download", is_flag=True, help="Read previously downloaded files")
@click.option("--dry-run", is_flag=True, help="Transform and extract but write nothing")
@click.option("--seed", default=42, show_default=True, help="Seed for --synthetic")
@click.pass_obj
def run(
    config: PipelineConfig,
    components: tuple[str, ...],
    synthetic: bool,
    no_download: bool,
    dry_run: bool,
    seed: int,
) -> None:
    """Run the Trajetorias integration for the selected components."""
    from regdata_pipeline.loaders.reference import load_reference
    from regdata_pipeline.pipelines import trajetorias
    from regdata_pipeline.sources import SyntheticSource, TrajetoriasSource

    try:
        mapping = load_reference(config.reference_path, config.table_schema)
    except MissingInput:
        log.warning("reference_missing", path=str(config.reference_path), hint="run `regdata reference`")
        mapping = None
    except RegdataError as exc:
        click.echo(f"  ✗ reference: {exc}", err=True)
        sys.exit(1)

    if synthetic:
        codes = None
        if mapping is not None:
            codes = mapping.codes + [2900000 + i for i in range(1, len(mapping) // 4 + 1)]
        source = SyntheticSource(config, codes, seed=seed)
    else:
        source = TrajetoriasSource(config, download=not no_download)

    try:
        report = asyncio.run(
            trajetorias.run(
                config,
                source,
                mapping,
                components=[c.lower() for c in components] or None,
                write=not dry_run,
            )
        )
    except RegdataError as exc:
        log.error("run_aborted", error_kind=exc.kind, error=str(exc))
        click.echo(f"  ✗ run aborted: {exc}", err=True)
        sys.exit(1)

    for line in report.summary_lines():
        click.echo(line)
    if report.results and len(report.failed) == len(report.results):
        sys.exit(1)


@main.command()
@click.pass_obj
def status(config: PipelineConfig) -> None:
    """Show which input and output files are present."""
    from regdata_pipeline.loaders.dataset_writer import check_required_files

    groups = {
        "reference": [config.reference_path],
        "raw": [config.raw_path(name) for name in config.components],
        "processed": [config.key_indicators_path(name) for name in config.components],
    }
    missing = set(check_required_files([p for paths in groups.values() for p in paths]))

    click.echo(f"Data directory: {config.data_dir}")
    for group, paths in groups.items():
        for path in paths:
            mark = "✗" if path in missing else "✓"
            click.echo(f"  {mark} {group:10s} {path}")

    inputs = [*groups["reference"], *groups["raw"]]
    if not missing.intersection(inputs):
        click.echo("Ready for integration.")
    else:
        click.echo("Missing inputs: run `regdata reference` and `regdata run`.")


if __name__ == "__main__":
    main()

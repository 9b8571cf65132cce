"""
tests/test_cli.py — Smoke tests for the regdata click CLI.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from regdata_pipeline.cli import main


@pytest.fixture
def runner_env(tmp_path: Path) -> dict[str, str]:
    return {
        "REGDATA_DATA_DIR": str(tmp_path / "data"),
        "REGDATA_LOG_LEVEL": "WARNING",
    }


class TestCli:
    def test_reference_then_synthetic_run(self, tmp_path: Path, runner_env):
        runner = CliRunner()
        result = runner.invoke(main, ["reference", "--synthetic"], env=runner_env)
        assert result.exit_code == 0, result.output
        assert (tmp_path / "data" / "raw" / "census" / "amazon_municipalities.csv").is_file()

        result = runner.invoke(main, ["run", "--synthetic", "--component", "population"], env=runner_env)
        assert result.exit_code == 0, result.output
        assert "population" in result.output
        assert (tmp_path / "data" / "processed" / "key_indicators_population.csv").is_file()

    def test_run_exits_nonzero_when_everything_fails(self, runner_env):
        result = CliRunner().invoke(main, ["run", "--no-download"], env=runner_env)
        assert result.exit_code == 1
        assert "missing_input" in result.output

    def test_dry_run_writes_nothing(self, tmp_path: Path, runner_env):
        result = CliRunner().invoke(main, ["run", "--synthetic", "--dry-run"], env=runner_env)
        assert result.exit_code == 0, result.output
        assert not (tmp_path / "data" / "processed").exists()

    def test_status_lists_files(self, runner_env):
        result = CliRunner().invoke(main, ["status"], env=runner_env)
        assert result.exit_code == 0
        assert "reference" in result.output
        assert "Missing inputs" in result.output

    def test_status_checks_files_once(self, runner_env, monkeypatch):
        from regdata_pipeline.loaders import dataset_writer

        calls = []
        original = dataset_writer.check_required_files

        def counting(paths):
            calls.append(list(paths))
            return original(calls[-1])

        monkeypatch.setattr(dataset_writer, "check_required_files", counting)
        result = CliRunner().invoke(main, ["status"], env=runner_env)
        assert result.exit_code == 0, result.output
        assert len(calls) == 1
        # reference, four raw files and four key-indicator files
        assert len(calls[0]) == 9
        assert result.output.count("✗") == 9

    def test_unknown_component_rejected(self, runner_env):
        result = CliRunner().invoke(main, ["run", "--component", "weather"], env=runner_env)
        assert result.exit_code == 2

"""
tests/test_loaders/test_dataset_writer.py — Tests for CSV + metadata sidecar persistence.
"""

from __future__ import annotations

import json
from pathlib import Path

import polars as pl
import pytest

from regdata_shared.errors import InvalidInput, MissingInput
from regdata_pipeline.loaders.dataset_writer import (
    check_required_files,
    metadata_path_for,
    read_csv_table,
    read_dataset,
    read_metadata,
    write_dataset,
)
from regdata_pipeline.loaders.reference import load_reference, save_reference


@pytest.fixture
def frame() -> pl.DataFrame:
    return pl.DataFrame({
        "code_muni": ["0000007", "1100015"],
        "abbrev_state": ["AM", "RO"],
        "income": [402.1, None],
    })


class TestWriteDataset:
    def test_creates_directories_and_files(self, tmp_path: Path, frame):
        path = tmp_path / "nested" / "dir" / "key_indicators_socioeconomic.csv"
        write_dataset(frame, path, "Key socioeconomic indicators")
        assert path.is_file()
        assert (tmp_path / "nested" / "dir" / "key_indicators_socioeconomic_metadata.json").is_file()

    def test_sidecar_matches_written_frame(self, tmp_path: Path, frame):
        path = tmp_path / "out.csv"
        meta = write_dataset(frame, path, "desc")
        raw = json.loads(metadata_path_for(path).read_text(encoding="utf-8"))
        assert raw["filename"] == "out.csv"
        assert raw["rows"] == 2
        assert raw["columns"] == 3
        assert raw["column_names"] == ["code_muni", "abbrev_state", "income"]
        assert raw["description"] == "desc"
        assert "created" in raw
        assert meta.rows == 2

    def test_round_trip_agrees_with_sidecar(self, tmp_path: Path, frame):
        path = tmp_path / "out.csv"
        write_dataset(frame, path)
        df, meta = read_dataset(path)
        assert meta.matches(df)
        # codes keep their leading zeros when read back as strings
        assert df["code_muni"].to_list() == ["0000007", "1100015"]

    def test_empty_frame_writes_header_only(self, tmp_path: Path):
        path = tmp_path / "empty.csv"
        df = pl.DataFrame(schema={"code_muni": pl.String, "income": pl.Float64})
        meta = write_dataset(df, path)
        assert meta.rows == 0
        assert path.read_text(encoding="utf-8").strip() == "code_muni,income"

    def test_overwrites_existing(self, tmp_path: Path, frame):
        path = tmp_path / "out.csv"
        write_dataset(frame, path)
        write_dataset(frame.head(1), path)
        assert read_metadata(path).rows == 1
        assert read_csv_table(path).height == 1


class TestReading:
    def test_missing_csv_raises(self, tmp_path: Path):
        with pytest.raises(MissingInput):
            read_csv_table(tmp_path / "nope.csv")

    def test_missing_sidecar_raises(self, tmp_path: Path, frame):
        path = tmp_path / "bare.csv"
        frame.write_csv(path)
        with pytest.raises(MissingInput):
            read_metadata(path)

    def test_undecodable_csv_raises_invalid_input(self, tmp_path: Path):
        path = tmp_path / "latin1.csv"
        path.write_bytes(b"code_muni,name_muni\n1501402,Bel\xe9m\n")
        with pytest.raises(InvalidInput) as exc_info:
            read_csv_table(path)
        assert exc_info.value.kind == "invalid_input"
        assert exc_info.value.path == path


class TestCheckRequiredFiles:
    def test_reports_missing(self, tmp_path: Path):
        present = tmp_path / "a.csv"
        present.write_text("x\n1\n")
        absent = tmp_path / "b.csv"
        assert check_required_files([present, absent]) == [absent]

    def test_all_present(self, tmp_path: Path):
        present = tmp_path / "a.csv"
        present.write_text("x\n1\n")
        assert check_required_files([present]) == []


class TestReferenceFile:
    def test_save_and_load(self, tmp_path: Path, reference_df, schema):
        path = tmp_path / "census" / "amazon_municipalities.csv"
        meta = save_reference(reference_df, path)
        assert meta.rows == reference_df.height
        mapping = load_reference(path, schema)
        assert len(mapping) == reference_df.height
        assert "1100015" in mapping

    def test_load_missing_raises(self, tmp_path: Path, schema):
        with pytest.raises(MissingInput):
            load_reference(tmp_path / "absent.csv", schema)

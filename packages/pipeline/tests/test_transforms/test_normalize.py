"""
tests/test_transforms/test_normalize.py — Tests for code standardization and the region filter.
"""

from __future__ import annotations

import polars as pl
import pytest

from regdata_shared.errors import SchemaError
from regdata_pipeline.transforms.normalize import (
    clean_string_columns,
    drop_all_null_rows,
    drop_missing_codes,
    filter_to_reference,
    standardize_codes,
)
from regdata_pipeline.transforms.reference import ReferenceMapping


class TestStandardizeCodes:
    def test_pads_mixed_representations(self, schema):
        df = pl.DataFrame({"code_muni": ["7", " 1100015 ", "1302603.0", "0000042"]})
        result = standardize_codes(df, schema)
        assert result["code_muni"].to_list() == ["0000007", "1100015", "1302603", "0000042"]
        assert result["code_muni"].dtype == pl.String

    def test_integer_column(self, schema):
        df = pl.DataFrame({"code_muni": [1100015, 7]})
        result = standardize_codes(df, schema)
        assert result["code_muni"].to_list() == ["1100015", "0000007"]

    def test_invalid_and_missing_become_null(self, schema):
        df = pl.DataFrame({"code_muni": ["abc", None, "NA", "1100015"], "v": [1, 2, 3, 4]})
        result = standardize_codes(df, schema)
        assert result["code_muni"].to_list() == [None, None, None, "1100015"]
        assert result.height == 4

    def test_other_columns_untouched(self, schema):
        df = pl.DataFrame({"code_muni": ["1"], "income": [" 10 "]})
        result = standardize_codes(df, schema)
        assert result["income"][0] == " 10 "

    def test_missing_entity_column_raises(self, schema):
        with pytest.raises(SchemaError):
            standardize_codes(pl.DataFrame({"other": [1]}), schema)


class TestDropMissingCodes:
    def test_drops_null_codes(self, schema):
        df = pl.DataFrame({"code_muni": ["1100015", None, "1302603"]})
        assert drop_missing_codes(df, schema)["code_muni"].to_list() == ["1100015", "1302603"]


class TestFilterToReference:
    def test_keeps_only_reference_codes_in_order(self, schema, reference):
        df = pl.DataFrame({
            "code_muni": ["1501402", "2927408", "1100015", "3550308", "1302603"],
            "v": [1, 2, 3, 4, 5],
        })
        result = filter_to_reference(df, reference, schema)
        assert result["code_muni"].to_list() == ["1501402", "1100015", "1302603"]
        assert result["v"].to_list() == [1, 3, 5]

    def test_result_is_subset_of_input(self, schema, reference):
        df = pl.DataFrame({"code_muni": ["1100015", "1100015", None, "9999999"]})
        result = filter_to_reference(df, reference, schema)
        assert result.height <= df.height
        assert set(result["code_muni"].to_list()) <= set(reference.codes)

    def test_null_codes_excluded(self, schema, reference):
        df = pl.DataFrame({"code_muni": [None, "1100015"]}, schema={"code_muni": pl.String})
        result = filter_to_reference(df, reference, schema)
        assert result["code_muni"].to_list() == ["1100015"]

    def test_empty_reference_keeps_nothing(self, schema):
        empty = ReferenceMapping(
            frame=pl.DataFrame(schema={c: pl.String for c in ("code_muni", "abbrev_state", "name_muni")}),
            table_schema=schema,
        )
        df = pl.DataFrame({"code_muni": ["1100015"]})
        assert filter_to_reference(df, empty, schema).is_empty()


class TestHelperFunctions:
    def test_clean_string_columns_strips_whitespace(self):
        df = pl.DataFrame({"name": ["  Manaus ", "Belém  "], "n": [1, 2]})
        result = clean_string_columns(df)
        assert result["name"].to_list() == ["Manaus", "Belém"]
        assert result["n"].to_list() == [1, 2]

    def test_drop_all_null_rows(self):
        df = pl.DataFrame({"a": [1, None, 3], "b": ["x", None, None]})
        result = drop_all_null_rows(df)
        assert len(result) == 2

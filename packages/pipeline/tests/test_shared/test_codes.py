"""
tests/test_shared/test_codes.py — Tests for municipality code normalization.
"""

from __future__ import annotations

import pytest

from regdata_shared.codes import standardize_entity_code
from regdata_shared.errors import InvalidId, RegdataError


class TestStandardizeEntityCode:
    @pytest.mark.parametrize("value", ["  7  ", 7, "0000007", "7.0", 7.0])
    def test_equivalent_spellings_normalize_alike(self, value):
        assert standardize_entity_code(value) == "0000007"

    def test_full_width_code_unchanged(self):
        assert standardize_entity_code(1100015) == "1100015"
        assert standardize_entity_code("1100015") == "1100015"

    def test_idempotent(self):
        once = standardize_entity_code(" 1302603.0 ")
        assert standardize_entity_code(once) == once

    @pytest.mark.parametrize("value", [None, "", "  ", "NA", "nan", "NULL", float("nan")])
    def test_missing_values_give_none(self, value):
        assert standardize_entity_code(value) is None

    @pytest.mark.parametrize("value", ["abc", "12a", "1.5", -3, "-3", 12345678, True])
    def test_invalid_values_raise(self, value):
        with pytest.raises(InvalidId):
            standardize_entity_code(value)

    def test_invalid_id_is_value_error_and_regdata_error(self):
        with pytest.raises(ValueError):
            standardize_entity_code("abc")
        with pytest.raises(RegdataError) as exc_info:
            standardize_entity_code("abc")
        assert exc_info.value.kind == "invalid_id"

    def test_custom_width(self):
        assert standardize_entity_code(11, width=2) == "11"
        with pytest.raises(InvalidId):
            standardize_entity_code(110, width=2)

"""
codes.py — Municipality code normalization helpers.

Component datasets publish IBGE municipality codes inconsistently: as
integers, floats written by spreadsheet tools ("1100015.0"), padded or
unpadded strings, sometimes with stray whitespace. Every join in the
pipeline keys on the normalized 7-digit string produced here.

Usage:
    from regdata_shared.codes import standardize_entity_code

    standardize_entity_code(1100015)       # "1100015"
    standardize_entity_code("  7  ")       # "0000007"
    standardize_entity_code("0000007")     # "0000007"
    standardize_entity_code(None)          # None
    standardize_entity_code("abc")         # raises InvalidId
"""

from __future__ import annotations

import math
from typing import Any

from regdata_shared.constants import ENTITY_CODE_WIDTH
from regdata_shared.errors import InvalidId

# Textual markers that mean "no value" in CSVs written by R / pandas / Excel
_MISSING_MARKERS: frozenset[str] = frozenset({"", "na", "nan", "null", "none", "n/a"})


def _as_integer(value: Any) -> int | None:
    """Interpret value as an integer, or None when it is a missing marker."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidId(value, "booleans are not codes")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if math.isinf(value) or not value.is_integer():
            raise InvalidId(value)
        return int(value)

    text = str(value).strip()
    if text.lower() in _MISSING_MARKERS:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        raise InvalidId(value) from None
    if math.isnan(number) or math.isinf(number) or not number.is_integer():
        raise InvalidId(value)
    return int(number)


def standardize_entity_code(value: Any, width: int = ENTITY_CODE_WIDTH) -> str | None:
    """
    Normalize an entity identifier to a fixed-width zero-padded string.

    Idempotent: normalizing an already-normalized code returns it unchanged.

    Args:
        value: Raw identifier (int, float, str, or None).
        width: Output width (7 for IBGE municipality codes).

    Returns:
        Zero-padded code string, or None when the input is missing.

    Raises:
        InvalidId: If the value is not a non-negative integer or does not
            fit in width digits.
    """
    number = _as_integer(value)
    if number is None:
        return None
    if number < 0:
        raise InvalidId(value, "negative")
    code = f"{number:0{width}d}"
    if len(code) > width:
        raise InvalidId(value, f"more than {width} digits")
    return code

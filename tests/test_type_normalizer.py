"""
tests/test_type_normalizer.py
-----------------------------
Unit tests for octopus/core/type_normalizer.py.
Run with: python -m pytest tests/
"""
from __future__ import annotations

import pytest

from octopus.core.type_normalizer import (
    canonical_type,
    fix_boolean_default,
    is_boolean_type,
    is_numeric_type,
    is_string_type,
    is_temporal_type,
    parse_type,
)
from octopus.models.schema import ColumnType


class TestParseType:
    def test_decimal_with_precision_and_scale(self) -> None:
        assert parse_type("decimal(20,5)") == ("decimal", 20, 5)

    def test_varchar_is_string(self) -> None:
        assert parse_type("VARCHAR(100)") == ("string", 100, 0)

    def test_plain_int(self) -> None:
        assert parse_type("int") == ("int", 0, 0)

    def test_spaces_inside_suffix(self) -> None:
        assert parse_type("DECIMAL( 10 , 2 )") == ("decimal", 10, 2)

    @pytest.mark.parametrize("raw,expected", [
        ("bigint", "long"),
        ("integer", "int"),
        ("tinytext", "text"),
        ("timestamp", "datetime"),
        ("numeric", "decimal"),
        ("bool", "boolean"),
        ("varbinary", "blob"),
        ("double precision", "double"),
    ])
    def test_aliases(self, raw: str, expected: str) -> None:
        assert parse_type(raw)[0] == expected

    # --- Malformed suffixes are treated as absent ---
    def test_unclosed_suffix(self) -> None:
        assert parse_type("varchar(100") == ("string", 0, 0)

    def test_too_many_parts(self) -> None:
        assert parse_type("decimal(1,2,3)") == ("decimal", 0, 0)

    def test_non_numeric_size(self) -> None:
        assert parse_type("varchar(abc)") == ("string", 0, 0)

    def test_scale_without_size_is_dropped(self) -> None:
        assert parse_type("decimal(x,5)") == ("decimal", 0, 0)

    # --- Unknown keywords pass through ---
    def test_unknown_type_passes_through_lowercased(self) -> None:
        assert parse_type("GEOMETRY") == ("geometry", 0, 0)

    def test_unknown_type_keeps_size(self) -> None:
        assert parse_type("uuid(16)") == ("uuid", 16, 0)

    def test_empty(self) -> None:
        assert parse_type("") == ("", 0, 0)

    # --- bit ---
    def test_bit_is_boolean(self) -> None:
        assert parse_type("bit") == ("boolean", 0, 0)
        assert parse_type("bit(1)") == ("boolean", 0, 0)

    def test_wide_bit_is_blob(self) -> None:
        assert parse_type("bit(8)") == ("blob", 0, 0)

    def test_boolean_never_keeps_size(self) -> None:
        assert parse_type("boolean(1)") == ("boolean", 0, 0)


class TestClassification:
    def test_canonical_type(self) -> None:
        assert canonical_type("varchar(10)") is ColumnType.STRING
        assert canonical_type("point") is None

    def test_predicates(self) -> None:
        assert is_boolean_type("bool")
        assert is_numeric_type("decimal(10,2)")
        assert is_temporal_type("timestamp")
        assert is_string_type("text")
        assert not is_numeric_type("string")


class TestFixBooleanDefault:
    @pytest.mark.parametrize("value,expected", [
        ("true", "true"),
        ("TRUE", "true"),
        ("1", "true"),
        ("0", "false"),
        ("false", "false"),
        ("yes", "false"),
    ])
    def test_boolean_defaults(self, value: str, expected: str) -> None:
        assert fix_boolean_default("boolean", value) == expected

    def test_non_boolean_untouched(self) -> None:
        assert fix_boolean_default("string", "1") == "1"

"""
tests/test_schema_model.py
--------------------------
Unit tests for octopus/models/schema.py.
"""
from __future__ import annotations

import pytest

from octopus.models.schema import Column, ColumnType, FormatName, Reference, Schema, Table


class TestReference:
    def test_parse(self) -> None:
        assert Reference.parse("user.id") == Reference("user", "id")
        assert str(Reference("user", "id")) == "user.id"

    @pytest.mark.parametrize("raw", ["user", "a.b.c", ".id", "user.", ""])
    def test_parse_rejects_malformed(self, raw: str) -> None:
        assert Reference.parse(raw) is None


class TestColumn:
    def test_format_type(self) -> None:
        assert Column(name="a", type="string").format_type() == "string"
        assert Column(name="a", type="string", size=10).format_type() == "string(10)"
        assert Column(name="a", type="decimal", size=20, scale=5).format_type() == "decimal(20,5)"

    def test_column_type(self) -> None:
        assert Column(name="a", type="long").column_type is ColumnType.LONG
        assert Column(name="a", type="geometry").column_type is None

    def test_to_dict_omits_falsy(self) -> None:
        assert Column(name="id", type="long").to_dict() == {"name": "id", "type": "long"}

    def test_from_dict_normalizes_type(self) -> None:
        column = Column.from_dict({"name": "price", "type": "NUMERIC(10,2)", "nullable": True})
        assert (column.type, column.size, column.scale) == ("decimal", 10, 2)
        assert column.nullable

    def test_from_dict_string_ref(self) -> None:
        column = Column.from_dict({"name": "user_id", "type": "long", "ref": "user.id"})
        assert column.ref == Reference("user", "id")


class TestTable:
    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            Table(name="")

    def test_keys(self, user_table: Table) -> None:
        assert [c.name for c in user_table.primary_keys()] == ["id"]
        assert [c.name for c in user_table.unique_keys()] == ["name"]


class TestSchema:
    def test_groups_in_first_seen_order(self, sample_schema: Schema) -> None:
        assert sample_schema.groups() == ["common", "admin"]

    def test_table_lookup(self, sample_schema: Schema) -> None:
        assert sample_schema.table("audit_log").group == "admin"
        assert sample_schema.table("missing") is None

    def test_dict_round_trip(self, sample_schema: Schema) -> None:
        assert Schema.from_dict(sample_schema.to_dict()) == sample_schema


class TestFormatName:
    def test_of(self) -> None:
        assert FormatName.of(" XLSX ") is FormatName.XLSX
        assert FormatName.of("dbdiagram.io") is FormatName.DBDIAGRAM_IO
        assert FormatName.of("liquibase") is None

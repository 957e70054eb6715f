"""
tests/test_dbml.py
------------------
Unit tests for octopus/core/formats/dbml.py.
"""
from __future__ import annotations

import dataclasses
import textwrap
from pathlib import Path

import pytest

from octopus.core.codec import DecodeError, EncodeOptions
from octopus.core.formats.dbml import DbmlDecoder, DbmlEncoder, loads_dbml, split_settings
from octopus.models.schema import Reference, Schema

SHOP = textwrap.dedent("""\
    // shop database
    Project shop {
      database_type: 'MySQL'
      Note: 'author: guybrush; version: 2.0'
    }

    Enum status {
      active
      inactive
    }

    Table orders as O {
      id int [pk, increment]
      user_id int [not null]
      status varchar(20) [default: 'new', note: 'order status']
      flag bool [default: 1]
      indexes {
        (id, user_id) [unique]
      }
      Note: 'customer orders'
    }

    Table users {
      id int [pk]
      email "character varying(255)" [unique, not null]
    }

    Ref: orders.user_id > users.id

    TableGroup sales {
      orders
    }
""")


def _without_class_names(schema: Schema) -> Schema:
    return dataclasses.replace(
        schema, tables=[dataclasses.replace(t, class_name="") for t in schema.tables]
    )


class TestSplitSettings:
    def test_commas_inside_quotes(self) -> None:
        assert split_settings("pk, note: 'a, b', not null") == ["pk", "note: 'a, b'", "not null"]


class TestLoadsDbml:
    def test_meta_from_project(self) -> None:
        schema = loads_dbml(SHOP)
        assert (schema.name, schema.author, schema.version) == ("shop", "guybrush", "2.0")

    def test_tables_and_skipped_blocks(self) -> None:
        schema = loads_dbml(SHOP)
        assert [t.name for t in schema.tables] == ["orders", "users"]
        assert [c.name for c in schema.table("orders").columns] == ["id", "user_id", "status", "flag"]

    def test_column_settings(self) -> None:
        orders = loads_dbml(SHOP).table("orders")
        id_col, user_id, status, flag = orders.columns
        assert id_col.primary_key and id_col.auto_incremental and not id_col.nullable
        assert not user_id.nullable
        assert status.nullable
        assert (status.type, status.size) == ("string", 20)
        assert status.default_value == "new"
        assert status.description == "order status"
        assert (flag.type, flag.default_value) == ("boolean", "true")
        assert orders.description == "customer orders"

    def test_quoted_type(self) -> None:
        email = loads_dbml(SHOP).table("users").columns[1]
        assert (email.type, email.size, email.unique_key, email.nullable) == ("string", 255, True, False)

    def test_refs_and_groups(self) -> None:
        schema = loads_dbml(SHOP)
        assert schema.table("orders").columns[1].ref == Reference("users", "id")
        assert schema.table("orders").group == "sales"
        assert schema.table("users").group == ""

    def test_reverse_ref(self) -> None:
        schema = loads_dbml(
            "Table a {\n  id int [pk]\n}\nTable b {\n  a_id int\n}\nRef: a.id < b.a_id\n"
        )
        assert schema.table("b").columns[0].ref == Reference("a", "id")

    def test_unterminated_table_closed(self) -> None:
        schema = loads_dbml("Table a {\n  id int [pk]\n")
        assert [t.name for t in schema.tables] == ["a"]

    def test_lines_after_closing_brace_stay_outside_table(self) -> None:
        schema = loads_dbml("Table a {\n  id int\n}\n  name varchar\n}\n")
        assert [c.name for c in schema.table("a").columns] == ["id"]



class TestDbmlCodec:
    def test_round_trip(self, tmp_path: Path, sample_schema: Schema) -> None:
        [artifact] = DbmlEncoder().encode(sample_schema, EncodeOptions())
        assert artifact.name == "hello.dbml"
        path = tmp_path / artifact.name
        path.write_bytes(artifact.content)
        assert DbmlDecoder().decode(path) == _without_class_names(sample_schema)

    def test_encoded_lines(self, sample_schema: Schema) -> None:
        [artifact] = DbmlEncoder().encode(sample_schema, EncodeOptions())
        lines = artifact.text.splitlines()
        assert 'Project "hello" {' in lines
        assert "  Note: 'author: lechuck; version: 0.1.0'" in lines
        assert "  id int [pk, increment]" in lines
        assert "  group_id int [ref: > user_group.id]" in lines
        assert "  active boolean [not null, default: true]" in lines
        assert "TableGroup admin {" in lines

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DecodeError):
            DbmlDecoder().decode(tmp_path / "missing.dbml")

"""
tests/test_octopus_json.py
--------------------------
Unit tests for octopus/core/formats/octopus_json.py.
"""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from octopus.core.codec import DecodeError, EncodeOptions, group_filter
from octopus.core.formats.octopus_json import (
    OctopusDecoder,
    OctopusEncoder,
    dumps_schema,
    loads_schema,
)
from octopus.models.schema import Schema


class TestLoadsSchema:
    def test_minimal_document(self) -> None:
        schema = loads_schema('{"tables": [{"name": "t", "columns": [{"name": "c", "type": "VARCHAR(5)"}]}]}')
        column = schema.tables[0].columns[0]
        assert (column.type, column.size) == ("string", 5)
        assert schema.author == ""

    def test_invalid_json(self) -> None:
        with pytest.raises(DecodeError):
            loads_schema("{not json")

    def test_not_an_object(self) -> None:
        with pytest.raises(DecodeError):
            loads_schema("[1, 2]")

    def test_table_without_name(self) -> None:
        with pytest.raises(DecodeError):
            loads_schema('{"tables": [{"columns": []}]}')


class TestOctopusCodec:
    def test_round_trip(self, tmp_path: Path, sample_schema: Schema) -> None:
        [artifact] = OctopusEncoder().encode(sample_schema, EncodeOptions())
        assert artifact.name == "hello.ojson"
        path = tmp_path / artifact.name
        path.write_bytes(artifact.content)
        assert OctopusDecoder().decode(path) == sample_schema

    def test_group_filter(self, sample_schema: Schema) -> None:
        options = EncodeOptions(table_filter=group_filter(["admin"]))
        [artifact] = OctopusEncoder().encode(sample_schema, options)
        data = json.loads(artifact.text)
        assert [t["name"] for t in data["tables"]] == ["audit_log"]

    def test_output_is_stable(self, sample_schema: Schema) -> None:
        assert dumps_schema(sample_schema) == dumps_schema(loads_schema(dumps_schema(sample_schema)))

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DecodeError):
            OctopusDecoder().decode(tmp_path / "nope.ojson")

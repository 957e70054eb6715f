"""
tests/test_graphql.py
---------------------
Unit tests for octopus/core/formats/graphql.py.
"""
from __future__ import annotations

from octopus.core.codec import EncodeOptions
from octopus.core.formats.graphql import GraphqlEncoder, graphql_class, graphql_field
from octopus.core.prefix_mapper import PrefixMapper
from octopus.models.schema import Column, Schema, Table


class TestGraphqlField:
    def test_non_null_suffix(self) -> None:
        assert graphql_field(Column(name="age", type="int")).type == "Int!"
        assert graphql_field(Column(name="age", type="int", nullable=True)).type == "Int"

    def test_unknown_type_falls_back_to_string(self) -> None:
        assert graphql_field(Column(name="shape", type="geometry", nullable=True)).type == "String"


class TestGraphqlClass:
    def test_single_primary_key_is_id(self, user_table: Table) -> None:
        cls = graphql_class(user_table, EncodeOptions())
        assert cls.fields[0].type == "ID!"

    def test_composite_key_keeps_scalar_types(self) -> None:
        table = Table(name="membership", columns=[
            Column(name="user_id", type="long", primary_key=True),
            Column(name="group_id", type="long", primary_key=True),
        ])
        assert [f.type for f in graphql_class(table, EncodeOptions()).fields] == ["Int!", "Int!"]


class TestGraphqlEncoder:
    def test_full_document(self, user_table: Table) -> None:
        schema = Schema(name="hello", version="0.1.0", tables=[user_table])
        options = EncodeOptions(prefix_mapper=PrefixMapper("common:C"))
        [artifact] = GraphqlEncoder().encode(schema, options)
        assert artifact.name == "hello-0.1.0.graphqls"
        assert artifact.text == (
            "schema {\n"
            "    query: Query\n"
            "}\n"
            "\n"
            "type Query {\n"
            "  cUsers: [CUser]\n"
            "}\n"
            "\n"
            "type CUser {\n"
            "  id: ID!\n"
            "  name: String!\n"
            "  dec: Float!\n"
            "  createdAt: String!\n"
            "  updatedAt: String\n"
            "}\n"
        )

    def test_unnamed_schema_file_name(self, user_table: Table) -> None:
        [artifact] = GraphqlEncoder().encode(Schema(tables=[user_table]), EncodeOptions())
        assert artifact.name == "schema.graphqls"

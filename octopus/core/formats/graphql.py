"""
octopus/core/formats/graphql.py
-------------------------------
GraphQL schema (``.graphqls``) encoder.

Emits a ``Query`` type with one pluralised list field per class, then one
object type per table. Unknown column types fall back to ``String``.
A table with exactly one primary key column renders it as ``ID!``.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from octopus.core.codec import Artifact, EncodeOptions, Encoder, text_artifact, unknown_type
from octopus.core.naming import class_name, field_name, pluralize, to_lower_camel
from octopus.logger import get_logger
from octopus.models.schema import Column, ColumnType, FormatName, Schema, Table

log = get_logger(__name__)

_INDENT = "  "
_ID_TYPE = "ID!"
_FALLBACK_TYPE = "String"

_TYPE_MAP: dict[ColumnType, str] = {
    ColumnType.STRING: "String",
    ColumnType.TEXT: "String",
    ColumnType.DATE: "String",
    ColumnType.TIME: "String",
    ColumnType.DATETIME: "String",
    ColumnType.BLOB: "String",
    ColumnType.BOOLEAN: "Boolean",
    ColumnType.LONG: "Int",
    ColumnType.INT: "Int",
    ColumnType.DECIMAL: "Float",
    ColumnType.FLOAT: "Float",
    ColumnType.DOUBLE: "Float",
}

_SCHEMA_HEADER = """schema {
    query: Query
}
"""


@dataclass
class GraphqlField:
    column: Column
    name: str
    type: str


@dataclass
class GraphqlClass:
    table: Table
    name: str
    fields: list[GraphqlField] = field(default_factory=list)


def graphql_field(column: Column) -> GraphqlField:
    col_type = column.column_type
    if col_type is None:
        field_type = unknown_type(log, FormatName.GRAPHQL, column, _FALLBACK_TYPE)
    else:
        field_type = _TYPE_MAP[col_type]
    if not column.nullable:
        field_type += "!"
    return GraphqlField(column=column, name=field_name(column), type=field_type)


def graphql_class(table: Table, options: EncodeOptions) -> GraphqlClass:
    fields = [graphql_field(c) for c in table.columns]
    pk_fields = [f for f in fields if f.column.primary_key]
    if len(pk_fields) == 1:
        pk_fields[0].type = _ID_TYPE
    return GraphqlClass(
        table=table,
        name=class_name(table, options.prefixes_to_remove, options.prefix_mapper),
        fields=fields,
    )


class GraphqlEncoder(Encoder):
    format_name = FormatName.GRAPHQL

    def encode(self, schema: Schema, options: EncodeOptions) -> list[Artifact]:
        classes = [graphql_class(t, options) for t in options.filter_tables(schema)]

        lines: list[str] = [_SCHEMA_HEADER, "type Query {"]
        for cls in classes:
            lines.append(f"{_INDENT}{pluralize(to_lower_camel(cls.name))}: [{cls.name}]")
        lines += ["}", ""]

        for cls in classes:
            lines.append(f"type {cls.name} {{")
            for f in cls.fields:
                lines.append(f"{_INDENT}{f.name}: {f.type}")
            lines += ["}", ""]

        if schema.name:
            filename = f"{schema.name}-{schema.version}.graphqls"
        else:
            filename = "schema.graphqls"
        return [text_artifact(filename, lines)]

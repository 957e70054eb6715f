"""
octopus/core/formats/protobuf.py
--------------------------------
proto3 message (``.proto``) encoder.

One ``message`` per table, fields numbered from 1 in column order. Temporal
columns map to ``google.protobuf.Timestamp`` and pull in its import.
Unknown column types fall back to ``string``.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from octopus.core.codec import Artifact, EncodeOptions, Encoder, unknown_type
from octopus.core.naming import class_name, field_name
from octopus.logger import get_logger
from octopus.models.schema import Column, ColumnType, FormatName, Schema, Table

log = get_logger(__name__)

_INDENT = "  "
_FALLBACK_TYPE = "string"
_TIMESTAMP = "google.protobuf.Timestamp"

_TYPE_MAP: dict[ColumnType, str] = {
    ColumnType.STRING: "string",
    ColumnType.TEXT: "string",
    ColumnType.BOOLEAN: "bool",
    ColumnType.LONG: "int64",
    ColumnType.INT: "int32",
    ColumnType.FLOAT: "float",
    ColumnType.DOUBLE: "double",
    ColumnType.DECIMAL: "double",
    ColumnType.DATE: _TIMESTAMP,
    ColumnType.TIME: _TIMESTAMP,
    ColumnType.DATETIME: _TIMESTAMP,
    ColumnType.BLOB: "bytes",
}

_IMPORTS = {_TIMESTAMP: "google/protobuf/timestamp.proto"}


@dataclass
class ProtoField:
    name: str
    type: str
    number: int


@dataclass
class ProtoMessage:
    name: str
    fields: list[ProtoField] = field(default_factory=list)

    def imports(self) -> list[str]:
        return [_IMPORTS[f.type] for f in self.fields if f.type in _IMPORTS]


def proto_type(column: Column) -> str:
    col_type = column.column_type
    if col_type is None:
        return unknown_type(log, FormatName.PROTOBUF, column, _FALLBACK_TYPE)
    return _TYPE_MAP[col_type]


def proto_message(table: Table, options: EncodeOptions) -> ProtoMessage:
    return ProtoMessage(
        name=class_name(table, options.prefixes_to_remove, options.prefix_mapper),
        fields=[
            ProtoField(name=field_name(c), type=proto_type(c), number=i)
            for i, c in enumerate(table.columns, start=1)
        ],
    )


def render_proto(messages: list[ProtoMessage], package: str = "", go_package: str = "") -> str:
    """Render a complete proto3 file for *messages*."""
    blocks: list[str] = ['syntax = "proto3";']
    if package:
        blocks.append(f"package {package};")
    if go_package:
        blocks.append(f'option go_package = "{go_package}";')

    imports: dict[str, None] = {}
    for message in messages:
        for imp in message.imports():
            imports.setdefault(imp, None)
    if imports:
        blocks.append("\n".join(f'import "{imp}";' for imp in sorted(imports)))

    for message in messages:
        lines = [f"message {message.name} {{"]
        lines += [f"{_INDENT}{f.type} {f.name} = {f.number};" for f in message.fields]
        lines.append("}")
        blocks.append("\n".join(lines))

    return "\n\n".join(blocks) + "\n"


class ProtobufEncoder(Encoder):
    format_name = FormatName.PROTOBUF

    def encode(self, schema: Schema, options: EncodeOptions) -> list[Artifact]:
        messages = [proto_message(t, options) for t in options.filter_tables(schema)]
        content = render_proto(messages, options.package, options.go_package)
        filename = f"{schema.name or 'schema'}.proto"
        return [Artifact(name=filename, content=content.encode("utf-8"))]

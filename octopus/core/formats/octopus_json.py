"""
octopus/core/formats/octopus_json.py
------------------------------------
The canonical JSON document (``*.ojson``): :meth:`Schema.to_dict` serialised.

Example::

    {
        "author": "lechuck",
        "name": "hello",
        "version": "0.1.0",
        "tables": [
            {
                "name": "user",
                "group": "common",
                "columns": [
                    {"name": "id", "type": "long", "pk": true, "autoinc": true},
                    {"name": "name", "type": "string(100)", "unique": true}
                ]
            }
        ]
    }
"""
from __future__ import annotations

import json
from pathlib import Path

from octopus.core.codec import (
    Artifact,
    DecodeError,
    Decoder,
    EncodeOptions,
    Encoder,
    unknown_type,
)
from octopus.logger import get_logger
from octopus.models.schema import FormatName, Schema

log = get_logger(__name__)


def loads_schema(text: str, origin: str = "<string>") -> Schema:
    """
    Parse a canonical JSON document.

    Raises:
        DecodeError: If *text* is not valid JSON or not a JSON object.
    """
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Invalid JSON in '{origin}': {exc}") from exc
    if not isinstance(raw, dict):
        raise DecodeError(f"Expected a JSON object in '{origin}'.")
    try:
        return Schema.from_dict(raw)
    except (TypeError, ValueError, AttributeError) as exc:
        raise DecodeError(f"Malformed schema document '{origin}': {exc}") from exc


def dumps_schema(schema: Schema) -> str:
    return json.dumps(schema.to_dict(), indent=2, ensure_ascii=False) + "\n"


class OctopusDecoder(Decoder):
    format_name = FormatName.OCTOPUS

    def decode(self, source: Path) -> Schema:
        try:
            text = Path(source).read_text(encoding="utf-8")
        except OSError as exc:
            raise DecodeError(f"Cannot read schema file '{source}': {exc}") from exc

        schema = loads_schema(text, str(source))
        log.info(
            "Parsed schema file '%s': %d table(s), %d column(s) total.",
            Path(source).name,
            len(schema.tables),
            sum(len(t.columns) for t in schema.tables),
        )
        return schema


class OctopusEncoder(Encoder):
    format_name = FormatName.OCTOPUS

    def encode(self, schema: Schema, options: EncodeOptions) -> list[Artifact]:
        tables = options.filter_tables(schema)
        for table in tables:
            for column in table.columns:
                if column.column_type is None:
                    unknown_type(log, self.format_name, column, column.type)

        filtered = Schema(
            author=schema.author,
            name=schema.name,
            version=schema.version,
            tables=tables,
        )
        name = f"{schema.name or 'db'}.ojson"
        return [Artifact(name=name, content=dumps_schema(filtered).encode("utf-8"))]

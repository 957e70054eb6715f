"""
octopus/core/formats/quickdbd.py
--------------------------------
QuickDBD text format decoder and encoder.

Format::

    # author: lechuck
    # name: hello
    # version: 0.1.0

    # application users
    user
    -
    id long PK IDENTITY
    name string(100) UNIQUE
    group_id long NULL FK >- group.id
    active boolean default=true # soft delete flag

A ``#`` comment directly above a table becomes its description, even one
shaped like ``# version: ...``. The other ``# key: value`` comments before
the first table hold the schema meta data. Columns are NOT NULL unless
marked ``NULL``. A blank line ends a table. QuickDBD has no notion of
groups, so ``Table.group`` does not survive this format.
"""
from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

from octopus.core.codec import (
    Artifact,
    DecodeError,
    Decoder,
    EncodeOptions,
    Encoder,
    text_artifact,
    unknown_type,
)
from octopus.core.type_normalizer import fix_boolean_default, parse_type
from octopus.logger import get_logger
from octopus.models.schema import Column, FormatName, Reference, Schema, Table

log = get_logger(__name__)

_META_RE = re.compile(r"^#\s*(author|name|version)\s*:\s*(.*)$", re.IGNORECASE)
_TABLE_RE = re.compile(r"^([\w.]+)(?:\s+as\s+\w+)?$", re.IGNORECASE)
_SEPARATOR_RE = re.compile(r"^-+$")
_COLUMN_RE = re.compile(r"^(\w+)\s+(\S+)(.*)$")
_RELATIONS = frozenset({">-", "-<", "-", ">-<", "-0", "0-"})


class _State(Enum):
    BETWEEN_TABLES = "between_tables"
    HEADER = "header"
    COLUMNS = "columns"


def _split_comment(text: str) -> tuple[str, str]:
    body, sep, comment = text.partition("#")
    return body.strip(), comment.strip() if sep else ""


def parse_column(line: str) -> Column | None:
    body, description = _split_comment(line)
    m = _COLUMN_RE.match(body)
    if not m:
        return None
    col_type, size, scale = parse_type(m.group(2))
    column = Column(name=m.group(1), type=col_type, size=size, scale=scale, description=description)

    tokens = m.group(3).split()
    i = 0
    while i < len(tokens):
        token = tokens[i]
        upper = token.upper()
        if upper == "PK":
            column.primary_key = True
        elif upper == "UNIQUE":
            column.unique_key = True
        elif upper == "NULL":
            column.nullable = True
        elif upper in ("IDENTITY", "AUTOINCREMENT"):
            column.auto_incremental = True
        elif upper == "FK" and i + 1 < len(tokens):
            if tokens[i + 1] in _RELATIONS and i + 2 < len(tokens):
                i += 1
            column.ref = Reference.parse(tokens[i + 1])
            i += 1
        elif token.lower().startswith("default="):
            column.default_value = fix_boolean_default(col_type, token.split("=", 1)[1])
        i += 1
    return column


def _apply_meta(schema: Schema, comments: list[str]) -> None:
    for comment in comments:
        meta = _META_RE.match(comment)
        if meta:
            setattr(schema, meta.group(1).lower(), meta.group(2).strip())


def loads_quickdbd(text: str) -> Schema:
    schema = Schema()
    state = _State.BETWEEN_TABLES
    table: Table | None = None
    # comment lines since the last blank line or table
    comments: list[str] = []
    seen_table = False

    for line_num, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()

        if state is _State.COLUMNS:
            if not line:
                schema.tables.append(table)
                table, state = None, _State.BETWEEN_TABLES
                continue
            if line.startswith("#"):
                continue
            column = parse_column(line)
            if column is None:
                log.warning("Line %d: unrecognised column syntax → %r", line_num, line)
                continue
            table.add_column(column)
            continue

        if state is _State.HEADER:
            if _SEPARATOR_RE.match(line):
                state = _State.COLUMNS
            else:
                log.warning("Line %d: expected '-' after table '%s'.", line_num, table.name)
                table, state = None, _State.BETWEEN_TABLES
            continue

        # between tables
        if not line:
            if not seen_table:
                _apply_meta(schema, comments)
            comments = []
            continue
        if line.startswith("#"):
            comments.append(line)
            continue
        m = _TABLE_RE.match(line)
        if not m:
            log.warning("Line %d: outside any table — skipped: %s", line_num, line)
            continue
        description = ""
        if comments:
            description = comments.pop().lstrip("#").strip()
        if not seen_table:
            _apply_meta(schema, comments)
        comments = []
        table = Table(name=m.group(1), description=description)
        seen_table = True
        state = _State.HEADER

    if state is _State.COLUMNS and table is not None:
        schema.tables.append(table)
    elif not seen_table:
        _apply_meta(schema, comments)
    return schema


class QuickdbdDecoder(Decoder):
    format_name = FormatName.QUICKDBD

    def decode(self, source: Path) -> Schema:
        try:
            text = Path(source).read_text(encoding="utf-8")
        except OSError as exc:
            raise DecodeError(f"Cannot read QuickDBD file '{source}': {exc}") from exc
        schema = loads_quickdbd(text)
        log.info("Parsed QuickDBD file '%s': %d table(s).", Path(source).name, len(schema.tables))
        return schema


class QuickdbdEncoder(Encoder):
    format_name = FormatName.QUICKDBD

    def encode(self, schema: Schema, options: EncodeOptions) -> list[Artifact]:
        lines: list[str] = []
        for key in ("author", "name", "version"):
            value = getattr(schema, key)
            if value:
                lines.append(f"# {key}: {value}")
        if lines:
            lines.append("")

        for table in options.filter_tables(schema):
            if table.description:
                lines.append("# " + " ".join(table.description.split()))
            lines += [table.name, "-"]
            lines += [self._column(c) for c in table.columns]
            lines.append("")

        return [text_artifact(f"{schema.name or 'schema'}.quickdbd", lines)]

    def _column(self, column: Column) -> str:
        if column.column_type is None:
            unknown_type(log, self.format_name, column, column.type)
        parts = [column.name, column.format_type().replace(" ", "_")]
        if column.primary_key:
            parts.append("PK")
        if column.auto_incremental:
            parts.append("IDENTITY")
        if column.nullable:
            parts.append("NULL")
        if column.unique_key:
            parts.append("UNIQUE")
        if column.default_value:
            parts.append("default=" + column.default_value.replace(" ", "_"))
        if column.ref is not None:
            parts += ["FK", ">-", str(column.ref)]
        line = " ".join(parts)
        if column.description:
            line += " # " + " ".join(column.description.split())
        return line

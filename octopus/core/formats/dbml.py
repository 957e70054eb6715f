"""
octopus/core/formats/dbml.py
----------------------------
dbdiagram.io (DBML) decoder and encoder.

Supported subset::

    Project "hello" {
      Note: 'author: lechuck; version: 0.1.0'
    }

    Table user {
      id long [pk, increment]
      name "string(100)" [unique, not null, note: 'login name']
      group_id long [ref: > group.id]
      Note: 'application users'
    }

    Ref: order.user_id > user.id

    TableGroup common {
      user
    }

Columns are nullable unless marked ``not null``. ``indexes { }`` and
``Enum { }`` blocks are skipped. Lines that cannot be parsed are skipped
with a warning: the decoder is permissive like the spreadsheet decoder.
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
from octopus.core.type_normalizer import fix_boolean_default, is_numeric_type, parse_type
from octopus.logger import get_logger
from octopus.models.schema import Column, ColumnType, FormatName, Reference, Schema, Table

log = get_logger(__name__)

_INDENT = "  "

_PROJECT_RE = re.compile(r'^Project\s+"?([^"{]*?)"?\s*\{$', re.IGNORECASE)
_TABLE_RE = re.compile(
    r'^Table\s+"?([\w.]+)"?(?:\s+as\s+\w+)?\s*(?:\[[^\]]*\])?\s*\{$', re.IGNORECASE
)
_GROUP_RE = re.compile(r'^TableGroup\s+"?([\w.]+)"?\s*\{$', re.IGNORECASE)
_BLOCK_RE = re.compile(r"^(?:Enum|indexes|Ref|Note)\b.*\{$", re.IGNORECASE)
_COLUMN_RE = re.compile(
    r'^"?(\w+)"?\s+("[^"]+"|[\w]+(?:\([^)]*\))?(?:\[\])?)\s*(?:\[(.*)\])?\s*$'
)
_NOTE_RE = re.compile(r"^note\s*:\s*(.+)$", re.IGNORECASE)
_REF_RE = re.compile(
    r'^Ref(?:\s+\w+)?\s*:\s*"?([\w.]+)"?\.(\w+)\s*([<>-])\s*"?([\w.]+)"?\.(\w+)', re.IGNORECASE
)
_REF_TARGET_RE = re.compile(r'^([<>-])\s*"?([\w.]+)"?\.(\w+)$')
_META_KEYS = ("author", "version")


class _Block(Enum):
    TOP = "top"
    PROJECT = "project"
    TABLE = "table"
    GROUP = "group"
    SKIP = "skip"


def _unquote(value: str) -> str:
    value = value.strip()
    if value.startswith("'''") and value.endswith("'''") and len(value) >= 6:
        return value[3:-3].strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"`":
        return value[1:-1].replace("\\'", "'")
    return value


def _quote(value: str) -> str:
    return "'" + value.replace("'", "\\'") + "'"


def split_settings(text: str) -> list[str]:
    """Split a ``[a, b: 'x, y']`` settings list on commas outside quotes."""
    parts: list[str] = []
    current: list[str] = []
    quote = ""
    for ch in text:
        if quote:
            current.append(ch)
            if ch == quote and (len(current) < 2 or current[-2] != "\\"):
                quote = ""
            continue
        if ch in "'\"`":
            quote = ch
            current.append(ch)
        elif ch == ",":
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return [p for p in parts if p]


class _Parser:
    """Line-oriented DBML reader building a :class:`Schema`."""

    def __init__(self) -> None:
        self.schema = Schema()
        self.tables: list[Table] = []
        self.groups: dict[str, str] = {}
        # (table, column, ref) applied once every table is known
        self.pending_refs: list[tuple[str, str, Reference]] = []
        self.block = _Block.TOP
        self.skip_depth = 0
        self.table: Table | None = None
        self.group = ""

    def parse(self, text: str) -> Schema:
        for line_num, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith("//"):
                continue
            self._line(line, line_num)

        if self.block is _Block.TABLE and self.table is not None:
            self.tables.append(self.table)

        for table in self.tables:
            table.group = self.groups.get(table.name, table.group)
        by_name = {t.name: t for t in self.tables}
        for table_name, column_name, ref in self.pending_refs:
            table = by_name.get(table_name)
            column = next((c for c in table.columns if c.name == column_name), None) if table else None
            if column is None:
                log.warning("Reference source %s.%s not found — skipped.", table_name, column_name)
                continue
            column.ref = ref

        self.schema.tables = self.tables
        return self.schema

    def _line(self, line: str, line_num: int) -> None:
        if self.block is _Block.SKIP:
            self.skip_depth += line.count("{") - line.count("}")
            if self.skip_depth <= 0:
                self.block = _Block.TABLE if self.table is not None else _Block.TOP
            return

        if self.block is _Block.TOP:
            self._top_level(line, line_num)
        elif self.block is _Block.PROJECT:
            self._project_line(line)
        elif self.block is _Block.GROUP:
            if line == "}":
                self.block = _Block.TOP
            else:
                self.groups[_unquote(line)] = self.group
        elif self.block is _Block.TABLE and self.table is not None:
            self._table_line(self.table, line, line_num)

    def _top_level(self, line: str, line_num: int) -> None:
        table_match = _TABLE_RE.match(line)
        if table_match:
            self.table = Table(name=table_match.group(1))
            self.block = _Block.TABLE
            return
        group_match = _GROUP_RE.match(line)
        if group_match:
            self.group = group_match.group(1)
            self.block = _Block.GROUP
            return
        project_match = _PROJECT_RE.match(line)
        if project_match:
            self.schema.name = project_match.group(1).strip()
            self.block = _Block.PROJECT
            return
        ref_match = _REF_RE.match(line)
        if ref_match:
            self._add_ref(*ref_match.groups())
        elif line.endswith("{"):
            self.block = _Block.SKIP
            self.skip_depth = 1
        else:
            log.warning("Line %d: unrecognised DBML syntax → %r", line_num, line)

    def _project_line(self, line: str) -> None:
        if line == "}":
            self.block = _Block.TOP
            return
        note_match = _NOTE_RE.match(line)
        if note_match:
            for item in _unquote(note_match.group(1)).split(";"):
                key, sep, value = item.partition(":")
                if sep and key.strip().lower() in _META_KEYS:
                    setattr(self.schema, key.strip().lower(), value.strip())

    def _table_line(self, table: Table, line: str, line_num: int) -> None:
        if line == "}":
            self.tables.append(table)
            self.table = None
            self.block = _Block.TOP
            return
        note_match = _NOTE_RE.match(line)
        if note_match:
            table.description = _unquote(note_match.group(1))
            return
        if _BLOCK_RE.match(line):
            self.block = _Block.SKIP
            self.skip_depth = 1
            return
        m = _COLUMN_RE.match(line)
        if not m:
            log.warning("Line %d: unrecognised column syntax → %r", line_num, line)
            return
        table.add_column(self._column(m.group(1), _unquote(m.group(2)), m.group(3) or ""))

    def _column(self, name: str, raw_type: str, settings: str) -> Column:
        col_type, size, scale = parse_type(raw_type)
        column = Column(name=name, type=col_type, size=size, scale=scale, nullable=True)
        for setting in split_settings(settings):
            key, sep, value = setting.partition(":")
            key = key.strip().lower()
            if not sep:
                if key in ("pk", "primary key"):
                    column.primary_key = True
                    column.nullable = False
                elif key == "increment":
                    column.auto_incremental = True
                elif key == "unique":
                    column.unique_key = True
                elif key == "not null":
                    column.nullable = False
                elif key == "null":
                    column.nullable = True
                continue
            if key == "default":
                column.default_value = fix_boolean_default(col_type, _unquote(value))
            elif key == "note":
                column.description = _unquote(value)
            elif key == "ref" and self.table is not None:
                target = _REF_TARGET_RE.match(value.strip())
                if target:
                    self._add_ref(self.table.name, name, *target.groups())
        return column

    def _add_ref(self, table: str, column: str, op: str, ref_table: str, ref_column: str) -> None:
        if op == "<":
            self.pending_refs.append((ref_table, ref_column, Reference(table, column)))
        else:
            self.pending_refs.append((table, column, Reference(ref_table, ref_column)))


def loads_dbml(text: str) -> Schema:
    return _Parser().parse(text)


class DbmlDecoder(Decoder):
    format_name = FormatName.DBDIAGRAM_IO

    def decode(self, source: Path) -> Schema:
        try:
            text = Path(source).read_text(encoding="utf-8")
        except OSError as exc:
            raise DecodeError(f"Cannot read DBML file '{source}': {exc}") from exc
        schema = loads_dbml(text)
        log.info("Parsed DBML file '%s': %d table(s).", Path(source).name, len(schema.tables))
        return schema


class DbmlEncoder(Encoder):
    format_name = FormatName.DBDIAGRAM_IO

    def encode(self, schema: Schema, options: EncodeOptions) -> list[Artifact]:
        tables = options.filter_tables(schema)
        lines: list[str] = []

        if schema.name or schema.author or schema.version:
            meta = "; ".join(
                f"{key}: {getattr(schema, key)}" for key in _META_KEYS if getattr(schema, key)
            )
            lines.append(f'Project "{schema.name}" {{')
            if meta:
                lines.append(f"{_INDENT}Note: {_quote(meta)}")
            lines += ["}", ""]

        for table in tables:
            lines.append(f"Table {table.name} {{")
            lines += [_INDENT + self._column(c) for c in table.columns]
            if table.description:
                lines.append(f"{_INDENT}Note: {_quote(table.description.strip())}")
            lines += ["}", ""]

        groups: dict[str, list[str]] = {}
        for table in tables:
            if table.group:
                groups.setdefault(table.group, []).append(table.name)
        for group, names in groups.items():
            lines.append(f"TableGroup {group} {{")
            lines += [_INDENT + n for n in names]
            lines += ["}", ""]

        return [text_artifact(f"{schema.name or 'schema'}.dbml", lines)]

    def _column(self, column: Column) -> str:
        if column.column_type is None:
            unknown_type(log, self.format_name, column, column.type)
        col_type = column.format_type()
        if " " in col_type:
            col_type = f'"{col_type}"'

        settings: list[str] = []
        if column.primary_key:
            settings.append("pk")
        if column.auto_incremental:
            settings.append("increment")
        if column.unique_key:
            settings.append("unique")
        if not column.nullable and not column.primary_key:
            settings.append("not null")
        if column.default_value:
            settings.append("default: " + self._default(column))
        if column.ref is not None:
            settings.append(f"ref: > {column.ref}")
        if column.description:
            settings.append("note: " + _quote(column.description.strip()))

        line = f"{column.name} {col_type}"
        if settings:
            line += f" [{', '.join(settings)}]"
        return line

    def _default(self, column: Column) -> str:
        value = column.default_value
        if column.column_type is ColumnType.BOOLEAN:
            return value
        if is_numeric_type(column.type) and re.fullmatch(r"-?\d+(\.\d+)?", value):
            return value
        return _quote(value)

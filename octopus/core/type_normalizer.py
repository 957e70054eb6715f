"""
octopus/core/type_normalizer.py
-------------------------------
Parses free-form column type tokens into canonical types.

    parse_type("decimal(20,5)")  →  ("decimal", 20, 5)
    parse_type("VARCHAR(100)")   →  ("string", 100, 0)
    parse_type("int")            →  ("int", 0, 0)

The normalizer never fails: a malformed size suffix is treated as absent
and an unknown type keyword passes through (lower-cased) as its own type
name. Each encoder decides how to render such a type.

The alias table encodes the vocabulary as data (sets per canonical type)
rather than as a branching tree, like the category sets it grew from.
"""
from __future__ import annotations

import re

from octopus.logger import get_logger
from octopus.models.schema import ColumnType

log = get_logger(__name__)

# ---------------------------------------------------------------------------
# Alias sets
# ---------------------------------------------------------------------------
_ALIASES: dict[ColumnType, frozenset[str]] = {
    ColumnType.STRING: frozenset(
        {"string", "varchar", "char", "nvarchar", "nchar", "varchar2",
         "nvarchar2", "character varying", "character", "enum", "set"}
    ),
    ColumnType.LONG: frozenset({"long", "bigint", "int8", "bigserial"}),
    ColumnType.INT: frozenset(
        {"int", "integer", "smallint", "tinyint", "mediumint", "int4", "int2",
         "serial"}
    ),
    ColumnType.FLOAT: frozenset({"float", "real", "float4"}),
    ColumnType.DOUBLE: frozenset({"double", "double precision", "number", "float8"}),
    ColumnType.DECIMAL: frozenset({"decimal", "numeric", "fixed", "money"}),
    ColumnType.BOOLEAN: frozenset({"boolean", "bool"}),
    ColumnType.TEXT: frozenset(
        {"text", "tinytext", "mediumtext", "longtext", "clob", "nclob", "ntext"}
    ),
    ColumnType.DATE: frozenset({"date"}),
    ColumnType.TIME: frozenset({"time"}),
    ColumnType.DATETIME: frozenset({"datetime", "timestamp", "datetime2", "timestamptz"}),
    ColumnType.BLOB: frozenset(
        {"blob", "binary", "varbinary", "bytea", "tinyblob", "mediumblob",
         "longblob", "image"}
    ),
}

_CANONICAL_BY_ALIAS: dict[str, ColumnType] = {
    alias: col_type for col_type, aliases in _ALIASES.items() for alias in aliases
}

_NUMERIC_TYPES = frozenset(
    {ColumnType.LONG, ColumnType.INT, ColumnType.FLOAT, ColumnType.DOUBLE, ColumnType.DECIMAL}
)
_TEMPORAL_TYPES = frozenset({ColumnType.DATE, ColumnType.TIME, ColumnType.DATETIME})
_STRING_TYPES = frozenset({ColumnType.STRING, ColumnType.TEXT})

_WHITESPACE_RE = re.compile(r"\s+")


def _parse_int(token: str) -> int:
    token = token.strip()
    return int(token) if token.isdigit() else 0


def parse_type(raw: str) -> tuple[str, int, int]:
    """
    Split a raw type token into ``(canonical_type, size, scale)``.

    Args:
        raw: Type text such as ``"varchar(100)"`` or ``"DECIMAL(20, 5)"``.

    Returns:
        The canonical type name (a :class:`ColumnType` value, or the
        lower-cased keyword when unrecognised), size and scale. Size and
        scale are 0 when absent or malformed.
    """
    text = (raw or "").strip()
    base, sep, suffix = text.partition("(")
    base = _WHITESPACE_RE.sub(" ", base.strip().lower())

    size = scale = 0
    if sep:
        inner, closed, _ = suffix.partition(")")
        if closed:
            parts = inner.split(",")
            if len(parts) <= 2:
                size = _parse_int(parts[0])
                if len(parts) == 2:
                    scale = _parse_int(parts[1])
                if size == 0:
                    scale = 0

    col_type = _CANONICAL_BY_ALIAS.get(base)
    if base == "bit":
        col_type = ColumnType.BOOLEAN if size <= 1 else ColumnType.BLOB
        size = 0
    if col_type is None:
        if base:
            log.debug("Unrecognised column type %r kept as-is.", raw)
        return base, size, scale

    if col_type is ColumnType.BOOLEAN:
        return col_type.value, 0, 0
    return col_type.value, size, scale


def canonical_type(raw: str) -> ColumnType | None:
    """Return the :class:`ColumnType` for *raw*, or None if unrecognised."""
    return ColumnType.of(parse_type(raw)[0])


def is_boolean_type(type_name: str) -> bool:
    return canonical_type(type_name) is ColumnType.BOOLEAN


def is_numeric_type(type_name: str) -> bool:
    return canonical_type(type_name) in _NUMERIC_TYPES


def is_temporal_type(type_name: str) -> bool:
    return canonical_type(type_name) in _TEMPORAL_TYPES


def is_string_type(type_name: str) -> bool:
    return canonical_type(type_name) in _STRING_TYPES


def fix_boolean_default(type_name: str, default_value: str) -> str:
    """
    Canonicalise a default literal for boolean-like columns.

    ``"true"`` and ``"1"`` become ``"true"``, anything else ``"false"``.
    Non-boolean columns keep their default unchanged.
    """
    if not is_boolean_type(type_name):
        return default_value
    return "true" if default_value.strip().lower() in ("true", "1") else "false"

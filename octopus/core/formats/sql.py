"""
octopus/core/formats/sql.py
---------------------------
``CREATE TABLE`` DDL encoders for the supported SQL dialects.

Every dialect is a :class:`Dialect` record: identifier quoting, a type
table keyed by :class:`ColumnType`, auto-increment syntax, boolean literals
and comment support. Adding a dialect is one more record plus one registry
line. Unknown column types fall back to the dialect's generic text type.

Example (MySQL)::

    CREATE TABLE `user` (
      `id` BIGINT NOT NULL AUTO_INCREMENT,
      `name` VARCHAR(100) NOT NULL UNIQUE,
      PRIMARY KEY (`id`)
    ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci;
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

from octopus.core.codec import Artifact, EncodeOptions, Encoder, text_artifact, unknown_type
from octopus.logger import get_logger
from octopus.models.schema import Column, ColumnType, FormatName, Schema, Table

log = get_logger(__name__)

_INDENT = "  "
_DEFAULT_STRING_SIZE = 255
_RAW_DEFAULTS = frozenset(
    {"NULL", "CURRENT_TIMESTAMP", "CURRENT_DATE", "CURRENT_TIME", "NOW()", "SYSDATE", "GETDATE()"}
)


class SqlType(NamedTuple):
    """DDL type token; *sized* types take ``(size)`` / ``(size,scale)``."""
    name: str
    sized: bool = False


_STRING_SIZED = SqlType("VARCHAR", sized=True)
_DECIMAL_SIZED = SqlType("DECIMAL", sized=True)


@dataclass(frozen=True)
class Dialect:
    format_name: FormatName
    quote: tuple[str, str]
    types: dict[ColumnType, SqlType]
    fallback: str
    auto_increment: str = ""
    # auto-increment keyword goes after NOT NULL (MySQL, H2) or right after the type
    auto_increment_after_null: bool = False
    serial_types: dict[ColumnType, str] = field(default_factory=dict)
    true_literal: str = "TRUE"
    false_literal: str = "FALSE"
    inline_comments: bool = False
    comment_on: bool = False
    table_options: str = ""
    # SQLite only accepts AUTOINCREMENT on an inline INTEGER PRIMARY KEY
    inline_autoinc_pk: bool = False


MYSQL = Dialect(
    format_name=FormatName.SQL_MYSQL,
    quote=("`", "`"),
    types={
        ColumnType.STRING: _STRING_SIZED,
        ColumnType.LONG: SqlType("BIGINT"),
        ColumnType.INT: SqlType("INT"),
        ColumnType.FLOAT: SqlType("FLOAT"),
        ColumnType.DOUBLE: SqlType("DOUBLE"),
        ColumnType.DECIMAL: _DECIMAL_SIZED,
        ColumnType.BOOLEAN: SqlType("TINYINT(1)"),
        ColumnType.TEXT: SqlType("TEXT"),
        ColumnType.DATE: SqlType("DATE"),
        ColumnType.TIME: SqlType("TIME"),
        ColumnType.DATETIME: SqlType("DATETIME"),
        ColumnType.BLOB: SqlType("BLOB"),
    },
    fallback="TEXT",
    auto_increment="AUTO_INCREMENT",
    auto_increment_after_null=True,
    true_literal="1",
    false_literal="0",
    inline_comments=True,
    table_options="ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci",
)

POSTGRESQL = Dialect(
    format_name=FormatName.SQL_POSTGRESQL,
    quote=('"', '"'),
    types={
        ColumnType.STRING: _STRING_SIZED,
        ColumnType.LONG: SqlType("BIGINT"),
        ColumnType.INT: SqlType("INTEGER"),
        ColumnType.FLOAT: SqlType("REAL"),
        ColumnType.DOUBLE: SqlType("DOUBLE PRECISION"),
        ColumnType.DECIMAL: SqlType("NUMERIC", sized=True),
        ColumnType.BOOLEAN: SqlType("BOOLEAN"),
        ColumnType.TEXT: SqlType("TEXT"),
        ColumnType.DATE: SqlType("DATE"),
        ColumnType.TIME: SqlType("TIME"),
        ColumnType.DATETIME: SqlType("TIMESTAMP"),
        ColumnType.BLOB: SqlType("BYTEA"),
    },
    fallback="TEXT",
    serial_types={ColumnType.LONG: "BIGSERIAL", ColumnType.INT: "SERIAL"},
    comment_on=True,
)

SQLITE3 = Dialect(
    format_name=FormatName.SQL_SQLITE3,
    quote=('"', '"'),
    types={
        ColumnType.STRING: SqlType("TEXT"),
        ColumnType.LONG: SqlType("INTEGER"),
        ColumnType.INT: SqlType("INTEGER"),
        ColumnType.FLOAT: SqlType("REAL"),
        ColumnType.DOUBLE: SqlType("REAL"),
        ColumnType.DECIMAL: SqlType("NUMERIC"),
        ColumnType.BOOLEAN: SqlType("INTEGER"),
        ColumnType.TEXT: SqlType("TEXT"),
        ColumnType.DATE: SqlType("DATE"),
        ColumnType.TIME: SqlType("TIME"),
        ColumnType.DATETIME: SqlType("DATETIME"),
        ColumnType.BLOB: SqlType("BLOB"),
    },
    fallback="TEXT",
    true_literal="1",
    false_literal="0",
    inline_autoinc_pk=True,
)

H2 = Dialect(
    format_name=FormatName.SQL_H2,
    quote=('"', '"'),
    types={
        ColumnType.STRING: _STRING_SIZED,
        ColumnType.LONG: SqlType("BIGINT"),
        ColumnType.INT: SqlType("INT"),
        ColumnType.FLOAT: SqlType("REAL"),
        ColumnType.DOUBLE: SqlType("DOUBLE"),
        ColumnType.DECIMAL: _DECIMAL_SIZED,
        ColumnType.BOOLEAN: SqlType("BOOLEAN"),
        ColumnType.TEXT: SqlType("CLOB"),
        ColumnType.DATE: SqlType("DATE"),
        ColumnType.TIME: SqlType("TIME"),
        ColumnType.DATETIME: SqlType("TIMESTAMP"),
        ColumnType.BLOB: SqlType("BLOB"),
    },
    fallback="CLOB",
    auto_increment="AUTO_INCREMENT",
    auto_increment_after_null=True,
    comment_on=True,
)

ORACLE = Dialect(
    format_name=FormatName.SQL_ORACLE,
    quote=('"', '"'),
    types={
        ColumnType.STRING: SqlType("VARCHAR2", sized=True),
        ColumnType.LONG: SqlType("NUMBER(19)"),
        ColumnType.INT: SqlType("NUMBER(10)"),
        ColumnType.FLOAT: SqlType("BINARY_FLOAT"),
        ColumnType.DOUBLE: SqlType("BINARY_DOUBLE"),
        ColumnType.DECIMAL: SqlType("NUMBER", sized=True),
        ColumnType.BOOLEAN: SqlType("NUMBER(1)"),
        ColumnType.TEXT: SqlType("CLOB"),
        ColumnType.DATE: SqlType("DATE"),
        ColumnType.TIME: SqlType("TIMESTAMP"),
        ColumnType.DATETIME: SqlType("TIMESTAMP"),
        ColumnType.BLOB: SqlType("BLOB"),
    },
    fallback="CLOB",
    auto_increment="GENERATED BY DEFAULT AS IDENTITY",
    true_literal="1",
    false_literal="0",
    comment_on=True,
)

SQLSERVER = Dialect(
    format_name=FormatName.SQL_SQLSERVER,
    quote=("[", "]"),
    types={
        ColumnType.STRING: SqlType("NVARCHAR", sized=True),
        ColumnType.LONG: SqlType("BIGINT"),
        ColumnType.INT: SqlType("INT"),
        ColumnType.FLOAT: SqlType("REAL"),
        ColumnType.DOUBLE: SqlType("FLOAT"),
        ColumnType.DECIMAL: _DECIMAL_SIZED,
        ColumnType.BOOLEAN: SqlType("BIT"),
        ColumnType.TEXT: SqlType("NVARCHAR(MAX)"),
        ColumnType.DATE: SqlType("DATE"),
        ColumnType.TIME: SqlType("TIME"),
        ColumnType.DATETIME: SqlType("DATETIME2"),
        ColumnType.BLOB: SqlType("VARBINARY(MAX)"),
    },
    fallback="NVARCHAR(MAX)",
    auto_increment="IDENTITY(1,1)",
    true_literal="1",
    false_literal="0",
)

DIALECTS: dict[FormatName, Dialect] = {
    d.format_name: d for d in (MYSQL, POSTGRESQL, SQLITE3, H2, ORACLE, SQLSERVER)
}


def _quote_string(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


class DdlRenderer:
    """Renders ``CREATE TABLE`` statements for one dialect."""

    def __init__(self, dialect: Dialect) -> None:
        self.dialect = dialect

    def quote(self, identifier: str) -> str:
        left, right = self.dialect.quote
        return f"{left}{identifier}{right}"

    def column_type(self, column: Column) -> str:
        col_type = column.column_type
        if col_type is None:
            return unknown_type(log, self.dialect.format_name, column, self.dialect.fallback)
        if column.auto_incremental and col_type in self.dialect.serial_types:
            return self.dialect.serial_types[col_type]

        sql_type = self.dialect.types[col_type]
        if not sql_type.sized:
            return sql_type.name
        size = column.size
        if size == 0 and col_type is ColumnType.STRING:
            size = _DEFAULT_STRING_SIZE
        if size == 0:
            return sql_type.name
        if column.scale:
            return f"{sql_type.name}({size},{column.scale})"
        return f"{sql_type.name}({size})"

    def default_literal(self, column: Column) -> str:
        value = column.default_value.strip()
        col_type = column.column_type
        if col_type is ColumnType.BOOLEAN:
            truthy = value.lower() in ("true", "1")
            return self.dialect.true_literal if truthy else self.dialect.false_literal
        if value.upper() in _RAW_DEFAULTS or value.endswith("()"):
            return value
        if value.startswith("'") and value.endswith("'") and len(value) >= 2:
            return value
        if col_type in (ColumnType.LONG, ColumnType.INT, ColumnType.FLOAT,
                        ColumnType.DOUBLE, ColumnType.DECIMAL):
            return value
        return _quote_string(value)

    def _inline_pk(self, table: Table) -> Column | None:
        """The column rendered as ``INTEGER PRIMARY KEY AUTOINCREMENT`` (SQLite)."""
        pks = table.primary_keys()
        if self.dialect.inline_autoinc_pk and len(pks) == 1 and pks[0].auto_incremental:
            return pks[0]
        return None

    def column_definition(self, column: Column, inline_pk: bool = False) -> str:
        d = self.dialect
        parts = [self.quote(column.name), self.column_type(column)]
        if inline_pk:
            parts.append("PRIMARY KEY AUTOINCREMENT")
        uses_serial = column.column_type in d.serial_types
        if column.auto_incremental and d.auto_increment and not d.auto_increment_after_null:
            parts.append(d.auto_increment)
        if column.default_value:
            parts.append("DEFAULT " + self.default_literal(column))
        if not column.nullable and not inline_pk:
            parts.append("NOT NULL")
        if column.auto_incremental and d.auto_increment and d.auto_increment_after_null:
            parts.append(d.auto_increment)
        if column.unique_key and not column.primary_key:
            parts.append("UNIQUE")
        if d.inline_comments and column.description:
            parts.append("COMMENT " + _quote_string(column.description.strip()))
        if column.auto_incremental and not d.auto_increment and not uses_serial and not inline_pk:
            log.debug(
                "[%s] auto-increment not expressible for column %s.",
                d.format_name.value, column.name,
            )
        return " ".join(parts)

    def create_table(self, table: Table) -> list[str]:
        """Render the ``CREATE TABLE`` statement plus any ``COMMENT ON`` lines."""
        inline_pk = self._inline_pk(table)
        lines = [
            _INDENT + self.column_definition(c, inline_pk=c is inline_pk)
            for c in table.columns
        ]

        pk_cols = table.primary_keys()
        if pk_cols and inline_pk is None:
            names = ", ".join(self.quote(c.name) for c in pk_cols)
            lines.append(f"{_INDENT}PRIMARY KEY ({names})")
        for column in table.columns:
            if column.ref is not None:
                lines.append(
                    f"{_INDENT}FOREIGN KEY ({self.quote(column.name)}) "
                    f"REFERENCES {self.quote(column.ref.table)} ({self.quote(column.ref.column)})"
                )

        tail = ")"
        if self.dialect.table_options:
            tail += " " + self.dialect.table_options
        if self.dialect.inline_comments and table.description:
            tail += " COMMENT=" + _quote_string(table.description.strip())
        statement = [f"CREATE TABLE {self.quote(table.name)} ("]
        statement.append(",\n".join(lines))
        statement.append(tail + ";")

        if self.dialect.comment_on:
            statement += self._comment_on(table)
        return statement

    def _comment_on(self, table: Table) -> list[str]:
        lines: list[str] = []
        if table.description:
            lines.append(
                f"COMMENT ON TABLE {self.quote(table.name)} IS "
                f"{_quote_string(table.description.strip())};"
            )
        for column in table.columns:
            if column.description:
                lines.append(
                    f"COMMENT ON COLUMN {self.quote(table.name)}.{self.quote(column.name)} IS "
                    f"{_quote_string(column.description.strip())};"
                )
        return lines


class SqlEncoder(Encoder):
    """DDL encoder bound to one :class:`Dialect`."""

    def __init__(self, dialect: Dialect) -> None:
        self.dialect = dialect
        self.format_name = dialect.format_name

    def encode(self, schema: Schema, options: EncodeOptions) -> list[Artifact]:
        renderer = DdlRenderer(self.dialect)
        lines: list[str] = []
        if schema.name:
            lines += [f"-- {schema.name} {schema.version}".rstrip(), ""]
        for table in options.filter_tables(schema):
            lines += renderer.create_table(table)
            lines.append("")
        return [text_artifact(f"{schema.name or 'schema'}.sql", lines)]

"""
octopus/models/schema.py
------------------------
Canonical, format-agnostic schema model.

Every decoder produces a :class:`Schema` and every encoder consumes one.
``to_dict`` / ``from_dict`` define the canonical JSON document (the
``octopus`` format, ``*.ojson``). Falsy attributes are omitted on output
and defaulted on input, so hand-written documents can stay short.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ColumnType(str, Enum):
    """Closed vocabulary of canonical column types."""
    STRING = "string"
    LONG = "long"
    INT = "int"
    FLOAT = "float"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    TEXT = "text"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    BLOB = "blob"
    DECIMAL = "decimal"

    @classmethod
    def of(cls, value: str) -> "ColumnType | None":
        """Return the member for *value*, or None for a non-canonical type."""
        try:
            return cls(value)
        except ValueError:
            return None


class FormatName(str, Enum):
    """Every format identifier understood by the registry."""
    OCTOPUS = "octopus"
    XLSX = "xlsx"
    GRAPHQL = "graphql"
    PROTOBUF = "protobuf"
    JPA_KOTLIN = "jpa-kotlin"
    JPA_KOTLIN_DATA = "jpa-kotlin-data"
    SQL_MYSQL = "sql-mysql"
    SQL_POSTGRESQL = "sql-postgresql"
    SQL_SQLITE3 = "sql-sqlite3"
    SQL_H2 = "sql-h2"
    SQL_ORACLE = "sql-oracle"
    SQL_SQLSERVER = "sql-sqlserver"
    PLANTUML = "plantuml"
    DBDIAGRAM_IO = "dbdiagram.io"
    QUICKDBD = "quickdbd"

    @classmethod
    def of(cls, value: str) -> "FormatName | None":
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class Reference:
    """Foreign key target, identified by table and column name."""
    table: str
    column: str

    def __str__(self) -> str:
        return f"{self.table}.{self.column}"

    @staticmethod
    def parse(value: str) -> "Reference | None":
        """Parse ``"table.column"``; anything else yields None."""
        tokens = value.strip().split(".")
        if len(tokens) != 2 or not tokens[0] or not tokens[1]:
            return None
        return Reference(table=tokens[0], column=tokens[1])


@dataclass
class Column:
    """
    One column of a table.

    Attributes:
        name:             Column name as declared in the source.
        type:             Canonical type name (see :class:`ColumnType`);
                          unrecognised source types are kept verbatim.
        size:             String length or numeric precision, 0 = unspecified.
        scale:            Decimal fractional digits, 0 = unspecified.
        default_value:    Raw default literal, format specific.
        ref:              Foreign key target, if any.
    """
    name: str
    type: str
    size: int = 0
    scale: int = 0
    nullable: bool = False
    primary_key: bool = False
    unique_key: bool = False
    auto_incremental: bool = False
    default_value: str = ""
    description: str = ""
    ref: Reference | None = None

    @property
    def column_type(self) -> ColumnType | None:
        return ColumnType.of(self.type)

    def format_type(self) -> str:
        """Render ``type``, ``type(size)`` or ``type(size,scale)``."""
        if self.size == 0:
            return self.type
        if self.scale == 0:
            return f"{self.type}({self.size})"
        return f"{self.type}({self.size},{self.scale})"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "type": self.format_type()}
        if self.description:
            data["desc"] = self.description
        if self.nullable:
            data["nullable"] = True
        if self.primary_key:
            data["pk"] = True
        if self.unique_key:
            data["unique"] = True
        if self.auto_incremental:
            data["autoinc"] = True
        if self.default_value:
            data["default"] = self.default_value
        if self.ref is not None:
            data["ref"] = {"table": self.ref.table, "column": self.ref.column}
        return data

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Column":
        # Imported here to keep the model importable without the core package.
        from octopus.core.type_normalizer import parse_type

        col_type, size, scale = parse_type(str(data.get("type", "")))
        size = int(data.get("size", size) or 0)
        scale = int(data.get("scale", scale) or 0)

        ref = None
        raw_ref = data.get("ref")
        if isinstance(raw_ref, dict) and raw_ref.get("table") and raw_ref.get("column"):
            ref = Reference(table=raw_ref["table"], column=raw_ref["column"])
        elif isinstance(raw_ref, str):
            ref = Reference.parse(raw_ref)

        return Column(
            name=data.get("name", ""),
            type=col_type,
            size=size,
            scale=scale,
            nullable=bool(data.get("nullable", False)),
            primary_key=bool(data.get("pk", False)),
            unique_key=bool(data.get("unique", False)),
            auto_incremental=bool(data.get("autoinc", False)),
            default_value=str(data.get("default", "") or ""),
            description=data.get("desc", "") or "",
            ref=ref,
        )


@dataclass
class Table:
    """
    A table and its ordered columns.

    Attributes:
        name:        Source identifier, e.g. the snake_case DB table name.
        class_name:  Optional override for generated type names.
        group:       Logical namespace used to partition output.
    """
    name: str
    class_name: str = ""
    description: str = ""
    group: str = ""
    columns: list[Column] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Table name must not be empty.")

    def add_column(self, column: Column) -> None:
        self.columns.append(column)

    def primary_keys(self) -> list[Column]:
        return [c for c in self.columns if c.primary_key]

    def unique_keys(self) -> list[Column]:
        return [c for c in self.columns if c.unique_key]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.class_name:
            data["className"] = self.class_name
        if self.description:
            data["desc"] = self.description
        if self.group:
            data["group"] = self.group
        data["columns"] = [c.to_dict() for c in self.columns]
        return data

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Table":
        return Table(
            name=data.get("name", ""),
            class_name=data.get("className", "") or "",
            description=data.get("desc", "") or "",
            group=data.get("group", "") or "",
            columns=[Column.from_dict(c) for c in data.get("columns", [])],
        )


@dataclass
class Schema:
    """Root aggregate. Table order is significant for deterministic output."""
    author: str = ""
    name: str = ""
    version: str = ""
    tables: list[Table] = field(default_factory=list)

    def groups(self) -> list[str]:
        """Distinct ``Table.group`` values in first-seen order."""
        seen: dict[str, None] = {}
        for table in self.tables:
            seen.setdefault(table.group, None)
        return list(seen)

    def table(self, name: str) -> Table | None:
        for t in self.tables:
            if t.name == name:
                return t
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "author": self.author,
            "name": self.name,
            "version": self.version,
            "tables": [t.to_dict() for t in self.tables],
        }

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "Schema":
        return Schema(
            author=data.get("author", "") or "",
            name=data.get("name", "") or "",
            version=data.get("version", "") or "",
            tables=[Table.from_dict(t) for t in data.get("tables", [])],
        )

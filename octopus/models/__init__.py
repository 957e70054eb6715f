"""octopus/models/__init__.py"""
from octopus.models.schema import (
    Column,
    ColumnType,
    FormatName,
    Reference,
    Schema,
    Table,
)

__all__ = [
    "Column",
    "ColumnType",
    "FormatName",
    "Reference",
    "Schema",
    "Table",
]

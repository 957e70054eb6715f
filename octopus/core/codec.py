"""
octopus/core/codec.py
---------------------
Decoder / encoder contracts shared by every format.

A decoder turns one external artifact into a :class:`Schema`; an encoder
turns a :class:`Schema` into one or more :class:`Artifact` objects (relative
file name + bytes). Encoders never touch the file system: the command layer
(:mod:`octopus.core.commands`) creates directories and writes the artifacts.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from octopus.core.prefix_mapper import PrefixMapper
from octopus.models.schema import Column, FormatName, Schema, Table

TableFilter = Callable[[Table], bool]


class CodecError(Exception):
    """Base class for every conversion failure."""


class DecodeError(CodecError):
    """Raised when a source artifact cannot be read or parsed."""


class EncodeError(CodecError):
    """Raised when a schema cannot be rendered into the target format."""


class UnsupportedFormatError(CodecError):
    """Raised when a format name is unknown or unsupported in a direction."""


@dataclass(frozen=True)
class Artifact:
    """One output file produced by an encoder."""
    name: str
    content: bytes

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")


@dataclass
class EncodeOptions:
    """
    Target configuration handed to every encoder.

    Attributes:
        package:              Target namespace (Kotlin/proto package).
        go_package:           ``option go_package`` for protobuf output.
        prefixes_to_remove:   Table-name prefixes stripped before naming.
        prefix_mapper:        Group → class-name prefix mapping.
        table_filter:         Predicate excluding tables from the output.
        use_not_null_column:  Spreadsheet polarity: write a ``not null``
                              column instead of ``nullable``.
    """
    package: str = ""
    go_package: str = ""
    prefixes_to_remove: list[str] = field(default_factory=list)
    prefix_mapper: PrefixMapper = field(default_factory=PrefixMapper)
    table_filter: TableFilter | None = None
    use_not_null_column: bool = False

    def filter_tables(self, schema: Schema) -> list[Table]:
        """Tables of *schema* accepted by the table filter, in order."""
        if self.table_filter is None:
            return list(schema.tables)
        return [t for t in schema.tables if self.table_filter(t)]


def group_filter(groups: list[str]) -> TableFilter | None:
    """
    Build a table filter accepting only the given groups.

    Returns None (no filtering) when *groups* is empty.
    """
    wanted = {g.strip() for g in groups if g.strip()}
    if not wanted:
        return None
    return lambda table: table.group in wanted


class Decoder(ABC):
    """Turns one external artifact into a :class:`Schema`."""

    format_name: FormatName

    @abstractmethod
    def decode(self, source: Path) -> Schema:
        """
        Read *source* and build a schema.

        Raises:
            DecodeError: If the source cannot be read or its container
                         format is corrupt.
        """


class Encoder(ABC):
    """Turns a :class:`Schema` into target-format artifacts."""

    format_name: FormatName
    # True when the output is a whole directory tree (one file per table, ...)
    multi_file: bool = False

    @abstractmethod
    def encode(self, schema: Schema, options: EncodeOptions) -> list[Artifact]:
        """Render *schema*; must not write to disk."""


def text_artifact(name: str, lines: list[str]) -> Artifact:
    """Join *lines* with newlines into a UTF-8 artifact."""
    return Artifact(name=name, content="\n".join(lines).encode("utf-8"))


def unknown_type(log: logging.Logger, fmt: FormatName, column: Column, fallback: str) -> str:
    """Log the fallback chosen for a non-canonical column type and return it."""
    log.warning(
        "[%s] unknown column type: '%s', column: %s → %s",
        fmt.value, column.type, column.name, fallback,
    )
    return fallback

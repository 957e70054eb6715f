"""
octopus/core/registry.py
------------------------
Resolves format identifiers to decoder / encoder implementations.

The default registry is built and validated at import time: every
registered key must be a :class:`FormatName` and every :class:`FormatName`
must be readable or writable. Adding a format is one ``register_*`` call.
"""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Callable

from octopus.core.codec import Decoder, Encoder, UnsupportedFormatError
from octopus.core.formats.dbml import DbmlDecoder, DbmlEncoder
from octopus.core.formats.graphql import GraphqlEncoder
from octopus.core.formats.jpa_kotlin import JpaKotlinDataEncoder, JpaKotlinEncoder
from octopus.core.formats.octopus_json import OctopusDecoder, OctopusEncoder
from octopus.core.formats.plantuml import PlantumlEncoder
from octopus.core.formats.protobuf import ProtobufEncoder
from octopus.core.formats.quickdbd import QuickdbdDecoder, QuickdbdEncoder
from octopus.core.formats.sql import DIALECTS, Dialect, SqlEncoder
from octopus.core.formats.xlsx import XlsxDecoder, XlsxEncoder
from octopus.logger import get_logger
from octopus.models.schema import FormatName

log = get_logger(__name__)

DecoderFactory = Callable[[], Decoder]
EncoderFactory = Callable[[], Encoder]

_EXTENSIONS: dict[str, FormatName] = {
    ".ojson": FormatName.OCTOPUS,
    ".json": FormatName.OCTOPUS,
    ".xlsx": FormatName.XLSX,
    ".dbml": FormatName.DBDIAGRAM_IO,
    ".quickdbd": FormatName.QUICKDBD,
    ".graphqls": FormatName.GRAPHQL,
    ".graphql": FormatName.GRAPHQL,
    ".proto": FormatName.PROTOBUF,
    ".puml": FormatName.PLANTUML,
    ".plantuml": FormatName.PLANTUML,
    ".sql": FormatName.SQL_MYSQL,
}


class Direction(str, Enum):
    DECODE = "decode"
    ENCODE = "encode"


class FormatRegistry:
    """Format name → codec factory lookup."""

    def __init__(self) -> None:
        self._decoders: dict[FormatName, DecoderFactory] = {}
        self._encoders: dict[FormatName, EncoderFactory] = {}

    def register_decoder(self, fmt: FormatName, factory: DecoderFactory) -> None:
        self._decoders[fmt] = factory

    def register_encoder(self, fmt: FormatName, factory: EncoderFactory) -> None:
        self._encoders[fmt] = factory

    def decoder_formats(self) -> list[str]:
        return sorted(f.value for f in self._decoders)

    def encoder_formats(self) -> list[str]:
        return sorted(f.value for f in self._encoders)

    def supports(self, name: str, direction: Direction) -> bool:
        fmt = FormatName.of(name or "")
        table = self._decoders if direction is Direction.DECODE else self._encoders
        return fmt is not None and fmt in table

    def resolve_decoder(self, name: str) -> Decoder:
        """
        Return a decoder for *name*.

        Raises:
            UnsupportedFormatError: Unknown format, or one that cannot be read.
        """
        fmt = FormatName.of(name or "")
        if fmt is None or fmt not in self._decoders:
            raise UnsupportedFormatError(
                f"Unsupported source format '{name}'. "
                f"Supported: {', '.join(self.decoder_formats())}"
            )
        return self._decoders[fmt]()

    def resolve_encoder(self, name: str) -> Encoder:
        """
        Return an encoder for *name*.

        Raises:
            UnsupportedFormatError: Unknown format, or one that cannot be written.
        """
        fmt = FormatName.of(name or "")
        if fmt is None or fmt not in self._encoders:
            raise UnsupportedFormatError(
                f"Unsupported target format '{name}'. "
                f"Supported: {', '.join(self.encoder_formats())}"
            )
        return self._encoders[fmt]()

    def validate(self) -> None:
        """
        Check the registry covers the format vocabulary exactly.

        Raises:
            ValueError: A key is not a FormatName, or a FormatName has
                        neither a decoder nor an encoder.
        """
        for key in list(self._decoders) + list(self._encoders):
            if not isinstance(key, FormatName):
                raise ValueError(f"Registry key {key!r} is not a FormatName.")
        missing = [
            f.value for f in FormatName
            if f not in self._decoders and f not in self._encoders
        ]
        if missing:
            raise ValueError(f"Formats without a codec: {', '.join(missing)}")


def infer_format(filename: str | Path) -> str:
    """
    Guess a format name from a file extension.

    Returns:
        The format identifier, or ``""`` when the extension is unknown.
    """
    fmt = _EXTENSIONS.get(Path(filename).suffix.lower())
    return fmt.value if fmt is not None else ""


def _sql_factory(dialect: Dialect) -> EncoderFactory:
    return lambda: SqlEncoder(dialect)


def build_default_registry() -> FormatRegistry:
    registry = FormatRegistry()

    registry.register_decoder(FormatName.OCTOPUS, OctopusDecoder)
    registry.register_decoder(FormatName.XLSX, XlsxDecoder)
    registry.register_decoder(FormatName.DBDIAGRAM_IO, DbmlDecoder)
    registry.register_decoder(FormatName.QUICKDBD, QuickdbdDecoder)

    registry.register_encoder(FormatName.OCTOPUS, OctopusEncoder)
    registry.register_encoder(FormatName.XLSX, XlsxEncoder)
    registry.register_encoder(FormatName.DBDIAGRAM_IO, DbmlEncoder)
    registry.register_encoder(FormatName.QUICKDBD, QuickdbdEncoder)
    registry.register_encoder(FormatName.GRAPHQL, GraphqlEncoder)
    registry.register_encoder(FormatName.PROTOBUF, ProtobufEncoder)
    registry.register_encoder(FormatName.JPA_KOTLIN, JpaKotlinEncoder)
    registry.register_encoder(FormatName.JPA_KOTLIN_DATA, JpaKotlinDataEncoder)
    registry.register_encoder(FormatName.PLANTUML, PlantumlEncoder)
    for fmt, dialect in DIALECTS.items():
        registry.register_encoder(fmt, _sql_factory(dialect))

    registry.validate()
    log.debug(
        "Registry ready: %d decoder(s), %d encoder(s).",
        len(registry.decoder_formats()), len(registry.encoder_formats()),
    )
    return registry


REGISTRY: FormatRegistry = build_default_registry()

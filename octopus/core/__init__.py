"""octopus/core/__init__.py"""
from octopus.core.codec import (
    Artifact,
    CodecError,
    DecodeError,
    Decoder,
    EncodeError,
    EncodeOptions,
    Encoder,
    UnsupportedFormatError,
    group_filter,
)
from octopus.core.commands import convert, create_schema_file, generate
from octopus.core.prefix_mapper import PrefixMapper
from octopus.core.registry import REGISTRY, Direction, FormatRegistry, infer_format
from octopus.core.type_normalizer import parse_type

__all__ = [
    "Artifact",
    "CodecError",
    "DecodeError",
    "Decoder",
    "EncodeError",
    "EncodeOptions",
    "Encoder",
    "UnsupportedFormatError",
    "group_filter",
    "convert",
    "create_schema_file",
    "generate",
    "PrefixMapper",
    "REGISTRY",
    "Direction",
    "FormatRegistry",
    "infer_format",
    "parse_type",
]

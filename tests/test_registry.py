"""
tests/test_registry.py
----------------------
Unit tests for octopus/core/registry.py.
"""
from __future__ import annotations

import pytest

from octopus.core.codec import UnsupportedFormatError
from octopus.core.formats.octopus_json import OctopusDecoder
from octopus.core.formats.sql import SqlEncoder
from octopus.core.registry import (
    REGISTRY,
    Direction,
    FormatRegistry,
    build_default_registry,
    infer_format,
)
from octopus.models.schema import FormatName


class TestDefaultRegistry:
    def test_every_format_is_resolvable(self) -> None:
        for fmt in FormatName:
            assert REGISTRY.supports(fmt.value, Direction.DECODE) or REGISTRY.supports(
                fmt.value, Direction.ENCODE
            )

    def test_decoders(self) -> None:
        assert REGISTRY.decoder_formats() == ["dbdiagram.io", "octopus", "quickdbd", "xlsx"]

    def test_resolve_sql_dialect(self) -> None:
        encoder = REGISTRY.resolve_encoder("sql-postgresql")
        assert isinstance(encoder, SqlEncoder)
        assert encoder.format_name is FormatName.SQL_POSTGRESQL

    def test_resolve_is_case_insensitive(self) -> None:
        assert isinstance(REGISTRY.resolve_decoder("OCTOPUS"), OctopusDecoder)

    def test_unknown_format(self) -> None:
        with pytest.raises(UnsupportedFormatError, match="Supported: "):
            REGISTRY.resolve_encoder("liquibase")

    def test_encode_only_format_cannot_be_decoded(self) -> None:
        assert not REGISTRY.supports("graphql", Direction.DECODE)
        with pytest.raises(UnsupportedFormatError):
            REGISTRY.resolve_decoder("graphql")

    def test_build_validates(self) -> None:
        build_default_registry().validate()


class TestValidate:
    def test_empty_registry_is_incomplete(self) -> None:
        with pytest.raises(ValueError, match="Formats without a codec"):
            FormatRegistry().validate()

    def test_non_format_key_rejected(self) -> None:
        registry = build_default_registry()
        registry.register_encoder("yaml", SqlEncoder)
        with pytest.raises(ValueError, match="not a FormatName"):
            registry.validate()


class TestInferFormat:
    @pytest.mark.parametrize("filename,expected", [
        ("db.ojson", "octopus"),
        ("Database.XLSX", "xlsx"),
        ("model.dbml", "dbdiagram.io"),
        ("schema.graphqls", "graphql"),
        ("out/hello.proto", "protobuf"),
        ("diagram.puml", "plantuml"),
        ("create.sql", "sql-mysql"),
        ("notes.txt", ""),
        ("Makefile", ""),
    ])
    def test_extensions(self, filename: str, expected: str) -> None:
        assert infer_format(filename) == expected

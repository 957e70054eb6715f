"""
tests/test_protobuf.py
----------------------
Unit tests for octopus/core/formats/protobuf.py.
"""
from __future__ import annotations

from octopus.core.codec import EncodeOptions
from octopus.core.formats.protobuf import ProtobufEncoder, proto_message, proto_type, render_proto
from octopus.core.prefix_mapper import PrefixMapper
from octopus.models.schema import Column, Schema, Table

EXPECTED_CUSER = """\
syntax = "proto3";

package com.lechuck.hello;

option go_package = "proto/hello";

import "google/protobuf/timestamp.proto";

message CUser {
  int64 id = 1;
  string name = 2;
  double dec = 3;
  google.protobuf.Timestamp createdAt = 4;
  google.protobuf.Timestamp updatedAt = 5;
}
"""


class TestProtoType:
    def test_mapping(self) -> None:
        assert proto_type(Column(name="a", type="int")) == "int32"
        assert proto_type(Column(name="a", type="blob")) == "bytes"
        assert proto_type(Column(name="a", type="boolean")) == "bool"

    def test_unknown_falls_back_to_string(self) -> None:
        assert proto_type(Column(name="a", type="geometry")) == "string"


class TestRenderProto:
    def test_cuser_message(self, user_table: Table) -> None:
        options = EncodeOptions(prefix_mapper=PrefixMapper("common:C"))
        message = proto_message(user_table, options)
        assert message.name == "CUser"
        assert render_proto([message], "com.lechuck.hello", "proto/hello") == EXPECTED_CUSER

    def test_no_timestamp_import_when_unused(self) -> None:
        table = Table(name="tag", columns=[Column(name="label", type="string")])
        text = render_proto([proto_message(table, EncodeOptions())])
        assert "import" not in text
        assert "package" not in text
        assert "  string label = 1;" in text


class TestProtobufEncoder:
    def test_encoder_uses_options(self, user_table: Table) -> None:
        options = EncodeOptions(
            package="com.lechuck.hello",
            go_package="proto/hello",
            prefix_mapper=PrefixMapper("common:C"),
        )
        [artifact] = ProtobufEncoder().encode(Schema(name="hello", tables=[user_table]), options)
        assert artifact.name == "hello.proto"
        assert artifact.text == EXPECTED_CUSER

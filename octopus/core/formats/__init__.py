"""octopus/core/formats/__init__.py"""
from octopus.core.formats.dbml import DbmlDecoder, DbmlEncoder
from octopus.core.formats.graphql import GraphqlEncoder
from octopus.core.formats.jpa_kotlin import JpaKotlinDataEncoder, JpaKotlinEncoder
from octopus.core.formats.octopus_json import OctopusDecoder, OctopusEncoder
from octopus.core.formats.plantuml import PlantumlEncoder
from octopus.core.formats.protobuf import ProtobufEncoder
from octopus.core.formats.quickdbd import QuickdbdDecoder, QuickdbdEncoder
from octopus.core.formats.sql import DIALECTS, SqlEncoder
from octopus.core.formats.xlsx import XlsxDecoder, XlsxEncoder

__all__ = [
    "DIALECTS",
    "DbmlDecoder",
    "DbmlEncoder",
    "GraphqlEncoder",
    "JpaKotlinDataEncoder",
    "JpaKotlinEncoder",
    "OctopusDecoder",
    "OctopusEncoder",
    "PlantumlEncoder",
    "ProtobufEncoder",
    "QuickdbdDecoder",
    "QuickdbdEncoder",
    "SqlEncoder",
    "XlsxDecoder",
    "XlsxEncoder",
]

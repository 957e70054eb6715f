"""
tests/test_plantuml.py
----------------------
Unit tests for octopus/core/formats/plantuml.py.
"""
from __future__ import annotations

from octopus.core.codec import EncodeOptions
from octopus.core.formats.plantuml import PlantumlEncoder
from octopus.models.schema import Column, Schema, Table


class TestPlantumlEncoder:
    def test_diagram(self, sample_schema: Schema) -> None:
        [artifact] = PlantumlEncoder().encode(sample_schema, EncodeOptions())
        lines = artifact.text.splitlines()
        assert artifact.name == "hello.puml"
        assert lines[0] == "@startuml"
        assert lines[1] == "title hello 0.1.0"
        assert 'package "common" {' in lines
        assert '  entity "user_group" as user_group {' in lines
        assert "    * id : int <<PK>> <<generated>>" in lines
        assert "    group_id : int <<FK>>" in lines
        assert "user }o--|| user_group : group_id" in lines
        assert "audit_log }o--|| user : author_id" in lines
        assert lines[-1] == "@enduml"

    def test_primary_keys_above_separator(self) -> None:
        table = Table(name="tag", columns=[
            Column(name="label", type="string", nullable=True),
            Column(name="id", type="long", primary_key=True),
        ])
        [artifact] = PlantumlEncoder().encode(Schema(tables=[table]), EncodeOptions())
        lines = artifact.text.splitlines()
        start = lines.index('entity "tag" as tag {')
        assert lines[start + 1:start + 4] == ["  * id : long <<PK>>", "  --", "  label : string"]

"""
octopus/core/formats/plantuml.py
--------------------------------
PlantUML entity-relationship diagram encoder.

Primary keys are listed above the separator, ``*`` marks non-null columns,
references become ``}o--||`` relations. Tables are wrapped in a
``package`` per group. Types are written in canonical form; unknown types
are written verbatim.
"""
from __future__ import annotations

from octopus.core.codec import Artifact, EncodeOptions, Encoder, text_artifact, unknown_type
from octopus.logger import get_logger
from octopus.models.schema import Column, FormatName, Schema, Table

log = get_logger(__name__)

_INDENT = "  "


def _alias(name: str) -> str:
    return name.replace(".", "_").replace("-", "_")


class PlantumlEncoder(Encoder):
    format_name = FormatName.PLANTUML

    def encode(self, schema: Schema, options: EncodeOptions) -> list[Artifact]:
        tables = options.filter_tables(schema)
        lines = ["@startuml", "hide circle", "skinparam linetype ortho", ""]
        if schema.name:
            lines[1:1] = [f"title {schema.name} {schema.version}".rstrip()]

        groups: dict[str, list[Table]] = {}
        for table in tables:
            groups.setdefault(table.group, []).append(table)

        for group, group_tables in groups.items():
            indent = ""
            if group:
                lines.append(f'package "{group}" {{')
                indent = _INDENT
            for table in group_tables:
                lines += [indent + line for line in self._entity(table)]
            if group:
                lines.append("}")
            lines.append("")

        for table in tables:
            for column in table.columns:
                if column.ref is None:
                    continue
                lines.append(
                    f"{_alias(table.name)} }}o--|| {_alias(column.ref.table)} : {column.name}"
                )

        lines += ["@enduml", ""]
        return [text_artifact(f"{schema.name or 'schema'}.puml", lines)]

    def _entity(self, table: Table) -> list[str]:
        title = f'entity "{table.name}" as {_alias(table.name)}'
        lines = [title + " {"]
        pks = [c for c in table.columns if c.primary_key]
        others = [c for c in table.columns if not c.primary_key]
        lines += [_INDENT + self._attribute(c) for c in pks]
        lines.append(_INDENT + "--")
        lines += [_INDENT + self._attribute(c) for c in others]
        lines.append("}")
        if table.description:
            lines.append(f"note top of {_alias(table.name)} : {table.description.strip()}")
        return lines

    def _attribute(self, column: Column) -> str:
        if column.column_type is None:
            unknown_type(log, self.format_name, column, column.type)
        marker = "* " if not column.nullable else ""
        stereotypes = []
        if column.primary_key:
            stereotypes.append("<<PK>>")
        if column.unique_key:
            stereotypes.append("<<UK>>")
        if column.ref is not None:
            stereotypes.append("<<FK>>")
        if column.auto_incremental:
            stereotypes.append("<<generated>>")
        line = f"{marker}{column.name} : {column.format_type()}"
        if stereotypes:
            line += " " + " ".join(stereotypes)
        return line

"""
octopus/core/formats/jpa_kotlin.py
----------------------------------
Kotlin JPA entity generator (``jpa-kotlin`` and ``jpa-kotlin-data``).

Writes one ``<ClassName>.kt`` per table under the package directory, plus
the ``AbstractJpaPersistable`` base class every entity extends.

Unknown column types fall back to ``Any``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

from octopus.core.codec import Artifact, EncodeOptions, Encoder, text_artifact, unknown_type
from octopus.core.naming import class_name, field_name
from octopus.logger import get_logger
from octopus.models.schema import Column, ColumnType, FormatName, Schema, Table

log = get_logger(__name__)

_INDENT = "    "
_FALLBACK_TYPE = "Any"


class KotlinType(NamedTuple):
    """Kotlin type token, default literal for non-null fields, and its import."""
    name: str
    default: str
    import_: str | None = None


_TYPE_MAP: dict[ColumnType, KotlinType] = {
    ColumnType.STRING: KotlinType("String", '""'),
    ColumnType.TEXT: KotlinType("String", '""'),
    ColumnType.BOOLEAN: KotlinType("Boolean", "false"),
    ColumnType.LONG: KotlinType("Long", "0L"),
    ColumnType.INT: KotlinType("Int", "0"),
    ColumnType.FLOAT: KotlinType("Float", "0.0F"),
    ColumnType.DOUBLE: KotlinType("Double", "0.0"),
    ColumnType.DECIMAL: KotlinType("BigDecimal", "BigDecimal.ZERO", "java.math.BigDecimal"),
    ColumnType.DATETIME: KotlinType("LocalDateTime", "LocalDateTime.now()", "java.time.LocalDateTime"),
    ColumnType.DATE: KotlinType("LocalDate", "LocalDate.now()", "java.time.LocalDate"),
    ColumnType.TIME: KotlinType("LocalTime", "LocalTime.now()", "java.time.LocalTime"),
    ColumnType.BLOB: KotlinType("ByteArray", "ByteArray(0)"),
}

_ABSTRACT_PERSISTABLE = """\
import org.springframework.data.util.ProxyUtils
import java.io.Serializable
import javax.persistence.GeneratedValue
import javax.persistence.Id
import javax.persistence.MappedSuperclass

@MappedSuperclass
abstract class AbstractJpaPersistable<T : Serializable> {
    companion object {
        private val serialVersionUID = -5554308939380869754L
    }

    @Id
    @GeneratedValue
    private var id: T? = null

    fun getId(): T? {
        return id
    }

    override fun equals(other: Any?): Boolean {
        other ?: return false

        if (this === other) return true

        if (javaClass != ProxyUtils.getUserClass(other)) return false

        other as AbstractJpaPersistable<*>

        return if (null == this.getId()) false else this.getId() == other.getId()
    }

    override fun hashCode(): Int {
        return 31
    }

    override fun toString() = "Entity of type ${this.javaClass.name} with id: $id"
}
"""


@dataclass
class KotlinField:
    column: Column
    name: str
    type: str
    default_value: str = ""
    imports: list[str] = field(default_factory=list)


@dataclass
class KotlinClass:
    table: Table
    name: str
    fields: list[KotlinField] = field(default_factory=list)

    @property
    def pk_fields(self) -> list[KotlinField]:
        return [f for f in self.fields if f.column.primary_key]


def kotlin_field(column: Column) -> KotlinField:
    col_type = column.column_type
    if col_type is None:
        kt = KotlinType(unknown_type(log, FormatName.JPA_KOTLIN, column, _FALLBACK_TYPE), "")
    else:
        kt = _TYPE_MAP[col_type]

    field_type = kt.name
    default_value = ""
    if column.nullable:
        field_type += "?"
        default_value = "null"
    elif kt.default:
        default_value = kt.default

    return KotlinField(
        column=column,
        name=field_name(column),
        type=field_type,
        default_value=default_value,
        imports=[kt.import_] if kt.import_ else [],
    )


def kotlin_class(table: Table, options: EncodeOptions) -> KotlinClass:
    return KotlinClass(
        table=table,
        name=class_name(table, options.prefixes_to_remove, options.prefix_mapper),
        fields=[kotlin_field(c) for c in table.columns],
    )


def _package_dir(package: str) -> str:
    return "/".join(p for p in package.split(".") if p)


def _with_dir(directory: str, filename: str) -> str:
    return f"{directory}/{filename}" if directory else filename


class JpaKotlinEncoder(Encoder):
    format_name = FormatName.JPA_KOTLIN
    multi_file = True
    data_class = False

    def encode(self, schema: Schema, options: EncodeOptions) -> list[Artifact]:
        directory = _package_dir(options.package)
        artifacts = [self._abstract_persistable(directory, options.package)]
        for table in options.filter_tables(schema):
            cls = kotlin_class(table, options)
            artifacts.append(
                text_artifact(_with_dir(directory, f"{cls.name}.kt"), self.render_class(cls, options.package))
            )
        return artifacts

    def _abstract_persistable(self, directory: str, package: str) -> Artifact:
        header = f"package {package}\n\n" if package else ""
        content = header + _ABSTRACT_PERSISTABLE
        return Artifact(
            name=_with_dir(directory, "AbstractJpaPersistable.kt"),
            content=content.encode("utf-8"),
        )

    def render_class(self, cls: KotlinClass, package: str = "") -> list[str]:
        """Render one entity source file as a list of lines."""
        table = cls.table
        imports: dict[str, None] = {"javax.persistence.*": None}
        body: list[str] = []
        pk_fields = cls.pk_fields

        id_class = ""
        body += ["", "@Entity", f'@Table(name = "{table.name}")']
        if len(pk_fields) > 1:
            id_class = cls.name + "Id"
            body.append(f"@IdClass({id_class}::class)")
        keyword = "data class" if self.data_class else "class"
        body.append(f"{keyword} {cls.name}(")

        for i, f in enumerate(cls.fields):
            column = f.column
            if column.primary_key:
                body.append(_INDENT + "@Id")
                if not id_class:
                    id_class = f.type.rstrip("?")
            if column.auto_incremental:
                body.append(_INDENT + "@GeneratedValue(strategy = GenerationType.IDENTITY)")
            if column.column_type is ColumnType.TEXT:
                body.append(_INDENT + '@Type(type = "text")')
                imports.setdefault("org.hibernate.annotations.Type", None)

            attributes: list[str] = []
            if not column.nullable:
                attributes.append("nullable = false")
            if column.column_type is ColumnType.STRING and column.size > 0:
                attributes.append(f"length = {column.size}")
            if attributes:
                body.append(_INDENT + f"@Column({', '.join(attributes)})")

            if column.column_type is ColumnType.DATETIME and f.name == "createdAt":
                body.append(_INDENT + "@CreationTimestamp")
                imports.setdefault("org.hibernate.annotations.CreationTimestamp", None)
            if column.column_type is ColumnType.DATETIME and f.name == "updatedAt":
                body.append(_INDENT + "@UpdateTimestamp")
                imports.setdefault("org.hibernate.annotations.UpdateTimestamp", None)

            line = f"var {f.name}: {f.type}"
            if f.default_value:
                line += " = " + f.default_value
            if i < len(cls.fields) - 1:
                line += ","
            body += [_INDENT + line, ""]

            for imp in f.imports:
                imports.setdefault(imp, None)

        body += [f") : AbstractJpaPersistable<{id_class or 'Long'}>()", ""]

        lines: list[str] = []
        if package:
            lines += [f"package {package}", ""]
        lines += [f"import {imp}" for imp in sorted(imports)]
        return lines + body


class JpaKotlinDataEncoder(JpaKotlinEncoder):
    format_name = FormatName.JPA_KOTLIN_DATA
    data_class = True

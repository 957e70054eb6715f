"""
tests/test_jpa_kotlin.py
------------------------
Unit tests for octopus/core/formats/jpa_kotlin.py.
"""
from __future__ import annotations

from octopus.core.codec import EncodeOptions
from octopus.core.formats.jpa_kotlin import (
    JpaKotlinDataEncoder,
    JpaKotlinEncoder,
    kotlin_class,
    kotlin_field,
)
from octopus.core.prefix_mapper import PrefixMapper
from octopus.models.schema import Column, Schema, Table


class TestKotlinField:
    def test_non_null_gets_default(self) -> None:
        f = kotlin_field(Column(name="id", type="long"))
        assert (f.name, f.type, f.default_value) == ("id", "Long", "0L")

    def test_nullable_defaults_to_null(self) -> None:
        f = kotlin_field(Column(name="updated_at", type="datetime", nullable=True))
        assert (f.name, f.type, f.default_value) == ("updatedAt", "LocalDateTime?", "null")
        assert f.imports == ["java.time.LocalDateTime"]

    def test_unknown_type_falls_back_to_any(self) -> None:
        assert kotlin_field(Column(name="shape", type="geometry")).type == "Any"


class TestJpaKotlinEncoder:
    def _encode(self, encoder: JpaKotlinEncoder, table: Table) -> dict[str, str]:
        options = EncodeOptions(package="com.lechuck.foo", prefix_mapper=PrefixMapper("common:C"))
        artifacts = encoder.encode(Schema(tables=[table]), options)
        return {a.name: a.text for a in artifacts}

    def test_files_under_package_dir(self, user_table: Table) -> None:
        files = self._encode(JpaKotlinEncoder(), user_table)
        assert sorted(files) == [
            "com/lechuck/foo/AbstractJpaPersistable.kt",
            "com/lechuck/foo/CUser.kt",
        ]
        assert files["com/lechuck/foo/AbstractJpaPersistable.kt"].startswith("package com.lechuck.foo\n")

    def test_entity_source(self, user_table: Table) -> None:
        source = self._encode(JpaKotlinEncoder(), user_table)["com/lechuck/foo/CUser.kt"]
        assert source.startswith("package com.lechuck.foo\n\nimport java.math.BigDecimal\n")
        assert '@Table(name = "user")' in source
        assert "class CUser(" in source
        assert "data class" not in source
        assert "    @GeneratedValue(strategy = GenerationType.IDENTITY)" in source
        assert "    @Column(nullable = false, length = 100)" in source
        assert "    var name: String = \"\"," in source
        assert "    @CreationTimestamp" in source
        assert "    @UpdateTimestamp" in source
        assert "    var updatedAt: LocalDateTime? = null\n" in source
        assert source.endswith(") : AbstractJpaPersistable<Long>()\n")

    def test_data_class(self, user_table: Table) -> None:
        source = self._encode(JpaKotlinDataEncoder(), user_table)["com/lechuck/foo/CUser.kt"]
        assert "data class CUser(" in source

    def test_composite_key_uses_id_class(self) -> None:
        table = Table(name="membership", columns=[
            Column(name="user_id", type="long", primary_key=True),
            Column(name="group_id", type="long", primary_key=True),
        ])
        cls = kotlin_class(table, EncodeOptions())
        assert [f.name for f in cls.pk_fields] == ["userId", "groupId"]
        source = self._encode(JpaKotlinEncoder(), table)["com/lechuck/foo/Membership.kt"]
        assert "@IdClass(MembershipId::class)" in source
        assert ") : AbstractJpaPersistable<MembershipId>()" in source

    def test_is_multi_file(self) -> None:
        assert JpaKotlinEncoder.multi_file

"""
tests/test_naming.py
--------------------
Unit tests for octopus/core/naming.py.
"""
from __future__ import annotations

import pytest

from octopus.core.naming import (
    class_name,
    field_name,
    pluralize,
    strip_prefixes,
    to_camel,
    to_lower_camel,
    to_snake,
)
from octopus.core.prefix_mapper import PrefixMapper
from octopus.models.schema import Column, Table


class TestCaseConversion:
    @pytest.mark.parametrize("name,expected", [
        ("user", "User"),
        ("common_user", "CommonUser"),
        ("order-item", "OrderItem"),
        ("userGroup", "UserGroup"),
    ])
    def test_to_camel(self, name: str, expected: str) -> None:
        assert to_camel(name) == expected

    def test_to_lower_camel(self) -> None:
        assert to_lower_camel("created_at") == "createdAt"
        assert to_lower_camel("CUser") == "cUser"

    def test_all_caps_lowered(self) -> None:
        assert to_lower_camel("ID") == "id"

    def test_to_snake(self) -> None:
        assert to_snake("CreatedAt") == "created_at"
        assert to_snake("HTTPServer") == "http_server"


class TestPluralize:
    @pytest.mark.parametrize("name,expected", [
        ("user", "users"),
        ("category", "categories"),
        ("box", "boxes"),
        ("day", "days"),
        ("person", "people"),
        ("data", "data"),
        ("cUser", "cUsers"),
        ("order_item", "order_items"),
        ("wolf", "wolves"),
        ("knife", "knives"),
    ])
    def test_pluralize(self, name: str, expected: str) -> None:
        assert pluralize(name) == expected


class TestClassName:
    def test_prefix_removed_and_group_prefix_added(self) -> None:
        table = Table(name="common_user", group="common")
        assert class_name(table, ["common_"], PrefixMapper("common:C")) == "CUser"

    def test_explicit_class_name_wins(self) -> None:
        table = Table(name="common_user", class_name="Member", group="common")
        assert class_name(table, ["common_"], PrefixMapper("common:C")) == "Member"

    def test_without_mapper(self) -> None:
        assert class_name(Table(name="order_item")) == "OrderItem"

    def test_strip_prefixes(self) -> None:
        assert strip_prefixes("tb_user", ["tb_", "x_"]) == "user"
        assert strip_prefixes("user", [""]) == "user"

    def test_field_name(self) -> None:
        assert field_name(Column(name="updated_at", type="datetime")) == "updatedAt"

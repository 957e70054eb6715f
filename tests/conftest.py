"""
tests/conftest.py
-----------------
Shared schema fixtures.
"""
from __future__ import annotations

import pytest

from octopus.models.schema import Column, Reference, Schema, Table


@pytest.fixture
def user_table() -> Table:
    """The ``user`` table of group ``common`` used across the encoder tests."""
    return Table(
        name="user",
        group="common",
        columns=[
            Column(name="id", type="long", primary_key=True, auto_incremental=True),
            Column(name="name", type="string", size=100, unique_key=True),
            Column(name="dec", type="decimal", size=20, scale=5),
            Column(name="created_at", type="datetime"),
            Column(name="updated_at", type="datetime", nullable=True),
        ],
    )


@pytest.fixture
def sample_schema(user_table: Table) -> Schema:
    """Two groups, a reference, defaults, descriptions and a class name."""
    group = Table(
        name="user_group",
        class_name="Team",
        description="groups of users",
        group="common",
        columns=[
            Column(name="id", type="int", primary_key=True, auto_incremental=True),
            Column(name="title", type="string", size=50, description="display name"),
        ],
    )
    user_table.description = "application users"
    user_table.columns.append(
        Column(name="group_id", type="int", nullable=True, ref=Reference("user_group", "id"))
    )
    user_table.columns.append(
        Column(name="active", type="boolean", default_value="true")
    )
    audit = Table(
        name="audit_log",
        group="admin",
        columns=[
            Column(name="id", type="long", primary_key=True),
            Column(name="payload", type="text", nullable=True),
            Column(name="author_id", type="long", ref=Reference("user", "id")),
        ],
    )
    return Schema(author="lechuck", name="hello", version="0.1.0", tables=[group, user_table, audit])

"""
octopus/core/naming.py
----------------------
Naming rules shared by every code-generating encoder.

    to_camel("common_user")        →  "CommonUser"
    to_lower_camel("created_at")   →  "createdAt"
    pluralize("category")          →  "categories"
    class_name(table, ["common_"], PrefixMapper("common:C"))  →  "CUser"
"""
from __future__ import annotations

import re
from typing import Iterable

from octopus.core.prefix_mapper import PrefixMapper
from octopus.models.schema import Column, Table

_WORD_SPLIT_RE = re.compile(r"[\s_\-.]+")
_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

_IRREGULAR_PLURALS = {
    "person": "people",
    "man": "men",
    "woman": "women",
    "child": "children",
    "mouse": "mice",
    "goose": "geese",
    "foot": "feet",
    "tooth": "teeth",
}
_UNCOUNTABLE = frozenset(
    {"data", "information", "equipment", "news", "series", "species", "sheep",
     "fish", "metadata", "feedback", "staff"}
)
_ES_SUFFIX_RE = re.compile(r"(s|x|z|ch|sh)$")
_Y_SUFFIX_RE = re.compile(r"[^aeiou]y$")
_F_SUFFIX_RE = re.compile(r"(?:([^f])fe|([lr])f)$")


def _words(name: str) -> list[str]:
    return [w for w in _WORD_SPLIT_RE.split(name.strip()) if w]


def to_camel(name: str) -> str:
    """UpperCamelCase: each word's first letter upper-cased, the rest kept."""
    return "".join(w[:1].upper() + w[1:] for w in _words(name))


def to_lower_camel(name: str) -> str:
    """lowerCamelCase; an all-caps name such as ``ID`` becomes ``id``."""
    camel = to_camel(name)
    if not camel:
        return camel
    if camel.isupper():
        return camel.lower()
    return camel[:1].lower() + camel[1:]


def to_snake(name: str) -> str:
    """snake_case for names given in camel or mixed case."""
    parts: list[str] = []
    for word in _words(name):
        parts.extend(_CAMEL_BOUNDARY_RE.split(word))
    return "_".join(p.lower() for p in parts if p)


def _pluralize_word(word: str) -> str:
    lower = word.lower()
    if lower in _UNCOUNTABLE:
        return word
    if lower in _IRREGULAR_PLURALS:
        plural = _IRREGULAR_PLURALS[lower]
        return word[:1] + plural[1:]
    if _Y_SUFFIX_RE.search(lower):
        return word[:-1] + "ies"
    if _ES_SUFFIX_RE.search(lower):
        return word + "es"
    if _F_SUFFIX_RE.search(lower):
        return word[:-2] + "ves" if lower.endswith("fe") else word[:-1] + "ves"
    return word + "s"


def pluralize(name: str) -> str:
    """
    Pluralise the last word of an identifier, keeping its casing style.

    ``"cUser"`` → ``"cUsers"``, ``"order_item"`` → ``"order_items"``.
    """
    if not name:
        return name
    # last camel-case hump or last snake-case word
    split_at = max(name.rfind("_"), name.rfind("-"))
    humps = [m.start() for m in re.finditer(r"[A-Z]", name)]
    if humps and humps[-1] > split_at:
        split_at = humps[-1] - 1
    head, last = name[: split_at + 1], name[split_at + 1:]
    return head + _pluralize_word(last)


def strip_prefixes(name: str, prefixes: Iterable[str]) -> str:
    """Strip every configured prefix that the name starts with, in order."""
    for prefix in prefixes:
        if prefix and name.startswith(prefix):
            name = name[len(prefix):]
    return name


def class_name(
    table: Table,
    prefixes_to_remove: Iterable[str] = (),
    prefix_mapper: PrefixMapper | None = None,
) -> str:
    """
    Synthesize the generated type name for *table*.

    ``Table.class_name`` wins when set; otherwise the table name is stripped
    of the configured prefixes, camel-cased, and prefixed with the group
    prefix from *prefix_mapper*.
    """
    if table.class_name:
        return table.class_name

    name = to_camel(strip_prefixes(table.name, prefixes_to_remove))
    if prefix_mapper is not None:
        name = prefix_mapper.get_prefix(table.group) + name
    return name


def field_name(column: Column) -> str:
    return to_lower_camel(column.name)

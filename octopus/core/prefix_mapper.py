"""
octopus/core/prefix_mapper.py
-----------------------------
Maps a table group to the prefix used when a class name is synthesized.

Configured from one string: ``"common:C,admin:Adm"``.
"""
from __future__ import annotations

from octopus.logger import get_logger

log = get_logger(__name__)


class PrefixMapper:
    """
    Group → prefix lookup.

    Attributes:
        _prefixes: Dict of {group: prefix}. Unmapped groups have no prefix.
    """

    def __init__(self, config: str | None = None) -> None:
        self._prefixes: dict[str, str] = {}
        for entry in (config or "").split(","):
            entry = entry.strip()
            if not entry:
                continue
            group, sep, prefix = entry.partition(":")
            if not sep:
                log.warning("Ignoring prefix mapping without ':' → %r", entry)
                continue
            self._prefixes[group.strip()] = prefix.strip()

    def get_prefix(self, group: str) -> str:
        return self._prefixes.get(group, "")

    def __len__(self) -> int:
        return len(self._prefixes)

    def __repr__(self) -> str:
        mapping = ",".join(f"{g}:{p}" for g, p in self._prefixes.items())
        return f"PrefixMapper({mapping!r})"

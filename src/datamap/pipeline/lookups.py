"""Filter-control lookups and a caller-owned cache for them."""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from dataclasses import dataclass

from datamap.core.models import ParsedSystem


def extract_all_data_uses(systems: Sequence[ParsedSystem]) -> list[str]:
    """Every distinct data use across *systems*, sorted."""
    return sorted({use for system in systems for use in system.data_uses})


def extract_all_categories(systems: Sequence[ParsedSystem]) -> list[str]:
    """Every distinct simplified category across *systems*, sorted."""
    return sorted({cat for system in systems for cat in system.data_categories})


def fingerprint_systems(systems: Sequence[ParsedSystem]) -> str:
    """Deterministic SHA256 over the fields the lookups read.

    Order-sensitive: the same systems in a different order hash
    differently, which only costs a recompute.
    """
    h = hashlib.sha256()
    for system in systems:
        h.update(system.id.encode())
        h.update(b"\x1f")
        h.update("|".join(system.data_uses).encode())
        h.update(b"\x1f")
        h.update("|".join(system.data_categories).encode())
        h.update(b"\x1e")
    return h.hexdigest()


@dataclass(frozen=True)
class Lookups:
    """Option lists for populating filter controls."""

    all_data_uses: tuple[str, ...]
    all_categories: tuple[str, ...]

    def to_dict(self) -> dict:
        return {
            "all_data_uses": list(self.all_data_uses),
            "all_categories": list(self.all_categories),
        }


class LookupCache:
    """Memoizes Lookups keyed by a content fingerprint of the systems.

    Owned by whoever renders the filter controls; nothing in the pipeline
    holds one globally.
    """

    def __init__(self, maxsize: int = 8):
        self.maxsize = maxsize
        self._entries: dict[str, Lookups] = {}
        self.hits = 0
        self.misses = 0

    def get(self, systems: Sequence[ParsedSystem]) -> Lookups:
        key = fingerprint_systems(systems)
        cached = self._entries.get(key)
        if cached is not None:
            self.hits += 1
            return cached

        self.misses += 1
        lookups = Lookups(
            all_data_uses=tuple(extract_all_data_uses(systems)),
            all_categories=tuple(extract_all_categories(systems)),
        )
        if len(self._entries) >= self.maxsize:
            # Evict oldest insertion
            self._entries.pop(next(iter(self._entries)))
        self._entries[key] = lookups
        return lookups

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

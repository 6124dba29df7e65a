"""Grouper: partition systems into ordered display groups."""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Iterable

from datamap.core.logging import DataMapLogger
from datamap.core.models import (
    SYSTEM_TYPE_ORDER,
    LayoutMode,
    ParsedSystem,
    SystemGroup,
    SystemType,
)

logger = logging.getLogger(__name__)

UNCATEGORIZED = "uncategorized"

_SEGMENT_SEPARATOR = " › "

# Root collation order for common punctuation and symbols
_PUNCTUATION_ORDER = " _-,;:!?.'\"()[]{}@*/\\&#%`^+<=>|~$"


def format_data_use(data_use: str) -> str:
    """Render a dotted data use for display.

    ``advertising.third_party`` -> ``Advertising › Third Party``.
    """
    return _SEGMENT_SEPARATOR.join(
        " ".join(word[:1].upper() + word[1:] for word in part.split("_"))
        for part in data_use.split(".")
    )


def _primary_weight(char: str) -> tuple[int, int | str]:
    """Base-letter weight for one character, accents and case ignored."""
    if char in _PUNCTUATION_ORDER:
        return (0, _PUNCTUATION_ORDER.index(char))
    if char.isdigit():
        return (2, unicodedata.digit(char, ord(char)))
    if char.isalpha():
        return (3, char.casefold())
    return (1, ord(char))


def group_sort_key(group_key: str) -> tuple:
    """Collation key approximating root-locale ordering.

    Whole-string comparison on base letters first, then accents, then
    case with lowercase before uppercase. Punctuation sorts before digits,
    digits before letters, ``_`` before ``.``.
    """
    decomposed = unicodedata.normalize("NFD", group_key)
    base = [c for c in decomposed if not unicodedata.combining(c)]
    accents = tuple(ord(c) if unicodedata.combining(c) else 0 for c in decomposed)
    return (
        tuple(_primary_weight(c) for c in base),
        accents,
        group_key.swapcase(),
        group_key,
    )


def group_by_system_type(
    systems: Iterable[ParsedSystem],
    run_logger: DataMapLogger | None = None,
) -> list[SystemGroup]:
    """One group per known system type, in fixed order, empty groups omitted.

    Systems with an unknown type are left out.
    """
    buckets: dict[SystemType, list[ParsedSystem]] = {t: [] for t in SYSTEM_TYPE_ORDER}
    for system in systems:
        if system.system_type not in buckets:
            logger.debug(
                "Leaving %s out of type groups (type %r)", system.id, system.raw_system_type
            )
            if run_logger is not None:
                run_logger.record_dropped("group", system.id, "unknown system type")
            continue
        buckets[system.system_type].append(system)

    return [
        SystemGroup(group_key=t.value, group_label=t.value, systems=members)
        for t, members in buckets.items()
        if members
    ]


def group_by_data_use(systems: Iterable[ParsedSystem]) -> list[SystemGroup]:
    """One group per data use; a system joins every group it has a use for.

    Systems with no data uses go to the ``uncategorized`` group.
    """
    buckets: dict[str, list[ParsedSystem]] = {}
    for system in systems:
        keys = system.data_uses or (UNCATEGORIZED,)
        for key in keys:
            members = buckets.setdefault(key, [])
            if not any(s.id == system.id for s in members):
                members.append(system)

    return [
        SystemGroup(group_key=key, group_label=format_data_use(key), systems=buckets[key])
        for key in sorted(buckets, key=group_sort_key)
    ]


def group_systems(
    systems: Iterable[ParsedSystem],
    layout_mode: LayoutMode,
    run_logger: DataMapLogger | None = None,
) -> list[SystemGroup]:
    """Partition systems for display according to *layout_mode*."""
    systems = list(systems)
    if run_logger is not None:
        run_logger.stage_start("group", len(systems))

    if layout_mode is LayoutMode.SYSTEM_TYPE:
        groups = group_by_system_type(systems, run_logger)
    else:
        groups = group_by_data_use(systems)

    if run_logger is not None:
        run_logger.stage_finish("group", len(groups))
    return groups

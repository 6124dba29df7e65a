"""Normalizer: raw system records to canonical ParsedSystem values."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from datamap.core.logging import DataMapLogger
from datamap.core.models import (
    DataSourceType,
    ParsedSystem,
    PrivacyDeclaration,
    RawSystem,
    SystemType,
)

logger = logging.getLogger(__name__)

_DERIVED_MARKER = ".derived."


def simplify_data_category(full_category: str) -> str:
    """Reduce a dotted category path to its leaf segment.

    ``user.derived.identifiable.location`` -> ``location``. A path with
    no dots is returned unchanged.
    """
    return full_category.split(".")[-1]


def get_data_source_type(full_category: str) -> DataSourceType:
    """Classify a category path as derived or provided.

    Anything without a ``.derived.`` segment is provided, including
    malformed or single-segment paths.
    """
    if _DERIVED_MARKER in full_category:
        return DataSourceType.DERIVED
    return DataSourceType.PROVIDED


def normalize_system(raw: RawSystem) -> ParsedSystem:
    """Build a ParsedSystem from one raw record."""
    full_categories: set[str] = set()
    data_uses: set[str] = set()
    declarations: list[PrivacyDeclaration] = []

    for decl in raw.privacy_declarations:
        full_categories.update(decl.data_categories)
        data_uses.add(decl.data_use)
        declarations.append(
            PrivacyDeclaration(
                name=decl.name,
                data_use=decl.data_use,
                data_categories=tuple(simplify_data_category(c) for c in decl.data_categories),
                data_subjects=tuple(decl.data_subjects),
            )
        )

    simplified: set[str] = set()
    derived: set[str] = set()
    provided: set[str] = set()
    for category in full_categories:
        leaf = simplify_data_category(category)
        simplified.add(leaf)
        if get_data_source_type(category) is DataSourceType.DERIVED:
            derived.add(leaf)
        else:
            provided.add(leaf)
    # A leaf reached by any derived path counts as derived only
    provided -= derived

    system_type = SystemType.parse(raw.system_type)
    if system_type is SystemType.UNKNOWN:
        logger.debug("System %s has unknown system type %r", raw.id, raw.system_type)

    return ParsedSystem(
        id=raw.id,
        name=raw.name,
        description=raw.description,
        system_type=system_type,
        raw_system_type=raw.system_type,
        data_categories=tuple(sorted(simplified)),
        full_data_categories=tuple(sorted(full_categories)),
        derived_categories=tuple(sorted(derived)),
        provided_categories=tuple(sorted(provided)),
        data_uses=tuple(sorted(data_uses)),
        privacy_declarations=tuple(declarations),
        dependencies=tuple(raw.dependency_ids),
    )


def normalize_all(
    raws: Iterable[RawSystem],
    run_logger: DataMapLogger | None = None,
) -> list[ParsedSystem]:
    """Normalize records in input order, keeping the first record per id.

    Later records that reuse an id are dropped without error.
    """
    raws = list(raws)
    if run_logger is not None:
        run_logger.stage_start("normalize", len(raws))

    systems: dict[str, ParsedSystem] = {}
    for raw in raws:
        if raw.id in systems:
            logger.debug("Dropping duplicate system id %s (%s)", raw.id, raw.name)
            if run_logger is not None:
                run_logger.record_dropped("normalize", raw.id, "duplicate id")
            continue
        systems[raw.id] = normalize_system(raw)

    if run_logger is not None:
        run_logger.stage_finish("normalize", len(systems))
    return list(systems.values())

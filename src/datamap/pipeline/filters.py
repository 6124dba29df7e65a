"""Filter engine: AND-combined predicates over parsed systems."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from datamap.core.logging import DataMapLogger
from datamap.core.models import DataSourceType, FilterState, ParsedSystem
from datamap.pipeline.normalize import simplify_data_category

logger = logging.getLogger(__name__)


def matches_data_use(system: ParsedSystem, data_use: str | None) -> bool:
    if not data_use:
        return True
    return data_use in system.data_uses


def matches_category(system: ParsedSystem, category: str) -> bool:
    """True if any full path contains the term or has it as its leaf.

    Substring matching is loose: ``"er"`` matches
    ``user.derived.identifiable.location``.
    """
    return any(
        category in full or simplify_data_category(full) == category
        for full in system.full_data_categories
    )


def matches_categories(system: ParsedSystem, categories: Iterable[str]) -> bool:
    """Every requested category must match on its own."""
    return all(matches_category(system, category) for category in categories)


def matches_source_type(system: ParsedSystem, source_type: DataSourceType | None) -> bool:
    if source_type is None:
        return True
    if source_type is DataSourceType.DERIVED:
        return bool(system.derived_categories)
    return bool(system.provided_categories)


def system_matches(system: ParsedSystem, filters: FilterState) -> bool:
    """Apply every active predicate in *filters* to one system."""
    return (
        matches_data_use(system, filters.data_use)
        and matches_categories(system, filters.data_categories)
        and matches_source_type(system, filters.data_source_type)
    )


def filter_systems(
    systems: Iterable[ParsedSystem],
    filters: FilterState,
    run_logger: DataMapLogger | None = None,
) -> list[ParsedSystem]:
    """Return the systems matching all active filters, in input order.

    ``filters.layout_mode`` is ignored here; it only drives grouping.
    """
    systems = list(systems)
    if run_logger is not None:
        run_logger.stage_start("filter", len(systems))

    kept = []
    for system in systems:
        if system_matches(system, filters):
            kept.append(system)
        elif run_logger is not None:
            run_logger.record_dropped("filter", system.id, "filtered out")

    logger.debug("Filter kept %d of %d systems", len(kept), len(systems))
    if run_logger is not None:
        run_logger.stage_finish("filter", len(kept))
    return kept

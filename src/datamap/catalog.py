"""DataMap class - the main API surface for datamap."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from datamap.core.models import FilterState, LayoutMode, ParsedSystem, RawSystem, SystemGroup
from datamap.pipeline.filters import filter_systems
from datamap.pipeline.graph import DependencyView, build_dependency_view
from datamap.pipeline.grouping import group_systems
from datamap.pipeline.lookups import LookupCache, Lookups
from datamap.pipeline.normalize import normalize_all

if TYPE_CHECKING:
    from datamap.core.logging import DataMapLogger
    from datamap.sources.base import Source

logger = logging.getLogger(__name__)


@dataclass
class DataMapView:
    """Result of applying a FilterState: the filtered systems and their groups."""

    filters: FilterState
    filtered: list[ParsedSystem]
    groups: list[SystemGroup]

    @property
    def is_empty(self) -> bool:
        return not self.filtered

    def to_dict(self) -> dict[str, Any]:
        return {
            "filters": self.filters.to_dict(),
            "system_count": len(self.filtered),
            "groups": [g.to_dict() for g in self.groups],
        }


@dataclass
class DataMap:
    """A normalized system catalog with filter, group and graph views.

    Usage:
        datamap = DataMap.from_source(get_source("systems.json"))
        view = datamap.view(FilterState(data_use="advertising.third_party"))
        for group in view.groups:
            print(group.group_label, [s.name for s in group.systems])
        graph = datamap.dependency_view("orders_service")
    """

    systems: list[ParsedSystem] = field(default_factory=list)
    lookup_cache: LookupCache = field(default_factory=LookupCache)

    def __post_init__(self) -> None:
        self._by_id = {s.id: s for s in self.systems}

    @classmethod
    def from_raw(
        cls,
        records: Iterable[RawSystem],
        run_logger: DataMapLogger | None = None,
    ) -> DataMap:
        """Normalize raw records, first occurrence of each id wins."""
        return cls(systems=normalize_all(records, run_logger))

    @classmethod
    def from_source(
        cls,
        source: Source,
        run_logger: DataMapLogger | None = None,
    ) -> DataMap:
        """Load records through *source* and normalize them."""
        records = source.load()
        logger.info("Source %s yielded %d records", source.name, len(records))
        return cls.from_raw(records, run_logger)

    def __len__(self) -> int:
        return len(self.systems)

    def get(self, system_id: str) -> ParsedSystem | None:
        return self._by_id.get(system_id)

    @property
    def lookups(self) -> Lookups:
        return self.lookup_cache.get(self.systems)

    @property
    def all_data_uses(self) -> list[str]:
        return list(self.lookups.all_data_uses)

    @property
    def all_categories(self) -> list[str]:
        return list(self.lookups.all_categories)

    def view(
        self,
        filters: FilterState | None = None,
        run_logger: DataMapLogger | None = None,
    ) -> DataMapView:
        """Filter, then group by ``filters.layout_mode``."""
        filters = filters or FilterState()
        filtered = filter_systems(self.systems, filters, run_logger)
        groups = group_systems(filtered, filters.layout_mode, run_logger)
        return DataMapView(filters=filters, filtered=filtered, groups=groups)

    def groups(self, layout_mode: LayoutMode = LayoutMode.SYSTEM_TYPE) -> list[SystemGroup]:
        """Group every system, unfiltered."""
        return group_systems(self.systems, layout_mode)

    def dependency_view(self, system_id: str) -> DependencyView | None:
        """Incoming/outgoing flows around one system, or None if unknown."""
        return build_dependency_view(self.systems, system_id)

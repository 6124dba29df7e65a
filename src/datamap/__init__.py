"""datamap - Normalize, filter and group a privacy-annotated system catalog.

Usage:
    from datamap import DataMap, FilterState, LayoutMode, get_source

    datamap = DataMap.from_source(get_source("systems.json"))
    datamap.all_data_uses                  # options for the data use filter
    view = datamap.view(FilterState(
        data_categories=frozenset({"location"}),
        layout_mode=LayoutMode.DATA_USE,
    ))
    graph = datamap.dependency_view("orders_service")
"""

from datamap.catalog import DataMap, DataMapView
from datamap.core.models import (
    DataSourceType,
    FilterState,
    LayoutMode,
    ParsedSystem,
    PrivacyDeclaration,
    RawPrivacyDeclaration,
    RawSystem,
    SystemGroup,
    SystemType,
)
from datamap.pipeline.graph import DataFlow, DependencyView, GraphEdge
from datamap.sources import get_source

__all__ = [
    "DataFlow",
    "DataMap",
    "DataMapView",
    "DataSourceType",
    "DependencyView",
    "FilterState",
    "GraphEdge",
    "LayoutMode",
    "ParsedSystem",
    "PrivacyDeclaration",
    "RawPrivacyDeclaration",
    "RawSystem",
    "SystemGroup",
    "SystemType",
    "get_source",
]

__version__ = "0.1.0"

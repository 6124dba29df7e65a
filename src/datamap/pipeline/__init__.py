"""The normalize -> filter -> group pipeline and its derived views."""

from datamap.pipeline.filters import filter_systems
from datamap.pipeline.graph import DependencyView, build_dependency_view
from datamap.pipeline.grouping import format_data_use, group_systems
from datamap.pipeline.lookups import LookupCache, extract_all_categories, extract_all_data_uses
from datamap.pipeline.normalize import (
    get_data_source_type,
    normalize_all,
    normalize_system,
    simplify_data_category,
)

__all__ = [
    "DependencyView",
    "LookupCache",
    "build_dependency_view",
    "extract_all_categories",
    "extract_all_data_uses",
    "filter_systems",
    "format_data_use",
    "get_data_source_type",
    "group_systems",
    "normalize_all",
    "normalize_system",
    "simplify_data_category",
]

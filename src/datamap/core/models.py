"""Core data models for datamap.

Raw records mirror the upstream system export. Parsed records are the
canonical, immutable shape the filter engine and grouper read from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from datamap.core.errors import FilterError


class SystemType(str, Enum):
    """Known system types, in display order, plus a catch-all."""

    APPLICATION = "Application"
    SERVICE = "Service"
    DATABASE = "Database"
    INTEGRATION = "Integration"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: str | None) -> SystemType:
        """Map an upstream string to a SystemType, falling back to UNKNOWN."""
        for member in SYSTEM_TYPE_ORDER:
            if member.value == value:
                return member
        return cls.UNKNOWN


SYSTEM_TYPE_ORDER: tuple[SystemType, ...] = (
    SystemType.APPLICATION,
    SystemType.SERVICE,
    SystemType.DATABASE,
    SystemType.INTEGRATION,
)


class DataSourceType(str, Enum):
    """Whether a data category is inferred by the system or supplied by a user."""

    DERIVED = "derived"
    PROVIDED = "provided"


class LayoutMode(str, Enum):
    """How systems are partitioned for display."""

    SYSTEM_TYPE = "system_type"
    DATA_USE = "data_use"


def _first(data: dict, *keys: str, default: Any = None) -> Any:
    """Return the value of the first key present in data."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [str(v) for v in value if v is not None]


@dataclass
class RawPrivacyDeclaration:
    """One data-processing activity as declared upstream."""

    name: str
    data_use: str
    data_categories: list[str] = field(default_factory=list)
    data_subjects: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> RawPrivacyDeclaration:
        """Best-effort parse; accepts upstream snake_case or camelCase keys."""
        return cls(
            name=str(_first(data, "name", default="")),
            data_use=str(_first(data, "data_use", "dataUse", default="")),
            data_categories=_str_list(_first(data, "data_categories", "dataCategories")),
            data_subjects=_str_list(_first(data, "data_subjects", "dataSubjects")),
        )


@dataclass
class RawSystem:
    """A system record as it arrives from the export, before normalization."""

    id: str
    name: str
    description: str = ""
    system_type: str = ""
    privacy_declarations: list[RawPrivacyDeclaration] = field(default_factory=list)
    dependency_ids: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> RawSystem:
        """Best-effort parse of one upstream record.

        Missing fields default to empty values. Declarations that are not
        mappings are skipped.
        """
        declarations = _first(data, "privacy_declarations", "privacyDeclarations", default=[])
        if not isinstance(declarations, list):
            declarations = []
        return cls(
            id=str(_first(data, "fides_key", "id", default="")),
            name=str(_first(data, "name", default="")),
            description=str(_first(data, "description", default="")),
            system_type=str(_first(data, "system_type", "systemType", default="")),
            privacy_declarations=[
                RawPrivacyDeclaration.from_dict(d) for d in declarations if isinstance(d, dict)
            ],
            dependency_ids=_str_list(
                _first(data, "system_dependencies", "dependencyIds", "dependencies")
            ),
        )


@dataclass(frozen=True)
class PrivacyDeclaration:
    """A declaration with its categories reduced to their leaf names."""

    name: str
    data_use: str
    data_categories: tuple[str, ...] = ()
    data_subjects: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "data_use": self.data_use,
            "data_categories": list(self.data_categories),
            "data_subjects": list(self.data_subjects),
        }


@dataclass(frozen=True)
class ParsedSystem:
    """Canonical system record.

    Every set-derived field (data_categories, full_data_categories,
    derived_categories, provided_categories, data_uses) is deduplicated
    and sorted. data_categories is the union of derived and provided.
    """

    id: str
    name: str
    description: str
    system_type: SystemType
    raw_system_type: str = ""
    data_categories: tuple[str, ...] = ()
    full_data_categories: tuple[str, ...] = ()
    derived_categories: tuple[str, ...] = ()
    provided_categories: tuple[str, ...] = ()
    data_uses: tuple[str, ...] = ()
    privacy_declarations: tuple[PrivacyDeclaration, ...] = ()
    dependencies: tuple[str, ...] = ()

    @property
    def data_subjects(self) -> list[str]:
        """Subjects across all declarations, first occurrence first."""
        seen: dict[str, None] = {}
        for decl in self.privacy_declarations:
            for subject in decl.data_subjects:
                seen.setdefault(subject, None)
        return list(seen)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "system_type": self.system_type.value,
            "raw_system_type": self.raw_system_type,
            "data_categories": list(self.data_categories),
            "full_data_categories": list(self.full_data_categories),
            "derived_categories": list(self.derived_categories),
            "provided_categories": list(self.provided_categories),
            "data_uses": list(self.data_uses),
            "data_subjects": self.data_subjects,
            "privacy_declarations": [d.to_dict() for d in self.privacy_declarations],
            "dependencies": list(self.dependencies),
        }


@dataclass(frozen=True)
class FilterState:
    """Active filter selections. None or empty means no constraint."""

    data_use: str | None = None
    data_categories: frozenset[str] = frozenset()
    data_source_type: DataSourceType | None = None
    layout_mode: LayoutMode = LayoutMode.SYSTEM_TYPE

    @classmethod
    def from_dict(cls, data: dict) -> FilterState:
        """Build a FilterState from loose values (CLI options, JSON).

        Raises FilterError for a source type or layout mode outside the
        known values.
        """
        source_type = _first(data, "data_source_type", "dataSourceType")
        layout = _first(data, "layout_mode", "layoutMode", default=LayoutMode.SYSTEM_TYPE)
        try:
            source_type = DataSourceType(source_type) if source_type else None
        except ValueError:
            raise FilterError(f"Unknown data source type: {source_type!r}") from None
        try:
            layout = LayoutMode(layout)
        except ValueError:
            raise FilterError(f"Unknown layout mode: {layout!r}") from None

        return cls(
            data_use=_first(data, "data_use", "dataUse") or None,
            data_categories=frozenset(_str_list(_first(data, "data_categories", "dataCategories"))),
            data_source_type=source_type,
            layout_mode=layout,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "data_use": self.data_use,
            "data_categories": sorted(self.data_categories),
            "data_source_type": self.data_source_type.value if self.data_source_type else None,
            "layout_mode": self.layout_mode.value,
        }


@dataclass
class SystemGroup:
    """A named, ordered bucket of systems for display."""

    group_key: str
    group_label: str
    systems: list[ParsedSystem] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "group_key": self.group_key,
            "group_label": self.group_label,
            "systems": [s.id for s in self.systems],
        }

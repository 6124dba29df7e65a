"""Dependency view: who feeds a system, what it feeds, and shared data.

Dangling dependency ids (no matching system) are skipped, never raised.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from datamap.core.models import SYSTEM_TYPE_ORDER, ParsedSystem, SystemType


class FlowDirection(str, Enum):
    INCOMING = "incoming"
    OUTGOING = "outgoing"


@dataclass(frozen=True)
class DataFlow:
    """A dependency edge annotated with the categories both ends hold."""

    system: ParsedSystem
    direction: FlowDirection
    shared_categories: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "system_id": self.system.id,
            "system_name": self.system.name,
            "system_type": self.system.system_type.value,
            "direction": self.direction.value,
            "shared_categories": list(self.shared_categories),
        }


@dataclass(frozen=True)
class GraphEdge:
    source: str
    target: str

    @property
    def edge_id(self) -> str:
        return f"{self.source}-{self.target}"

    def to_dict(self) -> dict[str, str]:
        return {"id": self.edge_id, "source": self.source, "target": self.target}


@dataclass
class DependencyView:
    """Everything the graph layer needs for one selected system."""

    selected: ParsedSystem
    dependents: list[ParsedSystem] = field(default_factory=list)
    dependencies: list[ParsedSystem] = field(default_factory=list)
    incoming: list[DataFlow] = field(default_factory=list)
    outgoing: list[DataFlow] = field(default_factory=list)
    edges: list[GraphEdge] = field(default_factory=list)

    @property
    def is_isolated(self) -> bool:
        return not self.edges

    def to_dict(self) -> dict[str, Any]:
        return {
            "selected": self.selected.id,
            "dependents": [s.id for s in self.dependents],
            "dependencies": [s.id for s in self.dependencies],
            "incoming": [f.to_dict() for f in self.incoming],
            "outgoing": [f.to_dict() for f in self.outgoing],
            "edges": [e.to_dict() for e in self.edges],
        }


def shared_categories(a: ParsedSystem, b: ParsedSystem) -> tuple[str, ...]:
    """Simplified categories present in both systems, sorted."""
    return tuple(sorted(set(a.data_categories) & set(b.data_categories)))


def group_by_type(systems: Sequence[ParsedSystem]) -> dict[SystemType, list[ParsedSystem]]:
    """Bucket systems by known type, keys in display order.

    Empty buckets are kept; unknown types are left out.
    """
    groups: dict[SystemType, list[ParsedSystem]] = {t: [] for t in SYSTEM_TYPE_ORDER}
    for system in systems:
        if system.system_type in groups:
            groups[system.system_type].append(system)
    return groups


def find_dependents(systems: Sequence[ParsedSystem], system_id: str) -> list[ParsedSystem]:
    """Systems that list *system_id* as a dependency, in input order."""
    return [s for s in systems if system_id in s.dependencies]


def resolve_dependencies(
    system: ParsedSystem,
    by_id: dict[str, ParsedSystem],
) -> list[ParsedSystem]:
    """Look up a system's dependency ids, skipping unknown ones."""
    return [by_id[dep] for dep in system.dependencies if dep in by_id]


def build_dependency_view(
    systems: Sequence[ParsedSystem],
    selected_id: str,
) -> DependencyView | None:
    """Build the incoming/outgoing view around *selected_id*.

    Returns None when no system has that id.
    """
    by_id = {s.id: s for s in systems}
    selected = by_id.get(selected_id)
    if selected is None:
        return None

    dependents = find_dependents(systems, selected_id)
    dependencies = resolve_dependencies(selected, by_id)

    edges: list[GraphEdge] = []
    for members in group_by_type(dependents).values():
        edges.extend(GraphEdge(source=s.id, target=selected.id) for s in members)
    for members in group_by_type(dependencies).values():
        edges.extend(GraphEdge(source=selected.id, target=s.id) for s in members)

    return DependencyView(
        selected=selected,
        dependents=dependents,
        dependencies=dependencies,
        incoming=[
            DataFlow(s, FlowDirection.INCOMING, shared_categories(s, selected))
            for s in dependents
        ],
        outgoing=[
            DataFlow(s, FlowDirection.OUTGOING, shared_categories(selected, s))
            for s in dependencies
        ],
        edges=edges,
    )

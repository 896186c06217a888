"""
Attribute dependency graph for the histogram node.

Each derived quantity of a histogram declares the attributes it is computed
from. The graph of those declarations decides how much work a change to an
input attribute requires, and is flattened into :data:`TRANSITIONS`, the
explicit table consulted by :class:`histmark.node.HistogramNode`.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, cast

import rustworkx as rx


class UpdatePath(str, Enum):
    """Amount of recomputation triggered by a change."""

    NONE = "none"
    NORMALIZE = "normalize"
    FULL = "full"

    @property
    def rank(self) -> int:
        return _RANKS[self]


_RANKS = {UpdatePath.NONE: 0, UpdatePath.NORMALIZE: 1, UpdatePath.FULL: 2}

#: Input attributes settable on a histogram node.
INPUTS = ("sample", "bins", "preserve_domain", "normalized")

#: Derived quantity -> attributes it is computed from.
DEPENDENCIES: Mapping[str, tuple[str, ...]] = {
    "sample_domain": ("sample", "preserve_domain"),
    "edges": ("sample_domain", "bins"),
    "midpoints": ("edges",),
    "raw_count": ("sample", "edges"),
    "count": ("raw_count", "edges", "normalized"),
    "count_domain": ("count", "preserve_domain"),
}

#: Derived quantity whose recomputation selects each path.
PATH_MARKERS: tuple[tuple[str, UpdatePath], ...] = (
    ("raw_count", UpdatePath.FULL),
    ("count", UpdatePath.NORMALIZE),
)


class NamedDiGraph:
    """
    A directed graph with named nodes for easier dependency management.

    Wraps rustworkx.PyDiGraph to provide access to nodes by name rather than
    numeric indices.
    """

    def __init__(self) -> None:
        """Initialize a new NamedDiGraph with an empty graph."""
        self.graph = rx.PyDiGraph()
        self.name_to_index: dict[str, int] = {}

    def add_named_node(self, name: str, node_data: dict[str, Any]) -> int:
        """
        Add a node with a name identifier.

        Raises:
            ValueError: If a node with this name already exists
        """
        if name in self.name_to_index:
            msg = f"Node with name '{name}' already exists"
            raise ValueError(msg)

        idx = self.graph.add_node(node_data)
        self.name_to_index[name] = idx
        return idx

    def add_named_edge(
        self, from_name: str, to_name: str, edge_data: Any = None
    ) -> None:
        """
        Add an edge between two named nodes.

        Raises:
            KeyError: If either node name doesn't exist
        """
        try:
            from_idx = self.name_to_index[from_name]
            to_idx = self.name_to_index[to_name]
        except KeyError as e:
            msg = f"Node '{e.args[0]}' not found in graph"
            raise KeyError(msg) from e

        self.graph.add_edge(from_idx, to_idx, edge_data)

    def __getitem__(self, key: str) -> dict[str, Any]:
        try:
            return cast(dict[str, Any], self.graph[self.name_to_index[key]])
        except KeyError:
            msg = f"Node '{key}' not found in graph"
            raise KeyError(msg) from None

    def descendants(self, name: str) -> set[str]:
        """Names of every node reachable from ``name``."""
        try:
            idx = self.name_to_index[name]
        except KeyError:
            msg = f"Node '{name}' not found in graph"
            raise KeyError(msg) from None
        return {self.graph[i]["name"] for i in rx.descendants(self.graph, idx)}

    def topological_order(self) -> list[str]:
        """
        Node names in topological order.

        Raises:
            ValueError: If the graph contains cycles
        """
        try:
            order = rx.topological_sort(self.graph)
        except rx.DAGHasCycle as e:
            msg = "Circular dependency detected in graph"
            raise ValueError(msg) from e
        return [self.graph[i]["name"] for i in order]

    @property
    def node_names(self) -> list[str]:
        """List of all node names."""
        return list(self.name_to_index.keys())


def build_attribute_graph(
    inputs: Iterable[str] = INPUTS,
    dependencies: Mapping[str, Iterable[str]] = DEPENDENCIES,
) -> NamedDiGraph:
    """
    Build the dependency graph of a histogram's attributes.

    Edges point from an attribute to the quantities computed from it.

    Raises:
        ValueError: If the declared dependencies are circular.
    """
    graph = NamedDiGraph()
    for name in inputs:
        graph.add_named_node(name, {"name": name, "type": "input"})
    for name in dependencies:
        graph.add_named_node(name, {"name": name, "type": "derived"})
    for name, upstream in dependencies.items():
        for dependency in upstream:
            graph.add_named_edge(dependency, name)
    # fail early on cycles
    graph.topological_order()
    return graph


def build_transition_table(graph: NamedDiGraph) -> dict[str, UpdatePath]:
    """
    Map every input attribute to the update path its change requires.

    An input that reaches the raw counts needs full rebinning; one that only
    reaches the published counts needs renormalization.
    """
    table: dict[str, UpdatePath] = {}
    for name in graph.node_names:
        if graph[name]["type"] != "input":
            continue
        reached = graph.descendants(name)
        table[name] = next(
            (path for marker, path in PATH_MARKERS if marker in reached),
            UpdatePath.NONE,
        )
    return table


ATTRIBUTE_GRAPH = build_attribute_graph()

#: Input attribute -> update path required when it changes.
TRANSITIONS: Mapping[str, UpdatePath] = build_transition_table(ATTRIBUTE_GRAPH)


def update_path_for(changed: Iterable[str]) -> UpdatePath:
    """
    Most demanding update path among the ``changed`` attributes.

    Attributes that are not inputs (e.g. static metadata) require no update.
    """
    return max(
        (TRANSITIONS.get(name, UpdatePath.NONE) for name in changed),
        key=lambda path: path.rank,
        default=UpdatePath.NONE,
    )


__all__ = (
    "ATTRIBUTE_GRAPH",
    "TRANSITIONS",
    "NamedDiGraph",
    "UpdatePath",
    "build_attribute_graph",
    "build_transition_table",
    "update_path_for",
)

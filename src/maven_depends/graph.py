"""Dependency graph of a transitive resolution."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import networkx as nx

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .models import Dependency

logger = logging.getLogger(__name__)

BRANCH = "├─ "
LAST_BRANCH = "└─ "
PIPE = "│  "
SPACE = "   "


class DependencyGraph(nx.DiGraph):
    """A directed graph from each resolved dependency to the dependencies it introduced.

    Every node other than the root has exactly one incoming edge: the
    dependency through which it was reached first.
    """

    def __init__(self, root: Dependency | None = None, *args: object, **kwargs: object) -> None:
        """Initialize the graph, optionally with its root dependency."""
        super().__init__(*args, **kwargs)
        self.root: Dependency | None = root
        self._depths: dict[Dependency, int] | None = None
        if root is not None:
            self.add_node(root)

    def add_dependency(self, introducer: Dependency | None, dependency: Dependency) -> None:
        """Add a dependency, linked to the dependency that introduced it."""
        self._depths = None
        if introducer is None:
            self.root = dependency
            self.add_node(dependency)
        else:
            self.add_edge(introducer, dependency)

    def depth(self, dependency: Dependency) -> int:
        """Return the distance from the root, or -1 when the dependency isn't reachable."""
        if self.root is None:
            return -1
        if self._depths is None:
            self._depths = nx.single_source_shortest_path_length(self, self.root)
        return self._depths.get(dependency, -1)

    def dependencies(self) -> Iterator[Dependency]:
        """Iterate over the dependencies in breadth-first discovery order, starting at the root."""
        if self.root is None:
            return
        yield self.root
        for _, child in nx.bfs_edges(self, self.root):
            yield child

    def to_tree(self) -> str:
        """Render the graph as an indented text tree."""
        if self.root is None:
            return ""
        lines = [str(self.root)]
        stack: list[tuple[Dependency, str, bool]] = [
            (child, "", index == 0) for index, child in enumerate(reversed(list(self.successors(self.root))))
        ]
        while stack:
            node, prefix, is_last = stack.pop()
            lines.append(f"{prefix}{LAST_BRANCH if is_last else BRANCH}{node}")
            child_prefix = prefix + (SPACE if is_last else PIPE)
            children = list(self.successors(node))
            stack.extend(
                (child, child_prefix, index == 0) for index, child in enumerate(reversed(children))
            )
        return "\n".join(lines)

    def to_obj(self) -> dict[str, Any]:
        """Convert the graph to a dictionary representation."""
        return {
            "root": str(self.root) if self.root is not None else None,
            "dependencies": {
                str(node): [str(child) for child in self.successors(node)] for node in self.dependencies()
            },
        }

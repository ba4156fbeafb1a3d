"""Snapshot of the subgraph reachable from a set of root nodes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from compgraph._leaves import Input

from ._algorithms import topological_sort

if TYPE_CHECKING:
    from collections.abc import Iterator

    from compgraph._node import Computable


@dataclass(frozen=True, slots=True)
class GraphView:
    """An immutable view of the nodes reachable from some roots.

    The structure is captured at construction; cache state is read live from
    the nodes each time it is queried. Nodes are keyed by identity.

    Attributes:
        roots: The nodes the view was built from.
        _arguments: Mapping from node to its argument tuple.
        _dependants: Mapping from node to the nodes in the view that consume it.

    """

    roots: tuple[Computable, ...]
    _arguments: dict[Computable, tuple[Computable, ...]] = field(default_factory=dict)
    _dependants: dict[Computable, tuple[Computable, ...]] = field(default_factory=dict)

    @classmethod
    def from_roots(cls, *roots: Computable) -> GraphView:
        """Walk the argument relation from `roots` and capture every node reached.

        Args:
            *roots: Nodes to start from, typically the graph outputs.

        Returns:
            A new GraphView. Discovery order is depth-first, roots first.

        """
        arguments: dict[Computable, tuple[Computable, ...]] = {}
        dependants: dict[Computable, list[Computable]] = {}
        stack = list(reversed(roots))

        while stack:
            node = stack.pop()
            if node in arguments:
                continue
            args = tuple(node.arguments)
            arguments[node] = args
            dependants.setdefault(node, [])
            for arg in args:
                consumers = dependants.setdefault(arg, [])
                if node not in consumers:
                    consumers.append(node)
            stack.extend(reversed(args))

        return cls(
            roots=tuple(roots),
            _arguments=arguments,
            _dependants={node: tuple(consumers) for node, consumers in dependants.items()},
        )

    @property
    def nodes(self) -> tuple[Computable, ...]:
        """All nodes in discovery order."""
        return tuple(self._arguments)

    def arguments(self, node: Computable) -> tuple[Computable, ...]:
        """Direct arguments of `node` (empty for leaves and unknown nodes)."""
        return self._arguments.get(node, ())

    def dependants(self, node: Computable) -> tuple[Computable, ...]:
        """Nodes in this view that consume `node` directly."""
        return self._dependants.get(node, ())

    def inputs(self) -> list[Input]:
        """Input leaves reachable from the roots, in discovery order."""
        return [node for node in self._arguments if isinstance(node, Input)]

    def input_by_name(self, name: str) -> Input:
        """Find the single input leaf labelled `name`.

        Raises:
            KeyError: If no input has that name.
            ValueError: If more than one input has that name.

        """
        matches = [node for node in self.inputs() if node.name == name]
        if not matches:
            msg = f"No input named {name!r} in graph"
            raise KeyError(msg)
        if len(matches) > 1:
            msg = f"Input name {name!r} is ambiguous ({len(matches)} inputs share it)"
            raise ValueError(msg)
        return matches[0]

    def ancestors(self, node: Computable) -> frozenset[Computable]:
        """All nodes `node` transitively depends on."""
        return self._reach(node, self._arguments)

    def descendants(self, node: Computable) -> frozenset[Computable]:
        """All nodes in this view that transitively depend on `node`.

        This is the set of nodes whose cache `invalidate_cache` on `node` clears.
        """
        return self._reach(node, self._dependants)

    @staticmethod
    def _reach(
        start: Computable,
        edges: dict[Computable, tuple[Computable, ...]],
    ) -> frozenset[Computable]:
        visited: set[Computable] = set()
        stack = list(edges.get(start, ()))
        while stack:
            current = stack.pop()
            if current not in visited:
                visited.add(current)
                stack.extend(edges.get(current, ()))
        return frozenset(visited)

    def topological_order(self) -> list[Computable]:
        """Nodes ordered so that arguments come before their consumers."""
        return topological_sort(self._arguments)

    def cached_nodes(self) -> list[Computable]:
        """Nodes currently holding a cached value, in discovery order."""
        return [node for node in self._arguments if node.has_cached_value()]

    def stale_nodes(self) -> list[Computable]:
        """Nodes that the next `compute` on a root would evaluate afresh."""
        return [node for node in self._arguments if not node.has_cached_value()]

    def __len__(self) -> int:
        return len(self._arguments)

    def __contains__(self, node: object) -> bool:
        return node in self._arguments

    def __iter__(self) -> Iterator[Computable]:
        return iter(self._arguments)

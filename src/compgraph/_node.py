"""The compute-with-cache contract and the state shared by every operator node."""

from __future__ import annotations

import logging
import weakref
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ._errors import InvalidCacheReadError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from ._ops import Add, Multiply, Power

logger = logging.getLogger(__name__)


@runtime_checkable
class Computable(Protocol):
    """Anything that can live in the graph.

    A node evaluates lazily through `compute`, remembers the result, and forgets
    it when `invalidate_cache` reaches it from an upstream input.
    """

    @property
    def arguments(self) -> tuple[Computable, ...]: ...

    def compute(self) -> float: ...

    def compute_fresh(self) -> float: ...

    def has_cached_value(self) -> bool: ...

    def get_cached_value(self) -> float: ...

    def set_cached_value(self, value: float) -> None: ...

    def add_dependant(self, dependant: Computable) -> None: ...

    def invalidate_cache(self) -> None: ...

    def drop_cached_value(self) -> Iterable[Computable]:
        """Forget this node's own value and return its live dependants.

        Unlike `invalidate_cache`, this does not touch any other node.
        """
        ...


class DependantSet:
    """Non-owning back-references from a node to the nodes that consume it.

    Consumers are held in a `weakref.WeakSet`, so a consumer that is no longer
    referenced anywhere else drops out of the set as soon as it is collected.
    """

    __slots__ = ("_refs",)

    def __init__(self) -> None:
        self._refs: weakref.WeakSet[Computable] = weakref.WeakSet()

    def add(self, dependant: Computable) -> None:
        """Register a consumer. Registering the same consumer twice is a no-op."""
        self._refs.add(dependant)

    def live(self) -> list[Computable]:
        """Return the consumers that are still alive."""
        return list(self._refs)

    def invalidate_all(self) -> None:
        """Invalidate every live consumer (and, transitively, their consumers)."""
        invalidate_downstream(*self.live())

    def __iter__(self) -> Iterator[Computable]:
        return iter(self.live())

    def __len__(self) -> int:
        return len(self._refs)


def invalidate_downstream(*starts: Computable) -> int:
    """Drop the cached value of `starts` and of every node downstream of them.

    The walk uses an explicit stack and visits each node once per call, however
    many paths lead to it, so deep chains and repeated diamonds stay linear.
    Already-stale nodes are still expanded: a consumer may have been refilled
    through `set_cached_value` while its arguments were stale.

    Returns:
        Number of nodes visited.

    """
    visited: dict[int, Computable] = {}
    stack = list(reversed(starts))
    while stack:
        node = stack.pop()
        if id(node) in visited:
            continue
        visited[id(node)] = node
        stack.extend(node.drop_cached_value())
    if visited:
        logger.debug("Invalidation visited %d node(s)", len(visited))
    return len(visited)


def stale_post_order(root: Computable) -> list[Computable]:
    """Return `root` and its stale ancestors, every argument before its consumers.

    Only nodes without a cached value are descended into; a cached node cuts
    off everything above it.
    """
    order: list[Computable] = []
    visited = {id(root)}
    stack: list[tuple[Computable, Iterator[Computable]]] = [(root, iter(root.arguments))]
    while stack:
        node, pending = stack[-1]
        for arg in pending:
            if id(arg) in visited or arg.has_cached_value():
                continue
            visited.add(id(arg))
            stack.append((arg, iter(arg.arguments)))
            break
        else:
            stack.pop()
            order.append(node)
    return order


@dataclass(slots=True)
class CacheRecord:
    """Cache state composed into every operator node.

    Attributes:
        arguments: The operands, fixed at construction.
        cached_value: The memoized result, or None while stale.
        dependants: Consumers to invalidate when this node goes stale.

    """

    arguments: tuple[Computable, ...] = ()
    cached_value: float | None = None
    dependants: DependantSet = field(default_factory=DependantSet)

    def has_value(self) -> bool:
        return self.cached_value is not None

    def get(self) -> float:
        """Return the cached value.

        Raises:
            InvalidCacheReadError: If nothing is cached.

        """
        if self.cached_value is None:
            msg = "No cached value; call compute() or check has_cached_value() first"
            raise InvalidCacheReadError(msg)
        return self.cached_value

    def set(self, value: float) -> None:
        self.cached_value = value

    def clear(self) -> None:
        self.cached_value = None


class ArithmeticMixin:
    """Python operators that build operator nodes.

    Numbers on either side are wrapped as constants. `==` keeps identity
    semantics so nodes stay hashable.
    """

    def __add__(self, other: Computable | float) -> Add:
        from ._ops import Add  # noqa: PLC0415

        return Add(self, other)

    def __radd__(self, other: Computable | float) -> Add:
        from ._ops import Add  # noqa: PLC0415

        return Add(other, self)

    def __mul__(self, other: Computable | float) -> Multiply:
        from ._ops import Multiply  # noqa: PLC0415

        return Multiply(self, other)

    def __rmul__(self, other: Computable | float) -> Multiply:
        from ._ops import Multiply  # noqa: PLC0415

        return Multiply(other, self)

    def __pow__(self, exponent: float) -> Power:
        from ._ops import Power  # noqa: PLC0415

        return Power(self, exponent)

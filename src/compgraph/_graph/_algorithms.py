"""Graph algorithms over the argument relation."""

from collections import deque
from collections.abc import Collection, Hashable, Mapping
from typing import TypeVar

T = TypeVar("T", bound=Hashable)


def topological_sort(arguments: Mapping[T, Collection[T]]) -> list[T]:
    """Order nodes so that every node comes after all of its arguments.

    Args:
        arguments: Mapping from node to the nodes it consumes. Nodes that only
            appear as arguments are treated as leaves.

    Returns:
        Nodes in evaluation order. Ties keep the mapping's iteration order.

    Raises:
        ValueError: If the argument relation contains a cycle.

    Example:
        >>> topological_sort({"y": ["x1", "t"], "t": ["x2"]})
        ['x1', 'x2', 't', 'y']

    """
    consumers: dict[T, list[T]] = {}
    pending: dict[T, int] = {}

    for node, args in arguments.items():
        pending.setdefault(node, 0)
        for arg in args:
            pending.setdefault(arg, 0)
            pending[node] += 1
            consumers.setdefault(arg, []).append(node)

    ready = deque(node for node, count in pending.items() if count == 0)
    order: list[T] = []

    while ready:
        node = ready.popleft()
        order.append(node)
        for consumer in consumers.get(node, []):
            pending[consumer] -= 1
            if pending[consumer] == 0:
                ready.append(consumer)

    if len(order) != len(pending):
        msg = "Cycle detected in graph"
        raise ValueError(msg)

    return order

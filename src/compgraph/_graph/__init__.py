"""Read-only views over a computation graph.

This module contains:
- GraphView: an immutable snapshot of the nodes reachable from some roots
- topological_sort: ordering of nodes so that arguments precede their consumers
"""

from ._algorithms import topological_sort
from ._view import GraphView

__all__ = ["GraphView", "topological_sort"]

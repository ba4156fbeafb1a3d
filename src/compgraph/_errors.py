"""Exception types raised by the computation graph."""


class GraphError(Exception):
    """Base class for computation graph contract violations."""


class InvalidCacheReadError(GraphError, LookupError):
    """A cached value was read from a node that holds none."""


class ArityError(GraphError, TypeError):
    """An operator was constructed with the wrong number of arguments."""


class LeafCacheTamperError(GraphError, ValueError):
    """A leaf's cached value was overwritten with something other than its value.

    Leaf values change only through ``Input.set``.
    """

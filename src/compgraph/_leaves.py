"""Leaf nodes: named inputs and constants."""

from __future__ import annotations

import logging
import math
from numbers import Real

from ._errors import LeafCacheTamperError
from ._node import ArithmeticMixin, Computable, DependantSet, invalidate_downstream

logger = logging.getLogger(__name__)


def _same_value(a: float, b: float) -> bool:
    return a == b or (math.isnan(a) and math.isnan(b))


class Input(ArithmeticMixin):
    """A named variable at the root of the graph.

    The leaf is always considered cached: its value is definitionally current.
    `set` is the only way to change it, and the sole source of invalidation.

    Example:
        >>> x = Input("x")
        >>> y = x * 2.0
        >>> x.set(3.0)
        >>> y.compute()
        6.0

    """

    def __init__(self, name: str, value: float = 0.0) -> None:
        self._name = name
        self.value = float(value)
        self._dependants = DependantSet()

    @property
    def name(self) -> str:
        """Label used for diagnostics and by the CLI to match input files."""
        return self._name

    @property
    def arguments(self) -> tuple[Computable, ...]:
        return ()

    @property
    def dependants(self) -> DependantSet:
        return self._dependants

    def set(self, value: float) -> None:
        """Assign a new value and invalidate everything downstream."""
        self.value = float(value)
        logger.debug("Input %r set to %r", self._name, self.value)
        self.invalidate_cache()

    def compute(self) -> float:
        return self.value

    def compute_fresh(self) -> float:
        return self.value

    def has_cached_value(self) -> bool:
        return True

    def get_cached_value(self) -> float:
        return self.value

    def set_cached_value(self, value: float) -> None:
        if not _same_value(float(value), self.value):
            msg = f"Cannot overwrite the value of input {self._name!r} ({self.value!r}) with {value!r}; use set()"
            raise LeafCacheTamperError(msg)

    def add_dependant(self, dependant: Computable) -> None:
        self._dependants.add(dependant)

    def invalidate_cache(self) -> None:
        invalidate_downstream(self)

    def drop_cached_value(self) -> list[Computable]:
        return self._dependants.live()

    def __repr__(self) -> str:
        return f"Input({self._name!r}, value={self.value!r})"


class Constant(ArithmeticMixin):
    """An immutable scalar leaf.

    Constants never change, so they never invalidate anything and keep no
    record of their consumers.
    """

    def __init__(self, value: float) -> None:
        self._value = float(value)

    @property
    def value(self) -> float:
        return self._value

    @property
    def arguments(self) -> tuple[Computable, ...]:
        return ()

    def compute(self) -> float:
        return self._value

    def compute_fresh(self) -> float:
        return self._value

    def has_cached_value(self) -> bool:
        return True

    def get_cached_value(self) -> float:
        return self._value

    def set_cached_value(self, value: float) -> None:
        if not _same_value(float(value), self._value):
            msg = f"Cannot overwrite constant {self._value!r} with {value!r}"
            raise LeafCacheTamperError(msg)

    def add_dependant(self, dependant: Computable) -> None:
        pass

    def invalidate_cache(self) -> None:
        pass

    def drop_cached_value(self) -> tuple[Computable, ...]:
        return ()

    def __repr__(self) -> str:
        return f"Constant({self._value!r})"


def as_node(value: Computable | float) -> Computable:
    """Return `value` unchanged if it is a node, otherwise wrap it as a Constant.

    Raises:
        TypeError: If `value` is neither a node nor a real number.

    """
    if isinstance(value, Computable):
        return value
    # bool is a Real but never a meaningful operand
    if isinstance(value, Real) and not isinstance(value, bool):
        return Constant(float(value))
    msg = f"Expected a graph node or a real number, got {type(value).__name__}"
    raise TypeError(msg)

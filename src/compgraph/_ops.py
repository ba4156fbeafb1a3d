"""Operator nodes.

Every operator shares the same cache mechanics through `Operator`; a concrete
operator only declares its arity and supplies `_apply`, the pure function of
its argument values.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from ._errors import ArityError
from ._leaves import as_node
from ._node import ArithmeticMixin, CacheRecord, Computable, invalidate_downstream, stale_post_order

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ._node import DependantSet

logger = logging.getLogger(__name__)


class Operator(ArithmeticMixin, ABC):
    """Base for nodes computed from other nodes.

    Construction registers the new node as a dependant of each argument, so
    the back-edge exists as soon as the node does.

    Attributes:
        min_arity: Fewest arguments the operator accepts.
        max_arity: Most arguments the operator accepts, or None for no limit.

    """

    min_arity: ClassVar[int] = 1
    max_arity: ClassVar[int | None] = None

    def __init__(self, *arguments: Computable | float) -> None:
        self._check_arity(len(arguments))
        nodes = tuple(as_node(arg) for arg in arguments)
        self._cache = CacheRecord(arguments=nodes)
        for node in nodes:
            node.add_dependant(self)

    @classmethod
    def _check_arity(cls, count: int) -> None:
        too_few = count < cls.min_arity
        too_many = cls.max_arity is not None and count > cls.max_arity
        if not (too_few or too_many):
            return
        if cls.max_arity == cls.min_arity:
            expected = f"exactly {cls.min_arity}"
        elif cls.max_arity is None:
            expected = f"at least {cls.min_arity}"
        else:
            expected = f"{cls.min_arity} to {cls.max_arity}"
        msg = f"{cls.__name__} takes {expected} argument(s), got {count}"
        raise ArityError(msg)

    @property
    def arguments(self) -> tuple[Computable, ...]:
        return self._cache.arguments

    @property
    def dependants(self) -> DependantSet:
        return self._cache.dependants

    def compute(self) -> float:
        """Return the cached value, evaluating the stale part of the graph first if needed.

        Stale ancestors are filled bottom-up from an explicit stack, so the
        depth of the graph is not limited by the recursion limit.
        """
        if self._cache.has_value():
            return self._cache.get()
        for node in stale_post_order(self):
            node.set_cached_value(node.compute_fresh())
        return self._cache.get()

    def compute_fresh(self) -> float:
        """Evaluate this node from its arguments, ignoring its own cache."""
        values = [arg.compute() for arg in self._cache.arguments]
        result = self._apply(values)
        logger.debug("Computed %r -> %r", self, result)
        return result

    @abstractmethod
    def _apply(self, values: Sequence[float]) -> float:
        """Combine argument values into this node's value."""

    def has_cached_value(self) -> bool:
        return self._cache.has_value()

    def get_cached_value(self) -> float:
        return self._cache.get()

    def set_cached_value(self, value: float) -> None:
        self._cache.set(value)

    def add_dependant(self, dependant: Computable) -> None:
        self._cache.dependants.add(dependant)

    def invalidate_cache(self) -> None:
        """Drop the cached value here and in every node downstream."""
        invalidate_downstream(self)

    def drop_cached_value(self) -> list[Computable]:
        if self._cache.has_value():
            logger.debug("Invalidated %r", self)
        self._cache.clear()
        return self._cache.dependants.live()

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Add(Operator):
    """Sum of all arguments."""

    def _apply(self, values: Sequence[float]) -> float:
        return sum(values, 0.0)


class Multiply(Operator):
    """Product of all arguments."""

    def _apply(self, values: Sequence[float]) -> float:
        return math.prod(values, start=1.0)


class Power(Operator):
    """Raises its single argument to a fixed exponent.

    The exponent is a parameter of the node, not a node itself, so it is not
    tracked by invalidation and cannot change after construction.
    It is given as `Power(base, exponent)` or `Power(base, exponent=...)`.
    """

    min_arity = 1
    max_arity = 1

    def __init__(self, *arguments: Computable | float, exponent: float | None = None) -> None:
        if exponent is None:
            if len(arguments) != 2:  # noqa: PLR2004
                msg = f"Power takes a base and an exponent, got {len(arguments)} argument(s)"
                raise ArityError(msg)
            arguments, exponent = arguments[:1], arguments[1]
        if isinstance(exponent, Computable):
            msg = "Power exponent must be a number fixed at construction, not a graph node"
            raise TypeError(msg)
        super().__init__(*arguments)
        self._exponent = float(exponent)

    @property
    def exponent(self) -> float:
        return self._exponent

    def _apply(self, values: Sequence[float]) -> float:
        (base,) = values
        return math.pow(base, self._exponent)

    def __repr__(self) -> str:
        return f"Power(exponent={self._exponent!r})"


class Sine(Operator):
    """Sine of its single argument, in radians."""

    min_arity = 1
    max_arity = 1

    def _apply(self, values: Sequence[float]) -> float:
        (angle,) = values
        return math.sin(angle)


def sin(argument: Computable | float) -> Sine:
    """Build a Sine node over `argument`."""
    return Sine(argument)

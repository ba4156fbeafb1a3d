"""Lazily evaluated computation graphs with incremental recomputation."""

__all__ = [
    "Add",
    "ArityError",
    "CacheRecord",
    "Computable",
    "Constant",
    "DependantSet",
    "GraphError",
    "GraphView",
    "Input",
    "InputDocument",
    "InputFileError",
    "InvalidCacheReadError",
    "LeafCacheTamperError",
    "Multiply",
    "Operator",
    "Power",
    "RunRecord",
    "Sine",
    "evaluate_outputs",
    "load_input_document",
    "round_value",
    "run_document",
    "sin",
    "topological_sort",
]

from ._errors import ArityError, GraphError, InvalidCacheReadError, LeafCacheTamperError
from ._eval import RunRecord, evaluate_outputs, run_document
from ._graph import GraphView, topological_sort
from ._io import InputDocument, InputFileError, load_input_document
from ._leaves import Constant, Input
from ._node import CacheRecord, Computable, DependantSet
from ._ops import Add, Multiply, Operator, Power, Sine, sin
from ._utils import round_value

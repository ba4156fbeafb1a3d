"""Utilities to locate graphs defined in Python modules and scripts.

Module path resolution was adapted from `fastapi_cli.discover` of package `fastapi-cli`.
"""

from __future__ import annotations

import importlib
import logging
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from compgraph._node import Computable

from .config import ModuleSource, ScriptSource

if TYPE_CHECKING:
    from pathlib import Path
    from types import ModuleType

    from .config import GraphSource

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_VARIABLE = "graph"


@dataclass(frozen=True, slots=True)
class ModuleData:
    """Where a graph script can be imported from."""

    module_import_str: str
    extra_sys_path: Path


def get_module_data_from_path(path: Path) -> ModuleData:
    """Work out the dotted import name of a script.

    Enclosing directories that contain an `__init__.py` become part of the
    dotted name; the first directory without one goes on `sys.path`.

    Args:
        path: Path to a Python file or package

    Returns:
        ModuleData containing module import information

    """
    target = path.resolve()
    if target.name == "__init__.py":
        target = target.parent

    names = [target.stem]
    root = target.parent
    while (root / "__init__.py").is_file():
        names.append(root.name)
        root = root.parent

    return ModuleData(module_import_str=".".join(reversed(names)), extra_sys_path=root)


def as_outputs(obj: object, name: str) -> dict[str, Computable]:
    """Normalize a loaded object into named graph outputs.

    Args:
        obj: A single node, or a mapping of output name to node.
        name: Output name to use when `obj` is a single node.

    Returns:
        Mapping of output name to node.

    Raises:
        TypeError: If `obj` is neither a node nor a mapping of nodes.

    """
    if isinstance(obj, Computable):
        return {name: obj}
    if isinstance(obj, Mapping) and obj:
        outputs: dict[str, Computable] = {}
        for key, node in obj.items():
            if not isinstance(node, Computable):
                msg = f"Output '{key}' of '{name}' is not a graph node"
                raise TypeError(msg)
            outputs[str(key)] = node
        return outputs
    msg = f"'{name}' is not a graph node or a non-empty mapping of graph nodes"
    raise TypeError(msg)


def _get_variable(module: ModuleType, variable: str, module_name: str) -> dict[str, Computable]:
    if not hasattr(module, variable):
        msg = f"Could not find graph '{variable}' in {module_name}"
        raise ValueError(msg)
    return as_outputs(getattr(module, variable), variable)


def load_graph_from_script(script_path: Path, variable: str | None = None) -> dict[str, Computable]:
    """Load graph outputs from a Python script path.

    Args:
        script_path: Path to the Python script defining the graph
        variable: Name of the graph variable. Defaults to 'graph'

    Returns:
        Mapping of output name to node

    Raises:
        ImportError: If the module cannot be imported
        ValueError: If the variable doesn't exist
        TypeError: If the variable is not a node or mapping of nodes

    """
    module_data = get_module_data_from_path(script_path)
    sys.path.insert(0, str(module_data.extra_sys_path))

    try:
        module = importlib.import_module(module_data.module_import_str)
    except (ImportError, ValueError):
        logger.exception("Import error")
        logger.warning("Ensure all the package directories have an __init__.py file")
        raise

    return _get_variable(module, variable or DEFAULT_GRAPH_VARIABLE, module_data.module_import_str)


def load_graph_from_module_path(module_path: str) -> dict[str, Computable]:
    """Load graph outputs from a module path (e.g., 'examples.trig:graph').

    Raises:
        ValueError: If module path format is invalid or the variable doesn't exist
        TypeError: If the variable is not a node or mapping of nodes

    """
    if ":" not in module_path:
        msg = "Module path must be in format 'module.path:variable_name'"
        raise ValueError(msg)

    module_name, variable = module_path.split(":", 1)
    module = importlib.import_module(module_name)
    return _get_variable(module, variable, module_name)


def load_graph_from_source(source: GraphSource) -> dict[str, Computable]:
    """Load graph outputs from a GraphSource (script or module)."""
    match source:
        case ScriptSource(script=script, name=name):
            return load_graph_from_script(script, name)
        case ModuleSource(module_path=module_path):
            return load_graph_from_module_path(module_path)

"""Configuration loading from pyproject.toml."""

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import cast

DEFAULT_PRECISION = 5


class ConfigError(Exception):
    """Error in compgraph configuration."""


@dataclass(slots=True, frozen=True)
class ScriptSource:
    """Script path with optional variable name."""

    script: Path
    name: str | None = None


@dataclass(slots=True, frozen=True)
class ModuleSource:
    """Module path with variable name (e.g., 'examples.trig:graph')."""

    module_path: str


GraphSource = ScriptSource | ModuleSource


@dataclass(slots=True, frozen=True)
class CompgraphConfig:
    """Configuration loaded from the [tool.compgraph] section of pyproject.toml.

    All relative paths are resolved from the project root (directory containing pyproject.toml).
    """

    graph: GraphSource | None = None
    inputs: Path | None = None
    output: Path | None = None
    precision: int = DEFAULT_PRECISION
    project_root: Path | None = None


def find_pyproject_toml(start_dir: Path | None = None) -> Path | None:
    """Find pyproject.toml by walking up from start_dir.

    Args:
        start_dir: Starting directory. Defaults to current working directory.

    Returns:
        Path to pyproject.toml if found, None otherwise.

    """
    current = (start_dir or Path.cwd()).resolve()

    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def _parse_graph_source(value: object, project_root: Path) -> GraphSource:
    """Parse the graph field: a 'module:variable' string or a { script, name } table.

    Raises:
        ConfigError: If the value format is invalid

    """
    if isinstance(value, str):
        if ":" not in value:
            msg = f"Invalid module path '{value}'. Expected format: 'module.path:variable_name'"
            raise ConfigError(msg)
        return ModuleSource(module_path=value)

    if isinstance(value, dict):
        table = cast("dict[str, object]", value)
        script_value = table.get("script")
        if not isinstance(script_value, str):
            msg = "Invalid [tool.compgraph].graph: expected string or table with a 'script' path"
            raise ConfigError(msg)

        name = table.get("name")
        if name is not None and not isinstance(name, str):
            msg = "Invalid [tool.compgraph].graph.name: expected string"
            raise ConfigError(msg)

        return ScriptSource(script=_resolve(script_value, project_root), name=name)

    msg = "Invalid [tool.compgraph].graph: expected string or table with a 'script' path"
    raise ConfigError(msg)


def _resolve(raw: str, project_root: Path) -> Path:
    path = Path(raw)
    return path if path.is_absolute() else project_root / path


def _parse_path(section: dict[str, object], key: str, project_root: Path) -> Path | None:
    if key not in section:
        return None
    value = section[key]
    if not isinstance(value, str):
        msg = f"Invalid [tool.compgraph].{key}: expected string path"
        raise ConfigError(msg)
    return _resolve(value, project_root)


def load_config(pyproject_path: Path) -> CompgraphConfig:
    """Load and validate [tool.compgraph] config from pyproject.toml.

    Args:
        pyproject_path: Path to pyproject.toml

    Returns:
        Parsed CompgraphConfig

    Raises:
        ConfigError: If the configuration is invalid

    """
    project_root = pyproject_path.parent

    with pyproject_path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            msg = f"Invalid TOML in {pyproject_path}: {e}"
            raise ConfigError(msg) from e

    section = data.get("tool", {}).get("compgraph", {})
    if not section:
        return CompgraphConfig(project_root=project_root)

    graph_source: GraphSource | None = None
    if "graph" in section:
        graph_source = _parse_graph_source(section["graph"], project_root)

    precision = section.get("precision", DEFAULT_PRECISION)
    if not isinstance(precision, int) or isinstance(precision, bool) or precision < 0:
        msg = "Invalid [tool.compgraph].precision: expected a non-negative integer"
        raise ConfigError(msg)

    return CompgraphConfig(
        graph=graph_source,
        inputs=_parse_path(section, "inputs", project_root),
        output=_parse_path(section, "output", project_root),
        precision=precision,
        project_root=project_root,
    )


def get_config() -> CompgraphConfig:
    """Get config from pyproject.toml in current directory or parents.

    Returns:
        CompgraphConfig (may be empty if no pyproject.toml or no [tool.compgraph] section)

    """
    pyproject_path = find_pyproject_toml()
    if pyproject_path is None:
        return CompgraphConfig()
    return load_config(pyproject_path)

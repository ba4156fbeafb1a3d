"""Tests for loading graphs from scripts and modules."""

from pathlib import Path

import pytest

import compgraph as cg
from compgraph._cli.config import ModuleSource, ScriptSource
from compgraph._cli.discover import (
    as_outputs,
    get_module_data_from_path,
    load_graph_from_module_path,
    load_graph_from_script,
    load_graph_from_source,
)

SCRIPT = """
import compgraph as cg

x = cg.Input("x")
graph = x * 2.0
named = {"double": graph, "square": x ** 2}
not_a_graph = 3
"""


class TestGetModuleData:
    def test_plain_script(self, tmp_path: Path) -> None:
        script = tmp_path / "standalone.py"
        script.write_text("")

        data = get_module_data_from_path(script)

        assert data.module_import_str == "standalone"
        assert data.extra_sys_path == tmp_path.resolve()

    def test_script_inside_package(self, tmp_path: Path) -> None:
        package = tmp_path / "pkg"
        package.mkdir()
        (package / "__init__.py").write_text("")
        script = package / "graphs.py"
        script.write_text("")

        data = get_module_data_from_path(script)

        assert data.module_import_str == "pkg.graphs"
        assert data.extra_sys_path == tmp_path.resolve()


class TestAsOutputs:
    def test_single_node(self) -> None:
        node = cg.Input("x") + 1.0
        assert as_outputs(node, "graph") == {"graph": node}

    def test_mapping(self) -> None:
        a = cg.Input("a")
        b = cg.Input("b")
        assert as_outputs({"a": a, "b": b}, "graph") == {"a": a, "b": b}

    def test_mapping_with_non_node(self) -> None:
        with pytest.raises(TypeError, match="Output 'b'"):
            as_outputs({"a": cg.Input("a"), "b": 1.0}, "graph")

    @pytest.mark.parametrize("value", [3, {}, "graph"])
    def test_rejects_other_objects(self, value: object) -> None:
        with pytest.raises(TypeError, match="not a graph node"):
            as_outputs(value, "graph")


class TestLoadGraph:
    def test_default_variable(self, tmp_path: Path) -> None:
        script = tmp_path / "discover_default.py"
        script.write_text(SCRIPT)

        outputs = load_graph_from_script(script)

        assert list(outputs) == ["graph"]
        assert isinstance(outputs["graph"], cg.Multiply)

    def test_named_mapping(self, tmp_path: Path) -> None:
        script = tmp_path / "discover_named.py"
        script.write_text(SCRIPT)

        outputs = load_graph_from_script(script, "named")

        assert list(outputs) == ["double", "square"]

    def test_missing_variable(self, tmp_path: Path) -> None:
        script = tmp_path / "discover_missing.py"
        script.write_text(SCRIPT)
        with pytest.raises(ValueError, match="Could not find graph 'nope'"):
            load_graph_from_script(script, "nope")

    def test_wrong_type(self, tmp_path: Path) -> None:
        script = tmp_path / "discover_wrong.py"
        script.write_text(SCRIPT)
        with pytest.raises(TypeError):
            load_graph_from_script(script, "not_a_graph")

    def test_module_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "discover_module.py").write_text(SCRIPT)
        monkeypatch.syspath_prepend(str(tmp_path))

        outputs = load_graph_from_module_path("discover_module:named")

        assert set(outputs) == {"double", "square"}

    def test_module_path_requires_colon(self) -> None:
        with pytest.raises(ValueError, match="module.path:variable_name"):
            load_graph_from_module_path("discover_module")

    def test_from_source(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        script = tmp_path / "discover_source.py"
        script.write_text(SCRIPT)
        monkeypatch.syspath_prepend(str(tmp_path))

        assert list(load_graph_from_source(ScriptSource(script=script, name="named"))) == ["double", "square"]
        assert list(load_graph_from_source(ModuleSource(module_path="discover_source:graph"))) == ["graph"]

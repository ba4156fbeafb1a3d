"""Tests for GraphView and graph algorithms."""

import pytest

import compgraph as cg
from compgraph._graph import GraphView, topological_sort


class TestTopologicalSort:
    """Tests for the topological_sort algorithm."""

    def test_empty_graph(self) -> None:
        assert topological_sort({}) == []

    def test_single_leaf(self) -> None:
        assert topological_sort({"a": []}) == ["a"]

    def test_arguments_come_first(self) -> None:
        assert topological_sort({"y": ["x1", "t"], "t": ["x2"]}) == ["x1", "x2", "t", "y"]

    def test_diamond(self) -> None:
        result = topological_sort({"d": ["b", "c"], "b": ["a"], "c": ["a"], "a": []})
        assert result[0] == "a"
        assert result[-1] == "d"
        assert set(result[1:3]) == {"b", "c"}

    def test_repeated_argument(self) -> None:
        assert topological_sort({"sq": ["x", "x"]}) == ["x", "sq"]

    def test_cycle_detection(self) -> None:
        with pytest.raises(ValueError, match="Cycle"):
            topological_sort({"a": ["b"], "b": ["a"]})

    def test_self_loop_detection(self) -> None:
        with pytest.raises(ValueError, match="Cycle"):
            topological_sort({"a": ["a"]})


@pytest.fixture
def graph() -> dict[str, cg.Computable]:
    x1 = cg.Input("x1")
    x2 = cg.Input("x2")
    x3 = cg.Input("x3")
    cube = cg.Power(x3, 3.0)
    inner = cg.Add(x2, cube)
    wave = cg.Sine(inner)
    scaled = cg.Multiply(x2, wave)
    root = cg.Add(x1, scaled)
    return {"x1": x1, "x2": x2, "x3": x3, "cube": cube, "inner": inner, "wave": wave, "scaled": scaled, "root": root}


class TestGraphViewConstruction:
    def test_collects_reachable_nodes(self, graph: dict[str, cg.Computable]) -> None:
        view = GraphView.from_roots(graph["root"])
        assert len(view) == 8
        for node in graph.values():
            assert node in view

    def test_shared_nodes_appear_once(self, graph: dict[str, cg.Computable]) -> None:
        view = GraphView.from_roots(graph["root"])
        assert view.nodes.count(graph["x2"]) == 1

    def test_discovery_order_starts_at_root(self, graph: dict[str, cg.Computable]) -> None:
        view = GraphView.from_roots(graph["root"])
        assert view.nodes[0] is graph["root"]
        assert view.nodes[1] is graph["x1"]

    def test_subgraph_from_interior_node(self, graph: dict[str, cg.Computable]) -> None:
        view = GraphView.from_roots(graph["inner"])
        assert set(view) == {graph["inner"], graph["x2"], graph["cube"], graph["x3"]}
        assert graph["root"] not in view

    def test_multiple_roots(self, graph: dict[str, cg.Computable]) -> None:
        other = cg.Add(graph["x3"], 1.0)
        view = GraphView.from_roots(graph["root"], other)
        assert view.roots == (graph["root"], other)
        assert other in view
        assert len(view) == 10

    def test_contains_rejects_foreign_node(self, graph: dict[str, cg.Computable]) -> None:
        view = GraphView.from_roots(graph["root"])
        assert cg.Input("x1") not in view


class TestGraphViewQueries:
    def test_arguments(self, graph: dict[str, cg.Computable]) -> None:
        view = GraphView.from_roots(graph["root"])
        assert view.arguments(graph["scaled"]) == (graph["x2"], graph["wave"])
        assert view.arguments(graph["x1"]) == ()

    def test_dependants(self, graph: dict[str, cg.Computable]) -> None:
        view = GraphView.from_roots(graph["root"])
        assert set(view.dependants(graph["x2"])) == {graph["inner"], graph["scaled"]}
        assert view.dependants(graph["root"]) == ()

    def test_dependants_restricted_to_view(self, graph: dict[str, cg.Computable]) -> None:
        view = GraphView.from_roots(graph["inner"])
        assert view.dependants(graph["x2"]) == (graph["inner"],)

    def test_inputs(self, graph: dict[str, cg.Computable]) -> None:
        view = GraphView.from_roots(graph["root"])
        assert [leaf.name for leaf in view.inputs()] == ["x1", "x2", "x3"]

    def test_input_by_name(self, graph: dict[str, cg.Computable]) -> None:
        view = GraphView.from_roots(graph["root"])
        assert view.input_by_name("x3") is graph["x3"]

    def test_input_by_name_missing(self, graph: dict[str, cg.Computable]) -> None:
        view = GraphView.from_roots(graph["root"])
        with pytest.raises(KeyError, match="No input named"):
            view.input_by_name("y")

    def test_input_by_name_ambiguous(self) -> None:
        root = cg.Add(cg.Input("x"), cg.Input("x"))
        view = GraphView.from_roots(root)
        with pytest.raises(ValueError, match="ambiguous"):
            view.input_by_name("x")

    def test_ancestors(self, graph: dict[str, cg.Computable]) -> None:
        view = GraphView.from_roots(graph["root"])
        assert view.ancestors(graph["inner"]) == frozenset({graph["x2"], graph["cube"], graph["x3"]})

    def test_descendants(self, graph: dict[str, cg.Computable]) -> None:
        view = GraphView.from_roots(graph["root"])
        assert view.descendants(graph["x1"]) == frozenset({graph["root"]})
        assert view.descendants(graph["x2"]) == frozenset(
            {graph["inner"], graph["wave"], graph["scaled"], graph["root"]},
        )

    def test_topological_order(self, graph: dict[str, cg.Computable]) -> None:
        view = GraphView.from_roots(graph["root"])
        order = view.topological_order()
        assert len(order) == len(view)
        for node in order:
            for arg in view.arguments(node):
                assert order.index(arg) < order.index(node)

    def test_cache_snapshot(self, graph: dict[str, cg.Computable]) -> None:
        view = GraphView.from_roots(graph["root"])
        leaves = {graph["x1"], graph["x2"], graph["x3"]}
        assert set(view.cached_nodes()) == leaves
        assert len(view.stale_nodes()) == 5

        graph["root"].compute()
        assert view.stale_nodes() == []

        graph["x1"].set(1.0)
        assert view.stale_nodes() == [graph["root"]]

    def test_constants_are_part_of_the_view(self) -> None:
        x = cg.Input("x")
        root = cg.Add(x, 1.0)
        view = GraphView.from_roots(root)
        assert len(view) == 3
        assert view.inputs() == [x]

"""Rich rendering utilities for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from compgraph._leaves import Constant, Input
from compgraph._utils import round_value

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from rich.console import Console

    from compgraph._eval import RunRecord
    from compgraph._node import Computable


def _format_value(value: float, precision: int) -> str:
    return repr(round_value(value, precision))


def node_label(node: Computable, precision: int) -> str:
    """Describe a node with its cache state, as rich markup."""
    if isinstance(node, Input):
        return f"[bold green]{escape(node.name)}[/bold green] = {_format_value(node.value, precision)}"
    if isinstance(node, Constant):
        return f"[dim]{_format_value(node.value, precision)}[/dim]"

    label = f"[bold]{escape(repr(node))}[/bold]"
    if node.has_cached_value():
        return f"{label} [green]cached[/green] {_format_value(node.get_cached_value(), precision)}"
    return f"{label} [yellow]stale[/yellow]"


def build_tree(name: str, root: Computable, precision: int) -> Tree:
    """Build a rich Tree of `root` and its arguments.

    A node reached more than once is expanded only at its first occurrence.
    """
    tree = Tree(f"[cyan]{escape(name)}[/cyan]: {node_label(root, precision)}")
    seen: set[int] = {id(root)}
    stack: list[tuple[Tree, Computable]] = [(tree, root)]

    while stack:
        branch, node = stack.pop()
        children: list[tuple[Tree, Computable]] = []
        for arg in node.arguments:
            if id(arg) in seen and arg.arguments:
                branch.add(f"{node_label(arg, precision)} [dim](shared)[/dim]")
                continue
            seen.add(id(arg))
            children.append((branch.add(node_label(arg, precision)), arg))
        stack.extend(reversed(children))

    return tree


def render_runs(runs: Sequence[RunRecord], precision: int, console: Console) -> None:
    """Render evaluation runs as a Rich table, one row per run."""
    if not runs:
        console.print("[dim]No runs[/dim]")
        return

    output_names = list(runs[0].outputs)
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Run", style="bold")
    table.add_column("Inputs", style="dim")
    for output_name in output_names:
        table.add_column(escape(output_name), justify="right")
    table.add_column("Recomputed", justify="right", style="yellow")

    for run in runs:
        changed = ", ".join(f"{escape(k)}={_format_value(v, precision)}" for k, v in run.inputs.items())
        table.add_row(
            escape(run.label),
            changed or "-",
            *(_format_value(run.outputs[n], precision) for n in output_names),
            str(run.recomputed),
        )

    console.print(table)


def render_outputs(outputs: Mapping[str, Computable], precision: int, console: Console) -> None:
    """Render the structure of each output as a Rich tree."""
    for name, root in outputs.items():
        console.print(build_tree(name, root, precision))

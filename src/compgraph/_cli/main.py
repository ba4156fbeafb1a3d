import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from compgraph._eval import run_document
from compgraph._io import InputFileError, export_runs_to_toml, load_input_document
from compgraph._node import Computable

from .config import CompgraphConfig, ConfigError, ModuleSource, ScriptSource, get_config
from .discover import load_graph_from_source
from .render import render_outputs, render_runs

app = typer.Typer()

logger = logging.getLogger(__name__)
# Console for stderr (info/errors)
err_console = Console(stderr=True)
# Console for stdout (results)
out_console = Console()


@app.callback()
def callback(
    *,
    verbose: bool = typer.Option(default=False, help="Enable verbose output"),
) -> None:
    """Lazily evaluated computation graphs."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Configure rich logging handler to output to stderr
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=err_console,
                show_time=False,
                show_path=verbose,
                rich_tracebacks=True,
            ),
        ],
    )


def _load_config() -> CompgraphConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e


def _load_outputs(path: str | None, graph_var: str | None, config: CompgraphConfig) -> dict[str, Computable]:
    """Load graph outputs from the command line argument, falling back to config."""
    if path is None:
        if config.graph is None:
            err_console.print("[red]Error: No graph given and no \\[tool.compgraph].graph in pyproject.toml[/red]")
            raise typer.Exit(code=1)
        source = config.graph
    elif ":" in path:
        source = ModuleSource(module_path=path)
    else:
        source = ScriptSource(script=Path(path), name=graph_var)

    match source:
        case ModuleSource(module_path=module_path):
            err_console.print(f"[cyan]Loading graph from module:[/cyan] {module_path}")
        case ScriptSource(script=script):
            err_console.print(f"[cyan]Loading graph from script:[/cyan] {script}")

    try:
        outputs = load_graph_from_source(source)
    except (ValueError, TypeError) as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e

    err_console.print(f"[cyan]Outputs:[/cyan] [bold]{escape(', '.join(outputs))}[/bold]")
    err_console.print()
    return outputs


@app.command("eval")
def evaluate(
    path: Annotated[
        str | None,
        typer.Argument(help="Path to Python script or module path (e.g., examples.trig:graph)"),
    ] = None,
    *,
    input: Annotated[  # noqa: A002
        Path | None,
        typer.Option("-i", "--input", help="Path to input values TOML file"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Path to output TOML file"),
    ] = None,
    graph_var: Annotated[
        str | None,
        typer.Option("--graph", help="Name of the graph variable (for script paths only)"),
    ] = None,
    precision: Annotated[
        int | None,
        typer.Option("--precision", min=0, help="Decimal places to round results to"),
    ] = None,
) -> None:
    """Apply input values to a graph and evaluate its outputs."""
    config = _load_config()
    err_console.print()

    outputs = _load_outputs(path, graph_var, config)

    input_path = input or config.inputs
    if input_path is None:
        err_console.print("[red]Error: No input file given and no \\[tool.compgraph].inputs in pyproject.toml[/red]")
        raise typer.Exit(code=1)
    output_path = output or config.output
    digits = config.precision if precision is None else precision

    err_console.print(f"[cyan]Loading input from:[/cyan] {input_path}")
    try:
        document = load_input_document(input_path)
        runs = run_document(outputs, document)
    except InputFileError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1) from e
    err_console.print()

    render_runs(runs, digits, out_console)

    if output_path is not None:
        err_console.print()
        err_console.print(f"[cyan]Exporting results to:[/cyan] {output_path}")
        export_runs_to_toml(runs, output_path, digits)

    err_console.print()
    err_console.print("[green]✓ Evaluation complete[/green]")
    err_console.print()


@app.command()
def tree(
    path: Annotated[
        str | None,
        typer.Argument(help="Path to Python script or module path (e.g., examples.trig:graph)"),
    ] = None,
    *,
    graph_var: Annotated[
        str | None,
        typer.Option("--graph", help="Name of the graph variable (for script paths only)"),
    ] = None,
    input: Annotated[  # noqa: A002
        Path | None,
        typer.Option("-i", "--input", help="Evaluate with these input values before printing"),
    ] = None,
    precision: Annotated[
        int | None,
        typer.Option("--precision", min=0, help="Decimal places to round values to"),
    ] = None,
) -> None:
    """Show the structure and cache state of a graph."""
    config = _load_config()
    err_console.print()

    outputs = _load_outputs(path, graph_var, config)
    digits = config.precision if precision is None else precision

    if input is not None:
        try:
            run_document(outputs, load_input_document(input))
        except InputFileError as e:
            err_console.print(f"[red]Error: {escape(str(e))}[/red]")
            raise typer.Exit(code=1) from e

    render_outputs(outputs, digits, out_console)


def main() -> None:
    app()

"""Loading input values from TOML and exporting evaluation runs."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from ._eval import RunRecord
    from ._graph import GraphView
    from ._leaves import Input

logger = logging.getLogger(__name__)


class InputFileError(Exception):
    """Error in an input values file."""


class InputDocument(BaseModel):
    """Contents of an input values file.

    Attributes:
        inputs: Initial values, keyed by input name.
        steps: Follow-up mutations, applied and evaluated one after another.

    """

    model_config = ConfigDict(extra="forbid", strict=True, frozen=True)

    inputs: dict[str, float] = Field(default_factory=dict)
    steps: list[dict[str, float]] = Field(default_factory=list)


def toml_to_input_document(toml_contents: Mapping[str, Any]) -> InputDocument:
    """Validate parsed TOML contents as an InputDocument.

    Raises:
        InputFileError: If the contents do not match the expected layout.

    """
    try:
        return InputDocument.model_validate(dict(toml_contents))
    except ValidationError as e:
        msg = f"Invalid input values: {e}"
        raise InputFileError(msg) from e


def load_input_document(input_path: Path | str) -> InputDocument:
    """Read and validate an input values TOML file.

    Args:
        input_path: Path to the TOML file.

    Returns:
        The validated InputDocument.

    Raises:
        InputFileError: If the file is missing, is not valid TOML, or has the wrong layout.

    """
    input_path = Path(input_path)
    try:
        with input_path.open("rb") as f:
            toml_contents = tomllib.load(f)
    except FileNotFoundError as e:
        msg = f"Input file not found: {input_path}"
        raise InputFileError(msg) from e
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {input_path}: {e}"
        raise InputFileError(msg) from e

    document = toml_to_input_document(toml_contents)
    logger.debug("Loaded %d input value(s) and %d step(s) from %s", len(document.inputs), len(document.steps), input_path)
    return document


def apply_inputs(view: GraphView, values: Mapping[str, float]) -> list[Input]:
    """Set input leaves of `view` by name.

    All names are resolved before any value is set, so a bad name leaves the
    graph untouched.

    Args:
        view: Graph whose inputs are looked up by name.
        values: New values keyed by input name.

    Returns:
        The input leaves that were set, in the order of `values`.

    Raises:
        InputFileError: If a name is unknown or shared by several inputs.

    """
    resolved: list[tuple[Input, float]] = []
    for name, value in values.items():
        try:
            leaf = view.input_by_name(name)
        except KeyError:
            msg = f"Unknown input {name!r}"
            raise InputFileError(msg) from None
        except ValueError as e:
            raise InputFileError(str(e)) from e
        resolved.append((leaf, value))

    for leaf, value in resolved:
        leaf.set(value)
    return [leaf for leaf, _ in resolved]


def runs_to_dict(runs: Sequence[RunRecord], precision: int | None = None) -> dict[str, Any]:
    """Convert evaluation runs to a TOML-ready dictionary.

    Args:
        runs: Runs in the order they were evaluated.
        precision: Decimal places to round outputs to, or None to keep full precision.

    Returns:
        ``{"runs": [{"label", "inputs", "outputs", "recomputed"}, ...]}``

    """
    from ._utils import round_value  # noqa: PLC0415

    exported: list[dict[str, Any]] = []
    for run in runs:
        outputs = dict(run.outputs)
        if precision is not None:
            outputs = {name: round_value(value, precision) for name, value in outputs.items()}
        exported.append(
            {
                "label": run.label,
                "inputs": dict(run.inputs),
                "outputs": outputs,
                "recomputed": run.recomputed,
            },
        )
    return {"runs": exported}


def export_runs_to_toml(runs: Sequence[RunRecord], output_path: Path | str, precision: int | None = None) -> None:
    """Write evaluation runs to a TOML file."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("wb") as f:
        tomli_w.dump(runs_to_dict(runs, precision), f)

    logger.debug("Exported %d run(s) to %s", len(runs), output_path)

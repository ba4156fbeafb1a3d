"""Evaluating named graph outputs and recording what was recomputed."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ._graph import GraphView
from ._io import apply_inputs

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ._io import InputDocument
    from ._node import Computable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunRecord:
    """One evaluation of the graph outputs.

    Attributes:
        label: Human-readable name of the run ("initial", "step 1", ...).
        inputs: Input values applied just before this run.
        outputs: Computed value of each named output.
        recomputed: Number of nodes that were stale and had to be evaluated.

    """

    label: str
    inputs: dict[str, float] = field(default_factory=dict)
    outputs: dict[str, float] = field(default_factory=dict)
    recomputed: int = 0


def evaluate_outputs(
    outputs: Mapping[str, Computable],
    *,
    label: str = "",
    inputs: Mapping[str, float] | None = None,
    view: GraphView | None = None,
) -> RunRecord:
    """Compute every output and report how much of the graph was re-evaluated.

    Args:
        outputs: Graph outputs keyed by display name.
        label: Name for the resulting record.
        inputs: Input values that were applied before this run, for the record.
        view: A view over `outputs`, built on demand when omitted.

    Returns:
        The RunRecord for this evaluation.

    """
    if view is None:
        view = GraphView.from_roots(*outputs.values())
    stale = view.stale_nodes()
    logger.debug("%d of %d node(s) stale before run %r", len(stale), len(view), label)

    values = {name: node.compute() for name, node in outputs.items()}
    return RunRecord(
        label=label,
        inputs=dict(inputs or {}),
        outputs=values,
        recomputed=len(stale),
    )


def run_document(outputs: Mapping[str, Computable], document: InputDocument) -> list[RunRecord]:
    """Apply an input document to a graph and evaluate after each change.

    The initial ``inputs`` are applied and evaluated first, then each entry of
    ``steps`` in order. Only nodes downstream of the inputs a step touches are
    recomputed for that step.

    Args:
        outputs: Graph outputs keyed by display name.
        document: The input values to apply.

    Returns:
        One RunRecord for the initial values, then one per step.

    Raises:
        InputFileError: If the document names an unknown or ambiguous input.

    """
    view = GraphView.from_roots(*outputs.values())

    unset = [leaf.name for leaf in view.inputs() if leaf.name not in document.inputs]
    if unset:
        logger.warning("No initial value for input(s) %s; keeping current values", ", ".join(unset))

    apply_inputs(view, document.inputs)
    runs = [evaluate_outputs(outputs, label="initial", inputs=document.inputs, view=view)]

    for index, step in enumerate(document.steps, start=1):
        apply_inputs(view, step)
        runs.append(evaluate_outputs(outputs, label=f"step {index}", inputs=step, view=view))

    return runs

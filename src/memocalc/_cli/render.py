"""Rich rendering of expression trees and evaluation summaries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from memocalc._node import Internal, Leaf

if TYPE_CHECKING:
    from collections.abc import Iterator

    from memocalc._eval import TraceStep
    from memocalc._io import EvaluationReport
    from memocalc._node import Node

# Values longer than this are elided in tree labels
_MAX_VALUE_WIDTH = 40


def _format_value(value: int) -> str:
    text = str(value)
    if len(text) > _MAX_VALUE_WIDTH:
        half = (_MAX_VALUE_WIDTH - 3) // 2
        text = f"{text[:half]}...{text[-half:]} ({len(text)} digits)"
    return escape(text)


def _step_label(step: TraceStep) -> str:
    status = "[green]hit[/green]" if step.hit else "[yellow]miss[/yellow]"
    operation = step.node.operation
    return f"[bold cyan]{escape(operation.symbol)}[/bold cyan] {operation.name.lower()} = {_format_value(step.result)} ({status})"


def _add_node(parent: Tree, node: Node, steps: Iterator[TraceStep]) -> None:
    # Labels are filled in after the children, as steps arrive in post-order
    branch = parent.add("")
    match node:
        case Leaf(value=value):
            branch.label = f"[dim]{_format_value(value)}[/dim]"
        case Internal(left=left, right=right):
            _add_node(branch, left, steps)
            _add_node(branch, right, steps)
            branch.label = _step_label(next(steps))


def render_trace_tree(node: Node, steps: tuple[TraceStep, ...], title: str = "expression") -> Tree:
    """Render an evaluated tree, annotating internal nodes with their values.

    Args:
        node: The root of the evaluated tree.
        steps: The steps returned by `memocalc.trace` for `node`.
        title: Label of the tree root.

    Returns:
        A Rich Tree with one branch per node.

    """
    tree = Tree(f"[bold]{escape(title)}[/bold]")
    _add_node(tree, node, iter(steps))
    return tree


def render_summary(report: EvaluationReport) -> Panel:
    """Render the headline numbers of an evaluation."""
    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Result", _format_value(report.result))
    table.add_row("Cache hits", str(report.hits))
    table.add_row("Calculations", str(report.calculations))
    table.add_row("Nodes", str(report.nodes))

    return Panel(table, title="[bold]Evaluation[/bold]", border_style="cyan")

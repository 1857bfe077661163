import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from memocalc._errors import MemocalcError
from memocalc._eval import evaluate, trace
from memocalc._io import build_report, export_to_toml
from memocalc._node import Node

from .config import ConfigError, ExpressionRef, MemocalcConfig, get_config
from .discover import DiscoveryError, load_expression
from .render import render_summary, render_trace_tree

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
    """Memoized arithmetic-expression evaluator."""
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


def _load_config() -> MemocalcConfig:
    try:
        return get_config()
    except ConfigError as e:
        err_console.print(f"[red]✗ Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e


def _load_expression(path: str | None, name: str | None, config: MemocalcConfig) -> Node:
    """Load the tree named on the command line, falling back to config."""
    if path is not None:
        ref = ExpressionRef.parse(path, name)
    elif config.expression is not None:
        ref = config.expression
    else:
        err_console.print(
            "[red]✗ No expression given.[/red] Pass a script or module path, "
            "or set [bold]\\[tool.memocalc].expression[/bold] in pyproject.toml",
        )
        raise typer.Exit(code=1)

    err_console.print(f"[cyan]Loading expression from[/cyan] {escape(str(ref))}")
    try:
        return load_expression(ref)
    except (DiscoveryError, MemocalcError) as e:
        logger.debug("Loading failed", exc_info=True)
        err_console.print(f"[red]✗ Could not load expression:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e


PathArgument = Annotated[
    str | None,
    typer.Argument(help="Script path or module path, optionally with :variable (e.g., examples.scenarios:simple)"),
]
NameOption = Annotated[
    str | None,
    typer.Option("--name", help="Name of the variable holding the expression tree"),
]


@app.command(name="eval")
def eval_command(
    path: PathArgument = None,
    *,
    name: NameOption = None,
    output: Annotated[
        Path | None,
        typer.Option("-o", "--output", help="Path to output TOML report"),
    ] = None,
) -> None:
    """Evaluate an expression tree and print its value."""
    config = _load_config()
    expression = _load_expression(path, name, config)

    try:
        cache, result = evaluate(expression)
    except MemocalcError as e:
        logger.debug("Evaluation failed", exc_info=True)
        err_console.print(f"[red]✗ Evaluation failed:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    report = build_report(expression, cache, result)
    err_console.print(render_summary(report))

    output_path = output if output is not None else config.output
    if output_path is not None:
        export_to_toml(report, output_path)
        err_console.print(f"[green]✓ Report written to[/green] {output_path}")

    out_console.print(str(result), soft_wrap=True, highlight=False)


@app.command()
def show(
    path: PathArgument = None,
    *,
    name: NameOption = None,
) -> None:
    """Show an expression tree with the value and cache status of every node."""
    config = _load_config()
    expression = _load_expression(path, name, config)

    try:
        cache, _, steps = trace(expression)
    except MemocalcError as e:
        logger.debug("Evaluation failed", exc_info=True)
        err_console.print(f"[red]✗ Evaluation failed:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    title = f"{len(cache)} calculations, {cache.hits} cache hits"
    out_console.print(render_trace_tree(expression, steps, title=title))


def main() -> None:
    app()


if __name__ == "__main__":
    main()

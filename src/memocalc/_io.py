"""Evaluation reports and their TOML export."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, PlainSerializer

if TYPE_CHECKING:
    from ._cache import Cache
    from ._node import Node

logger = logging.getLogger(__name__)

# TOML integers are limited to 64 bits, so arbitrary-precision values are
# written as decimal strings.
BigInt = Annotated[int, PlainSerializer(str, return_type=str)]


class ReportEntry(BaseModel):
    """One memoized calculation."""

    model_config = ConfigDict(frozen=True)

    operation: str
    operands: tuple[BigInt, BigInt]
    result: BigInt


class EvaluationReport(BaseModel):
    """Summary of one evaluation.

    Attributes:
        expression: Infix rendering of the evaluated tree.
        result: The value of the tree.
        hits: Cache hits recorded by the final cache.
        calculations: Number of memoized calculations in the final cache.
        nodes: Number of nodes in the tree.
        entries: The memoized calculations, sorted by operation and operands.

    """

    model_config = ConfigDict(frozen=True)

    expression: str
    result: BigInt
    hits: int
    calculations: int
    nodes: int
    entries: list[ReportEntry] = []


def build_report(node: Node, cache: Cache, result: int) -> EvaluationReport:
    """Build a report from an evaluated tree and its final cache."""
    entries = [
        ReportEntry(
            operation=calculation.operation.name,
            operands=calculation.operands,
            result=value,
        )
        for calculation, value in sorted(
            cache.items(),
            key=lambda item: (item[0].operation.name, item[0].operands),
        )
    ]
    return EvaluationReport(
        expression=str(node),
        result=result,
        hits=cache.hits,
        calculations=len(cache),
        nodes=node.size(),
        entries=entries,
    )


def export_to_toml(report: EvaluationReport, output_path: Path | str) -> None:
    """Write `report` to a TOML file.

    Args:
        report: The report to write.
        output_path: Destination file; parent directories must exist.

    """
    toml_data = report.model_dump(mode="python")

    output_path = Path(output_path)
    with output_path.open("wb") as f:
        tomli_w.dump(toml_data, f)

    logger.debug("Exported report to %s", output_path)

"""Canonical cache keys for binary calculations."""

from __future__ import annotations

from dataclasses import dataclass

from ._operation import Operation


@dataclass(frozen=True, slots=True)
class Calculation:
    """The application of an operation to two operand values.

    Calculations are value objects used as cache keys. Operands are
    canonicalized on construction: for a commutative operation they are
    stored as a sorted pair, so ``2 + 3`` and ``3 + 2`` are the same key. For
    a non-commutative operation the left/right order is preserved.

    Attributes:
        operation: The operation to apply.
        operands: The two operand values in canonical order.

    """

    operation: Operation
    operands: tuple[int, int]

    def __post_init__(self) -> None:
        left, right = self.operands
        if self.operation.is_commutative and right < left:
            # frozen dataclass
            object.__setattr__(self, "operands", (right, left))

    def calculate(self) -> int:
        """Compute the value of this calculation."""
        left, right = self.operands
        return self.operation.apply(left, right)

    def __str__(self) -> str:
        left, right = self.operands
        return f"{left} {self.operation.symbol} {right}"


def make_key(operation: Operation, left: int, right: int) -> Calculation:
    """Build the canonical cache key for ``left <operation> right``.

    Example:
        >>> make_key(Operation.ADD, 3, 2) == make_key(Operation.ADD, 2, 3)
        True
        >>> make_key(Operation.MODULO, 3, 2) == make_key(Operation.MODULO, 2, 3)
        False

    """
    return Calculation(operation=operation, operands=(left, right))

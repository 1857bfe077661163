"""Binary operations supported by expression trees."""

from enum import Enum, StrEnum, auto

from ._errors import DivisionError, InvalidExponentError

# Exponentiation results are reduced modulo the largest 63-bit signed integer
# so nested exponent towers stay bounded.
EXPONENT_MODULUS = 2**63 - 1

# Largest accepted exponent (a signed 32-bit integer).
MAX_EXPONENT = 2**31 - 1


class Commutativity(StrEnum):
    """Whether swapping the operands of an operation changes its result."""

    COMMUTATIVE = auto()
    NON_COMMUTATIVE = auto()


class Operation(Enum):
    """A binary operation over integers.

    Each member is a global constant tagged with its display symbol and its
    commutativity. The commutativity decides how calculation keys are
    canonicalized (see `memocalc.make_key`).

    Example:
        >>> Operation.ADD.apply(2, 3)
        5
        >>> Operation.MODULO.is_commutative
        False

    """

    ADD = ("+", Commutativity.COMMUTATIVE)
    MULTIPLY = ("*", Commutativity.COMMUTATIVE)
    MODULO = ("%", Commutativity.NON_COMMUTATIVE)
    EXPONENTIATE = ("^", Commutativity.NON_COMMUTATIVE)

    def __init__(self, symbol: str, commutativity: Commutativity) -> None:
        self.symbol = symbol
        self.commutativity = commutativity

    @property
    def is_commutative(self) -> bool:
        """Check if the operands of this operation can be swapped."""
        return self.commutativity is Commutativity.COMMUTATIVE

    def apply(self, left: int, right: int) -> int:
        """Apply the operation to two integers.

        Args:
            left: The left operand.
            right: The right operand.

        Returns:
            The result of the operation.

        Raises:
            DivisionError: If MODULO is applied with a zero right operand.
            InvalidExponentError: If EXPONENTIATE is applied with an exponent
                outside ``[0, MAX_EXPONENT]``.

        """
        match self:
            case Operation.ADD:
                return left + right
            case Operation.MULTIPLY:
                return left * right
            case Operation.MODULO:
                if right == 0:
                    msg = f"Modulo by zero: {left} % {right}"
                    raise DivisionError(msg)
                return left % right
            case Operation.EXPONENTIATE:
                if not 0 <= right <= MAX_EXPONENT:
                    msg = f"Exponent must be between 0 and {MAX_EXPONENT}, got {right}"
                    raise InvalidExponentError(msg)
                return pow(left, right, EXPONENT_MODULUS)

    def __repr__(self) -> str:
        return f"{type(self).__name__}.{self.name}"

"""Expression trees of binary integer operations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from ._errors import MalformedTreeError
from ._operation import Operation

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

T = TypeVar("T")


def _check_value(value: object) -> None:
    # bool is an int subclass but never a meaningful operand
    if not isinstance(value, int) or isinstance(value, bool):
        msg = f"Leaf value must be an int, got {type(value).__name__}"
        raise MalformedTreeError(msg)


def _check_child(operation: Operation, side: str, child: object) -> None:
    if child is None:
        msg = f"{operation.name} node is missing its {side} child"
        raise MalformedTreeError(msg)
    if not isinstance(child, Node):
        msg = f"{operation.name} node has a {side} child of type {type(child).__name__}, expected a Node"
        raise MalformedTreeError(msg)


def walk_post_order(root: object) -> Generator[object]:
    """Yield `root` and its descendants in post-order (left, right, parent).

    The walk keeps its own stack, so deep trees are not limited by the
    interpreter recursion limit. Anything that is not an `Internal` node is
    yielded as a leaf; validating it is up to the caller.
    """
    stack: list[tuple[object, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if isinstance(node, Internal) and not expanded:
            stack.append((node, True))
            stack.append((node.right, False))
            stack.append((node.left, False))
        else:
            yield node


def _fold(root: Internal, leaf: Callable[[Leaf], T], internal: Callable[[Internal, T, T], T]) -> T:
    results: list[T] = []
    for node in walk_post_order(root):
        if isinstance(node, Internal):
            right = results.pop()
            left = results.pop()
            results.append(internal(node, left, right))
        else:
            results.append(leaf(node))  # type: ignore[arg-type]
    return results.pop()


@dataclass(frozen=True, slots=True)
class Leaf:
    """A constant integer value.

    Attributes:
        value: The constant.

    """

    value: int

    def __post_init__(self) -> None:
        _check_value(self.value)

    def iter_nodes(self) -> Generator[Node]:
        """Yield this node (a leaf has no children)."""
        yield self

    def size(self) -> int:
        return 1

    def depth(self) -> int:
        return 1

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class Internal:
    """An operation applied to the values of two child nodes.

    Attributes:
        operation: The operation to apply.
        left: The node producing the left operand.
        right: The node producing the right operand.

    """

    operation: Operation
    left: Node
    right: Node

    def __post_init__(self) -> None:
        if not isinstance(self.operation, Operation):
            msg = f"Internal node operation must be an Operation, got {type(self.operation).__name__}"
            raise MalformedTreeError(msg)
        _check_child(self.operation, "left", self.left)
        _check_child(self.operation, "right", self.right)

    def iter_nodes(self) -> Generator[Node]:
        """Yield all nodes of this subtree in post-order (left, right, self).

        This is the order in which evaluation reaches the nodes.
        """
        yield from walk_post_order(self)  # type: ignore[misc]

    def size(self) -> int:
        """Count the nodes in this subtree."""
        return sum(1 for _ in walk_post_order(self))

    def depth(self) -> int:
        """Length of the longest path from this node down to a leaf, in nodes."""
        return _fold(self, lambda _: 1, lambda _, left, right: 1 + max(left, right))

    def __str__(self) -> str:
        return _fold(self, str, lambda node, left, right: f"({left} {node.operation.symbol} {right})")


Node = Leaf | Internal


def constant(value: int) -> Node:
    """Build a leaf holding `value`."""
    return Leaf(value)


def add(left: Node, right: Node) -> Node:
    """Build a node computing ``left + right``."""
    return Internal(Operation.ADD, left, right)


def multiply(left: Node, right: Node) -> Node:
    """Build a node computing ``left * right``."""
    return Internal(Operation.MULTIPLY, left, right)


def modulo(left: Node, right: Node) -> Node:
    """Build a node computing ``left % right``."""
    return Internal(Operation.MODULO, left, right)


def exponentiate(left: Node, right: Node) -> Node:
    """Build a node computing ``left ** right`` reduced by `EXPONENT_MODULUS`."""
    return Internal(Operation.EXPONENTIATE, left, right)

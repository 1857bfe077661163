"""Memoized evaluation of expression trees."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ._cache import Cache
from ._calculation import Calculation, make_key
from ._errors import MalformedTreeError
from ._node import Internal, Leaf, Node, walk_post_order
from ._state import State

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TraceStep:
    """The cache lookup performed for one internal node.

    Attributes:
        node: The internal node.
        calculation: The canonical key looked up for the node.
        result: The node's value.
        hit: Whether the value came from the cache.

    """

    node: Internal
    calculation: Calculation
    result: int
    hit: bool


def _thread(node: Node, cache: Cache, on_step: Callable[[TraceStep], None] | None = None) -> tuple[Cache, int]:
    # Operand stack; an internal node pops its right, then its left operand.
    values: list[int] = []
    for current in walk_post_order(node):
        match current:
            case Leaf(value=value):
                values.append(value)
            case Internal(operation=operation):
                right = values.pop()
                left = values.pop()
                calculation = make_key(operation, left, right)
                next_cache, result = cache.lookup_or_compute(calculation)
                if on_step is not None:
                    on_step(TraceStep(current, calculation, result, hit=next_cache.hits > cache.hits))
                cache = next_cache
                values.append(result)
            case _:
                msg = f"Cannot evaluate {type(current).__name__}, expected a Leaf or Internal node"
                raise MalformedTreeError(msg)
    return cache, values.pop()


def calculate(node: Node) -> State[Cache, int]:
    """Build the state-threading step that evaluates `node`.

    Running the step with a cache evaluates the left child, then the right
    child with the cache produced by the left one, and finally looks up (or
    computes and stores) the node's own calculation.

    Raises:
        MalformedTreeError: When run, if `node` or any descendant is not a Node.

    """
    return State(lambda cache: _thread(node, cache))


def evaluate(node: Node, cache: Cache | None = None) -> tuple[Cache, int]:
    """Evaluate an expression tree with memoization.

    Args:
        node: The root of the tree.
        cache: Starting cache. Defaults to an empty cache. Pass the cache of
            an earlier evaluation to reuse its memoized results.

    Returns:
        A tuple ``(final_cache, result)``. ``final_cache.hits`` counts the
        cache hits accumulated on top of the starting cache.

    Raises:
        DivisionError: On modulo by zero.
        InvalidExponentError: On a negative or out of range exponent.
        MalformedTreeError: If the tree is structurally invalid.

    Example:
        >>> cache, result = evaluate(add(constant(2), constant(3)))
        >>> result, cache.hits
        (5, 0)

    """
    start = Cache.empty() if cache is None else cache
    logger.debug("Evaluating with %d cached calculations", len(start))
    final_cache, result = calculate(node).run(start)
    logger.debug(
        "Evaluation finished: result=%d, hits=%d, calculations=%d",
        result,
        final_cache.hits - start.hits,
        len(final_cache),
    )
    return final_cache, result


def trace(node: Node, cache: Cache | None = None) -> tuple[Cache, int, tuple[TraceStep, ...]]:
    """Evaluate `node` like `evaluate`, also recording every cache lookup.

    Steps are returned in evaluation order, i.e. post-order over the
    internal nodes of the tree.
    """
    steps: list[TraceStep] = []
    final_cache, result = _thread(node, Cache.empty() if cache is None else cache, steps.append)
    return final_cache, result, tuple(steps)

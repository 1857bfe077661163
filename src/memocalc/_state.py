"""State-threading steps.

A `State[S, A]` wraps a function ``S -> (S, A)``: it consumes a state, and
produces the next state together with a value. Steps are sequenced with
`State.flat_map`, which runs one step and feeds its resulting state into the
next, so code can thread a state value through a computation without any
shared mutable variable.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

S = TypeVar("S")
A = TypeVar("A")
B = TypeVar("B")
T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class State(Generic[S, A]):
    """A step from a state to a new state and a value.

    Example:
        >>> counter = State(lambda n: (n + 1, n))
        >>> both = counter.flat_map(lambda a: counter.map(lambda b: (a, b)))
        >>> both.run(10)
        (12, (10, 11))

    """

    run: Callable[[S], tuple[S, A]]

    @staticmethod
    def pure(value: B) -> State[T, B]:
        """Create a step that returns `value` and leaves the state untouched."""
        return State(lambda state: (state, value))

    def map(self, function: Callable[[A], B]) -> State[S, B]:
        """Create a step that transforms this step's value with `function`."""

        def step(state: S) -> tuple[S, B]:
            next_state, value = self.run(state)
            return next_state, function(value)

        return State(step)

    def flat_map(self, function: Callable[[A], State[S, B]]) -> State[S, B]:
        """Create a step that runs this step, then the step chosen by `function`.

        The state produced by this step is the input state of the next one.
        """

        def step(state: S) -> tuple[S, B]:
            next_state, value = self.run(state)
            return function(value).run(next_state)

        return State(step)

    and_then = flat_map

    def __call__(self, state: S) -> tuple[S, A]:
        return self.run(state)

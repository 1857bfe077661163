"""Immutable cache of calculation results."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from ._pmap import PersistentMap

if TYPE_CHECKING:
    from collections.abc import Callable, ItemsView

    from ._calculation import Calculation

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Cache:
    """Memoized calculation results plus the number of cache hits.

    A Cache is never mutated. `lookup_or_compute` returns a new Cache that
    shares its entries with the receiver, so a reference to an older Cache
    keeps observing the older entries and hit count.

    Attributes:
        entries: Persistent mapping from calculation keys to their results.
        hits: Number of lookups answered from `entries` so far.

    """

    entries: PersistentMap[Calculation, int] = field(default_factory=PersistentMap)
    hits: int = 0

    @classmethod
    def empty(cls) -> Cache:
        """Create a cache with no entries and a zero hit count."""
        return cls()

    def lookup_or_compute(
        self,
        calculation: Calculation,
        compute: Callable[[Calculation], int] | None = None,
    ) -> tuple[Cache, int]:
        """Look up `calculation`, computing and storing it on a miss.

        Args:
            calculation: The cache key.
            compute: Function producing the result on a miss. Defaults to
                calling `Calculation.calculate` on the key.

        Returns:
            A tuple ``(cache, result)``. On a hit the cache is the receiver
            with `hits` incremented; on a miss it is the receiver extended
            with ``calculation -> result``.

        """
        cached = self.entries.get(calculation)
        if cached is not None:
            logger.debug("Cache hit: %s = %d", calculation, cached)
            return replace(self, hits=self.hits + 1), cached

        result = calculation.calculate() if compute is None else compute(calculation)
        logger.debug("Cache miss: %s = %d", calculation, result)
        return replace(self, entries=self.entries.set(calculation, result)), result

    def get(self, calculation: Calculation) -> int | None:
        """Get the stored result for `calculation`, or None if absent."""
        return self.entries.get(calculation)

    def items(self) -> ItemsView[Calculation, int]:
        """Iterate over memoized (calculation, result) pairs."""
        return self.entries.items()

    def __contains__(self, calculation: object) -> bool:
        return calculation in self.entries

    def __len__(self) -> int:
        return len(self.entries)

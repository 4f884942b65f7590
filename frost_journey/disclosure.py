"""Bounded disclosure state: the artifact counter and the phrase dismissal set."""

from __future__ import annotations

import logging

from frost_journey.models import CounterState, DismissalState

logger = logging.getLogger(__name__)


class DisclosureCounter:
    """Counts revealed items up to total.

    advance() reveals one more item and returns True. Once every item is
    shown, further calls return False ("exhausted") and change nothing.
    """

    def __init__(self, total: int, initial: int = 0) -> None:
        if total < 0 or not 0 <= initial <= total:
            raise ValueError(f"invalid counter bounds: initial={initial} total={total}")
        self.total = total
        self._initial = initial
        self.shown = initial

    @property
    def exhausted(self) -> bool:
        return self.shown >= self.total

    def advance(self) -> bool:
        if self.exhausted:
            logger.debug("counter exhausted at %d/%d", self.shown, self.total)
            return False
        self.shown += 1
        return True

    def reset(self) -> None:
        self.shown = self._initial

    def state(self) -> CounterState:
        return CounterState(shown=self.shown, total=self.total)


class DismissalSet:
    """Tracks which of total indices have been dismissed."""

    def __init__(self, total: int) -> None:
        if total < 0:
            raise ValueError("total must be non-negative")
        self.total = total
        self._dismissed: set[int] = set()

    @property
    def dismissed(self) -> frozenset[int]:
        return frozenset(self._dismissed)

    @property
    def complete(self) -> bool:
        return len(self._dismissed) == self.total

    def dismiss(self, index: int) -> bool:
        """Dismiss index (idempotent) and return whether the set is now complete.

        Raises IndexError for an index outside [0, total).
        """
        if not 0 <= index < self.total:
            raise IndexError(f"phrase index {index} out of range 0..{self.total - 1}")
        self._dismissed.add(index)
        return self.complete

    def reset(self) -> None:
        self._dismissed.clear()

    def state(self) -> DismissalState:
        return DismissalState(dismissed=sorted(self._dismissed), total=self.total)

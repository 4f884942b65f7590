"""Timed reveal chains.

A chain is an ordered list of (flag, delay_ms) pairs. start(anchor) arms one
independent one-shot timer per entry, due at anchor + delay. The anchor may
lie in the past (a chain anchored to scene entry but started later), in
which case overdue entries fire on the next scheduler turn.

Flags only ever become true in declaration order: firing entry i also sets
every earlier flag, so no flag can be observed before its predecessor.
cancel() disarms every pending timer and clears all flags.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import partial

from frost_journey.clock import Scheduler, Scope

logger = logging.getLogger(__name__)

ChainDef = Sequence[tuple[str, float]]


class RevealChain:
    def __init__(self, scheduler: Scheduler, chain_def: ChainDef, name: str = "") -> None:
        names = [flag for flag, _ in chain_def]
        if len(set(names)) != len(names):
            raise ValueError(f"duplicate flag in chain {name!r}: {names}")
        delays = [delay for _, delay in chain_def]
        if any(b < a for a, b in zip(delays, delays[1:])):
            raise ValueError(f"chain {name!r} delays must be non-decreasing: {delays}")
        self.name = name
        self._clock = scheduler
        self._steps = list(chain_def)
        self._scope = Scope(scheduler, f"chain:{name}")
        self._flags: dict[str, bool] = dict.fromkeys(names, False)
        self.anchor: float | None = None

    @property
    def flags(self) -> dict[str, bool]:
        return dict(self._flags)

    def is_shown(self, flag: str) -> bool:
        return self._flags[flag]

    @property
    def started(self) -> bool:
        return self.anchor is not None

    @property
    def complete(self) -> bool:
        return all(self._flags.values())

    def start(self, anchor: float | None = None) -> None:
        """Arm the chain relative to anchor (default: now). Restarts a running chain."""
        self.cancel()
        now = self._clock.now()
        self.anchor = now if anchor is None else anchor
        for index, (_, delay) in enumerate(self._steps):
            remaining = max(0.0, self.anchor + delay - now)
            self._scope.call_later(remaining, partial(self._fire, index))
        logger.debug("chain %s armed at %.0f (anchor %.0f)", self.name, now, self.anchor)

    def cancel(self) -> None:
        self._scope.cancel_all()
        for flag in self._flags:
            self._flags[flag] = False
        self.anchor = None

    def _fire(self, index: int) -> None:
        for flag, _ in self._steps[: index + 1]:
            self._flags[flag] = True
        logger.debug("chain %s revealed %s", self.name, self._steps[index][0])

"""Sustained-press progress tracker.

Holding the survey button maps elapsed wall-clock time linearly onto a
0–100 value. The value is a pure function of time since start(), so the
sampling rate only affects how often listeners see updates, never when the
hold completes: a one-shot deadline timer fires at exactly start + duration.

Releasing before completion forfeits all progress. Completion is terminal
until reset().
"""

from __future__ import annotations

import logging

from frost_journey.clock import Scheduler, Scope
from frost_journey.models import ProgressState

logger = logging.getLogger(__name__)


class LongPressTracker:
    def __init__(
        self,
        scheduler: Scheduler,
        duration_ms: float = 5000,
        sample_ms: float = 16,
    ) -> None:
        if duration_ms <= 0:
            raise ValueError("duration_ms must be positive")
        self._clock = scheduler
        self._scope = Scope(scheduler, "long-press")
        self._duration = duration_ms
        self._sample_ms = sample_ms
        self._started_at: float | None = None
        self.holding = False
        self.value = 0.0
        self.completed = False

    def start(self) -> None:
        if self.completed or self.holding:
            return
        self.holding = True
        self.value = 0.0
        self._started_at = self._clock.now()
        self._scope.call_every(self._sample_ms, self._sample)
        self._scope.call_later(self._duration, self._complete)
        logger.debug("long press started at %.0f", self._started_at)

    def stop(self) -> None:
        if self.completed:
            return
        if self.holding:
            # a release that lands after the deadline still completes the press
            logger.debug("long press released at %.1f%%", self.tick())
            if self.completed:
                return
        self._scope.cancel_all()
        self.holding = False
        self.value = 0.0
        self._started_at = None

    def tick(self, now: float | None = None) -> float:
        """Sample the hold at now (default: the scheduler clock) and return the value."""
        if not self.holding or self._started_at is None:
            return self.value
        if now is None:
            now = self._clock.now()
        elapsed = now - self._started_at
        value = min(100.0, 100.0 * elapsed / self._duration)
        self.value = max(self.value, value)
        if self.value >= 100.0:
            self._complete()
        return self.value

    def reset(self) -> None:
        self._scope.cancel_all()
        self.holding = False
        self.value = 0.0
        self.completed = False
        self._started_at = None

    def state(self) -> ProgressState:
        return ProgressState(holding=self.holding, value=self.value, completed=self.completed)

    def _sample(self) -> bool:
        self.tick()
        return self.holding

    def _complete(self) -> None:
        if self.completed:
            return
        self._scope.cancel_all()
        self.value = 100.0
        self.completed = True
        self.holding = False
        self._started_at = None
        logger.info("long press completed")

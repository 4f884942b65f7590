"""Ambient audio collaborator.

Playback devices live outside the engine. The engine only needs play()
(idempotent while already playing) and stop() at teardown.
"""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class AudioPlayer(Protocol):
    @property
    def is_playing(self) -> bool: ...

    def play(self) -> None: ...

    def stop(self) -> None: ...


class NullAudio:
    """Silent player that only tracks state. Counts real starts in `plays`."""

    def __init__(self) -> None:
        self._playing = False
        self.plays = 0

    @property
    def is_playing(self) -> bool:
        return self._playing

    def play(self) -> None:
        if self._playing:
            return
        self._playing = True
        self.plays += 1
        logger.debug("ambient audio started")

    def stop(self) -> None:
        if self._playing:
            logger.debug("ambient audio stopped")
        self._playing = False

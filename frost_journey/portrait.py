"""Portrait loading for the conversation scene.

The portrait is requested the first time the conversation scene is entered
without one held. Its arrival is the anchor of the conversation reveal
chain; on failure the scene carries on without a portrait.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from frost_journey import prompts
from frost_journey.generation import GenerationError, GenerationService

logger = logging.getLogger(__name__)


class PortraitLoader:
    def __init__(
        self,
        service: GenerationService,
        prompt: str = prompts.IMAGE_PROMPT,
        timeout_ms: float | None = 30000,
    ) -> None:
        self._service = service
        self._prompt = prompt
        self._timeout = timeout_ms
        self._epoch = 0
        self._task: asyncio.Task | None = None
        self.image: str | None = None

    @property
    def loading(self) -> bool:
        return self._task is not None and not self._task.done()

    def load(self, on_done: Callable[[bool], None]) -> None:
        """Ensure a portrait is held, then call on_done(True) or on_done(False).

        If the portrait is already held, on_done(True) runs immediately.
        A superseded request (see cancel()) never calls on_done.
        """
        if self.image is not None:
            on_done(True)
            return
        if self.loading:
            self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._fetch(self._epoch, on_done))

    async def _fetch(self, epoch: int, on_done: Callable[[bool], None]) -> None:
        timeout = None if self._timeout is None else self._timeout / 1000.0
        try:
            image = await asyncio.wait_for(self._service.generate_image(self._prompt), timeout=timeout)
        except (GenerationError, asyncio.TimeoutError) as e:
            if epoch != self._epoch:
                return
            logger.warning("portrait generation failed: %s", str(e) or type(e).__name__)
            on_done(False)
            return
        except Exception:
            if epoch != self._epoch:
                return
            logger.exception("unexpected error while generating the portrait")
            on_done(False)
            return
        if epoch != self._epoch:
            logger.warning("discarding stale portrait from epoch %d", epoch)
            return
        self.image = image
        logger.info("portrait ready (%d base64 chars)", len(image))
        on_done(True)

    def cancel(self) -> None:
        """Abandon an in-flight request. A portrait already held is kept."""
        self._epoch += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.debug("in-flight portrait request abandoned")
        self._task = None

    async def join(self) -> None:
        task = self._task
        if task is not None and not task.done():
            await asyncio.wait([task])

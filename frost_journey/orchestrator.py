"""Reply orchestration — one outbound request, then typewriter playback.

Lifecycle of a submission:
  1. submit() validates the input, sets status PENDING and spawns the
     request task. The reply area shows the "working" placeholder.
  2. The task awaits the generation service (bounded by a timeout).
       success → status SUCCESS, result = reply text (or the empty-reply fallback)
       failure → status FAILURE, result = the fixed fallback sentence
  3. Either way the result is typed out one character per cadence tick.
     When the last character is shown, status returns to IDLE.

Every submission carries the epoch current at submit time. cancel() bumps
the epoch, so a request that resolves after a scene exit or reset finds a
different epoch and is discarded without touching the session.
"""

from __future__ import annotations

import asyncio
import logging

from frost_journey import prompts, script
from frost_journey.clock import Scheduler, Scope
from frost_journey.generation import GenerationError, GenerationService
from frost_journey.models import GenerationState, GenerationStatus, SubmitResult
from frost_journey.prompts import PromptError

logger = logging.getLogger(__name__)


class ReplyOrchestrator:
    def __init__(
        self,
        service: GenerationService,
        scheduler: Scheduler,
        *,
        cadence_ms: float = 50,
        timeout_ms: float | None = 30000,
        temperature: float = script.REPLY_TEMPERATURE,
        history_limit: int = 8,
        placeholder: str = script.WORKING_PLACEHOLDER,
        fallback: str = script.REPLY_FALLBACK,
        empty_fallback: str = script.EMPTY_REPLY_FALLBACK,
    ) -> None:
        self._service = service
        self._clock = scheduler
        self._scope = Scope(scheduler, "typewriter")
        self._cadence = cadence_ms
        self._timeout = timeout_ms
        self._temperature = temperature
        self._history_limit = history_limit
        self._placeholder = placeholder
        self._fallback = fallback
        self._empty_fallback = empty_fallback

        self._epoch = 0
        self._task: asyncio.Task | None = None
        self._playback_started: float | None = None
        self.history: list[tuple[str, str]] = []

        self.status = GenerationStatus.IDLE
        self.input_text = ""
        self.result_text = ""
        self.is_playing_back = False

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    @property
    def busy(self) -> bool:
        return self.status == GenerationStatus.PENDING or self.is_playing_back

    def submit(self, prompt: str) -> SubmitResult:
        """Start a reply request. Must be called from inside the event loop."""
        if self.busy:
            logger.debug("submit rejected: status=%s playing=%s", self.status.value, self.is_playing_back)
            return SubmitResult.BUSY
        text = prompt.strip()
        if not text:
            return SubmitResult.EMPTY

        self.status = GenerationStatus.PENDING
        self.input_text = text
        self.result_text = ""
        self._playback_started = None
        self._task = asyncio.get_running_loop().create_task(self._request(self._epoch, text))
        logger.debug("reply submitted epoch=%d len=%d", self._epoch, len(text))
        return SubmitResult.ACCEPTED

    async def _request(self, epoch: int, text: str) -> None:
        try:
            prompt = prompts.reply_prompt(text, self.history)
            instructions = prompts.session_instructions()
            timeout = None if self._timeout is None else self._timeout / 1000.0
            reply = await asyncio.wait_for(
                self._service.generate_reply(prompt, instructions, self._temperature),
                timeout=timeout,
            )
        except (GenerationError, PromptError, asyncio.TimeoutError) as e:
            self._fail(epoch, e)
            return
        except Exception as e:
            # a misbehaving service must not leave the session stuck in PENDING
            logger.exception("unexpected error from generation service")
            self._fail(epoch, e)
            return

        if epoch != self._epoch:
            logger.warning("discarding stale reply from epoch %d (now %d)", epoch, self._epoch)
            return
        reply = (reply or "").strip()
        if not reply:
            logger.info("reply was empty, using fallback text")
            reply = self._empty_fallback
        self._deliver(GenerationStatus.SUCCESS, reply)

    def _fail(self, epoch: int, error: BaseException) -> None:
        if epoch != self._epoch:
            logger.debug("discarding failure from superseded epoch %d", epoch)
            return
        logger.warning("reply generation failed: %s", str(error) or type(error).__name__)
        self._deliver(GenerationStatus.FAILURE, self._fallback)

    def _deliver(self, status: GenerationStatus, text: str) -> None:
        self.status = status
        self.result_text = text
        self.history.append((self.input_text, text))
        del self.history[: -self._history_limit]
        self._start_playback()

    # ------------------------------------------------------------------
    # Typewriter playback
    # ------------------------------------------------------------------

    def _start_playback(self) -> None:
        self.is_playing_back = True
        self._playback_started = self._clock.now()
        if not self.result_text:
            self._finish_playback()
            return
        self._scope.call_every(self._cadence, self._type_next)

    def _type_next(self) -> bool:
        if self.revealed_chars() >= len(self.result_text):
            self._finish_playback()
            return False
        return True

    def _finish_playback(self) -> None:
        self._scope.cancel_all()
        self.is_playing_back = False
        self.status = GenerationStatus.IDLE
        logger.debug("playback finished, %d chars", len(self.result_text))

    def revealed_chars(self) -> int:
        """Characters of result_text visible right now."""
        if self._playback_started is None:
            return 0
        if not self.is_playing_back:
            return len(self.result_text)
        elapsed = self._clock.now() - self._playback_started
        return min(len(self.result_text), max(0, int(elapsed // self._cadence)))

    @property
    def displayed_text(self) -> str:
        if self.status == GenerationStatus.PENDING:
            return self._placeholder
        return self.result_text[: self.revealed_chars()]

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def cancel(self) -> None:
        """Abandon the in-flight request and playback; clear all text."""
        self._epoch += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.debug("in-flight reply request abandoned")
        self._task = None
        self._scope.cancel_all()
        self._playback_started = None
        self.history.clear()
        self.status = GenerationStatus.IDLE
        self.input_text = ""
        self.result_text = ""
        self.is_playing_back = False

    async def join(self) -> None:
        """Wait until the current request (if any) has resolved."""
        task = self._task
        if task is not None and not task.done():
            await asyncio.wait([task])

    def state(self) -> GenerationState:
        return GenerationState(
            status=self.status,
            input_text=self.input_text,
            result_text=self.result_text,
            is_playing_back=self.is_playing_back,
            displayed_text=self.displayed_text,
        )

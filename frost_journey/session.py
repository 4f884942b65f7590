"""Narrative session — wires the engine together and exposes viewer actions.

One NarrativeSession is one viewer's run through the journey, held in
memory. Each viewer action is routed to the component that owns the state
it touches; only the SceneController changes the scene.
"""

from __future__ import annotations

import logging

from frost_journey import script
from frost_journey.audio import AudioPlayer, NullAudio
from frost_journey.clock import AsyncioScheduler, Scheduler
from frost_journey.config import EngineConfig
from frost_journey.disclosure import DisclosureCounter, DismissalSet
from frost_journey.generation import GenerationService
from frost_journey.models import SceneId, SessionSnapshot, SubmitResult
from frost_journey.orchestrator import ReplyOrchestrator
from frost_journey.portrait import PortraitLoader
from frost_journey.progress import LongPressTracker
from frost_journey.reveal import RevealChain
from frost_journey.scenes import ExplicitAdvance, GuardSatisfied, Satellites, SceneController

logger = logging.getLogger(__name__)


class ResetCoordinator:
    """Returns every component to its initial value in one synchronous step.

    Nothing here awaits, so no other callback can observe a half-reset
    session. The held portrait and the audio stay as they are.
    """

    def __init__(self, controller: SceneController, satellites: Satellites) -> None:
        self._controller = controller
        self._s = satellites

    def reset(self) -> None:
        s = self._s
        self._controller.restart()
        s.progress.reset()
        s.artifacts.reset()
        s.phrases.reset()
        s.passage.cancel()
        s.conversation.cancel()
        s.replies.cancel()
        s.portrait.cancel()
        logger.info("session reset")


class NarrativeSession:
    def __init__(
        self,
        service: GenerationService,
        *,
        scheduler: Scheduler | None = None,
        audio: AudioPlayer | None = None,
        config: EngineConfig | None = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.scheduler = scheduler or AsyncioScheduler()
        cfg = self.config
        timeout = cfg.request_timeout_ms

        self.satellites = Satellites(
            progress=LongPressTracker(
                self.scheduler, cfg.progress_duration_ms, cfg.progress_sample_ms,
            ),
            artifacts=DisclosureCounter(cfg.artifact_total, cfg.artifact_initial),
            phrases=DismissalSet(cfg.phrase_total),
            passage=RevealChain(self.scheduler, cfg.passage_chain, "passage"),
            conversation=RevealChain(self.scheduler, cfg.conversation_chain, "conversation"),
            replies=ReplyOrchestrator(
                service, self.scheduler,
                cadence_ms=cfg.typewriter_cadence_ms,
                timeout_ms=timeout,
                temperature=cfg.reply_temperature,
                history_limit=cfg.history_limit,
            ),
            portrait=PortraitLoader(service, timeout_ms=timeout),
            audio=audio or NullAudio(),
        )
        self.controller = SceneController(
            self.satellites, self.scheduler, auto_advance_ms=cfg.auto_advance_ms,
        )
        self.resets = ResetCoordinator(self.controller, self.satellites)
        self.controller.on_reset = self.resets.reset

    @property
    def scene(self) -> SceneId:
        return self.controller.scene

    # ------------------------------------------------------------------
    # Viewer actions
    # ------------------------------------------------------------------

    def advance(self, target: int) -> SceneId:
        return self.controller.transition(ExplicitAdvance(target))

    def confirm(self) -> SceneId:
        """The title card's button: begin the journey."""
        return self.advance(SceneId.VIGIL)

    def press_start(self) -> None:
        if self.scene == SceneId.SURVEY:
            self.satellites.progress.start()

    def press_end(self) -> None:
        if self.scene == SceneId.SURVEY:
            self.satellites.progress.stop()

    def explore(self) -> SceneId:
        """Reveal the next artifact; once all are shown, move on to the question."""
        if self.scene != SceneId.INVENTORY:
            return self.scene
        if not self.satellites.artifacts.advance():
            return self.controller.transition(GuardSatisfied())
        return self.scene

    def dismiss(self, index: int) -> bool:
        """Dismiss a phrase; returns whether all phrases are now gone."""
        if self.scene != SceneId.QUESTION:
            return self.satellites.phrases.complete
        return self.satellites.phrases.dismiss(index)

    def submit(self, text: str) -> SubmitResult:
        if self.scene != SceneId.CONVERSATION or not self.satellites.conversation.is_shown("input_panel"):
            return SubmitResult.CLOSED
        return self.satellites.replies.submit(text)

    def reset(self) -> None:
        self.resets.reset()

    # ------------------------------------------------------------------
    # Observation and teardown
    # ------------------------------------------------------------------

    def snapshot(self) -> SessionSnapshot:
        s = self.satellites
        s.progress.tick()
        return SessionSnapshot(
            scene=self.scene,
            progress=s.progress.state(),
            artifacts=s.artifacts.state(),
            visible_artifacts=list(script.ARTIFACTS[: s.artifacts.shown]),
            phrases=s.phrases.state(),
            phrases_complete=s.phrases.complete,
            passage_lines=s.passage.flags,
            conversation_reveals=s.conversation.flags,
            reply=s.replies.state(),
            has_image=s.portrait.image is not None,
            audio_playing=s.audio.is_playing,
        )

    async def settle(self) -> None:
        """Wait for outstanding outbound requests to resolve."""
        await self.satellites.portrait.join()
        await self.satellites.replies.join()

    def close(self) -> None:
        self.reset()
        self.satellites.audio.stop()
        logger.info("session closed")

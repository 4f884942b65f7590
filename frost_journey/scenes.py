"""Scene controller — the single writer of the current scene.

The state machine is data: TRANSITIONS lists every edge as
(source, target, trigger, guard, effect, resets). The controller looks up
the edge matching an event, evaluates its guard synchronously against the
satellite state, and only then exits the old scene and enters the new one.

Triggers:
    explicit — ExplicitAdvance(target) from a viewer action
    auto     — AutoTimer fired by a scene-owned timer
    guard    — GuardSatisfied raised when a satellite reports exhaustion

Scene-owned timers live in the controller's scope and are cancelled on every
exit, so nothing scheduled for one scene can fire into another.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from frost_journey.audio import AudioPlayer
from frost_journey.clock import Scheduler, Scope
from frost_journey.disclosure import DisclosureCounter, DismissalSet
from frost_journey.models import SceneId
from frost_journey.orchestrator import ReplyOrchestrator
from frost_journey.portrait import PortraitLoader
from frost_journey.progress import LongPressTracker
from frost_journey.reveal import RevealChain

logger = logging.getLogger(__name__)

Trigger = Literal["explicit", "auto", "guard"]


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ExplicitAdvance:
    target: int


@dataclass(frozen=True)
class AutoTimer:
    pass


@dataclass(frozen=True)
class GuardSatisfied:
    pass


Event = ExplicitAdvance | AutoTimer | GuardSatisfied


# ---------------------------------------------------------------------------
# Satellite state read by guards and touched by scene hooks
# ---------------------------------------------------------------------------

@dataclass
class Satellites:
    progress: LongPressTracker
    artifacts: DisclosureCounter
    phrases: DismissalSet
    passage: RevealChain
    conversation: RevealChain
    replies: ReplyOrchestrator
    portrait: PortraitLoader
    audio: AudioPlayer


Guard = Callable[[Satellites], bool]
Effect = Callable[[Satellites], None]


def _progress_completed(s: Satellites) -> bool:
    return s.progress.completed


def _artifacts_exhausted(s: Satellites) -> bool:
    return s.artifacts.exhausted


def _phrases_dismissed(s: Satellites) -> bool:
    return s.phrases.complete


def _start_audio(s: Satellites) -> None:
    if not s.audio.is_playing:
        s.audio.play()


@dataclass(frozen=True)
class Edge:
    source: SceneId
    target: SceneId
    trigger: Trigger
    guard: Guard | None = None
    effect: Effect | None = None
    resets: bool = False  # hand the whole session to the reset coordinator


TRANSITIONS: tuple[Edge, ...] = (
    Edge(SceneId.TITLE, SceneId.VIGIL, "explicit", effect=_start_audio),
    Edge(SceneId.VIGIL, SceneId.SURVEY, "explicit"),
    Edge(SceneId.VIGIL, SceneId.TITLE, "explicit"),
    Edge(SceneId.SURVEY, SceneId.INVENTORY, "explicit", guard=_progress_completed),
    Edge(SceneId.SURVEY, SceneId.TITLE, "explicit"),
    Edge(SceneId.INVENTORY, SceneId.QUESTION, "guard", guard=_artifacts_exhausted),
    Edge(SceneId.INVENTORY, SceneId.TITLE, "explicit", resets=True),
    Edge(SceneId.QUESTION, SceneId.TITLE, "explicit", guard=_phrases_dismissed, resets=True),
    Edge(SceneId.QUESTION, SceneId.INTERLUDE, "explicit", guard=_phrases_dismissed),
    Edge(SceneId.INTERLUDE, SceneId.PASSAGE, "auto"),
    Edge(SceneId.PASSAGE, SceneId.CONVERSATION, "explicit"),
)


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

class SceneController:
    def __init__(
        self,
        satellites: Satellites,
        scheduler: Scheduler,
        *,
        auto_advance_ms: float = 5000,
        transitions: tuple[Edge, ...] = TRANSITIONS,
    ) -> None:
        self._s = satellites
        self._clock = scheduler
        self._scope = Scope(scheduler, "scene")
        self._auto_advance_ms = auto_advance_ms
        self._edges = transitions
        self._scene = SceneId.TITLE
        self._entered_at: float | None = None
        self.on_reset: Callable[[], None] | None = None

    @property
    def scene(self) -> SceneId:
        return self._scene

    @property
    def entered_at(self) -> float | None:
        return self._entered_at

    def edges_from(self, scene: SceneId) -> list[Edge]:
        return [e for e in self._edges if e.source == scene]

    def transition(self, event: Event) -> SceneId:
        """Apply event and return the (possibly unchanged) current scene."""
        edge = self._match(event)
        if edge is None:
            return self._scene
        if edge.guard is not None and not edge.guard(self._s):
            logger.debug("guard unmet for %s -> %s", edge.source.name, edge.target.name)
            return self._scene
        if edge.resets:
            if self.on_reset is None:
                raise RuntimeError("edge requires a reset coordinator but none is attached")
            logger.info("%s -> %s via reset", edge.source.name, edge.target.name)
            self.on_reset()
            return self._scene

        self._exit(self._scene)
        if edge.effect is not None:
            edge.effect(self._s)
        logger.info("scene %d -> %d", edge.source, edge.target)
        self._scene = edge.target
        self._enter(edge.target)
        return self._scene

    def restart(self) -> None:
        """Leave the current scene and land on the title. Used by the reset coordinator."""
        self._exit(self._scene)
        self._scene = SceneId.TITLE
        self._entered_at = self._clock.now()

    def _match(self, event: Event) -> Edge | None:
        if isinstance(event, ExplicitAdvance):
            try:
                target = SceneId(event.target)
            except ValueError:
                logger.warning("rejected advance to unknown scene %r", event.target)
                return None
            for edge in self.edges_from(self._scene):
                if edge.trigger == "explicit" and edge.target == target:
                    return edge
            logger.debug("no edge %s -> %s", self._scene.name, target.name)
            return None

        trigger: Trigger = "auto" if isinstance(event, AutoTimer) else "guard"
        for edge in self.edges_from(self._scene):
            if edge.trigger == trigger:
                return edge
        logger.debug("no %s edge from %s", trigger, self._scene.name)
        return None

    # ------------------------------------------------------------------
    # Entry / exit hooks
    # ------------------------------------------------------------------

    def _enter(self, scene: SceneId) -> None:
        self._entered_at = self._clock.now()
        if scene == SceneId.INTERLUDE:
            self._scope.call_later(self._auto_advance_ms, self._auto_advance)
        elif scene == SceneId.PASSAGE:
            self._s.passage.start(self._entered_at)
        elif scene == SceneId.CONVERSATION:
            self._s.portrait.load(self._portrait_settled)

    def _exit(self, scene: SceneId) -> None:
        self._scope.cancel_all()
        if scene == SceneId.SURVEY:
            self._s.progress.stop()
        elif scene == SceneId.PASSAGE:
            self._s.passage.cancel()
        elif scene == SceneId.CONVERSATION:
            self._s.conversation.cancel()
            self._s.replies.cancel()
            self._s.portrait.cancel()

    def _auto_advance(self) -> None:
        self.transition(AutoTimer())

    def _portrait_settled(self, ok: bool) -> None:
        if self._scene != SceneId.CONVERSATION:
            return
        # Without a portrait the chain keeps its place relative to scene entry.
        anchor = self._clock.now() if ok or self._entered_at is None else self._entered_at
        self._s.conversation.start(anchor)

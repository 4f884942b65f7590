import pytest

from frost_journey.audio import NullAudio
from frost_journey.clock import ManualScheduler
from frost_journey.config import EngineConfig
from frost_journey.generation import ScriptedGenerationService
from frost_journey.models import SceneId
from frost_journey.session import NarrativeSession


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def service() -> ScriptedGenerationService:
    return ScriptedGenerationService(replies=["冰原很安静。"])


@pytest.fixture
def audio() -> NullAudio:
    return NullAudio()


@pytest.fixture
def session(scheduler, service, audio) -> NarrativeSession:
    return NarrativeSession(service, scheduler=scheduler, audio=audio, config=EngineConfig())


@pytest.fixture
def drive(scheduler):
    """Walk a session forward through the default flow until it reaches `scene`.

    Reaching the conversation scene spawns the portrait request, so that step
    must run inside an event loop (an async test).
    """

    def _drive(session: NarrativeSession, scene: SceneId) -> NarrativeSession:
        def _survey():
            session.press_start()
            scheduler.advance(session.config.progress_duration_ms)
            session.advance(SceneId.INVENTORY)

        def _inventory():
            while session.scene == SceneId.INVENTORY:
                session.explore()

        def _question():
            for i in range(session.config.phrase_total):
                session.dismiss(i)
            session.advance(SceneId.INTERLUDE)

        steps = {
            SceneId.VIGIL: lambda: session.confirm(),
            SceneId.SURVEY: lambda: session.advance(SceneId.SURVEY),
            SceneId.INVENTORY: _survey,
            SceneId.QUESTION: _inventory,
            SceneId.INTERLUDE: _question,
            SceneId.PASSAGE: lambda: scheduler.advance(session.config.auto_advance_ms),
            SceneId.CONVERSATION: lambda: session.advance(SceneId.CONVERSATION),
        }

        for target in SceneId:
            if target > scene:
                break
            if target == SceneId.TITLE or session.scene >= target:
                continue
            steps[target]()
            assert session.scene == target, f"stuck at {session.scene!r} on the way to {target!r}"
        return session

    return _drive

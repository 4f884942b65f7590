"""Core domain models.

Scene identifiers, generation status values and the read-only snapshots the
engine hands to renderers. Pydantic is used at every boundary where state
leaves the engine; the live state itself is held by the owning components.
"""

from __future__ import annotations

from enum import Enum, IntEnum

from pydantic import BaseModel, Field


class SceneId(IntEnum):
    """The eight scenes of the journey, in narrative order."""

    TITLE = 1
    VIGIL = 2
    SURVEY = 3
    INVENTORY = 4
    QUESTION = 5
    INTERLUDE = 6
    PASSAGE = 7
    CONVERSATION = 8


class GenerationStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


class SubmitResult(str, Enum):
    """Outcome of a reply submission attempt."""

    ACCEPTED = "accepted"
    EMPTY = "empty"  # blank after trimming
    BUSY = "busy"  # request pending or playback running
    CLOSED = "closed"  # current scene does not take replies


class ProgressState(BaseModel):
    """Sustained-press progress. completed implies value == 100 and not holding."""

    holding: bool = False
    value: float = 0.0
    completed: bool = False


class CounterState(BaseModel):
    shown: int
    total: int

    @property
    def exhausted(self) -> bool:
        return self.shown >= self.total


class DismissalState(BaseModel):
    dismissed: list[int] = Field(default_factory=list)
    total: int

    @property
    def complete(self) -> bool:
        return len(self.dismissed) == self.total


class GenerationState(BaseModel):
    status: GenerationStatus = GenerationStatus.IDLE
    input_text: str = ""
    result_text: str = ""
    is_playing_back: bool = False
    displayed_text: str = ""  # what the reply area shows right now


class SessionSnapshot(BaseModel):
    """Everything a renderer needs, captured in one synchronous step."""

    scene: SceneId
    progress: ProgressState
    artifacts: CounterState
    visible_artifacts: list[str]
    phrases: DismissalState
    phrases_complete: bool
    passage_lines: dict[str, bool]
    conversation_reveals: dict[str, bool]
    reply: GenerationState
    has_image: bool = False
    audio_playing: bool = False


class ScriptContent(BaseModel):
    """The text a renderer draws; reveal flags in a snapshot key into the line maps."""

    title: str
    author: str
    character: str
    scenes: dict[SceneId, list[str]]
    buttons: dict[str, str]
    artifacts: list[str]
    phrases: list[str]
    passage_lines: dict[str, str]
    conversation_lines: dict[str, str]
    working_placeholder: str

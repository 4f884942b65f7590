"""Frost Journey — scene, timer and reply engine for an interactive narrative."""

from frost_journey.models import GenerationStatus, SceneId, SessionSnapshot, SubmitResult
from frost_journey.session import NarrativeSession

__all__ = [
    "GenerationStatus",
    "NarrativeSession",
    "SceneId",
    "SessionSnapshot",
    "SubmitResult",
]

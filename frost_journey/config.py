"""Engine configuration: timings, sizes and generation service settings.

Defaults reproduce the reference experience. load_config() overlays values
from .env and the process environment.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from frost_journey import script
from frost_journey.generation import DEFAULT_BASE_URL, DEFAULT_IMAGE_MODEL, DEFAULT_TEXT_MODEL


def _chain(lines: tuple[tuple[str, str], ...], delays: list[float]) -> list[tuple[str, float]]:
    return [(flag, delay) for (flag, _), delay in zip(lines, delays, strict=True)]


class EngineConfig(BaseModel):
    progress_duration_ms: float = Field(5000, gt=0)
    progress_sample_ms: float = Field(16, gt=0)
    typewriter_cadence_ms: float = Field(50, gt=0)
    auto_advance_ms: float = Field(5000, ge=0)
    request_timeout_ms: float | None = Field(30000, gt=0)  # None disables the bound

    artifact_total: int = len(script.ARTIFACTS)
    artifact_initial: int = script.ARTIFACTS_INITIAL
    phrase_total: int = len(script.PHRASES)

    passage_chain: list[tuple[str, float]] = Field(
        default_factory=lambda: _chain(script.PASSAGE_LINES, [0, 3000, 6000, 9000])
    )
    conversation_chain: list[tuple[str, float]] = Field(
        default_factory=lambda: _chain(script.CONVERSATION_LINES, [2000, 5000, 6500])
    )

    reply_temperature: float = script.REPLY_TEMPERATURE
    history_limit: int = 8

    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    text_model: str = DEFAULT_TEXT_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    scripted: bool = False


def load_config(env_file: str | Path | None = None) -> EngineConfig:
    """Read .env (silently skipped if missing) and build an EngineConfig."""
    if env_file is None:
        env_file = Path(__file__).resolve().parent.parent / ".env"
    load_dotenv(env_file)

    fields: dict = {
        "api_key": os.getenv("GENAI_API_KEY", ""),
        "base_url": os.getenv("GENAI_BASE_URL", DEFAULT_BASE_URL),
        "text_model": os.getenv("GENAI_TEXT_MODEL", DEFAULT_TEXT_MODEL),
        "image_model": os.getenv("GENAI_IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
        "scripted": os.getenv("FROST_SCRIPTED", "") not in ("", "0", "false"),
    }
    timeout = os.getenv("FROST_REQUEST_TIMEOUT_MS")
    if timeout:
        fields["request_timeout_ms"] = None if timeout == "0" else timeout
    return EngineConfig(**fields)

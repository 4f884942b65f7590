"""Generation service client — text replies and portrait images.

The engine talks to the service through a protocol with two coroutines:

    async def generate_reply(self, prompt: str, instructions: str, temperature: float) -> str: ...
    async def generate_image(self, prompt: str) -> str: ...   # base64 image bytes

Two implementations are provided:

    HttpGenerationService     — real HTTP client for a Gemini-style REST API.
    ScriptedGenerationService — canned replies and image, no network. Useful
                                for running the experience without credentials.

Both raise GenerationError for every failure; callers decide how to absorb it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"
DEFAULT_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "imagen-4.0-generate-001"

# 1x1 transparent PNG, the scripted stand-in portrait
PIXEL_PNG = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


# ---------------------------------------------------------------------------
# Protocol — every service implementation must match these signatures
# ---------------------------------------------------------------------------

class GenerationService(Protocol):
    async def generate_reply(self, prompt: str, instructions: str, temperature: float) -> str: ...

    async def generate_image(self, prompt: str) -> str: ...


# ---------------------------------------------------------------------------
# HttpGenerationService — connects to the real backend
# ---------------------------------------------------------------------------

class HttpGenerationService:
    """Async HTTP client for a Gemini-style generation API.

    Endpoints:
      reply  — POST /v1beta/models/{text_model}:generateContent
               Response: {"candidates": [{"content": {"parts": [{"text": "..."}]}}]}
      image  — POST /v1beta/models/{image_model}:predict
               Response: {"predictions": [{"bytesBase64Encoded": "..."}]}

    Args:
        api_key:     Sent as the x-goog-api-key header, or empty if not required.
        base_url:    Base URL of the service.
        text_model:  Model used for replies.
        image_model: Model used for the portrait.
        timeout:     HTTP timeout in seconds. Defaults to 60.
    """

    def __init__(
        self,
        api_key: str = "",
        base_url: str = DEFAULT_BASE_URL,
        text_model: str = DEFAULT_TEXT_MODEL,
        image_model: str = DEFAULT_IMAGE_MODEL,
        timeout: float = 60.0,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._text_model = text_model
        self._image_model = image_model
        self._timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._api_key:
            headers["x-goog-api-key"] = self._api_key
        return headers

    async def _post(self, url: str, body: dict) -> dict:
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(url, json=body, headers=self._headers())
                resp.raise_for_status()
        except httpx.ConnectError as e:
            raise GenerationError(f"Cannot connect to generation service at {self._base_url}") from e
        except httpx.HTTPStatusError as e:
            raise GenerationError(
                f"Generation service returned HTTP {e.response.status_code}"
            ) from e
        except httpx.TimeoutException as e:
            raise GenerationError(f"Generation service timed out after {self._timeout}s") from e
        except httpx.HTTPError as e:
            raise GenerationError(f"Generation service request failed: {type(e).__name__}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise GenerationError("Generation service returned a non-JSON body") from e
        if not isinstance(data, dict):
            raise GenerationError("Unexpected response format from generation service")
        return data

    async def generate_reply(self, prompt: str, instructions: str, temperature: float) -> str:
        url = f"{self._base_url}/v1beta/models/{self._text_model}:generateContent"
        body = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "systemInstruction": {"parts": [{"text": instructions}]},
            "generationConfig": {"temperature": temperature},
        }
        logger.debug("reply call model=%s prompt_len=%d", self._text_model, len(prompt))
        text = _parse_reply(await self._post(url, body))
        logger.debug("reply response len=%d", len(text))
        return text

    async def generate_image(self, prompt: str) -> str:
        url = f"{self._base_url}/v1beta/models/{self._image_model}:predict"
        body = {
            "instances": [{"prompt": prompt}],
            "parameters": {"sampleCount": 1},
        }
        logger.debug("image call model=%s prompt_len=%d", self._image_model, len(prompt))
        image = _parse_image(await self._post(url, body))
        logger.debug("image response bytes_b64=%d", len(image))
        return image


def _parse_reply(data: dict) -> str:
    """Join the text parts of the first candidate. No text parts yields ""."""
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        raise GenerationError("Unexpected response format: no candidates")
    candidate = candidates[0]
    if not isinstance(candidate, dict):
        raise GenerationError("Unexpected response format: candidate is not an object")
    content = candidate.get("content") or {}
    if not isinstance(content, dict):
        raise GenerationError("Unexpected response format: content is not an object")
    parts = content.get("parts") or []
    if not isinstance(parts, list):
        raise GenerationError("Unexpected response format: parts is not a list")
    return "".join(p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str))


def _parse_image(data: dict) -> str:
    predictions = data.get("predictions")
    if not isinstance(predictions, list) or not predictions:
        raise GenerationError("Unexpected response format: no predictions")
    prediction = predictions[0]
    if not isinstance(prediction, dict):
        raise GenerationError("Unexpected response format: prediction is not an object")
    image = prediction.get("bytesBase64Encoded")
    if not isinstance(image, str) or not image:
        raise GenerationError("Unexpected response format: prediction carries no image")
    return image


# ---------------------------------------------------------------------------
# ScriptedGenerationService — canned output, no network calls
# ---------------------------------------------------------------------------

class ScriptedGenerationService:
    """Returns canned replies in order (cycling) and a fixed image.

    Every prompt is recorded in `reply_prompts` / `image_prompts` so the
    wiring can be inspected. An image of None makes generate_image fail,
    exercising the no-portrait path.
    """

    def __init__(self, replies: Iterable[str] = ("……",), image: str | None = PIXEL_PNG) -> None:
        self._replies = list(replies) or [""]
        self._image = image
        self._next = 0
        self.reply_prompts: list[str] = []
        self.image_prompts: list[str] = []

    async def generate_reply(self, prompt: str, instructions: str, temperature: float) -> str:
        self.reply_prompts.append(prompt)
        text = self._replies[self._next % len(self._replies)]
        self._next += 1
        logger.debug("ScriptedGenerationService reply #%d prompt_len=%d", self._next, len(prompt))
        return text

    async def generate_image(self, prompt: str) -> str:
        self.image_prompts.append(prompt)
        if self._image is None:
            raise GenerationError("Scripted service has no image")
        return self._image


# ---------------------------------------------------------------------------
# GenerationError — raised for all connection and protocol failures
# ---------------------------------------------------------------------------

class GenerationError(RuntimeError):
    """Raised when the generation service cannot be reached or returns an error."""

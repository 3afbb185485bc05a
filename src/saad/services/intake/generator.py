"""Generation collaborator interface and the Gemini REST implementation."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import httpx

from saad.config import settings

logger = logging.getLogger(__name__)


class GenerationError(Exception):
    """The collaborator could not produce a response."""


class Generator(ABC):
    """Turns a prompt plus a response schema into JSON text."""

    @abstractmethod
    async def generate(self, prompt: str, schema: dict) -> str:
        """Return the raw JSON text produced for ``prompt``.

        Raises:
            GenerationError: on any failure, including an empty response.
        """
        ...


def to_gemini_schema(schema: dict) -> dict:
    """Convert a JSON schema into Gemini's OpenAPI-style ``responseSchema``.

    Gemini expects upper-case type names; descriptions, enums and required
    lists carry over unchanged.
    """
    converted: dict = {}
    for key, value in schema.items():
        if key == "type":
            converted["type"] = value.upper()
        elif key == "properties":
            converted["properties"] = {name: to_gemini_schema(sub) for name, sub in value.items()}
        elif key == "items":
            converted["items"] = to_gemini_schema(value)
        else:
            converted[key] = value
    return converted


class GeminiGenerator(Generator):
    """Calls ``models/{model}:generateContent`` with a JSON response schema.

    Pass ``client`` to reuse a connection pool (or a mock transport in tests);
    otherwise a client is opened per call.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = settings.gemini_api_key if api_key is None else api_key
        self.model = model or settings.gemini_model
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.timeout = timeout or settings.generation_timeout_seconds
        self._client = client

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def build_payload(self, prompt: str, schema: dict) -> dict:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": to_gemini_schema(schema),
            },
        }

    async def generate(self, prompt: str, schema: dict) -> str:
        if not self.api_key:
            raise GenerationError("Gemini API key is missing")

        payload = self.build_payload(prompt, schema)
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}

        try:
            if self._client is not None:
                response = await self._client.post(self.url, json=payload, headers=headers, timeout=self.timeout)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        except httpx.HTTPError as exc:
            raise GenerationError(f"Gemini request failed: {exc}") from exc

        if response.status_code != 200:
            logger.warning(
                "Gemini returned %s: %s", response.status_code, response.text[:500]
            )
            raise GenerationError(f"Gemini returned HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise GenerationError("Gemini response body is not JSON") from exc

        if not isinstance(body, dict):
            raise GenerationError("Gemini response body is not an object")

        text = self._extract_text(body)
        if not text:
            raise GenerationError("Gemini returned no content")
        return text

    @staticmethod
    def _extract_text(body: dict) -> str:
        candidates = body.get("candidates") or []
        if not candidates:
            return ""
        first = candidates[0] if isinstance(candidates[0], dict) else {}
        parts = (first.get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))

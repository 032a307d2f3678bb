"""Gemini generateContent client using httpx.

Returns the provider's JSON envelope untouched; locating the generated text
is left to ``utils.llm_parse.extract_text`` and rate-limit handling to
``utils.retry.with_retries``.
"""

import logging
from typing import Any

import httpx

from interview_coach.config import Settings

logger = logging.getLogger(__name__)


class GeminiClient:
    """Async client for the Gemini ``models/{model}:generateContent`` endpoint."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = settings.gemini_base_url.rstrip("/")
        self._api_key = settings.gemini_api_key
        self._model = settings.gemini_model
        self._temperature = settings.llm_temperature
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                connect=10.0,
                read=settings.llm_timeout,
                write=10.0,
                pool=10.0,
            ),
            transport=transport,
        )
        if not self._api_key:
            logger.warning("GEMINI_API_KEY not set; evaluation requests will fail")

    @property
    def model(self) -> str:
        return self._model

    def _model_url(self, suffix: str = "") -> str:
        return f"{self._base_url}/v1beta/models/{self._model}{suffix}"

    @property
    def _headers(self) -> dict[str, str]:
        return {"x-goog-api-key": self._api_key}

    async def generate_content(self, prompt: str) -> dict[str, Any]:
        """Send a single prompt and return the raw response body.

        Raises:
            httpx.HTTPStatusError: non-2xx answer (429 when rate limited).
            httpx.TransportError: network failure.
        """
        payload: dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        if self._temperature is not None:
            payload["generationConfig"] = {"temperature": self._temperature}

        response = await self._client.post(
            self._model_url(":generateContent"),
            json=payload,
            headers=self._headers,
        )
        response.raise_for_status()
        logger.debug("Gemini response (first 200 chars): %s", response.text[:200])
        return response.json()

    async def is_reachable(self) -> bool:
        """Check that the configured model is visible with the configured key."""
        try:
            response = await self._client.get(
                self._model_url(),
                headers=self._headers,
                timeout=httpx.Timeout(5.0),
            )
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    async def close(self) -> None:
        await self._client.aclose()

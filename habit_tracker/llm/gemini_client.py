from __future__ import annotations
from typing import Any, Awaitable, Callable, Dict, Optional
import asyncio

import httpx
from loguru import logger

from ..config import settings

MAX_ATTEMPTS = 3


def _is_retryable(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


def extract_text(data: Any) -> Optional[str]:
    """Pull candidates[0].content.parts[0].text out of a generateContent reply."""
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(text, str) or not text.strip():
        return None
    return text


class GeminiClient:
    """
    Thin HTTP client for the Gemini generateContent endpoint with retry/backoff.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        max_attempts: int = MAX_ATTEMPTS,
    ):
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.url = url or settings.gemini_generate_url
        self._client = http_client or httpx.AsyncClient(timeout=settings.GEMINI_TIMEOUT_SECONDS)
        self._sleep = sleep
        self.max_attempts = max_attempts

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def send(self, payload: Dict[str, Any]) -> httpx.Response:
        """
        POST the payload. 429/5xx and transport errors are retried with 1s, 2s, 4s...
        backoff. After the last attempt a failing response is returned as-is, while a
        transport error is re-raised. Other statuses return immediately.
        """
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}
        response: Optional[httpx.Response] = None

        for attempt in range(self.max_attempts):
            last_attempt = attempt == self.max_attempts - 1
            try:
                response = await self._client.post(self.url, json=payload, headers=headers)
            except httpx.TransportError as e:
                if last_attempt:
                    raise
                delay = 2 ** attempt
                logger.warning("Gemini request failed ({}); retrying in {}s", e, delay)
                await self._sleep(delay)
                continue

            if response.is_success or not _is_retryable(response.status_code):
                return response

            if last_attempt:
                break
            delay = 2 ** attempt
            logger.warning("Gemini returned {}; retrying in {}s", response.status_code, delay)
            await self._sleep(delay)

        logger.error("Gemini request still failing after {} attempts", self.max_attempts)
        return response

    async def generate_text(self, prompt: str) -> Optional[str]:
        """Generated text for a prompt, or None on any failure."""
        if not self.enabled:
            logger.warning("GEMINI_API_KEY is not set; AI text generation disabled")
            return None

        payload = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            response = await self.send(payload)
        except httpx.HTTPError as e:
            logger.error("Gemini request failed: {}", e)
            return None

        if not response.is_success:
            logger.error("Gemini returned status {}", response.status_code)
            return None

        try:
            data = response.json()
        except ValueError:
            logger.error("Gemini returned a non-JSON body")
            return None

        text = extract_text(data)
        if text is None:
            logger.warning("Gemini reply had no text candidate")
        return text

    async def aclose(self):
        await self._client.aclose()
